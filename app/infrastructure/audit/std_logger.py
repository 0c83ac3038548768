import hashlib
import json
import logging
from typing import Optional, Dict, Any

from ...core.clock import utcnow
from ...application.ports.audit_logger import AuditLogger


def hash_phone_number(phone: str) -> str:
    """One-way hash so audit lines never carry the raw number."""
    return hashlib.sha256(phone.encode()).hexdigest()


class StdAuditLogger(AuditLogger):
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("app.audit")

    def log(self, action: str, phone: str, user_id: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        entry = {
            "timestamp": utcnow().isoformat(),
            "action": action,
            "phone_hash": hash_phone_number(phone),
            "user_id": user_id,
            "success": success,
            "details": details or {},
        }
        self._logger.info(f"AUDIT: {json.dumps(entry)}")
