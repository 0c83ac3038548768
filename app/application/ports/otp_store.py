from typing import ContextManager, Optional, Protocol
from dataclasses import dataclass
from datetime import datetime


@dataclass
class OtpRecord:
    id: int
    user_id: str
    code_hash: str
    kind: str
    created_at: datetime
    expires_at: datetime
    used_at: Optional[datetime] = None

    def is_valid(self, now: datetime) -> bool:
        return self.used_at is None and now < self.expires_at


class OtpStore(Protocol):
    """Persistent record of issued codes.

    Every method raises StorageError when the backing store is unavailable.
    Calls made inside ``atomic()`` are committed together or not at all.
    """

    def create(self, user_id: str, code_hash: str, expires_at: datetime, kind: str) -> OtpRecord:
        ...

    def find_active(self, user_id: str) -> Optional[OtpRecord]:
        ...

    def invalidate_active(self, user_id: str) -> int:
        ...

    def mark_used(self, otp_id: int) -> bool:
        """Consume the record if it is still unused; False when it already was."""
        ...

    def atomic(self) -> ContextManager[None]:
        ...
