import copy
import itertools
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, Optional

from ....core.clock import Clock, utcnow
from ....application.ports.otp_store import OtpRecord, OtpStore


class InMemoryOtpStore(OtpStore):
    """Process-local store for tests and single-process development."""

    def __init__(self, clock: Clock = utcnow) -> None:
        self.clock = clock
        self._rows: Dict[int, OtpRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()
        self._snapshot: Optional[Dict[int, OtpRecord]] = None
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            if self._depth == 0:
                self._snapshot = copy.deepcopy(self._rows)
            self._depth += 1
            try:
                yield
            except BaseException:
                self._depth -= 1
                if self._depth == 0:
                    self._rows = self._snapshot
                    self._snapshot = None
                raise
            self._depth -= 1
            if self._depth == 0:
                self._snapshot = None

    def create(self, user_id: str, code_hash: str, expires_at: datetime, kind: str) -> OtpRecord:
        with self._lock:
            record = OtpRecord(
                id=next(self._ids),
                user_id=user_id,
                code_hash=code_hash,
                kind=kind,
                created_at=self.clock(),
                expires_at=expires_at,
            )
            self._rows[record.id] = record
            return copy.copy(record)

    def find_active(self, user_id: str) -> Optional[OtpRecord]:
        now = self.clock()
        with self._lock:
            active = [r for r in self._rows.values() if r.user_id == user_id and r.is_valid(now)]
            if not active:
                return None
            return copy.copy(max(active, key=lambda r: (r.created_at, r.id)))

    def invalidate_active(self, user_id: str) -> int:
        now = self.clock()
        with self._lock:
            count = 0
            for record in self._rows.values():
                if record.user_id == user_id and record.used_at is None:
                    record.used_at = now
                    count += 1
            return count

    def mark_used(self, otp_id: int) -> bool:
        with self._lock:
            record = self._rows.get(otp_id)
            if record is None or record.used_at is not None:
                return False
            record.used_at = self.clock()
            return True

    def get(self, otp_id: int) -> Optional[OtpRecord]:
        with self._lock:
            record = self._rows.get(otp_id)
            return copy.copy(record) if record else None

    def all_for_user(self, user_id: str):
        with self._lock:
            return [copy.copy(r) for r in self._rows.values() if r.user_id == user_id]
