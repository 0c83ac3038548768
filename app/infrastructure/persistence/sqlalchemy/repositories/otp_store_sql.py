import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional
from sqlmodel import Session, col, select
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from .....core.clock import Clock, utcnow
from .....db.models import OtpCode
from .....exceptions import StorageError
from .....application.ports.otp_store import OtpRecord, OtpStore

logger = logging.getLogger(__name__)


class SqlOtpStore(OtpStore):
    def __init__(self, session: Session, clock: Clock = utcnow):
        self.session = session
        self.clock = clock
        self._depth = 0

    def _to_record(self, row: OtpCode) -> OtpRecord:
        return OtpRecord(
            id=row.id,
            user_id=row.user_id,
            code_hash=row.code_hash,
            kind=row.kind,
            created_at=row.created_at,
            expires_at=row.expires_at,
            used_at=row.used_at,
        )

    @contextmanager
    def atomic(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                self.session.rollback()
            raise
        self._depth -= 1
        if self._depth == 0:
            self._commit()

    def _commit(self) -> None:
        if self._depth:
            # deferred to the end of the enclosing atomic() block
            self.session.flush()
            return
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"otp store commit failed: {e}") from e

    def _fail(self, action: str, exc: SQLAlchemyError) -> StorageError:
        logger.error(f"OTP store {action} failed: {exc}")
        self.session.rollback()
        return StorageError(f"otp store {action} failed: {exc}")

    def _active_rows(self, user_id: str):
        return select(OtpCode).where(
            OtpCode.user_id == user_id,
            col(OtpCode.used_at).is_(None),
            OtpCode.expires_at > self.clock(),
        )

    def create(self, user_id: str, code_hash: str, expires_at: datetime, kind: str) -> OtpRecord:
        row = OtpCode(
            user_id=user_id,
            code_hash=code_hash,
            kind=kind,
            expires_at=expires_at,
            created_at=self.clock(),
        )
        try:
            self.session.add(row)
            self._commit()
            self.session.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail("create", e) from e
        return self._to_record(row)

    def find_active(self, user_id: str) -> Optional[OtpRecord]:
        stmt = self._active_rows(user_id).order_by(
            col(OtpCode.created_at).desc(), col(OtpCode.id).desc()
        )
        try:
            row = self.session.exec(stmt).first()
        except SQLAlchemyError as e:
            raise self._fail("find_active", e) from e
        return self._to_record(row) if row else None

    def invalidate_active(self, user_id: str) -> int:
        # Expired-but-unused rows are retired as well so nothing stale stays open
        stmt = select(OtpCode).where(
            OtpCode.user_id == user_id,
            col(OtpCode.used_at).is_(None),
        )
        now = self.clock()
        try:
            rows = self.session.exec(stmt).all()
            for row in rows:
                row.used_at = now
                self.session.add(row)
            self._commit()
        except SQLAlchemyError as e:
            raise self._fail("invalidate_active", e) from e
        return len(rows)

    def mark_used(self, otp_id: int) -> bool:
        # Conditional on used_at still being null so concurrent verifiers in
        # other sessions or processes cannot both consume one code
        stmt = (
            update(OtpCode)
            .where(OtpCode.id == otp_id, col(OtpCode.used_at).is_(None))
            .values(used_at=self.clock())
        )
        try:
            result = self.session.exec(stmt)
            self._commit()
        except SQLAlchemyError as e:
            raise self._fail("mark_used", e) from e
        return result.rowcount == 1
