from datetime import datetime
from typing import Optional
from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from .....core.clock import Clock, utcnow
from .....db.models import UserSession
from .....exceptions import StorageError
from .....application.ports.session_repo import SessionRepository, SessionDto


class SqlSessionRepository(SessionRepository):
    def __init__(self, session: Session, clock: Clock = utcnow):
        self.session = session
        self.clock = clock

    def _to_dto(self, rec: UserSession) -> SessionDto:
        return SessionDto(
            id=rec.id,
            user_id=rec.user_id,
            token_id=rec.token_id,
            expires_at=rec.expires_at,
            created_at=rec.created_at,
            revoked_at=rec.revoked_at,
        )

    def create(self, user_id: str, token_id: str, expires_at: datetime) -> SessionDto:
        rec = UserSession(user_id=user_id, token_id=token_id, expires_at=expires_at, created_at=self.clock())
        try:
            self.session.add(rec)
            self.session.commit()
            self.session.refresh(rec)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"session create failed: {e}") from e
        return self._to_dto(rec)

    def get_by_token_id(self, token_id: str) -> Optional[SessionDto]:
        try:
            rec = self.session.exec(select(UserSession).where(UserSession.token_id == token_id)).first()
        except SQLAlchemyError as e:
            raise StorageError(f"session lookup failed: {e}") from e
        return self._to_dto(rec) if rec else None

    def revoke(self, token_id: str) -> bool:
        try:
            rec = self.session.exec(select(UserSession).where(UserSession.token_id == token_id)).first()
            if not rec or rec.revoked_at is not None:
                return False
            rec.revoked_at = self.clock()
            self.session.add(rec)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"session revoke failed: {e}") from e
        return True
