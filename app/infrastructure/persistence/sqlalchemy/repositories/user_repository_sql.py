from typing import Optional
from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from .....db.models import User
from .....exceptions import StorageError
from .....application.ports.user_repo import UserDirectory, UserRecord

class SqlUserDirectory(UserDirectory):
    def __init__(self, session: Session):
        self.session = session

    def _to_record(self, user: User) -> UserRecord:
        return UserRecord(
            id=user.id,
            phone_number=user.phone_number,
            name=user.name,
            status=user.status,
            created_at=user.created_at,
        )

    def get_by_phone(self, phone_number: str) -> Optional[UserRecord]:
        try:
            user = self.session.exec(select(User).where(User.phone_number == phone_number)).first()
        except SQLAlchemyError as e:
            raise StorageError(f"user lookup failed: {e}") from e
        return self._to_record(user) if user else None

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        try:
            user = self.session.get(User, user_id)
        except SQLAlchemyError as e:
            raise StorageError(f"user lookup failed: {e}") from e
        return self._to_record(user) if user else None
