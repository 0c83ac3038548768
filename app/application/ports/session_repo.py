from typing import Optional
from dataclasses import dataclass
from datetime import datetime


@dataclass
class SessionDto:
    id: str
    user_id: str
    token_id: str
    expires_at: datetime
    created_at: datetime
    revoked_at: Optional[datetime] = None


class SessionRepository:
    def create(self, user_id: str, token_id: str, expires_at: datetime) -> SessionDto:
        ...

    def get_by_token_id(self, token_id: str) -> Optional[SessionDto]:
        ...

    def revoke(self, token_id: str) -> bool:
        ...
