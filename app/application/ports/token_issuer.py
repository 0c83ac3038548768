from typing import Optional, Protocol
from dataclasses import dataclass
from datetime import datetime

from .user_repo import UserRecord


@dataclass
class IssuedToken:
    token: str
    token_type: str
    expires_at: datetime


class TokenIssuer(Protocol):
    def issue(self, user: UserRecord) -> IssuedToken:
        ...

    def authenticate(self, token: str) -> Optional[str]:
        """Return the user id the token was issued to, or None."""
        ...

    def token_owner(self, token: str) -> Optional[str]:
        """User id of a token this service signed and that has not expired, revoked or not."""
        ...

    def revoke(self, token: str) -> bool:
        """Revoke exactly this token. False when it was unknown or already revoked."""
        ...
