import logging
import uuid
from datetime import timedelta, timezone
from typing import Optional

import jwt

from ...core.clock import Clock, utcnow
from ...core.config import settings
from ...application.ports.session_repo import SessionRepository
from ...application.ports.token_issuer import IssuedToken, TokenIssuer
from ...application.ports.user_repo import UserRecord

logger = logging.getLogger(__name__)


class JwtTokenIssuer(TokenIssuer):
    """Signed access tokens; each jti is backed by a session row so it can be revoked."""

    def __init__(
        self,
        sessions: SessionRepository,
        secret_key: str = settings.SECRET_KEY,
        algorithm: str = settings.ALGORITHM,
        expires_minutes: int = settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        clock: Clock = utcnow,
    ):
        self.sessions = sessions
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes
        self.clock = clock

    def issue(self, user: UserRecord) -> IssuedToken:
        issued_at = self.clock()
        expires_at = issued_at + timedelta(minutes=self.expires_minutes)
        token_id = uuid.uuid4().hex
        payload = {
            "sub": user.id,
            "jti": token_id,
            "type": "access",
            "iat": issued_at.replace(tzinfo=timezone.utc),
            "exp": expires_at.replace(tzinfo=timezone.utc),
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        self.sessions.create(user_id=user.id, token_id=token_id, expires_at=expires_at)
        return IssuedToken(token=token, token_type="bearer", expires_at=expires_at)

    def _decode(self, token: str) -> Optional[dict]:
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "jti", "exp"]},
            )
        except jwt.PyJWTError as e:
            logger.info(f"Rejected access token: {e}")
            return None

    def authenticate(self, token: str) -> Optional[str]:
        payload = self._decode(token)
        if not payload:
            return None
        session = self.sessions.get_by_token_id(payload["jti"])
        if session is None or session.revoked_at is not None:
            return None
        if session.user_id != payload["sub"]:
            return None
        return session.user_id

    def token_owner(self, token: str) -> Optional[str]:
        payload = self._decode(token)
        return payload["sub"] if payload else None

    def revoke(self, token: str) -> bool:
        payload = self._decode(token)
        if not payload:
            return False
        return self.sessions.revoke(payload["jti"])
