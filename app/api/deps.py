import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from ..application.ports.audit_logger import AuditLogger
from ..application.ports.rate_limiter import RateLimiter
from ..application.ports.sms_channel import SmsChannel
from ..application.ports.user_repo import UserRecord
from ..application.services.auth_gateway import AuthGateway
from ..application.services.code_generator import CodeGenerator
from ..application.services.code_hasher import CodeHasher
from ..application.services.otp_lifecycle import OtpLifecycle
from ..core.config import settings
from ..database import get_session
from ..infrastructure.audit.std_logger import StdAuditLogger
from ..infrastructure.locks import KeyedLock
from ..infrastructure.persistence.sqlalchemy.repositories.otp_store_sql import SqlOtpStore
from ..infrastructure.persistence.sqlalchemy.repositories.session_repository_sql import SqlSessionRepository
from ..infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserDirectory
from ..infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter
from ..infrastructure.sms import build_sms_channel
from ..infrastructure.tokens.jwt_token_issuer import JwtTokenIssuer

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Process-wide collaborators; the per-user locks must be shared by every request
@lru_cache()
def get_user_locks() -> KeyedLock:
    return KeyedLock()

@lru_cache()
def get_code_hasher() -> CodeHasher:
    return CodeHasher(rounds=settings.OTP_HASH_ROUNDS)

@lru_cache()
def get_sms_channel() -> SmsChannel:
    return build_sms_channel(settings)

@lru_cache()
def get_audit_logger() -> AuditLogger:
    return StdAuditLogger()

@lru_cache()
def get_rate_limiter() -> RateLimiter:
    if settings.REDIS_URL:
        from ..infrastructure.rate_limit.redis_rate_limiter import RedisRateLimiter
        logger.info("Using Redis rate limiter")
        return RedisRateLimiter(settings.REDIS_URL)
    logger.info("Using memory-based rate limiting")
    return InMemoryRateLimiter()

def get_auth_gateway(
    session: Session = Depends(get_session),
    locks: KeyedLock = Depends(get_user_locks),
    hasher: CodeHasher = Depends(get_code_hasher),
    sms: SmsChannel = Depends(get_sms_channel),
    audit: AuditLogger = Depends(get_audit_logger),
) -> AuthGateway:
    lifecycle = OtpLifecycle(
        store=SqlOtpStore(session),
        generator=CodeGenerator(length=settings.OTP_LENGTH),
        hasher=hasher,
        locks=locks,
    )
    return AuthGateway(
        lifecycle=lifecycle,
        users=SqlUserDirectory(session),
        tokens=JwtTokenIssuer(SqlSessionRepository(session)),
        sms=sms,
        audit=audit,
    )

def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials

def get_current_user(
    token: str = Depends(get_bearer_token),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> UserRecord:
    user = gateway.current_user(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
