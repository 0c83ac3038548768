import enum
import logging
from dataclasses import dataclass
from typing import Optional

from ...core.config import settings
from ...exceptions import DeliveryFailure
from ..ports.audit_logger import AuditLogger
from ..ports.sms_channel import SmsChannel
from ..ports.token_issuer import IssuedToken, TokenIssuer
from ..ports.user_repo import UserDirectory, UserRecord
from .otp_lifecycle import OtpLifecycle

logger = logging.getLogger(__name__)

OTP_MESSAGE_TEMPLATE = "Your login code is {code}. It expires in {ttl} minutes."


class RequestOtpStatus(str, enum.Enum):
    ACCEPTED = "accepted"
    USER_NOT_FOUND = "user_not_found"
    USER_SUSPENDED = "user_suspended"


class VerifyOtpStatus(str, enum.Enum):
    TOKEN_ISSUED = "token_issued"
    INVALID_CREDENTIALS = "invalid_credentials"


class FailureReason(str, enum.Enum):
    USER_NOT_FOUND = "user_not_found"
    USER_SUSPENDED = "user_suspended"
    NO_ACTIVE_CODE = "no_active_code"
    MISMATCH = "mismatch"


@dataclass
class RequestOtpResult:
    status: RequestOtpStatus
    sms_sent: bool = False


@dataclass
class VerifyOtpResult:
    status: VerifyOtpStatus
    token: Optional[IssuedToken] = None
    user: Optional[UserRecord] = None
    # Internal only; callers must not echo it back to clients
    reason: Optional[FailureReason] = None

    @property
    def success(self) -> bool:
        return self.status == VerifyOtpStatus.TOKEN_ISSUED


@dataclass
class LogoutResult:
    authenticated: bool
    revoked: bool = False


@dataclass
class AuthGateway:
    """Request/verify/logout protocol over the OTP lifecycle."""

    lifecycle: OtpLifecycle
    users: UserDirectory
    tokens: TokenIssuer
    sms: SmsChannel
    audit: AuditLogger

    def request_otp(self, phone_number: str) -> RequestOtpResult:
        user = self.users.get_by_phone(phone_number)
        if user is None:
            self.audit.log("otp_request", phone_number, success=False, details={"reason": "user_not_found"})
            return RequestOtpResult(status=RequestOtpStatus.USER_NOT_FOUND)
        if user.is_suspended:
            self.audit.log("otp_request", phone_number, user_id=user.id, success=False, details={"reason": "user_suspended"})
            return RequestOtpResult(status=RequestOtpStatus.USER_SUSPENDED)

        code = self.lifecycle.request_code(user.id)

        # The code is valid from here on; delivery problems never undo it
        sms_sent = self._deliver(user.phone_number, code)
        self.audit.log("otp_request", phone_number, user_id=user.id, success=True, details={"sms_sent": sms_sent})
        return RequestOtpResult(status=RequestOtpStatus.ACCEPTED, sms_sent=sms_sent)

    def verify_otp(self, phone_number: str, code: str) -> VerifyOtpResult:
        user = self.users.get_by_phone(phone_number)
        if user is None:
            return self._reject(phone_number, None, FailureReason.USER_NOT_FOUND)
        if user.is_suspended:
            return self._reject(phone_number, user, FailureReason.USER_SUSPENDED)

        result = self.lifecycle.verify_code(user.id, code)
        if not result.success:
            return self._reject(phone_number, user, FailureReason(result.failure.value))

        token = self.tokens.issue(user)
        self.audit.log("otp_verify", phone_number, user_id=user.id, success=True, details={"otp_id": result.record.id})
        return VerifyOtpResult(status=VerifyOtpStatus.TOKEN_ISSUED, token=token, user=user)

    def logout(self, token: str) -> LogoutResult:
        if self.tokens.token_owner(token) is None:
            return LogoutResult(authenticated=False)
        revoked = self.tokens.revoke(token)
        if not revoked:
            logger.info("Logout for a token that was already revoked or unknown")
        return LogoutResult(authenticated=True, revoked=revoked)

    def current_user(self, token: str) -> Optional[UserRecord]:
        user_id = self.tokens.authenticate(token)
        if user_id is None:
            return None
        return self.users.get_by_id(user_id)

    def _deliver(self, phone_number: str, code: str) -> bool:
        message = OTP_MESSAGE_TEMPLATE.format(code=code, ttl=settings.OTP_TTL_MINUTES)
        try:
            return bool(self.sms.send(phone_number, message))
        except DeliveryFailure as e:
            logger.warning(f"SMS delivery failed: {e}")
            return False
        except Exception as e:
            logger.error(f"SMS delivery raised: {e}")
            return False

    def _reject(self, phone_number: str, user: Optional[UserRecord], reason: FailureReason) -> VerifyOtpResult:
        self.audit.log(
            "otp_verify",
            phone_number,
            user_id=user.id if user else None,
            success=False,
            details={"reason": reason.value},
        )
        return VerifyOtpResult(status=VerifyOtpStatus.INVALID_CREDENTIALS, user=user, reason=reason)
