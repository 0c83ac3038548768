import enum
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from ...core.clock import Clock, utcnow
from ...core.config import settings
from ...infrastructure.locks import KeyedLock
from ..ports.otp_store import OtpRecord, OtpStore
from .code_generator import CodeGenerator
from .code_hasher import CodeHasher

logger = logging.getLogger(__name__)


class VerificationFailure(str, enum.Enum):
    NO_ACTIVE_CODE = "no_active_code"
    MISMATCH = "mismatch"


@dataclass
class VerificationResult:
    record: Optional[OtpRecord] = None
    failure: Optional[VerificationFailure] = None

    @property
    def success(self) -> bool:
        return self.failure is None


@dataclass
class OtpLifecycle:
    """Issues and consumes one-time codes.

    Per user the states are NoActiveCode -> ActiveCode -> (Used | Expired).
    Issuing always retires whatever was active, so a user holds at most one
    active code at any instant. Both transitions run under a per-user lock and
    inside a single store transaction. The lock is per process; consuming a
    code is a conditional write in the store, so two workers can never both
    redeem it.
    """

    store: OtpStore
    generator: CodeGenerator = field(default_factory=CodeGenerator)
    hasher: CodeHasher = field(default_factory=CodeHasher)
    ttl: timedelta = timedelta(minutes=settings.OTP_TTL_MINUTES)
    clock: Clock = utcnow
    locks: KeyedLock = field(default_factory=KeyedLock)

    def request_code(self, user_id: str, kind: str = settings.OTP_KIND_LOGIN) -> str:
        """Issue a fresh code and return its plaintext.

        The plaintext is not kept anywhere; delivering it is the caller's job.
        """
        plaintext = self.generator.generate()
        code_hash = self.hasher.hash(plaintext)

        with self.locks.hold(user_id), self.store.atomic():
            retired = self.store.invalidate_active(user_id)
            record = self.store.create(
                user_id=user_id,
                code_hash=code_hash,
                expires_at=self.clock() + self.ttl,
                kind=kind,
            )

        logger.info(f"Issued OTP {record.id} for user {user_id} (retired {retired})")
        return plaintext

    def verify_code(self, user_id: str, candidate: str) -> VerificationResult:
        with self.locks.hold(user_id), self.store.atomic():
            record = self.store.find_active(user_id)
            if record is None:
                # expired and never-issued look the same from here on
                return VerificationResult(failure=VerificationFailure.NO_ACTIVE_CODE)

            if not self.hasher.verify(candidate, record.code_hash):
                return VerificationResult(failure=VerificationFailure.MISMATCH)

            if not self.store.mark_used(record.id):
                # another verifier consumed it between find_active and here
                logger.warning(f"OTP {record.id} for user {user_id} was already consumed")
                return VerificationResult(failure=VerificationFailure.NO_ACTIVE_CODE)

        logger.info(f"OTP {record.id} consumed by user {user_id}")
        return VerificationResult(record=record)
