import secrets
from dataclasses import dataclass

from ...core.config import settings


@dataclass
class CodeGenerator:
    """Numeric one-time codes from the OS CSPRNG."""

    length: int = settings.OTP_LENGTH

    def generate(self) -> str:
        return str(secrets.randbelow(10 ** self.length)).zfill(self.length)
