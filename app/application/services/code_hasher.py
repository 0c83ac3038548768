from passlib.context import CryptContext

from ...core.config import settings


class CodeHasher:
    """Salted bcrypt digests for codes at rest.

    ``hash`` salts every call, so two digests of the same code differ; compare
    with ``verify`` only.
    """

    def __init__(self, rounds: int = settings.OTP_HASH_ROUNDS) -> None:
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        if not isinstance(plaintext, str) or not isinstance(digest, str) or not digest:
            return False
        try:
            return self._context.verify(plaintext, digest)
        except (ValueError, TypeError):
            # unknown or malformed digest
            return False
