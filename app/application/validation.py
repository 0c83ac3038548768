import re

from ..core.config import settings
from ..exceptions import ValidationError

PHONE_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
_PHONE_SEPARATORS = re.compile(r"[\s\-().]")


def normalize_phone_number(raw) -> str:
    """Strip separators and check the +<digits> international form."""
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("The phone number field is required.")
    phone = _PHONE_SEPARATORS.sub("", raw.strip())
    if not phone.startswith("+"):
        raise ValidationError("The phone number must start with a + sign.")
    if not PHONE_PATTERN.match(phone):
        raise ValidationError("The phone number must be in international format (e.g., +256XXXXXXXXX).")
    return phone


def validate_otp(raw, length: int = settings.OTP_LENGTH) -> str:
    if not isinstance(raw, str) or not raw:
        raise ValidationError("The otp field is required.")
    # str.isdigit() accepts non-ASCII digits
    if len(raw) != length or not all("0" <= ch <= "9" for ch in raw):
        raise ValidationError(f"The OTP must be exactly {length} digits.")
    return raw
