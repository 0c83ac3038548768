# Models package (re-export feature modules for stable imports)
from .users.user import User, USER_STATUS_ACTIVE, USER_STATUS_SUSPENDED
from .users.session import UserSession
from .auth.otp import OtpCode

__all__ = [
    "User",
    "USER_STATUS_ACTIVE",
    "USER_STATUS_SUSPENDED",
    "UserSession",
    "OtpCode",
]
