# Schemas package (re-export feature modules for stable imports)
from .auth.auth import (
    RequestOTPRequest, RequestOTPResponse, VerifyOTPRequest, VerifyOTPResponse,
    UserResponse, MeResponse
)
from .common.common import MessageResponse, ErrorResponse, HealthResponse

__all__ = [
    "RequestOTPRequest",
    "RequestOTPResponse",
    "VerifyOTPRequest",
    "VerifyOTPResponse",
    "UserResponse",
    "MeResponse",
    "MessageResponse",
    "ErrorResponse",
    "HealthResponse",
]
