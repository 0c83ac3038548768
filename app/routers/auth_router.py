# app/routers/auth_router.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status

from ..api.deps import get_auth_gateway, get_bearer_token, get_rate_limiter
from ..application.ports.rate_limiter import RateLimiter
from ..application.services.auth_gateway import AuthGateway, FailureReason, RequestOtpStatus
from ..core.config import settings
from ..schemas import (
    RequestOTPRequest, RequestOTPResponse, VerifyOTPRequest, VerifyOTPResponse,
    UserResponse, MessageResponse, ErrorResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

INVALID_OTP_MESSAGE = "Invalid or expired OTP"
SUSPENDED_MESSAGE = "Your account has been suspended"

@router.post(
    "/request-otp",
    response_model=RequestOTPResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
def request_otp(
    payload: RequestOTPRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    """
    Send a login code to a provisioned phone number
    """
    if not limiter.allow(
        f"otp-request:{payload.phone_number}",
        max_requests=settings.OTP_REQUEST_LIMIT,
        window_seconds=settings.OTP_REQUEST_WINDOW_SECONDS,
    ):
        logger.warning("OTP request rate limit exceeded")
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Too many OTP requests. Please try again later.")

    result = gateway.request_otp(payload.phone_number)

    if result.status == RequestOtpStatus.USER_NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found with this phone number")
    if result.status == RequestOtpStatus.USER_SUSPENDED:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=SUSPENDED_MESSAGE)

    return RequestOTPResponse(message="OTP sent successfully", sms_sent=result.sms_sent)

@router.post(
    "/verify-otp",
    response_model=VerifyOTPResponse,
    responses={401: {"model": ErrorResponse}},
)
def verify_otp(payload: VerifyOTPRequest, gateway: AuthGateway = Depends(get_auth_gateway)):
    """
    Exchange a valid code for a bearer token
    """
    result = gateway.verify_otp(payload.phone_number, payload.otp)

    if not result.success:
        if settings.OTP_VERIFY_REVEALS_SUSPENDED and result.reason == FailureReason.USER_SUSPENDED:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=SUSPENDED_MESSAGE)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_OTP_MESSAGE,
        )

    return VerifyOTPResponse(
        message="Login successful",
        token=result.token.token,
        token_type=result.token.token_type,
        expires_at=result.token.expires_at,
        user=UserResponse.model_validate(result.user),
    )

@router.post("/logout", response_model=MessageResponse)
def logout(
    token: str = Depends(get_bearer_token),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Revoke the presented token only; repeating it with the same token is harmless
    """
    result = gateway.logout(token)
    if not result.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info(f"Logout processed (revoked={result.revoked})")
    return MessageResponse(message="Logged out successfully")
