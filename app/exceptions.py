import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AuthServiceError(Exception):
    """Base class for errors raised by the authentication core."""


class ValidationError(AuthServiceError, ValueError):
    """Malformed phone number or code, rejected before any state change."""


class StorageError(AuthServiceError):
    """Persistence is unavailable; the in-flight operation was rolled back."""


class DeliveryFailure(AuthServiceError):
    """The SMS channel could not deliver a message."""


def create_error_response(message: str, errors: Optional[Dict[str, List[str]]] = None) -> dict:
    """Create a standardized error response"""
    body: Dict[str, Any] = {"message": message}
    if errors:
        body["errors"] = errors
    return body


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPException as {"message": ...}"""
    # HTTPBearer reports a missing header as 403; it is an authentication failure
    if exc.status_code == 403 and "Not authenticated" in str(exc.detail):
        return JSONResponse(
            status_code=401,
            content=create_error_response("Unauthenticated"),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        msg = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        errors.setdefault(field, []).append(msg)
    first = next(iter(errors.values()))[0] if errors else "The given data was invalid"
    return JSONResponse(status_code=422, content=create_error_response(first, errors))


async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(f"Storage unavailable on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content=create_error_response("Service temporarily unavailable, please retry"),
    )
