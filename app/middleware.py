import time
import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from .core.config import settings

logger = logging.getLogger(__name__)

class SecurityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # Add security headers
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Auth responses carry bearer tokens
        response.headers["Cache-Control"] = "no-store"

        return response

class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        client_host = request.client.host if request.client else "unknown"
        logger.info(
            f"{request.method} {request.url.path} from {client_host} -> "
            f"{response.status_code} in {duration:.3f}s"
        )

        return response

class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error: {str(e)}", exc_info=True)

            if settings.DEBUG:
                return JSONResponse(
                    status_code=500,
                    content={"message": f"Internal server error: {str(e)}"}
                )
            return JSONResponse(
                status_code=500,
                content={"message": "Internal server error"}
            )
