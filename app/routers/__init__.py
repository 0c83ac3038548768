# Routers package
from . import auth_router
from . import me_router

__all__ = [
    "auth_router",
    "me_router",
]
