# Re-export the canonical settings so app code can depend on app.config
from .core.config import Settings, get_settings, settings

__all__ = [
    "Settings",
    "get_settings",
    "settings",
]
