"""
Configuration layer - Settings and constants
"""

from src.config.settings import settings, is_backend_configured, resolve_log_dir, PROJECT_ROOT
from src.config.constants import SUPPORTED_LANGUAGES, VIDEO_ID_LENGTH

__all__ = [
    "settings",
    "is_backend_configured",
    "resolve_log_dir",
    "PROJECT_ROOT",
    "SUPPORTED_LANGUAGES",
    "VIDEO_ID_LENGTH",
]
