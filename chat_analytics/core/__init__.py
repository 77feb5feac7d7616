"""
Core infrastructure package for the Chat Analytics backend.

Holds the environment-driven Settings (ranking limits, logging level, CORS
origins, report destination) and the FastAPI dependency that injects them
into route handlers:

    from chat_analytics.core import get_settings, SettingsDep
"""

from chat_analytics.core.config import Settings, get_settings
from chat_analytics.core.dependencies import SettingsDep, get_settings_dependency

__all__ = [
    'Settings',
    'get_settings',
    'get_settings_dependency',
    'SettingsDep',
]
