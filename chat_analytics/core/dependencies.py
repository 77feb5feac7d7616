"""
FastAPI dependency injection module for the Chat Analytics backend.

Provides reusable dependencies so endpoint handlers never reach for module
globals directly. The engine itself is pure and needs no connection or
session; the only injected collaborator is the Settings singleton.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- SettingsDep: Type alias for injecting Settings into endpoints

Usage Examples:
    @router.get("/analytics/settings")
    async def read_settings(settings: SettingsDep) -> RankingLimits:
        return RankingLimits.from_settings(settings)

    # In tests
    app.dependency_overrides[get_settings_dependency] = lambda: Settings(top_sources_limit=3)
"""

from typing import Annotated

from fastapi import Depends

from chat_analytics.core.config import Settings, get_settings


def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    This is a thin wrapper around get_settings() so FastAPI's dependency
    override mechanism can swap settings in tests.

    Returns:
        Settings: The cached Settings instance.
    """
    return get_settings()


# Usage: async def endpoint(settings: SettingsDep)
SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]
