"""
Settings and environment management module for the Chat Analytics backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults for development
- Singleton pattern via @lru_cache for efficient access
- Ranking limits for every top-N list in the metrics summary

Environment Variables (all prefixed with CHAT_ANALYTICS_):
- CHAT_ANALYTICS_APP_NAME: Display name used by the API and reports
- CHAT_ANALYTICS_LOG_LEVEL: Root logging level (default: INFO)
- CHAT_ANALYTICS_CORS_ORIGINS: JSON list of allowed dashboard origins
- CHAT_ANALYTICS_TOP_SOURCES_LIMIT: Traffic sources kept in the summary (default: 10)
- CHAT_ANALYTICS_TOP_REFERRERS_LIMIT: Referrer domains kept in the summary (default: 10)
- CHAT_ANALYTICS_TOP_CAMPAIGNS_LIMIT: Campaigns kept in the summary (default: 5)
- CHAT_ANALYTICS_TOP_REASONS_LIMIT: Not-booked reasons kept in the summary (default: 5)
- CHAT_ANALYTICS_JOB_TYPE_DISPLAY_LIMIT: Job types shown by presentation layers (default: 6)
- CHAT_ANALYTICS_REPORT_OUTPUT_PATH: Default destination for the markdown report

Usage:
    from chat_analytics.core.config import get_settings

    settings = get_settings()
    limit = settings.top_sources_limit
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The class inherits from pydantic-settings BaseSettings which provides:
    - Automatic loading from environment variables (case-insensitive)
    - Support for .env file loading
    - Type validation and coercion
    - Default values for optional settings

    Attributes:
        app_name: Name reported by the API root endpoint and report headers.
        log_level: Logging level applied by the application entry point.
        cors_origins: Origins allowed to call the API from a browser.
        top_sources_limit: Maximum entries in topTrafficSources.
        top_referrers_limit: Maximum entries in topReferrers.
        top_campaigns_limit: Maximum entries in topCampaigns.
        top_reasons_limit: Maximum entries in topNotBookedReasons.
        job_type_display_limit: Slice of jobTypeBreakdown shown on dashboards.
        report_output_path: Default path for the generated analysis report.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        env_prefix='CHAT_ANALYTICS_',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Application
    # =========================================================================

    app_name: str = 'Chat Analytics API'

    log_level: str = 'INFO'

    # Dashboard dev servers
    cors_origins: List[str] = [
        'http://localhost:5173',
        'http://127.0.0.1:5173',
    ]

    # =========================================================================
    # Ranking Limits
    # The summary keeps the top N buckets by chat count for these lists.
    # Job types and channels are returned in full; presentation layers slice
    # job types to job_type_display_limit.
    # =========================================================================

    top_sources_limit: int = Field(default=10, ge=1)

    top_referrers_limit: int = Field(default=10, ge=1)

    top_campaigns_limit: int = Field(default=5, ge=1)

    top_reasons_limit: int = Field(default=5, ge=1)

    job_type_display_limit: int = Field(default=6, ge=1)

    # =========================================================================
    # Reporting
    # =========================================================================

    # Used by jobs.analysis_report when no explicit output path is given
    report_output_path: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns a cached Settings instance, ensuring that environment variables are
    only loaded once during the application lifecycle.

    Returns:
        Settings: The application settings instance with all configuration values.

    Raises:
        pydantic.ValidationError: If an environment variable has an invalid
            value (e.g., CHAT_ANALYTICS_TOP_SOURCES_LIMIT=0).

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
