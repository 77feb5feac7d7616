"""
Package initialization file for chat_analytics models.

This module exports all Pydantic schemas and enumerations from schemas.py and
enums.py, making them importable from chat_analytics.models directly.

Usage:
    from chat_analytics.models import (
        ChatRecord,
        MetricsSummary,
        TrafficClass,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from chat_analytics.models.enums import (
    BookableKind,
    ClickIdPlatform,
    RecordFilter,
    TrafficClass,
)

# =============================================================================
# Schemas
# =============================================================================

from chat_analytics.models.schemas import (
    # -------------------------------------------------------------------------
    # Input models (record store shape)
    # -------------------------------------------------------------------------
    Attribution,
    UtmParameters,
    WebSession,
    ChatRecord,
    ChatRecordList,
    FilteredRecordsResponse,

    # -------------------------------------------------------------------------
    # Ingestion
    # -------------------------------------------------------------------------
    ValidationError,
    IngestionResult,

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------
    BookableStatus,
    TrafficSourceDisplay,
    RankingLimits,

    # -------------------------------------------------------------------------
    # Summary models
    # -------------------------------------------------------------------------
    BucketStats,
    TrafficSourceStat,
    CampaignStat,
    ReferrerStat,
    ClickIdStat,
    JobTypeStat,
    ChannelStat,
    ReasonCount,
    NotBookableReasonCount,
    DataQuality,
    MetricsSummary,
)


__all__ = [
    # Enums
    "BookableKind",
    "ClickIdPlatform",
    "RecordFilter",
    "TrafficClass",
    # Input models
    "Attribution",
    "UtmParameters",
    "WebSession",
    "ChatRecord",
    "ChatRecordList",
    "FilteredRecordsResponse",
    # Ingestion
    "ValidationError",
    "IngestionResult",
    # Derived values
    "BookableStatus",
    "TrafficSourceDisplay",
    "RankingLimits",
    # Summary models
    "BucketStats",
    "TrafficSourceStat",
    "CampaignStat",
    "ReferrerStat",
    "ClickIdStat",
    "JobTypeStat",
    "ChannelStat",
    "ReasonCount",
    "NotBookableReasonCount",
    "DataQuality",
    "MetricsSummary",
]
