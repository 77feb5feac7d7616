"""
Chat Analytics Services Module

Business logic for the analytics engine. Every service is stateless and
performs no I/O except ingestion's file loader.

Services:
- attribution: per-chat attribution source key and paid/organic/direct class
- aggregation: single-pass keyed counters over a batch of chats
- insights: funnel rates, rankings and breakdowns derived from the counters
- status: booked/bookable predicates, bookable status tagging and labels
- selection: in-memory record filters used by the dashboard
- ingestion: validation of record store payloads into ChatRecord models

All services are designed to be consumed by the API layer (chat_analytics/api/)
and the report job (chat_analytics/jobs/).
"""

# =============================================================================
# Attribution Classifier Exports
# =============================================================================

from chat_analytics.services.attribution import (
    AttributionResult,
    classify_attribution,
    click_id_platforms,
    describe_traffic_source,
    is_google_source,
    referrer_domain,
    referrer_source_override,
)

# =============================================================================
# Aggregator Exports
# =============================================================================

from chat_analytics.services.aggregation import (
    KeyedCounter,
    RawCounters,
    aggregate,
    fold_record,
)

# =============================================================================
# Funnel & Insight Calculator Exports
# =============================================================================

from chat_analytics.services.insights import (
    calculate_advanced_analytics,
    resolve_limits,
    summarize,
    top_job_types,
)

# =============================================================================
# Status, Selection and Ingestion Exports
# =============================================================================

from chat_analytics.services.status import (
    format_duration,
    is_bookable,
    is_booked,
    is_incomplete,
    is_revenue_opportunity,
    parse_bookable_status,
    short_reason_label,
)

from chat_analytics.services.selection import (
    filter_records,
    in_date_range,
    raw_utm_source,
)

from chat_analytics.services.ingestion import (
    RecordValidationError,
    extract_rows,
    load_records_file,
    parse_records,
)


__all__ = [
    # Attribution
    "AttributionResult",
    "classify_attribution",
    "click_id_platforms",
    "describe_traffic_source",
    "is_google_source",
    "referrer_domain",
    "referrer_source_override",
    # Aggregation
    "KeyedCounter",
    "RawCounters",
    "aggregate",
    "fold_record",
    # Insights
    "calculate_advanced_analytics",
    "resolve_limits",
    "summarize",
    "top_job_types",
    # Status
    "format_duration",
    "is_bookable",
    "is_booked",
    "is_incomplete",
    "is_revenue_opportunity",
    "parse_bookable_status",
    "short_reason_label",
    # Selection
    "filter_records",
    "in_date_range",
    "raw_utm_source",
    # Ingestion
    "RecordValidationError",
    "extract_rows",
    "load_records_file",
    "parse_records",
]
