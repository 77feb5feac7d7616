"""
Funnel & Insight Calculator Service

Derives the MetricsSummary from the counters accumulated by
services/aggregation.py. No record is touched here.

Funnel rates (percentages, 0 when the denominator is 0):
- bookingRate = bookedChats / bookableChats * 100
- conversionRate = bookingRate (same figure, the dashboard's KPI name)
- bookableRate = bookableChats / totalChats * 100
- per-bucket conversionRate = booked / bookable * 100

Other derived values:
- revenueOpportunities = bookableChats - bookedChats
- avgDurationSeconds = duration sum / chats with a duration

Rankings sort by chat count descending; Python's sort is stable, so ties keep
first-seen order. Sources and referrers keep the top 10, campaigns and
not-booked reasons the top 5 (configurable). Job types and channels are
returned in full, click ids in first-seen order.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from chat_analytics.core.config import get_settings
from chat_analytics.models.schemas import (
    CampaignStat,
    ChannelStat,
    ChatRecord,
    ClickIdStat,
    DataQuality,
    JobTypeStat,
    MetricsSummary,
    NotBookableReasonCount,
    RankingLimits,
    ReasonCount,
    ReferrerStat,
    TrafficSourceStat,
)
from chat_analytics.services.aggregation import KeyedCounter, RawCounters, aggregate
from chat_analytics.services.attribution import describe_traffic_source
from chat_analytics.services.status import short_reason_label

logger = logging.getLogger(__name__)

StatT = TypeVar("StatT")


# =============================================================================
# Helpers
# =============================================================================


def _rate(numerator: float, denominator: float) -> float:
    """Percentage with a zero guard."""
    if not denominator:
        return 0.0
    return numerator / denominator * 100.0


def _ranked(
    counters: Dict[str, KeyedCounter],
    build: Callable[[str, KeyedCounter], StatT],
    limit: Optional[int] = None,
) -> List[StatT]:
    ordered = sorted(counters.items(), key=lambda item: item[1].total, reverse=True)
    if limit is not None:
        ordered = ordered[:limit]
    return [build(key, stats) for key, stats in ordered]


def _bucket_fields(stats: KeyedCounter) -> dict:
    return {
        "count": stats.total,
        "bookable": stats.bookable,
        "booked": stats.booked,
        "conversionRate": _rate(stats.booked, stats.bookable),
    }


def _ranked_frequencies(frequencies: Dict[str, int], limit: Optional[int] = None) -> List[tuple]:
    ordered = sorted(frequencies.items(), key=lambda item: item[1], reverse=True)
    return ordered[:limit] if limit is not None else ordered


def resolve_limits(limits: Optional[RankingLimits] = None) -> RankingLimits:
    """Return explicit limits, or the ones configured in Settings."""
    if limits is not None:
        return limits
    return RankingLimits.from_settings(get_settings())


# =============================================================================
# Summary
# =============================================================================


def summarize(counters: RawCounters, limits: Optional[RankingLimits] = None) -> MetricsSummary:
    """
    Derive the metrics summary from accumulated counters.

    Args:
        counters: Output of aggregate().
        limits: Top-N limits; defaults to the configured Settings values.

    Returns:
        MetricsSummary with funnel rates, ranked attribution lists, channel,
        job type and customer breakdowns.

    Note:
        A negative revenueOpportunities means more chats were booked than were
        marked bookable. It is reported as-is and logged, since it points at
        inconsistent source data rather than a computation error.
    """
    limits = resolve_limits(limits)

    booking_rate = _rate(counters.booked_chats, counters.bookable_chats)
    revenue_opportunities = counters.bookable_chats - counters.booked_chats
    if revenue_opportunities < 0:
        logger.warning(
            f"Booked chats ({counters.booked_chats}) exceed bookable chats "
            f"({counters.bookable_chats}); bookable flags look inconsistent"
        )

    avg_duration = (
        counters.duration_sum / counters.duration_count
        if counters.duration_count
        else 0.0
    )

    top_sources = _ranked(
        counters.sources,
        lambda source, stats: TrafficSourceStat(
            source=source,
            isPaid=stats.is_paid,
            displayName=describe_traffic_source(source).name,
            **_bucket_fields(stats),
        ),
        limits.topSources,
    )
    top_campaigns = _ranked(
        counters.campaigns,
        lambda campaign, stats: CampaignStat(campaign=campaign, **_bucket_fields(stats)),
        limits.topCampaigns,
    )
    top_referrers = _ranked(
        counters.referrers,
        lambda domain, stats: ReferrerStat(domain=domain, **_bucket_fields(stats)),
        limits.topReferrers,
    )
    click_ids = [
        ClickIdStat(platform=platform, **_bucket_fields(stats))
        for platform, stats in counters.click_ids.items()
    ]
    job_types = _ranked(
        counters.job_types,
        lambda job_type, stats: JobTypeStat(jobType=job_type, **_bucket_fields(stats)),
    )
    channels = _ranked(
        counters.channels,
        lambda channel, stats: ChannelStat(channel=channel, **_bucket_fields(stats)),
    )

    top_reasons = [
        ReasonCount(reason=reason, count=count)
        for reason, count in _ranked_frequencies(counters.not_booked_reasons, limits.topReasons)
    ]
    not_bookable = [
        NotBookableReasonCount(reason=reason, label=short_reason_label(reason), count=count)
        for reason, count in _ranked_frequencies(counters.not_bookable_reasons)
    ]

    return MetricsSummary(
        totalChats=counters.total_chats,
        bookableChats=counters.bookable_chats,
        bookedChats=counters.booked_chats,
        bookableRate=_rate(counters.bookable_chats, counters.total_chats),
        bookingRate=booking_rate,
        conversionRate=booking_rate,
        revenueOpportunities=revenue_opportunities,
        avgDurationSeconds=avg_duration,
        topTrafficSources=top_sources,
        topCampaigns=top_campaigns,
        topReferrers=top_referrers,
        clickIdBreakdown=click_ids,
        directTraffic=counters.direct_traffic,
        paidTraffic=counters.paid_traffic,
        organicTraffic=counters.organic_traffic,
        jobTypeBreakdown=job_types,
        existingCustomers=counters.existing_customers,
        newCustomers=counters.new_customers,
        incompleteConversations=counters.incomplete_conversations,
        topNotBookedReasons=top_reasons,
        notBookableBreakdown=not_bookable,
        dataQuality=DataQuality(
            noWebSession=counters.no_web_session,
            noUtmSource=counters.no_utm_source,
            unparseableReferrers=counters.unparseable_referrers,
        ),
        channelBreakdown=channels,
    )


def calculate_advanced_analytics(
    records: Iterable[ChatRecord],
    limits: Optional[RankingLimits] = None,
) -> MetricsSummary:
    """
    Compute the full metrics summary for a batch of chat records.

    This is the engine's single entry point: one aggregation pass followed by
    the summary derivation. It holds no state between calls and is safe to
    call concurrently with independent batches.

    Args:
        records: In-memory batch of ChatRecord values.
        limits: Optional top-N limits overriding Settings.

    Returns:
        MetricsSummary for the batch.
    """
    return summarize(aggregate(records), limits)


def top_job_types(summary: MetricsSummary, limit: Optional[int] = None) -> List[JobTypeStat]:
    """Slice of jobTypeBreakdown shown by dashboards (default: 6, configurable)."""
    if limit is None:
        limit = get_settings().job_type_display_limit
    return summary.jobTypeBreakdown[:limit]
