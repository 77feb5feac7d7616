"""
Aggregation Service

Folds a batch of chat records into raw counters in a single linear pass. The
insight calculator (services/insights.py) derives every rate and ranking from
these counters without touching the records again.

Per record, independently of the attribution outcome:
- global funnel counters (total, bookable, booked, incomplete, customers)
- the traffic split (direct / paid / organic) from the attribution classifier
- keyed {total, bookable, booked} counters by:
    * attribution source key (skipped when none resolved)
    * raw utm_campaign (skipped when absent)
    * referrer hostname (skipped when absent, "direct" or unparseable)
    * click-id platform (one per identifier present, non-exclusive)
    * jobType ("Not Specified" when absent), always
    * channel/source ("Unknown" when absent), always
- frequency maps of notBookedReasons and not-bookable status reasons
- duration sum/count over records that carry a duration

Keyed counters are plain dicts local to one call, so insertion order is the
first-seen order used to break ranking ties. Nothing outlives the call.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from chat_analytics.models.enums import BookableKind, TrafficClass
from chat_analytics.models.schemas import ChatRecord
from chat_analytics.services.attribution import (
    DIRECT_REFERRER,
    classify_attribution,
    click_id_platforms,
    referrer_domain,
)
from chat_analytics.services.status import (
    is_bookable,
    is_booked,
    is_incomplete,
    parse_bookable_status,
)

logger = logging.getLogger(__name__)


DEFAULT_JOB_TYPE = "Not Specified"
DEFAULT_CHANNEL = "Unknown"


# =============================================================================
# Counter Data Classes
# =============================================================================


@dataclass
class KeyedCounter:
    """
    Funnel counts for one bucket of a keyed breakdown.

    Attributes:
        total: Chats folded into the bucket.
        bookable: Of those, chats whose status is exactly "Bookable".
        booked: Of those, chats with a jobId.
        is_paid: Paid status of the latest chat folded in (source buckets only).
    """
    total: int = 0
    bookable: int = 0
    booked: int = 0
    is_paid: bool = False

    def add(self, bookable: bool, booked: bool) -> None:
        self.total += 1
        if bookable:
            self.bookable += 1
        if booked:
            self.booked += 1


@dataclass
class RawCounters:
    """
    Everything the insight calculator needs, accumulated over one batch.

    Global counters are plain ints; keyed breakdowns map a label to its
    KeyedCounter in first-seen order.
    """
    total_chats: int = 0
    bookable_chats: int = 0
    booked_chats: int = 0
    incomplete_conversations: int = 0
    existing_customers: int = 0

    direct_traffic: int = 0
    paid_traffic: int = 0
    organic_traffic: int = 0

    duration_sum: float = 0.0
    duration_count: int = 0

    no_web_session: int = 0
    no_utm_source: int = 0
    unparseable_referrers: int = 0

    sources: Dict[str, KeyedCounter] = field(default_factory=dict)
    campaigns: Dict[str, KeyedCounter] = field(default_factory=dict)
    referrers: Dict[str, KeyedCounter] = field(default_factory=dict)
    click_ids: Dict[str, KeyedCounter] = field(default_factory=dict)
    job_types: Dict[str, KeyedCounter] = field(default_factory=dict)
    channels: Dict[str, KeyedCounter] = field(default_factory=dict)

    not_booked_reasons: Dict[str, int] = field(default_factory=dict)
    not_bookable_reasons: Dict[str, int] = field(default_factory=dict)

    @property
    def new_customers(self) -> int:
        return self.total_chats - self.existing_customers


def _bucket(counters: Dict[str, KeyedCounter], key: str) -> KeyedCounter:
    stats = counters.get(key)
    if stats is None:
        stats = KeyedCounter()
        counters[key] = stats
    return stats


def _increment(frequencies: Dict[str, int], key: str) -> None:
    frequencies[key] = frequencies.get(key, 0) + 1


# =============================================================================
# Aggregation
# =============================================================================


def fold_record(counters: RawCounters, record: ChatRecord) -> None:
    """
    Fold one chat record into the running counters.

    Args:
        counters: Accumulator for the current batch (mutated in place).
        record: The chat to fold in.
    """
    bookable = is_bookable(record)
    booked = is_booked(record)

    # Funnel and customer counters
    counters.total_chats += 1
    if bookable:
        counters.bookable_chats += 1
    if booked:
        counters.booked_chats += 1
    if is_incomplete(record):
        counters.incomplete_conversations += 1
    if record.existingCustomer is True:
        counters.existing_customers += 1

    if record.duration is not None:
        counters.duration_sum += record.duration
        counters.duration_count += 1

    if record.notBookedReasons:
        _increment(counters.not_booked_reasons, record.notBookedReasons)

    status = parse_bookable_status(record.bookable)
    if status.kind == BookableKind.NOT_BOOKABLE and status.reason:
        _increment(counters.not_bookable_reasons, status.reason)

    # Segmentation, never skipped
    _bucket(counters.job_types, record.jobType or DEFAULT_JOB_TYPE).add(bookable, booked)
    _bucket(counters.channels, record.source or DEFAULT_CHANNEL).add(bookable, booked)

    # Attribution
    session = record.webSession
    result = classify_attribution(session)

    if result.traffic_class == TrafficClass.PAID:
        counters.paid_traffic += 1
    elif result.traffic_class == TrafficClass.ORGANIC:
        counters.organic_traffic += 1
    else:
        counters.direct_traffic += 1

    if result.source_key is not None:
        stats = _bucket(counters.sources, result.source_key)
        stats.add(bookable, booked)
        stats.is_paid = result.is_paid

    if session is None:
        counters.no_web_session += 1
        return

    utm = session.utm
    attribution = session.attribution

    if not (utm and utm.utm_source):
        counters.no_utm_source += 1

    utm_campaign = utm.utm_campaign if utm else None
    if utm_campaign:
        _bucket(counters.campaigns, utm_campaign).add(bookable, booked)

    referrer = attribution.referrer if attribution else None
    if referrer and referrer != DIRECT_REFERRER:
        domain = referrer_domain(referrer)
        if domain is None:
            counters.unparseable_referrers += 1
        else:
            _bucket(counters.referrers, domain).add(bookable, booked)

    for platform in click_id_platforms(attribution):
        _bucket(counters.click_ids, platform).add(bookable, booked)


def aggregate(records: Iterable[ChatRecord], counters: Optional[RawCounters] = None) -> RawCounters:
    """
    Accumulate raw counters over a batch of chat records in one pass.

    O(n) in the number of records; extra memory grows with the number of
    distinct sources, campaigns, referrers, job types and channels.

    Args:
        records: The batch, already fetched by the caller.
        counters: Optional accumulator to continue from. A fresh one is
            created when omitted.

    Returns:
        RawCounters for the batch.

    Example:
        >>> counters = aggregate(records)
        >>> counters.total_chats
        3
    """
    if counters is None:
        counters = RawCounters()

    for record in records:
        fold_record(counters, record)

    logger.debug(
        f"Aggregated {counters.total_chats} chats across "
        f"{len(counters.sources)} sources and {len(counters.channels)} channels"
    )
    return counters
