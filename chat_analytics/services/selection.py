"""
Record selection helpers.

In-memory filters matching the dashboard's record table: quick status filters,
the attribution source dropdown, and the correlation-id / date-range scoping
normally applied by the record store query. They let a caller narrow a batch
before handing it to the engine.
"""

from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

from chat_analytics.models.enums import RecordFilter
from chat_analytics.models.schemas import ChatRecord
from chat_analytics.services.status import is_booked, is_incomplete, is_revenue_opportunity


STATUS_FILTERS: Dict[RecordFilter, Callable[[ChatRecord], bool]] = {
    RecordFilter.ALL: lambda record: True,
    RecordFilter.BOOKED: is_booked,
    RecordFilter.REVENUE_OPPORTUNITIES: is_revenue_opportunity,
    RecordFilter.INCOMPLETE: is_incomplete,
}


def raw_utm_source(record: ChatRecord) -> Optional[str]:
    """utm_source exactly as captured, before any referrer override."""
    session = record.webSession
    if session is None or session.utm is None:
        return None
    return session.utm.utm_source


def in_date_range(
    record: ChatRecord,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> bool:
    """
    Whether the record's timeStamp falls within [start_date, end_date].

    Both bounds are whole days and inclusive. Records without a timeStamp
    never match a bounded range.
    """
    if start_date is None and end_date is None:
        return True
    if record.timeStamp is None:
        return False
    day = record.timeStamp.date()
    if start_date is not None and day < start_date:
        return False
    if end_date is not None and day > end_date:
        return False
    return True


def filter_records(
    records: Iterable[ChatRecord],
    record_filter: RecordFilter = RecordFilter.ALL,
    utm_source: Optional[str] = None,
    s2f_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[ChatRecord]:
    """
    Select the records matching every given criterion.

    Args:
        records: Batch to filter.
        record_filter: Quick status filter (all, booked, revenue-opportunities, incomplete).
        utm_source: Keep only records whose raw utm_source equals this value.
        s2f_id: Keep only records with this correlation id.
        start_date: Inclusive first day, compared against timeStamp.
        end_date: Inclusive last day, compared against timeStamp.

    Returns:
        Matching records in their original order.

    Raises:
        ValueError: If start_date is after end_date.
    """
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValueError(f"start_date {start_date} is after end_date {end_date}")

    status_matches = STATUS_FILTERS[RecordFilter(record_filter)]

    selected = []
    for record in records:
        if not status_matches(record):
            continue
        if utm_source and raw_utm_source(record) != utm_source:
            continue
        if s2f_id and record.s2fId != s2f_id:
            continue
        if not in_date_range(record, start_date, end_date):
            continue
        selected.append(record)
    return selected
