"""
Funnel status helpers for chat records.

The record store keeps two independent funnel signals per chat:
- bookable: free text, exactly "Bookable" when the chat could become a job,
  otherwise "Not Bookable - <reason>"
- jobId: set when an appointment was actually booked

A booked chat need not be "Bookable" (the bookable flag is computed by the
conversation agent and can be wrong), so every counter evaluates both
predicates independently.
"""

from typing import Dict, Optional

from chat_analytics.models.enums import BookableKind
from chat_analytics.models.schemas import BookableStatus, ChatRecord


BOOKABLE_VALUE = "Bookable"

NOT_BOOKABLE_PREFIX = "Not Bookable - "

INCOMPLETE_MARKER = "Incomplete"

# Dashboard labels for common not-bookable reasons; unknown reasons pass through
REASON_LABELS: Dict[str, str] = {
    "Incomplete Conversation": "Incomplete",
    "Service Not Offered": "No Service",
    "Service Not Provided": "No Service",
    "Outside Service Area": "Out of Area",
    "Parts Inquiry": "Parts Only",
    "Marketing Inquiry": "Marketing",
    "Leave A Review": "Review",
    "Leave A Message for Manager": "Manager Msg",
    "Spam/Irrelevant": "Spam",
}


def is_booked(record: ChatRecord) -> bool:
    """A chat is booked iff jobId is a non-empty string."""
    return bool(record.jobId)


def is_bookable(record: ChatRecord) -> bool:
    """A chat is bookable iff its status is exactly "Bookable"."""
    return record.bookable == BOOKABLE_VALUE


def is_incomplete(record: ChatRecord) -> bool:
    return bool(record.bookable) and INCOMPLETE_MARKER in record.bookable


def is_revenue_opportunity(record: ChatRecord) -> bool:
    """Bookable but not booked."""
    return is_bookable(record) and not is_booked(record)


def parse_bookable_status(value: Optional[str]) -> BookableStatus:
    """
    Parse the free-text bookable field into a tagged status.

    Args:
        value: Raw bookable text from the record store.

    Returns:
        BookableStatus with kind BOOKABLE, NOT_BOOKABLE (reason = text after
        the "Not Bookable - " prefix) or UNKNOWN (reason = raw text).

    Example:
        >>> parse_bookable_status("Not Bookable - Parts Inquiry")
        BookableStatus(kind=<BookableKind.NOT_BOOKABLE: 'not_bookable'>, reason='Parts Inquiry')
    """
    if value == BOOKABLE_VALUE:
        return BookableStatus(kind=BookableKind.BOOKABLE)
    if value and value.startswith(NOT_BOOKABLE_PREFIX):
        return BookableStatus(
            kind=BookableKind.NOT_BOOKABLE,
            reason=value[len(NOT_BOOKABLE_PREFIX):],
        )
    return BookableStatus(kind=BookableKind.UNKNOWN, reason=value)


def short_reason_label(reason: str) -> str:
    return REASON_LABELS.get(reason, reason)


def format_duration(seconds: Optional[float]) -> str:
    """
    Format a duration in seconds as m:ss.

    Returns "-" for absent or zero durations.

    Example:
        >>> format_duration(184)
        '3:04'
    """
    if not seconds:
        return "-"
    total = int(round(seconds))
    return f"{total // 60}:{total % 60:02d}"
