"""
Enumeration definitions for the Chat Analytics backend.

All enums inherit from both `str` and `Enum` to ensure JSON serialization
compatibility with Pydantic models, enabling automatic serialization and
deserialization in API responses and query parameters.
"""

from enum import Enum


class BookableKind(str, Enum):
    """
    Tag of a chat's bookable status.

    The record store keeps the status as free text: the canonical value
    "Bookable", or "Not Bookable - <reason>". Anything else (including an
    absent value) is UNKNOWN and keeps its raw text as the reason.
    """
    BOOKABLE = "bookable"
    NOT_BOOKABLE = "not_bookable"
    UNKNOWN = "unknown"


class TrafficClass(str, Enum):
    """
    Acquisition class assigned to a chat by the attribution classifier.

    - direct: no attribution source key could be resolved
    - paid: a source key resolved and utm_campaign is present
    - organic: a source key resolved without a utm_campaign
    """
    DIRECT = "direct"
    PAID = "paid"
    ORGANIC = "organic"


class ClickIdPlatform(str, Enum):
    """
    Ad platforms recognised from click identifiers in the attribution bundle.

    Values are the display names used as keys in clickIdBreakdown.
    - gclid: Google Ads
    - fbclid: Facebook Ads
    - msclkid: Microsoft Ads
    """
    GOOGLE_ADS = "Google Ads"
    FACEBOOK_ADS = "Facebook Ads"
    MICROSOFT_ADS = "Microsoft Ads"


class RecordFilter(str, Enum):
    """
    Quick filters offered by the dashboard record table.

    - all: no filtering
    - booked: records with a jobId
    - revenue-opportunities: bookable records that were not booked
    - incomplete: records whose bookable status mentions "Incomplete"
    """
    ALL = "all"
    BOOKED = "booked"
    REVENUE_OPPORTUNITIES = "revenue-opportunities"
    INCOMPLETE = "incomplete"
