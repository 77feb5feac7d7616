"""
Attribution Classifier Service

This module resolves, for a single chat, the acquisition source used for
traffic-source reporting and labels the chat as paid, organic or direct.

Signals are layered and frequently missing or contradictory:
- UTM parameters from the landing URL (utm_source, utm_campaign)
- Referrer URL text
- Click identifiers (gclid, fbclid, msclkid)

Resolution rules (first match wins where noted):
1. No web session: direct traffic, no source key.
2. Start from utm_source.
3. Referrer override, case-insensitive, applied even when utm_source is set:
   - "yahoo.com" or "search.yahoo" -> "yahoo"
   - else "precisiondoor" or "precision-door", or "pd" together with
     ".com"/".net" -> "precision-door"
4. Paid iff utm_campaign is present, whichever source resolved.
5. Google sources ("google", "gmb", "google my business", "*gmblisting*")
   are split into "google-paid" / "google-organic".
6. No source key -> direct; otherwise paid or organic per rule 4.

The "pd" rule matches any referrer containing those two letters next to a
.com/.net suffix (e.g. "speedway.com") and is kept as the record store's
dashboards have always applied it.

Click identifiers never influence the paid/direct split; they feed a separate
per-platform breakdown (see click_id_platforms).

Every function here is pure; absent or malformed fields degrade to "direct".
"""

from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlsplit

from chat_analytics.models.enums import ClickIdPlatform, TrafficClass
from chat_analytics.models.schemas import Attribution, TrafficSourceDisplay, WebSession


# =============================================================================
# Constants
# =============================================================================

YAHOO_SOURCE = "yahoo"
PRECISION_DOOR_SOURCE = "precision-door"
GOOGLE_PAID_SOURCE = "google-paid"
GOOGLE_ORGANIC_SOURCE = "google-organic"

# Referrer literal the widget records when there is no referrer
DIRECT_REFERRER = "direct"

YAHOO_REFERRER_MARKERS = ("yahoo.com", "search.yahoo")
PRECISION_DOOR_REFERRER_MARKERS = ("precisiondoor", "precision-door")
PD_SUFFIXES = (".com", ".net")

GOOGLE_SOURCE_NAMES = ("google", "gmb", "google my business")
GOOGLE_LISTING_MARKER = "gmblisting"

# Attribution field -> ad platform, in breakdown order
CLICK_ID_FIELDS = (
    ("gclid", ClickIdPlatform.GOOGLE_ADS),
    ("fbclid", ClickIdPlatform.FACEBOOK_ADS),
    ("msclkid", ClickIdPlatform.MICROSOFT_ADS),
)


@dataclass(frozen=True)
class AttributionResult:
    """
    Outcome of classifying one chat's web session.

    Attributes:
        source_key: Resolved attribution source key, or None for direct traffic.
        is_paid: Whether utm_campaign is present.
        traffic_class: DIRECT when no key resolved, else PAID or ORGANIC.
    """
    source_key: Optional[str]
    is_paid: bool
    traffic_class: TrafficClass


DIRECT_RESULT = AttributionResult(
    source_key=None,
    is_paid=False,
    traffic_class=TrafficClass.DIRECT,
)


# =============================================================================
# Classification
# =============================================================================


def referrer_source_override(referrer: Optional[str]) -> Optional[str]:
    """
    Infer a source key from referrer text.

    Args:
        referrer: Raw referrer string (any case), possibly None.

    Returns:
        "yahoo", "precision-door", or None when no rule fires.

    Example:
        >>> referrer_source_override("https://search.yahoo.com/search?p=garage")
        'yahoo'
        >>> referrer_source_override("https://www.bing.com/")
    """
    if not referrer:
        return None

    lower_referrer = referrer.lower()

    if any(marker in lower_referrer for marker in YAHOO_REFERRER_MARKERS):
        return YAHOO_SOURCE

    if any(marker in lower_referrer for marker in PRECISION_DOOR_REFERRER_MARKERS):
        return PRECISION_DOOR_SOURCE

    if "pd" in lower_referrer and any(suffix in lower_referrer for suffix in PD_SUFFIXES):
        return PRECISION_DOOR_SOURCE

    return None


def is_google_source(source: str) -> bool:
    lower_source = source.lower()
    return lower_source in GOOGLE_SOURCE_NAMES or GOOGLE_LISTING_MARKER in lower_source


def classify_attribution(web_session: Optional[WebSession]) -> AttributionResult:
    """
    Resolve the attribution source key and paid status for one chat.

    Args:
        web_session: The chat's web session bundle, or None.

    Returns:
        AttributionResult. source_key is None for direct traffic.

    Example:
        >>> session = WebSession(utm=UtmParameters(utm_source="google", utm_campaign="spring"))
        >>> classify_attribution(session).source_key
        'google-paid'
    """
    if web_session is None:
        return DIRECT_RESULT

    utm = web_session.utm
    attribution = web_session.attribution

    utm_source = utm.utm_source if utm else None
    utm_campaign = utm.utm_campaign if utm else None
    referrer = attribution.referrer if attribution else None

    override = referrer_source_override(referrer)
    if override:
        utm_source = override

    is_paid = bool(utm_campaign)

    if not utm_source:
        return AttributionResult(
            source_key=None,
            is_paid=is_paid,
            traffic_class=TrafficClass.DIRECT,
        )

    source_key = utm_source
    if is_google_source(utm_source):
        source_key = GOOGLE_PAID_SOURCE if is_paid else GOOGLE_ORGANIC_SOURCE

    return AttributionResult(
        source_key=source_key,
        is_paid=is_paid,
        traffic_class=TrafficClass.PAID if is_paid else TrafficClass.ORGANIC,
    )


# =============================================================================
# Parallel Signals
# =============================================================================


def referrer_domain(referrer: Optional[str]) -> Optional[str]:
    """
    Extract the referrer hostname with a leading "www." removed.

    Returns None when the referrer is absent, the literal "direct", or cannot
    be parsed as an absolute URL (no scheme or no host).

    Example:
        >>> referrer_domain("https://www.facebook.com/groups/123")
        'facebook.com'
        >>> referrer_domain("not a url")
    """
    if not referrer or referrer == DIRECT_REFERRER:
        return None

    try:
        parts = urlsplit(referrer.strip())
        hostname = parts.hostname
    except ValueError:
        return None

    if not parts.scheme or not hostname:
        return None

    if hostname.startswith("www."):
        hostname = hostname[len("www."):]

    return hostname or None


def click_id_platforms(attribution: Optional[Attribution]) -> List[str]:
    """
    List the ad platforms whose click identifier is present.

    Not exclusive: a session carrying both gclid and fbclid yields both
    "Google Ads" and "Facebook Ads".
    """
    if attribution is None:
        return []
    return [
        platform.value
        for field_name, platform in CLICK_ID_FIELDS
        if getattr(attribution, field_name)
    ]


# =============================================================================
# Display Mapping
# =============================================================================


def describe_traffic_source(source: Optional[str]) -> TrafficSourceDisplay:
    """
    Map an attribution source key to a display name, domain and paid hint.

    Display only: the paid hint reflects what the platform usually is, while
    the counters use campaign presence.

    Example:
        >>> describe_traffic_source("google-organic").name
        'Google Organic'
    """
    if not source:
        return TrafficSourceDisplay(name="Unknown", domain="", isPaid=False)

    lower_source = source.lower()

    if lower_source == GOOGLE_PAID_SOURCE:
        return TrafficSourceDisplay(name="Google Ads", domain="google.com", isPaid=True)
    if lower_source == GOOGLE_ORGANIC_SOURCE:
        return TrafficSourceDisplay(name="Google Organic", domain="google.com", isPaid=False)

    if lower_source in ("gmb", "google my business"):
        return TrafficSourceDisplay(name="Business Profile", domain="google.com", isPaid=False)
    if "gmblisting" in lower_source or "google business listing" in lower_source:
        return TrafficSourceDisplay(name="Business Listing", domain="google.com", isPaid=False)
    if lower_source == "google" or "google.com" in lower_source:
        return TrafficSourceDisplay(name="Google", domain="google.com", isPaid=False)
    if lower_source in ("adwords", "google ads") or "googleads" in lower_source:
        return TrafficSourceDisplay(name="Google Ads", domain="google.com", isPaid=True)
    if lower_source == "bing" or "bing.com" in lower_source:
        return TrafficSourceDisplay(name="Bing Ads", domain="bing.com", isPaid=True)
    if lower_source == YAHOO_SOURCE or "yahoo.com" in lower_source:
        return TrafficSourceDisplay(name="Yahoo Ads", domain="yahoo.com", isPaid=True)
    if lower_source == PRECISION_DOOR_SOURCE or any(
        marker in lower_source for marker in PRECISION_DOOR_REFERRER_MARKERS
    ):
        return TrafficSourceDisplay(name="Precision Door", domain="precisiondoor.com", isPaid=False)
    if lower_source == "facebook" or "facebook.com" in lower_source or "fb" in lower_source:
        return TrafficSourceDisplay(name="Facebook Ads", domain="facebook.com", isPaid=True)
    if lower_source == "instagram" or "instagram.com" in lower_source or "ig" in lower_source:
        return TrafficSourceDisplay(name="Instagram Ads", domain="instagram.com", isPaid=True)
    if "youtube" in lower_source:
        return TrafficSourceDisplay(name="YouTube Ads", domain="youtube.com", isPaid=True)
    if lower_source == "chatgpt" or "openai" in lower_source:
        return TrafficSourceDisplay(name="ChatGPT", domain="openai.com", isPaid=False)

    return TrafficSourceDisplay(
        name=source[0].upper() + source[1:],
        domain=lower_source,
        isPaid=False,
    )
