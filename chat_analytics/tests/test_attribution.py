"""
Attribution Classifier Test Module

Tests for chat_analytics/services/attribution.py covering:
- Source key resolution from utm_source, referrer overrides and the Google split
- Paid/organic/direct labelling (campaign presence only)
- Referrer hostname extraction and unparseable referrers
- Click identifier platforms (non-exclusive)
- Display names for source keys
"""

import pytest

from chat_analytics.models.enums import TrafficClass
from chat_analytics.models.schemas import Attribution, UtmParameters, WebSession
from chat_analytics.services.attribution import (
    DIRECT_RESULT,
    classify_attribution,
    click_id_platforms,
    describe_traffic_source,
    is_google_source,
    referrer_domain,
    referrer_source_override,
)


def _session(utm_source=None, utm_campaign=None, referrer=None, **click_ids) -> WebSession:
    return WebSession(
        attribution=Attribution(referrer=referrer, **click_ids),
        utm=UtmParameters(utm_source=utm_source, utm_campaign=utm_campaign),
    )


# =============================================================================
# Referrer Overrides
# =============================================================================


class TestReferrerSourceOverride:
    """Tests for referrer_source_override()."""

    @pytest.mark.parametrize("referrer", [
        "https://search.yahoo.com/search?p=garage+door",
        "https://www.YAHOO.com/",
        "http://uk.search.yahoo.co.uk/",
    ])
    def test_yahoo_referrers(self, referrer: str) -> None:
        assert referrer_source_override(referrer) == "yahoo"

    @pytest.mark.parametrize("referrer", [
        "https://www.precisiondoor.net/locations",
        "https://Precision-Door.example/",
        "https://pdservice.com/",
        "https://updates.net/",
    ])
    def test_precision_door_referrers(self, referrer: str) -> None:
        assert referrer_source_override(referrer) == "precision-door"

    @pytest.mark.parametrize("referrer", [
        None,
        "",
        "direct",
        "https://www.bing.com/",
        "https://pd.org/",
    ])
    def test_no_override(self, referrer) -> None:
        assert referrer_source_override(referrer) is None

    def test_yahoo_checked_before_precision_door(self) -> None:
        assert referrer_source_override("https://search.yahoo.com/?q=precisiondoor") == "yahoo"


# =============================================================================
# Classification
# =============================================================================


class TestClassifyAttribution:
    """Tests for classify_attribution()."""

    def test_missing_web_session_is_direct(self) -> None:
        result = classify_attribution(None)

        assert result == DIRECT_RESULT
        assert result.source_key is None
        assert result.traffic_class == TrafficClass.DIRECT

    def test_empty_web_session_is_direct(self) -> None:
        result = classify_attribution(WebSession())

        assert result.source_key is None
        assert result.is_paid is False
        assert result.traffic_class == TrafficClass.DIRECT

    def test_source_with_campaign_is_paid(self) -> None:
        result = classify_attribution(_session(utm_source="facebook", utm_campaign="fb-spring"))

        assert result.source_key == "facebook"
        assert result.is_paid is True
        assert result.traffic_class == TrafficClass.PAID

    def test_source_without_campaign_is_organic(self) -> None:
        result = classify_attribution(_session(utm_source="bing"))

        assert result.source_key == "bing"
        assert result.is_paid is False
        assert result.traffic_class == TrafficClass.ORGANIC

    def test_campaign_without_source_is_direct_but_paid(self) -> None:
        result = classify_attribution(_session(utm_campaign="orphan"))

        assert result.source_key is None
        assert result.is_paid is True
        assert result.traffic_class == TrafficClass.DIRECT

    def test_empty_strings_count_as_absent(self) -> None:
        result = classify_attribution(_session(utm_source="", utm_campaign=""))

        assert result.source_key is None
        assert result.traffic_class == TrafficClass.DIRECT

    @pytest.mark.parametrize("source", ["google", "GMB", "Google My Business", "gmblisting-austin"])
    def test_google_sources_split_by_campaign(self, source: str) -> None:
        paid = classify_attribution(_session(utm_source=source, utm_campaign="brand"))
        organic = classify_attribution(_session(utm_source=source))

        assert paid.source_key == "google-paid"
        assert organic.source_key == "google-organic"

    def test_yahoo_referrer_overrides_utm_source(self) -> None:
        result = classify_attribution(_session(
            utm_source="bing",
            utm_campaign="x",
            referrer="https://search.yahoo.com/search",
        ))

        assert result.source_key == "yahoo"
        assert result.is_paid is True
        assert result.traffic_class == TrafficClass.PAID

    def test_referrer_override_without_utm_source(self) -> None:
        result = classify_attribution(_session(referrer="https://www.precisiondoor.net/"))

        assert result.source_key == "precision-door"
        assert result.traffic_class == TrafficClass.ORGANIC

    def test_direct_referrer_literal_does_not_resolve(self) -> None:
        result = classify_attribution(_session(referrer="direct"))

        assert result.source_key is None

    def test_click_ids_do_not_make_traffic_paid(self) -> None:
        result = classify_attribution(_session(utm_source="bing", gclid="abc", msclkid="def"))

        assert result.is_paid is False
        assert result.traffic_class == TrafficClass.ORGANIC

    def test_utm_source_kept_verbatim(self) -> None:
        result = classify_attribution(_session(utm_source="Newsletter"))

        assert result.source_key == "Newsletter"


class TestIsGoogleSource:
    """Tests for is_google_source()."""

    @pytest.mark.parametrize("source,expected", [
        ("google", True),
        ("Google", True),
        ("gmb", True),
        ("google my business", True),
        ("austin-gmblisting", True),
        ("googleads", False),
        ("bing", False),
    ])
    def test_google_names(self, source: str, expected: bool) -> None:
        assert is_google_source(source) is expected


# =============================================================================
# Parallel Signals
# =============================================================================


class TestReferrerDomain:
    """Tests for referrer_domain()."""

    @pytest.mark.parametrize("referrer,expected", [
        ("https://www.facebook.com/groups/123", "facebook.com"),
        ("https://m.facebook.com/story", "m.facebook.com"),
        ("http://Example.COM:8080/path", "example.com"),
        ("https://search.yahoo.com/search?p=door", "search.yahoo.com"),
    ])
    def test_hostname_extracted(self, referrer: str, expected: str) -> None:
        assert referrer_domain(referrer) == expected

    def test_only_leading_www_is_removed(self) -> None:
        assert referrer_domain("https://shop.www.example.com/") == "shop.www.example.com"

    @pytest.mark.parametrize("referrer", [None, "", "direct"])
    def test_absent_referrers(self, referrer) -> None:
        assert referrer_domain(referrer) is None

    @pytest.mark.parametrize("referrer", ["not a url", "facebook.com/page", "http://[bad"])
    def test_unparseable_referrers(self, referrer: str) -> None:
        assert referrer_domain(referrer) is None


class TestClickIdPlatforms:
    """Tests for click_id_platforms()."""

    def test_none_attribution(self) -> None:
        assert click_id_platforms(None) == []

    def test_single_click_id(self) -> None:
        assert click_id_platforms(Attribution(msclkid="m")) == ["Microsoft Ads"]

    def test_multiple_click_ids_are_not_exclusive(self) -> None:
        platforms = click_id_platforms(Attribution(gclid="g", fbclid="f", msclkid="m"))

        assert platforms == ["Google Ads", "Facebook Ads", "Microsoft Ads"]

    def test_empty_click_id_ignored(self) -> None:
        assert click_id_platforms(Attribution(gclid="", fbclid="f")) == ["Facebook Ads"]

    def test_braid_ids_not_counted(self) -> None:
        assert click_id_platforms(Attribution(gbraid="g", wbraid="w")) == []


# =============================================================================
# Display Mapping
# =============================================================================


class TestDescribeTrafficSource:
    """Tests for describe_traffic_source()."""

    @pytest.mark.parametrize("source,name,domain,is_paid", [
        ("google-paid", "Google Ads", "google.com", True),
        ("google-organic", "Google Organic", "google.com", False),
        ("gmb", "Business Profile", "google.com", False),
        ("austin-gmblisting", "Business Listing", "google.com", False),
        ("google", "Google", "google.com", False),
        ("adwords", "Google Ads", "google.com", True),
        ("bing", "Bing Ads", "bing.com", True),
        ("yahoo", "Yahoo Ads", "yahoo.com", True),
        ("precision-door", "Precision Door", "precisiondoor.com", False),
        ("facebook", "Facebook Ads", "facebook.com", True),
        ("instagram", "Instagram Ads", "instagram.com", True),
        ("youtube", "YouTube Ads", "youtube.com", True),
        ("chatgpt", "ChatGPT", "openai.com", False),
    ])
    def test_known_sources(self, source: str, name: str, domain: str, is_paid: bool) -> None:
        display = describe_traffic_source(source)

        assert display.name == name
        assert display.domain == domain
        assert display.isPaid is is_paid

    def test_unknown_source_is_capitalized(self) -> None:
        display = describe_traffic_source("newsletter")

        assert display.name == "Newsletter"
        assert display.domain == "newsletter"
        assert display.isPaid is False

    @pytest.mark.parametrize("source", [None, ""])
    def test_missing_source(self, source) -> None:
        assert describe_traffic_source(source).name == "Unknown"
