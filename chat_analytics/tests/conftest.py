"""
Pytest Configuration and Shared Fixtures for Chat Analytics Tests.

This module provides fixtures and configuration for all backend tests, supporting:
- Async API tests with pytest-asyncio and an httpx client bound to the ASGI app
- A record factory building ChatRecord values with only the fields a test cares about
- A representative mixed batch (paid, organic, direct, booked, incomplete, voice)
- Settings isolation: the cached Settings singleton is cleared around each test

Dependency References:
- chat_analytics/core/config.py: get_settings for ranking limits
- chat_analytics/main.py: FastAPI application under test
"""

from typing import Any, AsyncGenerator, Callable, Dict, Generator, List, Optional

import pytest
import pytest_asyncio

from chat_analytics.core.config import get_settings
from chat_analytics.models.schemas import ChatRecord


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - api: Marks tests that exercise the HTTP layer through the ASGI app
    - scenario: Marks end-to-end batch scenarios checked against known totals

    Usage:
        # Run only engine tests:
        pytest -m "not api"

    Args:
        config: Pytest configuration object
    """
    config.addinivalue_line(
        'markers',
        'api: marks tests that call the FastAPI application'
    )
    config.addinivalue_line(
        'markers',
        'scenario: marks end-to-end batch scenarios with known totals'
    )


# ============================================================
# SETTINGS ISOLATION
# ============================================================

@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """
    Clear the cached Settings before and after every test.

    Tests that set CHAT_ANALYTICS_* environment variables through monkeypatch
    see their values, and no test leaks configuration into the next one.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================
# RECORD FIXTURES
# ============================================================

def build_record(
    bookable: Optional[str] = "Bookable",
    job_id: Optional[str] = None,
    utm_source: Optional[str] = None,
    utm_campaign: Optional[str] = None,
    referrer: Optional[str] = None,
    web_session: bool = True,
    **fields: Any,
) -> ChatRecord:
    """
    Build a ChatRecord from the handful of fields attribution tests vary.

    Args:
        bookable: Bookable status text
        job_id: Booked job id
        utm_source: utm_source inside webSession.utm
        utm_campaign: utm_campaign inside webSession.utm
        referrer: Referrer inside webSession.attribution
        web_session: False to omit webSession entirely
        **fields: Any other ChatRecord field, or click ids (gclid, fbclid,
            msclkid) which are placed in the attribution bundle

    Returns:
        ChatRecord: Validated record
    """
    attribution: Dict[str, Any] = {}
    for click_id in ('gclid', 'fbclid', 'msclkid'):
        if click_id in fields:
            attribution[click_id] = fields.pop(click_id)
    if referrer is not None:
        attribution['referrer'] = referrer

    data: Dict[str, Any] = {'bookable': bookable, 'jobId': job_id}
    if web_session:
        utm = {}
        if utm_source is not None:
            utm['utm_source'] = utm_source
        if utm_campaign is not None:
            utm['utm_campaign'] = utm_campaign
        data['webSession'] = {'attribution': attribution, 'utm': utm}
    data.update(fields)
    return ChatRecord.model_validate(data)


@pytest.fixture
def make_record() -> Callable[..., ChatRecord]:
    """
    Provide the record factory to tests.

    Usage:
        def test_something(make_record):
            record = make_record(utm_source='google', utm_campaign='spring')
    """
    return build_record


@pytest.fixture
def sample_rows() -> List[Dict[str, Any]]:
    """
    Provide a raw record store batch as plain dicts.

    Contents (6 chats):
    - Google Ads paid chat, booked, with a gclid
    - Google organic chat, bookable but not booked (revenue opportunity)
    - Direct chat without a webSession, not bookable (outside service area)
    - Facebook paid chat from facebook.com, booked, existing customer
    - Incomplete voice chat with no attribution
    - Yahoo referrer overriding utm_source, not bookable (parts inquiry)
    """
    return [
        {
            'Id': 1,
            's2fId': 'S2F-1',
            'timeStamp': '2025-03-01T10:00:00Z',
            'bookable': 'Bookable',
            'jobId': 'J-1',
            'duration': 120,
            'jobType': 'Spring Repair',
            'source': 'Webchat',
            'existingCustomer': False,
            'webSession': {
                'attribution': {'gclid': 'abc', 'referrer': 'https://www.google.com/'},
                'utm': {'utm_source': 'google', 'utm_campaign': 'spring-repair'},
            },
        },
        {
            'Id': 2,
            's2fId': 'S2F-2',
            'timeStamp': '2025-03-02T11:00:00Z',
            'bookable': 'Bookable',
            'duration': 60,
            'jobType': 'Spring Repair',
            'source': 'Webchat',
            'notBookedReasons': 'Price',
            'webSession': {
                'attribution': {'referrer': 'https://www.google.com/'},
                'utm': {'utm_source': 'google'},
            },
        },
        {
            'Id': 3,
            's2fId': 'S2F-3',
            'timeStamp': '2025-03-03T12:00:00Z',
            'bookable': 'Not Bookable - Outside Service Area',
            'jobType': 'New Door',
            'source': 'SMS',
        },
        {
            'Id': 4,
            's2fId': 'S2F-4',
            'timeStamp': '2025-03-04T13:00:00Z',
            'bookable': 'Bookable',
            'jobId': 'J-4',
            'duration': 300,
            'jobType': 'New Door',
            'source': 'Webchat',
            'existingCustomer': True,
            'webSession': {
                'attribution': {'fbclid': 'fb-1', 'referrer': 'https://m.facebook.com/story'},
                'utm': {'utm_source': 'facebook', 'utm_campaign': 'fb-spring'},
            },
        },
        {
            'Id': 5,
            's2fId': 'S2F-5',
            'timeStamp': '2025-03-05T14:00:00Z',
            'bookable': 'Not Bookable - Incomplete Conversation',
            'source': 'Voice',
            'notBookedReasons': 'Price',
            'webSession': {'attribution': {'referrer': 'direct'}, 'utm': {}},
        },
        {
            'Id': 6,
            's2fId': 'S2F-6',
            'timeStamp': '2025-03-06T15:00:00Z',
            'bookable': 'Not Bookable - Parts Inquiry',
            'jobType': 'Opener Repair',
            'source': 'Webchat',
            'webSession': {
                'attribution': {'referrer': 'https://search.yahoo.com/search?p=door'},
                'utm': {'utm_source': 'bing'},
            },
        },
    ]


@pytest.fixture
def sample_records(sample_rows: List[Dict[str, Any]]) -> List[ChatRecord]:
    """Provide sample_rows validated into ChatRecord models."""
    return [ChatRecord.model_validate(row) for row in sample_rows]


# ============================================================
# API FIXTURES
# ============================================================

@pytest_asyncio.fixture
async def client() -> AsyncGenerator[Any, None]:
    """
    Provide an httpx AsyncClient bound to the FastAPI app over ASGI.

    No server is started; requests are dispatched in-process.
    """
    from httpx import ASGITransport, AsyncClient

    from chat_analytics.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as http_client:
        yield http_client
