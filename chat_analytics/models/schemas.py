"""
Pydantic request/response models for the Chat Analytics backend.

This module provides type-safe validation and serialization for the engine's
input records, its metrics summary and the HTTP payloads wrapping them.

Field names deliberately keep the record store's camelCase shape (s2fId,
webSession, utm_source ...) so payloads round-trip without an alias layer, and
the summary field names are the contract the dashboard renders from.

All models use Pydantic v2 syntax.
"""

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chat_analytics.models.enums import BookableKind


def _coerce_identifier(value: Any) -> Any:
    # The record store returns some identifiers as numbers
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _lenient_text(value: Any) -> Optional[str]:
    # Attribution text: numbers become strings, any other non-string is dropped
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _lenient_bundle(value: Any) -> Any:
    # A nested attribution bundle that is not an object is treated as absent
    if value is None or isinstance(value, (dict, BaseModel)):
        return value
    return None


# =============================================================================
# Input Models (record store shape)
# =============================================================================


class Attribution(BaseModel):
    """
    Click identifiers and referrer data captured by the web widget.

    Every field is optional; the classifier treats an absent value and an
    empty string the same way. Malformed values never reject the record:
    numbers are stringified and any other non-string becomes None.
    """
    model_config = ConfigDict(frozen=True, extra='ignore')

    gclid: Optional[str] = Field(default=None, description="Google Ads click id")
    fbclid: Optional[str] = Field(default=None, description="Facebook Ads click id")
    msclkid: Optional[str] = Field(default=None, description="Microsoft Ads click id")
    gbraid: Optional[str] = Field(default=None, description="Google app-to-web click id")
    wbraid: Optional[str] = Field(default=None, description="Google web-to-app click id")
    landing_page: Optional[str] = Field(default=None, description="First page of the session")
    original_referrer: Optional[str] = Field(default=None, description="Referrer of the first visit")
    referrer: Optional[str] = Field(default=None, description="Referrer URL, or 'direct'")
    ga_client_id: Optional[str] = Field(default=None, description="Google Analytics client id")
    referral: Optional[str] = Field(default=None, description="Referral code")

    @field_validator('*', mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return _lenient_text(value)


class UtmParameters(BaseModel):
    """UTM parameters captured from the landing URL."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None
    utm_adgroup: Optional[str] = None

    @field_validator('*', mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return _lenient_text(value)


class WebSession(BaseModel):
    """
    Attribution bundle attached to a chat started from the web widget.

    The widget also sends page, browser, display, temporal and capability
    details; they carry no attribution signal and are ignored. A bundle that
    is not an object is treated as absent.
    """
    model_config = ConfigDict(frozen=True, extra='ignore')

    attribution: Optional[Attribution] = None
    utm: Optional[UtmParameters] = None

    @field_validator('attribution', 'utm', mode='before')
    @classmethod
    def _drop_malformed_bundle(cls, value: Any) -> Any:
        return _lenient_bundle(value)


class ChatRecord(BaseModel):
    """
    One customer chat interaction as stored by the record store.

    Funnel fields:
    - bookable: "Bookable", or free text such as "Not Bookable - Outside Service Area"
    - jobId: present and non-empty when an appointment was booked
    - duration: conversation length in seconds, nullable, never negative

    Segmentation fields: jobType, source (channel: SMS/Voice/Webchat),
    existingCustomer.

    Funnel fields are validated strictly. A webSession that is not an object
    is treated as absent, so malformed attribution never drops the record.
    """
    model_config = ConfigDict(
        frozen=True,
        extra='ignore',
        json_schema_extra={
            "example": {
                "Id": 101,
                "s2fId": "S2F-0042",
                "CreatedAt": "2025-03-02T15:04:05Z",
                "jobType": "Spring Repair",
                "source": "Webchat",
                "bookable": "Bookable",
                "jobId": "J-9921",
                "duration": 184,
                "existingCustomer": False,
                "notBookedReasons": None,
                "webSession": {
                    "attribution": {
                        "gclid": "Cj0KCQ",
                        "referrer": "https://www.google.com/",
                        "landing_page": "https://example.com/garage-door-repair",
                    },
                    "utm": {
                        "utm_source": "google",
                        "utm_medium": "cpc",
                        "utm_campaign": "spring-repair",
                    },
                },
            }
        },
    )

    # Identity
    Id: Optional[int] = Field(default=None, description="Record store row id")
    s2fId: Optional[str] = Field(default=None, description="External correlation id")
    CreatedAt: Optional[datetime] = None
    UpdatedAt: Optional[datetime] = None
    timeStamp: Optional[datetime] = Field(
        default=None,
        description="Conversation timestamp used for date range filtering",
    )

    # Funnel
    bookable: Optional[str] = Field(default=None, description="Bookable status text")
    jobId: Optional[str] = Field(default=None, description="Booked job id")
    duration: Optional[float] = Field(default=None, ge=0, description="Seconds")
    notBookedReasons: Optional[str] = None

    # Segmentation
    jobType: Optional[str] = None
    source: Optional[str] = Field(default=None, description="Channel (SMS, Voice, Webchat)")
    existingCustomer: Optional[bool] = False

    # Contact details (display and filtering only)
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phoneNumber: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[Union[int, str]] = None
    appointmentTime: Optional[str] = None
    customerId: Optional[str] = None
    locationId: Optional[str] = None
    transcript: Optional[str] = None

    webSession: Optional[WebSession] = None

    @field_validator('s2fId', 'jobId', 'customerId', 'locationId', mode='before')
    @classmethod
    def _identifier_to_str(cls, value: Any) -> Any:
        return _coerce_identifier(value)

    @field_validator('webSession', mode='before')
    @classmethod
    def _drop_malformed_session(cls, value: Any) -> Any:
        return _lenient_bundle(value)


class ChatRecordList(BaseModel):
    """
    Record store list payload: {"list": [ChatRecord, ...]}.

    Used as the request body of the analytics endpoints and as the response
    body of the record filter endpoint.
    """
    model_config = ConfigDict(populate_by_name=True)

    records: List[ChatRecord] = Field(default_factory=list, alias="list")


class FilteredRecordsResponse(ChatRecordList):
    """Filtered records plus their count."""
    count: int = Field(..., ge=0)


# =============================================================================
# Ingestion Models
# =============================================================================


class ValidationError(BaseModel):
    """
    Validation error detail.

    Used for reporting rejected rows during ingestion.
    """
    field: str = Field(
        ...,
        description="Field with validation error"
    )
    message: str = Field(
        ...,
        description="Error message"
    )
    row_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="1-based position of the rejected row in the payload"
    )


class IngestionResult(BaseModel):
    """
    Result of validating a record store payload.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "rows_processed": 250,
                "rows_accepted": 249,
                "errors": [
                    {"field": "existingCustomer", "message": "Input should be a valid boolean", "row_number": 17}
                ]
            }
        }
    )

    success: bool = Field(
        ...,
        description="True when no row was rejected"
    )
    rows_processed: int = Field(
        ...,
        ge=0,
        description="Number of rows in the payload"
    )
    rows_accepted: int = Field(
        ...,
        ge=0,
        description="Number of rows validated into ChatRecord"
    )
    records: List[ChatRecord] = Field(
        default_factory=list,
        description="Validated records in payload order"
    )
    errors: List[ValidationError] = Field(
        default_factory=list,
        description="One entry per rejected row"
    )


# =============================================================================
# Derived Value Models
# =============================================================================


class BookableStatus(BaseModel):
    """
    Tagged form of the free-text bookable field.

    kind=bookable carries no reason; kind=not_bookable carries the text after
    "Not Bookable - "; kind=unknown carries the raw text (or None).
    """
    model_config = ConfigDict(frozen=True)

    kind: BookableKind
    reason: Optional[str] = None


class TrafficSourceDisplay(BaseModel):
    """Human-facing name, domain and paid hint for an attribution source key."""
    model_config = ConfigDict(frozen=True)

    name: str
    domain: str
    isPaid: bool = False


class RankingLimits(BaseModel):
    """Top-N limits applied when ranking summary lists."""
    model_config = ConfigDict(frozen=True)

    topSources: int = Field(default=10, ge=1)
    topReferrers: int = Field(default=10, ge=1)
    topCampaigns: int = Field(default=5, ge=1)
    topReasons: int = Field(default=5, ge=1)
    jobTypeDisplay: int = Field(default=6, ge=1)

    @classmethod
    def from_settings(cls, settings: Any) -> "RankingLimits":
        return cls(
            topSources=settings.top_sources_limit,
            topReferrers=settings.top_referrers_limit,
            topCampaigns=settings.top_campaigns_limit,
            topReasons=settings.top_reasons_limit,
            jobTypeDisplay=settings.job_type_display_limit,
        )


# =============================================================================
# Summary Models (output contract)
# =============================================================================


class BucketStats(BaseModel):
    """Counts and booked-among-bookable conversion rate for one bucket."""

    count: int = Field(..., ge=0, description="Chats in the bucket")
    bookable: int = Field(..., ge=0)
    booked: int = Field(..., ge=0)
    conversionRate: float = Field(..., ge=0.0, description="booked / bookable * 100")


class TrafficSourceStat(BucketStats):
    source: str
    isPaid: bool
    displayName: str


class CampaignStat(BucketStats):
    campaign: str


class ReferrerStat(BucketStats):
    domain: str


class ClickIdStat(BucketStats):
    platform: str


class JobTypeStat(BucketStats):
    jobType: str


class ChannelStat(BucketStats):
    channel: str


class ReasonCount(BaseModel):
    reason: str
    count: int = Field(..., ge=0)


class NotBookableReasonCount(ReasonCount):
    label: str = Field(..., description="Short display label for the reason")


class DataQuality(BaseModel):
    """
    Counts of records with missing or unusable attribution signals.

    noUtmSource counts sessions whose raw utm_source is absent, including
    those where a referrer override still resolves a source key. It is not
    the count of sessions left without any resolved source.
    """

    noWebSession: int = Field(default=0, ge=0)
    noUtmSource: int = Field(default=0, ge=0)
    unparseableReferrers: int = Field(default=0, ge=0)


class MetricsSummary(BaseModel):
    """
    Funnel, attribution, channel and quality metrics for one batch of chats.

    A value object fully determined by its input batch. bookingRate and
    conversionRate are the same figure (booked among bookable) under the two
    names the dashboard uses.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "totalChats": 3,
                "bookableChats": 2,
                "bookedChats": 1,
                "bookableRate": 66.67,
                "bookingRate": 50.0,
                "conversionRate": 50.0,
                "revenueOpportunities": 1,
                "avgDurationSeconds": 142.5,
                "directTraffic": 1,
                "paidTraffic": 1,
                "organicTraffic": 1,
            }
        }
    )

    # KPIs and funnel
    totalChats: int = Field(..., ge=0)
    bookableChats: int = Field(..., ge=0)
    bookedChats: int = Field(..., ge=0)
    bookableRate: float = Field(..., ge=0.0)
    bookingRate: float = Field(..., ge=0.0)
    conversionRate: float = Field(..., ge=0.0)
    revenueOpportunities: int = Field(
        ...,
        description="Bookable but not booked; negative only for inconsistent data",
    )
    avgDurationSeconds: float = Field(..., ge=0.0)

    # Attribution
    topTrafficSources: List[TrafficSourceStat] = Field(default_factory=list)
    topCampaigns: List[CampaignStat] = Field(default_factory=list)
    topReferrers: List[ReferrerStat] = Field(default_factory=list)
    clickIdBreakdown: List[ClickIdStat] = Field(default_factory=list)
    directTraffic: int = Field(..., ge=0)
    paidTraffic: int = Field(..., ge=0)
    organicTraffic: int = Field(..., ge=0)

    # Job performance
    jobTypeBreakdown: List[JobTypeStat] = Field(default_factory=list)

    # Customer insights
    existingCustomers: int = Field(..., ge=0)
    newCustomers: int = Field(..., ge=0)

    # Quality
    incompleteConversations: int = Field(..., ge=0)
    topNotBookedReasons: List[ReasonCount] = Field(default_factory=list)
    notBookableBreakdown: List[NotBookableReasonCount] = Field(default_factory=list)
    dataQuality: DataQuality = Field(default_factory=DataQuality)

    # Channels
    channelBreakdown: List[ChannelStat] = Field(default_factory=list)
