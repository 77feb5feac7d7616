"""
FastAPI router module for the chat analytics endpoints.

This module exposes the analytics engine over HTTP for the dashboard. The
records arrive in the request body exactly as the record store returned them
({"list": [...]}); the API never fetches or stores records itself.

Endpoints:
- POST /analytics/summary: MetricsSummary for the posted batch
- POST /analytics/records/filter: the posted records narrowed by the dashboard filters
- POST /analytics/validate: per-row validation report for a raw payload
- GET /analytics/settings: effective top-N ranking limits

Both POST endpoints over ChatRecordList accept the same optional query filters:
filter (all, booked, revenue-opportunities, incomplete), utm_source, s2f_id,
start_date and end_date.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Body, HTTPException, Query

from chat_analytics.core.dependencies import SettingsDep
from chat_analytics.models import (
    ChatRecord,
    ChatRecordList,
    FilteredRecordsResponse,
    IngestionResult,
    MetricsSummary,
    RankingLimits,
    RecordFilter,
)
from chat_analytics.services.ingestion import RecordValidationError, parse_records
from chat_analytics.services.insights import calculate_advanced_analytics
from chat_analytics.services.selection import filter_records

# Configure logging
logger = logging.getLogger(__name__)

# Create router with prefix and tags for OpenAPI documentation
router = APIRouter(prefix="/analytics", tags=["analytics"])


# =============================================================================
# Helper Functions
# =============================================================================


def _select_records(
    records: List[ChatRecord],
    record_filter: RecordFilter,
    utm_source: Optional[str],
    s2f_id: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
) -> List[ChatRecord]:
    """
    Apply the dashboard filters to a posted batch.

    Raises:
        HTTPException 422: If the date range is inverted
    """
    try:
        return filter_records(
            records,
            record_filter=record_filter,
            utm_source=utm_source,
            s2f_id=s2f_id,
            start_date=start_date,
            end_date=end_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


# =============================================================================
# Endpoint Implementations
# =============================================================================


@router.post("/summary", response_model=MetricsSummary)
async def compute_summary(
    settings: SettingsDep,
    payload: ChatRecordList = Body(...),
    record_filter: RecordFilter = Query(default=RecordFilter.ALL, alias="filter"),
    utm_source: Optional[str] = Query(default=None, description="Raw utm_source to keep"),
    s2f_id: Optional[str] = Query(default=None, description="Correlation id to keep"),
    start_date: Optional[date] = Query(default=None, description="Inclusive first day"),
    end_date: Optional[date] = Query(default=None, description="Inclusive last day"),
) -> MetricsSummary:
    """
    Compute the metrics summary for the posted chat records.

    Args:
        payload: Record store list response
        record_filter: Quick status filter applied before aggregation
        utm_source: Optional raw utm_source filter
        s2f_id: Optional correlation id filter
        start_date: Optional inclusive start day (timeStamp)
        end_date: Optional inclusive end day (timeStamp)

    Returns:
        MetricsSummary for the selected records
    """
    records = _select_records(
        payload.records, record_filter, utm_source, s2f_id, start_date, end_date
    )

    try:
        summary = calculate_advanced_analytics(
            records, RankingLimits.from_settings(settings)
        )
    except Exception as e:
        logger.exception("Error computing analytics summary")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to compute analytics summary: {str(e)}"
        )

    logger.info(
        f"Computed summary for {summary.totalChats} of {len(payload.records)} posted chats"
    )
    return summary


@router.post("/records/filter", response_model=FilteredRecordsResponse)
async def filter_posted_records(
    payload: ChatRecordList = Body(...),
    record_filter: RecordFilter = Query(default=RecordFilter.ALL, alias="filter"),
    utm_source: Optional[str] = Query(default=None),
    s2f_id: Optional[str] = Query(default=None),
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
) -> FilteredRecordsResponse:
    """
    Return the posted records that match the dashboard filters.

    Returns:
        FilteredRecordsResponse ({"list": [...], "count": n})
    """
    records = _select_records(
        payload.records, record_filter, utm_source, s2f_id, start_date, end_date
    )
    return FilteredRecordsResponse(records=records, count=len(records))


@router.post("/validate", response_model=IngestionResult)
async def validate_payload(
    payload: Any = Body(...),
    strict: bool = Query(default=False, description="Fail on the first invalid row"),
) -> IngestionResult:
    """
    Validate a raw record store payload row by row.

    Returns:
        IngestionResult with accepted records and one error per rejected row

    Raises:
        HTTPException 422: If the payload shape is unrecognised, or a row is
            invalid and strict=true
    """
    try:
        return parse_records(payload, strict=strict)
    except RecordValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/settings", response_model=RankingLimits)
async def read_ranking_limits(settings: SettingsDep) -> RankingLimits:
    """
    Return the top-N limits the summary endpoint applies.
    """
    return RankingLimits.from_settings(settings)
