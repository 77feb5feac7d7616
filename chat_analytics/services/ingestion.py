"""
Record Ingestion Service

Validates chat records that a collaborator has already fetched from the record
store. The engine assumes funnel fields are well-typed; this module is where
that assumption is checked.

Accepted payload shapes:
- the record store list response: {"list": [record, ...], ...}
- a bare list of records

Key Features:
- Per-row validation into ChatRecord (one bad row never rejects the batch)
- Rejected rows reported as ValidationError entries with their row number
- Strict mode raising on the first invalid row
- Loading a saved list response from a JSON file
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from pydantic import ValidationError as PydanticValidationError

from chat_analytics.models.schemas import ChatRecord, IngestionResult, ValidationError

# Configure module logger
logger = logging.getLogger(__name__)


class RecordValidationError(ValueError):
    """Raised when a payload (or, in strict mode, a row) cannot be validated."""

    def __init__(self, message: str, row_number: int = None):
        self.row_number = row_number
        super().__init__(message)


def extract_rows(payload: Any) -> List[Any]:
    """
    Return the list of raw rows held by a payload.

    Raises:
        RecordValidationError: If the payload is neither a list nor a dict
            with a "list" key holding a list.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("list"), list):
        return payload["list"]
    raise RecordValidationError(
        "Payload must be a list of records or an object with a 'list' array"
    )


def _first_error(exc: PydanticValidationError) -> ValidationError:
    # Only the first error is reported per row
    detail = exc.errors()[0]
    location = ".".join(str(part) for part in detail.get("loc", ())) or "record"
    return ValidationError(field=location, message=detail.get("msg", str(exc)))


def parse_records(payload: Any, strict: bool = False) -> IngestionResult:
    """
    Validate every row of a payload into ChatRecord models.

    Args:
        payload: Record store response or bare list of rows.
        strict: Raise on the first invalid row instead of collecting errors.

    Returns:
        IngestionResult with the accepted records and one error per rejected row.

    Raises:
        RecordValidationError: For an unrecognised payload shape, or for an
            invalid row when strict=True.
    """
    rows = extract_rows(payload)
    records: List[ChatRecord] = []
    errors: List[ValidationError] = []

    for row_number, row in enumerate(rows, start=1):
        try:
            records.append(ChatRecord.model_validate(row))
        except PydanticValidationError as exc:
            error = _first_error(exc)
            if strict:
                raise RecordValidationError(
                    f"Row {row_number}: {error.field}: {error.message}",
                    row_number=row_number,
                ) from exc
            errors.append(error.model_copy(update={"row_number": row_number}))

    if errors:
        logger.warning(f"Rejected {len(errors)} of {len(rows)} chat records during validation")
    logger.info(f"Validated {len(records)} chat records")

    return IngestionResult(
        success=not errors,
        rows_processed=len(rows),
        rows_accepted=len(records),
        records=records,
        errors=errors,
    )


def load_records_file(path: Union[str, Path], strict: bool = False) -> IngestionResult:
    """
    Load and validate a saved record store response.

    Args:
        path: JSON file holding {"list": [...]} or a bare list.
        strict: Passed through to parse_records.

    Raises:
        FileNotFoundError: If the file does not exist.
        RecordValidationError: If the file is not valid JSON or has an
            unrecognised shape.
    """
    file_path = Path(path)
    logger.info(f"Loading chat records from {file_path}")

    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RecordValidationError(f"{file_path} is not valid JSON: {exc}") from exc

    return parse_records(payload, strict=strict)
