"""Logic of the candidates-by-date, candidates-by-range and candidate-counts endpoints."""

import math
from collections import Counter
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from config import RANGE_QUERY_MAX_PAGE_SIZE
from schemas.api import DateRange, DayCandidatesResponse, RangeCandidatesResponse
from schemas.candidate import CVUpload
from services.candidate_filters import is_from_approved_country
from services.candidate_store import CandidateStore
from utils.date_utils import is_iso_day, iter_days
from utils.helpers import leading_number
from utils.logger import get_logger

logger = get_logger(__name__)


class InvalidQueryError(ValueError):
    """Bad or missing query parameter; maps to HTTP 400."""


def _require_day(value: Optional[str], name: str) -> str:
    if not value:
        raise InvalidQueryError(f"Missing required parameter: {name} (YYYY-MM-DD format)")
    if not is_iso_day(value):
        raise InvalidQueryError("Invalid date format. Use YYYY-MM-DD format")
    return value


def _parse_upload(row: Dict[str, Any]) -> Optional[CVUpload]:
    try:
        return CVUpload.model_validate(row)
    except ValidationError as e:
        logger.warning("Skipping malformed upload row %s: %s", row.get("id"), e)
        return None


def _has_name(upload: CVUpload) -> bool:
    return bool(upload.extracted_json and (upload.extracted_json.candidate_name or "").strip())


def is_listable_day_candidate(upload: CVUpload) -> bool:
    """Single-day listing: named candidate from an approved country."""
    if not _has_name(upload):
        return False
    if not is_from_approved_country(upload):
        logger.info(
            "Filtering out candidate due to country restriction: %s",
            upload.extracted_json.candidate_name,
        )
        return False
    return True


def is_listable_range_candidate(upload: CVUpload) -> bool:
    """Range listing: named candidate with a positive score or some contact detail."""
    if not _has_name(upload):
        return False
    data = upload.extracted_json
    score = leading_number(data.score)
    has_score = score is not None and score > 0
    has_contact = bool((data.email_address or "").strip() or (data.contact_number or "").strip())
    return has_score or has_contact


async def candidates_for_date(
    store: CandidateStore,
    date: Optional[str],
    offset: int = 0,
    limit: int = 50,
) -> DayCandidatesResponse:
    day = _require_day(date, "date")
    if offset < 0 or limit < 1:
        raise InvalidQueryError("offset must be >= 0 and limit >= 1")
    logger.info("Fetching candidates for date %s, offset %s, limit %s", day, offset, limit)
    rows = await store.uploads_on_date(day, offset, limit)
    valid: List[Dict[str, Any]] = []
    for row in rows:
        upload = _parse_upload(row)
        if upload and is_listable_day_candidate(upload):
            valid.append(row)
    logger.info("Returning %s candidates for date %s", len(valid), day)
    return DayCandidatesResponse(candidates=valid, date=day, offset=offset, limit=limit, count=len(valid))


async def candidates_for_range(
    store: CandidateStore,
    from_date: Optional[str],
    to_date: Optional[str],
    page: int = 1,
    page_size: int = 200,
) -> RangeCandidatesResponse:
    """Uploads with from_date <= received_date < to_date (half-open), one page at a time."""
    start = _require_day(from_date, "from")
    end = _require_day(to_date, "to")
    if page < 1 or not 1 <= page_size <= RANGE_QUERY_MAX_PAGE_SIZE:
        raise InvalidQueryError(f"page must be >= 1 and pageSize between 1 and {RANGE_QUERY_MAX_PAGE_SIZE}")
    offset = (page - 1) * page_size
    logger.info("Fetching candidates from %s to %s, page %s, pageSize %s", start, end, page, page_size)
    rows, total = await store.uploads_in_range(start, end, offset, page_size)
    valid: List[Dict[str, Any]] = []
    for row in rows:
        upload = _parse_upload(row)
        if upload and is_listable_range_candidate(upload):
            valid.append(row)
    logger.info("Filtered to %s valid candidates out of %s total", len(valid), len(rows))
    return RangeCandidatesResponse(
        items=valid,
        total=total,
        valid_total=len(valid),
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
        date_range=DateRange(from_date=start, to_date=end),
    )


async def candidate_counts(store: CandidateStore, start: Optional[str], end: Optional[str]) -> Dict[str, int]:
    """Completed uploads per day over [start, end], every day present even when zero."""
    first = _require_day(start, "start")
    last = _require_day(end, "end")
    logger.info("Fetching candidate counts from %s to %s", first, last)
    counts: Dict[str, int] = {day: 0 for day in iter_days(first, last)}
    for day, n in Counter(await store.received_dates_between(first, last)).items():
        counts[day[:10]] = counts.get(day[:10], 0) + n
    return counts
