"""
Fetch the candidates received on one calendar day.

The range endpoint is tried first over the half-open interval [day, day + 1);
when it fails or returns nothing, the single-day endpoint is asked instead.
Failures are logged and never raised: the worst outcome is an empty list.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from pydantic import BaseModel, Field

from services.intake_client import build_client
from utils.date_utils import is_iso_day, next_day
from utils.logger import get_logger

logger = get_logger(__name__)

RANGE_ENDPOINT = "candidates-by-range"
DATE_ENDPOINT = "candidates-by-date"

# (endpoint, query params)
RemoteQuery = Tuple[str, Dict[str, str]]


class FetchStatus(str, Enum):
    FOUND = "found"
    EMPTY = "empty"    # at least one endpoint answered, none had candidates
    FAILED = "failed"  # every endpoint failed


class FetchResult(BaseModel):
    """Outcome of the fallback policy. `endpoint` names the endpoint that supplied the candidates."""

    status: FetchStatus
    candidates: List[Any] = Field(default_factory=list)
    endpoint: Optional[str] = None
    errors: List[str] = Field(default_factory=list)


def normalize_candidates(payload: Any) -> List[Any]:
    """Accept a bare list, {'candidates': [...]} or {'items': [...]}; anything else is empty."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if isinstance(payload.get("candidates"), list):
            return payload["candidates"]
        if isinstance(payload.get("items"), list):
            return payload["items"]
    return []


def day_queries(day: str) -> List[RemoteQuery]:
    """Ordered attempts for one day: range first, single day as fallback."""
    return [
        (RANGE_ENDPOINT, {"from": day, "to": next_day(day)}),
        (DATE_ENDPOINT, {"date": day}),
    ]


async def run_fallback_policy(client: httpx.AsyncClient, queries: Sequence[RemoteQuery]) -> FetchResult:
    """
    Try each query in order; the first non-empty normalized result wins.
    A failed or empty attempt moves on to the next one. Never raises.
    """
    errors: List[str] = []
    answered = False
    for endpoint, params in queries:
        try:
            response = await client.get(endpoint, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("%s HTTP error %s, trying fallback", endpoint, e.response.status_code)
            errors.append(f"{endpoint}: HTTP {e.response.status_code}")
            continue
        except Exception as e:
            logger.warning("%s request failed, trying fallback: %s", endpoint, e)
            errors.append(f"{endpoint}: {e}")
            continue
        answered = True
        candidates = normalize_candidates(payload)
        if candidates:
            logger.info("%s returned %s candidates for %s", endpoint, len(candidates), params)
            return FetchResult(status=FetchStatus.FOUND, candidates=candidates, endpoint=endpoint, errors=errors)
        logger.info("%s returned no candidates for %s", endpoint, params)
    return FetchResult(status=FetchStatus.EMPTY if answered else FetchStatus.FAILED, errors=errors)


async def fetch_day_result(day: str, client: Optional[httpx.AsyncClient] = None) -> FetchResult:
    """Candidates for a YYYY-MM-DD day with the outcome made explicit."""
    if not is_iso_day(day):
        logger.error("Invalid day %r; expected YYYY-MM-DD", day)
        return FetchResult(status=FetchStatus.FAILED, errors=[f"invalid day: {day!r}"])
    if client is not None:
        return await run_fallback_policy(client, day_queries(day))
    async with build_client() as own_client:
        return await run_fallback_policy(own_client, day_queries(day))


async def fetch_by_day(day: str, client: Optional[httpx.AsyncClient] = None) -> List[Any]:
    """Candidates for a YYYY-MM-DD day; empty list when nothing was found or every call failed."""
    result = await fetch_day_result(day, client)
    return result.candidates
