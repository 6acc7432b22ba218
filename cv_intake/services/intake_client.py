"""HTTP client for the candidate query and upload endpoints (used by the dashboard)."""

from typing import Any, Dict, Optional

import httpx

from config import CANDIDATES_API_URL, HTTP_TIMEOUT_SECONDS, SUPABASE_ACCESS_TOKEN, SUPABASE_ANON_KEY
from utils.logger import get_logger

logger = get_logger(__name__)


def auth_headers(access_token: Optional[str] = None) -> Dict[str, str]:
    """Bearer token of the signed-in user plus the project's public api key, when configured."""
    headers: Dict[str, str] = {}
    token = access_token if access_token is not None else SUPABASE_ACCESS_TOKEN
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if SUPABASE_ANON_KEY:
        headers["apikey"] = SUPABASE_ANON_KEY
    return headers


def build_client(
    base_url: str = CANDIDATES_API_URL,
    access_token: Optional[str] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        headers=auth_headers(access_token),
        timeout=HTTP_TIMEOUT_SECONDS,
    )


async def fetch_candidate_counts(
    start: str,
    end: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, int]:
    """Per-day completed upload counts for the calendar strip. Empty dict on failure."""
    own_client = client is None
    client = client or build_client()
    try:
        response = await client.get("candidate-counts", params={"start": start, "end": end})
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error("candidate-counts HTTP error: %s %s", e.response.status_code, e.response.text)
        return {}
    except Exception as e:
        logger.exception("candidate-counts request failed: %s", e)
        return {}
    finally:
        if own_client:
            await client.aclose()
    if not isinstance(data, dict):
        return {}
    return {str(k): int(v) for k, v in data.items() if isinstance(v, (int, float))}


async def submit_cv_upload(
    file_bytes: bytes,
    filename: str,
    user_id: str,
    source_email: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[Dict[str, Any]]:
    """Send a CV to the upload endpoint. Returns the upload response, or None on failure."""
    own_client = client is None
    client = client or build_client()
    form = {"user_id": user_id}
    if source_email:
        form["source_email"] = source_email
    try:
        response = await client.post(
            "upload-cv",
            data=form,
            files={"file": (filename, file_bytes)},
        )
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        logger.error("upload-cv HTTP error: %s %s", e.response.status_code, e.response.text)
        return None
    except Exception as e:
        logger.exception("upload-cv request failed: %s", e)
        return None
    finally:
        if own_client:
            await client.aclose()
