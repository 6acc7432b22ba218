"""Async access to the cv_uploads table and CV file storage of the managed backend (Supabase REST)."""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from config import (
    CV_UPLOAD_BUCKET,
    HTTP_TIMEOUT_SECONDS,
    SUPABASE_ANON_KEY,
    SUPABASE_URL,
    UPLOADS_TABLE,
)
from utils.logger import get_logger

logger = get_logger(__name__)

Params = List[Tuple[str, str]]


class StoreError(Exception):
    """A backend request failed. `status_code` is None for transport errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


def _total_from_content_range(header: Optional[str]) -> Optional[int]:
    """PostgREST exact count: '0-24/3573' -> 3573, '*/0' -> 0."""
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


class CandidateStore:
    """
    Thin client over PostgREST (/rest/v1) and Storage (/storage/v1).
    Requests carry the caller's bearer token so row-level security applies;
    the service role key is used only for pipeline writes.
    """

    def __init__(
        self,
        base_url: str = SUPABASE_URL,
        api_key: str = SUPABASE_ANON_KEY,
        access_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        bucket: str = CV_UPLOAD_BUCKET,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._bucket = bucket
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self._base_url, timeout=HTTP_TIMEOUT_SECONDS)

    async def __aenter__(self) -> "CandidateStore":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Params] = None,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method,
                f"{self._base_url}/{path}",
                params=params,
                json=json,
                content=content,
                headers={**self._headers, **(headers or {})},
            )
        except httpx.HTTPError as e:
            logger.error("Backend request %s %s failed: %s", method, path, e)
            raise StoreError(f"Backend request failed: {method} {path}", details=str(e)) from e
        if response.status_code >= 400:
            logger.error("Backend %s %s returned %s: %s", method, path, response.status_code, response.text)
            raise StoreError(
                f"Backend returned {response.status_code} for {method} {path}",
                status_code=response.status_code,
                details=response.text,
            )
        return response

    async def uploads_on_date(self, day: str, offset: int, limit: int) -> List[Dict[str, Any]]:
        """Completed uploads with extracted data received on `day`, newest first."""
        params: Params = [
            ("select", "*"),
            ("received_date", f"eq.{day}"),
            ("processing_status", "eq.completed"),
            ("extracted_json", "not.is.null"),
            ("order", "received_date.desc"),
            ("offset", str(offset)),
            ("limit", str(limit)),
        ]
        response = await self._request("GET", f"rest/v1/{UPLOADS_TABLE}", params=params)
        return response.json() or []

    async def uploads_in_range(
        self,
        start: str,
        end_exclusive: str,
        offset: int,
        limit: int,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Uploads with extracted data and start <= received_date < end_exclusive, plus the exact total."""
        params: Params = [
            ("select", "*"),
            ("received_date", f"gte.{start}"),
            ("received_date", f"lt.{end_exclusive}"),
            ("extracted_json", "not.is.null"),
            ("order", "received_date.desc"),
            ("offset", str(offset)),
            ("limit", str(limit)),
        ]
        response = await self._request(
            "GET",
            f"rest/v1/{UPLOADS_TABLE}",
            params=params,
            headers={"Prefer": "count=exact"},
        )
        rows = response.json() or []
        total = _total_from_content_range(response.headers.get("content-range"))
        return rows, total if total is not None else len(rows)

    async def received_dates_between(self, start: str, end: str) -> List[str]:
        """received_date of every completed upload with start <= received_date <= end."""
        params: Params = [
            ("select", "received_date"),
            ("received_date", f"gte.{start}"),
            ("received_date", f"lte.{end}"),
            ("processing_status", "eq.completed"),
            ("received_date", "not.is.null"),
        ]
        response = await self._request("GET", f"rest/v1/{UPLOADS_TABLE}", params=params)
        return [row["received_date"] for row in response.json() or [] if row.get("received_date")]

    async def get_upload(self, upload_id: str) -> Optional[Dict[str, Any]]:
        params: Params = [("select", "*"), ("id", f"eq.{upload_id}"), ("limit", "1")]
        response = await self._request("GET", f"rest/v1/{UPLOADS_TABLE}", params=params)
        rows = response.json() or []
        return rows[0] if rows else None

    async def insert_upload(self, row: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            f"rest/v1/{UPLOADS_TABLE}",
            json=row,
            headers={"Prefer": "return=representation"},
        )
        rows = response.json() or []
        if not rows:
            raise StoreError("Insert returned no row")
        return rows[0]

    async def update_upload(self, upload_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request(
            "PATCH",
            f"rest/v1/{UPLOADS_TABLE}",
            params=[("id", f"eq.{upload_id}")],
            json=fields,
            headers={"Prefer": "return=representation"},
        )
        rows = response.json() or []
        if not rows:
            raise StoreError(f"Upload {upload_id} not found", status_code=404)
        return rows[0]

    def public_url(self, path: str) -> str:
        return f"{self._base_url}/storage/v1/object/public/{self._bucket}/{quote(path)}"

    async def upload_file(self, path: str, content: bytes, content_type: str) -> str:
        """Store a CV file in the bucket and return its public URL."""
        await self._request(
            "POST",
            f"storage/v1/object/{self._bucket}/{quote(path)}",
            content=content,
            headers={"Content-Type": content_type or "application/octet-stream"},
        )
        return self.public_url(path)

    async def download_file(self, url: str) -> bytes:
        try:
            response = await self._client.get(url, headers=self._headers, follow_redirects=True)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise StoreError(f"Could not download {url}", details=str(e)) from e
        return response.content
