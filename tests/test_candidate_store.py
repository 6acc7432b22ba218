import asyncio

import httpx
import pytest

from services.candidate_store import CandidateStore, StoreError


def _store(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CandidateStore(base_url="https://proj.test", api_key="anon", access_token="user-jwt", client=client)


def test_range_query_filters_and_exact_count():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[{"id": "a"}], headers={"Content-Range": "0-0/37"})

    rows, total = asyncio.run(_store(handler).uploads_in_range("2024-01-15", "2024-01-16", 200, 200))
    request = seen[0]
    assert rows == [{"id": "a"}]
    assert total == 37
    assert request.url.path == "/rest/v1/cv_uploads"
    assert request.url.params.get_list("received_date") == ["gte.2024-01-15", "lt.2024-01-16"]
    assert request.url.params["offset"] == "200"
    assert request.headers["Prefer"] == "count=exact"
    assert request.headers["Authorization"] == "Bearer user-jwt"
    assert request.headers["apikey"] == "anon"


def test_date_query_only_completed_rows():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    assert asyncio.run(_store(handler).uploads_on_date("2024-01-15", 0, 50)) == []
    params = seen[0].url.params
    assert params["received_date"] == "eq.2024-01-15"
    assert params["processing_status"] == "eq.completed"
    assert params["order"] == "received_date.desc"
    assert params["limit"] == "50"


def test_error_status_raises_store_error():
    def handler(request):
        return httpx.Response(503, text="upstream down")

    with pytest.raises(StoreError) as info:
        asyncio.run(_store(handler).received_dates_between("2024-01-01", "2024-01-07"))
    assert info.value.status_code == 503
    assert info.value.details == "upstream down"


def test_transport_error_raises_store_error():
    def handler(request):
        raise httpx.ConnectError("refused")

    with pytest.raises(StoreError) as info:
        asyncio.run(_store(handler).get_upload("u1"))
    assert info.value.status_code is None


def test_update_of_missing_row_is_not_found():
    def handler(request):
        assert request.method == "PATCH"
        assert request.url.params["id"] == "eq.missing"
        return httpx.Response(200, json=[])

    with pytest.raises(StoreError) as info:
        asyncio.run(_store(handler).update_upload("missing", {"processing_status": "error"}))
    assert info.value.status_code == 404


def test_upload_file_returns_public_url():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"Key": "cv-uploads/user-1/cv.pdf"})

    url = asyncio.run(_store(handler).upload_file("user-1/cv.pdf", b"%PDF", "application/pdf"))
    assert url == "https://proj.test/storage/v1/object/public/cv-uploads/user-1/cv.pdf"
    assert seen[0].url.path == "/storage/v1/object/cv-uploads/user-1/cv.pdf"
    assert seen[0].headers["Content-Type"] == "application/pdf"


def test_malformed_file_url_raises_store_error():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(StoreError) as info:
        asyncio.run(_store(handler).download_file("http://[::1"))
    assert "Could not download" in str(info.value)
