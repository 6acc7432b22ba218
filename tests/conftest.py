# Pytest fixtures. Run: pytest tests/ -v
# The API tests replace the backend store with an in-memory fake via dependency_overrides.

import copy
from typing import Any, Dict, List, Optional

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from api.dependencies import bearer_token, get_service_store_factory, get_store
from api.server import app
from schemas.candidate import CVUpload
from services.candidate_store import StoreError

AUTH = {"Authorization": "Bearer test-token"}


def candidate_data(**overrides) -> Dict[str, Any]:
    """A complete, qualified South African teacher; override any field."""
    data = {
        "candidate_name": "Thandi Nkosi",
        "email_address": "thandi.nkosi@example.com",
        "contact_number": "+27 82 555 0101",
        "countries": "South Africa",
        "skill_set": "Mathematics, Physical Science",
        "educational_qualifications": "B.Ed (Senior Phase), University of Pretoria, 2015",
        "job_history": "Mathematics teacher for 6 years at Pretoria High School",
        "current_employment": "Mathematics Teacher, Pretoria High School",
        "score": "8",
        "justification": "Experienced maths teacher with a completed B.Ed.",
    }
    data.update(overrides)
    return data


def upload_row(upload_id: str = "u1", data: Optional[Dict[str, Any]] = None, **fields) -> Dict[str, Any]:
    row = {
        "id": upload_id,
        "user_id": "user-1",
        "file_url": f"https://files.test/{upload_id}.txt",
        "original_filename": f"{upload_id}.txt",
        "source_email": "inbox@school.test",
        "processing_status": "completed",
        "extracted_json": candidate_data() if data is None else data,
        "received_date": "2024-01-15",
    }
    row.update(fields)
    return row


def make_upload(upload_id: str = "u1", **data_overrides) -> CVUpload:
    return CVUpload.model_validate(upload_row(upload_id, candidate_data(**data_overrides)))


class FakeStore:
    """In-memory stand-in for CandidateStore. Set `fail` to make every query raise StoreError."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, total: Optional[int] = None):
        self.rows = [copy.deepcopy(r) for r in rows or []]
        self.total = total
        self.fail: Optional[StoreError] = None
        self.calls: List[tuple] = []
        self.updates: List[tuple] = []
        self.files: Dict[str, bytes] = {}
        self.closed = 0

    def _check(self):
        if self.fail is not None:
            raise self.fail

    async def uploads_on_date(self, day, offset, limit):
        self.calls.append(("uploads_on_date", day, offset, limit))
        self._check()
        return [r for r in self.rows if r.get("received_date") == day][offset:offset + limit]

    async def uploads_in_range(self, start, end_exclusive, offset, limit):
        self.calls.append(("uploads_in_range", start, end_exclusive, offset, limit))
        self._check()
        matched = [r for r in self.rows if start <= (r.get("received_date") or "") < end_exclusive]
        total = self.total if self.total is not None else len(matched)
        return matched[offset:offset + limit], total

    async def received_dates_between(self, start, end):
        self.calls.append(("received_dates_between", start, end))
        self._check()
        return [
            r["received_date"] for r in self.rows
            if r.get("received_date") and start <= r["received_date"] <= end
            and r.get("processing_status") == "completed"
        ]

    async def get_upload(self, upload_id):
        self._check()
        return next((copy.deepcopy(r) for r in self.rows if r["id"] == upload_id), None)

    async def insert_upload(self, row):
        self._check()
        stored = {"id": f"new-{len(self.rows) + 1}", **row}
        self.rows.append(stored)
        return copy.deepcopy(stored)

    async def update_upload(self, upload_id, fields):
        self._check()
        self.updates.append((upload_id, fields))
        for row in self.rows:
            if row["id"] == upload_id:
                row.update(fields)
                return copy.deepcopy(row)
        raise StoreError(f"Upload {upload_id} not found", status_code=404)

    async def upload_file(self, path, content, content_type):
        self.files[path] = content
        return f"https://files.test/{path}"

    async def download_file(self, url):
        for path, content in self.files.items():
            if url.endswith(path):
                return content
        raise StoreError(f"Could not download {url}", status_code=404)

    async def aclose(self):
        self.closed += 1

    def row(self, upload_id):
        return next(r for r in self.rows if r["id"] == upload_id)


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def client(fake_store):
    def _store(token: str = Depends(bearer_token)):
        return fake_store

    app.dependency_overrides[get_store] = _store
    app.dependency_overrides[get_service_store_factory] = lambda: (lambda: fake_store)
    yield TestClient(app)
    app.dependency_overrides.clear()
