import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from conftest import FakeStore, candidate_data, upload_row

from cv_pipeline.cv_extractor import extract_candidate_data
from cv_pipeline.cv_processor import InvalidTransitionError, UploadNotFoundError, process_upload
from cv_pipeline.text_extractor import clean_cv_text, content_type_for, extract_text_from_file, is_supported_file
from schemas.candidate import CandidateData
from services.candidate_store import CandidateStore

CV_TEXT = (
    "Thandi Nkosi\nthandi.nkosi@example.com\n\n\n\n"
    "B.Ed (Senior Phase), University of Pretoria\n"
    "Mathematics teacher for 6 years"
)


class FakeLLM:
    """Mimics AsyncOpenAI.chat.completions.create with a canned reply."""

    def __init__(self, content):
        self.content = content
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def _create(self, **kwargs):
        self.requests.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def test_text_file_extraction_and_cleaning():
    text = extract_text_from_file(CV_TEXT.encode("utf-8"), "thandi.TXT")
    assert text.startswith("Thandi Nkosi")
    assert "\n\n\n" not in text


def test_unsupported_or_empty_files():
    assert extract_text_from_file(b"data", "cv.odt") is None
    assert extract_text_from_file(b"   ", "cv.txt") is None
    assert not is_supported_file("cv.doc")
    assert content_type_for("cv.PDF") == "application/pdf"
    assert content_type_for("cv") == "application/octet-stream"


def test_clean_cv_text_truncates():
    cleaned = clean_cv_text("word  " * 100, max_chars=20)
    assert cleaned.endswith("[Content truncated.]")
    assert cleaned.startswith("word word")


def test_extraction_parses_fenced_json():
    reply = "```json\n" + json.dumps({**candidate_data(), "score": 8}) + "\n```"
    llm = FakeLLM(reply)
    data = asyncio.run(extract_candidate_data(CV_TEXT, client=llm))
    assert data.candidate_name == "Thandi Nkosi"
    assert data.score == "8"
    assert llm.requests[0]["messages"][1]["content"].startswith("CV content:")


@pytest.mark.parametrize("reply", ["not json", "[1, 2]", ""])
def test_extraction_unusable_reply(reply):
    assert asyncio.run(extract_candidate_data(CV_TEXT, client=FakeLLM(reply))) is None


def test_extraction_skips_short_text():
    llm = FakeLLM("{}")
    assert asyncio.run(extract_candidate_data("too short", client=llm)) is None
    assert llm.requests == []


def _store_with_pending_upload():
    store = FakeStore([upload_row("u1", data=None, processing_status="pending", extracted_json=None,
                                  file_url="https://files.test/user-1/u1.txt")])
    store.files["user-1/u1.txt"] = CV_TEXT.encode("utf-8")
    return store


def test_process_upload_moves_through_processing_to_completed():
    store = _store_with_pending_upload()
    llm = FakeLLM(json.dumps(candidate_data()))
    data = asyncio.run(process_upload(store, "u1", "u1.txt", source_email="hr@school.test", llm_client=llm))

    assert isinstance(data, CandidateData)
    assert [fields["processing_status"] for _, fields in store.updates] == ["processing", "completed"]
    row = store.row("u1")
    assert row["processing_status"] == "completed"
    assert row["source_email"] == "hr@school.test"
    assert row["extracted_json"]["candidate_name"] == "Thandi Nkosi"
    assert row["extracted_json"]["date_extracted"]
    assert row["extracted_json"]["date_received"] == "2024-01-15"


def test_process_upload_marks_error_when_extraction_fails():
    store = _store_with_pending_upload()
    data = asyncio.run(process_upload(store, "u1", "u1.txt", llm_client=FakeLLM("nonsense")))
    assert data is None
    assert store.row("u1")["processing_status"] == "error"


def test_process_upload_marks_error_when_file_missing():
    store = _store_with_pending_upload()
    store.files.clear()
    assert asyncio.run(process_upload(store, "u1", "u1.txt", llm_client=FakeLLM("{}"))) is None
    assert store.row("u1")["processing_status"] == "error"


def test_error_upload_can_be_reprocessed():
    store = _store_with_pending_upload()
    store.row("u1")["processing_status"] = "error"
    llm = FakeLLM(json.dumps(candidate_data()))
    assert asyncio.run(process_upload(store, "u1", file_bytes=CV_TEXT.encode(), llm_client=llm))
    assert store.row("u1")["processing_status"] == "completed"


def test_completed_upload_is_not_reprocessed():
    store = FakeStore([upload_row("u1")])
    with pytest.raises(InvalidTransitionError):
        asyncio.run(process_upload(store, "u1", "u1.txt", llm_client=FakeLLM("{}")))
    assert store.updates == []


def test_unknown_upload():
    with pytest.raises(UploadNotFoundError):
        asyncio.run(process_upload(FakeStore(), "missing", "cv.txt"))


def test_process_upload_marks_error_on_malformed_file_url():
    store = _store_with_pending_upload()
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    real = CandidateStore(base_url="https://proj.test", api_key="anon", access_token="jwt", client=client)
    store.download_file = real.download_file
    store.row("u1")["file_url"] = "http://[::1"
    assert asyncio.run(process_upload(store, "u1", "u1.txt", llm_client=FakeLLM("{}"))) is None
    assert store.row("u1")["processing_status"] == "error"


def test_process_upload_marks_error_on_unexpected_failure():
    store = _store_with_pending_upload()

    async def broken_download(url):
        raise RuntimeError("disk full")

    store.download_file = broken_download
    assert asyncio.run(process_upload(store, "u1", "u1.txt", llm_client=FakeLLM("{}"))) is None
    assert store.row("u1")["processing_status"] == "error"
