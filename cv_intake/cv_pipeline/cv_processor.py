"""Process one stored CV upload: processing -> extract -> completed, or error."""

from datetime import datetime, timezone
from typing import Optional

from openai import AsyncOpenAI

from cv_pipeline.cv_extractor import extract_candidate_data
from cv_pipeline.text_extractor import extract_text_from_file
from schemas.candidate import CandidateData, ProcessingStatus, can_transition
from services.candidate_store import CandidateStore, StoreError
from utils.logger import get_logger

logger = get_logger(__name__)


class UploadNotFoundError(LookupError):
    pass


class InvalidTransitionError(ValueError):
    """The upload's current status does not allow (re)processing."""


def _status(value: Optional[str]) -> Optional[ProcessingStatus]:
    try:
        return ProcessingStatus(value) if value else None
    except ValueError:
        return None


async def mark_status(store: CandidateStore, upload_id: str, current: Optional[ProcessingStatus],
                      target: ProcessingStatus, **fields) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(f"Upload {upload_id}: cannot move from {current} to {target.value}")
    await store.update_upload(upload_id, {"processing_status": target.value, **fields})


async def process_upload(
    store: CandidateStore,
    upload_id: str,
    original_filename: Optional[str] = None,
    source_email: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_url: Optional[str] = None,
    llm_client: Optional[AsyncOpenAI] = None,
) -> Optional[CandidateData]:
    """
    Extract candidate data for an upload and persist it.

    The file is downloaded from `file_url` (or the stored one) unless bytes are given.
    Extraction failures are logged and leave the upload in `error`; the return value is then None.
    Raises UploadNotFoundError, InvalidTransitionError, or StoreError when the record itself cannot be read or written.
    """
    row = await store.get_upload(upload_id)
    if row is None:
        raise UploadNotFoundError(f"Upload {upload_id} not found")
    status = _status(row.get("processing_status"))
    if status != ProcessingStatus.PROCESSING:
        await mark_status(store, upload_id, status, ProcessingStatus.PROCESSING)
        status = ProcessingStatus.PROCESSING

    filename = original_filename or row.get("original_filename") or ""
    logger.info("Processing CV %s (%s)", upload_id, filename)
    data: Optional[CandidateData] = None
    try:
        if file_bytes is None:
            url = file_url or row.get("file_url")
            if not url:
                raise StoreError(f"Upload {upload_id} has no file_url")
            file_bytes = await store.download_file(url)
        text = extract_text_from_file(file_bytes, filename)
        if text:
            data = await extract_candidate_data(text, client=llm_client)
    except StoreError as e:
        logger.error("Could not fetch CV file for %s: %s", upload_id, e)
    except Exception:
        logger.exception("Unexpected failure while processing %s", upload_id)

    if data is None:
        logger.error("CV processing failed for %s", upload_id)
        await mark_status(store, upload_id, status, ProcessingStatus.ERROR)
        return None

    data.date_extracted = datetime.now(timezone.utc).isoformat()
    if not data.date_received and row.get("received_date"):
        data.date_received = row["received_date"]
    fields = {"extracted_json": data.model_dump(exclude_none=True)}
    if source_email:
        fields["source_email"] = source_email
    await mark_status(store, upload_id, status, ProcessingStatus.COMPLETED, **fields)
    logger.info("Processed CV %s: %s", upload_id, data.candidate_name)
    return data
