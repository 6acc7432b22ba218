"""
HTTP endpoints: candidate queries by day, range and per-day counts,
CV upload and (re)processing, health.
"""

from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, Response, UploadFile

from api.dependencies import StoreFactory, bearer_token, get_service_store_factory, get_store
from config import (
    DATE_QUERY_DEFAULT_LIMIT,
    OPENAI_API_KEY,
    RANGE_QUERY_DEFAULT_PAGE_SIZE,
    SUPABASE_URL,
)
from cv_pipeline.cv_processor import InvalidTransitionError, UploadNotFoundError, process_upload
from cv_pipeline.text_extractor import content_type_for, is_supported_file
from schemas.api import (
    DayCandidatesResponse,
    HealthResponse,
    ProcessCVRequest,
    ProcessCVResponse,
    RangeCandidatesResponse,
    UploadCVResponse,
)
from schemas.candidate import ProcessingStatus
from services.candidate_queries import (
    InvalidQueryError,
    candidate_counts,
    candidates_for_date,
    candidates_for_range,
)
from services.candidate_store import CandidateStore, StoreError
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse(
        status="healthy",
        backend_configured=bool(SUPABASE_URL),
        llm_configured=bool(OPENAI_API_KEY),
    )


@router.get("/candidates-by-date", response_model=DayCandidatesResponse, tags=["Candidates"])
async def get_candidates_by_date(
    date: Optional[str] = Query(default=None),
    offset: int = Query(default=0),
    limit: int = Query(default=DATE_QUERY_DEFAULT_LIMIT),
    store: CandidateStore = Depends(get_store),
):
    """Completed candidates received on one day, restricted to approved countries."""
    return await candidates_for_date(store, date, offset, limit)


@router.get("/candidates-by-range", response_model=RangeCandidatesResponse, tags=["Candidates"])
async def get_candidates_by_range(
    from_date: Optional[str] = Query(default=None, alias="from"),
    to_date: Optional[str] = Query(default=None, alias="to"),
    page: int = Query(default=1),
    page_size: int = Query(default=RANGE_QUERY_DEFAULT_PAGE_SIZE, alias="pageSize"),
    store: CandidateStore = Depends(get_store),
):
    """
    Candidates with from <= received_date < to, paginated.

    - **from**, **to**: YYYY-MM-DD; `to` is exclusive
    - **page**: 1-based
    - **pageSize**: rows per page
    """
    return await candidates_for_range(store, from_date, to_date, page, page_size)


@router.get("/candidate-counts", response_model=Dict[str, int], tags=["Candidates"])
async def get_candidate_counts(
    start: Optional[str] = Query(default=None),
    end: Optional[str] = Query(default=None),
    store: CandidateStore = Depends(get_store),
):
    """Completed uploads per day from start to end inclusive; days without uploads are 0."""
    return await candidate_counts(store, start, end)


@router.post("/process-cv", response_model=ProcessCVResponse, tags=["Processing"])
async def process_cv(
    request: ProcessCVRequest,
    response: Response,
    _token: str = Depends(bearer_token),
    make_store: StoreFactory = Depends(get_service_store_factory),
):
    """Run extraction for an existing upload and mark it completed, or error."""
    logger.info("Processing CV: %s (%s) for %s", request.upload_id, request.original_filename, request.user_email)
    store = make_store()
    try:
        data = await process_upload(
            store,
            request.upload_id,
            original_filename=request.original_filename,
            source_email=request.user_email,
            file_url=request.file_url,
        )
    finally:
        await store.aclose()
    if data is None:
        response.status_code = 422
        return ProcessCVResponse(success=False, message="CV processing failed", upload_id=request.upload_id)
    return ProcessCVResponse(
        success=True,
        message="CV processed successfully",
        upload_id=request.upload_id,
        candidate_name=data.candidate_name,
        extracted_data=data.model_dump(exclude_none=True),
    )


async def _process_in_background(
    make_store: StoreFactory,
    upload_id: str,
    filename: str,
    source_email: Optional[str],
    file_bytes: bytes,
) -> None:
    store = make_store()
    try:
        await process_upload(
            store,
            upload_id,
            original_filename=filename,
            source_email=source_email,
            file_bytes=file_bytes,
        )
    except (StoreError, UploadNotFoundError, InvalidTransitionError) as e:
        logger.error("Background processing of %s failed: %s", upload_id, e)
    finally:
        await store.aclose()


@router.post("/upload-cv", response_model=UploadCVResponse, tags=["Processing"])
async def upload_cv(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    user_id: str = Form(...),
    source_email: Optional[str] = Form(default=None),
    _token: str = Depends(bearer_token),
    make_store: StoreFactory = Depends(get_service_store_factory),
):
    """Store a CV, record it as processing, and extract it after the response is sent."""
    filename = file.filename or ""
    if not is_supported_file(filename):
        raise InvalidQueryError(f"Unsupported file type: {filename or 'unnamed'}. Use PDF, DOCX or TXT")
    file_bytes = await file.read()
    if not file_bytes:
        raise InvalidQueryError("Uploaded file is empty")

    now = datetime.now(timezone.utc)
    path = f"{user_id}/{uuid4().hex}_{filename}"
    store = make_store()
    try:
        file_url = await store.upload_file(path, file_bytes, content_type_for(filename))
        row = await store.insert_upload({
            "user_id": user_id,
            "file_url": file_url,
            "original_filename": filename,
            "file_size": len(file_bytes),
            "source_email": source_email,
            "processing_status": ProcessingStatus.PROCESSING.value,
            "received_at": now.isoformat(),
            "received_date": now.date().isoformat(),
        })
    finally:
        await store.aclose()

    upload_id = str(row["id"])
    logger.info("Stored CV %s as upload %s", filename, upload_id)
    background_tasks.add_task(_process_in_background, make_store, upload_id, filename, source_email, file_bytes)
    return UploadCVResponse(
        success=True,
        message="CV uploaded, processing started",
        upload_id=upload_id,
        file_url=file_url,
        status=ProcessingStatus.PROCESSING.value,
    )
