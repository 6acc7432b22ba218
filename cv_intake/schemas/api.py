"""Request/response payloads of the candidate query and processing endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DayCandidatesResponse(BaseModel):
    candidates: List[Dict[str, Any]] = Field(default_factory=list)
    date: str
    offset: int
    limit: int
    count: int


class DateRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_date: str = Field(..., alias="from")
    to_date: str = Field(..., alias="to")


class RangeCandidatesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    valid_total: int = Field(default=0, alias="validTotal")
    page: int = 1
    page_size: int = Field(default=200, alias="pageSize")
    total_pages: int = Field(default=0, alias="totalPages")
    date_range: DateRange = Field(..., alias="dateRange")


class ProcessCVRequest(BaseModel):
    upload_id: str
    file_url: Optional[str] = None
    original_filename: str
    user_email: str


class ProcessCVResponse(BaseModel):
    success: bool
    message: str
    upload_id: str
    candidate_name: Optional[str] = None
    extracted_data: Optional[Dict[str, Any]] = None


class UploadCVResponse(BaseModel):
    success: bool
    message: str
    upload_id: str
    file_url: str
    status: str


class HealthResponse(BaseModel):
    status: str
    backend_configured: bool
    llm_configured: bool
