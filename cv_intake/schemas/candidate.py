"""Candidate data extracted from CVs and the persisted upload record."""

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProcessingStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


# Lifecycle owned by the processing pipeline: error uploads may be reprocessed.
ALLOWED_TRANSITIONS = {
    ProcessingStatus.PENDING: {ProcessingStatus.PROCESSING},
    ProcessingStatus.PROCESSING: {ProcessingStatus.COMPLETED, ProcessingStatus.ERROR},
    ProcessingStatus.ERROR: {ProcessingStatus.PROCESSING},
    ProcessingStatus.COMPLETED: set(),
}


def can_transition(current: Optional[ProcessingStatus], target: ProcessingStatus) -> bool:
    """True if an upload in `current` status may move to `target`. Unknown current counts as pending."""
    return target in ALLOWED_TRANSITIONS[current or ProcessingStatus.PENDING]


class CandidateData(BaseModel):
    """Structured candidate fields produced by the extraction pipeline. All values are untrusted text."""

    model_config = ConfigDict(extra="allow")

    candidate_name: Optional[str] = Field(default=None, description="Full name")
    email_address: Optional[str] = None
    contact_number: Optional[str] = None
    educational_qualifications: Optional[str] = None
    job_history: Optional[str] = None
    current_employment: Optional[str] = None
    skill_set: Optional[str] = None
    score: Optional[str] = Field(default=None, description="Fit score as text, e.g. '7', '8/10', '85'")
    justification: Optional[str] = None
    countries: Optional[Union[str, List[str]]] = None
    date_received: Optional[str] = None
    date_extracted: Optional[str] = None

    @field_validator(
        "candidate_name", "email_address", "contact_number", "educational_qualifications",
        "job_history", "current_employment", "skill_set", "score", "justification",
        "date_received", "date_extracted",
        mode="before",
    )
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        # The extractor sometimes returns numbers or bullet lists instead of a text blob
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, list):
            return "\n".join(str(v) for v in value if v is not None)
        if isinstance(value, dict):
            return value
        return str(value)

    @field_validator("countries", mode="before")
    @classmethod
    def _countries_as_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, list):
            return [v if isinstance(v, str) else str(v) for v in value if v is not None]
        if isinstance(value, dict):
            return value
        return str(value)


class CVUpload(BaseModel):
    """Row of the cv_uploads table."""

    model_config = ConfigDict(extra="allow")

    id: str
    user_id: Optional[str] = None
    file_url: Optional[str] = None
    original_filename: Optional[str] = None
    file_size: Optional[int] = None
    source_email: Optional[str] = None
    extracted_json: Optional[CandidateData] = None
    processing_status: Optional[ProcessingStatus] = None
    uploaded_at: Optional[str] = None
    received_at: Optional[str] = None
    received_date: Optional[str] = None

    @property
    def has_extraction(self) -> bool:
        return self.processing_status == ProcessingStatus.COMPLETED and self.extracted_json is not None
