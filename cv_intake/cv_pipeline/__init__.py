"""CV processing pipeline: text extraction (PDF/DOCX/TXT), LLM extraction, status updates."""

from .cv_extractor import extract_candidate_data
from .cv_processor import InvalidTransitionError, UploadNotFoundError, process_upload
from .text_extractor import content_type_for, extract_text_from_file, is_supported_file

__all__ = [
    "extract_candidate_data",
    "extract_text_from_file",
    "content_type_for",
    "is_supported_file",
    "process_upload",
    "InvalidTransitionError",
    "UploadNotFoundError",
]
