"""Read plain text out of uploaded CV files (PDF, DOCX, TXT). Works on bytes in memory."""

import re
import unicodedata
from io import BytesIO
from pathlib import PurePath
from typing import Callable, Dict, Optional

from config import CV_TEXT_MAX_CHARS
from utils.logger import get_logger

logger = get_logger(__name__)

CONTENT_TYPES: Dict[str, str] = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
}


def file_extension(filename: Optional[str]) -> str:
    return PurePath((filename or "").strip()).suffix.lower()


def is_supported_file(filename: Optional[str]) -> bool:
    return file_extension(filename) in CONTENT_TYPES


def content_type_for(filename: Optional[str]) -> str:
    return CONTENT_TYPES.get(file_extension(filename), "application/octet-stream")


def clean_cv_text(text: Optional[str], max_chars: int = CV_TEXT_MAX_CHARS) -> str:
    """NFC-normalize, collapse runs of spaces and blank lines, cap the length."""
    if not text or not text.strip():
        return ""
    cleaned = unicodedata.normalize("NFC", text).replace("\x00", "")
    cleaned = re.sub(r"[ \t]+", " ", cleaned)
    cleaned = re.sub(r"\n\s*\n\s*\n", "\n\n", cleaned).strip()
    if len(cleaned) > max_chars:
        cleaned = cleaned[:max_chars] + "\n\n[Content truncated.]"
    return cleaned


def _read_pdf(data: BytesIO) -> Optional[str]:
    import pdfplumber

    with pdfplumber.open(data) as pdf:
        pages = [page.extract_text() for page in pdf.pages]
    parts = [p for p in pages if p]
    return "\n\n".join(parts) if parts else None


def _read_docx(data: BytesIO) -> Optional[str]:
    from docx import Document

    document = Document(data)
    parts = [p.text for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [c.text.strip() for c in row.cells if c.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n\n".join(parts) if parts else None


def _read_txt(data: BytesIO) -> Optional[str]:
    return data.getvalue().decode("utf-8", errors="replace")


READERS: Dict[str, Callable[[BytesIO], Optional[str]]] = {
    ".pdf": _read_pdf,
    ".docx": _read_docx,
    ".txt": _read_txt,
}


def extract_text_from_file(file_bytes: bytes, filename: str) -> Optional[str]:
    """
    Cleaned text of a CV file, or None when the type is unsupported,
    the file cannot be parsed, or it holds no text.
    """
    ext = file_extension(filename)
    reader = READERS.get(ext)
    if reader is None:
        logger.warning("Unsupported CV file type: %s", filename)
        return None
    try:
        raw = reader(BytesIO(file_bytes))
    except Exception as e:
        logger.exception("Text extraction failed for %s: %s", filename, e)
        return None
    cleaned = clean_cv_text(raw)
    if not cleaned:
        logger.warning("No text found in %s", filename)
        return None
    return cleaned
