"""CSV export of qualified candidates."""

import csv
import io
from typing import Iterable, List

from config import MIN_QUALIFIED_SCORE
from schemas.candidate import CVUpload, ProcessingStatus
from utils.date_utils import effective_date_string, today_string
from utils.helpers import leading_number
from utils.logger import get_logger

logger = get_logger(__name__)

EXPORT_COLUMNS = [
    "Candidate Name",
    "Email",
    "Phone",
    "Countries",
    "Current Employment",
    "Education",
    "Experience",
    "Score",
    "Uploaded At",
    "Justification",
]

_REQUIRED = (
    "candidate_name",
    "contact_number",
    "email_address",
    "countries",
    "current_employment",
    "educational_qualifications",
    "job_history",
    "justification",
)


def is_exportable(upload: CVUpload) -> bool:
    """Completed, every column filled in, score at least the qualifying minimum."""
    data = upload.extracted_json
    if upload.processing_status != ProcessingStatus.COMPLETED or data is None:
        return False
    if not all(getattr(data, field) for field in _REQUIRED):
        return False
    return (leading_number(data.score or "0") or 0) >= MIN_QUALIFIED_SCORE


def _countries_text(value) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return value or ""


def export_rows(uploads: Iterable[CVUpload]) -> List[List[str]]:
    rows = []
    for upload in uploads:
        if not is_exportable(upload):
            continue
        data = upload.extracted_json
        rows.append([
            data.candidate_name or "",
            data.email_address or "",
            data.contact_number or "",
            _countries_text(data.countries),
            data.current_employment or "",
            data.educational_qualifications or "",
            data.job_history or "",
            data.score or "0",
            effective_date_string(upload.received_date, data.date_received) or today_string(),
            data.justification or "",
        ])
    return rows


def export_candidates_csv(uploads: Iterable[CVUpload]) -> bytes:
    """UTF-8 CSV with a header row. Only the header when nothing qualifies."""
    rows = export_rows(uploads)
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    writer.writerows(rows)
    logger.info("Exported %s qualified candidates", len(rows))
    return buffer.getvalue().encode("utf-8")


def export_filename(prefix: str = "candidates") -> str:
    return f"{prefix}_{today_string()}.csv"
