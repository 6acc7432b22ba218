"""Heuristic extraction of degree, experience and subject from candidate free text. Never raises."""

import re
from typing import Any, Dict, Optional, Tuple, Union

from rules.teaching_quals import has_completed_teaching_degree
from schemas.candidate import CandidateData, CVUpload

NO_DEGREE = "No Degree"
NEWLY_QUALIFIED = "Newly Qualified"
SUBJECT_NOT_SPECIFIED = "Subject not specified"

# Ordered: first pattern that matches anywhere wins. Abbreviations need a word
# boundary on both sides so "diploma" does not read as an M.A.
DEGREE_PATTERNS: Tuple[re.Pattern, ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bbachelor\s+of\s+education\b",
        r"\bb\.?\s*ed\b\.?",
        r"\bpgce\b",
        r"\bpost\s*graduate\s+certificate\s+in\s+education\b",
        r"\bmaster\s+of\s+education\b",
        r"\bm\.?\s*ed\b\.?",
        r"\bdiploma\s+in\s+education\b",
        r"\bteaching\s+qualification\b",
        r"\bbachelor\s+of\s+arts\b",
        r"\bbachelor\s+of\s+science\b",
        r"\bb\.?\s*a\b\.?",
        r"\bb\.?\s*sc\b\.?",
        r"\bmaster\s+of\s+arts\b",
        r"\bmaster\s+of\s+science\b",
        r"\bm\.?\s*a\b\.?",
        r"\bm\.?\s*sc\b\.?",
    )
)

# Every match of every pattern is considered; the largest number wins.
EXPERIENCE_PATTERNS: Tuple[re.Pattern, ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"(\d+)\s*years?\s*(?:of\s*)?(?:teaching|experience)",
        r"(?:teaching|experience)\s*(?:for\s*)?(\d+)\s*years?",
        r"(\d+)\+?\s*years?\s*teacher",
        r"teacher\s*(?:for\s*)?(\d+)\s*years?",
    )
)

TEACHING_SUBJECTS: Tuple[str, ...] = (
    "mathematics", "math", "maths",
    "english", "language arts", "literacy",
    "science", "physics", "chemistry", "biology",
    "history", "social studies",
    "geography",
    "art", "visual arts",
    "music",
    "physical education", "pe", "sports",
    "drama", "theatre",
    "computer science", "ict", "technology",
    "french", "spanish", "german", "languages",
    "religious education", "re",
    "economics", "business studies",
    "psychology",
    "philosophy",
)

CandidateSource = Union[str, CandidateData, Dict[str, Any], None]


def _field_text(source: CandidateSource, *fields: str) -> str:
    """Raw text is used as-is; records contribute the named fields joined by spaces."""
    if source is None:
        return ""
    if isinstance(source, str):
        return source
    if isinstance(source, CandidateData):
        source = source.model_dump()
    parts = []
    for field in fields:
        value = source.get(field)
        if isinstance(value, (list, tuple)):
            value = " ".join(str(v) for v in value if v)
        if value:
            parts.append(str(value))
    return " ".join(parts)


def extract_degree(source: CandidateSource) -> str:
    """First recognized degree in the educational qualifications, or 'No Degree'."""
    education = _field_text(source, "educational_qualifications")
    for pattern in DEGREE_PATTERNS:
        match = pattern.search(education)
        if match:
            return match.group(0)
    return NO_DEGREE


def extract_years_experience(source: CandidateSource) -> str:
    """Largest year count mentioned in the job history as '<n> years', or 'Newly Qualified'."""
    job_history = _field_text(source, "job_history")
    max_years = 0
    for pattern in EXPERIENCE_PATTERNS:
        for match in pattern.finditer(job_history):
            max_years = max(max_years, int(match.group(1)))
    if max_years == 0:
        return NEWLY_QUALIFIED
    return f"{max_years} years"


def extract_teaching_subject(source: CandidateSource) -> str:
    """First teaching subject found in skills and job history."""
    combined = _field_text(source, "skill_set", "job_history").lower()
    for subject in TEACHING_SUBJECTS:
        if subject in combined:
            return subject[0].upper() + subject[1:]
    if "primary" in combined:
        return "Primary Education"
    if "secondary" in combined:
        return "Secondary Education"
    if "teacher" in combined or "teaching" in combined:
        return "Teaching"
    return SUBJECT_NOT_SPECIFIED


def get_processing_status(upload: CVUpload) -> str:
    """'processed' once the upload is completed with extracted data, else 'pending'."""
    return "processed" if upload.has_extraction else "pending"


def candidate_highlights(data: Optional[CandidateData]) -> Dict[str, Any]:
    """Derived fields shown on candidate cards."""
    return {
        "degree": extract_degree(data),
        "experience": extract_years_experience(data),
        "subject": extract_teaching_subject(data),
        "teaching_degree": has_completed_teaching_degree(data) if data else False,
    }
