"""Text checks for a completed teaching degree (SA/UK-style qualifications)."""

import re
from enum import Enum
from typing import Any, Mapping, Tuple

# Any match counts as a degree marker.
ACCEPT_DEGREE_REGEX: Tuple[re.Pattern, ...] = (
    re.compile(r"\b(b\.?\s*ed|bed)\b", re.IGNORECASE),                      # B.Ed / B Ed / BEd
    re.compile(r"\bbachelor of education\b", re.IGNORECASE),
    re.compile(r"\bpgce\b", re.IGNORECASE),
    re.compile(r"\bpostgraduate certificate in education\b", re.IGNORECASE),
    re.compile(r"\bpgde\b", re.IGNORECASE),
    re.compile(r"\bpgdip(ed| in education)?\b", re.IGNORECASE),             # PGDipEd variants
    re.compile(r"\b(b\.?\s*a\.?\s*\(?ed\b|ba(ed)? in education\b)", re.IGNORECASE),  # BA(Ed) / BA in Education
    re.compile(r"\bbsc\(ed\)", re.IGNORECASE),
    re.compile(r"\bbcom\(ed\)", re.IGNORECASE),
    re.compile(r"\b(foundation|intermediate|senior) phase\b", re.IGNORECASE),  # B.Ed specialisations
)

# Certificates that are not degrees. Never exclusionary on their own.
EXCLUDE_NON_DEGREE_REGEX: Tuple[re.Pattern, ...] = (
    re.compile(r"\b(tefl|tesol|celta)\b", re.IGNORECASE),
    re.compile(r"\b(higher )?certificate\b", re.IGNORECASE),
    re.compile(r"\b(higher )?diploma\b", re.IGNORECASE),
    re.compile(r"\becd\b", re.IGNORECASE),
)

# Any of these anywhere in the text means the degree is NOT completed.
IN_PROGRESS_REGEX: Tuple[re.Pattern, ...] = (
    re.compile(r"\bin[-\s]?progress\b", re.IGNORECASE),
    re.compile(r"\bcurrently (studying|pursuing|enrolled)\b", re.IGNORECASE),
    re.compile(r"\bstudent\b", re.IGNORECASE),
    re.compile(r"\bpursuing\b", re.IGNORECASE),
    re.compile(r"\bongoing\b", re.IGNORECASE),
)

# Candidate fields searched for qualification markers, in order.
QUALIFICATION_FIELDS: Tuple[str, ...] = (
    "educational_qualifications",
    "qualifications",
    "education",
    "current_employment",
    "job_history",
)


class QualificationStatus(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    CERTIFICATE_ONLY = "certificate_only"
    NONE = "none"


def _textify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value if v is not None)
    return str(value)


def qualification_text(raw: Any) -> str:
    """Concatenate the qualification-bearing fields of a candidate record into lowercase text."""
    if raw is None:
        return ""
    if not isinstance(raw, Mapping):
        # pydantic models (CandidateData) keep unknown keys as extras
        raw = raw.model_dump() if hasattr(raw, "model_dump") else {}
    return " ".join(_textify(raw.get(field)) for field in QUALIFICATION_FIELDS).lower()


def _any_match(patterns: Tuple[re.Pattern, ...], text: str) -> bool:
    return any(p.search(text) for p in patterns)


def classify_qualification_text(text: str) -> QualificationStatus:
    """
    Classify free text: in-progress markers win over everything, then a degree
    marker means completed, then certificate-only, otherwise none.
    """
    hay = (text or "").lower()
    if not hay.strip():
        return QualificationStatus.NONE
    if _any_match(IN_PROGRESS_REGEX, hay):
        return QualificationStatus.IN_PROGRESS
    if _any_match(ACCEPT_DEGREE_REGEX, hay):
        return QualificationStatus.COMPLETED
    if _any_match(EXCLUDE_NON_DEGREE_REGEX, hay):
        return QualificationStatus.CERTIFICATE_ONLY
    return QualificationStatus.NONE


def matches_completed_degree(text: str) -> bool:
    """True if the text shows a completed teaching degree and no in-progress study."""
    return classify_qualification_text(text) == QualificationStatus.COMPLETED


def has_completed_teaching_degree(raw: Any) -> bool:
    """Same check over a candidate record (mapping or CandidateData)."""
    return matches_completed_degree(qualification_text(raw))
