"""Base candidate checks: completeness, score, test data, country and de-duplication. No UI logic."""

from typing import Iterable, List, Optional, Sequence

from config import APPROVED_COUNTRIES, MIN_QUALIFIED_SCORE
from rules.teaching_quals import has_completed_teaching_degree
from schemas.candidate import CVUpload
from utils.helpers import (
    joined_lower,
    leading_number,
    normalize_email,
    normalize_first_last_name,
    round_half_up,
)
from utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = (
    "candidate_name",
    "contact_number",
    "email_address",
    "countries",
    "skill_set",
    "educational_qualifications",
    "job_history",
    "justification",
)

TEST_NAME_PATTERNS = (
    "john doe",
    "jane doe",
    "john smith",
    "jane smith",
    "test user",
    "test candidate",
    "sample user",
    "dummy user",
    "example user",
    "placeholder",
    "test test",
    "user test",
    "demo user",
)


def normalized_score(raw_score: Optional[str]) -> int:
    """Score on a 0-10 scale: leading number, divided by 10 when above 10, rounded half up."""
    value = leading_number(raw_score)
    if value is None:
        return 0
    return round_half_up(value / 10 if value > 10 else value)


def is_qualified_candidate(upload: CVUpload) -> bool:
    """Completed upload with every required field present and a score of at least 5/10."""
    if not upload.has_extraction:
        return False
    data = upload.extracted_json
    if not all(getattr(data, field) for field in REQUIRED_FIELDS):
        return False
    return normalized_score(data.score) >= MIN_QUALIFIED_SCORE


def is_test_candidate(upload: CVUpload) -> bool:
    """True for placeholder names like 'John Doe' or 'Test User'."""
    name = (upload.extracted_json.candidate_name or "") if upload.extracted_json else ""
    name = name.strip().lower()
    if not name:
        return False
    return any(pattern in name for pattern in TEST_NAME_PATTERNS)


def is_from_approved_country(
    upload: CVUpload,
    approved: Sequence[str] = APPROVED_COUNTRIES,
) -> bool:
    """Countries text must mention an approved country. Missing country data is rejected."""
    countries = joined_lower(upload.extracted_json.countries) if upload.extracted_json else ""
    if not countries:
        return False
    return any(country in countries for country in approved)


def filter_valid_candidates(uploads: Iterable[CVUpload]) -> List[CVUpload]:
    """
    Qualified, non-test candidates, first occurrence per email (case-insensitive).
    Does not mutate the input list.
    """
    seen_emails: set[str] = set()
    result: List[CVUpload] = []
    for upload in uploads:
        if not is_qualified_candidate(upload):
            continue
        if is_test_candidate(upload):
            logger.debug("Filtering out test candidate: %s", upload.extracted_json.candidate_name)
            continue
        email = normalize_email(upload.extracted_json.email_address)
        if email:
            if email in seen_emails:
                logger.debug("Filtering out duplicate candidate with email: %s", email)
                continue
            seen_emails.add(email)
        result.append(upload)
    return result


def dedupe_by_first_last(uploads: Iterable[CVUpload]) -> List[CVUpload]:
    """Keep the first upload per normalized first/last name; uploads without a name are dropped."""
    seen: set[str] = set()
    result: List[CVUpload] = []
    for upload in uploads:
        name = upload.extracted_json.candidate_name if upload.extracted_json else None
        if not name:
            continue
        key = normalize_first_last_name(name)
        if key and key in seen:
            continue
        if key:
            seen.add(key)
        result.append(upload)
    return result


def filter_all_qualified_candidates(uploads: Iterable[CVUpload]) -> List[CVUpload]:
    """
    The legacy "best candidates" view: qualified, non-test, a completed
    teaching degree and an approved country, de-duplicated by first/last name.
    """
    kept = [
        u for u in uploads
        if is_qualified_candidate(u)
        and not is_test_candidate(u)
        and has_completed_teaching_degree(u.extracted_json)
        and is_from_approved_country(u)
    ]
    return dedupe_by_first_last(kept)
