"""Helper utilities for the CV intake dashboard."""

import math
import re
from typing import Any, List, Optional, Union


def normalize_email(email: Optional[str]) -> str:
    """Lowercase, trimmed email for case-insensitive comparison."""
    return (email or "").strip().lower()


def normalize_to_list(value: Union[str, List[str], None]) -> List[str]:
    """Split comma-separated text (or clean a list) into trimmed non-empty items."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if v and str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def joined_lower(value: Union[str, List[str], None]) -> str:
    """Lowercase text of a string or list value (lists are space-joined)."""
    if not value:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value if v).lower().strip()
    return str(value).lower().strip()


def normalize_name_key(name: Optional[str]) -> str:
    """Full name as a dedupe key: lowercase, whitespace runs joined with underscores."""
    return re.sub(r"\s+", "_", (name or "").strip().lower())


def normalize_first_last_name(name: Optional[str]) -> str:
    """
    First and last name only, lowercase, punctuation stripped: 'Dr. Jane  M. Smith' -> 'jane_smith'.
    Titles are dropped so the same person uploaded twice dedupes.
    """
    words = re.sub(r"[^\w\s'-]", " ", (name or "").lower()).split()
    words = [w for w in words if w not in {"mr", "mrs", "ms", "miss", "dr", "prof"}]
    if not words:
        return ""
    if len(words) == 1:
        return words[0]
    return f"{words[0]}_{words[-1]}"


def first_number(text: Any) -> Optional[float]:
    """First integer or decimal number in text, or None."""
    match = re.search(r"(\d+(?:\.\d+)?)", str(text or ""))
    return float(match.group(1)) if match else None


def leading_number(text: Any) -> Optional[float]:
    """Number at the start of text ('7/10' -> 7.0, '8.5 out of 10' -> 8.5), or None."""
    match = re.match(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))", str(text or ""))
    return float(match.group(1)) if match else None


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive scores (4.5 -> 5), unlike round()."""
    return int(math.floor(value + 0.5))
