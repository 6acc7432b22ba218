"""Utility exports."""

from .date_utils import effective_date_string, is_iso_day, iter_days, next_day, parse_day
from .helpers import (
    leading_number,
    normalize_email,
    normalize_first_last_name,
    normalize_name_key,
    normalize_to_list,
    round_half_up,
)
from .logger import get_logger

__all__ = [
    "get_logger",
    "effective_date_string",
    "is_iso_day",
    "iter_days",
    "next_day",
    "parse_day",
    "leading_number",
    "normalize_email",
    "normalize_first_last_name",
    "normalize_name_key",
    "normalize_to_list",
    "round_half_up",
]
