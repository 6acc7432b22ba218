"""Service exports."""

from .candidate_filters import filter_all_qualified_candidates, filter_valid_candidates
from .candidate_helpers import extract_degree, extract_teaching_subject, extract_years_experience
from .candidate_store import CandidateStore, StoreError
from .dashboard_filters import apply_dashboard_filters
from .day_range import fetch_by_day, fetch_day_result
from .export_service import export_candidates_csv
from .vertical_filters import filter_vertical_candidates, is_vertical_candidate

__all__ = [
    "CandidateStore",
    "StoreError",
    "apply_dashboard_filters",
    "export_candidates_csv",
    "extract_degree",
    "extract_teaching_subject",
    "extract_years_experience",
    "fetch_by_day",
    "fetch_day_result",
    "filter_all_qualified_candidates",
    "filter_valid_candidates",
    "filter_vertical_candidates",
    "is_vertical_candidate",
]
