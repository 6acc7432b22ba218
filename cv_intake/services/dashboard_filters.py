"""Dashboard view filtering: base filter, vertical/preset rules, advanced filters. No UI logic."""

from enum import Enum
from typing import Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from rules.presets import LEGACY_PRESET
from schemas.candidate import CVUpload, ProcessingStatus
from schemas.rules import FeatureFlags, FilterPreset, VerticalConfig
from services.candidate_filters import (
    dedupe_by_first_last,
    filter_all_qualified_candidates,
    filter_valid_candidates,
    is_qualified_candidate,
)
from services.vertical_filters import filter_vertical_candidates, is_preset_candidate
from utils.date_utils import effective_date_string
from utils.helpers import leading_number, normalize_email, normalize_to_list, round_half_up

SEARCH_MIN_CHARS = 2
DEFAULT_SCORE_MIN = 5
DEFAULT_SCORE_MAX = 10


class DashboardView(str, Enum):
    BEST = "best"
    ALL_UPLOADS = "allUploads"


class AdvancedFilterState(BaseModel):
    """User-selected advanced filters. Unset fields do not filter."""

    search: Optional[str] = None
    countries: List[str] = Field(default_factory=list, description="OR: any selected country")
    skills: List[str] = Field(default_factory=list, description="AND: every selected skill")
    score_min: Optional[float] = None
    score_max: Optional[float] = None
    source_emails: List[str] = Field(default_factory=list)
    date_from: Optional[str] = Field(default=None, description="YYYY-MM-DD, inclusive")
    date_to: Optional[str] = Field(default=None, description="YYYY-MM-DD, inclusive")


class DashboardStats(BaseModel):
    total: int = 0
    completed: int = 0
    processing: int = 0
    errors: int = 0
    qualified: int = 0
    average_score: Optional[float] = None


def parse_score(raw: Optional[str]) -> int:
    """
    Score on a 0-10 scale from '8/10', '7.5', or a percentage-like '85'.
    Unparseable scores count as 0.
    """
    if not raw:
        return 0
    text = str(raw).strip()
    if "/" in text:
        num_text, denom_text = text.split("/", 1)
        num, denom = leading_number(num_text), leading_number(denom_text)
        if num is None or not denom:
            return 0
        return round_half_up(num / denom * 10)
    value = leading_number(text)
    if value is None:
        return 0
    return round_half_up(value / 10) if value > 10 else round_half_up(value)


def _source_email(upload: CVUpload) -> str:
    fallback = upload.extracted_json.email_address if upload.extracted_json else None
    return normalize_email(upload.source_email) or normalize_email(fallback)


def _is_date_in_range(upload: CVUpload, date_from: Optional[str], date_to: Optional[str]) -> bool:
    """Inclusive on both ends; uploads without a usable date are kept."""
    received = upload.extracted_json.date_received if upload.extracted_json else None
    day = effective_date_string(upload.received_date, received)
    if not day:
        return True
    if date_from and day < date_from:
        return False
    if date_to and day > date_to:
        return False
    return True


def _matches_search(upload: CVUpload, query: str) -> bool:
    data = upload.extracted_json
    if not data:
        return False
    if query in (data.candidate_name or "").lower() or query in (data.email_address or "").lower():
        return True
    fields = normalize_to_list(data.current_employment) + normalize_to_list(data.countries)
    return any(query in item.lower() for item in fields)


def _skill_items(upload: CVUpload) -> List[str]:
    data = upload.extracted_json
    if not data:
        return []
    return normalize_to_list(data.skill_set) + normalize_to_list(data.current_employment)


def apply_advanced(uploads: Iterable[CVUpload], advanced: AdvancedFilterState) -> List[CVUpload]:
    """Apply every set advanced filter. Does not mutate the input list."""
    filtered = list(uploads)

    query = (advanced.search or "").strip().lower()
    if len(query) >= SEARCH_MIN_CHARS:
        filtered = [u for u in filtered if _matches_search(u, query)]

    if advanced.countries:
        selected = [c.lower() for c in advanced.countries]
        filtered = [
            u for u in filtered
            if any(
                s in c.lower()
                for s in selected
                for c in normalize_to_list(u.extracted_json.countries if u.extracted_json else None)
            )
        ]

    if advanced.skills:
        wanted = [s.lower() for s in advanced.skills]
        filtered = [
            u for u in filtered
            if all(any(w in item.lower() for item in _skill_items(u)) for w in wanted)
        ]

    if advanced.score_min is not None or advanced.score_max is not None:
        low = advanced.score_min if advanced.score_min is not None else DEFAULT_SCORE_MIN
        high = advanced.score_max if advanced.score_max is not None else DEFAULT_SCORE_MAX
        filtered = [
            u for u in filtered
            if low <= parse_score(u.extracted_json.score if u.extracted_json else None) <= high
        ]

    if advanced.source_emails:
        selected_emails = {normalize_email(e) for e in advanced.source_emails}
        filtered = [u for u in filtered if _source_email(u) in selected_emails]

    if advanced.date_from or advanced.date_to:
        filtered = [u for u in filtered if _is_date_in_range(u, advanced.date_from, advanced.date_to)]

    return filtered


def apply_dashboard_filters(
    items: Iterable[CVUpload],
    view: DashboardView,
    feature_flags: FeatureFlags,
    vertical_config: Optional[VerticalConfig] = None,
    preset: Optional[FilterPreset] = None,
    strict: bool = False,
    advanced: Optional[AdvancedFilterState] = None,
) -> List[CVUpload]:
    """
    Full dashboard pipeline:
    1. base filter (legacy "best" filter unless vertical/preset rules take over),
    2. preset rules, else vertical rules (best view only),
    3. advanced filters when enabled,
    4. best view: named candidates only, de-duplicated by first/last name.
    """
    filtered = list(items)
    use_presets = feature_flags.enable_filter_presets and preset is not None
    use_verticals = feature_flags.enable_verticals and vertical_config is not None

    if view == DashboardView.BEST:
        if use_presets and preset.id == LEGACY_PRESET:
            filtered = filter_all_qualified_candidates(filtered)
        elif use_presets or use_verticals:
            filtered = filter_valid_candidates(filtered)
        else:
            filtered = filter_all_qualified_candidates(filtered)

        if use_presets:
            filtered = [u for u in filtered if is_preset_candidate(u, preset, vertical_config)]
        elif use_verticals:
            filtered = filter_vertical_candidates(filtered, vertical_config, strict)
    else:
        filtered = filter_valid_candidates(filtered)

    if feature_flags.enable_advanced_filters and advanced is not None:
        filtered = apply_advanced(filtered, advanced)

    if view == DashboardView.BEST:
        filtered = [
            u for u in filtered
            if u.extracted_json and (u.extracted_json.candidate_name or "").strip()
        ]
        filtered = dedupe_by_first_last(filtered)

    return filtered


def extract_source_email_options(uploads: Iterable[CVUpload]) -> List[str]:
    """Sorted unique source emails (falling back to the candidate email) for the filter picker."""
    return sorted({e for e in (_source_email(u) for u in uploads) if e})


def dashboard_stats(uploads: Iterable[CVUpload]) -> DashboardStats:
    """Status counts and mean 0-10 score over completed uploads."""
    uploads = list(uploads)
    scores = [
        parse_score(u.extracted_json.score)
        for u in uploads
        if u.has_extraction and u.extracted_json.score
    ]
    return DashboardStats(
        total=len(uploads),
        completed=sum(1 for u in uploads if u.processing_status == ProcessingStatus.COMPLETED),
        processing=sum(
            1 for u in uploads
            if u.processing_status in (ProcessingStatus.PENDING, ProcessingStatus.PROCESSING, None)
        ),
        errors=sum(1 for u in uploads if u.processing_status == ProcessingStatus.ERROR),
        qualified=sum(1 for u in uploads if is_qualified_candidate(u)),
        average_score=round(sum(scores) / len(scores), 1) if scores else None,
    )


# URL query parameter -> FeatureFlags field; only the exact values "true"/"false" override
FLAG_QUERY_PARAMS = {
    "verticals": "enable_verticals",
    "presets": "enable_filter_presets",
    "dynamic": "enable_dynamic_ingestion",
    "advancedFilters": "enable_advanced_filters",
}


def apply_flag_overrides(flags: FeatureFlags, params: Mapping[str, str]) -> FeatureFlags:
    """Kill switches from the page URL, e.g. ?verticals=false."""
    update = {}
    for param, field in FLAG_QUERY_PARAMS.items():
        value = params.get(param)
        if value == "true":
            update[field] = True
        elif value == "false":
            update[field] = False
    return flags.model_copy(update=update) if update else flags
