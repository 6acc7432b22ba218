"""Static rule tables: verticals, presets and qualification patterns."""

from .presets import (
    BUILT_IN_PRESETS,
    DEFAULT_PRESET,
    apply_overrides,
    get_preset,
    presets_for_vertical,
    resolve_effective_rules,
)
from .teaching_quals import (
    QualificationStatus,
    classify_qualification_text,
    has_completed_teaching_degree,
    matches_completed_degree,
)
from .verticals import DEFAULT_VERTICAL, VERTICALS, UnknownRuleSetError, get_vertical

__all__ = [
    "BUILT_IN_PRESETS",
    "DEFAULT_PRESET",
    "DEFAULT_VERTICAL",
    "VERTICALS",
    "QualificationStatus",
    "UnknownRuleSetError",
    "apply_overrides",
    "classify_qualification_text",
    "get_preset",
    "get_vertical",
    "has_completed_teaching_degree",
    "matches_completed_degree",
    "presets_for_vertical",
    "resolve_effective_rules",
]
