"""Built-in filter presets layered on top of the verticals."""

from types import MappingProxyType
from typing import List, Mapping, Optional

from rules.verticals import UnknownRuleSetError, get_vertical
from schemas.rules import FilterPreset, RuleOverrides, VerticalConfig

BUILT_IN_PRESETS: Mapping[str, FilterPreset] = MappingProxyType({
    "education-legacy": FilterPreset(
        id="education-legacy",
        name="Education (Legacy)",
        description="Original strict teaching requirements - the current system",
        vertical_id="education",
        is_strict=True,
    ),
    "education-strict": FilterPreset(
        id="education-strict",
        name="Education Strict",
        description="Strict teaching requirements with B.Ed/PGCE, current role, 2+ years experience",
        vertical_id="education",
        is_strict=True,
    ),
    "education-flexible": FilterPreset(
        id="education-flexible",
        name="Education Flexible",
        description="Relaxed teaching requirements - degree with teaching experience",
        vertical_id="education",
        is_strict=False,
        custom_rules=RuleOverrides(min_years_experience=1, require_current_role=False),
    ),
    "tech-senior": FilterPreset(
        id="tech-senior",
        name="Senior Technology",
        description="Senior tech roles - 3+ years experience in software development",
        vertical_id="tech",
        is_strict=True,
        custom_rules=RuleOverrides(min_years_experience=3, min_score=7),
    ),
    "tech-junior": FilterPreset(
        id="tech-junior",
        name="Junior Technology",
        description="Junior tech roles - basic requirements for entry-level positions",
        vertical_id="tech",
        is_strict=False,
        custom_rules=RuleOverrides(min_years_experience=0, min_score=5),
    ),
    "generic-all": FilterPreset(
        id="generic-all",
        name="All Candidates",
        description="Minimal filtering - shows all candidates with basic qualifications",
        vertical_id="generic",
        is_strict=False,
    ),
})

DEFAULT_PRESET = "education-legacy"
# Preset that keeps the legacy "best candidates" filtering instead of vertical rules
LEGACY_PRESET = "education-legacy"


def get_preset(preset_id: str) -> FilterPreset:
    """Look up a preset by id."""
    try:
        return BUILT_IN_PRESETS[preset_id]
    except KeyError:
        raise UnknownRuleSetError(f"Unknown preset: {preset_id}") from None


def presets_for_vertical(vertical_id: str) -> List[FilterPreset]:
    """Presets owned by a vertical, in table order."""
    return [p for p in BUILT_IN_PRESETS.values() if p.vertical_id == vertical_id]


def apply_overrides(config: VerticalConfig, overrides: Optional[RuleOverrides]) -> VerticalConfig:
    """
    Lay the non-null override fields over a vertical config. Does not mutate `config`.
    No consistency check is made between overridden and inherited fields.
    """
    if overrides is None:
        return config
    return config.model_copy(update=overrides.model_dump(exclude_none=True))


def resolve_effective_rules(preset_id: str, vertical_id: Optional[str] = None) -> VerticalConfig:
    """
    Effective rules for a preset: its vertical (or `vertical_id` when given)
    with the preset's custom rules applied.
    """
    preset = get_preset(preset_id)
    base = get_vertical(vertical_id or preset.vertical_id)
    return apply_overrides(base, preset.custom_rules)


__all__ = [
    "BUILT_IN_PRESETS",
    "DEFAULT_PRESET",
    "LEGACY_PRESET",
    "UnknownRuleSetError",
    "apply_overrides",
    "get_preset",
    "presets_for_vertical",
    "resolve_effective_rules",
]
