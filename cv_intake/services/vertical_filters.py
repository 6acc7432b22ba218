"""Vertical- and preset-aware candidate rules."""

import re
from typing import Iterable, List, Optional

from rules.presets import apply_overrides
from rules.verticals import get_vertical
from schemas.candidate import CVUpload
from schemas.rules import FilterPreset, VerticalConfig
from services.candidate_filters import (
    filter_valid_candidates,
    is_qualified_candidate,
    is_test_candidate,
)
from utils.helpers import first_number, joined_lower, normalize_name_key

_YEARS_PATTERN = re.compile(r"(\d+)\s*years?", re.IGNORECASE)


def has_vertical_score(upload: CVUpload, config: VerticalConfig) -> bool:
    data = upload.extracted_json
    if not data or not data.score:
        return False
    score = first_number(data.score)
    return score is not None and score >= config.min_score


def has_vertical_keywords(upload: CVUpload, config: VerticalConfig) -> bool:
    """Exclude keywords reject first; with no include keywords everything else passes."""
    data = upload.extracted_json
    if not data:
        return False
    search_text = " ".join(
        v or ""
        for v in (
            data.candidate_name,
            data.current_employment,
            data.job_history,
            data.educational_qualifications,
        )
    ).lower()
    if any(k.lower() in search_text for k in config.exclude_keywords):
        return False
    if not config.include_keywords:
        return True
    return any(k.lower() in search_text for k in config.include_keywords)


def has_vertical_qualifications(upload: CVUpload, config: VerticalConfig) -> bool:
    if not config.required_qualifications:
        return True
    quals = (upload.extracted_json.educational_qualifications or "") if upload.extracted_json else ""
    if not quals:
        return False
    quals = quals.lower()
    return any(q.lower() in quals for q in config.required_qualifications)


def has_vertical_experience(upload: CVUpload, config: VerticalConfig) -> bool:
    """Sum of every 'N years' mention in the job history must reach the minimum."""
    if config.min_years_experience == 0:
        return True
    history = (upload.extracted_json.job_history or "") if upload.extracted_json else ""
    matches = _YEARS_PATTERN.findall(history)
    if not matches:
        return False
    return sum(int(m) for m in matches) >= config.min_years_experience


def has_vertical_current_role(upload: CVUpload, config: VerticalConfig) -> bool:
    if not config.require_current_role or not config.current_role_keywords:
        return True
    role = (upload.extracted_json.current_employment or "") if upload.extracted_json else ""
    if not role:
        return False
    role = role.lower()
    return any(k.lower() in role for k in config.current_role_keywords)


def has_vertical_country(upload: CVUpload, config: VerticalConfig) -> bool:
    if not config.allowed_countries:
        return True
    countries = joined_lower(upload.extracted_json.countries) if upload.extracted_json else ""
    if not countries:
        return False
    return any(c.lower() in countries for c in config.allowed_countries)


def is_vertical_candidate(upload: CVUpload, config: VerticalConfig, strict: bool = False) -> bool:
    """Base qualification, then score/keywords/country; strict mode adds qualifications, experience and current role."""
    if not is_qualified_candidate(upload) or is_test_candidate(upload):
        return False
    if not (
        has_vertical_score(upload, config)
        and has_vertical_keywords(upload, config)
        and has_vertical_country(upload, config)
    ):
        return False
    if strict:
        return (
            has_vertical_qualifications(upload, config)
            and has_vertical_experience(upload, config)
            and has_vertical_current_role(upload, config)
        )
    return True


def is_preset_candidate(
    upload: CVUpload,
    preset: FilterPreset,
    config: Optional[VerticalConfig] = None,
) -> bool:
    """Apply a preset: its custom rules over `config` (default: the preset's own vertical), strictness from the preset."""
    base = config or get_vertical(preset.vertical_id)
    return is_vertical_candidate(upload, apply_overrides(base, preset.custom_rules), preset.is_strict)


def filter_vertical_candidates(
    uploads: Iterable[CVUpload],
    config: Optional[VerticalConfig] = None,
    strict: bool = False,
) -> List[CVUpload]:
    """
    Vertical candidates de-duplicated by normalized name, newest first.
    Without a config, falls back to the base valid-candidate filter.
    Does not mutate the input list.
    """
    if config is None:
        return filter_valid_candidates(uploads)
    seen_names: set[str] = set()
    result: List[CVUpload] = []
    for upload in uploads:
        if not is_vertical_candidate(upload, config, strict):
            continue
        key = normalize_name_key(upload.extracted_json.candidate_name)
        if key and key in seen_names:
            continue
        if key:
            seen_names.add(key)
        result.append(upload)
    result.sort(key=lambda u: u.received_date or u.id, reverse=True)
    return result
