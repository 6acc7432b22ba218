"""Rule-set schemas: industry verticals, filter presets and feature flags."""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class VerticalConfig(BaseModel):
    """Industry rule profile with default filtering thresholds and keywords."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Vertical key (e.g. education, tech)")
    name: str = Field(..., description="Display name")
    allowed_countries: Tuple[str, ...] = Field(default=(), description="Empty means every country is allowed")
    min_score: float = Field(default=5, description="Minimum candidate score on a 0-10 scale")
    include_keywords: Tuple[str, ...] = Field(default=(), description="At least one must appear; empty accepts all")
    exclude_keywords: Tuple[str, ...] = Field(default=(), description="Any match rejects the candidate")
    required_qualifications: Tuple[str, ...] = Field(default=(), description="Strict mode: one must appear in qualifications")
    min_years_experience: int = Field(default=0, description="Strict mode: summed years in job history")
    require_current_role: bool = Field(default=False, description="Strict mode: current role must match a keyword")
    current_role_keywords: Tuple[str, ...] = Field(default=())


class RuleOverrides(BaseModel):
    """Subset of VerticalConfig rule fields a preset may override. None means inherit."""

    model_config = ConfigDict(frozen=True)

    min_score: Optional[float] = None
    allowed_countries: Optional[Tuple[str, ...]] = None
    include_keywords: Optional[Tuple[str, ...]] = None
    exclude_keywords: Optional[Tuple[str, ...]] = None
    required_qualifications: Optional[Tuple[str, ...]] = None
    min_years_experience: Optional[int] = None
    require_current_role: Optional[bool] = None
    current_role_keywords: Optional[Tuple[str, ...]] = None


class FilterPreset(BaseModel):
    """Named, possibly-overriding variant of a vertical's rules."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    vertical_id: str
    is_strict: bool = False
    custom_rules: Optional[RuleOverrides] = None


class FeatureFlags(BaseModel):
    """Dashboard feature switches."""

    model_config = ConfigDict(frozen=True)

    enable_verticals: bool = False
    enable_filter_presets: bool = False
    enable_dynamic_ingestion: bool = Field(default=False, description="Show the CV upload form on the dashboard")
    enable_advanced_filters: bool = False
