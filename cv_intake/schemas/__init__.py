"""Schema exports."""

from .candidate import CandidateData, CVUpload, ProcessingStatus, can_transition
from .rules import FeatureFlags, FilterPreset, RuleOverrides, VerticalConfig

__all__ = [
    "CandidateData",
    "CVUpload",
    "ProcessingStatus",
    "can_transition",
    "FeatureFlags",
    "FilterPreset",
    "RuleOverrides",
    "VerticalConfig",
]
