"""Industry verticals: default filtering thresholds and keywords, keyed by vertical id."""

from types import MappingProxyType
from typing import Mapping

from schemas.rules import VerticalConfig


class UnknownRuleSetError(KeyError):
    """Raised when a vertical or preset id is not in the built-in tables."""


VERTICALS: Mapping[str, VerticalConfig] = MappingProxyType({
    "education": VerticalConfig(
        id="education",
        name="Education",
        allowed_countries=(
            "united kingdom", "uk", "england", "scotland", "wales", "northern ireland",
            "south africa", "australia", "new zealand", "ireland", "canada",
        ),
        min_score=6,
        include_keywords=("teacher", "teaching", "education", "school", "classroom", "curriculum"),
        exclude_keywords=("plumber", "mechanic", "driver", "cleaner"),
        required_qualifications=("degree", "b.ed", "pgce", "education"),
        min_years_experience=2,
        require_current_role=True,
        current_role_keywords=("teacher", "teaching", "education", "school"),
    ),
    "generic": VerticalConfig(
        id="generic",
        name="Generic",
        min_score=5,
    ),
    "tech": VerticalConfig(
        id="tech",
        name="Technology",
        min_score=6,
        include_keywords=(
            "developer", "engineer", "programmer", "software", "coding",
            "javascript", "python", "react",
        ),
        exclude_keywords=("teacher", "driver", "cleaner"),
        required_qualifications=("computer science", "engineering", "software"),
        min_years_experience=1,
        current_role_keywords=("developer", "engineer", "programmer", "software"),
    ),
    "healthcare": VerticalConfig(
        id="healthcare",
        name="Healthcare",
        min_score=7,
        include_keywords=("nurse", "doctor", "medical", "healthcare", "clinical", "patient"),
        exclude_keywords=("teacher", "driver", "cleaner"),
        required_qualifications=("nursing", "medical", "healthcare"),
        min_years_experience=1,
        current_role_keywords=("nurse", "doctor", "medical", "healthcare"),
    ),
    "sales": VerticalConfig(
        id="sales",
        name="Sales",
        min_score=5,
        include_keywords=("sales", "business development", "account manager", "customer", "revenue"),
        exclude_keywords=("teacher", "driver", "cleaner"),
        min_years_experience=1,
        current_role_keywords=("sales", "business development", "account"),
    ),
})

DEFAULT_VERTICAL = "education"


def get_vertical(vertical_id: str) -> VerticalConfig:
    """Look up a vertical by id."""
    try:
        return VERTICALS[vertical_id]
    except KeyError:
        raise UnknownRuleSetError(f"Unknown vertical: {vertical_id}") from None
