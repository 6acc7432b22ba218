"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

from schemas.rules import FeatureFlags

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# Managed backend (Supabase) – never hardcode keys
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_SERVICE_ROLE_KEY: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
# User session token used by the dashboard when calling the query endpoints
SUPABASE_ACCESS_TOKEN: str = os.getenv("SUPABASE_ACCESS_TOKEN", "")

# Base URL of the candidate query endpoints (this repo's API or hosted functions)
CANDIDATES_API_URL: str = os.getenv(
    "CANDIDATES_API_URL",
    f"{SUPABASE_URL}/functions/v1" if SUPABASE_URL else "http://127.0.0.1:8000",
).rstrip("/")

CV_UPLOAD_BUCKET: str = os.getenv("CV_UPLOAD_BUCKET", "cv-uploads")
UPLOADS_TABLE: str = "cv_uploads"

# LLM extraction
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
MODEL_NAME: str = os.getenv("MODEL_NAME", "gpt-4o-mini")
CV_TEXT_MAX_CHARS: int = 12000

# HTTP settings
HTTP_TIMEOUT_SECONDS: float = 30.0

# Pagination defaults for the query endpoints
DATE_QUERY_DEFAULT_LIMIT: int = 50
RANGE_QUERY_DEFAULT_PAGE_SIZE: int = 200
RANGE_QUERY_MAX_PAGE_SIZE: int = 1000

# Scores below this (on a 0-10 scale) never count as qualified
MIN_QUALIFIED_SCORE: int = 5

# Feature flags; the dashboard may override them from URL query params
FEATURE_FLAGS: FeatureFlags = FeatureFlags(
    enable_verticals=_env_flag("ENABLE_VERTICALS"),
    enable_filter_presets=_env_flag("ENABLE_FILTER_PRESETS"),
    enable_dynamic_ingestion=_env_flag("ENABLE_DYNAMIC_INGESTION"),
    enable_advanced_filters=_env_flag("ENABLE_ADVANCED_FILTERS"),
)

# Countries accepted by the single-day endpoint and the "best candidates" view.
# Matched as substrings of the lowercased candidate country text.
APPROVED_COUNTRIES: tuple = (
    # South Africa
    "south africa", "south african", "sa", "rsa", "republic of south africa",
    # UAE
    "uae", "united arab emirates", "emirates", "dubai", "abu dhabi", "sharjah",
    "ajman", "fujairah", "ras al khaimah", "umm al quwain",
    # UK
    "uk", "united kingdom", "britain", "great britain", "england", "scotland",
    "wales", "northern ireland", "british",
    # Ireland
    "ireland", "irish", "republic of ireland", "eire",
    # USA
    "usa", "united states", "united states of america", "america", "us",
    "american", "states",
    # New Zealand
    "nz", "new zealand", "zealand", "new zealander", "kiwi",
    # Australia
    "aus", "australia", "australian", "aussie", "oz",
    # Oman
    "oman", "omani", "sultanate of oman", "muscat",
    # Saudi Arabia
    "saudi arabia", "saudi", "ksa", "kingdom of saudi arabia", "saudis",
    "riyadh", "jeddah", "mecca", "medina",
    # Kuwait
    "kuwait", "kuwaiti", "state of kuwait", "kuwait city",
)
