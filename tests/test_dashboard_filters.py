import pytest

from conftest import make_upload

from rules.presets import get_preset
from rules.verticals import get_vertical
from schemas.candidate import CVUpload
from schemas.rules import FeatureFlags
from services.dashboard_filters import (
    AdvancedFilterState,
    DashboardView,
    apply_advanced,
    apply_dashboard_filters,
    apply_flag_overrides,
    dashboard_stats,
    extract_source_email_options,
    parse_score,
)

NO_FLAGS = FeatureFlags()
ALL_FLAGS = FeatureFlags(
    enable_verticals=True,
    enable_filter_presets=True,
    enable_dynamic_ingestion=True,
    enable_advanced_filters=True,
)


@pytest.mark.parametrize("raw, expected", [
    ("8/10", 8),
    ("4/5", 8),
    ("7.5", 8),
    ("85", 9),
    ("abc", 0),
    ("", 0),
    (None, 0),
    ("3/0", 0),
])
def test_parse_score(raw, expected):
    assert parse_score(raw) == expected


@pytest.fixture
def uploads():
    return [
        make_upload("za", skill_set="Mathematics, Coding"),
        make_upload("uk", candidate_name="Oliver Grant", email_address="oliver@example.com",
                    countries="United Kingdom", score="6", skill_set="English, Drama"),
        make_upload("nodeg", candidate_name="Sipho Dlamini", email_address="sipho@example.com",
                    educational_qualifications="BSc Computer Science", score="9"),
    ]


def test_best_view_without_rules_uses_qualified_teachers(uploads):
    result = apply_dashboard_filters(uploads, DashboardView.BEST, NO_FLAGS)
    assert [u.id for u in result] == ["za", "uk"]


def test_all_uploads_view_keeps_valid_candidates(uploads):
    result = apply_dashboard_filters(uploads, DashboardView.ALL_UPLOADS, NO_FLAGS)
    assert [u.id for u in result] == ["za", "uk", "nodeg"]


def test_vertical_rules_replace_legacy_filter(uploads):
    flags = FeatureFlags(enable_verticals=True)
    result = apply_dashboard_filters(uploads, DashboardView.BEST, flags, vertical_config=get_vertical("generic"))
    assert {u.id for u in result} == {"za", "uk", "nodeg"}


def test_legacy_preset_keeps_qualified_teacher_filter(uploads):
    flags = FeatureFlags(enable_filter_presets=True)
    result = apply_dashboard_filters(
        uploads, DashboardView.BEST, flags,
        vertical_config=get_vertical("education"),
        preset=get_preset("education-legacy"),
    )
    assert [u.id for u in result] == ["za", "uk"]


def test_preset_ignored_when_flag_off(uploads):
    result = apply_dashboard_filters(
        uploads, DashboardView.BEST, NO_FLAGS,
        preset=get_preset("generic-all"),
    )
    assert [u.id for u in result] == ["za", "uk"]


def test_advanced_filters_only_when_enabled(uploads):
    advanced = AdvancedFilterState(countries=["kingdom"])
    off = apply_dashboard_filters(uploads, DashboardView.ALL_UPLOADS, NO_FLAGS, advanced=advanced)
    on = apply_dashboard_filters(uploads, DashboardView.ALL_UPLOADS, ALL_FLAGS, advanced=advanced)
    assert len(off) == 3
    assert [u.id for u in on] == ["uk"]


def test_advanced_search_and_skills(uploads):
    assert [u.id for u in apply_advanced(uploads, AdvancedFilterState(search="oliver"))] == ["uk"]
    # one-character searches are ignored
    assert len(apply_advanced(uploads, AdvancedFilterState(search="o"))) == 3
    skills = AdvancedFilterState(skills=["mathematics", "coding"])
    assert [u.id for u in apply_advanced(uploads, skills)] == ["za"]


def test_advanced_score_and_dates(uploads):
    assert [u.id for u in apply_advanced(uploads, AdvancedFilterState(score_min=9))] == ["nodeg"]
    assert [u.id for u in apply_advanced(uploads, AdvancedFilterState(score_max=6))] == ["uk"]
    uploads[1].received_date = "2024-01-20"
    dated = apply_advanced(uploads, AdvancedFilterState(date_from="2024-01-16", date_to="2024-01-31"))
    assert [u.id for u in dated] == ["uk"]


def test_advanced_source_emails_fall_back_to_candidate_email():
    with_source = make_upload("a")
    without_source = CVUpload.model_validate({
        **with_source.model_dump(),
        "id": "b",
        "source_email": None,
    })
    options = extract_source_email_options([with_source, without_source])
    assert options == ["inbox@school.test", "thandi.nkosi@example.com"]
    picked = apply_advanced([with_source, without_source], AdvancedFilterState(source_emails=["INBOX@school.test"]))
    assert [u.id for u in picked] == ["a"]


def test_flag_overrides_from_query():
    flags = apply_flag_overrides(NO_FLAGS, {"verticals": "true", "presets": "yes"})
    assert flags.enable_verticals is True
    assert flags.enable_filter_presets is False
    assert apply_flag_overrides(ALL_FLAGS, {"advancedFilters": "false"}).enable_advanced_filters is False


def test_dynamic_ingestion_flag_from_query():
    assert apply_flag_overrides(NO_FLAGS, {"dynamic": "true"}).enable_dynamic_ingestion is True
    assert apply_flag_overrides(ALL_FLAGS, {"dynamic": "false"}).enable_dynamic_ingestion is False
    assert apply_flag_overrides(ALL_FLAGS, {"dynamic": "0"}).enable_dynamic_ingestion is True


def test_dashboard_stats(uploads):
    uploads.append(CVUpload(id="err", processing_status="error"))
    uploads.append(CVUpload(id="pending", processing_status="pending"))
    stats = dashboard_stats(uploads)
    assert stats.total == 5
    assert stats.completed == 3
    assert stats.errors == 1
    assert stats.processing == 1
    assert stats.qualified == 3
    assert stats.average_score == pytest.approx(7.7)
