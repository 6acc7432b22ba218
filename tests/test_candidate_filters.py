from conftest import make_upload

from schemas.candidate import CVUpload
from services.candidate_filters import (
    dedupe_by_first_last,
    filter_all_qualified_candidates,
    filter_valid_candidates,
    is_from_approved_country,
    is_qualified_candidate,
    is_test_candidate,
    normalized_score,
)


def test_normalized_score_scales_and_rounds_half_up():
    assert normalized_score("8") == 8
    assert normalized_score("45") == 5
    assert normalized_score("4.5") == 5
    assert normalized_score("8/10") == 8
    assert normalized_score("n/a") == 0
    assert normalized_score(None) == 0


def test_qualified_needs_every_field_and_score():
    assert is_qualified_candidate(make_upload())
    assert not is_qualified_candidate(make_upload(skill_set=""))
    assert not is_qualified_candidate(make_upload(score="4"))
    assert not is_qualified_candidate(make_upload(score="unknown"))
    assert not is_qualified_candidate(CVUpload(id="p", processing_status="processing"))


def test_placeholder_names_are_test_candidates():
    assert is_test_candidate(make_upload(candidate_name="John Doe"))
    assert is_test_candidate(make_upload(candidate_name="Test User 3"))
    assert not is_test_candidate(make_upload())


def test_approved_country():
    assert is_from_approved_country(make_upload(countries="South Africa"))
    assert is_from_approved_country(make_upload(countries=["Kenya", "United Kingdom"]))
    assert not is_from_approved_country(make_upload(countries="India"))
    assert not is_from_approved_country(make_upload(countries=None))


def test_valid_candidates_dedupe_by_email_case_insensitively():
    uploads = [
        make_upload("a"),
        make_upload("b", email_address="THANDI.NKOSI@example.com "),
        make_upload("c", candidate_name="Jane Doe", email_address="jane@example.com"),
        make_upload("d", candidate_name="Sipho Dlamini", email_address="sipho@example.com"),
    ]
    result = filter_valid_candidates(uploads)
    assert [u.id for u in result] == ["a", "d"]
    assert len(uploads) == 4


def test_dedupe_by_first_last_ignores_titles_and_middle_names():
    uploads = [
        make_upload("a", candidate_name="Thandi Nkosi"),
        make_upload("b", candidate_name="Ms. Thandi  Z. Nkosi"),
        make_upload("c", candidate_name=""),
    ]
    assert [u.id for u in dedupe_by_first_last(uploads)] == ["a"]


def test_all_qualified_requires_teaching_degree_and_country():
    uploads = [
        make_upload("a"),
        make_upload("b", candidate_name="Sipho Dlamini", email_address="s@example.com",
                    educational_qualifications="BSc Computer Science"),
        make_upload("c", candidate_name="Priya Nair", email_address="p@example.com", countries="India"),
        make_upload("d", candidate_name="Lerato Mokoena", email_address="l@example.com",
                    educational_qualifications="B.Ed in progress"),
        make_upload("e", candidate_name="Dr Thandi Nkosi", email_address="other@example.com"),
    ]
    assert [u.id for u in filter_all_qualified_candidates(uploads)] == ["a"]
