import pytest

from rules.teaching_quals import (
    QualificationStatus,
    classify_qualification_text,
    has_completed_teaching_degree,
    matches_completed_degree,
)
from schemas.candidate import CandidateData


@pytest.mark.parametrize("text", [
    "B.Ed Foundation Phase, UNISA 2018",
    "Bachelor of Education (Honours)",
    "BA(Ed) in Languages",
    "PGCE Secondary Mathematics",
    "BSc(Ed) Life Sciences",
    "Intermediate Phase teaching degree",
    "BEd and a TEFL certificate",
])
def test_completed_degree_markers(text):
    assert matches_completed_degree(text)


@pytest.mark.parametrize("text", [
    "B.Ed in progress (3rd year)",
    "Currently studying PGCE",
    "Student teacher, B.Ed final year",
    "Pursuing a Bachelor of Education",
    "B.Ed - ongoing",
])
def test_in_progress_beats_degree(text):
    assert classify_qualification_text(text) == QualificationStatus.IN_PROGRESS
    assert not matches_completed_degree(text)


@pytest.mark.parametrize("text", ["", "   ", None])
def test_empty_text_is_not_a_degree(text):
    assert classify_qualification_text(text) == QualificationStatus.NONE
    assert not matches_completed_degree(text)


def test_certificates_alone_are_not_degrees():
    assert classify_qualification_text("TEFL certificate, 120 hours") == QualificationStatus.CERTIFICATE_ONLY
    assert not matches_completed_degree("CELTA and Higher Diploma")


def test_record_fields_are_searched():
    record = {"educational_qualifications": "Matric", "job_history": "Completed PGCE in 2019 while teaching"}
    assert has_completed_teaching_degree(record)


def test_candidate_model_is_accepted():
    data = CandidateData(educational_qualifications=["BA Honours", "PGCE"])
    assert has_completed_teaching_degree(data)
    assert not has_completed_teaching_degree(CandidateData())
    assert not has_completed_teaching_degree(None)
