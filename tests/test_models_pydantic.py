"""Tests for study plan and subject input validation."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from models_pydantic import StudyPlanInput, SubjectInput


def _plan_payload(**overrides) -> dict:
    payload = {
        "examName": "Bar Exam",
        "studyStartDate": "2025-03-01T00:00:00.000Z",
        "studyEndDate": "2025-03-31T00:00:00.000Z",
        "dailyStudyHours": 4,
    }
    payload.update(overrides)
    return payload


def test_valid_plan_converts_to_domain() -> None:
    plan = StudyPlanInput.model_validate(_plan_payload()).to_domain()
    assert plan.exam_name == "Bar Exam"
    assert plan.study_start_date == datetime(2025, 3, 1)
    assert plan.study_start_date.tzinfo is None
    assert plan.daily_study_hours == 4


def test_plan_accepts_plain_dates_and_snake_case() -> None:
    plan = StudyPlanInput(
        exam_name="Finals",
        study_start_date=date(2025, 3, 1),
        study_end_date=date(2025, 3, 2),
        daily_study_hours=1.5,
    ).to_domain()
    assert plan.study_end_date == datetime(2025, 3, 2)


@pytest.mark.parametrize(
    "overrides",
    [
        {"examName": "   "},
        {"dailyStudyHours": 0},
        {"dailyStudyHours": -2},
        {"studyEndDate": "2025-03-01T00:00:00.000Z"},
        {"studyEndDate": "2025-02-01T00:00:00.000Z"},
        {"studyStartDate": "not a date"},
    ],
)
def test_invalid_plans_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        StudyPlanInput.model_validate(_plan_payload(**overrides))


def test_subject_defaults() -> None:
    subject = SubjectInput.model_validate({"name": " Civil Law ", "totalLoad": 600}).to_domain()
    assert subject.name == "Civil Law"
    assert subject.load_unit == "pages"
    assert subject.study_speed_per_page == 10
    assert subject.priority == 3
    assert subject.target_rounds == 3
    assert subject.id


def test_subject_ids_are_unique_by_default() -> None:
    first = SubjectInput(name="A", totalLoad=1)
    second = SubjectInput(name="A", totalLoad=1)
    assert first.id != second.id


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"totalLoad": -1},
        {"studySpeedPerPage": -0.5},
        {"priority": 0},
        {"priority": 6},
        {"targetRounds": 0},
    ],
)
def test_invalid_subjects_are_rejected(overrides: dict) -> None:
    payload = {"name": "Math", "totalLoad": 100}
    payload.update(overrides)
    with pytest.raises(ValidationError):
        SubjectInput.model_validate(payload)
