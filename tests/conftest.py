"""Shared fixtures for the simulator tests."""

from datetime import datetime, timedelta
from typing import Callable

import pytest

from models import StudyPlan, Subject


def _subject(
    name: str,
    round_time_hours: float,
    priority: int = 3,
    target_rounds: int = 3,
) -> Subject:
    # 60 minutes per unit, so total_load equals the round time in hours.
    return Subject(
        id=name.lower(),
        name=name,
        total_load=round_time_hours,
        load_unit="pages",
        study_speed_per_page=60,
        priority=priority,
        target_rounds=target_rounds,
    )


@pytest.fixture
def make_subject() -> Callable[..., Subject]:
    """Build a subject whose round time is given directly in hours."""
    return _subject


@pytest.fixture
def make_plan() -> Callable[..., StudyPlan]:
    def _plan(days: int = 10, daily_hours: float = 4.0) -> StudyPlan:
        start = datetime(2025, 3, 1)
        return StudyPlan(
            exam_name="Finals",
            study_start_date=start,
            study_end_date=start + timedelta(days=days),
            daily_study_hours=daily_hours,
        )

    return _plan
