from __future__ import annotations

import math
from datetime import date, timedelta

ONE_DAY = timedelta(days=1)


def calculate_study_days(start_date: date, end_date: date) -> int:
    # Partial days count as a full day; never fewer than one day.
    diff_days = math.ceil((end_date - start_date) / ONE_DAY)
    return max(1, diff_days)


def calculate_total_study_time(study_days: int, daily_study_hours: float) -> float:
    return study_days * daily_study_hours
