from __future__ import annotations

from models import Subject

MINUTES_PER_HOUR = 60.0


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0 instead of inf/NaN for a non-positive denominator."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def calculate_subject_round_time(subject: Subject) -> float:
    """Hours needed for one complete review pass of ``subject``."""
    return subject.total_load * subject.study_speed_per_page / MINUTES_PER_HOUR


def achievement_rate(rounds: float, target_rounds: float) -> float:
    return safe_divide(rounds, target_rounds) * 100
