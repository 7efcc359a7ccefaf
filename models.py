from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List

CHART_COLORS = [f"hsl(var(--chart-{i}))" for i in range(1, 10)]


@dataclass(frozen=True)
class StudyPlan:
    exam_name: str
    study_start_date: date  # datetime also accepted
    study_end_date: date
    daily_study_hours: float


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    total_load: float
    load_unit: str
    study_speed_per_page: float  # minutes per load unit
    priority: int
    target_rounds: int


@dataclass
class SimulationResultData:
    subject_name: str
    rounds: float
    target_rounds: int
    color: str
    achievement_rate: float = 0.0


@dataclass
class ResultSummary:
    total_achievement_rate: float
    best_subject: str
    worst_subject: str


@dataclass
class SavedSimulationResult:
    strategy: str
    results: List[SimulationResultData]
    study_plan: StudyPlan
    subjects: List[Subject]
    timestamp: str
    total_achievement_rate: float = 0.0
    best_subject: str = ""
    worst_subject: str = ""


def chart_color(index: int) -> str:
    return CHART_COLORS[index % len(CHART_COLORS)]
