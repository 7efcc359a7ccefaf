from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from models import ResultSummary, SavedSimulationResult, SimulationResultData, StudyPlan, Subject


def summarize_results(results: Sequence[SimulationResultData]) -> ResultSummary:
    if not results:
        return ResultSummary(total_achievement_rate=0.0, best_subject="", worst_subject="")

    total_rate = sum(r.achievement_rate for r in results) / len(results)

    # Strict comparisons keep the first subject on ties.
    best = results[0]
    worst = results[0]
    for result in results[1:]:
        if result.achievement_rate > best.achievement_rate:
            best = result
        if result.achievement_rate < worst.achievement_rate:
            worst = result

    return ResultSummary(
        total_achievement_rate=total_rate,
        best_subject=best.subject_name,
        worst_subject=worst.subject_name,
    )


def build_saved_simulation(
    strategy: str,
    results: List[SimulationResultData],
    plan: StudyPlan,
    subjects: List[Subject],
    timestamp: Optional[str] = None,
) -> SavedSimulationResult:
    summary = summarize_results(results)
    return SavedSimulationResult(
        strategy=strategy,
        results=list(results),
        study_plan=plan,
        subjects=list(subjects),
        timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
        total_achievement_rate=summary.total_achievement_rate,
        best_subject=summary.best_subject,
        worst_subject=summary.worst_subject,
    )


def study_plan_to_dict(plan: StudyPlan) -> Dict:
    return {
        "examName": plan.exam_name,
        "studyStartDate": plan.study_start_date.isoformat(),
        "studyEndDate": plan.study_end_date.isoformat(),
        "dailyStudyHours": plan.daily_study_hours,
    }


def subject_to_dict(subject: Subject) -> Dict:
    return {
        "id": subject.id,
        "name": subject.name,
        "totalLoad": subject.total_load,
        "loadUnit": subject.load_unit,
        "priority": subject.priority,
        "studySpeedPerPage": subject.study_speed_per_page,
        "targetRounds": subject.target_rounds,
    }


def result_to_dict(result: SimulationResultData) -> Dict:
    data = asdict(result)
    return {
        "subjectName": data["subject_name"],
        "rounds": data["rounds"],
        "targetRounds": data["target_rounds"],
        "color": data["color"],
        "achievementRate": data["achievement_rate"],
    }


def saved_simulation_to_dict(saved: SavedSimulationResult) -> Dict:
    return {
        "strategy": saved.strategy,
        "results": [result_to_dict(r) for r in saved.results],
        "studyPlan": study_plan_to_dict(saved.study_plan),
        "subjects": [subject_to_dict(s) for s in saved.subjects],
        "timestamp": saved.timestamp,
        "totalAchievementRate": saved.total_achievement_rate,
        "bestSubject": saved.best_subject,
        "worstSubject": saved.worst_subject,
    }
