from __future__ import annotations

import argparse
import json
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List

from duration import calculate_study_days, calculate_total_study_time
from metrics import build_saved_simulation, result_to_dict, study_plan_to_dict, summarize_results
from models import SimulationResultData, StudyPlan, Subject
from models_pydantic import StudyPlanInput
from simulation import STRATEGIES, run_simulation
from storage import LocalStore, load_study_plan, load_subjects, load_subjects_from_json, save_simulation

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)

DEFAULT_STUDY_DAYS = 30
DEFAULT_DAILY_STUDY_HOURS = 4.0
DEFAULT_STORE_PATH = ".study_store.json"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Study round simulator")
    parser.add_argument("--config", type=str, help="Path to config JSON")
    parser.add_argument("--exam-name", dest="exam_name", type=str, help="Exam name")
    parser.add_argument("--start-date", dest="start_date", type=str, help="Start date YYYY-MM-DD")
    parser.add_argument("--end-date", dest="end_date", type=str, help="End (exam) date YYYY-MM-DD")
    parser.add_argument("--daily-hours", dest="daily_hours", type=float, help="Study hours per day")
    parser.add_argument("--strategy", type=str, help=f"One of: {', '.join(sorted(STRATEGIES))}")
    parser.add_argument("--subjects", type=str, help="JSON file with subjects (overrides the store)")
    parser.add_argument("--store", type=str, default=DEFAULT_STORE_PATH, help="Local store JSON file")
    parser.add_argument("--output", type=str, help="Write the simulation report to this JSON file")
    parser.add_argument("--save", action="store_true", help="Save the result to the local store")
    return parser.parse_args()


def load_config(args: argparse.Namespace, store: LocalStore) -> Dict:
    today = date.today()
    config = {
        "exam_name": "Exam",
        "start_date": today.isoformat(),
        "end_date": (today + timedelta(days=DEFAULT_STUDY_DAYS)).isoformat(),
        "daily_hours": DEFAULT_DAILY_STUDY_HOURS,
        "strategy": "equal",
        "subjects": None,
    }

    stored_plan = load_study_plan(store)
    if stored_plan:
        config.update(
            exam_name=stored_plan.exam_name,
            start_date=stored_plan.study_start_date.isoformat(),
            end_date=stored_plan.study_end_date.isoformat(),
            daily_hours=stored_plan.daily_study_hours,
        )

    if args.config:
        with open(args.config, "r", encoding="utf-8") as f:
            file_config = json.load(f)
            config.update(file_config)

    for key in ("exam_name", "start_date", "end_date", "daily_hours", "strategy", "subjects"):
        value = getattr(args, key)
        if value is not None:
            config[key] = value

    return config


def build_study_plan(config: Dict) -> StudyPlan:
    return StudyPlanInput.model_validate(
        {
            "examName": config["exam_name"],
            "studyStartDate": config["start_date"],
            "studyEndDate": config["end_date"],
            "dailyStudyHours": config["daily_hours"],
        }
    ).to_domain()


def build_report(plan: StudyPlan, strategy: str, results: List[SimulationResultData]) -> Dict:
    study_days = calculate_study_days(plan.study_start_date, plan.study_end_date)
    summary = summarize_results(results)
    return {
        "studyPlan": study_plan_to_dict(plan),
        "strategy": strategy,
        "studyDays": study_days,
        "totalStudyHours": calculate_total_study_time(study_days, plan.daily_study_hours),
        "results": [result_to_dict(r) for r in results],
        "summary": {
            "totalAchievementRate": summary.total_achievement_rate,
            "bestSubject": summary.best_subject,
            "worstSubject": summary.worst_subject,
        },
    }


def log_results(results: List[SimulationResultData]) -> None:
    for result in results:
        logger.info(
            "%-24s %6.1f rounds / %d target (%5.1f%%)",
            result.subject_name,
            result.rounds,
            result.target_rounds,
            result.achievement_rate,
        )


def write_report(path: Path, payload: Dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.info("Wrote report to %s", path)


def main() -> None:
    args = parse_args()
    store = LocalStore(Path(args.store))
    config = load_config(args, store)
    plan = build_study_plan(config)

    subjects: List[Subject]
    if config.get("subjects"):
        subjects = load_subjects_from_json(Path(config["subjects"]))
    else:
        subjects = load_subjects(store)
    if not subjects:
        logger.warning("No subjects to simulate; pass --subjects or save some to %s", store.path)
        return

    strategy = config["strategy"]
    results = run_simulation(plan, subjects, strategy)
    log_results(results)

    summary = summarize_results(results)
    logger.info(
        "Overall achievement %.1f%%, best: %s, worst: %s",
        summary.total_achievement_rate,
        summary.best_subject,
        summary.worst_subject,
    )

    if args.output:
        write_report(Path(args.output), build_report(plan, strategy, results))
    if args.save:
        saved = build_saved_simulation(strategy, results, plan, subjects)
        if save_simulation(store, saved):
            logger.info("Saved simulation to %s", store.path)
        else:
            logger.warning("Simulation result was not saved")


if __name__ == "__main__":
    main()
