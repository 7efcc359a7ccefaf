"""Tests for CLI configuration layering and the JSON report."""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

import main
from storage import LocalStore, save_study_plan


def _args(**overrides) -> argparse.Namespace:
    values = {
        "config": None,
        "exam_name": None,
        "start_date": None,
        "end_date": None,
        "daily_hours": None,
        "strategy": None,
        "subjects": None,
        "store": None,
        "output": None,
        "save": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


def test_config_precedence(tmp_path: Path, make_plan) -> None:
    store = LocalStore(tmp_path / "store.json")
    save_study_plan(store, make_plan(days=20, daily_hours=2))
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"daily_hours": 6, "strategy": "priority"}), encoding="utf-8")

    config = main.load_config(_args(config=str(config_path), strategy="target-rounds"), store)

    assert config["exam_name"] == "Finals"
    assert config["daily_hours"] == 6
    assert config["strategy"] == "target-rounds"


def test_defaults_without_store(tmp_path: Path) -> None:
    config = main.load_config(_args(), LocalStore(tmp_path / "empty.json"))
    plan = main.build_study_plan(config)
    assert plan.daily_study_hours == main.DEFAULT_DAILY_STUDY_HOURS
    assert (plan.study_end_date - plan.study_start_date).days == main.DEFAULT_STUDY_DAYS


def test_invalid_plan_is_rejected() -> None:
    config = {"exam_name": "X", "start_date": "2025-03-10", "end_date": "2025-03-01", "daily_hours": 2}
    with pytest.raises(ValidationError):
        main.build_study_plan(config)


def test_report_contents(make_plan, make_subject) -> None:
    plan = make_plan(days=10, daily_hours=3)
    results = main.run_simulation(plan, [make_subject("A", 10)], "equal")
    report = main.build_report(plan, "equal", results)

    assert report["studyDays"] == 10
    assert report["totalStudyHours"] == pytest.approx(30.0)
    assert report["results"][0]["rounds"] == pytest.approx(3.0)
    assert report["summary"]["bestSubject"] == "A"


def test_main_writes_report_and_saves(tmp_path: Path, monkeypatch) -> None:
    subjects_path = tmp_path / "subjects.json"
    subjects_path.write_text(
        json.dumps([{"name": "A", "totalLoad": 60, "studySpeedPerPage": 10, "targetRounds": 2}]),
        encoding="utf-8",
    )
    output_path = tmp_path / "out" / "report.json"
    store_path = tmp_path / "store.json"
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "main.py",
            "--start-date", "2025-03-01",
            "--end-date", "2025-03-06",
            "--daily-hours", "4",
            "--strategy", "target-rounds",
            "--subjects", str(subjects_path),
            "--store", str(store_path),
            "--output", str(output_path),
            "--save",
        ],
    )

    main.main()

    report = json.loads(output_path.read_text(encoding="utf-8"))
    assert report["totalStudyHours"] == pytest.approx(20.0)
    assert report["results"][0]["rounds"] == pytest.approx(2.0)
    saved = LocalStore(store_path).get("savedSimulation")
    assert saved["strategy"] == "target-rounds"
    assert isinstance(saved["timestamp"], datetime)
