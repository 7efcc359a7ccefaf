"""Tests for the strategy dispatcher."""

import logging

import pytest

from simulation import STRATEGIES, run_simulation, total_study_hours


def test_total_study_hours(make_plan) -> None:
    assert total_study_hours(make_plan(days=10, daily_hours=4)) == pytest.approx(40.0)


def test_same_day_plan_still_has_one_day(make_plan) -> None:
    assert total_study_hours(make_plan(days=0, daily_hours=3)) == pytest.approx(3.0)


def test_dispatches_equal(make_plan, make_subject) -> None:
    subjects = [make_subject("A", 10), make_subject("B", 20)]
    results = run_simulation(make_plan(days=15, daily_hours=4), subjects, "equal")
    assert [r.rounds for r in results] == [pytest.approx(2.0), pytest.approx(2.0)]


def test_dispatches_priority(make_plan, make_subject) -> None:
    subjects = [make_subject("A", 10, priority=1), make_subject("B", 10, priority=3)]
    results = run_simulation(make_plan(days=10, daily_hours=4), subjects, "priority")
    assert [r.rounds for r in results] == [pytest.approx(1.0), pytest.approx(3.0)]


@pytest.mark.parametrize("name", ["target-rounds", "rounds"])
def test_dispatches_target_rounds(name, make_plan, make_subject) -> None:
    subjects = [make_subject("A", 10, priority=1), make_subject("B", 10, priority=5, target_rounds=2)]
    results = run_simulation(make_plan(days=5, daily_hours=5), subjects, name)
    assert [r.subject_name for r in results] == ["B", "A"]


def test_unknown_strategy_falls_back_to_equal(make_plan, make_subject, caplog) -> None:
    plan = make_plan()
    subjects = [make_subject("A", 10, priority=1), make_subject("B", 25, priority=4)]

    with caplog.at_level(logging.WARNING, logger="simulation"):
        fallback = run_simulation(plan, subjects, "fastest")

    assert fallback == run_simulation(plan, subjects, "equal")
    assert "fastest" in caplog.text


def test_known_strategy_names() -> None:
    assert {"equal", "priority", "target-rounds"} <= set(STRATEGIES)


def test_does_not_mutate_inputs(make_plan, make_subject) -> None:
    plan = make_plan()
    subjects = [make_subject("B", 10, priority=1), make_subject("A", 10, priority=5)]
    snapshot = list(subjects)

    first = run_simulation(plan, subjects, "target-rounds")
    second = run_simulation(plan, subjects, "target-rounds")

    assert subjects == snapshot
    assert first == second
    assert first is not second
