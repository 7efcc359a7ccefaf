from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from models import SimulationResultData, Subject, chart_color
from workload import achievement_rate, calculate_subject_round_time, safe_divide

logger = logging.getLogger(__name__)

TOP_UP_FRACTION = 0.1  # phase 2 allocates a tenth of a round per visit
ROUNDS_EPSILON = 1e-9


def _make_result(subject: Subject, rounds: float, index: int) -> SimulationResultData:
    return SimulationResultData(
        subject_name=subject.name,
        rounds=rounds,
        target_rounds=subject.target_rounds,
        color=chart_color(index),
        achievement_rate=achievement_rate(rounds, subject.target_rounds),
    )


def simulate_equal_distribution(subjects: Sequence[Subject], total_study_time: float) -> List[SimulationResultData]:
    """Every subject gets the same number of rounds: one pass covers all material.

    A subject with no workload has nothing to review and gets 0 rounds.
    """
    round_times = [calculate_subject_round_time(s) for s in subjects]
    possible_rounds = safe_divide(total_study_time, sum(round_times))
    return [
        _make_result(subject, possible_rounds if round_time > 0 else 0.0, i)
        for i, (subject, round_time) in enumerate(zip(subjects, round_times))
    ]


def simulate_priority_distribution(subjects: Sequence[Subject], total_study_time: float) -> List[SimulationResultData]:
    total_priority = sum(s.priority for s in subjects)
    results: List[SimulationResultData] = []
    for i, subject in enumerate(subjects):
        allocated_time = total_study_time * safe_divide(subject.priority, total_priority)
        rounds = safe_divide(allocated_time, calculate_subject_round_time(subject))
        results.append(_make_result(subject, rounds, i))
    return results


def sort_for_target_rounds(subjects: Sequence[Subject]) -> List[Subject]:
    # Highest priority first; among equals, the subject needing fewer rounds goes first.
    return sorted(subjects, key=lambda s: (-s.priority, s.target_rounds))


def simulate_target_rounds(subjects: Sequence[Subject], total_study_time: float) -> List[SimulationResultData]:
    """Greedy allocation towards each subject's target rounds.

    Phase 1 gives each subject, in priority order, time for one full round
    until the budget runs out. Subjects never reached are still reported,
    with 0 rounds. Phase 2 spends what is left in tenth-of-a-round top-ups,
    cycling over subjects still below target, until the budget is gone or a
    whole pass allocates nothing.

    The output follows the priority order, not the input order.
    """
    ordered = sort_for_target_rounds(subjects)
    remaining_time = total_study_time
    entries: List[Tuple[SimulationResultData, float]] = []

    for subject in ordered:
        if remaining_time <= 0:
            break
        round_time = calculate_subject_round_time(subject)
        allocated_time = min(round_time, remaining_time)
        rounds = safe_divide(allocated_time, round_time)
        entries.append((_make_result(subject, rounds, len(entries)), round_time))
        remaining_time -= allocated_time

    unreached = ordered[len(entries):]
    if unreached:
        logger.debug("Study time exhausted before %d subject(s); reporting 0 rounds", len(unreached))
    for subject in unreached:
        entries.append((_make_result(subject, 0.0, len(entries)), calculate_subject_round_time(subject)))

    logger.debug("Phase 1 done, %.3f hours left for top-ups", max(remaining_time, 0.0))

    while remaining_time > 0:
        allocated_any = False
        for result, round_time in entries:
            if remaining_time <= 0:
                break
            if result.rounds >= result.target_rounds - ROUNDS_EPSILON:
                continue
            shortfall = (result.target_rounds - result.rounds) * round_time
            additional_time = min(round_time * TOP_UP_FRACTION, remaining_time, shortfall)
            if additional_time <= 0:
                continue
            result.rounds += additional_time / round_time
            result.achievement_rate = achievement_rate(result.rounds, result.target_rounds)
            remaining_time -= additional_time
            allocated_any = True
        if not allocated_any:
            break

    return [result for result, _ in entries]
