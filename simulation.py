from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence

from duration import calculate_study_days, calculate_total_study_time
from models import SimulationResultData, StudyPlan, Subject
from strategies import simulate_equal_distribution, simulate_priority_distribution, simulate_target_rounds

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = "equal"

Strategy = Callable[[Sequence[Subject], float], List[SimulationResultData]]

STRATEGIES: Dict[str, Strategy] = {
    "equal": simulate_equal_distribution,
    "priority": simulate_priority_distribution,
    "target-rounds": simulate_target_rounds,
    "rounds": simulate_target_rounds,  # legacy name
}

STRATEGY_DESCRIPTIONS = {
    "equal": "Gives every subject the same number of rounds.",
    "priority": "Splits study time in proportion to subject priority.",
    "target-rounds": "Works towards each subject's target rounds, highest priority first.",
}


def total_study_hours(plan: StudyPlan) -> float:
    study_days = calculate_study_days(plan.study_start_date, plan.study_end_date)
    total = calculate_total_study_time(study_days, plan.daily_study_hours)
    logger.debug("%s: %d study days, %.2f hours available", plan.exam_name, study_days, total)
    return total


def run_simulation(plan: StudyPlan, subjects: Sequence[Subject], strategy: str) -> List[SimulationResultData]:
    """Distribute the plan's study time over ``subjects`` with the named strategy.

    Unknown strategy names fall back to equal distribution.
    """
    simulate = STRATEGIES.get(strategy)
    if simulate is None:
        logger.warning("Unknown strategy %r; falling back to %s", strategy, DEFAULT_STRATEGY)
        simulate = STRATEGIES[DEFAULT_STRATEGY]
    return simulate(subjects, total_study_hours(plan))
