"""Side-by-side comparison of independent loan scenarios."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence

from .data_models import (
    ComparisonInsight,
    ComparisonResult,
    Scenario,
    ScenarioResult,
)
from .engine import compute_schedule

logger = logging.getLogger(__name__)

MIN_SCENARIOS = 2


def _best(
    candidates: Sequence[ScenarioResult], key: Callable[[ScenarioResult], object]
) -> Optional[ScenarioResult]:
    # min() keeps the first of equal candidates
    return min(candidates, key=key) if candidates else None


def _insight(first: ScenarioResult, second: ScenarioResult) -> ComparisonInsight:
    a, b = first.scenario.params, second.scenario.params
    return ComparisonInsight(
        first=first,
        second=second,
        rate_difference=abs(a.annual_rate - b.annual_rate),
        interest_difference=abs(first.result.total_interest - second.result.total_interest),
        term_difference=abs(a.term_years - b.term_years),
        payment_difference=abs(first.result.payment - second.result.payment),
    )


def compare(scenarios: Iterable[Scenario]) -> ComparisonResult:
    """Calculate every scenario and pick the best one for each metric.

    Invalid scenarios stay in the results (so they can be shown as such)
    but never win a metric. The relative insight needs two valid scenarios
    and is built from the first two.

    Raises
    ------
    ValueError
        If fewer than two scenarios are given.
    """
    scenarios = list(scenarios)
    if len(scenarios) < MIN_SCENARIOS:
        raise ValueError(f"At least {MIN_SCENARIOS} scenarios are required for a comparison")

    results = tuple(ScenarioResult(s, compute_schedule(s.params)) for s in scenarios)
    valid = [r for r in results if r.valid]
    if len(valid) < len(results):
        logger.debug(
            "%d of %d scenarios have invalid parameters", len(results) - len(valid), len(results)
        )

    return ComparisonResult(
        results=results,
        best_monthly_payment=_best(valid, lambda r: r.result.payment),
        lowest_interest=_best(valid, lambda r: r.result.total_interest),
        lowest_total=_best(valid, lambda r: r.result.total_payment),
        insight=_insight(valid[0], valid[1]) if len(valid) >= 2 else None,
    )
