"""Single recompute entry point for the interactive surfaces.

Callers invoke :func:`recompute` whenever any input changes; it recalculates
everything from scratch. Only the most recent call is memoized, which makes
repeated renders of an unchanged form free without holding any other state.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from .costs import HousingCosts, MonthlyCostBreakdown, monthly_cost_breakdown
from .data_models import (
    ExtraPaymentPolicy,
    LoanParameters,
    LoanResult,
    PayoffResult,
    PayoffSavings,
    YearlyBreakdown,
)
from .engine import compute_schedule, yearly_breakdown
from .payoff import accelerate


@dataclass(frozen=True)
class Calculation:
    result: LoanResult
    yearly: Tuple[YearlyBreakdown, ...]
    baseline: Optional[LoanResult] = None
    payoff: Optional[PayoffResult] = None
    savings: Optional[PayoffSavings] = None
    costs: Optional[MonthlyCostBreakdown] = None


@lru_cache(maxsize=1)
def recompute(
    params: LoanParameters,
    policy: Optional[ExtraPaymentPolicy] = None,
    costs: Optional[HousingCosts] = None,
) -> Optional[Calculation]:
    """Recalculate the schedule and everything derived from it.

    Returns ``None`` for invalid loan parameters, in which case the caller
    should prompt for valid input instead of showing figures.
    """
    result = compute_schedule(params)
    if result is None:
        return None

    baseline = payoff = savings = None
    if policy is not None:
        baseline, payoff, savings = accelerate(params, policy)

    return Calculation(
        result=result,
        yearly=tuple(yearly_breakdown(result)),
        baseline=baseline,
        payoff=payoff,
        savings=savings,
        costs=monthly_cost_breakdown(result, costs) if costs is not None else None,
    )
