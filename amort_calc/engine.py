"""Core calculation engine for the amortization calculator.

This module implements the closed-form annuity payment and the loop that
turns loan parameters into a payment-by-payment schedule for monthly,
bi-weekly and weekly payment frequencies. Invalid input does not raise: the
engine returns ``None`` and the caller shows a prompt instead of a result.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import Dict, List, Optional

from .data_models import LoanParameters, LoanResult, PaymentRecord, YearlyBreakdown
from .utils import payment_date

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

# Maximum number of schedule rows the interactive views render.
DISPLAY_ROW_LIMIT = 360

ZERO = Decimal("0")


def annuity_payment(principal: Decimal, periodic_rate: Decimal, periods: int) -> Decimal:
    """Return the fixed periodic payment that retires ``principal``.

    The formula is:

        payment = P * (r * (1 + r)^n) / ((1 + r)^n - 1)

    where ``P`` is the principal, ``r`` is the periodic interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if periods <= 0:
        raise ValueError("Number of periods must be positive")
    if periodic_rate == 0:
        return principal / Decimal(periods)
    factor = (1 + periodic_rate) ** periods
    return principal * (periodic_rate * factor) / (factor - 1)


def periodic_rate(params: LoanParameters) -> Decimal:
    """Annual percentage rate converted to the rate of one payment period."""
    return params.annual_rate / Decimal(100) / Decimal(params.payments_per_year)


def effective_annual_rate(params: LoanParameters) -> Decimal:
    """Effective annual rate implied by compounding once per payment."""
    return (1 + periodic_rate(params)) ** params.payments_per_year - 1


def _last_payment_date(params: LoanParameters) -> Optional[date]:
    try:
        return payment_date(params.start_date, params.frequency, params.total_periods - 1)
    except (ValueError, OverflowError):
        return None


def validate_parameters(params: LoanParameters) -> List[str]:
    """Return the reasons ``params`` cannot be calculated (empty if valid)."""
    problems: List[str] = []
    if params.principal is None or params.principal <= 0:
        problems.append("principal must be positive")
    if params.annual_rate is None or params.annual_rate < 0:
        problems.append("interest rate must not be negative")
    if params.term_years is None or params.term_years <= 0:
        problems.append("term must be positive")
    elif params.start_date is not None and _last_payment_date(params) is None:
        problems.append("last payment date is out of range")
    return problems


def compute_schedule(params: LoanParameters) -> Optional[LoanResult]:
    """Compute the amortization schedule and totals for a loan.

    Parameters
    ----------
    params: LoanParameters
        The loan to amortize. A zero interest rate is valid and uses the
        ``principal / periods`` branch of the payment formula.

    Returns
    -------
    LoanResult or None
        ``None`` when the principal or term is not positive, the rate is
        negative or the last payment would fall after ``date.max``.
        Otherwise the periodic payment, the schedule (which stops as soon as
        the balance reaches zero) and the aggregate totals.
    """
    problems = validate_parameters(params)
    if problems:
        logger.debug("Rejected loan parameters %s: %s", params, "; ".join(problems))
        return None

    rate = periodic_rate(params)
    periods = params.total_periods
    payment = annuity_payment(params.principal, rate, periods)

    schedule: List[PaymentRecord] = []
    balance = params.principal
    for period in range(1, periods + 1):
        interest = balance * rate
        principal_part = payment - interest
        balance = max(ZERO, balance - principal_part)
        schedule.append(
            PaymentRecord(
                period=period,
                principal=principal_part,
                interest=interest,
                balance=balance,
                date=payment_date(params.start_date, params.frequency, period - 1),
            )
        )
        if balance == 0:
            break

    total_payment = payment * len(schedule)
    logger.debug(
        "Amortized %s over %d of %d periods, payment %s",
        params.principal,
        len(schedule),
        periods,
        payment,
    )
    return LoanResult(
        params=params,
        payment=payment,
        total_payment=total_payment,
        total_interest=total_payment - params.principal,
        payoff_date=schedule[-1].date,
        schedule=tuple(schedule),
    )


def yearly_breakdown(result: LoanResult) -> List[YearlyBreakdown]:
    """Aggregate the schedule by the calendar year of each payment."""
    breakdown: List[YearlyBreakdown] = []
    year: Optional[int] = None
    principal = ZERO
    interest = ZERO
    balance = result.params.principal
    for record in result.schedule:
        if year is not None and record.date.year != year:
            breakdown.append(YearlyBreakdown(year, principal, interest, balance))
            principal = ZERO
            interest = ZERO
        year = record.date.year
        principal += record.principal
        interest += record.interest
        balance = record.balance
    if year is not None:
        breakdown.append(YearlyBreakdown(year, principal, interest, balance))
    return breakdown


def summarize(result: LoanResult) -> Dict[str, object]:
    """Return aggregate metrics as JSON-friendly values.

    Besides the totals this includes the interest and principal shares of
    the total paid, the payment as a percentage of the principal and the
    average interest paid per year of the term.
    """
    params = result.params
    interest_share = (
        result.total_interest / result.total_payment * 100 if result.total_payment else ZERO
    )
    return {
        "principal": float(params.principal),
        "annual_rate": float(params.annual_rate),
        "term_years": params.term_years,
        "frequency": params.frequency.value,
        "payment": float(result.payment),
        "total_payment": float(result.total_payment),
        "total_interest": float(result.total_interest),
        "payments_made": result.payments_made,
        "start_date": params.start_date.isoformat(),
        "payoff_date": result.payoff_date.isoformat(),
        "interest_share": float(interest_share),
        "principal_share": float(100 - interest_share),
        "payment_to_principal": float(result.payment / params.principal * 100),
        "average_annual_interest": float(result.total_interest / params.term_years),
        "effective_annual_rate": float(effective_annual_rate(params)),
    }
