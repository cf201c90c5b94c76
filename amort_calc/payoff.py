"""Payoff acceleration with extra payments.

The simulation always runs month by month and keeps the regular monthly
payment of the baseline loan as the floor payment; the extra-payment policy
only adds principal on top of it.
"""

from __future__ import annotations

import dataclasses
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from .data_models import (
    AcceleratedPayment,
    ExtraPaymentPolicy,
    LoanParameters,
    LoanResult,
    PaymentFrequency,
    PayoffResult,
    PayoffSavings,
)
from .engine import DISPLAY_ROW_LIMIT, compute_schedule, validate_parameters

logger = logging.getLogger(__name__)

# Upper bound on simulated months (50 years) for inputs that never pay off.
MAX_PAYOFF_PERIODS = 600

# A balance at or below this amount counts as repaid.
PAYOFF_EPSILON = Decimal("0.01")

SCHEDULE_HEAD_MONTHS = 12

ZERO = Decimal("0")


def simulate_with_extra(
    params: LoanParameters, base_payment: Decimal, policy: ExtraPaymentPolicy
) -> Optional[PayoffResult]:
    """Simulate monthly repayment of ``params`` with extra payments.

    Parameters
    ----------
    params: LoanParameters
        The loan. Its payment frequency is ignored; the simulation is
        monthly.
    base_payment: Decimal
        The regular monthly payment of the baseline loan.
    policy: ExtraPaymentPolicy
        When and how much extra principal is paid.

    Returns
    -------
    PayoffResult or None
        ``None`` for invalid loan parameters. When the balance is still
        outstanding after ``MAX_PAYOFF_PERIODS`` months the result has
        ``paid_off`` set to False.
    """
    if validate_parameters(params):
        return None

    monthly_rate = params.annual_rate / Decimal(100) / Decimal(12)
    balance = params.principal
    total_paid = ZERO
    total_interest = ZERO
    month = 0
    schedule: List[AcceleratedPayment] = []

    while balance > PAYOFF_EPSILON and month < MAX_PAYOFF_PERIODS:
        month += 1
        interest = balance * monthly_rate
        extra = policy.extra_for(month)
        # never pay past the remaining balance
        principal = min(base_payment - interest + extra, balance)
        payment = interest + principal

        balance -= principal
        total_paid += payment
        total_interest += interest

        if month <= DISPLAY_ROW_LIMIT:
            schedule.append(
                AcceleratedPayment(
                    month=month,
                    payment=payment,
                    principal=principal,
                    interest=interest,
                    extra=extra,
                    balance=balance,
                )
            )

    paid_off = balance <= PAYOFF_EPSILON
    if not paid_off:
        logger.warning(
            "Loan of %s not repaid within %d months; %s still outstanding",
            params.principal,
            MAX_PAYOFF_PERIODS,
            balance,
        )
    return PayoffResult(
        periods_used=month,
        total_paid=total_paid,
        total_interest=total_interest,
        schedule=tuple(schedule),
        paid_off=paid_off,
        head_months=SCHEDULE_HEAD_MONTHS,
    )


def payoff_savings(baseline: LoanResult, accelerated: PayoffResult) -> PayoffSavings:
    """Savings of the accelerated payoff against the baseline loan.

    Every figure is clamped at zero, so a policy can never report negative
    savings.
    """
    return PayoffSavings(
        interest_saved=max(ZERO, baseline.total_interest - accelerated.total_interest),
        periods_saved=max(0, baseline.payments_made - accelerated.periods_used),
        total_paid_saved=max(ZERO, baseline.total_payment - accelerated.total_paid),
    )


def accelerate(
    params: LoanParameters, policy: ExtraPaymentPolicy
) -> Optional[Tuple[LoanResult, PayoffResult, PayoffSavings]]:
    """Run the monthly baseline, the accelerated payoff and their savings."""
    monthly = dataclasses.replace(params, frequency=PaymentFrequency.MONTHLY)
    baseline = compute_schedule(monthly)
    if baseline is None:
        return None
    accelerated = simulate_with_extra(monthly, baseline.payment, policy)
    savings = payoff_savings(baseline, accelerated)
    logger.debug(
        "Extra payments (%s %s) save %s interest and %d months",
        policy.kind.value,
        policy.amount,
        savings.interest_saved,
        savings.periods_saved,
    )
    return baseline, accelerated, savings
