"""Affordability: the largest loan an income can service.

This is the algebraic inverse of the annuity payment used by the engine:
given the monthly payment a debt-to-income target leaves room for, solve
for the principal.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from .data_models import AffordabilityResult

logger = logging.getLogger(__name__)


def principal_from_payment(payment: Decimal, monthly_rate: Decimal, periods: int) -> Decimal:
    """Return the principal a fixed ``payment`` retires over ``periods``.

        P = payment * ((1 + r)^n - 1) / (r * (1 + r)^n)

    A zero rate mirrors the forward formula: ``P = payment * n``.
    """
    if monthly_rate == 0:
        return payment * periods
    factor = (1 + monthly_rate) ** periods
    return payment * (factor - 1) / (monthly_rate * factor)


def max_principal(
    monthly_income: Decimal,
    monthly_debts: Decimal,
    target_dti: Decimal,
    annual_rate: Decimal,
    term_years: int,
    down_payment: Decimal = Decimal("0"),
) -> Optional[AffordabilityResult]:
    """Derive the maximum loan and home price for an income.

    Parameters
    ----------
    monthly_income: Decimal
        Gross monthly income.
    monthly_debts: Decimal
        Existing monthly debt payments (credit cards, car loans, ...).
    target_dti: Decimal
        Target debt-to-income ratio in percent, e.g. ``Decimal("28")``.
    annual_rate: Decimal
        Annual interest rate in percent.
    term_years: int
        Loan term in years; payments are monthly.
    down_payment: Decimal
        Cash available on top of the loan.

    Returns
    -------
    AffordabilityResult or None
        ``None`` for negative inputs or a non-positive term. The maximum
        payment, and therefore the principal, is negative when the debts
        exceed the budget the ratio allows.
    """
    if term_years is None or term_years <= 0 or min(
        monthly_income, monthly_debts, target_dti, annual_rate, down_payment
    ) < 0:
        logger.debug(
            "Rejected affordability inputs: income=%s debts=%s dti=%s rate=%s term=%s",
            monthly_income,
            monthly_debts,
            target_dti,
            annual_rate,
            term_years,
        )
        return None

    housing_budget = monthly_income * target_dti / Decimal(100)
    max_payment = housing_budget - monthly_debts
    monthly_rate = annual_rate / Decimal(100) / Decimal(12)
    principal = principal_from_payment(max_payment, monthly_rate, term_years * 12)

    debt_to_income = None
    if monthly_income > 0:
        debt_to_income = (monthly_debts + max_payment) / monthly_income * 100

    return AffordabilityResult(
        max_payment=max_payment,
        max_principal=principal,
        max_home_price=principal + down_payment,
        housing_budget=housing_budget,
        debt_to_income=debt_to_income,
    )
