"""Recurring housing costs on top of the loan payment.

Property tax, insurance, PMI and HOA fees are entered as annual amounts and
spread evenly over the months; they never enter the amortization math.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .data_models import LoanResult

ZERO = Decimal("0")
TWELVE = Decimal(12)


@dataclass(frozen=True)
class HousingCosts:
    property_tax: Decimal = ZERO
    home_insurance: Decimal = ZERO
    pmi: Decimal = ZERO
    hoa_fees: Decimal = ZERO
    down_payment_percent: Decimal = Decimal("20")

    def __post_init__(self) -> None:
        for name in ("property_tax", "home_insurance", "pmi", "hoa_fees"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name.replace('_', ' ')} must not be negative")
        if not 0 <= self.down_payment_percent <= 100:
            raise ValueError("down payment percent must be between 0 and 100")

    @property
    def annual_total(self) -> Decimal:
        return self.property_tax + self.home_insurance + self.pmi + self.hoa_fees

    def down_payment_amount(self, loan_amount: Decimal) -> Decimal:
        return loan_amount * self.down_payment_percent / Decimal(100)


@dataclass(frozen=True)
class MonthlyCostBreakdown:
    loan_payment: Decimal
    property_tax: Decimal
    home_insurance: Decimal
    pmi: Decimal
    hoa_fees: Decimal
    down_payment: Decimal = ZERO
    down_payment_percent: Decimal = ZERO

    @property
    def extras(self) -> Decimal:
        return self.property_tax + self.home_insurance + self.pmi + self.hoa_fees

    @property
    def total(self) -> Decimal:
        return self.loan_payment + self.extras


def monthly_cost_breakdown(result: LoanResult, costs: HousingCosts) -> MonthlyCostBreakdown:
    """Monthly share of each annual cost next to the loan payment.

    The down payment is a one-off amount derived from the loan amount; it is
    reported alongside but never counted in the monthly total.
    """
    return MonthlyCostBreakdown(
        loan_payment=result.payment,
        property_tax=costs.property_tax / TWELVE,
        home_insurance=costs.home_insurance / TWELVE,
        pmi=costs.pmi / TWELVE,
        hoa_fees=costs.hoa_fees / TWELVE,
        down_payment=costs.down_payment_amount(result.params.principal),
        down_payment_percent=costs.down_payment_percent,
    )
