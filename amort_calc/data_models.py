"""Data models for the amortization calculator.

This module defines dataclasses representing the entities that flow through
the calculator: the loan parameters entered by the user, the payment records
produced by the engine, extra-payment policies for the payoff accelerator,
affordability results and comparison scenarios. All of them are frozen so a
calculation can never alter its own inputs, and amounts are kept as
``Decimal`` to avoid binary rounding surprises in the schedule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class PaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"
    WEEKLY = "weekly"

    @property
    def payments_per_year(self) -> int:
        return _PAYMENTS_PER_YEAR[self]


_PAYMENTS_PER_YEAR = {
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.BIWEEKLY: 26,
    PaymentFrequency.WEEKLY: 52,
}


@dataclass(frozen=True)
class LoanParameters:
    """Inputs to a single amortization calculation.

    Attributes
    ----------
    principal: Decimal
        The financed amount.
    annual_rate: Decimal
        Nominal annual interest rate in percent (``Decimal("6.5")`` means
        6.5 %).
    term_years: int
        Loan term in whole years.
    start_date: date
        Date of the first payment.
    frequency: PaymentFrequency
        How often a payment is made.
    """

    principal: Decimal
    annual_rate: Decimal
    term_years: int
    start_date: date
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY

    @property
    def payments_per_year(self) -> int:
        return self.frequency.payments_per_year

    @property
    def total_periods(self) -> int:
        return self.term_years * self.payments_per_year

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain JSON types (amounts as strings)."""
        return {
            "principal": str(self.principal),
            "annual_rate": str(self.annual_rate),
            "term_years": self.term_years,
            "frequency": self.frequency.value,
            "start_date": self.start_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoanParameters":
        return cls(
            principal=Decimal(str(data["principal"])),
            annual_rate=Decimal(str(data["annual_rate"])),
            term_years=int(data["term_years"]),
            frequency=PaymentFrequency(data.get("frequency", "monthly")),
            start_date=date.fromisoformat(data["start_date"]),
        )


@dataclass(frozen=True)
class PaymentRecord:
    """One row of the amortization schedule."""

    period: int
    principal: Decimal
    interest: Decimal
    balance: Decimal
    date: date

    @property
    def payment(self) -> Decimal:
        return self.principal + self.interest


@dataclass(frozen=True)
class LoanResult:
    """Outcome of :func:`amort_calc.engine.compute_schedule`.

    ``schedule`` may be shorter than ``params.total_periods`` when the
    balance reaches zero before the last scheduled period.
    """

    params: LoanParameters
    payment: Decimal
    total_payment: Decimal
    total_interest: Decimal
    payoff_date: date
    schedule: Tuple[PaymentRecord, ...]

    @property
    def payments_made(self) -> int:
        return len(self.schedule)


class ExtraPaymentKind(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"
    ONETIME = "onetime"


@dataclass(frozen=True)
class ExtraPaymentPolicy:
    """How extra money is applied to the principal.

    ``monthly`` adds ``amount`` every month, ``yearly`` adds it on every
    12th month and ``onetime`` adds it once, in month ``period``.
    """

    kind: ExtraPaymentKind
    amount: Decimal
    period: int = 12

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Extra payment amount must not be negative")
        if self.kind == ExtraPaymentKind.ONETIME and self.period < 1:
            raise ValueError("One-time payment month must be 1 or later")

    def extra_for(self, month: int) -> Decimal:
        """Return the extra principal applied in ``month`` (1-based)."""
        if self.amount <= 0:
            return Decimal("0")
        if self.kind == ExtraPaymentKind.MONTHLY:
            return self.amount
        if self.kind == ExtraPaymentKind.YEARLY and month % 12 == 0:
            return self.amount
        if self.kind == ExtraPaymentKind.ONETIME and month == self.period:
            return self.amount
        return Decimal("0")


@dataclass(frozen=True)
class AcceleratedPayment:
    month: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    extra: Decimal
    balance: Decimal


@dataclass(frozen=True)
class PayoffResult:
    """Outcome of a payoff simulation with extra payments.

    ``schedule`` holds at most the display limit of rows; ``periods_used``
    always counts every simulated month.
    """

    periods_used: int
    total_paid: Decimal
    total_interest: Decimal
    schedule: Tuple[AcceleratedPayment, ...]
    paid_off: bool
    head_months: int = 12

    @property
    def schedule_head(self) -> Tuple[AcceleratedPayment, ...]:
        return self.schedule[: self.head_months]

    @property
    def years_to_payoff(self) -> float:
        return self.periods_used / 12


@dataclass(frozen=True)
class PayoffSavings:
    interest_saved: Decimal
    periods_saved: int
    total_paid_saved: Decimal

    @property
    def years_saved(self) -> float:
        return self.periods_saved / 12


@dataclass(frozen=True)
class AffordabilityResult:
    """Result of the inverse (affordability) calculation.

    A non-positive ``max_payment`` means the existing debts already use up
    the allowed budget and no loan can be serviced.
    """

    max_payment: Decimal
    max_principal: Decimal
    max_home_price: Decimal
    housing_budget: Decimal
    debt_to_income: Optional[Decimal]

    @property
    def affordable(self) -> bool:
        return self.max_payment > 0


@dataclass(frozen=True)
class YearlyBreakdown:
    year: int
    principal: Decimal
    interest: Decimal
    balance: Decimal

    @property
    def total_payment(self) -> Decimal:
        return self.principal + self.interest


@dataclass(frozen=True)
class Scenario:
    name: str
    params: LoanParameters


@dataclass(frozen=True)
class ScenarioResult:
    scenario: Scenario
    result: Optional[LoanResult]

    @property
    def valid(self) -> bool:
        return self.result is not None and self.result.payment > 0

    @property
    def interest_share(self) -> Optional[Decimal]:
        """Total interest as a percentage of the total paid."""
        if not self.valid or self.result.total_payment <= 0:
            return None
        return self.result.total_interest / self.result.total_payment * 100


@dataclass(frozen=True)
class ComparisonInsight:
    """Relative figures between the first two valid scenarios."""

    first: ScenarioResult
    second: ScenarioResult
    rate_difference: Decimal
    interest_difference: Decimal
    term_difference: int
    payment_difference: Decimal


@dataclass(frozen=True)
class ComparisonResult:
    results: Tuple[ScenarioResult, ...]
    best_monthly_payment: Optional[ScenarioResult]
    lowest_interest: Optional[ScenarioResult]
    lowest_total: Optional[ScenarioResult]
    insight: Optional[ComparisonInsight]

    @property
    def valid_results(self) -> Tuple[ScenarioResult, ...]:
        return tuple(r for r in self.results if r.valid)
