"""Output helpers for the amortization calculator.

This module renders schedules, summaries, payoff comparisons, affordability
figures and scenario comparisons in a plain tabular text format for the
terminal. Currency amounts go through :mod:`amort_calc.currency`.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .costs import MonthlyCostBreakdown
from .currency import DEFAULT_CURRENCY, Currency, format_currency, format_currency_precise
from .data_models import (
    AcceleratedPayment,
    AffordabilityResult,
    ComparisonInsight,
    ComparisonResult,
    LoanResult,
    PaymentRecord,
    PayoffResult,
    PayoffSavings,
    YearlyBreakdown,
)
from .engine import summarize

INVALID_INPUT_PROMPT = (
    "Please enter valid loan amount, interest rate, and term to see calculations."
)


def print_summary(result: LoanResult, currency: Currency = DEFAULT_CURRENCY) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    summary = summarize(result)
    print("Summary")
    print("-" * 72)
    print(f"Loan amount        : {format_currency(result.params.principal, currency)}")
    label = f"Payment ({summary['frequency']})"
    print(f"{label:19s}: {format_currency_precise(result.payment, currency)}")
    print(f"Total interest     : {format_currency(result.total_interest, currency)}")
    print(f"Total payment      : {format_currency(result.total_payment, currency)}")
    print(f"Interest share     : {summary['interest_share']:.1f}% of total")
    print(f"Effective rate     : {summary['effective_annual_rate'] * 100:.2f}%")
    print(f"Payments made      : {summary['payments_made']}")
    print(f"Payoff date        : {summary['payoff_date']}")
    print(f"Interest per year  : {format_currency(summary['average_annual_interest'], currency)}")
    print("-" * 72)


def print_costs(costs: MonthlyCostBreakdown, currency: Currency = DEFAULT_CURRENCY) -> None:
    print("Monthly payment breakdown")
    print("-" * 72)
    print(f"Principal & interest : {format_currency_precise(costs.loan_payment, currency)}")
    print(f"Property tax         : {format_currency_precise(costs.property_tax, currency)}")
    print(f"Home insurance       : {format_currency_precise(costs.home_insurance, currency)}")
    if costs.pmi > 0:
        print(f"PMI                  : {format_currency_precise(costs.pmi, currency)}")
    if costs.hoa_fees > 0:
        print(f"HOA fees             : {format_currency_precise(costs.hoa_fees, currency)}")
    print(f"Total monthly        : {format_currency_precise(costs.total, currency)}")
    label = f"Down payment ({costs.down_payment_percent:g}%)"
    print(f"{label:21s}: {format_currency(costs.down_payment, currency)}")
    print("-" * 72)


def print_schedule(schedule: Iterable[PaymentRecord], currency: Currency = DEFAULT_CURRENCY) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Payment", "Date", "Amount", "Principal", "Interest", "Balance"]
    print("\t".join(headers))
    for record in schedule:
        row = [
            str(record.period),
            record.date.isoformat(),
            format_currency_precise(record.payment, currency),
            format_currency_precise(record.principal, currency),
            format_currency_precise(record.interest, currency),
            format_currency(record.balance, currency),
        ]
        print("\t".join(row))


def print_yearly(breakdown: Iterable[YearlyBreakdown], currency: Currency = DEFAULT_CURRENCY) -> None:
    print(f"{'Year':6s} {'Principal':>15s} {'Interest':>15s} {'Balance':>15s}")
    for year in breakdown:
        print(
            f"{year.year:<6d} {format_currency(year.principal, currency):>15s} "
            f"{format_currency(year.interest, currency):>15s} "
            f"{format_currency(year.balance, currency):>15s}"
        )


def print_payoff(
    baseline: LoanResult,
    payoff: PayoffResult,
    savings: PayoffSavings,
    currency: Currency = DEFAULT_CURRENCY,
) -> None:
    """Print the original loan next to the accelerated payoff."""
    print("Extra payments")
    print("=" * 72)
    print(f"{'Scenario':22s} {'Total interest':>15s} {'Total paid':>15s} {'Payoff':>15s}")
    print(
        f"{'Original loan':22s} {format_currency(baseline.total_interest, currency):>15s} "
        f"{format_currency(baseline.total_payment, currency):>15s} "
        f"{baseline.payments_made / 12:>9.1f} years"
    )
    print(
        f"{'With extra payments':22s} {format_currency(payoff.total_interest, currency):>15s} "
        f"{format_currency(payoff.total_paid, currency):>15s} "
        f"{payoff.years_to_payoff:>9.1f} years"
    )
    print(
        f"{'Savings':22s} {'-' + format_currency(savings.interest_saved, currency):>15s} "
        f"{'-' + format_currency(savings.total_paid_saved, currency):>15s} "
        f"{-savings.years_saved:>9.1f} years"
    )
    if baseline.total_interest > 0:
        reduction = savings.interest_saved / baseline.total_interest * 100
        print(f"Interest reduction : {reduction:.1f}%")
    print(f"Fewer payments     : {savings.periods_saved}")
    if not payoff.paid_off:
        print(f"Not repaid within {payoff.periods_used} months.")
    print("=" * 72)
    print_accelerated(payoff.schedule_head, currency)


def print_accelerated(rows: Iterable[AcceleratedPayment], currency: Currency = DEFAULT_CURRENCY) -> None:
    print("\t".join(["Month", "Payment", "Extra", "Principal", "Interest", "Balance"]))
    for row in rows:
        print(
            "\t".join(
                [
                    str(row.month),
                    format_currency_precise(row.payment, currency),
                    format_currency_precise(row.extra, currency) if row.extra > 0 else "-",
                    format_currency_precise(row.principal, currency),
                    format_currency_precise(row.interest, currency),
                    format_currency(row.balance, currency),
                ]
            )
        )


def print_affordability(
    result: AffordabilityResult, target_dti, currency: Currency = DEFAULT_CURRENCY
) -> None:
    print("Affordability")
    print("-" * 72)
    if not result.affordable:
        print("Existing debts exceed the allowed budget; no loan is affordable.")
    print(f"Maximum home price   : {format_currency(result.max_home_price, currency)}")
    print(f"Maximum loan amount  : {format_currency(result.max_principal, currency)}")
    print(f"Monthly payment      : {format_currency(result.max_payment, currency)}")
    print(f"Available ({target_dti}%)  : {format_currency(result.housing_budget, currency)}")
    if result.debt_to_income is not None:
        print(f"Debt-to-income ratio : {result.debt_to_income:.1f}%")
    print("-" * 72)


def insight_lines(insight: Optional[ComparisonInsight], currency: Currency = DEFAULT_CURRENCY) -> List[str]:
    """Describe how the first two valid scenarios differ."""
    if insight is None:
        return []
    return [
        f"A {insight.rate_difference:.1f}% difference in interest rate results in "
        f"{format_currency(insight.interest_difference, currency)} difference in total interest paid.",
        f"Choosing a {insight.term_difference} year difference in loan term affects your "
        f"monthly payment by {format_currency(insight.payment_difference, currency)}.",
    ]


def print_comparison(comparison: ComparisonResult, currency: Currency = DEFAULT_CURRENCY) -> None:
    """Print all scenarios side by side and mark the best per metric."""
    print("Comparison")
    print("=" * 72)
    names = [r.scenario.name for r in comparison.results]
    print(f"{'Metric':16s}" + "".join(f"{n:>18s}" for n in names))

    def row(label: str, values: List[str]) -> None:
        print(f"{label:16s}" + "".join(f"{v:>18s}" for v in values))

    row("Loan amount", [format_currency(r.scenario.params.principal, currency) for r in comparison.results])
    row("Rate", [f"{r.scenario.params.annual_rate}%" for r in comparison.results])
    row("Term", [f"{r.scenario.params.term_years} years" for r in comparison.results])
    row(
        "Payment",
        [format_currency_precise(r.result.payment, currency) if r.valid else "Invalid" for r in comparison.results],
    )
    row(
        "Total interest",
        [format_currency(r.result.total_interest, currency) if r.valid else "Invalid" for r in comparison.results],
    )
    row(
        "Total payment",
        [format_currency(r.result.total_payment, currency) if r.valid else "Invalid" for r in comparison.results],
    )
    row(
        "Interest share",
        [f"{r.interest_share:.1f}%" if r.valid else "Invalid" for r in comparison.results],
    )
    print("=" * 72)
    if comparison.best_monthly_payment:
        print(f"Lowest payment       : {comparison.best_monthly_payment.scenario.name}")
        print(f"Lowest interest      : {comparison.lowest_interest.scenario.name}")
        print(f"Lowest total cost    : {comparison.lowest_total.scenario.name}")
    for line in insight_lines(comparison.insight, currency):
        print(line)
