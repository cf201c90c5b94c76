"""Command-line interface for the amortization calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute full amortization schedules, view summaries,
see how extra payments shorten a loan, work out how much they can afford or
compare several loan scenarios. Schedules can be printed to the terminal or
exported to JSON/CSV files.
"""

from __future__ import annotations

import json
import logging
import shlex
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from .affordability import max_principal
from .calculator import recompute
from .comparison import compare as compare_scenarios
from .costs import HousingCosts
from .currency import CURRENCIES_BY_CODE, get_currency
from .data_models import (
    ExtraPaymentKind,
    ExtraPaymentPolicy,
    LoanParameters,
    PaymentFrequency,
    Scenario,
)
from .engine import summarize
from .export import export_to_csv, export_to_json
from .formatter import (
    INVALID_INPUT_PROMPT,
    print_affordability,
    print_comparison,
    print_costs,
    print_payoff,
    print_schedule,
    print_summary,
    print_yearly,
)
from .utils import parse_amount, parse_iso_date, parse_percent

# Rows printed before the schedule is cut short (``--full`` prints all).
PREVIEW_ROWS = 120

FREQUENCIES = [f.value for f in PaymentFrequency]


def build_params_from_options(
    principal: str,
    rate: str,
    term: int,
    frequency: str = "monthly",
    start_date: Optional[str] = None,
) -> LoanParameters:
    """Turn raw option/form values into ``LoanParameters``.

    Malformed values raise ``click.BadParameter``. Values that parse but
    cannot be amortized (e.g. a zero principal) are let through; the engine
    reports those by returning no result.
    """
    try:
        principal_value = parse_amount(principal)
        rate_value = parse_percent(str(rate))
        start = parse_iso_date(start_date) if start_date else date.today()
        freq = PaymentFrequency(str(frequency).lower())
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    return LoanParameters(
        principal=principal_value,
        annual_rate=rate_value,
        term_years=int(term),
        start_date=start,
        frequency=freq,
    )


def build_policy_from_options(extra_type: str, amount: str, month: int) -> ExtraPaymentPolicy:
    try:
        return ExtraPaymentPolicy(
            kind=ExtraPaymentKind(extra_type.lower()),
            amount=parse_amount(amount),
            period=int(month),
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def build_costs_from_options(
    property_tax: str, insurance: str, pmi: str, hoa: str, down_payment_percent: str = "20"
) -> HousingCosts:
    try:
        return HousingCosts(
            property_tax=parse_amount(property_tax or "0"),
            home_insurance=parse_amount(insurance or "0"),
            pmi=parse_amount(pmi or "0"),
            hoa_fees=parse_amount(hoa or "0"),
            down_payment_percent=parse_percent(down_payment_percent or "20"),
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def parse_scenario_opts(opts: str, default_name: str) -> Scenario:
    """Parse a quoted scenario option string.

    Example: ``"-n Fifteen -p 300k -r 5.8 -t 15 --frequency monthly"``.
    """
    tokens = shlex.split(opts)
    params: Dict[str, Any] = {
        "name": default_name,
        "principal": None,
        "rate": None,
        "term": None,
        "frequency": "monthly",
        "start_date": None,
    }
    flags = {
        "-n": "name",
        "--name": "name",
        "-p": "principal",
        "--principal": "principal",
        "-r": "rate",
        "--rate": "rate",
        "-t": "term",
        "--term": "term",
        "-f": "frequency",
        "--frequency": "frequency",
        "-s": "start_date",
        "--start-date": "start_date",
    }
    i = 0
    while i < len(tokens):
        key = flags.get(tokens[i])
        if key is None:
            raise click.BadParameter(f"Unknown option in scenario: {tokens[i]}")
        if i + 1 >= len(tokens):
            raise click.BadParameter(f"Missing value for {tokens[i]} in scenario")
        params[key] = tokens[i + 1]
        i += 2
    for required in ("principal", "rate", "term"):
        if params[required] is None:
            raise click.BadParameter(f"Scenario missing required option {required}")
    try:
        term = int(params["term"])
    except ValueError:
        raise click.BadParameter(f"Invalid term: {params['term']}")
    name = params.pop("name")
    params["term"] = term
    return Scenario(name=name, params=build_params_from_options(**params))


def _loan_options(func):
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (e.g. 300000 or 300k)"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, type=int, help="Loan term in years"),
        click.option(
            "--frequency",
            "-f",
            "frequency",
            type=click.Choice(FREQUENCIES),
            default="monthly",
            help="Payment frequency",
        ),
        click.option("--start-date", "-s", "start_date", help="First payment date (YYYY-MM-DD), default today"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _calculate(params: LoanParameters, policy=None, costs=None):
    calculation = recompute(params, policy, costs)
    if calculation is None:
        raise click.ClickException(INVALID_INPUT_PROMPT)
    return calculation


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--currency",
    "-c",
    "currency",
    type=click.Choice(sorted(CURRENCIES_BY_CODE), case_sensitive=False),
    default="USD",
    help="Currency used to display amounts",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, currency: str) -> None:
    """An amortization calculator with payoff, affordability and comparison tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["currency"] = get_currency(currency)


@cli.command()
@_loan_options
@click.option("--full", is_flag=True, help="Print every row instead of a preview")
@click.option("--yearly", is_flag=True, help="Also print totals per calendar year")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
@click.pass_context
def schedule(
    ctx: click.Context,
    principal: str,
    rate: str,
    term: int,
    frequency: str,
    start_date: Optional[str],
    full: bool,
    yearly: bool,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    currency = ctx.obj["currency"]
    params = build_params_from_options(principal, rate, term, frequency, start_date)
    calculation = _calculate(params)
    result = calculation.result
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result.schedule)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(result, currency)
    rows = result.schedule
    if not full and len(rows) > PREVIEW_ROWS:
        click.echo(f"Schedule has {len(rows)} rows; showing first {PREVIEW_ROWS} rows.")
        rows = rows[:PREVIEW_ROWS]
    print_schedule(rows, currency)
    if yearly:
        print_yearly(calculation.yearly, currency)


@cli.command()
@_loan_options
@click.option("--property-tax", "property_tax", default="0", help="Annual property tax")
@click.option("--insurance", "insurance", default="0", help="Annual home insurance")
@click.option("--pmi", "pmi", default="0", help="Annual private mortgage insurance")
@click.option("--hoa", "hoa", default="0", help="Annual HOA fees")
@click.option(
    "--down-payment-percent",
    "down_payment_percent",
    default="20",
    help="Down payment as a percentage of the loan amount",
)
@click.option("--output", "output", type=str, help="Output file path (.json)")
@click.pass_context
def summary(
    ctx: click.Context,
    principal: str,
    rate: str,
    term: int,
    frequency: str,
    start_date: Optional[str],
    property_tax: str,
    insurance: str,
    pmi: str,
    hoa: str,
    down_payment_percent: str,
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    currency = ctx.obj["currency"]
    params = build_params_from_options(principal, rate, term, frequency, start_date)
    costs = build_costs_from_options(property_tax, insurance, pmi, hoa, down_payment_percent)
    calculation = _calculate(params, costs=costs)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summarize(calculation.result)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
        return
    print_summary(calculation.result, currency)
    print_costs(calculation.costs, currency)


@cli.command()
@_loan_options
@click.option(
    "--extra-type",
    "extra_type",
    type=click.Choice([k.value for k in ExtraPaymentKind]),
    default="monthly",
    help="Add the amount every month, every 12th month or once",
)
@click.option("--amount", "-a", "amount", default="100", help="Extra payment amount")
@click.option("--month", "-m", "month", type=click.IntRange(1, 360), default=12, help="Month of a one-time payment")
@click.pass_context
def extra(
    ctx: click.Context,
    principal: str,
    rate: str,
    term: int,
    frequency: str,
    start_date: Optional[str],
    extra_type: str,
    amount: str,
    month: int,
) -> None:
    """Show how extra payments shorten the loan and save interest."""
    currency = ctx.obj["currency"]
    params = build_params_from_options(principal, rate, term, frequency, start_date)
    policy = build_policy_from_options(extra_type, amount, month)
    calculation = _calculate(params, policy=policy)
    print_payoff(calculation.baseline, calculation.payoff, calculation.savings, currency)


@cli.command()
@click.option("--income", "income", required=True, help="Gross monthly income")
@click.option("--debts", "debts", default="0", help="Existing monthly debt payments")
@click.option("--dti", "dti", default="28", help="Target debt-to-income ratio (percent)")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--term", "-t", "term", type=int, default=30, help="Loan term in years")
@click.option("--down-payment", "-d", "down_payment", default="0", help="Down payment available")
@click.pass_context
def afford(
    ctx: click.Context,
    income: str,
    debts: str,
    dti: str,
    rate: str,
    term: int,
    down_payment: str,
) -> None:
    """Work out the largest loan and home price an income supports."""
    currency = ctx.obj["currency"]
    try:
        values = [parse_amount(income), parse_amount(debts), parse_percent(dti), parse_percent(rate)]
        down = parse_amount(down_payment)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    result = max_principal(*values, term, down)
    if result is None:
        raise click.ClickException("Please enter non-negative amounts and a positive term.")
    print_affordability(result, dti, currency)


@cli.command()
@click.option(
    "--scenario",
    "scenarios",
    multiple=True,
    required=True,
    help='Scenario options as a quoted string, e.g. "-n Short -p 300k -r 5.8 -t 15"',
)
@click.pass_context
def compare(ctx: click.Context, scenarios: Tuple[str, ...]) -> None:
    """Compare two or more loan scenarios.

    Scenarios are provided as quoted option strings, for example:

        amort-calc compare --scenario "-p 300k -r 6.5 -t 30" --scenario "-p 300k -r 5.8 -t 15"
    """
    currency = ctx.obj["currency"]
    parsed: List[Scenario] = [
        parse_scenario_opts(opts, f"Scenario {i}") for i, opts in enumerate(scenarios, start=1)
    ]
    try:
        comparison = compare_scenarios(parsed)
    except ValueError as exc:
        raise click.UsageError(str(exc))
    print_comparison(comparison, currency)


if __name__ == "__main__":
    cli()
