"""Tests for currency formatting, housing costs, exports and recompute."""

import csv
import dataclasses
import io
import json
from decimal import Decimal

import pytest

from amort_calc.calculator import recompute
from amort_calc.costs import HousingCosts, monthly_cost_breakdown
from amort_calc.currency import (
    CURRENCIES,
    DEFAULT_CURRENCY,
    format_currency,
    format_currency_precise,
    get_currency,
)
from amort_calc.data_models import ExtraPaymentKind, ExtraPaymentPolicy
from amort_calc.engine import compute_schedule
from amort_calc.export import CSV_HEADER, export_to_csv, export_to_json, schedule_to_csv


class TestCurrency:
    def test_whole_units(self):
        assert format_currency(Decimal("1896.204")) == "$1,896"
        assert format_currency(Decimal("382633.47")) == "$382,633"

    def test_precise(self):
        assert format_currency_precise(Decimal("1896.204")) == "$1,896.20"

    def test_negative_amount(self):
        assert format_currency(Decimal("-220")) == "-$220"

    def test_other_symbol(self):
        assert format_currency(1000, get_currency("EUR")) == "€1,000"

    def test_unknown_code_falls_back_to_dollars(self):
        assert get_currency("XYZ") is DEFAULT_CURRENCY
        assert get_currency("gbp").symbol == "£"

    def test_codes_are_unique(self):
        codes = [c.code for c in CURRENCIES]
        assert len(codes) == len(set(codes)) == 30


class TestHousingCosts:
    def test_monthly_breakdown(self, standard_loan):
        result = compute_schedule(standard_loan)
        costs = HousingCosts(
            property_tax=Decimal("12000"),
            home_insurance=Decimal("2400"),
            pmi=Decimal("3600"),
            hoa_fees=Decimal("1200"),
        )
        breakdown = monthly_cost_breakdown(result, costs)
        assert breakdown.property_tax == Decimal("1000")
        assert breakdown.extras == Decimal("1600")
        assert breakdown.total == result.payment + Decimal("1600")
        assert costs.annual_total == Decimal("19200")

    def test_down_payment_is_reported_but_not_monthly(self, standard_loan):
        result = compute_schedule(dataclasses.replace(standard_loan, principal=Decimal("400000")))
        costs = HousingCosts(property_tax=Decimal("1200"), down_payment_percent=Decimal("25"))
        breakdown = monthly_cost_breakdown(result, costs)
        assert breakdown.down_payment == Decimal("100000")
        assert breakdown.down_payment_percent == Decimal("25")
        assert breakdown.total == result.payment + Decimal("100")

    def test_costs_do_not_change_the_schedule(self, standard_loan):
        costs = HousingCosts(property_tax=Decimal("12000"))
        calculation = recompute(standard_loan, None, costs)
        assert calculation.result == compute_schedule(standard_loan)

    def test_down_payment_amount(self):
        assert HousingCosts().down_payment_amount(Decimal("400000")) == Decimal("80000")

    @pytest.mark.parametrize(
        "kwargs",
        [{"pmi": Decimal("-1")}, {"down_payment_percent": Decimal("101")}],
    )
    def test_invalid_costs_raise(self, kwargs):
        with pytest.raises(ValueError):
            HousingCosts(**kwargs)


class TestExport:
    def test_csv_layout(self, standard_loan):
        result = compute_schedule(standard_loan)
        rows = list(csv.reader(io.StringIO(schedule_to_csv(result.schedule))))
        assert rows[0] == CSV_HEADER
        assert len(rows) == 361
        assert rows[1] == ["1", "2025-01-15", "1896.20", "271.20", "1625.00", "299728.80"]

    def test_csv_file(self, standard_loan, tmp_path):
        path = tmp_path / "schedule.csv"
        export_to_csv(path, compute_schedule(standard_loan).schedule)
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == ",".join(CSV_HEADER)
        assert len(lines) == 361

    def test_json_file(self, standard_loan, tmp_path):
        path = tmp_path / "schedule.json"
        export_to_json(path, compute_schedule(standard_loan))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["summary"]["payments_made"] == 360
        assert len(data["schedule"]) == 360
        assert data["schedule"][0]["date"] == "2025-01-15"


class TestRecompute:
    def test_invalid_input_gives_nothing(self, standard_loan):
        assert recompute(dataclasses.replace(standard_loan, principal=Decimal("0"))) is None

    def test_same_input_reuses_last_result(self, standard_loan):
        first = recompute(standard_loan)
        assert recompute(standard_loan) is first

    def test_changed_input_recalculates(self, standard_loan):
        first = recompute(standard_loan)
        shorter = recompute(dataclasses.replace(standard_loan, term_years=15))
        assert shorter is not first
        assert shorter.result.payments_made == 180

    def test_policy_adds_payoff(self, standard_loan):
        policy = ExtraPaymentPolicy(ExtraPaymentKind.MONTHLY, Decimal("100"))
        calculation = recompute(standard_loan, policy)
        assert calculation.payoff.periods_used < 360
        assert calculation.savings.interest_saved > 0
        assert calculation.baseline == calculation.result

    def test_without_policy_no_payoff(self, standard_loan):
        calculation = recompute(standard_loan)
        assert calculation.payoff is None
        assert calculation.costs is None
        assert len(calculation.yearly) == 30
