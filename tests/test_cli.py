import json

import click
import pytest
from click.testing import CliRunner

from amort_calc.formatter import INVALID_INPUT_PROMPT
from amort_calc.main import cli, parse_scenario_opts

LOAN = ["-p", "300k", "-r", "6.5", "-t", "30", "-s", "2025-01-15"]


@pytest.fixture
def runner():
    return CliRunner()


class TestScheduleCommand:
    def test_prints_summary_and_preview(self, runner):
        result = runner.invoke(cli, ["schedule", *LOAN])
        assert result.exit_code == 0, result.output
        assert "$1,896.20" in result.output
        assert "showing first 120 rows" in result.output
        assert "2054-12-15" in result.output

    def test_yearly_table(self, runner):
        result = runner.invoke(cli, ["schedule", *LOAN, "--yearly"])
        assert result.exit_code == 0, result.output
        assert "Year" in result.output

    def test_invalid_loan_shows_prompt(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "0", "-r", "6.5", "-t", "30"])
        assert result.exit_code == 1
        assert INVALID_INPUT_PROMPT in result.output

    def test_schedule_past_calendar_limit_shows_prompt(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "1000", "-r", "5", "-t", "30", "-s", "9990-01-01"])
        assert result.exit_code == 1
        assert INVALID_INPUT_PROMPT in result.output

    def test_malformed_amount_is_usage_error(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "lots", "-r", "6.5", "-t", "30"])
        assert result.exit_code == 2
        assert "Invalid amount" in result.output

    def test_csv_export(self, runner, tmp_path):
        path = tmp_path / "out.csv"
        result = runner.invoke(cli, ["schedule", *LOAN, "--output", str(path)])
        assert result.exit_code == 0, result.output
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("Payment #,Date")
        assert len(lines) == 361

    def test_json_export(self, runner, tmp_path):
        path = tmp_path / "out.json"
        result = runner.invoke(cli, ["schedule", *LOAN, "--output", str(path)])
        assert result.exit_code == 0, result.output
        assert json.loads(path.read_text(encoding="utf-8"))["summary"]["payments_made"] == 360

    def test_unknown_export_format(self, runner, tmp_path):
        result = runner.invoke(cli, ["schedule", *LOAN, "--output", str(tmp_path / "out.xlsx")])
        assert result.exit_code == 2

    def test_currency_option(self, runner):
        result = runner.invoke(cli, ["-c", "EUR", "schedule", *LOAN])
        assert result.exit_code == 0, result.output
        assert "€1,896.20" in result.output


class TestSummaryCommand:
    def test_housing_costs(self, runner):
        result = runner.invoke(cli, ["summary", *LOAN, "--property-tax", "12000", "--insurance", "2400"])
        assert result.exit_code == 0, result.output
        assert "Monthly payment breakdown" in result.output
        assert "$3,096.20" in result.output

    def test_down_payment_percent(self, runner):
        result = runner.invoke(
            cli,
            ["summary", "-p", "400k", "-r", "6.5", "-t", "30", "--down-payment-percent", "25"],
        )
        assert result.exit_code == 0, result.output
        assert "Down payment (25%)   : $100,000" in result.output

    def test_default_down_payment_is_twenty_percent(self, runner):
        result = runner.invoke(cli, ["summary", *LOAN])
        assert result.exit_code == 0, result.output
        assert "Down payment (20%)   : $60,000" in result.output

    def test_biweekly(self, runner):
        result = runner.invoke(cli, ["summary", *LOAN, "-f", "biweekly"])
        assert result.exit_code == 0, result.output
        assert "Payments made      : 780" in result.output


class TestExtraCommand:
    def test_monthly_extra(self, runner):
        result = runner.invoke(cli, ["extra", *LOAN, "-a", "200"])
        assert result.exit_code == 0, result.output
        assert "With extra payments" in result.output
        assert "Fewer payments" in result.output

    def test_onetime_extra(self, runner):
        result = runner.invoke(cli, ["extra", *LOAN, "--extra-type", "onetime", "-a", "20000", "-m", "6"])
        assert result.exit_code == 0, result.output

    def test_negative_amount_rejected(self, runner):
        result = runner.invoke(cli, ["extra", *LOAN, "--amount=-50"])
        assert result.exit_code == 2


class TestAffordCommand:
    def test_reference_household(self, runner):
        result = runner.invoke(
            cli, ["afford", "--income", "8000", "--debts", "500", "-r", "6.5", "-d", "60000"]
        )
        assert result.exit_code == 0, result.output
        assert "Monthly payment      : $1,740" in result.output
        assert "Maximum home price" in result.output

    def test_debts_exceed_budget(self, runner):
        result = runner.invoke(cli, ["afford", "--income", "1000", "--debts", "500", "-r", "6.5"])
        assert result.exit_code == 0, result.output
        assert "no loan is affordable" in result.output

    def test_negative_income(self, runner):
        result = runner.invoke(cli, ["afford", "--income", "-1", "-r", "6.5"])
        assert result.exit_code == 1


class TestCompareCommand:
    def test_two_scenarios(self, runner):
        result = runner.invoke(
            cli,
            [
                "compare",
                "--scenario",
                "-n Thirty -p 300k -r 6.5 -t 30",
                "--scenario",
                "-n Fifteen -p 300k -r 5.8 -t 15",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Lowest payment       : Thirty" in result.output
        assert "Lowest interest      : Fifteen" in result.output
        assert "0.7% difference in interest rate" in result.output

    def test_single_scenario_is_usage_error(self, runner):
        result = runner.invoke(cli, ["compare", "--scenario", "-p 300k -r 6.5 -t 30"])
        assert result.exit_code == 2

    def test_parse_scenario_opts(self):
        scenario = parse_scenario_opts("-p 250k -r 5 -t 20 -s 2025-02-01", "Scenario 3")
        assert scenario.name == "Scenario 3"
        assert scenario.params.term_years == 20
        assert scenario.params.start_date.isoformat() == "2025-02-01"

    @pytest.mark.parametrize("opts", ["-p 250k -r 5", "-p 250k -r 5 -t", "-x 1 -p 1 -r 1 -t 1"])
    def test_parse_scenario_opts_rejects(self, opts):
        with pytest.raises(click.BadParameter):
            parse_scenario_opts(opts, "Scenario")
