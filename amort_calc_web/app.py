import json
import logging
import os
from datetime import date

import click
from flask import Flask, Response, jsonify, render_template, request

from amort_calc.affordability import max_principal
from amort_calc.calculator import recompute
from amort_calc.comparison import compare
from amort_calc.currency import CURRENCIES, format_currency, format_currency_precise, get_currency
from amort_calc.data_models import LoanParameters, PaymentFrequency, Scenario
from amort_calc.engine import DISPLAY_ROW_LIMIT, compute_schedule, summarize
from amort_calc.export import schedule_to_csv, schedule_to_dicts
from amort_calc.formatter import INVALID_INPUT_PROMPT, insight_lines
from amort_calc.main import (
    PREVIEW_ROWS,
    build_costs_from_options,
    build_params_from_options,
    build_policy_from_options,
)
from amort_calc.utils import parse_amount, parse_percent
from amort_calc_web.template_store import DEFAULT_TEMPLATE_KEY, create_store_from_env

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
template_store = create_store_from_env(os.environ.get("TEMPLATE_DATABASE_URL"))

DEFAULT_CURRENCY_CODE = os.environ.get("DEFAULT_CURRENCY", "USD").upper()
TABS = ("calculator", "extra", "compare", "affordability")
YEARLY_ROWS = 10

DEFAULT_FORM = {
    "principal": "300000",
    "rate": "6.5",
    "term": "30",
    "frequency": "monthly",
    "property_tax": "12000",
    "home_insurance": "2400",
    "pmi": "3600",
    "hoa_fees": "1200",
    "down_payment_percent": "20",
    "extra_type": "monthly",
    "extra_amount": "100",
    "extra_month": "12",
    "monthly_income": "8000",
    "monthly_debts": "500",
    "down_payment": "60000",
    "afford_rate": "6.5",
    "afford_term": "30",
    "dti": "28",
}

DEFAULT_SCENARIOS = [
    {"name": "Scenario 1", "principal": "300000", "rate": "6.5", "term": "30"},
    {"name": "Scenario 2", "principal": "300000", "rate": "5.8", "term": "15"},
]


@app.template_filter("money")
def _money(value, currency_code=DEFAULT_CURRENCY_CODE):
    return format_currency(value, get_currency(currency_code))


@app.template_filter("money_precise")
def _money_precise(value, currency_code=DEFAULT_CURRENCY_CODE):
    return format_currency_precise(value, get_currency(currency_code))


def _default_form() -> dict:
    form = dict(DEFAULT_FORM, start_date=date.today().isoformat())
    saved = template_store.load(DEFAULT_TEMPLATE_KEY)
    if saved is not None:
        form.update(_params_to_form(saved))
    return form


def _params_to_form(params: LoanParameters) -> dict:
    return {
        "principal": str(params.principal),
        "rate": str(params.annual_rate),
        "term": str(params.term_years),
        "frequency": params.frequency.value,
        "start_date": params.start_date.isoformat(),
    }


def _form_value(form, name: str) -> str:
    return (form.get(name) or "").strip()


def _int_field(form, name: str, label: str) -> int:
    value = _form_value(form, name) or "0"
    try:
        return int(value)
    except ValueError:
        raise click.BadParameter(f"Invalid {label}: {value}")


def _form_to_params(form) -> LoanParameters:
    return build_params_from_options(
        _form_value(form, "principal") or "0",
        _form_value(form, "rate") or "0",
        _int_field(form, "term", "term"),
        _form_value(form, "frequency") or PaymentFrequency.MONTHLY.value,
        _form_value(form, "start_date") or None,
    )


def _form_to_costs(form):
    return build_costs_from_options(
        _form_value(form, "property_tax"),
        _form_value(form, "home_insurance"),
        _form_value(form, "pmi"),
        _form_value(form, "hoa_fees"),
        _form_value(form, "down_payment_percent"),
    )


def _form_to_policy(form):
    return build_policy_from_options(
        _form_value(form, "extra_type") or "monthly",
        _form_value(form, "extra_amount") or "0",
        _int_field(form, "extra_month", "payment month") or 1,
    )


def _form_to_scenarios(form) -> list[dict]:
    names = form.getlist("scenario_name")
    principals = form.getlist("scenario_principal")
    rates = form.getlist("scenario_rate")
    terms = form.getlist("scenario_term")
    rows = [
        {"name": n.strip() or f"Scenario {i}", "principal": p, "rate": r, "term": t}
        for i, (n, p, r, t) in enumerate(zip(names, principals, rates, terms), start=1)
    ]
    if form.get("action") == "add_scenario":
        rows.append(
            {"name": f"Scenario {len(rows) + 1}", "principal": "300000", "rate": "6.0", "term": "30"}
        )
    remove = form.get("remove_scenario")
    if remove is not None and len(rows) > 2:
        rows = [row for i, row in enumerate(rows) if str(i) != remove]
    return rows or [dict(s) for s in DEFAULT_SCENARIOS]


def _run_comparison(rows: list[dict]):
    scenarios = [
        Scenario(
            name=row["name"],
            params=build_params_from_options(
                row["principal"] or "0", row["rate"] or "0", _int_field(row, "term", "term")
            ),
        )
        for row in rows
    ]
    return compare(scenarios)


def _run_affordability(form):
    try:
        income = parse_amount(_form_value(form, "monthly_income") or "0")
        debts = parse_amount(_form_value(form, "monthly_debts") or "0")
        dti = parse_percent(_form_value(form, "dti") or "0")
        rate = parse_percent(_form_value(form, "afford_rate") or "0")
        down = parse_amount(_form_value(form, "down_payment") or "0")
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    return max_principal(income, debts, dti, rate, _int_field(form, "afford_term", "term"), down)


def _schedule_for_view(schedule, show_full_schedule: bool):
    limit = DISPLAY_ROW_LIMIT if show_full_schedule else PREVIEW_ROWS
    preview = schedule[:limit]
    return preview, len(schedule) - len(preview)


@app.route("/", methods=["GET", "POST"])
def index():
    tab = "calculator"
    action = "run"
    error = None
    notice = None
    show_full_schedule = False
    calculation = None
    comparison = None
    affordability = None
    schedule = []
    truncated = 0

    if request.method == "POST":
        form = dict(_default_form(), **request.form.to_dict())
        tab = form.get("switch_tab") or form.get("tab", "calculator")
        action = form.get("action", "run")
        show_full_schedule = form.get("show_full_schedule") == "1"
    else:
        form = _default_form()
    if tab not in TABS:
        tab = "calculator"
    currency_code = get_currency(form.get("currency", DEFAULT_CURRENCY_CODE)).code
    scenario_rows = (
        _form_to_scenarios(request.form) if request.method == "POST" else [dict(s) for s in DEFAULT_SCENARIOS]
    )

    try:
        params = _form_to_params(form)
        if action == "save_template":
            template_store.save(DEFAULT_TEMPLATE_KEY, params)
            notice = "Template saved successfully!"
        policy = _form_to_policy(form) if tab == "extra" else None
        calculation = recompute(params, policy, _form_to_costs(form))
        if calculation is not None:
            schedule, truncated = _schedule_for_view(calculation.result.schedule, show_full_schedule)
        if tab == "compare":
            comparison = _run_comparison(scenario_rows)
        elif tab == "affordability":
            affordability = _run_affordability(form)
    except (click.BadParameter, ValueError) as exc:
        error = str(exc)
        logger.debug("Form rejected: %s", error)

    summary = summarize(calculation.result) if calculation else None
    chart_payload = json.dumps(schedule_to_dicts(calculation.result.schedule)) if calculation else "null"

    return render_template(
        "index.html",
        tab=tab,
        tabs=TABS,
        form=form,
        error=error,
        notice=notice,
        prompt=INVALID_INPUT_PROMPT,
        calculation=calculation,
        summary=summary,
        schedule=schedule,
        truncated=truncated,
        yearly=calculation.yearly[:YEARLY_ROWS] if calculation else [],
        show_full_schedule=show_full_schedule,
        comparison=comparison,
        insights=insight_lines(comparison.insight, get_currency(currency_code)) if comparison else [],
        scenario_rows=scenario_rows,
        affordability=affordability,
        currency_code=currency_code,
        currency_locale=get_currency(currency_code).locale,
        currency_options=CURRENCIES,
        frequencies=[f.value for f in PaymentFrequency],
        asset_version=app.config["ASSET_VERSION"],
        chart_payload=chart_payload,
        last_action=action,
    )


@app.post("/export")
def export_schedule():
    try:
        params = _form_to_params(request.form)
    except (click.BadParameter, ValueError) as exc:
        return Response(str(exc), status=400, mimetype="text/plain")
    result = compute_schedule(params)
    if result is None:
        return Response(INVALID_INPUT_PROMPT, status=400, mimetype="text/plain")
    return Response(
        schedule_to_csv(result.schedule),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=amortization_schedule.csv"},
    )


@app.get("/template")
def load_template():
    params = template_store.load(DEFAULT_TEMPLATE_KEY)
    if params is None:
        return jsonify({"error": "No template saved"}), 404
    return jsonify(params.to_dict())


@app.post("/template")
def save_template():
    try:
        params = _form_to_params(request.form)
    except (click.BadParameter, ValueError) as exc:
        return jsonify({"error": str(exc)}), 400
    template_store.save(DEFAULT_TEMPLATE_KEY, params)
    return jsonify(params.to_dict()), 201


if __name__ == "__main__":
    logger.info("Starting amortization calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
