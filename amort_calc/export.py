"""Export helpers for amortization schedules.

The CSV layout matches the schedule table: payment number, date, total
payment, principal, interest and remaining balance, amounts rounded to two
decimals.
"""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Iterable

from .data_models import LoanResult, PaymentRecord
from .engine import summarize

CSV_HEADER = [
    "Payment #",
    "Date",
    "Payment Amount",
    "Principal",
    "Interest",
    "Remaining Balance",
]


def _write_rows(handle, schedule: Iterable[PaymentRecord]) -> None:
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for record in schedule:
        writer.writerow(
            [
                record.period,
                record.date.isoformat(),
                f"{record.payment:.2f}",
                f"{record.principal:.2f}",
                f"{record.interest:.2f}",
                f"{record.balance:.2f}",
            ]
        )


def schedule_to_csv(schedule: Iterable[PaymentRecord]) -> str:
    """Render the schedule as comma separated text."""
    buffer = io.StringIO()
    _write_rows(buffer, schedule)
    return buffer.getvalue()


def export_to_csv(path: Path, schedule: Iterable[PaymentRecord]) -> None:
    """Export schedule to a CSV file."""
    with path.open("w", newline="", encoding="utf-8") as f:
        _write_rows(f, schedule)


def schedule_to_dicts(schedule: Iterable[PaymentRecord]) -> list:
    """Convert schedule entries into JSON-serialisable dictionaries."""
    return [
        {
            "period": record.period,
            "date": record.date.isoformat(),
            "payment": float(record.payment),
            "principal": float(record.principal),
            "interest": float(record.interest),
            "balance": float(record.balance),
        }
        for record in schedule
    ]


def export_to_json(path: Path, result: LoanResult) -> None:
    """Export summary and schedule to a JSON file."""
    data = {"summary": summarize(result), "schedule": schedule_to_dicts(result.schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
