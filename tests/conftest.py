"""Shared fixtures.

Fixture loan: $300K at 6.5% over 30 years, paid monthly from 2025-01-15.
"""

import os
from datetime import date
from decimal import Decimal

import pytest

# the web app builds its template store at import time
os.environ.setdefault("TEMPLATE_DATABASE_URL", "sqlite://")

from amort_calc.data_models import LoanParameters, PaymentFrequency


@pytest.fixture
def standard_loan() -> LoanParameters:
    return LoanParameters(
        principal=Decimal("300000"),
        annual_rate=Decimal("6.5"),
        term_years=30,
        start_date=date(2025, 1, 15),
        frequency=PaymentFrequency.MONTHLY,
    )


@pytest.fixture
def zero_rate_loan() -> LoanParameters:
    return LoanParameters(
        principal=Decimal("100000"),
        annual_rate=Decimal("0"),
        term_years=10,
        start_date=date(2025, 1, 15),
    )
