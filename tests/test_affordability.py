from decimal import Decimal

import pytest

from amort_calc.affordability import max_principal, principal_from_payment
from amort_calc.engine import annuity_payment


class TestPrincipalFromPayment:
    def test_inverts_the_annuity_payment(self):
        rate = Decimal("6.5") / 100 / 12
        principal = principal_from_payment(Decimal("1740"), rate, 360)
        assert abs(annuity_payment(principal, rate, 360) - Decimal("1740")) < Decimal("1e-6")

    def test_zero_rate(self):
        assert principal_from_payment(Decimal("1000"), Decimal("0"), 360) == Decimal("360000")


class TestMaxPrincipal:
    def test_reference_household(self):
        result = max_principal(
            Decimal("8000"), Decimal("500"), Decimal("28"), Decimal("6.5"), 30, Decimal("60000")
        )
        assert result.housing_budget == Decimal("2240")
        assert result.max_payment == Decimal("1740")
        assert result.affordable
        assert Decimal("275000") < result.max_principal < Decimal("276000")
        assert result.max_home_price == result.max_principal + Decimal("60000")
        assert result.debt_to_income == Decimal("28")

    def test_zero_rate_mirrors_forward_formula(self):
        result = max_principal(Decimal("5000"), Decimal("0"), Decimal("20"), Decimal("0"), 30)
        assert result.max_payment == Decimal("1000")
        assert result.max_principal == Decimal("360000")
        assert result.max_home_price == Decimal("360000")

    def test_debts_above_budget(self):
        result = max_principal(Decimal("1000"), Decimal("500"), Decimal("28"), Decimal("6.5"), 30)
        assert result.max_payment == Decimal("-220")
        assert not result.affordable
        assert result.max_principal < 0

    def test_zero_income_has_no_ratio(self):
        result = max_principal(Decimal("0"), Decimal("0"), Decimal("28"), Decimal("6.5"), 30)
        assert result.debt_to_income is None
        assert not result.affordable

    @pytest.mark.parametrize(
        "income, debts, dti, rate, term",
        [
            ("-1", "0", "28", "6.5", 30),
            ("8000", "-1", "28", "6.5", 30),
            ("8000", "0", "-28", "6.5", 30),
            ("8000", "0", "28", "-6.5", 30),
            ("8000", "0", "28", "6.5", 0),
        ],
    )
    def test_invalid_inputs_return_none(self, income, debts, dti, rate, term):
        assert max_principal(Decimal(income), Decimal(debts), Decimal(dti), Decimal(rate), term) is None

    def test_negative_down_payment_returns_none(self):
        assert (
            max_principal(Decimal("8000"), Decimal("0"), Decimal("28"), Decimal("6.5"), 30, Decimal("-1"))
            is None
        )

    def test_higher_rate_affords_less(self):
        low = max_principal(Decimal("8000"), Decimal("500"), Decimal("28"), Decimal("5"), 30)
        high = max_principal(Decimal("8000"), Decimal("500"), Decimal("28"), Decimal("7"), 30)
        assert high.max_principal < low.max_principal
