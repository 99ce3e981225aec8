"""
Tests for the outstanding balance estimator.
"""

import pytest
from decimal import Decimal

from realty_finance.calculations.amortization import generate_schedule
from realty_finance.calculations.balance import estimate_outstanding_balance
from realty_finance.calculations.models import AmortizationSystem

CENT = Decimal("0.01")


class TestConstantInstallment:
    """Balance of a PRICE loan."""

    def test_matches_schedule(self):
        """Working back from the installment gives the scheduled balance."""
        financing = generate_schedule(Decimal("200000"), Decimal("0.01"), 12, "price")
        estimate = estimate_outstanding_balance(
            Decimal("200000"), financing.first_installment, 6, Decimal("0.12"), "price"
        )
        assert estimate.system is AmortizationSystem.CONSTANT_INSTALLMENT
        assert estimate.remaining_installments == 6
        assert abs(estimate.remaining_balance - financing.schedule[5].balance) < CENT
        assert abs(estimate.total_remaining - financing.first_installment * 6) < CENT
        savings = estimate.total_remaining - estimate.remaining_balance
        assert abs(estimate.potential_savings - savings) < CENT

    def test_paid_off(self):
        financing = generate_schedule(Decimal("200000"), Decimal("0.01"), 12, "price")
        estimate = estimate_outstanding_balance(
            Decimal("200000"), financing.first_installment, 15, Decimal("0.12"), "price"
        )
        assert estimate.remaining_installments == 0
        assert estimate.remaining_balance == 0
        assert estimate.potential_savings == 0

    def test_zero_rate(self):
        estimate = estimate_outstanding_balance(120000, 10000, 4, 0, "price")
        assert estimate.remaining_installments == 8
        assert estimate.remaining_balance == Decimal("80000")
        assert estimate.potential_savings == 0

    def test_installment_below_interest(self):
        """1% of 200k is 2k of interest; 1.5k never amortizes."""
        assert estimate_outstanding_balance(200000, 1500, 6, Decimal("0.12"), "price") is None


class TestConstantAmortization:
    """Balance of a SAC loan."""

    def test_estimate(self):
        # 10.6k = 10k amortization + average interest of 600
        estimate = estimate_outstanding_balance(120000, 10600, 3, Decimal("0.12"), "sac")
        assert estimate.system is AmortizationSystem.CONSTANT_AMORTIZATION
        assert estimate.remaining_installments == 9
        assert estimate.remaining_balance == Decimal("90000")
        assert abs(estimate.total_remaining - Decimal("94500")) < CENT
        assert abs(estimate.potential_savings - Decimal("4500")) < CENT


class TestInvalidInput:

    @pytest.mark.parametrize(
        "principal, installment, paid, rate, system",
        [
            (0, 1000, 1, Decimal("0.12"), "sac"),
            (100000, 0, 1, Decimal("0.12"), "sac"),
            (100000, 1000, -1, Decimal("0.12"), "price"),
            (100000, 1000, 1, Decimal("-0.12"), "price"),
            (100000, 1000, 1, Decimal("0.12"), "german"),
            (100000, 1000, 1.5, Decimal("0.12"), "sac"),
            (100000, 400, 1, Decimal("0.12"), "sac"),
        ],
    )
    def test_returns_none(self, principal, installment, paid, rate, system):
        assert estimate_outstanding_balance(principal, installment, paid, rate, system) is None
