"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from decimal import Decimal

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from realty_finance.main import app
from realty_finance.calculations.models import (
    AcquisitionCosts,
    AmortizationSystem,
    InvestmentInput,
    SimulationInput,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def sac_simulation():
    """R$ 250k property, R$ 50k down, 12% a.a. over 12 months, SAC."""
    return SimulationInput(
        property_value=Decimal("250000"),
        down_payment=Decimal("50000"),
        annual_interest_rate=Decimal("0.12"),
        term_months=12,
        system=AmortizationSystem.CONSTANT_AMORTIZATION,
    )


@pytest.fixture
def sac_investment():
    """Resale of the SAC scenario at R$ 300k after 12 months."""
    return InvestmentInput(
        property_value=Decimal("250000"),
        down_payment=Decimal("50000"),
        annual_interest_rate=Decimal("0.12"),
        term_months=12,
        system=AmortizationSystem.CONSTANT_AMORTIZATION,
        market_value=Decimal("300000"),
        holding_period_months=12,
        costs=AcquisitionCosts(
            itbi=Decimal("5000"),
            documentation=Decimal("2000"),
            brokerage=Decimal("3000"),
            renovation=Decimal("10000"),
        ),
        monthly_expenses=Decimal("500"),
    )
