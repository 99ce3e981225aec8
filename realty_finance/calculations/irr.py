"""
IRR and NPV Calculations

Implements IRR using Newton-Raphson method, matching Excel's IRR function for
periodic (monthly) cash flows.
"""

from decimal import Decimal
from typing import List, Sequence

from realty_finance.calculations.models import ZERO, engine_context
from realty_finance.calculations.validation import to_decimal

MAX_ITERATIONS = 100
TOLERANCE = Decimal("1e-12")
DEFAULT_GUESS = Decimal("0.01")


def _as_decimals(cash_flows: Sequence) -> List[Decimal]:
    values = [to_decimal(cf) for cf in cash_flows]
    if any(v is None for v in values):
        raise ValueError("Cash flows must be numbers")
    return values


def calculate_npv(cash_flows: Sequence, discount_rate) -> Decimal:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Periodic discount rate (e.g., 0.01 for 1% per month)

    Returns:
        NPV value
    """
    rate = to_decimal(discount_rate)
    with engine_context():
        npv = ZERO
        for period, cf in enumerate(_as_decimals(cash_flows)):
            npv += cf / ((1 + rate) ** period)
    return npv


def _npv_derivative(cash_flows: List[Decimal], rate: Decimal) -> Decimal:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    dnpv = ZERO
    for period, cf in enumerate(cash_flows):
        dnpv -= (period * cf) / ((1 + rate) ** (period + 1))
    return dnpv


def calculate_irr(cash_flows: Sequence, guess=DEFAULT_GUESS) -> Decimal:
    """
    Calculate periodic IRR (Internal Rate of Return) using Newton-Raphson method.

    Args:
        cash_flows: Array of periodic cash flows
        guess: Initial guess for the periodic rate

    Returns:
        IRR per period as decimal (e.g., 0.015 for 1.5% per month)

    Raises:
        ValueError: If IRR cannot be calculated
    """
    flows = _as_decimals(cash_flows)

    if len(flows) < 2:
        raise ValueError("At least 2 cash flows required")

    has_positive = any(cf > 0 for cf in flows)
    has_negative = any(cf < 0 for cf in flows)

    if not has_positive or not has_negative:
        raise ValueError("Cash flows must contain both positive and negative values")

    rate = to_decimal(guess)

    with engine_context():
        for _ in range(MAX_ITERATIONS):
            if rate <= -1:
                raise ValueError("IRR calculation diverged")

            npv = ZERO
            for period, cf in enumerate(flows):
                npv += cf / ((1 + rate) ** period)
            dnpv = _npv_derivative(flows, rate)

            if abs(dnpv) < TOLERANCE:
                raise ValueError("IRR calculation failed: derivative too small")

            new_rate = rate - npv / dnpv

            if abs(new_rate - rate) < TOLERANCE:
                return new_rate

            rate = new_rate

    raise ValueError("IRR calculation did not converge")


def calculate_multiple(cash_flows: Sequence) -> Decimal:
    """
    Calculate equity multiple.

    Args:
        cash_flows: Array of cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return)
    """
    flows = _as_decimals(cash_flows)
    total_inflows = sum((cf for cf in flows if cf > 0), ZERO)
    total_outflows = abs(sum((cf for cf in flows if cf < 0), ZERO))

    if total_outflows == 0:
        raise ValueError("No investment (outflows) found")

    with engine_context():
        return total_inflows / total_outflows


def monthly_to_annual_irr(monthly_irr: Decimal) -> Decimal:
    """Convert monthly IRR to annual IRR."""
    with engine_context():
        return ((1 + monthly_irr) ** 12) - 1
