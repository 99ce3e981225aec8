"""
Outstanding balance of an existing loan.

Works back from what a borrower knows (financed amount, current installment,
installments already paid) to what is still owed and how much interest an
early payoff would avoid.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from realty_finance.calculations.models import (
    ZERO,
    AmortizationSystem,
    OutstandingBalance,
    engine_context,
)
from realty_finance.calculations.validation import (
    monthly_rate_from_annual,
    to_decimal,
    to_system,
)

logger = logging.getLogger(__name__)

TWO = Decimal("2")


def _round_months(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def _constant_installment(
    principal: Decimal, installment: Decimal, paid: int, rate: Decimal
) -> Optional[OutstandingBalance]:
    if rate == 0:
        total_months = _round_months(principal / installment)
    else:
        if installment <= principal * rate:
            # The installment does not even cover the first month's interest
            return None
        total_months = _round_months(
            (installment / (installment - principal * rate)).ln() / (1 + rate).ln()
        )

    remaining = max(0, total_months - paid)
    if remaining == 0:
        balance = ZERO
    elif rate == 0:
        balance = installment * remaining
    else:
        balance = installment * (1 - (1 + rate) ** -remaining) / rate

    total_remaining = installment * remaining
    return OutstandingBalance(
        system=AmortizationSystem.CONSTANT_INSTALLMENT,
        remaining_balance=max(ZERO, balance),
        total_remaining=max(ZERO, total_remaining),
        remaining_installments=remaining,
        potential_savings=max(ZERO, total_remaining - balance),
    )


def _constant_amortization(
    principal: Decimal, installment: Decimal, paid: int, rate: Decimal
) -> Optional[OutstandingBalance]:
    # Treat the installment as amortization plus the average interest charge
    average_amortization = installment - principal * rate / TWO
    if average_amortization <= 0:
        return None

    term = _round_months(principal / average_amortization)
    if term <= 0:
        return None

    amortization = principal / term
    remaining = max(0, term - paid)
    balance = max(ZERO, principal - amortization * paid)

    total_remaining = ZERO
    running = balance
    for _ in range(remaining):
        total_remaining += amortization + running * rate
        running -= amortization

    return OutstandingBalance(
        system=AmortizationSystem.CONSTANT_AMORTIZATION,
        remaining_balance=balance,
        total_remaining=max(ZERO, total_remaining),
        remaining_installments=remaining,
        potential_savings=max(ZERO, total_remaining - balance),
    )


def estimate_outstanding_balance(
    financed_amount: Any,
    current_installment: Any,
    paid_installments: int,
    annual_interest_rate: Any,
    system: Any,
) -> Optional[OutstandingBalance]:
    """
    Estimate the balance still owed on a loan.

    Args:
        financed_amount: Original principal
        current_installment: Installment the borrower pays today
        paid_installments: Number of installments already paid
        annual_interest_rate: Nominal annual rate as a fraction
        system: AmortizationSystem member or its value

    Returns:
        OutstandingBalance, or None when the figures are inconsistent
    """
    principal = to_decimal(financed_amount)
    installment = to_decimal(current_installment)
    annual_rate = to_decimal(annual_interest_rate)
    resolved = to_system(system)

    if (
        principal is None
        or installment is None
        or annual_rate is None
        or resolved is None
        or isinstance(paid_installments, bool)
        or not isinstance(paid_installments, int)
        or principal <= 0
        or installment <= 0
        or annual_rate < 0
        or paid_installments < 0
    ):
        logger.debug(
            "Declining balance estimate: principal=%s installment=%s paid=%s rate=%s",
            financed_amount,
            current_installment,
            paid_installments,
            annual_interest_rate,
        )
        return None

    rate = monthly_rate_from_annual(annual_rate)
    with engine_context():
        if resolved is AmortizationSystem.CONSTANT_INSTALLMENT:
            return _constant_installment(principal, installment, paid_installments, rate)
        return _constant_amortization(principal, installment, paid_installments, rate)
