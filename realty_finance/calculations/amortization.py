"""
Loan Amortization Calculations

Generates repayment schedules for the two Brazilian housing finance systems:
Tabela PRICE (constant installment, matching Excel's PMT) and SAC (constant
amortization). Each system is a strategy exposing ``compute_schedule``.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from dateutil.relativedelta import relativedelta

from realty_finance.calculations.models import (
    ZERO,
    AmortizationResult,
    AmortizationSystem,
    ScheduleRow,
    engine_context,
)
from realty_finance.calculations.validation import is_computable, to_decimal, to_system

logger = logging.getLogger(__name__)

TWO = Decimal("2")


def calculate_payment(principal: Decimal, monthly_rate: Decimal, months: int) -> Decimal:
    """
    Calculate the constant installment of a fully amortizing loan.

    Matches Excel's PMT() function. A zero rate is an explicit branch
    returning principal / months.

    Args:
        principal: Loan principal amount
        monthly_rate: Monthly interest rate as a fraction (e.g., 0.01 for 1%)
        months: Number of installments

    Returns:
        Installment amount (positive number)
    """
    if principal <= 0 or months <= 0:
        return ZERO

    if monthly_rate == 0:
        return principal / months

    factor = (1 + monthly_rate) ** months
    return principal * monthly_rate * factor / (factor - 1)


class AmortizationStrategy(ABC):
    """Computes the rows of one amortization system."""

    system: AmortizationSystem

    @abstractmethod
    def compute_schedule(
        self, principal: Decimal, monthly_rate: Decimal, months: int
    ) -> List[ScheduleRow]:
        """Rows for months 1..months; the last row settles the balance."""


class ConstantInstallmentStrategy(AmortizationStrategy):
    """Tabela PRICE: flat installment, growing amortization."""

    system = AmortizationSystem.CONSTANT_INSTALLMENT

    def compute_schedule(
        self, principal: Decimal, monthly_rate: Decimal, months: int
    ) -> List[ScheduleRow]:
        installment = calculate_payment(principal, monthly_rate, months)
        rows = []
        balance = principal

        for month in range(1, months + 1):
            interest = balance * monthly_rate
            if month == months:
                # Settle whatever precision residue is left
                amortization = balance
                payment = amortization + interest
            else:
                amortization = installment - interest
                payment = installment
            balance -= amortization
            rows.append(ScheduleRow(month, payment, amortization, interest, balance))

        return rows


class ConstantAmortizationStrategy(AmortizationStrategy):
    """SAC: constant amortization, installment falls with the balance."""

    system = AmortizationSystem.CONSTANT_AMORTIZATION

    def compute_schedule(
        self, principal: Decimal, monthly_rate: Decimal, months: int
    ) -> List[ScheduleRow]:
        amortization = principal / months
        rows = []
        balance = principal

        for month in range(1, months + 1):
            interest = balance * monthly_rate
            principal_pmt = balance if month == months else amortization
            balance -= principal_pmt
            rows.append(
                ScheduleRow(
                    month, principal_pmt + interest, principal_pmt, interest, balance
                )
            )

        return rows


STRATEGIES: Dict[AmortizationSystem, AmortizationStrategy] = {
    AmortizationSystem.CONSTANT_INSTALLMENT: ConstantInstallmentStrategy(),
    AmortizationSystem.CONSTANT_AMORTIZATION: ConstantAmortizationStrategy(),
}


def get_strategy(system) -> Optional[AmortizationStrategy]:
    resolved = to_system(system)
    if resolved is None:
        return None
    return STRATEGIES[resolved]


def _with_due_dates(rows: List[ScheduleRow], first_payment_date: date) -> List[ScheduleRow]:
    return [
        ScheduleRow(
            row.month,
            row.installment,
            row.amortization,
            row.interest,
            row.balance,
            first_payment_date + relativedelta(months=row.month - 1),
        )
        for row in rows
    ]


def generate_schedule(
    financed_amount,
    monthly_rate,
    term_months: int,
    system,
    first_payment_date: Optional[date] = None,
) -> Optional[AmortizationResult]:
    """
    Generate a full amortization schedule.

    Args:
        financed_amount: Principal borrowed (property value minus down payment)
        monthly_rate: Monthly interest rate as a fraction
        term_months: Number of installments
        system: AmortizationSystem member or its value ("price" / "sac")
        first_payment_date: Due date of installment 1, optional

    Returns:
        AmortizationResult, or None when the input cannot be computed
    """
    strategy = get_strategy(system)
    if strategy is None or not is_computable(financed_amount, monthly_rate, term_months):
        logger.debug(
            "Declining schedule: principal=%s rate=%s months=%s system=%s",
            financed_amount,
            monthly_rate,
            term_months,
            system,
        )
        return None

    principal = to_decimal(financed_amount)
    rate = to_decimal(monthly_rate)

    with engine_context():
        rows = strategy.compute_schedule(principal, rate, term_months)
        total_amount = sum((row.installment for row in rows), ZERO)
        first_installment = rows[0].installment
        last_installment = rows[-1].installment

        result = AmortizationResult(
            financed_amount=principal,
            monthly_rate=rate,
            term_months=term_months,
            system=strategy.system,
            total_amount=total_amount,
            total_interest=total_amount - principal,
            first_installment=first_installment,
            last_installment=last_installment,
            monthly_amortization=principal / term_months,
            average_installment=(first_installment + last_installment) / TWO,
            schedule=tuple(
                _with_due_dates(rows, first_payment_date) if first_payment_date else rows
            ),
        )

    return result


def calculate_total_interest(schedule: Sequence[ScheduleRow], through_month: Optional[int] = None) -> Decimal:
    """Interest paid in months 1..through_month (whole schedule by default)."""
    return sum(
        (row.interest for row in schedule if through_month is None or row.month <= through_month),
        ZERO,
    )


def calculate_debt_service(
    schedule: Sequence[ScheduleRow], start_period: int, end_period: int
) -> Decimal:
    """Calculate total installments paid for a range of periods."""
    return sum(
        (row.installment for row in schedule if start_period <= row.month <= end_period),
        ZERO,
    )


def balance_after(schedule: Sequence[ScheduleRow], financed_amount: Decimal, month: int) -> Decimal:
    """Outstanding balance after ``month`` payments; zero once the loan is paid off."""
    if month <= 0:
        return financed_amount
    if month >= len(schedule):
        return ZERO
    return schedule[month - 1].balance
