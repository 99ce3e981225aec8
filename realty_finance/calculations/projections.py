"""
Debt evolution and payment breakdown series for charts and reports.

Pure reshaping of an already computed schedule.
"""

from typing import Optional, Sequence, Tuple

from realty_finance.calculations.models import (
    ZERO,
    DebtPoint,
    PaymentPoint,
    ScheduleRow,
    engine_context,
)


def _rows(schedule: Sequence[ScheduleRow], through_month: Optional[int]):
    if through_month is None:
        return schedule
    return [row for row in schedule if row.month <= through_month]


def debt_evolution(
    schedule: Sequence[ScheduleRow], through_month: Optional[int] = None
) -> Tuple[DebtPoint, ...]:
    """Outstanding debt and cumulative installments paid, month by month."""
    points = []
    paid = ZERO
    with engine_context():
        for row in _rows(schedule, through_month):
            paid += row.installment
            points.append(DebtPoint(month=row.month, debt=row.balance, paid=paid))
    return tuple(points)


def payment_breakdown(
    schedule: Sequence[ScheduleRow], through_month: Optional[int] = None
) -> Tuple[PaymentPoint, ...]:
    """Split of each installment into amortization and interest."""
    return tuple(
        PaymentPoint(
            month=row.month,
            amortization=row.amortization,
            interest=row.interest,
            installment=row.installment,
        )
        for row in _rows(schedule, through_month)
    )
