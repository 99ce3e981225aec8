"""
ROI Timeline Projection

Re-prices the same investment at several candidate resale months so the
investor can compare "sell at month X" outcomes side by side.
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from realty_finance.calculations.amortization import generate_schedule
from realty_finance.calculations.investment import aggregate
from realty_finance.calculations.models import (
    AmortizationResult,
    InvestmentInput,
    TimelineRow,
)
from realty_finance.calculations.validation import MAX_TERM_MONTHS, validate_investment

logger = logging.getLogger(__name__)

DEFAULT_STEP_MONTHS = 6
DEFAULT_LIMIT_MONTHS = 60


def default_candidate_months(
    term_months: int,
    holding_period_months: Optional[int] = None,
    step: int = DEFAULT_STEP_MONTHS,
    limit: int = DEFAULT_LIMIT_MONTHS,
) -> List[int]:
    """
    Every ``step`` months up to min(limit, term), plus the chosen holding period.

    Including the holding period lets callers find the row for the investor's
    own plan by equality on ``month``.
    """
    months = set(range(step, min(limit, term_months) + 1, step))
    if holding_period_months and holding_period_months > 0:
        months.add(holding_period_months)
    return sorted(months)


def project_timeline(
    investment_input: InvestmentInput,
    candidate_months: Iterable[int],
    financing: Optional[AmortizationResult] = None,
    max_term_months: int = MAX_TERM_MONTHS,
) -> Tuple[TimelineRow, ...]:
    """
    Aggregate the investment once per candidate holding period.

    Non-positive and duplicate months are dropped; rows come back in ascending
    month order. The schedule does not depend on the holding period, so a
    precomputed ``financing`` may be passed in. Returns an empty tuple when
    the input cannot be computed.
    """
    validation = validate_investment(investment_input, max_term_months)
    if not validation.is_valid:
        return ()

    normalized = validation.normalized
    if financing is None:
        params = validation.parameters
        financing = generate_schedule(
            params.financed_amount,
            params.monthly_rate,
            params.term_months,
            params.system,
            params.first_payment_date,
        )
        if financing is None:
            return ()

    months = sorted({m for m in candidate_months if isinstance(m, int) and m > 0})
    logger.debug("Projecting timeline for months %s", months)

    rows = []
    for month in months:
        metrics = aggregate(replace(normalized, holding_period_months=month), financing)
        rows.append(
            TimelineRow(
                month=month,
                profit=metrics.estimated_profit,
                roi=metrics.total_roi,
                remaining_debt=metrics.remaining_debt_at_resale,
                total_paid=metrics.total_paid_until_resale,
            )
        )

    return tuple(rows)
