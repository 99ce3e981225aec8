"""
Result assembly.

Runs the full stateless pipeline (validate, schedule, aggregate, project)
and packages the outcome into immutable result objects.
"""

import logging
from typing import Iterable, Optional

from realty_finance.calculations.amortization import generate_schedule
from realty_finance.calculations.investment import (
    aggregate,
    assess_deal,
    investor_cash_flows,
)
from realty_finance.calculations.irr import (
    calculate_irr,
    calculate_multiple,
    monthly_to_annual_irr,
)
from realty_finance.calculations.models import (
    AmortizationResult,
    FinancingParameters,
    InvestmentInput,
    InvestmentResult,
    SimulationInput,
)
from realty_finance.calculations.projections import debt_evolution, payment_breakdown
from realty_finance.calculations.timeline import (
    DEFAULT_LIMIT_MONTHS,
    DEFAULT_STEP_MONTHS,
    default_candidate_months,
    project_timeline,
)
from realty_finance.calculations.validation import (
    MAX_TERM_MONTHS,
    validate_investment,
    validate_simulation,
)

logger = logging.getLogger(__name__)


def _schedule(params: FinancingParameters) -> Optional[AmortizationResult]:
    return generate_schedule(
        params.financed_amount,
        params.monthly_rate,
        params.term_months,
        params.system,
        params.first_payment_date,
    )


def simulate_financing(
    simulation_input: SimulationInput, max_term_months: int = MAX_TERM_MONTHS
) -> Optional[AmortizationResult]:
    """Financing simulation: None when the input does not validate."""
    validation = validate_simulation(simulation_input, max_term_months)
    if not validation.is_valid:
        return None
    return _schedule(validation.parameters)


def analyze_investment(
    investment_input: InvestmentInput,
    candidate_months: Optional[Iterable[int]] = None,
    max_term_months: int = MAX_TERM_MONTHS,
    timeline_step: int = DEFAULT_STEP_MONTHS,
    timeline_limit: int = DEFAULT_LIMIT_MONTHS,
) -> Optional[InvestmentResult]:
    """
    Full buy-to-resell analysis.

    Args:
        investment_input: Financing scenario, costs and resale plan
        candidate_months: Holding periods for the timeline comparison;
            defaults to every ``timeline_step`` months up to
            min(``timeline_limit``, term) plus the chosen holding period
        max_term_months: Longest accepted loan term

    Returns:
        InvestmentResult, or None when the input does not validate
    """
    validation = validate_investment(investment_input, max_term_months)
    if not validation.is_valid:
        return None

    normalized = validation.normalized
    financing = _schedule(validation.parameters)
    if financing is None:
        return None

    holding = normalized.holding_period_months
    metrics = aggregate(normalized, financing)

    if candidate_months is None:
        candidate_months = default_candidate_months(
            normalized.term_months, holding, timeline_step, timeline_limit
        )
    timeline = project_timeline(normalized, candidate_months, financing, max_term_months)

    through_month = min(holding, normalized.term_months)

    flows = investor_cash_flows(normalized, financing)
    monthly_irr = annual_irr = equity_multiple = None
    try:
        monthly_irr = calculate_irr(flows)
        annual_irr = monthly_to_annual_irr(monthly_irr)
    except (ValueError, ArithmeticError) as e:
        logger.debug("No IRR for holding period %s: %s", holding, e)
    try:
        equity_multiple = calculate_multiple(flows)
    except ValueError as e:
        logger.debug("No equity multiple: %s", e)

    return InvestmentResult(
        financing=financing,
        metrics=metrics,
        assessment=assess_deal(normalized, metrics),
        timeline_comparison=timeline,
        debt_evolution=debt_evolution(financing.schedule, through_month),
        payment_breakdown=payment_breakdown(financing.schedule, through_month),
        monthly_irr=monthly_irr,
        annual_irr=annual_irr,
        equity_multiple=equity_multiple,
    )
