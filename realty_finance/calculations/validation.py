"""
Input Validation

Normalizes raw numeric parameters into Decimals and gates the compute action.
Invalid input never raises: the caller gets no parameters and a list of issues.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Tuple

from realty_finance.calculations.models import (
    ZERO,
    HUNDRED,
    AcquisitionCosts,
    AmortizationSystem,
    FinancingParameters,
    InvestmentInput,
    SimulationInput,
)

logger = logging.getLogger(__name__)

# Longest term offered by Brazilian housing finance (35 years)
MAX_TERM_MONTHS = 420

MONTHS_PER_YEAR = Decimal("12")


@dataclass(frozen=True)
class ValidationIssue:
    """A single rejected field."""

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a simulation or investment input.

    ``normalized`` is the input with every number converted to Decimal;
    ``parameters`` feeds the schedule generator. Both are None when
    ``issues`` is not empty.
    """

    parameters: Optional[FinancingParameters]
    normalized: Optional[SimulationInput]
    issues: Tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.parameters is not None


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a number to a finite Decimal.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1"). Booleans,
    NaN, infinities and unparsable text give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    else:
        return None
    return result if result.is_finite() else None


def to_system(value: Any) -> Optional[AmortizationSystem]:
    """Resolve an enum member or its string value."""
    if isinstance(value, AmortizationSystem):
        return value
    try:
        return AmortizationSystem(value)
    except ValueError:
        return None


def monthly_rate_from_annual(annual_rate: Decimal) -> Decimal:
    """Nominal annual rate to monthly rate (annual / 12)."""
    return annual_rate / MONTHS_PER_YEAR


def resolve_down_payment(
    property_value: Any,
    down_payment: Any = None,
    down_payment_percentage: Any = None,
) -> Optional[Decimal]:
    """
    Down payment as a fixed amount or as a percentage of the property value.

    The percentage is in points (20 means 20%). A fixed amount wins when both
    are given.
    """
    fixed = to_decimal(down_payment)
    if fixed is not None:
        return fixed

    value = to_decimal(property_value)
    percentage = to_decimal(down_payment_percentage)
    if value is None or percentage is None:
        return None
    return value * percentage / HUNDRED


def _require_positive(
    issues: List[ValidationIssue], name: str, raw: Any
) -> Optional[Decimal]:
    value = to_decimal(raw)
    if value is None:
        issues.append(ValidationIssue(name, "must be a number"))
    elif value <= 0:
        issues.append(ValidationIssue(name, "must be greater than zero"))
    return value


def _require_non_negative(
    issues: List[ValidationIssue], name: str, raw: Any
) -> Optional[Decimal]:
    value = to_decimal(raw)
    if value is None:
        issues.append(ValidationIssue(name, "must be a number"))
    elif value < 0:
        issues.append(ValidationIssue(name, "must not be negative"))
    return value


def _require_months(
    issues: List[ValidationIssue], name: str, raw: Any, upper: Optional[int] = None
) -> Optional[int]:
    if isinstance(raw, bool) or not isinstance(raw, int):
        issues.append(ValidationIssue(name, "must be a whole number of months"))
        return None
    if raw <= 0:
        issues.append(ValidationIssue(name, "must be greater than zero"))
    elif upper is not None and raw > upper:
        issues.append(ValidationIssue(name, f"must not exceed {upper} months"))
    return raw


def _check_financing(
    simulation_input: SimulationInput, max_term_months: int, issues: List[ValidationIssue]
) -> dict:
    property_value = _require_positive(
        issues, "property_value", simulation_input.property_value
    )
    down_payment = _require_non_negative(
        issues, "down_payment", simulation_input.down_payment
    )
    annual_rate = _require_non_negative(
        issues, "annual_interest_rate", simulation_input.annual_interest_rate
    )
    term_months = _require_months(
        issues, "term_months", simulation_input.term_months, max_term_months
    )
    system = to_system(simulation_input.system)
    if system is None:
        issues.append(ValidationIssue("system", "unknown amortization system"))

    if property_value is not None and down_payment is not None:
        if property_value > 0 and down_payment >= property_value:
            issues.append(
                ValidationIssue(
                    "down_payment", "must be lower than the property value"
                )
            )

    return {
        "property_value": property_value,
        "down_payment": down_payment,
        "annual_interest_rate": annual_rate,
        "term_months": term_months,
        "system": system,
    }


def _parameters(normalized: SimulationInput) -> FinancingParameters:
    return FinancingParameters(
        financed_amount=normalized.property_value - normalized.down_payment,
        monthly_rate=monthly_rate_from_annual(normalized.annual_interest_rate),
        term_months=normalized.term_months,
        system=normalized.system,
        first_payment_date=normalized.first_payment_date,
    )


def validate_simulation(
    simulation_input: SimulationInput, max_term_months: int = MAX_TERM_MONTHS
) -> ValidationResult:
    """Validate a financing simulation and derive the schedule parameters."""
    issues: List[ValidationIssue] = []
    values = _check_financing(simulation_input, max_term_months, issues)

    if issues:
        logger.debug("Simulation input rejected: %s", issues)
        return ValidationResult(parameters=None, normalized=None, issues=tuple(issues))

    normalized = replace(simulation_input, **values)
    return ValidationResult(parameters=_parameters(normalized), normalized=normalized)


def validate_investment(
    investment_input: InvestmentInput, max_term_months: int = MAX_TERM_MONTHS
) -> ValidationResult:
    """
    Validate an investment analysis.

    On top of the financing checks: market value must be positive, costs and
    monthly expenses non-negative and the holding period at least one month.
    The holding period may exceed the loan term.
    """
    issues: List[ValidationIssue] = []
    values = _check_financing(investment_input, max_term_months, issues)

    values["market_value"] = _require_positive(
        issues, "market_value", investment_input.market_value
    )
    values["monthly_expenses"] = _require_non_negative(
        issues, "monthly_expenses", investment_input.monthly_expenses
    )
    values["holding_period_months"] = _require_months(
        issues, "holding_period_months", investment_input.holding_period_months
    )

    costs = investment_input.costs
    normalized_costs = {}
    for name in ("itbi", "documentation", "brokerage", "renovation"):
        normalized_costs[name] = _require_non_negative(issues, name, getattr(costs, name))

    if issues:
        logger.debug("Investment input rejected: %s", issues)
        return ValidationResult(parameters=None, normalized=None, issues=tuple(issues))

    values["costs"] = AcquisitionCosts(**normalized_costs)
    normalized = replace(investment_input, **values)
    return ValidationResult(parameters=_parameters(normalized), normalized=normalized)


def is_computable(
    financed_amount: Any, monthly_rate: Any, term_months: Any
) -> bool:
    """Gate used by the generator: P > 0, i >= 0, n > 0."""
    principal = to_decimal(financed_amount)
    rate = to_decimal(monthly_rate)
    if principal is None or rate is None:
        return False
    if isinstance(term_months, bool) or not isinstance(term_months, int):
        return False
    return principal > ZERO and rate >= ZERO and term_months > 0
