"""
Financing and investment calculation API endpoints.

Money fields accept JSON numbers or Brazilian formatted text ("R$ 450.000,00").
Rates are percent per year as typed in the forms (10.99 or "10,99").
Responses are rounded for display: money to cents, percentages to 4 places.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, BeforeValidator

from realty_finance.calculations.balance import estimate_outstanding_balance
from realty_finance.calculations.models import (
    AcquisitionCosts,
    AmortizationResult,
    AmortizationSystem,
    InvestmentInput,
    SimulationInput,
)
from realty_finance.calculations.simulation import analyze_investment, simulate_financing
from realty_finance.calculations.timeline import default_candidate_months, project_timeline
from realty_finance.calculations.validation import (
    ValidationResult,
    resolve_down_payment,
    validate_investment,
    validate_simulation,
)
from realty_finance.config import Settings, get_settings
from realty_finance.formatting import (
    format_brl,
    fraction_as_percent,
    money,
    parse_currency,
    parse_percentage,
    parse_points,
    percent,
)
from realty_finance.services.audit import get_audit_service

router = APIRouter()

Money = Annotated[Decimal, BeforeValidator(parse_currency)]
Rate = Annotated[Decimal, BeforeValidator(parse_percentage)]
Points = Annotated[Decimal, BeforeValidator(parse_points)]


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================


class FinancingInput(BaseModel):
    """Input for a financing simulation."""

    property_value: Money
    down_payment: Optional[Money] = None
    down_payment_percentage: Optional[Points] = None  # e.g. 20 or "20,5"
    annual_interest_rate: Rate
    term_months: int = 360
    system: AmortizationSystem = AmortizationSystem.CONSTANT_AMORTIZATION
    first_payment_date: Optional[date] = None


class InvestmentAnalysisInput(FinancingInput):
    """Input for a buy-to-resell investment analysis."""

    market_value: Money
    holding_period_months: int = 24

    # One-time costs
    itbi: Money = Decimal("0")
    documentation: Money = Decimal("0")
    brokerage: Money = Decimal("0")
    renovation: Money = Decimal("0")

    # Recurring holding cost (condo fee, IPTU, utilities)
    monthly_expenses: Money = Decimal("0")

    # Timeline comparison horizons; defaults to every 6 months
    candidate_months: Optional[List[int]] = None


class BalanceInput(BaseModel):
    """Input for the outstanding balance estimate."""

    financed_amount: Money
    current_installment: Money
    paid_installments: int
    annual_interest_rate: Rate
    system: AmortizationSystem = AmortizationSystem.CONSTANT_AMORTIZATION


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================


class ScheduleRowResponse(BaseModel):
    month: int
    installment: float
    amortization: float
    interest: float
    balance: float
    due_date: Optional[date] = None


class FinancingResponse(BaseModel):
    """Financing simulation result."""

    system: AmortizationSystem
    financed_amount: float
    monthly_rate: float  # percent
    term_months: int
    total_amount: float
    total_interest: float
    first_installment: float
    last_installment: float
    monthly_amortization: float
    average_installment: float
    headline: Dict[str, str]
    schedule: List[ScheduleRowResponse]


class TimelineRowResponse(BaseModel):
    month: int
    profit: float
    roi: float
    remaining_debt: float
    total_paid: float


class DebtPointResponse(BaseModel):
    month: int
    debt: float
    paid: float


class PaymentPointResponse(BaseModel):
    month: int
    amortization: float
    interest: float
    installment: float


class InvestmentResponse(BaseModel):
    """Investment analysis result."""

    financing: FinancingResponse
    holding_period_months: int

    estimated_profit: float
    total_roi: float
    monthly_roi: float
    total_investment: float
    total_paid_until_resale: float
    total_interest_paid: float
    remaining_debt_at_resale: float

    discount: float
    discount_percentage: float
    debt_to_market_ratio: float
    rating: str

    monthly_irr: Optional[float] = None
    annual_irr: Optional[float] = None
    equity_multiple: Optional[float] = None

    timeline_comparison: List[TimelineRowResponse]
    debt_evolution: List[DebtPointResponse]
    payment_breakdown: List[PaymentPointResponse]


class TimelineResponse(BaseModel):
    timeline_comparison: List[TimelineRowResponse]


class BalanceResponse(BaseModel):
    system: AmortizationSystem
    remaining_balance: float
    total_remaining: float
    remaining_installments: int
    potential_savings: float


class SuggestedRatesResponse(BaseModel):
    min: float
    max: float
    default: float


# ============================================================================
# CONVERSIONS
# ============================================================================


def _down_payment(inputs: FinancingInput) -> Decimal:
    down = resolve_down_payment(
        inputs.property_value, inputs.down_payment, inputs.down_payment_percentage
    )
    return down if down is not None else Decimal("0")


def _simulation_input(inputs: FinancingInput) -> SimulationInput:
    return SimulationInput(
        property_value=inputs.property_value,
        down_payment=_down_payment(inputs),
        annual_interest_rate=inputs.annual_interest_rate,
        term_months=inputs.term_months,
        system=inputs.system,
        first_payment_date=inputs.first_payment_date,
    )


def _investment_input(inputs: InvestmentAnalysisInput) -> InvestmentInput:
    return InvestmentInput(
        property_value=inputs.property_value,
        down_payment=_down_payment(inputs),
        annual_interest_rate=inputs.annual_interest_rate,
        term_months=inputs.term_months,
        system=inputs.system,
        first_payment_date=inputs.first_payment_date,
        market_value=inputs.market_value,
        holding_period_months=inputs.holding_period_months,
        costs=AcquisitionCosts(
            itbi=inputs.itbi,
            documentation=inputs.documentation,
            brokerage=inputs.brokerage,
            renovation=inputs.renovation,
        ),
        monthly_expenses=inputs.monthly_expenses,
    )


def _rejected(validation: ValidationResult) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail=[{"field": i.field, "message": i.message} for i in validation.issues],
    )


def _financing_response(result: AmortizationResult) -> FinancingResponse:
    return FinancingResponse(
        system=result.system,
        financed_amount=money(result.financed_amount),
        monthly_rate=fraction_as_percent(result.monthly_rate),
        term_months=result.term_months,
        total_amount=money(result.total_amount),
        total_interest=money(result.total_interest),
        first_installment=money(result.first_installment),
        last_installment=money(result.last_installment),
        monthly_amortization=money(result.monthly_amortization),
        average_installment=money(result.average_installment),
        headline={
            "financed_amount": format_brl(result.financed_amount),
            "first_installment": format_brl(result.first_installment),
            "last_installment": format_brl(result.last_installment),
            "total_interest": format_brl(result.total_interest),
        },
        schedule=[
            ScheduleRowResponse(
                month=row.month,
                installment=money(row.installment),
                amortization=money(row.amortization),
                interest=money(row.interest),
                balance=money(row.balance),
                due_date=row.due_date,
            )
            for row in result.schedule
        ],
    )


def _timeline_rows(rows) -> List[TimelineRowResponse]:
    return [
        TimelineRowResponse(
            month=row.month,
            profit=money(row.profit),
            roi=percent(row.roi),
            remaining_debt=money(row.remaining_debt),
            total_paid=money(row.total_paid),
        )
        for row in rows
    ]


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.post("/financing", response_model=FinancingResponse)
async def calculate_financing(
    inputs: FinancingInput,
    settings: Settings = Depends(get_settings),
):
    """Generate the repayment schedule for a financing scenario."""
    simulation_input = _simulation_input(inputs)
    result = simulate_financing(simulation_input, settings.max_term_months)
    if result is None:
        raise _rejected(validate_simulation(simulation_input, settings.max_term_months))

    # Audit event
    audit = get_audit_service()
    audit.emit(
        "financing_simulation",
        {
            "inputs": inputs.model_dump(mode="json"),
            "financed_amount": result.financed_amount,
            "first_installment": result.first_installment,
            "last_installment": result.last_installment,
            "total_interest": result.total_interest,
        },
    )

    return _financing_response(result)


@router.post("/investment", response_model=InvestmentResponse)
async def calculate_investment(
    inputs: InvestmentAnalysisInput,
    settings: Settings = Depends(get_settings),
):
    """Analyze profit and ROI of buying with financing and reselling."""
    investment_input = _investment_input(inputs)
    result = analyze_investment(
        investment_input,
        candidate_months=inputs.candidate_months,
        max_term_months=settings.max_term_months,
        timeline_step=settings.timeline_step_months,
        timeline_limit=settings.timeline_max_months,
    )
    if result is None:
        raise _rejected(validate_investment(investment_input, settings.max_term_months))

    metrics = result.metrics
    assessment = result.assessment

    # Audit event
    audit = get_audit_service()
    audit.emit(
        "investment_analysis",
        {
            "inputs": inputs.model_dump(mode="json"),
            "holding_period": metrics.holding_period_months,
            "estimated_profit": metrics.estimated_profit,
            "total_roi": metrics.total_roi,
            "discount_percentage": assessment.discount_percentage,
        },
    )

    return InvestmentResponse(
        financing=_financing_response(result.financing),
        holding_period_months=metrics.holding_period_months,
        estimated_profit=money(metrics.estimated_profit),
        total_roi=percent(metrics.total_roi),
        monthly_roi=percent(metrics.monthly_roi),
        total_investment=money(metrics.total_investment),
        total_paid_until_resale=money(metrics.total_paid_until_resale),
        total_interest_paid=money(metrics.total_interest_paid),
        remaining_debt_at_resale=money(metrics.remaining_debt_at_resale),
        discount=money(assessment.discount),
        discount_percentage=percent(assessment.discount_percentage),
        debt_to_market_ratio=percent(assessment.debt_to_market_ratio),
        rating=assessment.rating.value,
        monthly_irr=fraction_as_percent(result.monthly_irr),
        annual_irr=fraction_as_percent(result.annual_irr),
        equity_multiple=percent(result.equity_multiple),
        timeline_comparison=_timeline_rows(result.timeline_comparison),
        debt_evolution=[
            DebtPointResponse(month=p.month, debt=money(p.debt), paid=money(p.paid))
            for p in result.debt_evolution
        ],
        payment_breakdown=[
            PaymentPointResponse(
                month=p.month,
                amortization=money(p.amortization),
                interest=money(p.interest),
                installment=money(p.installment),
            )
            for p in result.payment_breakdown
        ],
    )


@router.post("/timeline", response_model=TimelineResponse)
async def calculate_timeline(
    inputs: InvestmentAnalysisInput,
    settings: Settings = Depends(get_settings),
):
    """Compare profit and ROI across resale months."""
    investment_input = _investment_input(inputs)
    validation = validate_investment(investment_input, settings.max_term_months)
    if not validation.is_valid:
        raise _rejected(validation)

    candidate_months = inputs.candidate_months
    if candidate_months is None:
        candidate_months = default_candidate_months(
            inputs.term_months,
            inputs.holding_period_months,
            settings.timeline_step_months,
            settings.timeline_max_months,
        )

    rows = project_timeline(
        investment_input, candidate_months, max_term_months=settings.max_term_months
    )
    return TimelineResponse(timeline_comparison=_timeline_rows(rows))


@router.post("/balance", response_model=BalanceResponse)
async def calculate_balance(
    inputs: BalanceInput,
):
    """Estimate the outstanding balance of an existing loan."""
    result = estimate_outstanding_balance(
        inputs.financed_amount,
        inputs.current_installment,
        inputs.paid_installments,
        inputs.annual_interest_rate,
        inputs.system,
    )
    if result is None:
        raise HTTPException(
            status_code=400,
            detail="Installment, rate and financed amount are inconsistent",
        )

    # Audit event
    audit = get_audit_service()
    audit.emit(
        "balance_simulation",
        {
            "inputs": inputs.model_dump(mode="json"),
            "remaining_balance": result.remaining_balance,
        },
    )

    return BalanceResponse(
        system=result.system,
        remaining_balance=money(result.remaining_balance),
        total_remaining=money(result.total_remaining),
        remaining_installments=result.remaining_installments,
        potential_savings=money(result.potential_savings),
    )


@router.get("/rates", response_model=SuggestedRatesResponse)
async def suggested_rates(settings: Settings = Depends(get_settings)):
    """Reference annual rates (percent) to prefill the forms."""
    return SuggestedRatesResponse(
        min=settings.suggested_rate_min,
        max=settings.suggested_rate_max,
        default=settings.suggested_rate_default,
    )
