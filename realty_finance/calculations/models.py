"""
Value objects for the financing and investment engine.

Every object here is created per request and discarded after use. Money and
rates are ``Decimal``; sequences are tuples so results stay immutable.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, getcontext, localcontext
from typing import Optional, Tuple
import enum

# Significant digits used while accumulating schedules and costs
ENGINE_PRECISION = 34

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def engine_context():
    """Decimal context used for every engine computation."""
    ctx = getcontext().copy()
    ctx.prec = ENGINE_PRECISION
    return localcontext(ctx)


class AmortizationSystem(str, enum.Enum):
    """Supported amortization systems."""

    CONSTANT_INSTALLMENT = "price"  # Tabela PRICE
    CONSTANT_AMORTIZATION = "sac"  # Sistema de Amortização Constante


class DealRating(str, enum.Enum):
    """Coarse classification of an investment by total ROI."""

    excellent = "excellent"
    good = "good"
    moderate = "moderate"
    risky = "risky"


@dataclass(frozen=True)
class SimulationInput:
    """Financing scenario as typed by the user, already parsed to numbers."""

    property_value: Decimal
    down_payment: Decimal
    annual_interest_rate: Decimal  # fraction, e.g. 0.1099
    term_months: int
    system: AmortizationSystem
    first_payment_date: Optional[date] = None


@dataclass(frozen=True)
class FinancingParameters:
    """Validated inputs for the schedule generator."""

    financed_amount: Decimal
    monthly_rate: Decimal
    term_months: int
    system: AmortizationSystem
    first_payment_date: Optional[date] = None


@dataclass(frozen=True)
class ScheduleRow:
    """A single repayment period. Balance is after the payment."""

    month: int
    installment: Decimal
    amortization: Decimal
    interest: Decimal
    balance: Decimal
    due_date: Optional[date] = None


@dataclass(frozen=True)
class AmortizationResult:
    """Full repayment schedule and its headline figures."""

    financed_amount: Decimal
    monthly_rate: Decimal
    term_months: int
    system: AmortizationSystem
    total_amount: Decimal
    total_interest: Decimal
    first_installment: Decimal
    last_installment: Decimal
    monthly_amortization: Decimal
    average_installment: Decimal
    schedule: Tuple[ScheduleRow, ...]


@dataclass(frozen=True)
class AcquisitionCosts:
    """One-time costs paid at purchase."""

    itbi: Decimal = ZERO  # transfer tax
    documentation: Decimal = ZERO
    brokerage: Decimal = ZERO
    renovation: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.itbi + self.documentation + self.brokerage + self.renovation


@dataclass(frozen=True, kw_only=True)
class InvestmentInput(SimulationInput):
    """Financing scenario plus the costs and exit of a buy-to-resell plan."""

    market_value: Decimal
    holding_period_months: int
    costs: AcquisitionCosts = field(default_factory=AcquisitionCosts)
    monthly_expenses: Decimal = ZERO


@dataclass(frozen=True)
class InvestmentMetrics:
    """Result of resale at a single holding period."""

    holding_period_months: int
    total_paid_until_resale: Decimal
    total_interest_paid: Decimal
    remaining_debt_at_resale: Decimal
    total_investment: Decimal
    estimated_profit: Decimal
    total_roi: Decimal  # percent
    monthly_roi: Decimal  # percent, linear


@dataclass(frozen=True)
class TimelineRow:
    month: int
    profit: Decimal
    roi: Decimal
    remaining_debt: Decimal
    total_paid: Decimal


@dataclass(frozen=True)
class DebtPoint:
    month: int
    debt: Decimal
    paid: Decimal


@dataclass(frozen=True)
class PaymentPoint:
    month: int
    amortization: Decimal
    interest: Decimal
    installment: Decimal


@dataclass(frozen=True)
class DealAssessment:
    """Purchase discount and exit exposure of an investment."""

    discount: Decimal
    discount_percentage: Decimal
    debt_to_market_ratio: Decimal
    rating: DealRating


@dataclass(frozen=True)
class InvestmentResult:
    """Everything the presentation and report layers need for one analysis."""

    financing: AmortizationResult
    metrics: InvestmentMetrics
    assessment: DealAssessment
    timeline_comparison: Tuple[TimelineRow, ...]
    debt_evolution: Tuple[DebtPoint, ...]
    payment_breakdown: Tuple[PaymentPoint, ...]
    monthly_irr: Optional[Decimal] = None
    annual_irr: Optional[Decimal] = None
    equity_multiple: Optional[Decimal] = None

    @property
    def estimated_profit(self) -> Decimal:
        return self.metrics.estimated_profit

    @property
    def total_roi(self) -> Decimal:
        return self.metrics.total_roi

    @property
    def monthly_roi(self) -> Decimal:
        return self.metrics.monthly_roi

    @property
    def total_investment(self) -> Decimal:
        return self.metrics.total_investment

    @property
    def total_paid_until_resale(self) -> Decimal:
        return self.metrics.total_paid_until_resale

    @property
    def total_interest_paid(self) -> Decimal:
        return self.metrics.total_interest_paid

    @property
    def remaining_debt_at_resale(self) -> Decimal:
        return self.metrics.remaining_debt_at_resale


@dataclass(frozen=True)
class OutstandingBalance:
    """Estimate of what is still owed on an existing loan."""

    system: AmortizationSystem
    remaining_balance: Decimal
    total_remaining: Decimal
    remaining_installments: int
    potential_savings: Decimal
