"""
Investment Cost Aggregation

Combines a repayment schedule with acquisition and holding costs to price a
resale at a single holding period.
"""

from decimal import Decimal
from typing import List

from realty_finance.calculations.amortization import (
    balance_after,
    calculate_debt_service,
    calculate_total_interest,
)
from realty_finance.calculations.models import (
    ZERO,
    HUNDRED,
    AmortizationResult,
    DealAssessment,
    DealRating,
    InvestmentInput,
    InvestmentMetrics,
    engine_context,
)

# Total ROI thresholds (percent) used to rate a deal
EXCELLENT_ROI = Decimal("50")
GOOD_ROI = Decimal("20")
RISKY_ROI = Decimal("10")


def aggregate(
    investment_input: InvestmentInput, financing: AmortizationResult
) -> InvestmentMetrics:
    """
    Price a resale after ``holding_period_months``.

    The input must already be normalized by ``validate_investment``.
    Installments stop once the loan is paid off; monthly expenses run for the
    whole holding period.

    Monthly ROI is linear: total ROI divided by the holding period.
    """
    holding = investment_input.holding_period_months
    schedule = financing.schedule

    with engine_context():
        total_paid = calculate_debt_service(schedule, 1, holding)
        total_interest = calculate_total_interest(schedule, through_month=holding)
        remaining_debt = balance_after(schedule, financing.financed_amount, holding)

        total_investment = (
            investment_input.down_payment
            + investment_input.costs.total
            + investment_input.monthly_expenses * holding
            + total_paid
        )
        estimated_profit = investment_input.market_value - remaining_debt - total_investment

        if total_investment > 0:
            total_roi = estimated_profit / total_investment * HUNDRED
        else:
            total_roi = ZERO
        monthly_roi = total_roi / holding

    return InvestmentMetrics(
        holding_period_months=holding,
        total_paid_until_resale=total_paid,
        total_interest_paid=total_interest,
        remaining_debt_at_resale=remaining_debt,
        total_investment=total_investment,
        estimated_profit=estimated_profit,
        total_roi=total_roi,
        monthly_roi=monthly_roi,
    )


def rate_deal(total_roi: Decimal) -> DealRating:
    if total_roi > EXCELLENT_ROI:
        return DealRating.excellent
    if total_roi > GOOD_ROI:
        return DealRating.good
    if total_roi < RISKY_ROI:
        return DealRating.risky
    return DealRating.moderate


def assess_deal(
    investment_input: InvestmentInput, metrics: InvestmentMetrics
) -> DealAssessment:
    """Discount on the purchase and remaining debt relative to the market value."""
    market = investment_input.market_value
    with engine_context():
        discount = market - investment_input.property_value
        discount_percentage = discount / market * HUNDRED
        debt_ratio = metrics.remaining_debt_at_resale / market * HUNDRED

    return DealAssessment(
        discount=discount,
        discount_percentage=discount_percentage,
        debt_to_market_ratio=debt_ratio,
        rating=rate_deal(metrics.total_roi),
    )


def investor_cash_flows(
    investment_input: InvestmentInput, financing: AmortizationResult
) -> List[Decimal]:
    """
    Monthly cash flows from the investor's point of view.

    Month 0 carries the down payment and one-time costs, each following month
    the installment (if any) and holding expenses, and the resale month the
    net sale proceeds.
    """
    holding = investment_input.holding_period_months
    schedule = financing.schedule

    with engine_context():
        flows = [-(investment_input.down_payment + investment_input.costs.total)]
        for month in range(1, holding + 1):
            installment = schedule[month - 1].installment if month <= len(schedule) else ZERO
            flows.append(-(installment + investment_input.monthly_expenses))

        remaining_debt = balance_after(schedule, financing.financed_amount, holding)
        flows[-1] += investment_input.market_value - remaining_debt

    return flows
