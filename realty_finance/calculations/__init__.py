"""
Financing & Investment Calculation Engine

Pure, stateless computations for real estate financing (PRICE and SAC
amortization) and buy-to-resell investment analysis.
"""

from realty_finance.calculations import (
    amortization,
    balance,
    investment,
    irr,
    projections,
    simulation,
    timeline,
    validation,
)

__all__ = [
    "amortization",
    "balance",
    "investment",
    "irr",
    "projections",
    "simulation",
    "timeline",
    "validation",
]
