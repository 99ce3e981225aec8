"""
API routes for the financing engine.
"""

from fastapi import APIRouter

from realty_finance.api import calculations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
