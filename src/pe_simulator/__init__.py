"""
PE Investment Simulator.

Projects the year-by-year cash flows of a private-equity or private-debt
subscription and aggregates its performance metrics.
"""

from .models import (
    Strategy,
    InvestorProfile,
    ReturnMethod,
    DebtProfile,
    DebtCouponBasis,
    SimulationParameters,
    RawSchedule,
    YearRecord,
    FinalResults,
    SimulationResult,
)
from .engines import run_simulation

__version__ = "0.1.0"

__all__ = [
    "Strategy",
    "InvestorProfile",
    "ReturnMethod",
    "DebtProfile",
    "DebtCouponBasis",
    "SimulationParameters",
    "RawSchedule",
    "YearRecord",
    "FinalResults",
    "SimulationResult",
    "run_simulation",
]
