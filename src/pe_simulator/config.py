"""
Configuration management for the PE Investment Simulator.

This module centralizes all configuration settings including solver
parameters, fee and tax schedules, strategy timing and logging.
"""

import os
from typing import Dict, List, Tuple


# ==============================================================================
# IRR SOLVER CONFIGURATION
# ==============================================================================

IRR_MAX_ITERATIONS = 100
IRR_TOLERANCE = 1e-6
IRR_INITIAL_GUESS = 0.1


# ==============================================================================
# PLATFORM FEES
# ==============================================================================

# (lower bound inclusive, annual rate, extra first-year rate), highest tier first
FEE_TIERS: List[Tuple[float, float, float]] = [
    (100_000, 0.012, 0.020),
    (30_000, 0.015, 0.025),
    (0, 0.017, 0.030),
]


# ==============================================================================
# SMALL TICKETS
# ==============================================================================

SMALL_TICKET_THRESHOLD = 30_000
UNCALLED_CAPITAL_RATE = 0.02


# ==============================================================================
# TAXES
# ==============================================================================

INDIVIDUAL_TAX_RATE = 0.30


# ==============================================================================
# STRATEGY TIMING
# ==============================================================================

BUYOUT_SEED_YEAR = 3
BUYOUT_SEED_PCT = 0.03
BUYOUT_PRINCIPAL_START_YEAR = 4
BUYOUT_PRINCIPAL_YEARS = 4
BUYOUT_PROFIT_YEARS = 3

VC_CALL_YEARS = 5
VC_SEED_YEAR = 5
VC_SEED_PCT = 0.08
VC_DISTRIBUTION_START_YEAR = 6
VC_DISTRIBUTION_YEARS = 5

GROWTH_CALL_YEARS = 5
GROWTH_SEEDS: Dict[int, float] = {4: 0.05, 5: 0.15}
GROWTH_DISTRIBUTION_START_YEAR = 6
GROWTH_DISTRIBUTION_YEARS = 5

SECONDARY_CALL_YEARS = 2
SECONDARY_DISTRIBUTION_START_YEAR = 2
SECONDARY_DISTRIBUTION_YEARS = 5
SECONDARY_TERMINAL_YEAR = 6

# Debt profiles: call split (year 1 onwards), repayment window and terminal year
DEBT_PROFILES: Dict[str, Dict[str, object]] = {
    "standard": {
        "call_split": [0.35, 0.35, 0.30],
        "repayment_start_year": 4,
        "repayment_years": 4,
        "terminal_year": 7,
    },
    "extended": {
        "call_split": [0.55, 0.15, 0.20, 0.10],
        "repayment_start_year": 5,
        "repayment_years": 4,
        "terminal_year": 8,
    },
}

# Alternate target IRR used when distributions are reinvested
ALTERNATE_TARGET_IRR: Dict[str, float] = {
    "venture_capital": 0.15,
    "growth_capital": 0.133,
    "secondary": 0.082,
    "buyout": 0.096,
}
DEFAULT_ALTERNATE_TARGET_IRR = 0.096


# ==============================================================================
# SIMULATION DEFAULTS
# ==============================================================================

DEFAULT_FUND_LIFETIME_YEARS = 10
DEFAULT_CALL_YEARS = 5
DEFAULT_TARGET_MULTIPLE = 2.5
DEFAULT_TARGET_YIELD = 8.0
DEFAULT_REINVEST_RATE = 0.15
MAX_HORIZON_YEARS = 30


# ==============================================================================
# LOGGING CONFIGURATION
# ==============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Currency symbol used by report formatting
CURRENCY_SYMBOL = os.getenv("SIMULATOR_CURRENCY_SYMBOL", "€")
