"""
Schedule Generation Engine.

This module produces the raw (pre-recycling) capital-call and gross
distribution schedules of a subscription, one generator per fund strategy:

- Buyout: calls over the call period, seed, principal then profit blocks
- Venture capital and growth capital: five call years, seeds, late distributions
- Secondary: short call period, early distributions
- Debt: call split, coupons on principal and equal amortization

All amounts are expressed in currency. Calls are negative, distributions
positive, and index i of every list is year i + 1.
"""

from typing import List, Tuple, Dict, Callable
import logging

import numpy as np

from ..config import (
    SMALL_TICKET_THRESHOLD,
    UNCALLED_CAPITAL_RATE,
    BUYOUT_SEED_YEAR,
    BUYOUT_SEED_PCT,
    BUYOUT_PRINCIPAL_START_YEAR,
    BUYOUT_PRINCIPAL_YEARS,
    BUYOUT_PROFIT_YEARS,
    VC_CALL_YEARS,
    VC_SEED_YEAR,
    VC_SEED_PCT,
    VC_DISTRIBUTION_START_YEAR,
    VC_DISTRIBUTION_YEARS,
    GROWTH_CALL_YEARS,
    GROWTH_SEEDS,
    GROWTH_DISTRIBUTION_START_YEAR,
    GROWTH_DISTRIBUTION_YEARS,
    SECONDARY_CALL_YEARS,
    SECONDARY_DISTRIBUTION_START_YEAR,
    SECONDARY_DISTRIBUTION_YEARS,
    SECONDARY_TERMINAL_YEAR,
    DEBT_PROFILES,
)
from ..models import (
    SimulationParameters,
    RawSchedule,
    Strategy,
    DebtCouponBasis,
)

logger = logging.getLogger(__name__)

GeneratorOutput = Tuple[List[float], List[float], int]


# ==============================================================================
# INCREASING-WEIGHT ALLOCATION
# ==============================================================================

def increasing_weights(n: int) -> List[float]:
    """
    Generate increasing weights for a block of n consecutive years.

    Year k (1-indexed) receives weight 2k / (n + 1). The weights are
    strictly increasing and sum to exactly n.

    Args:
        n: Number of years in the block

    Returns:
        List of n weights

    Example:
        >>> increasing_weights(3)
        [0.5, 1.0, 1.5]
    """
    if n <= 0:
        return []
    weights = np.arange(1, n + 1, dtype=float) * 2.0 / (n + 1)
    return weights.tolist()


def allocate_increasing(total: float, n: int) -> List[float]:
    """
    Spread a block total over n years with increasing weights.

    Each year gets its even share (total / n) scaled by its weight, so the
    allocated amounts sum back to the block total.
    """
    if n <= 0:
        return []
    even_share = total / n
    return [even_share * w for w in increasing_weights(n)]


# ==============================================================================
# HORIZON PLACEMENT HELPERS
# ==============================================================================

def _place_increasing(amounts: List[float], start_year: int, n_years: int, total: float) -> None:
    """
    Add an increasing-weight block to a yearly schedule.

    Years beyond the horizon are dropped from the block and the total is
    re-spread over the in-horizon years. A block starting after the horizon
    lands entirely on the last year.
    """
    horizon = len(amounts)
    years = [y for y in range(start_year, start_year + n_years) if 1 <= y <= horizon]
    if not years:
        years = [horizon] if start_year > horizon else [1]

    for year, amount in zip(years, allocate_increasing(total, len(years))):
        amounts[year - 1] += amount


def _place_even(amounts: List[float], start_year: int, n_years: int, total: float) -> None:
    """Add an evenly split block, clipped to the horizon."""
    horizon = len(amounts)
    years = [y for y in range(start_year, start_year + n_years) if 1 <= y <= horizon]
    if not years:
        years = [horizon]

    share = total / len(years)
    for year in years:
        amounts[year - 1] += share


def _place_at(amounts: List[float], year: int, amount: float) -> None:
    """Add an amount to a single year, folding years past the horizon into the last one."""
    amounts[min(year, len(amounts)) - 1] += amount


def _calls_from_amounts(call_amounts: List[float]) -> List[float]:
    return [-amount if amount else 0.0 for amount in call_amounts]


# ==============================================================================
# STRATEGY GENERATORS
# ==============================================================================

def generate_buyout_schedule(params: SimulationParameters) -> GeneratorOutput:
    """
    Buyout schedule.

    Capital is called evenly over ``call_years``. A seed of 3% comes back in
    year 3, the remaining principal over the following four years and the
    profit over the last three years of the fund.
    """
    horizon = params.fund_lifetime_years
    subscription = params.subscription
    total_value = subscription * params.target_multiple

    call_amounts = [0.0] * horizon
    _place_even(call_amounts, 1, params.call_years, subscription)

    distributions = [0.0] * horizon
    seed = subscription * BUYOUT_SEED_PCT
    _place_at(distributions, BUYOUT_SEED_YEAR, seed)
    _place_increasing(distributions, BUYOUT_PRINCIPAL_START_YEAR, BUYOUT_PRINCIPAL_YEARS, subscription - seed)

    profit_start = max(1, horizon - BUYOUT_PROFIT_YEARS + 1)
    _place_increasing(distributions, profit_start, BUYOUT_PROFIT_YEARS, total_value - subscription)

    return _calls_from_amounts(call_amounts), distributions, horizon


def generate_venture_capital_schedule(params: SimulationParameters) -> GeneratorOutput:
    """Venture capital: five call years, 8% seed in year 5, remainder over years 6-10."""
    horizon = params.fund_lifetime_years
    subscription = params.subscription
    total_value = subscription * params.target_multiple

    call_amounts = [0.0] * horizon
    _place_even(call_amounts, 1, VC_CALL_YEARS, subscription)

    distributions = [0.0] * horizon
    seed = subscription * VC_SEED_PCT
    _place_at(distributions, VC_SEED_YEAR, seed)
    _place_increasing(distributions, VC_DISTRIBUTION_START_YEAR, VC_DISTRIBUTION_YEARS, total_value - seed)

    return _calls_from_amounts(call_amounts), distributions, horizon


def generate_growth_capital_schedule(params: SimulationParameters) -> GeneratorOutput:
    """Growth capital: five call years, seeds in years 4 and 5, remainder over years 6-10."""
    horizon = params.fund_lifetime_years
    subscription = params.subscription
    total_value = subscription * params.target_multiple

    call_amounts = [0.0] * horizon
    _place_even(call_amounts, 1, GROWTH_CALL_YEARS, subscription)

    distributions = [0.0] * horizon
    seeded = 0.0
    for year, pct in GROWTH_SEEDS.items():
        _place_at(distributions, year, subscription * pct)
        seeded += subscription * pct
    _place_increasing(
        distributions, GROWTH_DISTRIBUTION_START_YEAR, GROWTH_DISTRIBUTION_YEARS, total_value - seeded
    )

    return _calls_from_amounts(call_amounts), distributions, horizon


def generate_secondary_schedule(params: SimulationParameters) -> GeneratorOutput:
    """Secondary: two call years, whole value distributed over years 2-6."""
    horizon = params.fund_lifetime_years
    subscription = params.subscription

    call_amounts = [0.0] * horizon
    _place_even(call_amounts, 1, SECONDARY_CALL_YEARS, subscription)

    distributions = [0.0] * horizon
    _place_increasing(
        distributions,
        SECONDARY_DISTRIBUTION_START_YEAR,
        SECONDARY_DISTRIBUTION_YEARS,
        subscription * params.target_multiple,
    )

    return _calls_from_amounts(call_amounts), distributions, min(SECONDARY_TERMINAL_YEAR, horizon)


def generate_debt_schedule(params: SimulationParameters) -> GeneratorOutput:
    """
    Debt fund schedule.

    Capital is called following the profile's split, principal is repaid in
    equal installments over the repayment window and every year up to the
    terminal year pays a coupon of ``target_yield`` percent on the coupon base.
    """
    horizon = params.fund_lifetime_years
    subscription = params.subscription
    profile = DEBT_PROFILES[params.debt_profile.value]
    terminal_year = min(int(profile["terminal_year"]), horizon)
    coupon_rate = params.target_yield / 100

    call_amounts = [0.0] * horizon
    for offset, pct in enumerate(profile["call_split"]):
        _place_at(call_amounts, offset + 1, subscription * pct)

    repayments = [0.0] * horizon
    repayment_years = int(profile["repayment_years"])
    installment = sum(call_amounts) / repayment_years
    for offset in range(repayment_years):
        _place_at(repayments, int(profile["repayment_start_year"]) + offset, installment)

    distributions = [0.0] * horizon
    cumulative_called = 0.0
    cumulative_repaid = 0.0

    for index in range(horizon):
        year = index + 1
        cumulative_called += call_amounts[index]

        if params.debt_coupon_basis == DebtCouponBasis.OUTSTANDING:
            coupon_base = max(0.0, cumulative_called - cumulative_repaid)
        else:
            coupon_base = cumulative_called

        coupon = coupon_rate * coupon_base if year <= terminal_year else 0.0
        distributions[index] = coupon + repayments[index]
        cumulative_repaid += repayments[index]

    return _calls_from_amounts(call_amounts), distributions, terminal_year


STRATEGY_GENERATORS: Dict[Strategy, Callable[[SimulationParameters], GeneratorOutput]] = {
    Strategy.BUYOUT: generate_buyout_schedule,
    Strategy.VENTURE_CAPITAL: generate_venture_capital_schedule,
    Strategy.GROWTH_CAPITAL: generate_growth_capital_schedule,
    Strategy.SECONDARY: generate_secondary_schedule,
    Strategy.DEBT: generate_debt_schedule,
}


# ==============================================================================
# OVERRIDES
# ==============================================================================

def generate_manual_schedule(params: SimulationParameters) -> GeneratorOutput:
    """Build the schedule from user-supplied per-year percentages of the subscription."""
    subscription = params.subscription
    calls = [-abs(pct) / 100 * subscription if pct else 0.0 for pct in params.manual_capital_calls]
    distributions = [pct / 100 * subscription for pct in params.manual_distributions]
    return calls, distributions, params.fund_lifetime_years


def apply_small_ticket_override(
    subscription: float,
    capital_calls: List[float]
) -> Tuple[List[float], List[float]]:
    """
    Collapse the capital calls of a small ticket into a single drawdown.

    The full subscription is called in year 1. Capital the strategy would not
    yet have drawn earns interest at the uncalled-capital rate, credited to
    the investor.

    Args:
        subscription: Committed amount
        capital_calls: Standard (strategy) capital calls

    Returns:
        Tuple of (collapsed calls, uncalled interest per year)
    """
    horizon = len(capital_calls)
    collapsed = [0.0] * horizon
    collapsed[0] = -subscription

    uncalled_interest = []
    cumulative_standard = 0.0
    for call in capital_calls:
        cumulative_standard += abs(call)
        uncalled = max(0.0, subscription - cumulative_standard)
        uncalled_interest.append(uncalled * UNCALLED_CAPITAL_RATE)

    return collapsed, uncalled_interest


def is_small_ticket(subscription: float) -> bool:
    return subscription < SMALL_TICKET_THRESHOLD


# ==============================================================================
# PUBLIC ENTRY POINT
# ==============================================================================

def generate_raw_schedule(params: SimulationParameters) -> RawSchedule:
    """
    Generate the raw schedule for a parameter set.

    Manual calendar mode takes precedence over everything else. Otherwise the
    strategy generator runs and small tickets are collapsed into a single
    year-1 drawdown.

    Args:
        params: Simulation parameters

    Returns:
        RawSchedule with calls, distributions, uncalled interest and terminal year
    """
    if params.manual_calendar:
        calls, distributions, terminal_year = generate_manual_schedule(params)
        logger.debug(f"Using manual calendar over {params.fund_lifetime_years} years")
        return RawSchedule(calls, distributions, terminal_year)

    generator = STRATEGY_GENERATORS[params.strategy]
    calls, distributions, terminal_year = generator(params)
    uncalled_interest = [0.0] * len(calls)

    if is_small_ticket(params.subscription):
        calls, uncalled_interest = apply_small_ticket_override(params.subscription, calls)
        logger.debug(
            f"Small ticket ({params.subscription:,.0f}): single drawdown, "
            f"uncalled interest {sum(uncalled_interest):,.2f}"
        )

    logger.debug(
        f"Generated {params.strategy.value} schedule: calls={sum(calls):,.2f}, "
        f"distributions={sum(distributions):,.2f}, terminal year {terminal_year}"
    )
    return RawSchedule(calls, distributions, terminal_year, uncalled_interest)


def get_terminal_year(params: SimulationParameters) -> int:
    """Year to which net distributions are compounded for a parameter set."""
    if params.manual_calendar:
        return params.fund_lifetime_years
    _, _, terminal_year = STRATEGY_GENERATORS[params.strategy](params)
    return terminal_year
