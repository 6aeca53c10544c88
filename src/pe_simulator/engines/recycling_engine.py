"""
Recycling & Cash Engine.

This module walks a raw schedule year by year, tracks the outstanding
commitment and decides how much of each distribution the fund keeps to
cover that year's capital call. It produces one YearRecord per year.
"""

from typing import List, Optional
import logging

from ..models import SimulationParameters, RawSchedule, YearRecord, Strategy
from .fee_engine import fee_schedule

logger = logging.getLogger(__name__)


def compute_recycled_distribution(
    capital_call: float,
    gross_distribution: float,
    outstanding_commitment: float,
    recycling_allowed: bool = True
) -> float:
    """
    Calculate the part of a distribution retained by the fund.

    Recycling only happens in years where a capital call and a distribution
    coincide, and is capped by the distribution, the call and the
    outstanding commitment.

    Args:
        capital_call: Capital call of the year (<= 0)
        gross_distribution: Gross distribution of the year (>= 0)
        outstanding_commitment: Commitment left before the year
        recycling_allowed: False for strategies that never recycle

    Returns:
        Recycled amount (>= 0)
    """
    if not recycling_allowed:
        return 0.0
    if capital_call >= 0 or gross_distribution <= 0:
        return 0.0
    return max(0.0, min(gross_distribution, abs(capital_call), outstanding_commitment))


def compute_future_value(net_distribution: float, reinvest_rate: float, year: int, terminal_year: int) -> float:
    """Compound a positive net distribution to the terminal year."""
    if net_distribution <= 0:
        return 0.0
    years_remaining = max(0, terminal_year - year)
    return net_distribution * (1 + reinvest_rate) ** years_remaining


def build_year_records(
    params: SimulationParameters,
    raw: RawSchedule,
    fees: Optional[List[float]] = None
) -> List[YearRecord]:
    """
    Build the yearly cash-flow table.

    Each year depends on the cumulative calls and recycled amounts of all
    prior years, so years are processed strictly in order.

    Args:
        params: Simulation parameters
        raw: Raw schedule from the schedule engine
        fees: Per-year platform fees; defaults to the tiered fee schedule

    Returns:
        List of YearRecord, ascending by year
    """
    subscription = params.subscription
    # Debt distributions are coupons and amortization, never surplus capital
    recycling_allowed = params.strategy != Strategy.DEBT
    if fees is None:
        fees = fee_schedule(subscription, len(raw.capital_calls))

    records = []
    cumulative_called = 0.0
    cumulative_recycled = 0.0

    for index, (call, gross) in enumerate(zip(raw.capital_calls, raw.distributions)):
        year = index + 1
        outstanding = max(0.0, subscription - cumulative_called - cumulative_recycled)

        recycled = compute_recycled_distribution(call, gross, outstanding, recycling_allowed)
        actual_cash_out = call + recycled if call < 0 else 0.0
        net_cash_flow = gross - recycled + call
        net_distribution = gross - recycled
        future_value = compute_future_value(net_distribution, params.reinvest_rate, year, raw.terminal_year)

        records.append(YearRecord(
            year=year,
            capital_call=call,
            gross_distribution=gross,
            recycled_distribution=recycled,
            actual_cash_out=actual_cash_out,
            net_cash_flow=net_cash_flow,
            net_distribution=net_distribution,
            future_value=future_value,
            outstanding_commitment_before_year=outstanding,
            annual_fee=fees[index],
            uncalled_interest=raw.uncalled_interest[index],
        ))

        cumulative_called += abs(call)
        cumulative_recycled += recycled

        if recycled:
            logger.debug(f"Year {year}: recycled {recycled:,.2f} of {gross:,.2f} (outstanding {outstanding:,.2f})")

    logger.debug(f"Built {len(records)} year records, total recycled {cumulative_recycled:,.2f}")
    return records
