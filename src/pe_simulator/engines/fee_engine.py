"""
Platform Fee Engine.

This module computes the tiered platform fees charged on a subscription.
Fees are evaluated independently per year and deducted from final value,
never from the capital deployed.
"""

from typing import List, Tuple
import logging

from ..config import FEE_TIERS

logger = logging.getLogger(__name__)


# ==============================================================================
# FEE TIERS
# ==============================================================================

def get_fee_tier(subscription: float) -> Tuple[float, float]:
    """
    Find the fee tier for a subscription size.

    Tiers are closed-open: a subscription equal to a tier's lower bound
    belongs to that tier.

    Args:
        subscription: Committed amount

    Returns:
        Tuple of (annual_rate, first_year_extra_rate)

    Example:
        >>> get_fee_tier(30_000)
        (0.015, 0.025)
    """
    for lower_bound, annual_rate, first_year_extra in FEE_TIERS:
        if subscription >= lower_bound:
            return annual_rate, first_year_extra

    # Negative subscriptions never reach the engine; fall back to the smallest tier
    _, annual_rate, first_year_extra = FEE_TIERS[-1]
    return annual_rate, first_year_extra


# ==============================================================================
# ANNUAL FEES
# ==============================================================================

def compute_annual_fee(subscription: float, year_index: int) -> float:
    """
    Calculate the platform fee for a single year.

    Args:
        subscription: Committed amount
        year_index: 1-based year of the fund's life

    Returns:
        Fee amount for that year (first year includes the entry fee)

    Example:
        >>> compute_annual_fee(100_000, 1)
        3200.0
    """
    annual_rate, first_year_extra = get_fee_tier(subscription)
    rate = annual_rate + (first_year_extra if year_index == 1 else 0.0)
    return subscription * rate


def fee_schedule(subscription: float, years: int) -> List[float]:
    """Per-year fees for years 1..years."""
    return [compute_annual_fee(subscription, year) for year in range(1, years + 1)]


def calculate_total_fees(subscription: float, years: int) -> float:
    """
    Calculate the total platform fee over the fund's lifetime.

    Args:
        subscription: Committed amount
        years: Projection horizon in years

    Returns:
        Sum of annual fees over years 1..years
    """
    total = sum(fee_schedule(subscription, years))
    logger.debug(f"Total platform fees over {years} years on {subscription:,.0f}: {total:,.2f}")
    return total
