"""
PE Metrics Computation Engine.

This module aggregates a yearly cash-flow table into final performance
metrics: capital called and disbursed, final value, MOIC/TVPI, DPI,
annualized IRR, taxes and net proceeds.

All calculations are deterministic and degrade silently on numerical
edge cases (zero denominators, non-convergent IRR) instead of raising.
"""

from typing import List, Optional
import logging

from ..config import (
    IRR_MAX_ITERATIONS,
    IRR_TOLERANCE,
    IRR_INITIAL_GUESS,
    INDIVIDUAL_TAX_RATE,
    ALTERNATE_TARGET_IRR,
    DEFAULT_ALTERNATE_TARGET_IRR,
)
from ..models import (
    SimulationParameters,
    YearRecord,
    FinalResults,
    InvestorProfile,
    ReturnMethod,
    Strategy,
)
from .fee_engine import calculate_total_fees

logger = logging.getLogger(__name__)


# ==============================================================================
# IRR CALCULATION (annual periods)
# ==============================================================================

def calculate_npv(cash_flows: List[float], rate: float) -> float:
    """Net present value of yearly cash flows, the first flow at t = 0."""
    return sum([cf / (1 + rate) ** t for t, cf in enumerate(cash_flows)])


def calculate_npv_derivative(cash_flows: List[float], rate: float) -> float:
    """Derivative of the NPV with respect to the rate."""
    return sum([-t * cf / (1 + rate) ** (t + 1) for t, cf in enumerate(cash_flows)])


def calculate_irr(
    cash_flows: List[float],
    initial_guess: float = IRR_INITIAL_GUESS,
    max_iterations: int = IRR_MAX_ITERATIONS,
    tolerance: float = IRR_TOLERANCE
) -> float:
    """
    Calculate the Internal Rate of Return of yearly cash flows using Newton-Raphson.

    There is no bracketing fallback: when the derivative vanishes or the
    iteration budget runs out, the current estimate is returned and a
    warning is logged. Callers needing a convergence guarantee should check
    the residual with ``calculate_npv``.

    Args:
        cash_flows: Yearly cash flows (negative for calls, positive for distributions)
        initial_guess: Starting rate (default: 0.1 or 10%)
        max_iterations: Maximum number of Newton-Raphson iterations
        tolerance: Convergence tolerance on the NPV

    Returns:
        IRR as a decimal (e.g., 0.15 for 15%), 0.0 for fewer than two flows

    Example:
        >>> irr = calculate_irr([-100000, 0, 0, 0, 0, 250000])
        >>> print(f"IRR: {irr:.2%}")
        IRR: 20.11%
    """
    if not cash_flows or len(cash_flows) < 2:
        logger.warning("Insufficient cash flows for IRR calculation")
        return 0.0

    rate = initial_guess

    for iteration in range(max_iterations):
        try:
            npv = calculate_npv(cash_flows, rate)
            dnpv = calculate_npv_derivative(cash_flows, rate)
        except (ZeroDivisionError, OverflowError) as e:
            logger.warning(f"IRR calculation stopped at rate={rate:.6f}: {e}")
            return rate

        # Check for convergence
        if abs(npv) < tolerance:
            logger.debug(f"IRR converged in {iteration + 1} iterations: {rate:.6f}")
            return rate

        # Avoid division by zero
        if abs(dnpv) < tolerance:
            logger.warning(f"Derivative too small, returning current IRR estimate {rate:.6f}")
            return rate

        # Newton-Raphson update
        rate = rate - npv / dnpv

    logger.warning(f"IRR did not converge after {max_iterations} iterations, last estimate {rate:.6f}")
    return rate


def calculate_annualized_return(final_value: float, cash_out: float, years: int) -> float:
    """
    Simplified annualized return derived from the multiple.

    (final_value / cash_out) ^ (1 / years) - 1

    Returns:
        Annualized rate, 0.0 when nothing was disbursed, -1.0 on total loss
    """
    if cash_out <= 0 or years <= 0:
        return 0.0
    if final_value <= 0:
        return -1.0
    return (final_value / cash_out) ** (1 / years) - 1


# ==============================================================================
# MULTIPLES
# ==============================================================================

def calculate_moic(total_value: float, invested_capital: float) -> float:
    """
    Calculate Multiple on Invested Capital (MoIC / TVPI).

    MoIC = Total Value / Invested Capital

    Args:
        total_value: Final value returned to the investor
        invested_capital: Cash actually disbursed by the investor

    Returns:
        MoIC multiple, or 0.0 if invested_capital is zero
    """
    if invested_capital <= 0:
        logger.warning("Invested capital must be positive for MoIC calculation")
        return 0.0

    return total_value / invested_capital


def calculate_dpi(distributions: float, paid_in: float) -> float:
    """
    Calculate Distributions to Paid-In (DPI) multiple.

    DPI = Net Distributions / Paid-In Capital, 0.0 if nothing was paid in.
    """
    if paid_in <= 0:
        logger.warning("Paid-In capital must be positive for DPI calculation")
        return 0.0

    return distributions / paid_in


# ==============================================================================
# TAXES
# ==============================================================================

def calculate_taxes(profile: InvestorProfile, final_value: float, subscription: float) -> Optional[float]:
    """
    Calculate taxes owed on the capital gain.

    Individuals pay a flat rate on the gain above the subscription. Taxes are
    not computed for entities.

    Args:
        profile: Investor profile
        final_value: Value returned to the investor
        subscription: Committed amount

    Returns:
        Taxes owed, or None when not applicable
    """
    if profile == InvestorProfile.ENTITY:
        return None
    return max(0.0, final_value - subscription) * INDIVIDUAL_TAX_RATE


def calculate_net_proceeds(final_value: float, taxes_owed: Optional[float]) -> float:
    return final_value - (taxes_owed or 0.0)


def _annualized(
    method: ReturnMethod,
    cash_flows: List[float],
    final_value: float,
    cash_out: float,
    years: int
) -> float:
    if method == ReturnMethod.ANNUALIZED_MULTIPLE:
        return calculate_annualized_return(final_value, cash_out, years)
    return calculate_irr(cash_flows)


# ==============================================================================
# AGGREGATION
# ==============================================================================

def aggregate_results(params: SimulationParameters, records: List[YearRecord]) -> FinalResults:
    """
    Aggregate the yearly table into final results.

    The IRR runs over the ``net_cash_flow`` series (distributions net of
    recycling plus calls) unless the annualized-multiple method is requested.
    Fees come from the tiered fee model over the fund lifetime.

    Args:
        params: Simulation parameters
        records: Year records, ascending by year

    Returns:
        FinalResults of the base scenario
    """
    total_capital_called = sum([abs(r.capital_call) for r in records])
    total_actual_cash_out = sum([abs(r.actual_cash_out) for r in records])
    total_gross = sum([r.gross_distribution for r in records])
    total_recycled = sum([r.recycled_distribution for r in records])
    total_net = sum([r.net_distribution for r in records])
    total_fees = calculate_total_fees(params.subscription, params.fund_lifetime_years)
    uncalled_credit = sum([r.uncalled_interest for r in records])

    final_value_before_fees = sum([r.future_value for r in records]) + uncalled_credit
    final_value = final_value_before_fees - total_fees

    irr = _annualized(
        params.return_method,
        [r.net_cash_flow for r in records],
        final_value,
        total_actual_cash_out,
        params.fund_lifetime_years,
    )
    taxes_owed = calculate_taxes(params.investor_profile, final_value, params.subscription)

    results = FinalResults(
        scenario="base",
        total_capital_called=total_capital_called,
        total_actual_cash_out=total_actual_cash_out,
        total_gross_distributions=total_gross,
        total_recycled_distributions=total_recycled,
        total_net_distributions=total_net,
        total_fees=total_fees,
        uncalled_interest_credit=uncalled_credit,
        final_value_before_fees=final_value_before_fees,
        final_value=final_value,
        moic=calculate_moic(final_value, total_actual_cash_out),
        dpi=calculate_dpi(total_net, total_actual_cash_out),
        irr=irr,
        irr_method=params.return_method,
        taxes_owed=taxes_owed,
        net_proceeds=calculate_net_proceeds(final_value, taxes_owed),
        reinvestment_rate=params.reinvest_rate,
    )

    logger.debug(f"Aggregated base results: {results}")
    return results


# ==============================================================================
# REINVESTMENT OF DISTRIBUTIONS
# ==============================================================================

def get_alternate_target_irr(strategy: Optional[Strategy]) -> float:
    """Target IRR of the vehicle receiving reinvested distributions."""
    if strategy is None:
        return DEFAULT_ALTERNATE_TARGET_IRR
    return ALTERNATE_TARGET_IRR.get(strategy.value, DEFAULT_ALTERNATE_TARGET_IRR)


def calculate_reinvestment_scenario(
    params: SimulationParameters,
    records: List[YearRecord],
    base: FinalResults,
    terminal_year: int
) -> FinalResults:
    """
    Calculate results when every net distribution is reinvested.

    Each year's net distribution compounds at the alternate target IRR until
    the terminal year, where the whole reinvested value is received. Only the
    gain over the base scenario is taxed on top of the base taxes.

    Args:
        params: Simulation parameters
        records: Year records, ascending by year
        base: Results of the base scenario
        terminal_year: Year to which distributions are compounded

    Returns:
        FinalResults of the reinvested scenario
    """
    alternate_rate = get_alternate_target_irr(params.reinvestment_strategy or params.strategy)

    reinvested_value = 0.0
    for r in records:
        if r.net_distribution > 0:
            reinvested_value += r.net_distribution * (1 + alternate_rate) ** max(0, terminal_year - r.year)

    final_value_before_fees = reinvested_value + base.uncalled_interest_credit
    final_value = final_value_before_fees - base.total_fees

    # Investor pays the calls and receives everything at the terminal year
    cash_flows = [r.actual_cash_out for r in records]
    cash_flows[min(terminal_year, len(cash_flows)) - 1] += final_value

    irr = _annualized(
        params.return_method,
        cash_flows,
        final_value,
        base.total_actual_cash_out,
        params.fund_lifetime_years,
    )

    taxes_owed = None
    if base.taxes_owed is not None:
        incremental_gain = max(0.0, final_value - base.final_value)
        taxes_owed = base.taxes_owed + incremental_gain * INDIVIDUAL_TAX_RATE

    results = FinalResults(
        scenario="reinvested",
        total_capital_called=base.total_capital_called,
        total_actual_cash_out=base.total_actual_cash_out,
        total_gross_distributions=base.total_gross_distributions,
        total_recycled_distributions=base.total_recycled_distributions,
        total_net_distributions=base.total_net_distributions,
        total_fees=base.total_fees,
        uncalled_interest_credit=base.uncalled_interest_credit,
        final_value_before_fees=final_value_before_fees,
        final_value=final_value,
        moic=calculate_moic(final_value, base.total_actual_cash_out),
        dpi=base.dpi,
        irr=irr,
        irr_method=params.return_method,
        taxes_owed=taxes_owed,
        net_proceeds=calculate_net_proceeds(final_value, taxes_owed),
        reinvestment_rate=alternate_rate,
    )

    logger.debug(f"Reinvested scenario at {alternate_rate:.1%}: final value {final_value:,.2f}")
    return results
