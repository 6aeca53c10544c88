"""
Simulation Engine.

Chains the fee, schedule, recycling and metrics engines into a single pure
computation: SimulationParameters in, SimulationResult out. Nothing is kept
between runs; every call recomputes the whole projection.
"""

import logging

from ..config import LOG_LEVEL, LOG_FORMAT
from ..models import SimulationParameters, SimulationResult
from .fee_engine import fee_schedule
from .schedule_engine import generate_raw_schedule
from .recycling_engine import build_year_records
from .pe_metrics_engine import aggregate_results, calculate_reinvestment_scenario

logger = logging.getLogger(__name__)


def run_simulation(params: SimulationParameters) -> SimulationResult:
    """
    Run a full simulation.

    Args:
        params: Validated simulation parameters

    Returns:
        SimulationResult with the yearly records, base results and, when
        distribution reinvestment is enabled, the reinvested results

    Example:
        >>> params = SimulationParameters(subscription=100_000, strategy=Strategy.BUYOUT)
        >>> result = run_simulation(params)
        >>> print(f"MOIC: {result.results.moic:.2f}x")
    """
    fees = fee_schedule(params.subscription, params.fund_lifetime_years)
    raw = generate_raw_schedule(params)
    records = build_year_records(params, raw, fees)
    results = aggregate_results(params, records)

    reinvested = None
    if params.reinvest_distributions:
        reinvested = calculate_reinvestment_scenario(params, records, results, raw.terminal_year)

    logger.info(
        f"Simulated {params.strategy.value} subscription of {params.subscription:,.0f} "
        f"over {params.fund_lifetime_years} years: MOIC {results.moic:.2f}x, IRR {results.irr:.2%}"
    )
    return SimulationResult(
        parameters=params,
        records=records,
        results=results,
        reinvested_results=reinvested,
    )


if __name__ == "__main__":
    from .report_engine import generate_simulation_summary

    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    default_params = SimulationParameters(
        subscription=100_000,
        call_years=5,
        target_multiple=2.5,
        reinvest_rate=0.15,
        reinvest_distributions=True,
    )
    print(generate_simulation_summary(run_simulation(default_params)))
