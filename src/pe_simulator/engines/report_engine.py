"""
Report Engine for simulation output.

This module turns engine output into presentation-ready data for a UI:
- Yearly cash-flow table as a pandas DataFrame
- J-Curve and value waterfall chart data
- Capital call / distribution calendar
- Currency, percentage and multiple formatting
"""

from typing import List, Dict, Any, Optional
import logging

import pandas as pd

from ..config import CURRENCY_SYMBOL
from ..models import SimulationParameters, SimulationResult, YearRecord, FinalResults
from .schedule_engine import generate_raw_schedule

logger = logging.getLogger(__name__)

TABLE_COLUMNS = [
    "capital_call",
    "gross_distribution",
    "recycled_distribution",
    "actual_cash_out",
    "net_cash_flow",
    "future_value",
    "outstanding_commitment_before_year",
    "annual_fee",
    "uncalled_interest",
]


# ==============================================================================
# TABLES
# ==============================================================================

def records_to_dataframe(records: List[YearRecord]) -> pd.DataFrame:
    """
    Convert year records to a DataFrame indexed by year.

    Adds a cumulative net cash flow column for J-Curve style displays.
    """
    df = pd.DataFrame([r.to_dict() for r in records], columns=["year"] + TABLE_COLUMNS)
    df = df.set_index("year")
    df["cumulative_net_cash_flow"] = df["net_cash_flow"].cumsum()
    return df


# ==============================================================================
# CHART DATA PREPARATION
# ==============================================================================

def prepare_j_curve_data(records: List[YearRecord]) -> Dict[str, Any]:
    """
    Prepare J-Curve data from the investor's net cash flows.

    Args:
        records: Year records, ascending by year

    Returns:
        Dictionary with yearly and cumulative flows and the trough
    """
    df = records_to_dataframe(records)

    chart_data = {
        "chart_type": "j_curve",
        "years": df.index.tolist(),
        "yearly_net_cash_flow": df["net_cash_flow"].tolist(),
        "cumulative_net_cash_flow": df["cumulative_net_cash_flow"].tolist(),
        "trough": None,
    }

    if not df.empty:
        trough_year = int(df["cumulative_net_cash_flow"].idxmin())
        trough_value = float(df.loc[trough_year, "cumulative_net_cash_flow"])
        chart_data["trough"] = {
            "year": trough_year,
            "value": trough_value,
            "label": f"Trough: {format_currency(trough_value)}",
        }

    logger.debug(f"Prepared J-Curve data with {len(df)} years")
    return chart_data


def prepare_value_waterfall_data(results: FinalResults) -> Dict[str, Any]:
    """
    Prepare a waterfall decomposing net proceeds.

    Net distributions, plus the reinvestment gain and uncalled-capital
    interest, minus fees and taxes, end on the net proceeds.
    """
    reinvestment_gain = (
        results.final_value_before_fees
        - results.total_net_distributions
        - results.uncalled_interest_credit
    )
    categories = ["Net Distributions", "Reinvestment Gain", "Uncalled Interest", "Fees", "Taxes"]
    values = [
        results.total_net_distributions,
        reinvestment_gain,
        results.uncalled_interest_credit,
        -results.total_fees,
        -(results.taxes_owed or 0.0),
    ]

    running_total = 0.0
    waterfall_data = []
    for category, value in zip(categories, values):
        waterfall_data.append({
            "category": category,
            "start": running_total,
            "change": value,
            "end": running_total + value,
            "is_positive": value >= 0
        })
        running_total += value

    chart_data = {
        "chart_type": "waterfall",
        "scenario": results.scenario,
        "start_value": 0.0,
        "end_value": running_total,
        "end_label": "Net Proceeds",
        "data": waterfall_data,
    }

    logger.debug(f"Prepared value waterfall for {results.scenario} scenario")
    return chart_data


# ==============================================================================
# CALENDAR
# ==============================================================================

def _year_range(start: int, end: int) -> str:
    return f"Year {start}" if start == end else f"Years {start}-{end}"


def describe_distribution_calendar(params: SimulationParameters) -> List[str]:
    """
    Describe the capital call and distribution calendar in plain text.

    Consecutive years with the same call amount are grouped into one line.

    Example:
        >>> describe_distribution_calendar(SimulationParameters(subscription=100_000))[0]
        'Years 1-5: capital calls of 20 000 € per year'
    """
    raw = generate_raw_schedule(params)
    lines = []

    run_start: Optional[int] = None
    run_amount = 0.0
    for index, call in enumerate(raw.capital_calls + [0.0]):
        year = index + 1
        amount = round(abs(call), 2)
        if run_start is not None and amount != run_amount:
            suffix = " per year" if year - 1 > run_start else ""
            lines.append(
                f"{_year_range(run_start, year - 1)}: capital calls of {format_currency(run_amount)}{suffix}"
            )
            run_start = None
        if amount and run_start is None:
            run_start, run_amount = year, amount

    for index, distribution in enumerate(raw.distributions):
        if distribution > 0:
            lines.append(f"Year {index + 1}: distribution of {format_currency(distribution)}")

    uncalled = sum(raw.uncalled_interest)
    if uncalled > 0:
        lines.append(f"Uncalled capital interest credited: {format_currency(uncalled)}")

    return lines


# ==============================================================================
# FORMATTING UTILITIES
# ==============================================================================

def format_currency(value: float, decimals: int = 0) -> str:
    """Format value as currency with French grouping, e.g. '100 000 €'."""
    text = f"{value:,.{decimals}f}".replace(",", " ").replace(".", ",")
    return f"{text} {CURRENCY_SYMBOL}"


def format_percentage(value: float, decimals: int = 1) -> str:
    """Format a decimal rate as percentage (0.153 -> '15.3%')."""
    return f"{value * 100:.{decimals}f}%"


def format_multiple(value: float, decimals: int = 2) -> str:
    """Format value as multiple."""
    return f"{value:.{decimals}f}x"


# ==============================================================================
# SUMMARY
# ==============================================================================

def _results_lines(results: FinalResults) -> List[str]:
    taxes = format_currency(results.taxes_owed) if results.taxes_applicable else "N/A"
    return [
        f"- Capital called: {format_currency(results.total_capital_called)}",
        f"- Cash actually disbursed: {format_currency(results.total_actual_cash_out)}",
        f"- Final value before fees: {format_currency(results.final_value_before_fees)}",
        f"- Platform fees: {format_currency(results.total_fees)}",
        f"- Final value: {format_currency(results.final_value)}",
        f"- MOIC: {format_multiple(results.moic)}",
        f"- IRR ({results.irr_method.value}): {format_percentage(results.irr)}",
        f"- Taxes: {taxes}",
        f"- Net proceeds: {format_currency(results.net_proceeds)}",
    ]


def generate_simulation_summary(result: SimulationResult) -> str:
    """
    Generate a text summary of a simulation.

    Args:
        result: Output of run_simulation

    Returns:
        Multi-line text summary
    """
    params = result.parameters
    summary = (
        f"{params.strategy.value.replace('_', ' ').title()} simulation: "
        f"{format_currency(params.subscription)} over {params.fund_lifetime_years} years\n"
    )
    summary += "\n".join(_results_lines(result.results))

    if result.reinvested_results is not None:
        reinvested = result.reinvested_results
        summary += f"\nWith distributions reinvested at {format_percentage(reinvested.reinvestment_rate)}:\n"
        summary += "\n".join(_results_lines(reinvested))

    return summary
