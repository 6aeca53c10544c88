"""
Computation Engines Package.

This package contains the pure Python computation modules of the simulator.
They perform no I/O and keep no state between calls.
"""

from .fee_engine import (
    get_fee_tier,
    compute_annual_fee,
    fee_schedule,
    calculate_total_fees
)

from .schedule_engine import (
    increasing_weights,
    allocate_increasing,
    generate_buyout_schedule,
    generate_venture_capital_schedule,
    generate_growth_capital_schedule,
    generate_secondary_schedule,
    generate_debt_schedule,
    generate_manual_schedule,
    apply_small_ticket_override,
    is_small_ticket,
    generate_raw_schedule,
    get_terminal_year,
    STRATEGY_GENERATORS
)

from .recycling_engine import (
    compute_recycled_distribution,
    compute_future_value,
    build_year_records
)

from .pe_metrics_engine import (
    calculate_npv,
    calculate_npv_derivative,
    calculate_irr,
    calculate_annualized_return,
    calculate_moic,
    calculate_dpi,
    calculate_taxes,
    calculate_net_proceeds,
    aggregate_results,
    get_alternate_target_irr,
    calculate_reinvestment_scenario
)

from .simulation_engine import run_simulation

from .report_engine import (
    records_to_dataframe,
    prepare_j_curve_data,
    prepare_value_waterfall_data,
    describe_distribution_calendar,
    format_currency,
    format_percentage,
    format_multiple,
    generate_simulation_summary
)

__all__ = [
    # Fees
    "get_fee_tier",
    "compute_annual_fee",
    "fee_schedule",
    "calculate_total_fees",

    # Schedules
    "increasing_weights",
    "allocate_increasing",
    "generate_buyout_schedule",
    "generate_venture_capital_schedule",
    "generate_growth_capital_schedule",
    "generate_secondary_schedule",
    "generate_debt_schedule",
    "generate_manual_schedule",
    "apply_small_ticket_override",
    "is_small_ticket",
    "generate_raw_schedule",
    "get_terminal_year",
    "STRATEGY_GENERATORS",

    # Recycling
    "compute_recycled_distribution",
    "compute_future_value",
    "build_year_records",

    # Metrics
    "calculate_npv",
    "calculate_npv_derivative",
    "calculate_irr",
    "calculate_annualized_return",
    "calculate_moic",
    "calculate_dpi",
    "calculate_taxes",
    "calculate_net_proceeds",
    "aggregate_results",
    "get_alternate_target_irr",
    "calculate_reinvestment_scenario",

    # Simulation
    "run_simulation",

    # Reporting
    "records_to_dataframe",
    "prepare_j_curve_data",
    "prepare_value_waterfall_data",
    "describe_distribution_calendar",
    "format_currency",
    "format_percentage",
    "format_multiple",
    "generate_simulation_summary"
]
