"""
Unit tests for Report Engine.

Tests the yearly DataFrame, chart data, calendar text and formatting helpers.
"""

import unittest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pe_simulator.models import SimulationParameters, Strategy, InvestorProfile
from pe_simulator.engines.simulation_engine import run_simulation
from pe_simulator.engines.report_engine import (
    records_to_dataframe,
    prepare_j_curve_data,
    prepare_value_waterfall_data,
    describe_distribution_calendar,
    format_currency,
    format_percentage,
    format_multiple,
    generate_simulation_summary
)


class TestFormatting(unittest.TestCase):
    """Test formatting utilities."""

    def test_format_currency(self):
        """Test French-style grouping with the euro symbol."""
        self.assertEqual(format_currency(100_000), "100 000 €")
        self.assertEqual(format_currency(-20_000), "-20 000 €")
        self.assertEqual(format_currency(1_234.5, decimals=2), "1 234,50 €")

    def test_format_percentage(self):
        """Test decimal rates rendered as percentages."""
        self.assertEqual(format_percentage(0.153), "15.3%")
        self.assertEqual(format_percentage(-0.05, decimals=0), "-5%")

    def test_format_multiple(self):
        """Test multiples."""
        self.assertEqual(format_multiple(2.5), "2.50x")


class TestTablesAndCharts(unittest.TestCase):
    """Test table and chart data for the reference buyout."""

    def setUp(self):
        """Run the reference buyout."""
        self.result = run_simulation(SimulationParameters(
            subscription=100_000,
            call_years=5,
            target_multiple=2.5,
            reinvest_rate=0.15
        ))

    def test_records_to_dataframe(self):
        """Test one row per year with a cumulative column."""
        df = records_to_dataframe(self.result.records)

        self.assertEqual(len(df), 10)
        self.assertEqual(df.index.name, "year")
        self.assertEqual(list(df.index), list(range(1, 11)))
        self.assertAlmostEqual(
            df["cumulative_net_cash_flow"].iloc[-1],
            sum([r.net_cash_flow for r in self.result.records]),
            places=6
        )
        self.assertAlmostEqual(df.loc[3, "recycled_distribution"], 3_000, places=6)

    def test_j_curve_trough(self):
        """Test the J-Curve trough falls at the end of the call period."""
        chart = prepare_j_curve_data(self.result.records)

        self.assertEqual(chart["chart_type"], "j_curve")
        self.assertEqual(chart["years"], list(range(1, 11)))
        self.assertEqual(chart["trough"]["year"], 5)
        self.assertAlmostEqual(chart["trough"]["value"], -87_900, places=4)
        self.assertAlmostEqual(
            chart["cumulative_net_cash_flow"][-1], sum(chart["yearly_net_cash_flow"]), places=6
        )

    def test_j_curve_empty(self):
        """Test no trough without records."""
        chart = prepare_j_curve_data([])

        self.assertEqual(chart["years"], [])
        self.assertIsNone(chart["trough"])

    def test_waterfall_ends_on_net_proceeds(self):
        """Test the value waterfall sums to net proceeds."""
        chart = prepare_value_waterfall_data(self.result.results)

        self.assertEqual(chart["end_label"], "Net Proceeds")
        self.assertAlmostEqual(chart["end_value"], self.result.results.net_proceeds, places=6)
        self.assertFalse(chart["data"][3]["is_positive"])  # Fees


class TestCalendar(unittest.TestCase):
    """Test the calendar description."""

    def test_buyout_calendar(self):
        """Test grouped call years and yearly distributions."""
        lines = describe_distribution_calendar(SimulationParameters(subscription=100_000))

        self.assertEqual(lines[0], "Years 1-5: capital calls of 20 000 € per year")
        self.assertIn("Year 3: distribution of 3 000 €", lines)
        self.assertIn("Year 10: distribution of 75 000 €", lines)

    def test_debt_calendar(self):
        """Test changing call amounts start new lines."""
        lines = describe_distribution_calendar(
            SimulationParameters(subscription=100_000, strategy=Strategy.DEBT)
        )

        self.assertEqual(lines[0], "Years 1-2: capital calls of 35 000 € per year")
        self.assertEqual(lines[1], "Year 3: capital calls of 30 000 €")

    def test_small_ticket_calendar(self):
        """Test the uncalled interest line for small tickets."""
        lines = describe_distribution_calendar(SimulationParameters(subscription=10_000))

        self.assertEqual(lines[0], "Year 1: capital calls of 10 000 €")
        self.assertEqual(lines[-1], "Uncalled capital interest credited: 400 €")


class TestSummary(unittest.TestCase):
    """Test the text summary."""

    def test_summary_with_reinvestment(self):
        """Test both scenarios appear in the summary."""
        result = run_simulation(SimulationParameters(
            subscription=100_000, reinvest_distributions=True
        ))

        summary = generate_simulation_summary(result)

        self.assertTrue(summary.startswith("Buyout simulation: 100 000 €"))
        self.assertIn("MOIC", summary)
        self.assertIn("With distributions reinvested at 9.6%", summary)

    def test_summary_entity_taxes(self):
        """Test entity taxes are shown as N/A."""
        result = run_simulation(SimulationParameters(
            subscription=100_000, investor_profile=InvestorProfile.ENTITY
        ))

        self.assertIn("- Taxes: N/A", generate_simulation_summary(result))


if __name__ == '__main__':
    unittest.main()
