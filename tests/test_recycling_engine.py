"""
Unit tests for Recycling Engine.

Tests outstanding commitment tracking, recycling caps and future values.
"""

import unittest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pe_simulator.models import SimulationParameters, Strategy, RawSchedule
from pe_simulator.engines.schedule_engine import generate_raw_schedule
from pe_simulator.engines.recycling_engine import (
    compute_recycled_distribution,
    compute_future_value,
    build_year_records
)


class TestRecycledDistribution(unittest.TestCase):
    """Test the per-year recycling rule."""

    def test_requires_same_year_call(self):
        """Test no recycling without a capital call."""
        self.assertEqual(compute_recycled_distribution(0, 10_000, 50_000), 0.0)

    def test_requires_distribution(self):
        """Test no recycling without a distribution."""
        self.assertEqual(compute_recycled_distribution(-20_000, 0, 50_000), 0.0)

    def test_capped_by_distribution(self):
        """Test the distribution caps recycling."""
        self.assertEqual(compute_recycled_distribution(-20_000, 3_000, 60_000), 3_000)

    def test_capped_by_call(self):
        """Test the call caps recycling."""
        self.assertEqual(compute_recycled_distribution(-20_000, 30_000, 60_000), 20_000)

    def test_capped_by_outstanding_commitment(self):
        """Test the outstanding commitment caps recycling."""
        self.assertEqual(compute_recycled_distribution(-20_000, 19_400, 7_300), 7_300)

    def test_disallowed(self):
        """Test recycling can be switched off."""
        self.assertEqual(
            compute_recycled_distribution(-20_000, 19_400, 50_000, recycling_allowed=False),
            0.0
        )


class TestFutureValue(unittest.TestCase):
    """Test compounding of net distributions."""

    def test_compounds_to_terminal_year(self):
        """Test compounding over the remaining years."""
        self.assertAlmostEqual(compute_future_value(10_000, 0.10, 8, 10), 12_100, places=6)

    def test_terminal_year_not_compounded(self):
        """Test a distribution in the terminal year is taken at face value."""
        self.assertEqual(compute_future_value(75_000, 0.15, 10, 10), 75_000)

    def test_non_positive_net_distribution(self):
        """Test no future value for zero or negative net distributions."""
        self.assertEqual(compute_future_value(0, 0.15, 3, 10), 0.0)
        self.assertEqual(compute_future_value(-5, 0.15, 3, 10), 0.0)

    def test_after_terminal_year(self):
        """Test exponent floored at zero past the terminal year."""
        self.assertEqual(compute_future_value(1_000, 0.15, 8, 6), 1_000)


class TestBuildYearRecords(unittest.TestCase):
    """Test the yearly cash-flow table for the reference buyout."""

    def setUp(self):
        """Build records for the reference buyout."""
        self.params = SimulationParameters(
            subscription=100_000,
            call_years=5,
            target_multiple=2.5,
            reinvest_rate=0.15
        )
        raw = generate_raw_schedule(self.params)
        self.records = build_year_records(self.params, raw)

    def test_one_record_per_year(self):
        """Test records are ordered years 1..N."""
        self.assertEqual([r.year for r in self.records], list(range(1, 11)))

    def test_seed_year_recycled(self):
        """Test year 3 seed is fully recycled into the call."""
        year3 = self.records[2]

        self.assertAlmostEqual(year3.outstanding_commitment_before_year, 60_000, places=6)
        self.assertAlmostEqual(year3.recycled_distribution, 3_000, places=6)
        self.assertAlmostEqual(year3.actual_cash_out, -17_000, places=6)
        self.assertAlmostEqual(year3.net_cash_flow, -20_000, places=6)
        self.assertEqual(year3.future_value, 0.0)

    def test_outstanding_commitment_cap(self):
        """Test year 5 recycling is limited by the outstanding commitment."""
        year4, year5 = self.records[3], self.records[4]

        self.assertAlmostEqual(year4.outstanding_commitment_before_year, 37_000, places=6)
        self.assertAlmostEqual(year4.recycled_distribution, 9_700, places=6)
        self.assertAlmostEqual(year5.outstanding_commitment_before_year, 7_300, places=6)
        self.assertAlmostEqual(year5.recycled_distribution, 7_300, places=6)
        self.assertAlmostEqual(year5.net_distribution, 12_100, places=6)
        self.assertAlmostEqual(year5.future_value, 12_100 * 1.15 ** 5, places=4)

    def test_no_recycling_without_calls(self):
        """Test years after the call period pay out in full."""
        for record in self.records[5:]:
            self.assertEqual(record.recycled_distribution, 0.0)
            self.assertEqual(record.actual_cash_out, 0.0)
            self.assertEqual(record.outstanding_commitment_before_year, 0.0)
            self.assertEqual(record.net_cash_flow, record.gross_distribution)

    def test_recycling_caps_hold_every_year(self):
        """Test recycled amounts never exceed distribution, call or outstanding commitment."""
        for record in self.records:
            cap = min(
                record.gross_distribution,
                abs(record.capital_call),
                record.outstanding_commitment_before_year
            )
            self.assertLessEqual(record.recycled_distribution, cap + 1e-9)

    def test_cash_out_never_exceeds_subscription(self):
        """Test the investor never disburses more than the subscription."""
        total_cash_out = sum([abs(r.actual_cash_out) for r in self.records])

        self.assertAlmostEqual(total_cash_out, 80_000, places=6)
        self.assertLessEqual(total_cash_out, self.params.subscription)

    def test_fees_attached(self):
        """Test fees passed in are attached to each year."""
        raw = generate_raw_schedule(self.params)
        records = build_year_records(self.params, raw, fees=[float(i) for i in range(10)])

        self.assertEqual([r.annual_fee for r in records], [float(i) for i in range(10)])

    def test_default_fees(self):
        """Test records carry the tiered fee schedule when no fees are given."""
        records = build_year_records(self.params, generate_raw_schedule(self.params))

        self.assertAlmostEqual(records[0].annual_fee, 3_200, places=6)
        self.assertAlmostEqual(records[1].annual_fee, 1_200, places=6)
        self.assertAlmostEqual(sum([r.annual_fee for r in records]), 14_000, places=6)


class TestDebtRecords(unittest.TestCase):
    """Test debt funds never recycle."""

    def test_debt_no_recycling(self):
        """Test coupons paid during call years are not recycled."""
        params = SimulationParameters(subscription=100_000, strategy=Strategy.DEBT)
        records = build_year_records(params, generate_raw_schedule(params))

        for record in records:
            self.assertEqual(record.recycled_distribution, 0.0)
            self.assertEqual(record.actual_cash_out, record.capital_call)

    def test_explicit_raw_schedule(self):
        """Test records built from an explicit raw schedule."""
        params = SimulationParameters(subscription=1_000, fund_lifetime_years=2, call_years=1, reinvest_rate=0.0)
        raw = RawSchedule(capital_calls=[-1_000, 0.0], distributions=[0.0, 1_500], terminal_year=2)
        records = build_year_records(params, raw)

        self.assertEqual(records[0].actual_cash_out, -1_000)
        self.assertEqual(records[1].future_value, 1_500)
        self.assertEqual(records[1].uncalled_interest, 0.0)


if __name__ == '__main__':
    unittest.main()
