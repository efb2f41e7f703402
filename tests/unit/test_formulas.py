"""Tests for formulas module."""

import pytest

from src import formulas


class TestThresholds:
    def test_reference_values(self):
        eq = formulas.electoral_quotient(1000, 10)
        assert eq == 100
        assert formulas.barrier_threshold(eq) == 80
        assert formulas.candidate_min_votes(eq) == 20

    def test_floors(self):
        eq = formulas.electoral_quotient(1009, 10)
        assert eq == 100
        assert formulas.barrier_threshold(101) == 80
        assert formulas.candidate_min_votes(104) == 20


class TestHighestAverages:
    def test_classic_dhondt(self):
        won = formulas.highest_averages({"A": 100_000, "B": 80_000, "C": 30_000, "D": 20_000}, 8)
        assert won == {"A": 4, "B": 3, "C": 1, "D": 0}

    def test_tie_goes_to_more_votes(self):
        # A: 300/(2+1) = 100, B: 100/(0+1) = 100
        won = formulas.highest_averages({"B": 100, "A": 300}, 1, start={"A": 2})
        assert won == {"A": 1, "B": 0}

    def test_full_tie_goes_to_first_key(self):
        won = formulas.highest_averages({"X": 50, "Y": 50}, 1)
        assert won == {"X": 1, "Y": 0}

    def test_zero_votes_never_win(self):
        won = formulas.highest_averages({"A": 0, "B": 0}, 3)
        assert won == {"A": 0, "B": 0}

    def test_caps(self):
        won = formulas.highest_averages({"A": 1000, "B": 10}, 3, caps={"A": 1, "B": 5})
        assert won == {"A": 1, "B": 2}


class TestTrendMath:
    def test_linear_slope(self):
        assert formulas.ols_slope([(1, 10), (2, 20), (3, 30)]) == 10.0

    def test_slope_single_point(self):
        assert formulas.ols_slope([(2018, 40.0)]) == 0.0

    def test_slope_degenerate_denominator(self):
        assert formulas.ols_slope([(2018, 10.0), (2018, 30.0)]) == 0.0

    def test_stdev(self):
        assert formulas.sample_stdev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.138, rel=1e-3)

    def test_stdev_short(self):
        assert formulas.sample_stdev([5.0]) == 0.0

    def test_growth_skips_zero_prior(self):
        # 0 -> 10 skipped, 10 -> 15 = 0.5, 15 -> 12 = -0.2
        assert abs(formulas.avg_growth_rate([0, 10, 15, 12]) - 0.15) < 1e-9

    def test_growth_empty(self):
        assert formulas.avg_growth_rate([0, 0]) == 0.0


class TestInterval:
    def test_indices(self):
        assert formulas.interval_indices(10000, 0.95) == (250, 9750)

    def test_within_bounds(self):
        lo, hi = formulas.interval_indices(1, 0.99)
        assert lo == 0 and hi == 0
