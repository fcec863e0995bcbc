"""Tests for the retirement projection and the 401(k) match simulation."""

import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.retirement_calculator import RetirementCalculator, simulate_401k, weighted_return
from model.PlanInputs import AssetAllocation, Match401kInputs, RetirementInputs, default_allocations


def flat_allocations(return_percent: float):
    return (
        AssetAllocation('equities', return_percent, 100.0),
        AssetAllocation('fixed_income', 0.0, 0.0),
        AssetAllocation('cash', 0.0, 0.0),
        AssetAllocation('alternatives', 0.0, 0.0),
    )


class TestWeightedReturn(unittest.TestCase):
    def test_default_allocations(self):
        # 8% x 90% + 0.5% x 10%
        self.assertAlmostEqual(weighted_return(default_allocations()), 7.25)

    def test_allocations_need_not_sum_to_100(self):
        allocations = (
            AssetAllocation('equities', 10.0, 50.0),
            AssetAllocation('fixed_income', 4.0, 0.0),
            AssetAllocation('cash', 1.0, 0.0),
            AssetAllocation('alternatives', 6.0, 0.0),
        )
        self.assertAlmostEqual(weighted_return(allocations), 5.0)


class TestRetirementProjection(unittest.TestCase):
    def setUp(self):
        self.calc = RetirementCalculator()

    def test_series_covers_22_to_100(self):
        projection = self.calc.project(RetirementInputs())
        self.assertEqual(projection.series[0].age, 22)
        self.assertEqual(projection.series[-1].age, 100)
        self.assertEqual(len(projection.series), 79)

    def test_first_year_is_one_year_of_contributions(self):
        projection = self.calc.project(RetirementInputs())
        r = 0.0725 / 12
        expected = 100 * ((1 + r) ** 12 - 1) / r
        self.assertAlmostEqual(projection.at_age(22).gross_value, expected, places=6)

    def test_zero_return_is_simple_sum(self):
        inputs = RetirementInputs(contrib_start_age=22, contrib_end_age=31, monthly_contribution=100,
                                  withdraw_start_age=90, withdraw_end_age=100, withdrawal_percent=4,
                                  allocations=flat_allocations(0.0))
        projection = self.calc.project(inputs)
        self.assertAlmostEqual(projection.at_age(31).gross_value, 12000)
        # no contributions after the contribution window
        self.assertAlmostEqual(projection.at_age(40).gross_value, 12000)

    def test_net_value_compounds(self):
        inputs = RetirementInputs(contrib_start_age=22, contrib_end_age=65, monthly_contribution=200,
                                  withdraw_start_age=65, withdraw_end_age=100, withdrawal_percent=4,
                                  allocations=flat_allocations(6.0))
        projection = self.calc.project(inputs)
        growth = (1 + 0.06 / 12) ** 12
        prior = projection.at_age(70)
        row = projection.at_age(71)
        self.assertAlmostEqual(row.gross_value, prior.net_value * growth, places=6)
        self.assertAlmostEqual(row.withdrawal, row.gross_value * 0.04, places=6)
        self.assertAlmostEqual(row.net_value, row.gross_value - row.withdrawal, places=6)

    def test_withdrawals_start_year_after_contributions_end(self):
        inputs = RetirementInputs(contrib_start_age=25, contrib_end_age=65,
                                  withdraw_start_age=66, withdraw_end_age=95)
        projection = self.calc.project(inputs)
        self.assertEqual(projection.at_age(65).withdrawal, 0.0)
        self.assertGreater(projection.at_age(66).withdrawal, 0.0)

    def test_defaults_do_not_withdraw_while_contributing(self):
        inputs = RetirementInputs()
        self.assertEqual(inputs.withdraw_start_age, 66)
        projection = self.calc.project(inputs)
        for age in range(22, inputs.contrib_end_age + 1):
            self.assertEqual(projection.at_age(age).withdrawal, 0.0)
        self.assertGreater(projection.at_age(inputs.contrib_end_age + 1).withdrawal, 0.0)

    def test_early_withdraw_start_waits_for_contributions_to_end(self):
        inputs = RetirementInputs(contrib_start_age=25, contrib_end_age=60,
                                  withdraw_start_age=45, withdraw_end_age=90)
        projection = self.calc.project(inputs)
        self.assertEqual(projection.at_age(45).withdrawal, 0.0)
        self.assertEqual(projection.at_age(60).withdrawal, 0.0)
        self.assertGreater(projection.at_age(61).withdrawal, 0.0)

    def test_non_finite_ages_fall_back_to_the_age_range(self):
        inputs = RetirementInputs(contrib_start_age=float('nan'), contrib_end_age=float('inf'),
                                  withdraw_start_age=float('nan'), withdraw_end_age=float('-inf'))
        projection = self.calc.project(inputs)
        self.assertEqual(len(projection.series), 100 - 22 + 1)
        self.assertEqual(projection.future_total_withdrawn, 0.0)

    def test_no_withdrawals_after_window(self):
        inputs = RetirementInputs(withdraw_start_age=65, withdraw_end_age=80)
        projection = self.calc.project(inputs)
        self.assertGreater(projection.at_age(80).withdrawal, 0.0)
        self.assertEqual(projection.at_age(81).withdrawal, 0.0)

    def test_nothing_before_contributions_start(self):
        inputs = RetirementInputs(contrib_start_age=30)
        projection = self.calc.project(inputs)
        self.assertEqual(projection.at_age(29).gross_value, 0.0)
        self.assertGreater(projection.at_age(30).gross_value, 0.0)

    def test_summary_values(self):
        inputs = RetirementInputs(withdraw_start_age=65, withdraw_end_age=95)
        projection = self.calc.project(inputs)
        in_scenario = [row for row in projection.series if row.age <= 95]
        self.assertAlmostEqual(projection.future_ending_balance, max(row.net_value for row in in_scenario))
        self.assertAlmostEqual(projection.future_total_withdrawn, sum(row.withdrawal for row in in_scenario))
        self.assertAlmostEqual(projection.present_ending_balance,
                               projection.future_ending_balance / 1.035 ** (95 - 22))
        self.assertLess(projection.present_total_withdrawn, projection.future_total_withdrawn)

    def test_zero_contribution(self):
        projection = self.calc.project(RetirementInputs(monthly_contribution=0))
        self.assertEqual(projection.future_ending_balance, 0.0)
        self.assertEqual(projection.future_total_withdrawn, 0.0)

    def test_allocation_count_enforced(self):
        with self.assertRaises(ValueError):
            RetirementInputs(allocations=(AssetAllocation('equities', 8.0, 100.0),))


class TestSimulate401k(unittest.TestCase):
    def test_first_two_years(self):
        result = simulate_401k(Match401kInputs(start_age=25, end_age=26))
        first, second = result.years
        self.assertAlmostEqual(first.contribution, 4638.0, places=2)
        self.assertAlmostEqual(first.employer_match, 139.14, places=2)
        self.assertAlmostEqual(first.total_contribution, 4777.14, places=2)
        self.assertAlmostEqual(first.balance, 4777.14, places=2)
        self.assertAlmostEqual(second.balance, 9888.68, places=2)
        self.assertAlmostEqual(result.final_balance, 9888.68, places=2)

    def test_contribution_grossed_up_by_take_home_rate(self):
        result = simulate_401k(Match401kInputs(start_age=25, end_age=25, annual_payment=1000), take_home_rate=0.8)
        self.assertAlmostEqual(result.years[0].contribution, 1250.0, places=2)

    def test_totals_and_income(self):
        inputs = Match401kInputs(start_age=20, end_age=70)
        result = simulate_401k(inputs)
        self.assertEqual(len(result.years), 51)
        self.assertAlmostEqual(result.total_contributed, 4638.0 * 51, places=2)
        self.assertAlmostEqual(result.total_employer_match, 139.14 * 51, places=2)
        self.assertAlmostEqual(result.annual_retirement_income, result.final_balance * 0.06)

    def test_empty_range(self):
        result = simulate_401k(Match401kInputs(start_age=70, end_age=65))
        self.assertEqual(result.years, ())
        self.assertAlmostEqual(result.final_balance, 0.0, places=2)

    def test_non_finite_ages_give_no_span(self):
        result = simulate_401k(Match401kInputs(start_age=float('nan'), end_age=float('inf')))
        self.assertEqual([y.age for y in result.years], [0])
        result = simulate_401k(Match401kInputs(start_age=25, end_age=float('nan')))
        self.assertEqual(result.years, ())


if __name__ == "__main__":
    unittest.main()
