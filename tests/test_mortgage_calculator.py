"""Tests for mortgage payments and amortization schedules."""

import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.mortgage_calculator import CADENCES, MortgageCalculator, amortize, level_payment
from model.PlanInputs import LoanTerms


COST_RATES = {'insuranceMonthlyRate': 0.0005, 'taxesMonthlyRate': 0.01, 'maintenanceAnnualRate': 0.01}


def test_level_payment_standard_formula():
    r = 0.06 / 12
    n = 360
    expected = 400000 * r * (1 + r) ** n / ((1 + r) ** n - 1)
    assert level_payment(400000, r, n) == pytest.approx(expected)
    assert level_payment(400000, r, n) == pytest.approx(2398.20, abs=0.01)


@pytest.mark.parametrize("cadence", CADENCES)
@pytest.mark.parametrize("principal,rate,years", [(400000, 6, 30), (250000, 3.5, 15), (90000, 12, 7)])
def test_principal_paid_sums_to_loan(cadence, principal, rate, years):
    result = amortize(principal, rate, years, cadence)
    assert sum(row.principal for row in result.schedule) == pytest.approx(principal, abs=0.01)
    assert result.schedule[-1].closing_balance == 0.0
    # the balance only ever goes down
    for row in result.schedule:
        assert row.closing_balance <= row.opening_balance


@pytest.mark.parametrize("cadence", CADENCES)
def test_schedule_is_finite(cadence):
    result = amortize(400000, 6, 30, cadence)
    nominal = 30 * result.periods_per_year
    assert 0 < result.actual_term_periods <= nominal
    assert result.actual_term_periods == len(result.schedule)


def test_monthly_runs_full_term():
    result = amortize(400000, 6, 30, 'monthly')
    assert result.actual_term_periods == 360
    assert result.total_paid == pytest.approx(400000 + result.total_interest, abs=0.01)


def test_biweekly_final_payment_not_overpaid():
    result = amortize(400000, 6, 30, 'biweekly')
    last = result.schedule[-1]
    assert last.payment <= result.payment + 0.01
    assert last.payment == pytest.approx(last.opening_balance + last.interest)


def test_accelerated_pays_off_early():
    monthly = amortize(400000, 6, 30, 'monthly')
    accelerated = amortize(400000, 6, 30, 'accelerated_biweekly')
    assert accelerated.payment == pytest.approx(monthly.payment / 2)
    assert accelerated.actual_term_years < 30
    assert accelerated.total_interest < monthly.total_interest


def test_term_capped_at_40_years():
    result = amortize(400000, 6, 50, 'monthly')
    assert result.term_capped
    assert result.actual_term_periods == 480
    assert result.payment == pytest.approx(level_payment(400000, 0.005, 480))


def test_zero_rate_loan():
    result = amortize(120000, 0, 10, 'monthly')
    assert result.payment == pytest.approx(1000)
    assert result.total_interest == 0.0
    assert result.actual_term_periods == 120


def test_rate_above_100_clamped():
    result = amortize(100000, 150, 10, 'monthly')
    assert result.rate_clamped
    assert result.payment == pytest.approx(amortize(100000, 100, 10, 'monthly').payment)


def test_zero_principal_has_empty_schedule():
    result = amortize(0, 6, 30, 'monthly')
    assert result.payment == 0.0
    assert result.schedule == ()
    assert result.actual_term_periods == 0


@pytest.mark.parametrize("cadence", CADENCES)
def test_very_short_term_still_repays_loan(cadence):
    result = amortize(10000, 5, 0.01, cadence)
    assert len(result.schedule) >= 1
    assert sum(row.principal for row in result.schedule) == pytest.approx(10000, abs=0.01)
    assert result.schedule[-1].closing_balance == 0.0


def test_unknown_cadence_rejected():
    with pytest.raises(ValueError):
        amortize(100000, 5, 10, 'weekly')


def test_monthly_cost_of_ownership():
    calc = MortgageCalculator(COST_RATES, 40)
    result = calc.calculate(LoanTerms(principal=400000, annual_rate_percent=6, term_years=30))
    assert result.insurance == pytest.approx(200)
    assert result.taxes == pytest.approx(4000)
    assert result.maintenance == pytest.approx(4000 / 12)
    assert result.total_monthly_cost == pytest.approx(result.monthly.payment + 200 + 4000 + 4000 / 12)
    assert result.accelerated_interest_saved > 0
