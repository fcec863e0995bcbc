import math
import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
from tax.brackets import bracket_breakdown, bracket_tax, brackets_from_rows, marginal_rate


ROWS = [
    {"rate": 0.22, "lowerBound": 50000},
    {"rate": 0.10, "lowerBound": 0},
    {"rate": 0.12, "lowerBound": 10000},
]


@pytest.fixture
def brackets():
    return brackets_from_rows(ROWS)


def test_rows_sorted_and_bounded(brackets):
    assert [b.lower_bound for b in brackets] == [0, 10000, 50000]
    assert [b.upper_bound for b in brackets] == [10000, 50000, None]


def test_empty_rows_rejected():
    with pytest.raises(ValueError):
        brackets_from_rows([])


@pytest.mark.parametrize("income", [0, -1, -1e9, float('nan'), float('inf'), None, "abc"])
def test_unusable_income_owes_nothing(brackets, income):
    assert bracket_tax(brackets, income) == 0.0


def test_known_values(brackets):
    assert bracket_tax(brackets, 5000) == pytest.approx(500)
    assert bracket_tax(brackets, 10000) == pytest.approx(1000)
    assert bracket_tax(brackets, 60000) == pytest.approx(1000 + 4800 + 2200)


def test_monotone_and_continuous(brackets):
    previous = 0.0
    for income in range(0, 120001, 500):
        tax = bracket_tax(brackets, income)
        assert tax >= previous
        previous = tax
    # no jump at a boundary
    for bound in (10000, 50000):
        below = bracket_tax(brackets, bound - 0.01)
        above = bracket_tax(brackets, bound + 0.01)
        assert above - below < 0.01


def test_same_input_same_output(brackets):
    assert bracket_tax(brackets, 73456.78) == bracket_tax(brackets, 73456.78)


def test_breakdown_lists_every_bracket(brackets):
    slices = bracket_breakdown(brackets, 20000)
    assert len(slices) == 3
    assert [s.taxable_amount for s in slices] == [10000, 10000, 0]
    assert math.isclose(sum(s.tax for s in slices), bracket_tax(brackets, 20000))


def test_marginal_rate(brackets):
    assert marginal_rate(brackets, 0) == 0.0
    assert marginal_rate(brackets, 10000) == 0.10
    assert marginal_rate(brackets, 10000.01) == 0.12
    assert marginal_rate(brackets, 1e7) == 0.22
