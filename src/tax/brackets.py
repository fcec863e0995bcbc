"""Progressive bracket tax math shared by every jurisdiction.

Federal, state/DC and city tables all flow through the same routine; only
the bracket list differs.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class TaxBracket:
    """One marginal tier. upper_bound is None for the top bracket."""
    rate: float
    lower_bound: float
    upper_bound: Optional[float] = None


@dataclass(frozen=True)
class BracketSlice:
    """Portion of taxable income that landed in a single bracket."""
    rate: float
    lower_bound: float
    upper_bound: Optional[float]
    taxable_amount: float
    tax: float


def brackets_from_rows(rows: Iterable[dict]) -> List[TaxBracket]:
    """Build a sorted, contiguous bracket list from ``{rate, lowerBound}`` rows.

    Rates above 1 are treated as whole percentages, the same way the federal
    reference loader has always accepted them.
    """
    parsed = []
    for row in rows:
        rate = float(row["rate"])
        if rate > 1:
            rate = rate / 100.0
        parsed.append((float(row["lowerBound"]), rate))

    if not parsed:
        raise ValueError("Bracket table must contain at least one bracket")

    parsed.sort(key=lambda r: r[0])
    brackets = []
    for i, (lower, rate) in enumerate(parsed):
        upper = parsed[i + 1][0] if i + 1 < len(parsed) else None
        brackets.append(TaxBracket(rate=rate, lower_bound=lower, upper_bound=upper))
    return brackets


def _usable_income(taxable_income: float) -> float:
    if taxable_income is None:
        return 0.0
    try:
        value = float(taxable_income)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or math.isinf(value) or value <= 0:
        return 0.0
    return value


def bracket_tax(brackets: List[TaxBracket], taxable_income: float) -> float:
    """Total tax owed on taxable_income under a progressive bracket table.

    Walks the brackets from the top down. Each bracket whose lower bound is
    below the income still unaccounted for taxes the part above that bound,
    then the remaining income drops to the bound.

    Non-positive and non-finite income owes nothing.
    """
    remaining = _usable_income(taxable_income)
    if remaining == 0:
        return 0.0

    total = 0.0
    for b in reversed(brackets):
        if remaining > b.lower_bound:
            total += (remaining - b.lower_bound) * b.rate
            remaining = b.lower_bound
    return total


def bracket_breakdown(brackets: List[TaxBracket], taxable_income: float) -> List[BracketSlice]:
    """Per-bracket worksheet: how much income each tier taxed and what it owed.

    Every bracket is listed, including ones the income never reached, so the
    rows line up with the table they came from. The tax column sums to
    bracket_tax for the same inputs.
    """
    income = _usable_income(taxable_income)
    slices = []
    for b in brackets:
        top = income if b.upper_bound is None else min(income, b.upper_bound)
        amount = max(0.0, top - b.lower_bound)
        slices.append(BracketSlice(
            rate=b.rate,
            lower_bound=b.lower_bound,
            upper_bound=b.upper_bound,
            taxable_amount=amount,
            tax=amount * b.rate,
        ))
    return slices


def marginal_rate(brackets: List[TaxBracket], taxable_income: float) -> float:
    """Rate applied to the last dollar of taxable income (0 when nothing is taxable)."""
    income = _usable_income(taxable_income)
    if income == 0:
        return 0.0
    rate = 0.0
    for b in brackets:
        if income > b.lower_bound:
            rate = b.rate
    return rate
