"""Retirement projections.

RetirementCalculator follows a brokerage account from the first contribution
to age 100: monthly contributions compound monthly during the contribution
years, then a fixed percentage of the account is withdrawn each year of the
withdrawal window.

simulate_401k is the simpler year-by-year 401(k) comparison with an
employer match.
"""

import logging
from typing import Iterable

from model.PlanData import AgeRow, Match401kResult, Match401kYear, RetirementProjection
from model.PlanInputs import AssetAllocation, Match401kInputs, RetirementInputs
from calc.input_parsing import clamp_percent, coerce_amount


def weighted_return(allocations: Iterable[AssetAllocation]) -> float:
    """Blended annual return in percent: sum of return% x allocation%, over 100.

    Allocations are not required to add up to 100%.
    """
    return sum(coerce_amount(a.return_percent, allow_negative=True) * coerce_amount(a.allocation_percent)
               for a in allocations) / 100


class RetirementCalculator:

    def __init__(self, min_age: int = 22, max_age: int = 100, discount_rate: float = 0.035):
        self.min_age = min_age
        self.max_age = max_age
        self.discount_rate = discount_rate

    def _clamp_age(self, age: int) -> int:
        return int(min(max(coerce_amount(age), self.min_age), self.max_age))

    def project(self, inputs: RetirementInputs) -> RetirementProjection:
        weighted = weighted_return(inputs.allocations)
        monthly_rate = weighted / 100 / 12
        growth = (1 + monthly_rate) ** 12 if monthly_rate > -1 else 1.0

        monthly_contribution = coerce_amount(inputs.monthly_contribution)
        if monthly_contribution > 0 and monthly_rate != 0:
            annual_contribution = monthly_contribution * ((1 + monthly_rate) ** 12 - 1) / monthly_rate
        else:
            annual_contribution = monthly_contribution * 12

        start_age = self._clamp_age(inputs.contrib_start_age)
        end_contrib_age = self._clamp_age(inputs.contrib_end_age)
        # Withdrawals begin once contributions have stopped
        first_withdrawal_age = max(self._clamp_age(inputs.withdraw_start_age), end_contrib_age + 1)
        withdraw_end_age = self._clamp_age(inputs.withdraw_end_age)
        withdrawal_percent, _ = clamp_percent(inputs.withdrawal_percent)
        withdrawal_rate = withdrawal_percent / 100

        series = []
        prior_net = 0.0
        for age in range(self.min_age, self.max_age + 1):
            if age < start_age:
                gross = 0.0
            elif age == start_age:
                gross = annual_contribution
            else:
                gross = prior_net * growth + (annual_contribution if age <= end_contrib_age else 0.0)

            if first_withdrawal_age <= age <= withdraw_end_age:
                withdrawal = gross * withdrawal_rate
            else:
                withdrawal = 0.0
            net = gross - withdrawal
            series.append(AgeRow(age=age, gross_value=gross, withdrawal=withdrawal, net_value=net))
            prior_net = net

        scenario_end = withdraw_end_age
        in_scenario = [row for row in series if row.age <= scenario_end]
        future_ending = max([row.net_value for row in in_scenario] + [0.0])
        future_withdrawn = sum(row.withdrawal for row in in_scenario)

        discount = 1 + self.discount_rate
        present_ending = future_ending / discount ** max(0, scenario_end - self.min_age)
        present_withdrawn = sum(row.withdrawal / discount ** (row.age - self.min_age) for row in in_scenario)

        logging.debug("Retirement projection: weighted return %.3f%%, ending balance %.2f",
                      weighted, future_ending)

        return RetirementProjection(
            weighted_return_percent=weighted,
            series=tuple(series),
            future_ending_balance=future_ending,
            future_total_withdrawn=future_withdrawn,
            present_ending_balance=present_ending,
            present_total_withdrawn=present_withdrawn,
        )


def simulate_401k(inputs: Match401kInputs, take_home_rate: float = 1.0) -> Match401kResult:
    """Year-by-year 401(k) balance with an employer match.

    The yearly contribution grosses annual_payment up by take_home_rate (what
    the payment costs before tax). The match is a percentage of the
    contribution, and every figure is rounded to cents as it would be on a
    statement.
    """
    take_home_rate = coerce_amount(take_home_rate)
    payment = coerce_amount(inputs.annual_payment)
    contribution = round(payment / take_home_rate, 2) if take_home_rate > 0 else round(payment, 2)
    return_rate = coerce_amount(inputs.return_percent) / 100
    match_rate = coerce_amount(inputs.employer_match_percent) / 100

    years = []
    balance = 0.0
    start_age = int(coerce_amount(inputs.start_age))
    end_age = int(coerce_amount(inputs.end_age))
    for year, age in enumerate(range(start_age, end_age + 1)):
        match = round(contribution * match_rate, 2)
        total = round(contribution + match, 2)
        balance = round(balance * (1 + return_rate) + total, 2)
        years.append(Match401kYear(age=age, year=year, contribution=contribution,
                                   employer_match=match, total_contribution=total, balance=balance))

    return Match401kResult(
        years=tuple(years),
        final_balance=balance,
        total_contributed=sum(y.contribution for y in years),
        total_employer_match=sum(y.employer_match for y in years),
        annual_retirement_income=balance * coerce_amount(inputs.withdrawal_percent) / 100,
    )
