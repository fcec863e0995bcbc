"""Savings goal solver.

A goal is reached by saving a fixed amount every month into an account that
earns a fixed annual rate, compounded monthly. Given the goal and either the
monthly amount or the number of months, solve for the other one.
"""

import logging
import math
from typing import Iterable, Optional

from model.PlanData import SavingsGoalResult, SavingsResult
from model.PlanInputs import SAVINGS_MODES, SAVINGS_SLOTS, SavingsGoal
from calc.input_parsing import clamp_percent, coerce_amount


_WHOLE_MONTH_TOLERANCE = 1e-9


def months_to_goal(goal: float, monthly: float, monthly_rate: float) -> float:
    """Whole months needed to reach goal saving monthly (NPER, rounded up)."""
    if goal <= 0 or monthly <= 0:
        return 0.0
    if monthly_rate == 0:
        return float(math.ceil(goal / monthly - _WHOLE_MONTH_TOLERANCE))
    months = math.log(1 + goal * monthly_rate / monthly) / math.log(1 + monthly_rate)
    # Float noise must not push an exact whole month up to the next one
    return float(math.ceil(months - _WHOLE_MONTH_TOLERANCE))


def monthly_for_goal(goal: float, months: float, monthly_rate: float) -> float:
    """Monthly deposit that grows to goal after months (future value of an annuity)."""
    if goal <= 0 or months <= 0:
        return 0.0
    if monthly_rate == 0:
        return goal / months
    return goal / (((1 + monthly_rate) ** months - 1) / monthly_rate)


def solve_goal(slot: str, goal_amount: float, monthly_savings: Optional[float],
               time_to_goal_months: Optional[float], annual_rate_percent: Optional[float],
               mode: str, monthly_after_tax_income: float) -> SavingsGoalResult:
    """Solve one goal for its missing value.

    mode='time' solves the months from monthly_savings; mode='monthly' solves
    the monthly amount from time_to_goal_months. A missing rate means there is
    nothing to solve, so every figure comes back 0. Rates above 100% are held
    at 100% and flagged.

    percent_of_income compares the monthly amount with monthly_after_tax_income,
    which callers pass from the user branch of the summary.
    """
    if mode not in SAVINGS_MODES:
        raise ValueError(f"Savings mode must be one of {SAVINGS_MODES}, got '{mode}'")

    goal = coerce_amount(goal_amount)
    if annual_rate_percent is None:
        return SavingsGoalResult(slot=slot, mode=mode, goal_amount=goal, monthly_savings=0.0,
                                 time_to_goal_months=0.0, percent_of_income=0.0)

    rate_percent, rate_clamped = clamp_percent(annual_rate_percent)
    monthly_rate = rate_percent / 100 / 12

    if mode == 'time':
        monthly = coerce_amount(monthly_savings)
        months = months_to_goal(goal, monthly, monthly_rate)
    else:
        months = coerce_amount(time_to_goal_months)
        monthly = monthly_for_goal(goal, months, monthly_rate)

    income = coerce_amount(monthly_after_tax_income)
    percent = (monthly / income * 100) if income > 0 else 0.0

    return SavingsGoalResult(
        slot=slot,
        mode=mode,
        goal_amount=goal,
        monthly_savings=monthly,
        time_to_goal_months=months,
        percent_of_income=percent,
        rate_clamped=rate_clamped,
    )


class SavingsCalculator:
    """Solves every fixed savings slot against one monthly after-tax income."""

    def __init__(self, monthly_after_tax_income: float):
        self.monthly_after_tax_income = coerce_amount(monthly_after_tax_income)

    def solve(self, goal: SavingsGoal) -> SavingsGoalResult:
        return solve_goal(goal.slot, goal.goal_amount, goal.monthly_savings,
                          goal.time_to_goal_months, goal.annual_rate_percent,
                          goal.mode, self.monthly_after_tax_income)

    def calculate(self, goals: Iterable[SavingsGoal]) -> SavingsResult:
        """Solve the goals that were filled in, in slot order."""
        by_slot = {}
        for goal in goals:
            if goal.slot in by_slot:
                logging.warning("Savings slot '%s' given more than once; using the last entry", goal.slot)
            by_slot[goal.slot] = goal

        results = tuple(self.solve(by_slot[slot]) for slot in SAVINGS_SLOTS if slot in by_slot)
        total_monthly = sum(r.monthly_savings for r in results)
        total_percent = (total_monthly / self.monthly_after_tax_income * 100
                         if self.monthly_after_tax_income > 0 else 0.0)
        return SavingsResult(
            goals=results,
            monthly_after_tax_income=self.monthly_after_tax_income,
            total_monthly_savings=total_monthly,
            total_percent_of_income=total_percent,
        )
