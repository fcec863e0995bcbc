from typing import Tuple

from model.PlanData import HealthPlanComparison, HealthPlanCost
from model.PlanInputs import HealthPlan
from calc.input_parsing import clamp_percent, coerce_amount


def plan_cost(plan: HealthPlan, expected_expenses: float) -> HealthPlanCost:
    """Yearly cost of a health plan for a given amount of medical bills.

    Out-of-pocket is the deductible plus the coinsurance share of bills above
    it, held to the plan's out-of-pocket maximum. The full deductible is
    counted even when bills are smaller. Employer HSA money offsets the total.
    """
    expenses = coerce_amount(expected_expenses)
    deductible = coerce_amount(plan.deductible)
    coinsurance_percent, clamped = clamp_percent(plan.coinsurance_percent)

    coinsurance = max(expenses - deductible, 0.0) * coinsurance_percent / 100
    out_of_pocket = min(deductible + coinsurance, coerce_amount(plan.max_out_of_pocket))
    premium = coerce_amount(plan.premium)
    employer_hsa = coerce_amount(plan.employer_hsa)

    return HealthPlanCost(
        name=plan.name,
        premium=premium,
        out_of_pocket=out_of_pocket,
        employer_hsa=employer_hsa,
        total_cost=premium + out_of_pocket - employer_hsa,
        coinsurance_clamped=clamped,
    )


def compare_plans(plans: Tuple[HealthPlan, HealthPlan], expected_expenses: float) -> HealthPlanComparison:
    costs = tuple(plan_cost(p, expected_expenses) for p in plans)
    cheaper = min(costs, key=lambda c: c.total_cost)
    dearer = max(costs, key=lambda c: c.total_cost)
    return HealthPlanComparison(
        expected_expenses=coerce_amount(expected_expenses),
        plans=costs,
        cheaper_plan=cheaper.name,
        savings=dearer.total_cost - cheaper.total_cost,
    )
