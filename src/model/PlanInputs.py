"""Input snapshots for a single course program.

A program's ``spec.json`` is parsed into these dataclasses once. The
calculators receive them read-only and never mutate them.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from calc.input_parsing import (
    clamp_contribution,
    parse_age,
    parse_choice,
    parse_number,
    parse_optional_number,
    parse_percent,
)


MARITAL_STATUSES = ('single', 'married')
HOUSING_TIERS = ('Low', 'Medium', 'High')
SAVINGS_MODES = ('time', 'monthly')

# Fixed goal slots: every goal type has a "time" slot (solve for months)
# and a "monthly" slot (solve for the monthly amount).
SAVINGS_SLOTS = (
    'down_payment_1', 'down_payment_2',
    'car_1', 'car_2',
    'wedding_1', 'wedding_2',
    'advanced_degree_1', 'advanced_degree_2',
    'vacation_1', 'vacation_2',
    'miscellaneous_1', 'miscellaneous_2',
)

ASSET_CLASSES = ('equities', 'fixed_income', 'cash', 'alternatives')


def default_mode_for_slot(slot: str) -> str:
    return 'time' if slot.endswith('_1') else 'monthly'


@dataclass(frozen=True)
class DeductionChoices:
    marital_status: str = 'single'
    filed_jointly: bool = False
    head_of_household: bool = False
    over_65: bool = False
    blind: bool = False
    qualifying_surviving_spouse: bool = False

    def __post_init__(self):
        if self.marital_status not in MARITAL_STATUSES:
            raise ValueError(f"marital_status must be one of {MARITAL_STATUSES}, got '{self.marital_status}'")


@dataclass(frozen=True)
class TopLevelInputs:
    pre_tax_income: float
    state: str = 'TX'
    nyc_resident: bool = False
    housing_cost_tier: str = 'Medium'

    def __post_init__(self):
        if self.housing_cost_tier not in HOUSING_TIERS:
            raise ValueError(f"housing_cost_tier must be one of {HOUSING_TIERS}, got '{self.housing_cost_tier}'")
        object.__setattr__(self, 'state', (self.state or '').strip().upper())


@dataclass(frozen=True)
class SavingsGoal:
    """One fixed savings slot.

    In ``time`` mode monthly_savings is the input and the months are solved;
    in ``monthly`` mode it is the other way around.
    """
    slot: str
    goal_amount: float = 0.0
    monthly_savings: Optional[float] = None
    time_to_goal_months: Optional[float] = None
    annual_rate_percent: Optional[float] = None
    mode: str = ''

    def __post_init__(self):
        if self.slot not in SAVINGS_SLOTS:
            raise ValueError(f"Unknown savings slot '{self.slot}'")
        if not self.mode:
            object.__setattr__(self, 'mode', default_mode_for_slot(self.slot))
        if self.mode not in SAVINGS_MODES:
            raise ValueError(f"Savings mode must be one of {SAVINGS_MODES}, got '{self.mode}'")


@dataclass(frozen=True)
class LoanTerms:
    principal: float = 400000.0
    annual_rate_percent: float = 6.0
    term_years: float = 20.0


@dataclass(frozen=True)
class AssetAllocation:
    name: str
    return_percent: float
    allocation_percent: float


def default_allocations() -> Tuple[AssetAllocation, ...]:
    return (
        AssetAllocation('equities', 8.0, 90.0),
        AssetAllocation('fixed_income', 5.0, 0.0),
        AssetAllocation('cash', 0.5, 10.0),
        AssetAllocation('alternatives', 5.0, 0.0),
    )


@dataclass(frozen=True)
class RetirementInputs:
    contrib_start_age: int = 22
    contrib_end_age: int = 65
    monthly_contribution: float = 100.0
    withdraw_start_age: int = 66
    withdraw_end_age: int = 100
    withdrawal_percent: float = 4.0
    allocations: Tuple[AssetAllocation, ...] = field(default_factory=default_allocations)

    def __post_init__(self):
        if len(self.allocations) != len(ASSET_CLASSES):
            raise ValueError(f"Exactly {len(ASSET_CLASSES)} asset allocations are required")


@dataclass(frozen=True)
class Match401kInputs:
    """Employer-match growth comparison (one series)."""
    start_age: int = 20
    end_age: int = 70
    annual_payment: float = 4638.0
    return_percent: float = 7.0
    employer_match_percent: float = 3.0
    withdrawal_percent: float = 6.0


@dataclass(frozen=True)
class CreditCardInputs:
    debt: float = 10000.0
    annual_rate_percent: float = 24.35
    payment: float = 290.0


@dataclass(frozen=True)
class HealthPlan:
    name: str
    premium: float
    deductible: float
    coinsurance_percent: float
    max_out_of_pocket: float
    employer_hsa: float = 0.0


def default_health_plans() -> Tuple[HealthPlan, HealthPlan]:
    return (
        HealthPlan('HDHP', premium=6000.0, deductible=4000.0, coinsurance_percent=20.0,
                   max_out_of_pocket=7000.0, employer_hsa=1000.0),
        HealthPlan('Normal', premium=9000.0, deductible=1000.0, coinsurance_percent=20.0,
                   max_out_of_pocket=5000.0, employer_hsa=0.0),
    )


@dataclass(frozen=True)
class HealthPlanInputs:
    plans: Tuple[HealthPlan, HealthPlan] = field(default_factory=default_health_plans)
    expected_expenses: float = 3000.0


@dataclass(frozen=True)
class PlanInputs:
    """Everything a program's spec.json provides."""
    top: TopLevelInputs
    deduction_choices: DeductionChoices = field(default_factory=DeductionChoices)
    budget_entries: Dict[str, float] = field(default_factory=dict)
    savings_goals: Tuple[SavingsGoal, ...] = ()
    mortgage: LoanTerms = field(default_factory=LoanTerms)
    retirement: RetirementInputs = field(default_factory=RetirementInputs)
    match_401k: Match401kInputs = field(default_factory=Match401kInputs)
    credit_card: CreditCardInputs = field(default_factory=CreditCardInputs)
    health_plans: HealthPlanInputs = field(default_factory=HealthPlanInputs)

    @classmethod
    def from_dict(cls, data: dict, contribution_limits: Optional[Dict[str, float]] = None) -> 'PlanInputs':
        """Build inputs from the JSON layout of ``input-parameters/<program>/spec.json``.

        Raw values go through the input parsing helpers, so ``"$85,000"``
        and ``85000`` are read the same way.
        """
        top_spec = data.get('topInputs', {})
        top = TopLevelInputs(
            pre_tax_income=parse_number(top_spec.get('preTaxIncome', 0)),
            state=top_spec.get('state', 'TX'),
            nyc_resident=parse_choice(top_spec.get('nycResident', False)),
            housing_cost_tier=top_spec.get('housingCostTier', 'Medium'),
        )

        ded_spec = data.get('deductionChoices', {})
        choices = DeductionChoices(
            marital_status=str(ded_spec.get('maritalStatus', 'single')).lower(),
            filed_jointly=parse_choice(ded_spec.get('filedJointly', False)),
            head_of_household=parse_choice(ded_spec.get('headOfHousehold', False)),
            over_65=parse_choice(ded_spec.get('over65', False)),
            blind=parse_choice(ded_spec.get('blind', False)),
            qualifying_surviving_spouse=parse_choice(ded_spec.get('qualifyingSurvivingSpouse', False)),
        )

        limits = contribution_limits or {}
        budget_entries = {}
        for item_id, raw in data.get('budgetEntries', {}).items():
            amount, _ = clamp_contribution(item_id, parse_number(raw), limits)
            budget_entries[item_id] = amount

        goals = []
        for slot, goal_spec in data.get('savingsGoals', {}).items():
            goals.append(SavingsGoal(
                slot=slot,
                goal_amount=parse_number(goal_spec.get('goalAmount', 0)),
                monthly_savings=parse_optional_number(goal_spec.get('monthlySavings')),
                time_to_goal_months=parse_optional_number(goal_spec.get('timeToGoalMonths')),
                annual_rate_percent=parse_optional_number(goal_spec.get('annualRatePercent')),
                mode=goal_spec.get('mode', ''),
            ))
        goals.sort(key=lambda g: SAVINGS_SLOTS.index(g.slot))

        mort_spec = data.get('mortgage', {})
        mortgage = LoanTerms(
            principal=parse_number(mort_spec.get('principal', 400000)),
            annual_rate_percent=parse_number(mort_spec.get('annualRatePercent', 6)),
            term_years=parse_number(mort_spec.get('termYears', 20)),
        )

        ret_spec = data.get('retirement', {})
        alloc_spec = ret_spec.get('allocations')
        if alloc_spec:
            allocations = tuple(
                AssetAllocation(
                    name,
                    parse_number(alloc_spec.get(name, {}).get('returnPercent', 0), allow_negative=True),
                    parse_number(alloc_spec.get(name, {}).get('allocationPercent', 0)),
                )
                for name in ASSET_CLASSES
            )
        else:
            allocations = default_allocations()
        retirement = RetirementInputs(
            contrib_start_age=parse_age(ret_spec.get('contribStartAge'), 22),
            contrib_end_age=parse_age(ret_spec.get('contribEndAge'), 65),
            monthly_contribution=parse_number(ret_spec.get('monthlyContribution', 100)),
            withdraw_start_age=parse_age(ret_spec.get('withdrawStartAge'), 66),
            withdraw_end_age=parse_age(ret_spec.get('withdrawEndAge'), 100),
            withdrawal_percent=parse_percent(ret_spec.get('withdrawalPercent', 4))[0],
            allocations=allocations,
        )

        match_spec = data.get('match401k', {})
        match_401k = Match401kInputs(
            start_age=int(parse_number(match_spec.get('startAge', 20))),
            end_age=int(parse_number(match_spec.get('endAge', 70))),
            annual_payment=parse_number(match_spec.get('annualPayment', 4638)),
            return_percent=parse_number(match_spec.get('returnPercent', 7)),
            employer_match_percent=parse_number(match_spec.get('employerMatchPercent', 3)),
            withdrawal_percent=parse_number(match_spec.get('withdrawalPercent', 6)),
        )

        cc_spec = data.get('creditCard', {})
        credit_card = CreditCardInputs(
            debt=parse_number(cc_spec.get('debt', 10000)),
            annual_rate_percent=parse_number(cc_spec.get('annualRatePercent', 24.35)),
            payment=parse_number(cc_spec.get('payment', 290)),
        )

        health_spec = data.get('healthPlans', {})
        if 'plans' in health_spec:
            plans = tuple(
                HealthPlan(
                    name=p.get('name', f'Plan {i + 1}'),
                    premium=parse_number(p.get('premium', 0)),
                    deductible=parse_number(p.get('deductible', 0)),
                    coinsurance_percent=parse_number(p.get('coinsurancePercent', 0)),
                    max_out_of_pocket=parse_number(p.get('maxOutOfPocket', 0)),
                    employer_hsa=parse_number(p.get('employerHsa', 0)),
                )
                for i, p in enumerate(health_spec['plans'][:2])
            )
            if len(plans) != 2:
                raise ValueError("healthPlans.plans must list exactly two plans")
        else:
            plans = default_health_plans()
        health_plans = HealthPlanInputs(
            plans=plans,
            expected_expenses=parse_number(health_spec.get('expectedExpenses', 3000)),
        )

        return cls(
            top=top,
            deduction_choices=choices,
            budget_entries=budget_entries,
            savings_goals=tuple(goals),
            mortgage=mortgage,
            retirement=retirement,
            match_401k=match_401k,
            credit_card=credit_card,
            health_plans=health_plans,
        )


def load_inputs(spec_path: str, contribution_limits: Optional[Dict[str, float]] = None) -> PlanInputs:
    with open(spec_path, 'r') as f:
        data = json.load(f)
    return PlanInputs.from_dict(data, contribution_limits)
