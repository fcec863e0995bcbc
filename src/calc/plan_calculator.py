"""Unified plan calculator that runs every course calculation for one program.

The calculation runs in three steps:
1. Baseline summary - taxes with no pre-tax expenses at all
2. Pre-tax expenses - the budget's recommended pre-tax items, sized from the
   baseline after-tax income, versus the amounts the user entered
3. Full summary (suggested and user branches) and everything that depends
   on after-tax income: budget, savings goals and the 401(k) comparison

The mortgage, retirement projection, credit card and health plan figures do
not depend on income and are computed directly from their inputs.
"""

import json
import os
from typing import Dict, Optional

from model.PlanData import PlanData
from model.PlanInputs import PlanInputs
from tax.FederalDetails import FederalDetails, describe_filing_status
from tax.StateDetails import StateDetails
from tax.CityDetails import CityDetails
from tax.SocialSecurityDetails import SocialSecurityDetails
from tax.MedicareDetails import MedicareDetails
from calc.summary_calculator import SummaryCalculator
from calc.budget_calculator import BudgetCalculator, load_budget_sections
from calc.savings_calculator import SavingsCalculator
from calc.mortgage_calculator import MortgageCalculator
from calc.retirement_calculator import RetirementCalculator, simulate_401k
from calc.debt_calculator import compare_payoff
from calc.insurance_calculator import compare_plans


DEFAULT_REFERENCE_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference'))


def load_planning_constants(ref_path: Optional[str] = None) -> Dict[str, dict]:
    path = ref_path or os.path.join(DEFAULT_REFERENCE_DIR, 'planning-constants.json')
    with open(path, 'r') as f:
        data = json.load(f)
    for section in ('mortgage', 'retirement', 'creditCard'):
        if section not in data:
            raise ValueError(f"planning-constants.json must contain a '{section}' section")
    return data


class PlanCalculator:
    """Calculator that builds the complete PlanData for a program.

    Holds only read-only reference tables, injected at construction, so the
    same instance can calculate any number of input snapshots.
    """

    def __init__(self,
                 federal: FederalDetails,
                 state: StateDetails,
                 city: CityDetails,
                 social_security: SocialSecurityDetails,
                 medicare: MedicareDetails,
                 budget: BudgetCalculator,
                 mortgage: MortgageCalculator,
                 retirement: RetirementCalculator,
                 credit_card_settings: Optional[Dict[str, float]] = None):
        self.federal = federal
        self.state = state
        self.city = city
        self.social_security = social_security
        self.medicare = medicare
        self.summary = SummaryCalculator(federal, state, city, social_security, medicare)
        self.budget = budget
        self.mortgage = mortgage
        self.retirement = retirement
        self.credit_card_settings = credit_card_settings or {}

    @classmethod
    def from_reference(cls, reference_dir: Optional[str] = None) -> 'PlanCalculator':
        """Load every reference table from reference_dir (default: the project's reference/)."""
        ref = reference_dir or DEFAULT_REFERENCE_DIR
        federal_path = os.path.join(ref, 'federal-details.json')

        federal = FederalDetails(federal_path)
        state = StateDetails(os.path.join(ref, 'state-tax-details.json'))
        city = CityDetails(os.path.join(ref, 'city-tax-details.json'))
        social_security = SocialSecurityDetails(federal_path)

        # read the Medicare rate from reference
        with open(federal_path, 'r') as f:
            federal_ref = json.load(f)
        medicare = MedicareDetails(medicare_rate=federal_ref.get('medicare', {}).get('rate', 0))

        sections, max_passes = load_budget_sections(os.path.join(ref, 'budget-allocations.json'))
        budget = BudgetCalculator(sections, federal.retirement_limits, max_passes)

        constants = load_planning_constants(os.path.join(ref, 'planning-constants.json'))
        mortgage_constants = constants['mortgage']
        mortgage = MortgageCalculator(mortgage_constants, mortgage_constants.get('maxTermYears', 40))
        retirement_constants = constants['retirement']
        retirement = RetirementCalculator(
            min_age=retirement_constants.get('minAge', 22),
            max_age=retirement_constants.get('maxAge', 100),
            discount_rate=retirement_constants.get('discountRate', 0.035),
        )

        return cls(federal, state, city, social_security, medicare, budget, mortgage, retirement,
                   constants['creditCard'])

    def calculate(self, inputs: PlanInputs, program_name: str = '') -> PlanData:
        """Calculate every figure for one input snapshot.

        Args:
            inputs: The program's parsed inputs

        Returns:
            PlanData with all results
        """
        top = inputs.top
        choices = inputs.deduction_choices

        # Step 1: taxes before any pre-tax expenses
        baseline = self.summary.branch(top.pre_tax_income, choices, top.state, top.nyc_resident, 0.0)

        # Step 2: recommended vs entered pre-tax expenses
        suggested_pre_tax = self.budget.suggested_pre_tax_expenses(baseline.after_tax_income, top.housing_cost_tier)
        user_pre_tax = self.budget.entered_pre_tax_expenses(inputs.budget_entries)

        # Step 3: both summary branches, then everything driven by the user's after-tax income
        summary = self.summary.calculate(top.pre_tax_income, choices, top.state, top.nyc_resident,
                                         suggested_pre_tax, user_pre_tax)
        user = summary.user

        budget = self.budget.calculate(user.after_tax_income, top.housing_cost_tier, inputs.budget_entries)
        savings = SavingsCalculator(user.monthly_after_tax_income).calculate(inputs.savings_goals)

        take_home_rate = user.after_tax_income / user.pre_tax_income if user.pre_tax_income > 0 else 1.0
        match_401k = simulate_401k(inputs.match_401k, take_home_rate)

        mortgage = self.mortgage.calculate(inputs.mortgage)
        retirement = self.retirement.project(inputs.retirement)

        cc = inputs.credit_card
        credit_card = compare_payoff(
            cc.debt, cc.annual_rate_percent, cc.payment,
            minimum_rate=self.credit_card_settings.get('minimumPaymentRate', 0.01),
            max_months=int(self.credit_card_settings.get('maxMonths', 360)),
        )
        health_plans = compare_plans(inputs.health_plans.plans, inputs.health_plans.expected_expenses)

        warnings = []
        if budget.over_budget:
            warnings.append(
                f"Budgeted amounts (${budget.total_entered:,.2f}) exceed after-tax income (${budget.after_tax_income:,.2f})")
        if mortgage.monthly.term_capped:
            warnings.append("Mortgage term exceeds 40 years; schedules use a 40 year term")
        if mortgage.monthly.rate_clamped:
            warnings.append("Mortgage interest rate above 100% was limited to 100%")
        for goal in savings.goals:
            if goal.rate_clamped:
                warnings.append(f"Savings goal '{goal.slot}' interest rate above 100% was limited to 100%")
        if not credit_card.user.paid_off and credit_card.user.months:
            warnings.append("Credit card payment does not pay off the balance within 30 years")
        for plan in health_plans.plans:
            if plan.coinsurance_clamped:
                warnings.append(f"Health plan '{plan.name}' coinsurance above 100% was limited to 100%")

        tax_brackets = {
            'federal': self.federal.bracketBreakdown(user.taxable_income),
            'state': self.state.bracketBreakdown(user.taxable_income, top.state),
        }
        if self.city.applies(top.state, top.nyc_resident):
            tax_brackets['city'] = self.city.bracketBreakdown(user.taxable_income)

        return PlanData(
            program_name=program_name,
            state=top.state,
            housing_cost_tier=top.housing_cost_tier,
            filing_status=describe_filing_status(choices),
            summary=summary,
            baseline=baseline,
            budget=budget,
            savings=savings,
            mortgage=mortgage,
            retirement=retirement,
            match_401k=match_401k,
            credit_card=credit_card,
            health_plans=health_plans,
            suggested_pre_tax_expenses=suggested_pre_tax,
            user_pre_tax_expenses=user_pre_tax,
            tax_brackets=tax_brackets,
            warnings=warnings,
        )
