"""Result snapshots produced by the calculators.

Each calculator returns one of these structures, and PlanData bundles them
for a whole program. Renderers and the tool server read fields from here;
nothing downstream recomputes them.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class FinancialSummary:
    """Taxes and take-home income for one branch (suggested or user)."""
    pre_tax_income: float
    standard_deduction: float
    pre_tax_expenses: float
    taxable_income: float
    federal_tax: float
    social_security_tax: float
    medicare_tax: float
    state_tax: float
    city_tax: float
    total_tax: float
    after_tax_income: float
    marginal_bracket: float = 0.0

    @property
    def monthly_after_tax_income(self) -> float:
        return self.after_tax_income / 12

    @property
    def effective_tax_rate(self) -> float:
        if self.pre_tax_income <= 0:
            return 0.0
        return self.total_tax / self.pre_tax_income


@dataclass(frozen=True)
class SummaryResult:
    """Both branches of the financial summary, computed from the same engine.

    ``suggested`` uses the recommended pre-tax expenses, ``user`` uses what
    was actually entered.
    """
    suggested: FinancialSummary
    user: FinancialSummary


@dataclass(frozen=True)
class BudgetItem:
    id: str
    label: str
    kind: str  # constant | weight | retirement
    value: float
    cap_group: Optional[str] = None
    pre_tax: bool = False


@dataclass(frozen=True)
class BudgetSection:
    id: str
    title: str
    tier_percent: Dict[str, float]
    items: Tuple[BudgetItem, ...]


@dataclass(frozen=True)
class BudgetResult:
    after_tax_income: float
    housing_cost_tier: str
    recommended_percent: Dict[str, float]
    recommended: Dict[str, float]
    entered: Dict[str, float]
    section_totals: Dict[str, Dict[str, float]]
    total_recommended: float
    total_entered: float
    over_budget: bool
    retirement_overflow_percent: float = 0.0
    sections: Tuple[BudgetSection, ...] = ()


@dataclass(frozen=True)
class SavingsGoalResult:
    slot: str
    mode: str
    goal_amount: float
    monthly_savings: float
    time_to_goal_months: float
    percent_of_income: float
    rate_clamped: bool = False


@dataclass(frozen=True)
class SavingsResult:
    goals: Tuple[SavingsGoalResult, ...]
    monthly_after_tax_income: float
    total_monthly_savings: float
    total_percent_of_income: float


@dataclass(frozen=True)
class AmortizationRow:
    period: int
    opening_balance: float
    payment: float
    interest: float
    principal: float
    closing_balance: float


@dataclass(frozen=True)
class AmortizationResult:
    cadence: str
    payment: float
    schedule: Tuple[AmortizationRow, ...]
    total_interest: float
    total_paid: float
    actual_term_periods: int
    periods_per_year: int
    term_capped: bool = False
    rate_clamped: bool = False

    @property
    def actual_term_years(self) -> float:
        return self.actual_term_periods / self.periods_per_year


@dataclass(frozen=True)
class MortgageResult:
    principal: float
    monthly: AmortizationResult
    biweekly: AmortizationResult
    accelerated_biweekly: AmortizationResult
    insurance: float
    taxes: float
    maintenance: float
    total_monthly_cost: float

    @property
    def accelerated_interest_saved(self) -> float:
        return self.monthly.total_interest - self.accelerated_biweekly.total_interest


@dataclass(frozen=True)
class AgeRow:
    age: int
    gross_value: float
    withdrawal: float
    net_value: float


@dataclass(frozen=True)
class RetirementProjection:
    weighted_return_percent: float
    series: Tuple[AgeRow, ...]
    future_ending_balance: float
    future_total_withdrawn: float
    present_ending_balance: float
    present_total_withdrawn: float

    def at_age(self, age: int) -> Optional[AgeRow]:
        for row in self.series:
            if row.age == age:
                return row
        return None


@dataclass(frozen=True)
class Match401kYear:
    age: int
    year: int
    contribution: float
    employer_match: float
    total_contribution: float
    balance: float


@dataclass(frozen=True)
class Match401kResult:
    years: Tuple[Match401kYear, ...]
    final_balance: float
    total_contributed: float
    total_employer_match: float
    annual_retirement_income: float


@dataclass(frozen=True)
class PayoffMonth:
    month: int
    opening_balance: float
    interest: float
    payment: float
    closing_balance: float


@dataclass(frozen=True)
class PayoffResult:
    payment: float
    months: Tuple[PayoffMonth, ...]
    total_interest: float
    total_paid: float
    paid_off: bool

    @property
    def months_to_payoff(self) -> int:
        return len(self.months)


@dataclass(frozen=True)
class PayoffComparison:
    minimum: PayoffResult
    user: PayoffResult

    @property
    def interest_saved(self) -> float:
        return self.minimum.total_interest - self.user.total_interest


@dataclass(frozen=True)
class HealthPlanCost:
    name: str
    premium: float
    out_of_pocket: float
    employer_hsa: float
    total_cost: float
    coinsurance_clamped: bool = False


@dataclass(frozen=True)
class HealthPlanComparison:
    expected_expenses: float
    plans: Tuple[HealthPlanCost, ...]
    cheaper_plan: str
    savings: float


@dataclass
class PlanData:
    """Complete results for one program.

    Built by PlanCalculator from a PlanInputs snapshot; every field is
    derived, nothing is carried over from a previous calculation.
    """
    program_name: str
    state: str
    housing_cost_tier: str
    filing_status: str
    summary: SummaryResult
    baseline: FinancialSummary
    budget: BudgetResult
    savings: SavingsResult
    mortgage: MortgageResult
    retirement: RetirementProjection
    match_401k: Match401kResult
    credit_card: PayoffComparison
    health_plans: HealthPlanComparison
    suggested_pre_tax_expenses: float = 0.0
    user_pre_tax_expenses: float = 0.0
    # Bracket-by-bracket split of the user branch taxable income, keyed by jurisdiction
    tax_brackets: Dict[str, list] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
