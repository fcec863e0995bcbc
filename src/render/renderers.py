"""Renderer classes for displaying course calculation results.

This module contains renderer classes that handle the presentation logic
for each part of the course workbook. Each renderer takes the unified
PlanData structure and extracts the fields it needs.
"""

from abc import ABC, abstractmethod
from typing import List

from model.PlanData import AmortizationResult, FinancialSummary, PayoffResult, PlanData
from model.field_metadata import SUMMARY_FIELDS, get_short_name, wrap_header


def format_multiline_headers(columns: List[tuple], first_label: str = 'Year', first_width: int = 6) -> tuple:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        first_label: Label of the leading column (period, age, month)
        first_width: Width of the leading column

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = []
    for header, width in columns:
        wrapped_headers.append((wrap_header(header, width), width))

    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad at the top so the last line of every header lines up
    for lines, _ in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        if line_idx == max_lines - 1:
            header_line = f"  {first_label:<{first_width}}"
        else:
            header_line = f"  {'':<{first_width}}"
        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * first_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def _banner(title: str, width: int = 60) -> None:
    print()
    print("=" * width)
    print(f"{title:^{width}}")
    print("=" * width)


def _section(title: str, width: int = 60) -> None:
    print()
    print("-" * width)
    print(title)
    print("-" * width)


def _print_warnings(data: PlanData) -> None:
    if not data.warnings:
        return
    print()
    for warning in data.warnings:
        print(f"  WARNING: {warning}")


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data: PlanData) -> None:
        """Render the data to output.

        Args:
            data: The PlanData containing all calculation results
        """
        pass


class SummaryRenderer(BaseRenderer):
    """Renderer for the financial summary: suggested and entered pre-tax expenses side by side."""

    def render(self, data: PlanData) -> None:
        suggested = data.summary.suggested
        user = data.summary.user

        _banner(f"FINANCIAL SUMMARY - {data.program_name.upper()}", 76)
        print(f"  {'State:':<30} {data.state}")
        print(f"  {'Filing Status:':<30} {data.filing_status}")
        print(f"  {'Housing Cost Tier:':<30} {data.housing_cost_tier}")

        print()
        print(f"  {'':<30} {'Suggested':>20} {'Your Entries':>20}")
        print(f"  {'-' * 30} {'-' * 20} {'-' * 20}")
        for name in SUMMARY_FIELDS:
            label = get_short_name(name) + ':'
            print(f"  {label:<30} ${getattr(suggested, name):>19,.2f} ${getattr(user, name):>19,.2f}")
        print(f"  {'-' * 30} {'-' * 20} {'-' * 20}")
        print(f"  {'Marginal Bracket:':<30} {suggested.marginal_bracket:>20.2%} {user.marginal_bracket:>20.2%}")
        print(f"  {'Effective Tax Rate:':<30} {suggested.effective_tax_rate:>20.2%} {user.effective_tax_rate:>20.2%}")

        _print_warnings(data)
        print("=" * 76)
        print()


class BudgetRenderer(BaseRenderer):
    """Renderer for the recommended budget against the amounts entered."""

    def render(self, data: PlanData) -> None:
        budget = data.budget
        width = 92

        _banner(f"MONTHLY BUDGET - {budget.housing_cost_tier.upper()} HOUSING COST", width)
        print(f"  {'After-Tax Income (yearly):':<40} ${budget.after_tax_income:>14,.2f}")
        print(f"  {'After-Tax Income (monthly):':<40} ${budget.after_tax_income / 12:>14,.2f}")

        for section in budget.sections:
            totals = budget.section_totals[section.id]
            _section(f"{section.title.upper()} ({totals['percent']:.2%})", width)
            print(f"  {'Item':<40} {'Percent':>10} {'Recommended':>18} {'Entered':>18}")
            for item in section.items:
                print(f"  {item.label:<40} {budget.recommended_percent[item.id]:>10.2%} "
                      f"${budget.recommended[item.id] / 12:>17,.2f} ${budget.entered[item.id] / 12:>17,.2f}")
            print(f"  {'Section Total:':<40} {'':>10} "
                  f"${totals['recommended'] / 12:>17,.2f} ${totals['entered'] / 12:>17,.2f}")

        print()
        print("=" * width)
        print(f"  {'TOTAL (monthly):':<40} {'':>10} "
              f"${budget.total_recommended / 12:>17,.2f} ${budget.total_entered / 12:>17,.2f}")
        if budget.retirement_overflow_percent > 0:
            print(f"  {'Retirement above IRS limits:':<40} {budget.retirement_overflow_percent:>10.2%}")
        if budget.over_budget:
            print("  Entered amounts exceed after-tax income.")
        print("=" * width)
        print()


class SavingsRenderer(BaseRenderer):
    """Renderer for the savings goals table."""

    def render(self, data: PlanData) -> None:
        savings = data.savings
        width = 92

        _banner("SAVINGS GOALS", width)
        print(f"  {'Monthly After-Tax Income:':<40} ${savings.monthly_after_tax_income:>14,.2f}")
        print()
        print(f"  {'Goal':<22} {'Solve For':<10} {'Goal Amount':>16} {'Monthly':>14} {'Months':>8} {'% Income':>10}")
        print(f"  {'-' * 22} {'-' * 10} {'-' * 16} {'-' * 14} {'-' * 8} {'-' * 10}")
        for goal in savings.goals:
            if goal.goal_amount <= 0:
                continue
            solve_for = 'Months' if goal.mode == 'time' else 'Payment'
            print(f"  {goal.slot:<22} {solve_for:<10} ${goal.goal_amount:>15,.2f} ${goal.monthly_savings:>13,.2f} "
                  f"{goal.time_to_goal_months:>8.0f} {goal.percent_of_income:>9.2f}%")
        print()
        print(f"  {'Total Monthly Savings:':<40} ${savings.total_monthly_savings:>14,.2f}")
        print(f"  {'Share of Monthly Income:':<40} {savings.total_percent_of_income:>14.2f}%")
        print("=" * width)
        print()


class MortgageRenderer(BaseRenderer):
    """Renderer for mortgage payments, ownership costs and optionally the schedules."""

    def __init__(self, show_schedule: bool = False):
        self.show_schedule = show_schedule

    def _print_plan(self, label: str, plan: AmortizationResult) -> None:
        print(f"  {label:<28} ${plan.payment:>13,.2f} ${plan.total_interest:>15,.2f} "
              f"${plan.total_paid:>15,.2f} {plan.actual_term_years:>10.2f}")

    def _print_schedule(self, plan: AmortizationResult) -> None:
        columns = [
            (get_short_name("opening_balance"), 16),
            (get_short_name("payment"), 12),
            (get_short_name("interest"), 12),
            (get_short_name("principal"), 12),
            (get_short_name("closing_balance"), 16),
        ]
        _section(f"{plan.cadence.replace('_', ' ').upper()} SCHEDULE", 84)
        header_lines, sep_line = format_multiline_headers(columns, first_label='Period', first_width=6)
        for line in header_lines:
            print(line)
        print(sep_line)
        for row in plan.schedule:
            print(f"  {row.period:<6} ${row.opening_balance:>15,.2f} ${row.payment:>11,.2f} "
                  f"${row.interest:>11,.2f} ${row.principal:>11,.2f} ${row.closing_balance:>15,.2f}")

    def render(self, data: PlanData) -> None:
        mortgage = data.mortgage
        width = 84

        _banner("MORTGAGE", width)
        print(f"  {'Loan Principal:':<40} ${mortgage.principal:>14,.2f}")
        print()
        print(f"  {'Plan':<28} {'Payment':>14} {'Total Interest':>16} {'Total Paid':>16} {'Years':>10}")
        print(f"  {'-' * 28} {'-' * 14} {'-' * 16} {'-' * 16} {'-' * 10}")
        self._print_plan('Monthly', mortgage.monthly)
        self._print_plan('Bi-Weekly', mortgage.biweekly)
        self._print_plan('Accelerated Bi-Weekly', mortgage.accelerated_biweekly)
        print(f"  {'Interest Saved (accelerated):':<40} ${mortgage.accelerated_interest_saved:>14,.2f}")

        _section("MONTHLY COST OF OWNERSHIP", width)
        print(f"  {'Mortgage Payment:':<40} ${mortgage.monthly.payment:>14,.2f}")
        print(f"  {'Insurance:':<40} ${mortgage.insurance:>14,.2f}")
        print(f"  {'Property Taxes:':<40} ${mortgage.taxes:>14,.2f}")
        print(f"  {'Maintenance:':<40} ${mortgage.maintenance:>14,.2f}")
        print(f"  {'-' * 40}")
        print(f"  {'Total Monthly Cost:':<40} ${mortgage.total_monthly_cost:>14,.2f}")

        if self.show_schedule:
            for plan in (mortgage.monthly, mortgage.biweekly, mortgage.accelerated_biweekly):
                self._print_schedule(plan)

        print("=" * width)
        print()


class RetirementRenderer(BaseRenderer):
    """Renderer for the age-by-age retirement projection and the 401(k) match comparison."""

    def render(self, data: PlanData) -> None:
        projection = data.retirement
        width = 84

        _banner("RETIREMENT PROJECTION", width)
        print(f"  {'Weighted Annual Return:':<40} {projection.weighted_return_percent / 100:>15.2%}")
        print()
        columns = [
            (get_short_name("gross_value"), 18),
            (get_short_name("withdrawal"), 16),
            (get_short_name("net_value"), 18),
        ]
        header_lines, sep_line = format_multiline_headers(columns, first_label='Age', first_width=6)
        for line in header_lines:
            print(line)
        print(sep_line)
        for row in projection.series:
            if row.gross_value == 0 and row.withdrawal == 0:
                continue
            print(f"  {row.age:<6} ${row.gross_value:>17,.2f} ${row.withdrawal:>15,.2f} ${row.net_value:>17,.2f}")

        _section("TOTALS", width)
        print(f"  {'':<30} {'Future Value':>20} {'Present Value':>20}")
        print(f"  {'Ending Balance:':<30} ${projection.future_ending_balance:>19,.2f} "
              f"${projection.present_ending_balance:>19,.2f}")
        print(f"  {'Total Withdrawn:':<30} ${projection.future_total_withdrawn:>19,.2f} "
              f"${projection.present_total_withdrawn:>19,.2f}")

        match = data.match_401k
        _section("401(K) WITH EMPLOYER MATCH", width)
        columns = [
            (get_short_name("contribution"), 14),
            (get_short_name("employer_match"), 14),
            (get_short_name("total_contribution"), 14),
            (get_short_name("balance"), 18),
        ]
        header_lines, sep_line = format_multiline_headers(columns, first_label='Age', first_width=6)
        for line in header_lines:
            print(line)
        print(sep_line)
        for year in match.years:
            print(f"  {year.age:<6} ${year.contribution:>13,.2f} ${year.employer_match:>13,.2f} "
                  f"${year.total_contribution:>13,.2f} ${year.balance:>17,.2f}")
        print()
        print(f"  {'Final Balance:':<40} ${match.final_balance:>14,.2f}")
        print(f"  {'Total Contributed:':<40} ${match.total_contributed:>14,.2f}")
        print(f"  {'Total Employer Match:':<40} ${match.total_employer_match:>14,.2f}")
        print(f"  {'Yearly Retirement Income:':<40} ${match.annual_retirement_income:>14,.2f}")
        print("=" * width)
        print()


class CreditCardRenderer(BaseRenderer):
    """Renderer for paying the minimum versus paying the chosen amount."""

    def _print_result(self, label: str, result: PayoffResult) -> None:
        months = f"{result.months_to_payoff}" if result.paid_off else f"{result.months_to_payoff}+"
        print(f"  {label:<24} ${result.payment:>13,.2f} {months:>8} "
              f"${result.total_interest:>15,.2f} ${result.total_paid:>15,.2f}")

    def render(self, data: PlanData) -> None:
        comparison = data.credit_card
        width = 84

        _banner("CREDIT CARD PAYOFF", width)
        print(f"  {'':<24} {'Payment':>14} {'Months':>8} {'Total Interest':>16} {'Total Paid':>16}")
        print(f"  {'-' * 24} {'-' * 14} {'-' * 8} {'-' * 16} {'-' * 16}")
        self._print_result('Minimum Payment', comparison.minimum)
        self._print_result('Your Payment', comparison.user)
        print()
        print(f"  {'Interest Saved:':<40} ${comparison.interest_saved:>14,.2f}")
        if not comparison.user.paid_off and comparison.user.months:
            print("  Your payment does not pay off the card within 30 years.")
        print("=" * width)
        print()


class HealthPlansRenderer(BaseRenderer):
    """Renderer for the yearly cost of the two health plans."""

    def render(self, data: PlanData) -> None:
        comparison = data.health_plans
        width = 84

        _banner("HEALTH PLAN COMPARISON", width)
        print(f"  {'Expected Medical Expenses:':<40} ${comparison.expected_expenses:>14,.2f}")
        print()
        print(f"  {'Plan':<20} {'Premium':>14} {'Out of Pocket':>14} {'Employer HSA':>14} {'Total Cost':>14}")
        print(f"  {'-' * 20} {'-' * 14} {'-' * 14} {'-' * 14} {'-' * 14}")
        for plan in comparison.plans:
            print(f"  {plan.name:<20} ${plan.premium:>13,.2f} ${plan.out_of_pocket:>13,.2f} "
                  f"${plan.employer_hsa:>13,.2f} ${plan.total_cost:>13,.2f}")
        print()
        print(f"  {'Cheaper Plan:':<40} {comparison.cheaper_plan:>15}")
        print(f"  {'Yearly Savings:':<40} ${comparison.savings:>14,.2f}")
        print("=" * width)
        print()


class TaxBracketsRenderer(BaseRenderer):
    """Renderer for how the user's taxable income falls into each bracket."""

    TITLES = {'federal': 'FEDERAL', 'state': 'STATE', 'city': 'NEW YORK CITY'}

    def render(self, data: PlanData) -> None:
        user: FinancialSummary = data.summary.user
        width = 84

        _banner("TAX BRACKETS", width)
        print(f"  {'Taxable Income:':<40} ${user.taxable_income:>14,.2f}")

        for jurisdiction, slices in data.tax_brackets.items():
            title = self.TITLES.get(jurisdiction, jurisdiction.upper())
            if jurisdiction == 'state' and data.state:
                title = f"STATE ({data.state})"
            _section(title, width)
            print(f"  {'Rate':>8} {'From':>16} {'To':>16} {'Income Taxed':>16} {'Tax':>14}")
            total = 0.0
            for s in slices:
                upper = f"${s.upper_bound:>15,.2f}" if s.upper_bound is not None else f"{'and up':>16}"
                print(f"  {s.rate:>8.2%} ${s.lower_bound:>15,.2f} {upper} ${s.taxable_amount:>15,.2f} ${s.tax:>13,.2f}")
                total += s.tax
            print(f"  {'Total:':<60} ${total:>13,.2f}")

        print("=" * width)
        print()


# Registry mapping mode names to renderer classes
RENDERER_REGISTRY = {
    'Summary': SummaryRenderer,
    'Budget': BudgetRenderer,
    'Savings': SavingsRenderer,
    'Mortgage': MortgageRenderer,
    'Retirement': RetirementRenderer,
    'CreditCard': CreditCardRenderer,
    'HealthPlans': HealthPlansRenderer,
    'TaxBrackets': TaxBracketsRenderer,
}
