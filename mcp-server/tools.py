"""Finance Course Tools for MCP Server.

This module provides the tool implementations that wrap the course
calculators and expose their results through MCP.
"""

import os
import sys
from dataclasses import asdict
from typing import Dict, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.plan_calculator import PlanCalculator
from model.PlanData import AmortizationResult, FinancialSummary, PayoffResult, PlanData
from model.PlanInputs import load_inputs
from model.field_metadata import SUMMARY_FIELDS, get_description


JURISDICTIONS = ('federal', 'state', 'city')


def _summary_dict(summary: FinancialSummary) -> dict:
    result = asdict(summary)
    result["monthly_after_tax_income"] = summary.monthly_after_tax_income
    result["effective_tax_rate"] = summary.effective_tax_rate
    return result


def _schedule_dict(plan: AmortizationResult, include_schedule: bool) -> dict:
    result = {
        "payment": plan.payment,
        "total_interest": plan.total_interest,
        "total_paid": plan.total_paid,
        "periods": plan.actual_term_periods,
        "years": plan.actual_term_years,
        "term_capped": plan.term_capped,
        "rate_clamped": plan.rate_clamped,
    }
    if include_schedule:
        result["schedule"] = [asdict(row) for row in plan.schedule]
    return result


def _payoff_dict(result: PayoffResult) -> dict:
    return {
        "payment": result.payment,
        "months_to_payoff": result.months_to_payoff,
        "paid_off": result.paid_off,
        "total_interest": result.total_interest,
        "total_paid": result.total_paid,
    }


class CourseTools:
    """Tools that expose one program's calculated results for MCP access."""

    def __init__(self, base_path: str, program_name: str, calculator: Optional[PlanCalculator] = None):
        """Initialize with paths and calculate the program.

        Args:
            base_path: Path to the project root directory
            program_name: Name of the program folder in input-parameters
            calculator: Shared PlanCalculator; loaded from base_path/reference when omitted
        """
        self.base_path = base_path
        self.program_name = program_name
        self.calculator = calculator or PlanCalculator.from_reference(os.path.join(base_path, 'reference'))
        self.spec_path = os.path.join(base_path, 'input-parameters', program_name, 'spec.json')
        self.inputs = load_inputs(self.spec_path, self.calculator.federal.retirement_limits)
        self.plan_data: PlanData = self.calculator.calculate(self.inputs, program_name)

    def get_financial_summary(self) -> dict:
        """Taxes and after-tax income for the suggested and user branches."""
        data = self.plan_data
        return {
            "state": data.state,
            "filing_status": data.filing_status,
            "housing_cost_tier": data.housing_cost_tier,
            "suggested_pre_tax_expenses": data.suggested_pre_tax_expenses,
            "user_pre_tax_expenses": data.user_pre_tax_expenses,
            "suggested": _summary_dict(data.summary.suggested),
            "user": _summary_dict(data.summary.user),
            "field_descriptions": {name: get_description(name) for name in SUMMARY_FIELDS},
            "warnings": list(data.warnings),
        }

    def get_budget(self, section: Optional[str] = None) -> dict:
        """Recommended and entered yearly amounts, optionally for a single section."""
        budget = self.plan_data.budget
        sections = []
        for s in budget.sections:
            if section and s.id != section:
                continue
            totals = budget.section_totals[s.id]
            sections.append({
                "id": s.id,
                "title": s.title,
                "percent": totals["percent"],
                "recommended": totals["recommended"],
                "entered": totals["entered"],
                "items": [
                    {
                        "id": item.id,
                        "label": item.label,
                        "percent": budget.recommended_percent[item.id],
                        "recommended": budget.recommended[item.id],
                        "entered": budget.entered[item.id],
                    }
                    for item in s.items
                ],
            })
        if section and not sections:
            available = [s.id for s in budget.sections]
            raise ValueError(f"Budget section '{section}' not found. Available sections: {available}")

        return {
            "after_tax_income": budget.after_tax_income,
            "housing_cost_tier": budget.housing_cost_tier,
            "total_recommended": budget.total_recommended,
            "total_entered": budget.total_entered,
            "over_budget": budget.over_budget,
            "retirement_overflow_percent": budget.retirement_overflow_percent,
            "sections": sections,
        }

    def get_savings_goals(self) -> dict:
        savings = self.plan_data.savings
        return {
            "monthly_after_tax_income": savings.monthly_after_tax_income,
            "total_monthly_savings": savings.total_monthly_savings,
            "total_percent_of_income": savings.total_percent_of_income,
            "goals": [asdict(goal) for goal in savings.goals],
        }

    def get_mortgage(self, include_schedule: bool = False) -> dict:
        mortgage = self.plan_data.mortgage
        return {
            "principal": mortgage.principal,
            "monthly": _schedule_dict(mortgage.monthly, include_schedule),
            "biweekly": _schedule_dict(mortgage.biweekly, include_schedule),
            "accelerated_biweekly": _schedule_dict(mortgage.accelerated_biweekly, include_schedule),
            "accelerated_interest_saved": mortgage.accelerated_interest_saved,
            "monthly_costs": {
                "insurance": mortgage.insurance,
                "taxes": mortgage.taxes,
                "maintenance": mortgage.maintenance,
                "total_monthly_cost": mortgage.total_monthly_cost,
            },
        }

    def get_retirement_projection(self, age: Optional[int] = None) -> dict:
        """Retirement summary plus either one age row or the full series."""
        projection = self.plan_data.retirement
        match = self.plan_data.match_401k
        result = {
            "weighted_return_percent": projection.weighted_return_percent,
            "future_ending_balance": projection.future_ending_balance,
            "future_total_withdrawn": projection.future_total_withdrawn,
            "present_ending_balance": projection.present_ending_balance,
            "present_total_withdrawn": projection.present_total_withdrawn,
            "match_401k": {
                "final_balance": match.final_balance,
                "total_contributed": match.total_contributed,
                "total_employer_match": match.total_employer_match,
                "annual_retirement_income": match.annual_retirement_income,
            },
        }
        if age is not None:
            row = projection.at_age(age)
            if row is None:
                raise ValueError(f"Age {age} is outside the projection ({projection.series[0].age}-{projection.series[-1].age})")
            result["age"] = asdict(row)
        else:
            result["series"] = [asdict(row) for row in projection.series]
        return result

    def get_credit_card_payoff(self) -> dict:
        comparison = self.plan_data.credit_card
        return {
            "minimum": _payoff_dict(comparison.minimum),
            "user": _payoff_dict(comparison.user),
            "interest_saved": comparison.interest_saved,
        }

    def compare_health_plans(self) -> dict:
        comparison = self.plan_data.health_plans
        return {
            "expected_expenses": comparison.expected_expenses,
            "plans": [asdict(plan) for plan in comparison.plans],
            "cheaper_plan": comparison.cheaper_plan,
            "savings": comparison.savings,
        }


class MultiProgramTools:
    """Manager for multiple course programs.

    Discovers all available programs and caches their calculations,
    allowing queries to specify which program to use.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None):
        """Initialize and discover all available programs.

        Args:
            base_path: Path to the project root directory
            default_program: Default program to use when none specified
        """
        self.base_path = base_path
        self.programs: Dict[str, CourseTools] = {}
        self.default_program = default_program
        self.calculator = PlanCalculator.from_reference(os.path.join(base_path, 'reference'))
        self._discover_programs()

    def _discover_programs(self):
        """Discover and load all available programs."""
        input_params_path = os.path.join(self.base_path, 'input-parameters')

        if not os.path.exists(input_params_path):
            return

        for name in sorted(os.listdir(input_params_path)):
            program_dir = os.path.join(input_params_path, name)
            spec_path = os.path.join(program_dir, 'spec.json')

            if os.path.isdir(program_dir) and os.path.exists(spec_path):
                try:
                    self.programs[name] = CourseTools(self.base_path, name, self.calculator)
                except (OSError, ValueError) as e:
                    # Log but don't fail on individual program errors
                    print(f"Warning: Failed to load program '{name}': {e}", file=sys.stderr)

        if self.default_program is None and self.programs:
            self.default_program = list(self.programs.keys())[0]

    def _get_program(self, program: Optional[str] = None) -> CourseTools:
        program_name = program or self.default_program

        if program_name not in self.programs:
            available = list(self.programs.keys())
            raise ValueError(
                f"Program '{program_name}' not found. Available programs: {available}"
            )

        return self.programs[program_name]

    def _with_program(self, result: dict, program: Optional[str]) -> dict:
        result["program"] = program or self.default_program
        return result

    def list_programs(self) -> dict:
        """List all available programs."""
        programs_info = {}
        for name, tools in self.programs.items():
            top = tools.inputs.top
            programs_info[name] = {
                "pre_tax_income": top.pre_tax_income,
                "state": top.state,
                "housing_cost_tier": top.housing_cost_tier,
                "filing_status": tools.plan_data.filing_status,
            }

        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "programs_info": programs_info
        }

    def reload_programs(self) -> dict:
        """Reload all programs from disk, refreshing the cache.

        Use this after adding, modifying, or removing program spec.json files
        to pick up changes without restarting the server.
        """
        old_programs = set(self.programs.keys())

        self.programs.clear()
        self.default_program = None
        self._discover_programs()

        new_programs = set(self.programs.keys())
        added = new_programs - old_programs
        removed = old_programs - new_programs
        unchanged = old_programs & new_programs

        return {
            "status": "success",
            "message": f"Reloaded {len(self.programs)} programs",
            "programs_loaded": list(self.programs.keys()),
            "default_program": self.default_program,
            "changes": {
                "added": sorted(added),
                "removed": sorted(removed),
                "reloaded": sorted(unchanged)
            }
        }

    def get_financial_summary(self, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program).get_financial_summary(), program)

    def get_budget(self, section: Optional[str] = None, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program).get_budget(section), program)

    def get_savings_goals(self, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program).get_savings_goals(), program)

    def get_mortgage(self, include_schedule: bool = False, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program).get_mortgage(include_schedule), program)

    def get_retirement_projection(self, age: Optional[int] = None, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program).get_retirement_projection(age), program)

    def get_credit_card_payoff(self, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program).get_credit_card_payoff(), program)

    def compare_health_plans(self, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program).compare_health_plans(), program)

    def calculate_bracket_tax(self, taxable_income: float, jurisdiction: str = 'federal',
                              state: Optional[str] = None) -> dict:
        """Tax on an arbitrary taxable income in one jurisdiction, independent of any program.

        Args:
            taxable_income: Income after deductions
            jurisdiction: 'federal', 'state' or 'city' (New York City)
            state: Two-letter state code, required for 'state'
        """
        calc = self.calculator
        if jurisdiction == 'federal':
            tax = calc.federal.taxBurden(taxable_income)
            slices = calc.federal.bracketBreakdown(taxable_income)
        elif jurisdiction == 'state':
            if not state:
                raise ValueError("state is required when jurisdiction is 'state'")
            tax = calc.state.taxBurden(taxable_income, state.upper())
            slices = calc.state.bracketBreakdown(taxable_income, state.upper())
        elif jurisdiction == 'city':
            tax = calc.city.taxBurden(taxable_income)
            slices = calc.city.bracketBreakdown(taxable_income)
        else:
            raise ValueError(f"jurisdiction must be one of {JURISDICTIONS}, got '{jurisdiction}'")

        return {
            "taxable_income": taxable_income,
            "jurisdiction": jurisdiction,
            "state": state.upper() if state else None,
            "tax": tax,
            "effective_rate": tax / taxable_income if taxable_income > 0 else 0.0,
            "brackets": [asdict(s) for s in slices],
        }
