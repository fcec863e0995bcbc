from typing import Optional

from model.PlanData import FinancialSummary, SummaryResult
from model.PlanInputs import DeductionChoices
from tax.FederalDetails import FederalDetails
from tax.StateDetails import StateDetails
from tax.CityDetails import CityDetails
from tax.SocialSecurityDetails import SocialSecurityDetails
from tax.MedicareDetails import MedicareDetails
from calc.input_parsing import coerce_amount


class SummaryCalculator:
    """Calculator that computes taxes and after-tax income using injected detail providers.

    Pass hydrated instances of the federal, state, city, Social Security and
    Medicare details into the constructor. File I/O stays with the caller
    and the calculation itself is a pure function of its arguments.
    """

    def __init__(self, federal: FederalDetails, state: StateDetails, city: CityDetails,
                 social_security: SocialSecurityDetails, medicare: MedicareDetails):
        self.federal = federal
        self.state = state
        self.city = city
        self.social_security = social_security
        self.medicare = medicare

    def branch(self, pre_tax_income: float, choices: DeductionChoices, state_code: str,
               nyc_resident: bool, pre_tax_expenses: float) -> FinancialSummary:
        """Compute one branch of the summary for a given pre-tax expense total."""
        pre_tax_income = coerce_amount(pre_tax_income)
        pre_tax_expenses = coerce_amount(pre_tax_expenses)

        standard_deduction = self.federal.standardDeduction(choices)

        # Can go negative; the bracket math treats that as no income tax
        taxable_income = pre_tax_income - standard_deduction - pre_tax_expenses

        federal_tax = self.federal.taxBurden(taxable_income)
        state_tax = self.state.taxBurden(taxable_income, state_code)
        city_tax = 0.0
        if self.city.applies(state_code, nyc_resident):
            city_tax = self.city.taxBurden(taxable_income)

        # Payroll taxes are on gross income, not taxable income
        social_security_tax = self.social_security.total_contribution(pre_tax_income)
        medicare_tax = self.medicare.total_contribution(pre_tax_income)

        total_tax = federal_tax + social_security_tax + medicare_tax + state_tax + city_tax

        # Adding the deduction back leaves "income minus taxes minus pre-tax expenses"
        after_tax_income = max(taxable_income - total_tax + standard_deduction, 0.0)

        return FinancialSummary(
            pre_tax_income=pre_tax_income,
            standard_deduction=standard_deduction,
            pre_tax_expenses=pre_tax_expenses,
            taxable_income=taxable_income,
            federal_tax=federal_tax,
            social_security_tax=social_security_tax,
            medicare_tax=medicare_tax,
            state_tax=state_tax,
            city_tax=city_tax,
            total_tax=total_tax,
            after_tax_income=after_tax_income,
            marginal_bracket=self.federal.marginalBracket(taxable_income),
        )

    def calculate(self, pre_tax_income: float, choices: DeductionChoices, state_code: str,
                  nyc_resident: bool, suggested_pre_tax_expenses: float,
                  user_pre_tax_expenses: Optional[float] = None) -> SummaryResult:
        """Compute the suggested and user branches side by side.

        When no user expenses are given, the user branch matches the
        suggested one.
        """
        if user_pre_tax_expenses is None:
            user_pre_tax_expenses = suggested_pre_tax_expenses
        suggested = self.branch(pre_tax_income, choices, state_code, nyc_resident, suggested_pre_tax_expenses)
        user = self.branch(pre_tax_income, choices, state_code, nyc_resident, user_pre_tax_expenses)
        return SummaryResult(suggested=suggested, user=user)
