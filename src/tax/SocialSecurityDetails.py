import json
import os
from typing import Optional


class SocialSecurityDetails:
    """Holds the Social Security rate and wage base and computes the employee tax.

    Loads statutory values from the socialSecurity section of
    reference/federal-details.json.
    """

    def __init__(self, ref_path: Optional[str] = None):
        """Initialize by loading from the reference file.

        Args:
            ref_path: Optional path to a federal-details.json file.
        """
        path = ref_path or os.path.join(os.path.dirname(__file__), '../../reference/federal-details.json')
        with open(path, 'r') as f:
            data = json.load(f)

        section = data.get("socialSecurity")
        if not section or "rate" not in section or "wageBase" not in section:
            raise ValueError("federal-details.json must contain 'socialSecurity' with 'rate' and 'wageBase'")
        self.rate = section["rate"]
        self.wage_base = section["wageBase"]

    def total_contribution(self, gross_income: float) -> float:
        """Calculate the Social Security tax on gross income.

        The wage base caps the income that is taxed, not the tax itself.

        Args:
            gross_income: The employee's pre-tax income.

        Returns:
            The Social Security tax owed.
        """
        taxable_income = min(max(gross_income, 0.0), self.wage_base)
        return taxable_income * self.rate
