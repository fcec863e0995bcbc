import json
import os
from typing import Dict, List, Optional

from model.PlanInputs import DeductionChoices
from tax.brackets import TaxBracket, BracketSlice, brackets_from_rows, bracket_tax, bracket_breakdown, marginal_rate


class FederalDetails:
	def __init__(self, ref_path: Optional[str] = None):
		"""
		ref_path: optional path to a federal-details.json; defaults to the one in reference/
		"""
		self.ref_path = ref_path or os.path.join(os.path.dirname(__file__), '../../reference/federal-details.json')
		self.brackets: List[TaxBracket] = []
		self.deduction_base: Dict[str, float] = {}
		self.deduction_additional: Dict[str, float] = {}
		self.retirement_limits: Dict[str, float] = {}
		self._load()

	def _load(self):
		with open(self.ref_path, 'r') as f:
			data = json.load(f)

		rows = data.get("brackets", [])
		if not rows:
			raise ValueError("federal-details.json must contain a 'brackets' array with at least one entry")
		self.tax_year = data.get("taxYear")
		self.brackets = brackets_from_rows(rows)

		rules = data.get("standardDeductionRules")
		if not rules or "base" not in rules or "additional" not in rules:
			raise ValueError("federal-details.json must contain 'standardDeductionRules' with 'base' and 'additional'")
		for key in ("single", "marriedFilingJointly", "headOfHousehold", "marriedFilingSeparately", "qualifyingSurvivingSpouse"):
			if key not in rules["base"]:
				raise ValueError(f"standardDeductionRules.base is missing '{key}'")
		for key in ("singleOrHeadOfHousehold", "married"):
			if key not in rules["additional"]:
				raise ValueError(f"standardDeductionRules.additional is missing '{key}'")
		self.deduction_base = dict(rules["base"])
		self.deduction_additional = dict(rules["additional"])

		self.retirement_limits = dict(data.get("retirementLimits", {}))

	def taxBurden(self, taxable_income: float) -> float:
		"""
		Returns the federal income tax owed on taxable_income. Negative income owes nothing.
		"""
		return bracket_tax(self.brackets, taxable_income)

	def marginalBracket(self, taxable_income: float) -> float:
		return marginal_rate(self.brackets, taxable_income)

	def bracketBreakdown(self, taxable_income: float) -> List[BracketSlice]:
		"""
		Returns the per-bracket worksheet rows for taxable_income.
		"""
		return bracket_breakdown(self.brackets, taxable_income)

	def standardDeduction(self, choices: DeductionChoices) -> float:
		"""
		Resolves the standard deduction for the filer's choices.

		The first matching status wins, checked in this order:
		1. Qualifying surviving spouse  -> QSS base + married riders
		2. Single, head of household    -> HoH base + single riders
		3. Single                       -> single base + single riders
		4. Married filing jointly       -> MFJ base + married riders
		5. Married filing separately    -> MFS base + married riders

		Each true flag (over 65, blind) adds one rider.
		"""
		base = self.deduction_base
		additional = self.deduction_additional
		is_married = choices.marital_status == 'married'

		if choices.qualifying_surviving_spouse:
			deduction = base["qualifyingSurvivingSpouse"]
			rider = additional["married"]
		elif not is_married and choices.head_of_household:
			deduction = base["headOfHousehold"]
			rider = additional["singleOrHeadOfHousehold"]
		elif not is_married:
			deduction = base["single"]
			rider = additional["singleOrHeadOfHousehold"]
		elif choices.filed_jointly:
			deduction = base["marriedFilingJointly"]
			rider = additional["married"]
		else:
			deduction = base["marriedFilingSeparately"]
			rider = additional["married"]

		riders = int(choices.over_65) + int(choices.blind)
		return deduction + riders * rider


def describe_filing_status(choices: DeductionChoices) -> str:
	"""Short sentence describing which deduction rule applies, e.g. "a head of household, who is over 65 and blind"."""
	if choices.qualifying_surviving_spouse:
		status = "a qualifying surviving spouse"
	elif choices.marital_status != 'married' and choices.head_of_household:
		status = "a head of household"
	elif choices.marital_status != 'married':
		status = "a single filer"
	elif choices.filed_jointly:
		status = "married, filing jointly"
	else:
		status = "married, filing separately"

	traits = []
	if choices.over_65:
		traits.append("over 65")
	if choices.blind:
		traits.append("blind")
	if traits:
		return f"{status}, who is {' and '.join(traits)}"
	return status
