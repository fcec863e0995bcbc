import os
import json
from typing import Dict, List, Optional

from tax.brackets import TaxBracket, BracketSlice, brackets_from_rows, bracket_tax, bracket_breakdown


class StateDetails:
    def __init__(self, ref_path: Optional[str] = None):
        # load state-tax-details.json: one row per (state, bracket)
        path = ref_path or os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'state-tax-details.json'))
        with open(path, 'r') as f:
            data = json.load(f)

        rows = data.get('brackets', [])
        if not rows:
            raise ValueError("state-tax-details.json must contain a 'brackets' array with at least one entry")

        grouped: Dict[str, List[dict]] = {}
        for row in rows:
            grouped.setdefault(row['state'].upper(), []).append(row)
        self.brackets_by_state: Dict[str, List[TaxBracket]] = {
            state: brackets_from_rows(state_rows) for state, state_rows in grouped.items()
        }

    def states(self) -> List[str]:
        return sorted(self.brackets_by_state.keys())

    def brackets(self, state: str) -> List[TaxBracket]:
        code = (state or '').strip().upper()
        if not code:
            # no state entered: nothing to tax
            return []
        if code not in self.brackets_by_state:
            raise ValueError(f"No state tax brackets available for '{state}'")
        return self.brackets_by_state[code]

    def taxBurden(self, taxable_income: float, state: str) -> float:
        """Calculate state income tax on taxable_income with the state's progressive table.

        States without an income tax carry a single 0% bracket, so they
        resolve to 0 like any other table.
        """
        return bracket_tax(self.brackets(state), taxable_income)

    def bracketBreakdown(self, taxable_income: float, state: str) -> List[BracketSlice]:
        return bracket_breakdown(self.brackets(state), taxable_income)
