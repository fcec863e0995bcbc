"""Budget recommendations by section and line item.

Every section gets a share of after-tax income that depends on the housing
cost tier. Inside a section each line item either takes a weighted slice of
the section share or a fixed share of income. Retirement plans are the
exception: their slices are also held under annual IRS dollar limits, which
is resolved by ``solve_retirement_percents``.
"""

import json
import logging
import os
from typing import Dict, List, Optional, Tuple

from model.PlanData import BudgetItem, BudgetSection, BudgetResult
from model.PlanInputs import HOUSING_TIERS
from calc.input_parsing import coerce_amount


DEFAULT_MAX_PASSES = 20


def load_budget_sections(ref_path: Optional[str] = None) -> Tuple[Tuple[BudgetSection, ...], int]:
    """Load section and item definitions from reference/budget-allocations.json.

    Returns the sections in display order and the pass limit for the
    retirement cap solve.
    """
    path = ref_path or os.path.join(os.path.dirname(__file__), '../../reference/budget-allocations.json')
    with open(path, 'r') as f:
        data = json.load(f)

    raw_sections = data.get('sections', [])
    if not raw_sections:
        raise ValueError("budget-allocations.json must contain a 'sections' array with at least one entry")

    sections = []
    for s in raw_sections:
        tier_percent = s.get('tierPercent', {})
        missing = [t for t in HOUSING_TIERS if t not in tier_percent]
        if missing:
            raise ValueError(f"Section '{s.get('id')}' is missing tier percentages for {missing}")
        items = tuple(
            BudgetItem(
                id=i['id'],
                label=i.get('label', i['id']),
                kind=i.get('kind', 'weight'),
                value=float(i.get('value', 0)),
                cap_group=i.get('capGroup'),
                pre_tax=bool(i.get('preTax', False)),
            )
            for i in s.get('items', [])
        )
        for item in items:
            if item.kind not in ('constant', 'weight', 'retirement'):
                raise ValueError(f"Budget item '{item.id}' has unknown kind '{item.kind}'")
        sections.append(BudgetSection(id=s['id'], title=s.get('title', s['id']),
                                      tier_percent=dict(tier_percent), items=items))

    max_passes = data.get('retirementCaps', {}).get('maxPasses', DEFAULT_MAX_PASSES)
    return tuple(sections), int(max_passes)


def solve_retirement_percents(after_tax_income: float, section_percent: float,
                              plans: List[BudgetItem], limits: Dict[str, float],
                              max_passes: int = DEFAULT_MAX_PASSES) -> Tuple[Dict[str, float], float]:
    """Split the retirement share of income across plans under dollar limits.

    Each pass spreads whatever share is still unassigned over the plans that
    aren't yet limited, in proportion to their weights. A limit group whose
    combined slice would pass ``limit / after_tax_income`` is pinned at that
    limit (members keep their relative proportions) and drops out of the next
    pass, which hands the freed share to the remaining plans. Stops when a
    pass pins nothing new, or after max_passes.

    Returns (percent of after-tax income per plan, share left unassigned
    because every plan that could take it is already at its limit).
    """
    if after_tax_income <= 0:
        return {p.id: 0.0 for p in plans}, 0.0

    cap_percent = {group: limit / after_tax_income for group, limit in limits.items()}
    pinned: Dict[str, float] = {}
    pinned_groups = set()
    shares: Dict[str, float] = {}

    for pass_number in range(1, max_passes + 1):
        open_plans = [p for p in plans if p.cap_group not in pinned_groups]
        remaining = max(section_percent - sum(pinned.values()), 0.0)
        total_weight = sum(p.value for p in open_plans)
        shares = {
            p.id: (remaining * p.value / total_weight if total_weight > 0 else 0.0)
            for p in open_plans
        }

        newly_pinned = False
        for group, group_cap in cap_percent.items():
            if group in pinned_groups:
                continue
            members = [p for p in open_plans if p.cap_group == group]
            group_share = sum(shares[p.id] for p in members)
            if members and group_share > group_cap:
                for p in members:
                    pinned[p.id] = group_cap * shares[p.id] / group_share
                pinned_groups.add(group)
                newly_pinned = True
                logging.debug(
                    "Retirement pass %d: %s limit binds at %.4f%% of income (uncapped %.4f%%)",
                    pass_number, group, group_cap * 100, group_share * 100,
                )

        if not newly_pinned:
            break

    percents = {}
    for p in plans:
        percent = pinned.get(p.id, shares.get(p.id, 0.0))
        if p.cap_group in cap_percent:
            percent = min(percent, cap_percent[p.cap_group])
        percents[p.id] = percent

    overflow = max(section_percent - sum(percents.values()), 0.0)
    if overflow > 1e-12:
        logging.debug("Retirement limits leave %.4f%% of income unassigned", overflow * 100)
    return percents, overflow


class BudgetCalculator:
    """Computes recommended and entered amounts for every budget line item."""

    def __init__(self, sections: Tuple[BudgetSection, ...], retirement_limits: Dict[str, float],
                 max_passes: int = DEFAULT_MAX_PASSES):
        self.sections = sections
        self.retirement_limits = dict(retirement_limits)
        self.max_passes = max_passes

    def item_ids(self) -> List[str]:
        return [item.id for section in self.sections for item in section.items]

    def recommended_percents(self, after_tax_income: float, tier: str) -> Tuple[Dict[str, float], float]:
        """Percent of after-tax income recommended for each item, plus any retirement overflow."""
        if tier not in HOUSING_TIERS:
            raise ValueError(f"housing_cost_tier must be one of {HOUSING_TIERS}, got '{tier}'")
        after_tax_income = coerce_amount(after_tax_income)

        percents: Dict[str, float] = {}
        overflow = 0.0
        for section in self.sections:
            section_percent = section.tier_percent[tier]
            retirement_items = [i for i in section.items if i.kind == 'retirement']
            if retirement_items:
                solved, section_overflow = solve_retirement_percents(
                    after_tax_income, section_percent, retirement_items,
                    self.retirement_limits, self.max_passes)
                percents.update(solved)
                overflow += section_overflow
            for item in section.items:
                if item.kind == 'constant':
                    percents[item.id] = item.value
                elif item.kind == 'weight':
                    percents[item.id] = section_percent * item.value
        return percents, overflow

    def calculate(self, after_tax_income: float, tier: str,
                  entered_amounts: Optional[Dict[str, float]] = None) -> BudgetResult:
        after_tax_income = coerce_amount(after_tax_income)
        entered_amounts = entered_amounts or {}

        known = set(self.item_ids())
        for item_id in entered_amounts:
            if item_id not in known:
                logging.warning("Ignoring budget entry for unknown item '%s'", item_id)

        percents, overflow = self.recommended_percents(after_tax_income, tier)

        recommended = {}
        entered = {}
        section_totals = {}
        for section in self.sections:
            section_percent = 0.0
            section_recommended = 0.0
            section_entered = 0.0
            for item in section.items:
                recommended[item.id] = after_tax_income * percents[item.id]
                entered[item.id] = coerce_amount(entered_amounts.get(item.id, 0.0))
                section_percent += percents[item.id]
                section_recommended += recommended[item.id]
                section_entered += entered[item.id]
            section_totals[section.id] = {
                'percent': section_percent,
                'recommended': section_recommended,
                'entered': section_entered,
            }

        total_entered = sum(entered.values())
        return BudgetResult(
            after_tax_income=after_tax_income,
            housing_cost_tier=tier,
            recommended_percent=percents,
            recommended=recommended,
            entered=entered,
            section_totals=section_totals,
            total_recommended=sum(recommended.values()),
            total_entered=total_entered,
            over_budget=total_entered > after_tax_income,
            retirement_overflow_percent=overflow,
            sections=self.sections,
        )

    def pre_tax_item_ids(self) -> List[str]:
        return [item.id for section in self.sections for item in section.items if item.pre_tax]

    def suggested_pre_tax_expenses(self, after_tax_income: float, tier: str) -> float:
        """Recommended dollars for items paid before tax (health insurance, traditional 401(k)/IRA)."""
        after_tax_income = coerce_amount(after_tax_income)
        percents, _ = self.recommended_percents(after_tax_income, tier)
        return sum(after_tax_income * percents[item_id] for item_id in self.pre_tax_item_ids())

    def entered_pre_tax_expenses(self, entered_amounts: Dict[str, float]) -> float:
        return sum(coerce_amount(entered_amounts.get(item_id, 0.0)) for item_id in self.pre_tax_item_ids())
