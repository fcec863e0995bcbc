"""Render module for course calculator output display."""

from render.renderers import (
    BaseRenderer,
    SummaryRenderer,
    BudgetRenderer,
    SavingsRenderer,
    MortgageRenderer,
    RetirementRenderer,
    CreditCardRenderer,
    HealthPlansRenderer,
    TaxBracketsRenderer,
    format_multiline_headers,
    RENDERER_REGISTRY,
)

__all__ = [
    'BaseRenderer',
    'SummaryRenderer',
    'BudgetRenderer',
    'SavingsRenderer',
    'MortgageRenderer',
    'RetirementRenderer',
    'CreditCardRenderer',
    'HealthPlansRenderer',
    'TaxBracketsRenderer',
    'format_multiline_headers',
    'RENDERER_REGISTRY',
]
