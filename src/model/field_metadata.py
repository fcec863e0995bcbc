"""Field metadata for FinancialSummary and table fields.

This module provides descriptions and short names for the summary fields and
the columns of the schedule tables. Short names are used as row labels and
column headers by the renderers and as descriptions by the tool server.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field


# Field metadata dictionary mapping field names to their info
FIELD_METADATA: Dict[str, FieldInfo] = {
    # Income
    "pre_tax_income": FieldInfo("Pre-Tax Income", "Yearly income before any tax or deduction"),
    "standard_deduction": FieldInfo("Standard Deduction", "Federal standard deduction for the filing status"),
    "pre_tax_expenses": FieldInfo("Pre-Tax Expenses", "Health insurance and traditional 401(k)/IRA paid before tax"),
    "taxable_income": FieldInfo("Taxable Income", "Income minus the standard deduction and pre-tax expenses"),

    # Taxes
    "federal_tax": FieldInfo("Federal Tax", "Federal income tax from the progressive brackets"),
    "social_security_tax": FieldInfo("Social Security Tax", "Social Security tax on income up to the wage base"),
    "medicare_tax": FieldInfo("Medicare Tax", "Medicare tax on all income"),
    "state_tax": FieldInfo("State Tax", "State or DC income tax"),
    "city_tax": FieldInfo("City Tax", "New York City resident income tax"),
    "total_tax": FieldInfo("Total Tax", "Federal + Social Security + Medicare + state + city"),
    "marginal_bracket": FieldInfo("Marginal Bracket", "Federal rate on the next dollar of taxable income"),
    "effective_tax_rate": FieldInfo("Eff Rate", "Total tax divided by pre-tax income"),

    # Take home
    "after_tax_income": FieldInfo("After-Tax Income", "Yearly income left after taxes and pre-tax expenses"),
    "monthly_after_tax_income": FieldInfo("Monthly After-Tax", "After-tax income divided by 12"),

    # Schedules
    "period": FieldInfo("Period", "Payment number"),
    "opening_balance": FieldInfo("Opening Balance", "Balance owed before the payment"),
    "payment": FieldInfo("Payment", "Amount paid in the period"),
    "interest": FieldInfo("Interest", "Interest charged for the period"),
    "principal": FieldInfo("Principal", "Part of the payment that reduces the balance"),
    "closing_balance": FieldInfo("Closing Balance", "Balance owed after the payment"),

    # Retirement
    "gross_value": FieldInfo("Gross Value", "Account value before the year's withdrawal"),
    "withdrawal": FieldInfo("Withdrawal", "Amount withdrawn during the year"),
    "net_value": FieldInfo("Net Value", "Account value after the year's withdrawal"),
    "contribution": FieldInfo("Contribution", "Employee 401(k) contribution before tax"),
    "employer_match": FieldInfo("Employer Match", "Employer matching contribution"),
    "total_contribution": FieldInfo("Total Contribution", "Employee contribution plus employer match"),
    "balance": FieldInfo("Balance", "401(k) balance at year end"),
}

# Fields listed, in order, in the summary table
SUMMARY_FIELDS = (
    "pre_tax_income",
    "standard_deduction",
    "pre_tax_expenses",
    "taxable_income",
    "federal_tax",
    "social_security_tax",
    "medicare_tax",
    "state_tax",
    "city_tax",
    "total_tax",
    "after_tax_income",
    "monthly_after_tax_income",
)


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def wrap_header(text: str, max_width: int) -> list:
    """Wrap a header text into multiple lines to fit within max_width.

    Words are split on spaces and distributed across lines to minimize
    the total number of lines while staying within max_width.
    """
    if len(text) <= max_width:
        return [text]

    lines = []
    current_line = ""
    for word in text.split():
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word

    if current_line:
        lines.append(current_line)

    return lines
