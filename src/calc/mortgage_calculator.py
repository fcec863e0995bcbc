"""Mortgage payment and amortization schedules.

Three payment plans are produced for the same loan:

* ``monthly``: 12 level payments a year.
* ``biweekly``: 26 level payments a year at the bi-weekly rate.
* ``accelerated_biweekly``: half the monthly payment every two weeks. That
  is 13 monthly payments a year, so the loan is paid off early.
"""

import logging
from typing import Dict, List

from model.PlanData import AmortizationResult, AmortizationRow, MortgageResult
from model.PlanInputs import LoanTerms
from calc.input_parsing import clamp_percent, coerce_amount


CADENCES = ('monthly', 'biweekly', 'accelerated_biweekly')
PERIODS_PER_YEAR = {'monthly': 12, 'biweekly': 26, 'accelerated_biweekly': 26}
MAX_TERM_YEARS = 40

# Balances under a cent are treated as paid off
PAYOFF_TOLERANCE = 0.01


def level_payment(principal: float, period_rate: float, periods: int) -> float:
    """Fixed payment that retires principal over periods at period_rate."""
    if principal <= 0 or periods <= 0:
        return 0.0
    if period_rate == 0:
        return principal / periods
    growth = (1 + period_rate) ** periods
    return principal * period_rate * growth / (growth - 1)


def _period_count(principal: float, years: float, periods_per_year: int) -> int:
    # a loan with a balance and a term always gets at least one payment
    if principal <= 0 or years <= 0:
        return 0
    return max(1, int(round(years * periods_per_year)))


def amortize(principal: float, annual_rate_percent: float, term_years: float,
             cadence: str = 'monthly', max_term_years: float = MAX_TERM_YEARS) -> AmortizationResult:
    """Build the payment schedule for a loan.

    Terms longer than max_term_years are computed as max_term_years and
    flagged. Rates above 100% are held at 100% and flagged. The schedule
    stops as soon as the balance is paid off, which for the accelerated plan
    is well before the nominal term.
    """
    if cadence not in CADENCES:
        raise ValueError(f"cadence must be one of {CADENCES}, got '{cadence}'")

    principal = coerce_amount(principal)
    rate_percent, rate_clamped = clamp_percent(annual_rate_percent)
    years = coerce_amount(term_years)
    term_capped = years > max_term_years
    if term_capped:
        logging.warning("Loan term of %s years exceeds the %s year limit; using %s years",
                        years, max_term_years, max_term_years)
        years = max_term_years

    periods_per_year = PERIODS_PER_YEAR[cadence]
    periods = _period_count(principal, years, periods_per_year)
    period_rate = rate_percent / 100 / periods_per_year

    if cadence == 'accelerated_biweekly':
        payment = level_payment(principal, rate_percent / 100 / 12, _period_count(principal, years, 12)) / 2
    else:
        payment = level_payment(principal, period_rate, periods)

    schedule: List[AmortizationRow] = []
    balance = principal
    period = 0
    while balance > 0 and period < periods:
        period += 1
        interest = balance * period_rate
        amount = payment
        if cadence != 'monthly':
            # Never pay more than what is left in the final period
            amount = min(balance + interest, payment)
        principal_paid = amount - interest
        closing = balance - principal_paid

        if closing < PAYOFF_TOLERANCE or period == periods:
            principal_paid = balance
            amount = balance + interest
            closing = 0.0

        schedule.append(AmortizationRow(
            period=period,
            opening_balance=balance,
            payment=amount,
            interest=interest,
            principal=principal_paid,
            closing_balance=closing,
        ))
        balance = closing

    total_interest = sum(row.interest for row in schedule)
    total_paid = sum(row.payment for row in schedule)
    logging.debug("%s schedule: %d periods, payment %.2f, interest %.2f",
                  cadence, len(schedule), payment, total_interest)

    return AmortizationResult(
        cadence=cadence,
        payment=payment,
        schedule=tuple(schedule),
        total_interest=total_interest,
        total_paid=total_paid,
        actual_term_periods=len(schedule),
        periods_per_year=periods_per_year,
        term_capped=term_capped,
        rate_clamped=rate_clamped,
    )


class MortgageCalculator:
    """Loan schedules plus the flat monthly costs of owning the home.

    cost_rates holds ``insuranceMonthlyRate``, ``taxesMonthlyRate`` and
    ``maintenanceAnnualRate``, each a fraction of the loan principal.
    """

    def __init__(self, cost_rates: Dict[str, float], max_term_years: float = MAX_TERM_YEARS):
        self.insurance_rate = cost_rates.get('insuranceMonthlyRate', 0.0)
        self.taxes_rate = cost_rates.get('taxesMonthlyRate', 0.0)
        self.maintenance_rate = cost_rates.get('maintenanceAnnualRate', 0.0)
        self.max_term_years = max_term_years

    def calculate(self, terms: LoanTerms) -> MortgageResult:
        principal = coerce_amount(terms.principal)
        schedules = {
            cadence: amortize(principal, terms.annual_rate_percent, terms.term_years,
                              cadence, self.max_term_years)
            for cadence in CADENCES
        }

        insurance = principal * self.insurance_rate
        taxes = principal * self.taxes_rate
        maintenance = principal * self.maintenance_rate / 12
        total_monthly_cost = schedules['monthly'].payment + insurance + taxes + maintenance

        return MortgageResult(
            principal=principal,
            monthly=schedules['monthly'],
            biweekly=schedules['biweekly'],
            accelerated_biweekly=schedules['accelerated_biweekly'],
            insurance=insurance,
            taxes=taxes,
            maintenance=maintenance,
            total_monthly_cost=total_monthly_cost,
        )
