import logging

from model.PlanData import PayoffComparison, PayoffMonth, PayoffResult
from calc.input_parsing import clamp_percent, coerce_amount


MINIMUM_PAYMENT_RATE = 0.01
MAX_MONTHS = 360
PAID_OFF_TOLERANCE = 0.01


def minimum_payment(debt: float, rate: float = MINIMUM_PAYMENT_RATE) -> float:
    """The card's minimum payment: a flat share of the starting debt."""
    return coerce_amount(debt) * rate


def payoff_schedule(debt: float, annual_rate_percent: float, payment: float,
                    max_months: int = MAX_MONTHS) -> PayoffResult:
    """Month-by-month credit card payoff at a fixed payment.

    Interest accrues monthly on the open balance. The first month pays the
    full amount entered; later months pay the smaller of that amount and
    what is still owed. Stops once the balance is within a cent of zero, or
    after max_months, in which case paid_off is False.
    """
    balance = coerce_amount(debt)
    payment = coerce_amount(payment)
    rate_percent, _ = clamp_percent(annual_rate_percent)
    monthly_rate = rate_percent / 100 / 12

    months = []
    paid_off = False
    if balance > 0 and payment > 0:
        month = 0
        while month < max_months:
            month += 1
            interest = balance * monthly_rate
            # the first month pays the full entered amount even past the balance, as the course sheet does
            amount = payment if month == 1 else min(payment, balance + interest)
            closing = balance - (amount - interest)
            months.append(PayoffMonth(month=month, opening_balance=balance, interest=interest,
                                      payment=amount, closing_balance=closing))
            balance = closing
            if abs(balance) <= PAID_OFF_TOLERANCE:
                paid_off = True
                break
        if not paid_off:
            logging.warning("A $%.2f payment does not clear the card within %d months", payment, max_months)

    return PayoffResult(
        payment=payment,
        months=tuple(months),
        total_interest=sum(m.interest for m in months),
        total_paid=sum(m.payment for m in months),
        paid_off=paid_off,
    )


def compare_payoff(debt: float, annual_rate_percent: float, user_payment: float,
                   minimum_rate: float = MINIMUM_PAYMENT_RATE, max_months: int = MAX_MONTHS) -> PayoffComparison:
    """Paying only the minimum versus paying the amount the user chose."""
    return PayoffComparison(
        minimum=payoff_schedule(debt, annual_rate_percent, minimum_payment(debt, minimum_rate), max_months),
        user=payoff_schedule(debt, annual_rate_percent, user_payment, max_months),
    )
