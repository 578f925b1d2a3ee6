"""Repayment schedule generation for flat and declining-balance loans"""

from datetime import date
from decimal import Decimal
from typing import Any, List, Optional, Union

from microfinance_core.config import settings
from microfinance_core.domain.exceptions import ValidationError
from microfinance_core.domain.models import (
    Installment,
    InterestMethod,
    PaymentFrequency,
    RepaymentSchedule,
)
from microfinance_core.utils.date_utils import generate_due_dates
from microfinance_core.utils.money import HUNDRED, ZERO, round_money, to_money

PERIODS_PER_YEAR = {
    PaymentFrequency.DAILY: 365,
    PaymentFrequency.WEEKLY: 52,
    PaymentFrequency.BIWEEKLY: 26,
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.QUARTERLY: 4,
    PaymentFrequency.YEARLY: 1,
}

# (days, months) between consecutive due dates
PERIOD_SPACING = {
    PaymentFrequency.DAILY: (1, 0),
    PaymentFrequency.WEEKLY: (7, 0),
    PaymentFrequency.BIWEEKLY: (14, 0),
    PaymentFrequency.MONTHLY: (0, 1),
    PaymentFrequency.QUARTERLY: (0, 3),
    PaymentFrequency.YEARLY: (0, 12),
}

# Below this periodic rate the loan is treated as interest free
RATE_EPSILON = Decimal("0.00000001")


def _money(value: Decimal) -> Decimal:
    return round_money(value, settings.money_places)


def installment_count(term_months: int, frequency: PaymentFrequency) -> int:
    """Number of payments needed to cover term_months at the given frequency"""
    periods = PERIODS_PER_YEAR[frequency]
    return -(-term_months * periods // 12)


def _due_dates(start: date, frequency: PaymentFrequency, count: int) -> List[date]:
    days, months = PERIOD_SPACING[frequency]
    return generate_due_dates(start, count, days=days, months=months)


def declining_balance_schedule(
    principal: Decimal,
    interest_rate: Decimal,
    term_months: int,
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
    start_date: Optional[date] = None,
) -> RepaymentSchedule:
    """
    Equal-payment (annuity) schedule where interest accrues on the remaining balance.

    payment = P * r * (1+r)^n / ((1+r)^n - 1), with r the periodic rate.
    Each installment's interest is the balance times r rounded to cents; the
    remainder of the payment reduces principal. The last installment pays off
    whatever balance is left so the schedule always clears the loan.
    """
    start = start_date or date.today()
    count = installment_count(term_months, frequency)
    rate = interest_rate / HUNDRED / PERIODS_PER_YEAR[frequency]
    balance = principal

    if rate <= RATE_EPSILON:
        payment = balance / count
    else:
        growth = (1 + rate) ** count
        payment = balance * rate * growth / (growth - 1)
    payment = _money(payment)

    installments = []
    total_interest = ZERO
    for number, due_date in enumerate(_due_dates(start, frequency, count), start=1):
        interest = _money(balance * rate)
        principal_part = payment - interest
        if number == count:
            principal_part = balance
        principal_part = min(principal_part, balance)

        balance = max(ZERO, balance - principal_part)
        total_interest += interest

        installments.append(
            Installment(
                installment_number=number,
                due_date=due_date,
                principal_amount=_money(principal_part),
                interest_amount=interest,
                total_payment=_money(principal_part + interest),
                outstanding_balance=_money(balance),
            )
        )

    total_interest = _money(total_interest)
    return RepaymentSchedule(
        installments=installments,
        total_interest=total_interest,
        total_amount=_money(principal + total_interest),
        periodic_payment=payment,
    )


def flat_rate_schedule(
    principal: Decimal,
    interest_rate: Decimal,
    term_months: int,
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
    start_date: Optional[date] = None,
) -> RepaymentSchedule:
    """
    Flat-rate schedule: total interest = principal * rate, split evenly.

    Every installment carries the same principal and interest portion; the
    last one pays the exact remaining balance to absorb rounding drift.
    """
    start = start_date or date.today()
    count = installment_count(term_months, frequency)

    total_interest = principal * interest_rate / HUNDRED
    total_amount = principal + total_interest
    principal_each = principal / count
    interest_each = total_interest / count
    remaining = total_amount

    installments = []
    for number, due_date in enumerate(_due_dates(start, frequency, count), start=1):
        if number == count:
            principal_part = remaining - interest_each
            payment = remaining
            remaining = ZERO
        else:
            principal_part = principal_each
            payment = principal_each + interest_each
            remaining = max(ZERO, remaining - payment)

        installments.append(
            Installment(
                installment_number=number,
                due_date=due_date,
                principal_amount=_money(principal_part),
                interest_amount=_money(interest_each),
                total_payment=_money(payment),
                outstanding_balance=_money(remaining),
            )
        )

    return RepaymentSchedule(
        installments=installments,
        total_interest=_money(total_interest),
        total_amount=_money(total_amount),
        periodic_payment=_money(total_amount / count),
    )


def generate_repayment_schedule(
    principal: Any,
    interest_rate: Any,
    term_months: int,
    interest_method: Union[InterestMethod, str] = InterestMethod.DECLINING_BALANCE,
    payment_frequency: Union[PaymentFrequency, str] = PaymentFrequency.MONTHLY,
    start_date: Optional[date] = None,
) -> RepaymentSchedule:
    """
    Build the repayment schedule for a disbursed loan.

    Args:
        principal: Disbursed amount (after the upfront fee)
        interest_rate: Annual rate in percent
        term_months: Loan term in months
        interest_method: flat or declining_balance; anything else is declining
        payment_frequency: How often installments fall due (unknown -> monthly)
        start_date: Disbursement date (default: today); first due date is one period later

    Raises:
        ValidationError: principal or term is not positive
    """
    principal_value = to_money(principal)
    errors = {}
    if principal_value <= 0:
        errors["principal"] = "Principal must be greater than zero"
    if isinstance(term_months, bool) or not isinstance(term_months, int) or term_months <= 0:
        errors["term_months"] = "Term must be greater than zero"
    if errors:
        raise ValidationError("Cannot build repayment schedule", errors)

    try:
        frequency = PaymentFrequency(payment_frequency)
    except ValueError:
        frequency = PaymentFrequency.MONTHLY

    rate = to_money(interest_rate)
    if interest_method == InterestMethod.FLAT:
        return flat_rate_schedule(principal_value, rate, term_months, frequency, start_date)
    return declining_balance_schedule(principal_value, rate, term_months, frequency, start_date)
