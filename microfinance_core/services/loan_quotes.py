"""Loan quoting - validated terms and repayment schedule for a request form"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional, Union

from microfinance_core.domain.exceptions import ValidationError
from microfinance_core.domain.loan_terms import compute_terms, validate_application
from microfinance_core.domain.models import LoanApplication, LoanTerms, RepaymentSchedule
from microfinance_core.domain.schedule import generate_repayment_schedule
from microfinance_core.infrastructure.observability.logging import log_validation_failure
from microfinance_core.infrastructure.observability.metrics import (
    loan_quote_counter,
    record_validation_failure,
)
from microfinance_core.ingest.normalize import loan_application
from microfinance_core.ingest.schemas import LoanRequestIn

LoanRequest = Union[LoanRequestIn, Mapping[str, Any]]


@dataclass
class LoanQuote:
    application: LoanApplication
    terms: LoanTerms
    schedule: Optional[RepaymentSchedule] = None


def field_errors(request: LoanRequest) -> Dict[str, str]:
    """Field-level messages for a request form; empty when it is valid"""
    try:
        application = loan_application(request)
    except ValidationError as e:
        return dict(e.errors)
    return validate_application(application)


def quote_loan(
    request: LoanRequest,
    payment_frequency: str = "monthly",
    start_date: Optional[date] = None,
    with_schedule: bool = True,
) -> LoanQuote:
    """
    Price a loan request and, when there is something to repay, schedule it.

    Raises:
        ValidationError: the request has field errors (nothing is computed)
    """
    try:
        application = loan_application(request)
        terms = compute_terms(application)
    except ValidationError as e:
        record_validation_failure("loan_quote", e.errors)
        log_validation_failure("loan_quote", e.errors)
        raise

    schedule = None
    if with_schedule and terms.principal > 0:
        schedule = generate_repayment_schedule(
            terms.principal,
            terms.interest_rate,
            application.term_months,
            terms.interest_method,
            payment_frequency,
            start_date,
        )

    loan_quote_counter.labels(loan_type=application.loan_type.value).inc()
    return LoanQuote(application=application, terms=terms, schedule=schedule)
