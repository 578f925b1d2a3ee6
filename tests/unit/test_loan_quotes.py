"""Unit tests for loan quoting"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from microfinance_core.domain.exceptions import ValidationError
from microfinance_core.domain.models import LoanType
from microfinance_core.services.loan_quotes import field_errors, quote_loan


@pytest.fixture
def business_request():
    return {
        "loan_type": "business",
        "amount": "2000",
        "term_months": "12",
        "currency": "USD",
        "loan_purpose": "Restock the provisions shop",
    }


def test_quote_loan_terms_and_schedule(business_request):
    """Test business loan: 10% upfront, 5% declining interest on 1800"""
    quote = quote_loan(business_request, start_date=date(2024, 1, 1))

    assert quote.application.loan_type == LoanType.BUSINESS
    assert quote.terms.upfront_amount == 200
    assert quote.terms.principal == 1800
    assert len(quote.schedule.installments) == 12
    assert quote.schedule.installments[0].due_date == date(2024, 2, 1)
    assert quote.schedule.installments[-1].outstanding_balance == 0
    assert quote.schedule.total_interest > 0


def test_quote_loan_weekly(business_request):
    quote = quote_loan(business_request, payment_frequency="weekly", start_date=date(2024, 1, 1))
    assert len(quote.schedule.installments) == 52


def test_quote_loan_without_schedule(business_request):
    quote = quote_loan(business_request, with_schedule=False)
    assert quote.schedule is None


def test_quote_loan_full_upfront_has_no_schedule(business_request):
    """Test nothing left to disburse means nothing to schedule"""
    business_request["upfront_percentage"] = "100"

    quote = quote_loan(business_request)

    assert quote.terms.principal == 0
    assert quote.schedule is None


@patch("microfinance_core.services.loan_quotes.log_validation_failure")
def test_quote_loan_rejects_invalid_request(mock_log):
    """Test invalid form raises and logs the offending fields"""
    with pytest.raises(ValidationError) as exc_info:
        quote_loan({"loan_type": "personal", "amount": "", "term_months": "12", "loan_purpose": "short"})

    assert set(exc_info.value.errors) == {"amount", "purpose"}
    mock_log.assert_called_once()
    assert mock_log.call_args[0][0] == "loan_quote"


def test_field_errors(business_request):
    assert field_errors(business_request) == {}

    business_request["interest_rate"] = "120"
    assert field_errors(business_request) == {"interest_rate": "Must be between 0 and 100"}

    assert field_errors({"loan_type": "mortgage"}) == {"loan_type": "Unsupported loan type"}


def test_field_errors_non_numeric_percentage(business_request):
    """Test text in a percentage field is reported, not ignored"""
    business_request["upfront_percentage"] = "abc"

    assert field_errors(business_request) == {"upfront_percentage": "Must be between 0 and 100"}
    with pytest.raises(ValidationError):
        quote_loan(business_request)


def test_field_errors_purpose_message():
    errors = field_errors({"loan_type": "micro", "amount": 100, "term_months": 3, "loan_purpose": "   "})
    assert errors == {"purpose": "Loan purpose is required (minimum 10 characters)"}


def test_quote_loan_custom_rate(business_request):
    business_request["interest_rate"] = "0"

    quote = quote_loan(business_request, start_date=date(2024, 1, 1))

    assert quote.terms.interest_rate == 0
    assert quote.schedule.total_interest == 0
    assert quote.schedule.periodic_payment == Decimal("150.00")
