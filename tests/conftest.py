"""Pytest fixtures for testing"""

from decimal import Decimal
from typing import Any, Dict, List

import pytest

from microfinance_core.domain.models import (
    ClientDuesAccount,
    Currency,
    FinancialRecord,
    LoanApplication,
    LoanType,
    RecordType,
)


@pytest.fixture
def mixed_records() -> List[FinancialRecord]:
    """Records across both currencies, one of each kind the aggregator sums"""
    return [
        FinancialRecord(RecordType.SAVINGS_BALANCE, Decimal("500"), Currency.USD, "c1"),
        FinancialRecord(RecordType.SAVINGS_BALANCE, Decimal("300"), Currency.LRD, "c2"),
        FinancialRecord(RecordType.PERSONAL_INTEREST_PAYMENT, Decimal("25"), Currency.USD, "c1"),
        FinancialRecord(RecordType.GENERAL_INTEREST, Decimal("40"), Currency.LRD, "c2"),
        FinancialRecord(RecordType.DUE_PAYMENT, Decimal("100"), Currency.USD, "c1"),
        FinancialRecord(RecordType.LOAN_PRINCIPAL, Decimal("1000"), Currency.USD, "c1"),
        FinancialRecord(RecordType.LOAN_OUTSTANDING, Decimal("800"), Currency.USD, "c1"),
        FinancialRecord(RecordType.LOAN_PRINCIPAL, Decimal("5000"), Currency.LRD, "c2"),
        FinancialRecord(RecordType.LOAN_OUTSTANDING, Decimal("5000"), Currency.LRD, "c2"),
        FinancialRecord(RecordType.PENALTY, Decimal("15"), Currency.LRD, "c2"),
        FinancialRecord(RecordType.FEE, Decimal("5"), Currency.LRD, "c2"),
    ]


@pytest.fixture
def dues_accounts() -> List[ClientDuesAccount]:
    """One settled USD client, one owing LRD 1200, one owing USD 600"""
    return [
        ClientDuesAccount("c1", Decimal("0"), Currency.USD, Decimal("1200")),
        ClientDuesAccount("c2", Decimal("-1200"), Currency.LRD, Decimal("1200")),
        ClientDuesAccount("c3", Decimal("-600"), Currency.USD, Decimal("600")),
    ]


@pytest.fixture
def emergency_application() -> LoanApplication:
    return LoanApplication(
        loan_type=LoanType.EMERGENCY,
        amount=Decimal("1000"),
        term_months=12,
        currency=Currency.USD,
        purpose="Hospital bills for family member",
        default_charges_percentage=Decimal("5"),
    )


@pytest.fixture
def raw_snapshot() -> Dict[str, Any]:
    """Raw snapshot as the data-access layer returns it (strings, nulls and all)"""
    return {
        "generation": 7,
        "savings_accounts": [
            {"id": 1, "client_id": 1, "balance": "500.00", "currency": "USD"},
            {"id": 2, "client_id": 2, "balance": 300, "currency": "LRD"},
            {"id": 3, "client_id": 3, "balance": "abc", "currency": "EUR"},
        ],
        "transactions": [
            {"client_id": 1, "type": "personal_interest_payment", "amount": 25, "currency": "USD"},
            {"client_id": 2, "type": "general_interest", "amount": "40", "currency": "LRD"},
            {"client_id": 1, "type": "due_payment", "amount": 100, "currency": "USD"},
            {"client_id": 2, "type": "penalty", "amount": 15, "currency": "LRD"},
            {"client_id": 2, "type": "fee", "amount": 5, "currency": "LRD"},
            {"client_id": 1, "type": "loan_payment", "amount": 200, "currency": "USD"},
            {"client_id": 1, "type": "deposit", "amount": 999, "currency": "USD"},
        ],
        "loans": [
            {"id": 10, "client_id": 1, "amount": 1000, "outstanding_balance": 800, "status": "active", "currency": "USD"},
            {"id": 11, "client_id": 2, "amount": 5000, "outstanding_balance": 5000, "status": "overdue", "currency": "LRD"},
            {"id": 12, "client_id": 3, "amount": 300, "outstanding_balance": 0, "status": "completed", "currency": None},
            {"id": 13, "client_id": 3, "amount": 400, "outstanding_balance": 400, "status": "pending", "currency": "USD"},
        ],
        "clients": [
            {"id": 1, "total_dues": 0, "dues_currency": "USD"},
            {"id": 2, "total_dues": "-1200", "dues_currency": "LRD"},
            {"id": 3, "total_dues": -600, "dues_currency": None},
        ],
        "revenues": [
            {"amount": 50, "currency": "USD", "source": "loan_interest"},
            {"amount": 20, "currency": "LRD", "source": "fees"},
            {"amount": 10, "currency": "USD"},
        ],
    }
