"""Flatten raw API records into the domain records the aggregator consumes"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from microfinance_core.domain.loan_types import parse_loan_type
from microfinance_core.domain.models import (
    ClientDuesAccount,
    FinancialRecord,
    LoanApplication,
    LoanPosition,
    RecordType,
    RevenueEntry,
)
from microfinance_core.ingest.schemas import (
    ClientIn,
    LoanIn,
    LoanRequestIn,
    RefreshSnapshot,
    RevenueIn,
    SavingsAccountIn,
    TransactionIn,
)
from microfinance_core.utils.money import ZERO

# Transaction types that feed the summaries; deposits, withdrawals etc. are
# already reflected in savings balances.
TRANSACTION_RECORD_TYPES = frozenset(
    {
        RecordType.PERSONAL_INTEREST_PAYMENT,
        RecordType.GENERAL_INTEREST,
        RecordType.DUE_PAYMENT,
        RecordType.LOAN_PAYMENT,
        RecordType.PENALTY,
        RecordType.FEE,
    }
)


@dataclass
class NormalizedSnapshot:
    records: List[FinancialRecord] = field(default_factory=list)
    clients: List[ClientDuesAccount] = field(default_factory=list)
    loans: List[LoanPosition] = field(default_factory=list)
    revenues: List[RevenueEntry] = field(default_factory=list)
    total_clients: int = 0


def savings_record(account: SavingsAccountIn) -> FinancialRecord:
    return FinancialRecord(
        type=RecordType.SAVINGS_BALANCE,
        amount=account.balance,
        currency=account.currency,
        client_id=account.client_id,
    )


def transaction_record(transaction: TransactionIn) -> Optional[FinancialRecord]:
    """Domain record for a transaction, or None for types the reports ignore"""
    try:
        record_type = RecordType(transaction.type.strip().lower())
    except ValueError:
        return None
    if record_type not in TRANSACTION_RECORD_TYPES:
        return None
    return FinancialRecord(
        type=record_type,
        amount=transaction.amount,
        currency=transaction.currency,
        client_id=transaction.client_id,
    )


def loan_records(loan: LoanIn) -> List[FinancialRecord]:
    """A loan contributes its requested amount and its outstanding balance"""
    return [
        FinancialRecord(
            type=RecordType.LOAN_PRINCIPAL,
            amount=loan.amount,
            currency=loan.currency,
            client_id=loan.client_id,
        ),
        FinancialRecord(
            type=RecordType.LOAN_OUTSTANDING,
            amount=loan.outstanding_balance,
            currency=loan.currency,
            client_id=loan.client_id,
        ),
    ]


def loan_position(loan: LoanIn) -> LoanPosition:
    return LoanPosition(
        loan_id=loan.id or "",
        status=loan.status,
        currency=loan.currency,
        amount=loan.amount,
        outstanding_balance=loan.outstanding_balance,
    )


def dues_account(client: ClientIn) -> ClientDuesAccount:
    # Positive balances are not a valid dues state; treat them as settled
    total_dues = min(ZERO, client.total_dues)
    yearly = client.yearly_dues if client.yearly_dues is not None else abs(total_dues)
    return ClientDuesAccount(
        client_id=client.id or "",
        total_dues=total_dues,
        currency=client.currency,
        assigned_yearly_dues=abs(yearly),
    )


def revenue_entry(revenue: RevenueIn) -> RevenueEntry:
    return RevenueEntry(
        amount=revenue.amount,
        currency=revenue.currency,
        source=revenue.source or "other",
        description=revenue.description,
        revenue_date=revenue.revenue_date,
    )


def normalize_snapshot(snapshot: Union[RefreshSnapshot, Mapping[str, Any]]) -> NormalizedSnapshot:
    """
    Convert a raw snapshot into domain records.

    Accepts either a validated RefreshSnapshot or the plain dict the data
    access layer produced. total_clients falls back to the number of client
    rows when the caller did not supply a count.
    """
    if not isinstance(snapshot, RefreshSnapshot):
        snapshot = RefreshSnapshot.model_validate(snapshot)

    normalized = NormalizedSnapshot()
    normalized.records.extend(savings_record(a) for a in snapshot.savings_accounts)
    for transaction in snapshot.transactions:
        record = transaction_record(transaction)
        if record is not None:
            normalized.records.append(record)
    for loan in snapshot.loans:
        normalized.records.extend(loan_records(loan))
        normalized.loans.append(loan_position(loan))

    normalized.clients = [dues_account(c) for c in snapshot.clients]
    normalized.revenues = [revenue_entry(r) for r in snapshot.revenues]
    normalized.total_clients = (
        snapshot.total_clients if snapshot.total_clients is not None else len(snapshot.clients)
    )
    return normalized


def record_type_counts(records: List[FinancialRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for record in records:
        counts[record.type.value] = counts.get(record.type.value, 0) + 1
    return counts


def loan_application(request: Union[LoanRequestIn, Mapping[str, Any]]) -> LoanApplication:
    """
    Build a LoanApplication from a raw request form.

    Raises:
        UnknownLoanTypeError: loan_type is not one of the configured categories
    """
    if not isinstance(request, LoanRequestIn):
        request = LoanRequestIn.model_validate(request)
    return LoanApplication(
        loan_type=parse_loan_type(request.loan_type),
        amount=request.amount,
        term_months=request.term_months,
        currency=request.currency,
        purpose=request.purpose,
        interest_rate=request.interest_rate,
        upfront_percentage=request.upfront_percentage,
        default_charges_percentage=request.default_charges_percentage,
    )
