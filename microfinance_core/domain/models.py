"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

from microfinance_core.utils.money import ZERO


class Currency(str, Enum):
    """Currencies the back-office keeps separate books for"""

    USD = "USD"
    LRD = "LRD"


class LoanType(str, Enum):
    PERSONAL = "personal"
    EXCESS = "excess"
    BUSINESS = "business"
    EMERGENCY = "emergency"
    MICRO = "micro"


class InterestMethod(str, Enum):
    FLAT = "flat"
    DECLINING_BALANCE = "declining_balance"


class PaymentFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class RecordType(str, Enum):
    """Kinds of normalized financial records fed to the aggregator"""

    SAVINGS_BALANCE = "savings_balance"
    PERSONAL_INTEREST_PAYMENT = "personal_interest_payment"
    GENERAL_INTEREST = "general_interest"
    DUE_PAYMENT = "due_payment"
    LOAN_PRINCIPAL = "loan_principal"
    LOAN_OUTSTANDING = "loan_outstanding"
    LOAN_PAYMENT = "loan_payment"
    PENALTY = "penalty"
    FEE = "fee"


class DuesStatus(str, Enum):
    NO_DUES = "no_dues"
    OUTSTANDING = "outstanding"
    PAID = "paid"


@dataclass(frozen=True)
class LoanTypeConfig:
    """Fixed pricing for one loan category"""

    name: str
    interest_rate: Decimal  # percent
    upfront_percentage: Decimal  # percent of requested amount
    interest_method: InterestMethod
    has_default_charges: bool


@dataclass
class LoanApplication:
    """Loan request draft as edited on the request/approval screens"""

    loan_type: LoanType
    amount: Optional[Decimal] = None
    term_months: Optional[int] = None
    currency: Currency = Currency.USD
    purpose: str = ""
    # Raw form text is kept when it is not numeric so validation can flag it
    interest_rate: Optional[Union[Decimal, str]] = None
    upfront_percentage: Optional[Union[Decimal, str]] = None
    default_charges_percentage: Optional[Union[Decimal, str]] = None


@dataclass(frozen=True)
class LoanTerms:
    """Derived pricing of a loan application"""

    interest_rate: Decimal
    upfront_percentage: Decimal
    interest_method: InterestMethod
    upfront_amount: Decimal
    principal: Decimal
    default_charges_percentage: Optional[Decimal] = None
    default_charges_amount: Decimal = ZERO


@dataclass(frozen=True)
class ClientDuesAccount:
    """Annual dues position of one client.

    total_dues is never positive: a negative value is the amount still owed.
    assigned_yearly_dues keeps the figure the dues were last assigned at.
    """

    client_id: str
    total_dues: Decimal = ZERO
    currency: Currency = Currency.USD
    assigned_yearly_dues: Decimal = ZERO


@dataclass(frozen=True)
class FinancialRecord:
    """Transaction-like entity normalized to a shared shape"""

    type: RecordType
    amount: Decimal
    currency: Currency = Currency.USD
    client_id: Optional[str] = None


@dataclass(frozen=True)
class LoanPosition:
    """Status and balances of a single loan, used for portfolio counts"""

    loan_id: str
    status: str
    currency: Currency
    amount: Decimal
    outstanding_balance: Decimal


@dataclass(frozen=True)
class RevenueEntry:
    """Single revenue line tagged by source"""

    amount: Decimal
    currency: Currency
    source: str = "other"
    description: Optional[str] = None
    revenue_date: Optional[date] = None


@dataclass(frozen=True)
class CurrencySummary:
    """Aggregated figures for one currency bucket, or for both combined"""

    total_savings: Decimal = ZERO
    outstanding_savings: Decimal = ZERO  # magnitude of overdrawn savings balances
    total_personal_interest: Decimal = ZERO
    total_general_interest: Decimal = ZERO
    outstanding_dues: Decimal = ZERO
    total_outstanding_dues: Decimal = ZERO  # signed sum of every client balance
    monthly_dues: Decimal = ZERO
    total_loans: Decimal = ZERO
    outstanding_loans: Decimal = ZERO
    total_fines: Decimal = ZERO
    grand_total: Decimal = ZERO
    overall_total_savings: Decimal = ZERO
    clients_with_outstanding_dues: int = 0
    clients_paid_dues: int = 0


@dataclass
class PortfolioCounters:
    """Loan counts and per-currency portfolio figures"""

    active_loans: int = 0
    overdue_loans: int = 0
    total_clients: int = 0
    pending_loans: int = 0
    completed_loans: int = 0
    portfolio_value: Dict[Currency, Decimal] = field(default_factory=dict)
    total_collections: Dict[Currency, Decimal] = field(default_factory=dict)

    @property
    def total_portfolio_value(self) -> Decimal:
        return sum(self.portfolio_value.values(), ZERO)

    @property
    def total_collections_all(self) -> Decimal:
        return sum(self.total_collections.values(), ZERO)


@dataclass
class Installment:
    """Single payment in a repayment schedule"""

    installment_number: int
    due_date: date
    principal_amount: Decimal
    interest_amount: Decimal
    total_payment: Decimal
    outstanding_balance: Decimal
    status: str = "pending"


@dataclass
class RepaymentSchedule:
    installments: List[Installment]
    total_interest: Decimal
    total_amount: Decimal
    periodic_payment: Decimal
