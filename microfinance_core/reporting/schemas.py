"""Pydantic view models handed to the presentation layer"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from microfinance_core.domain.models import Currency


class CurrencySummarySchema(BaseModel):
    """Summary figures for one currency or the combined view"""

    model_config = ConfigDict(from_attributes=True)

    total_savings: Decimal
    outstanding_savings: Decimal
    total_personal_interest: Decimal
    total_general_interest: Decimal
    outstanding_dues: Decimal
    total_outstanding_dues: Decimal
    monthly_dues: Decimal
    total_loans: Decimal
    outstanding_loans: Decimal
    total_fines: Decimal
    grand_total: Decimal
    overall_total_savings: Decimal
    clients_with_outstanding_dues: int
    clients_paid_dues: int


class FinancialReport(BaseModel):
    usd: CurrencySummarySchema
    lrd: CurrencySummarySchema
    combined: CurrencySummarySchema


class LoanDistribution(BaseModel):
    active: int
    pending: int
    overdue: int
    completed: int


class CurrencyPortfolio(BaseModel):
    portfolio_value: Decimal
    outstanding_loans: Decimal
    total_loans: Decimal
    total_collections: Decimal


class PortfolioReport(BaseModel):
    distribution: LoanDistribution
    total_clients: int
    usd: CurrencyPortfolio
    lrd: CurrencyPortfolio
    # Display-only sums across currencies
    portfolio_value: Decimal
    total_collections: Decimal


class RevenueSection(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_revenue: Decimal
    loan_revenue: Decimal
    savings_revenue: Decimal
    fees_revenue: Decimal
    revenue_by_source: Dict[str, Decimal]


class RevenueLine(BaseModel):
    """Single revenue entry in the detail list"""

    model_config = ConfigDict(from_attributes=True)

    amount: Decimal
    currency: Currency
    source: str
    description: Optional[str] = None
    revenue_date: Optional[date] = None


class RevenueReport(BaseModel):
    usd: RevenueSection
    lrd: RevenueSection
    combined: RevenueSection
    count: int
    revenues: List[RevenueLine]


class PerformanceReport(BaseModel):
    par: Decimal
    default_rate: Decimal
    collection_efficiency: Decimal
    average_loan_size: Decimal
    active_loans: int
    overdue_loans: int
    portfolio_value: Decimal
    total_collections: Decimal


class ReportBundle(BaseModel):
    """Everything one refresh produces, tagged with the caller's generation token"""

    generation: int
    financial: FinancialReport
    portfolio: PortfolioReport
    revenue: RevenueReport
    performance: PerformanceReport
