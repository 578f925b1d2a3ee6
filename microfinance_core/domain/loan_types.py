"""Loan type catalogue with fixed rates and upfront percentages"""

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Union

from microfinance_core.domain.exceptions import UnknownLoanTypeError
from microfinance_core.domain.models import InterestMethod, LoanType, LoanTypeConfig

LOAN_TYPES: Mapping[LoanType, LoanTypeConfig] = MappingProxyType(
    {
        LoanType.PERSONAL: LoanTypeConfig(
            name="Personal Loan",
            interest_rate=Decimal("0"),  # all charged upfront
            upfront_percentage=Decimal("10"),
            interest_method=InterestMethod.DECLINING_BALANCE,
            has_default_charges=False,
        ),
        LoanType.EXCESS: LoanTypeConfig(
            name="Excess Loan",
            interest_rate=Decimal("0"),
            upfront_percentage=Decimal("10"),
            interest_method=InterestMethod.DECLINING_BALANCE,
            has_default_charges=False,
        ),
        LoanType.BUSINESS: LoanTypeConfig(
            name="Business Loan",
            interest_rate=Decimal("5"),
            upfront_percentage=Decimal("10"),
            interest_method=InterestMethod.DECLINING_BALANCE,
            has_default_charges=False,
        ),
        LoanType.EMERGENCY: LoanTypeConfig(
            name="Emergency Loan",
            interest_rate=Decimal("16"),
            upfront_percentage=Decimal("2"),
            interest_method=InterestMethod.DECLINING_BALANCE,
            has_default_charges=True,
        ),
        LoanType.MICRO: LoanTypeConfig(
            name="Micro Loan",
            interest_rate=Decimal("12"),  # default, may be overridden per application
            upfront_percentage=Decimal("5"),
            interest_method=InterestMethod.DECLINING_BALANCE,
            has_default_charges=True,
        ),
    }
)

_missing = set(LoanType) - set(LOAN_TYPES)
if _missing:
    raise RuntimeError(f"Loan types without configuration: {sorted(t.value for t in _missing)}")


def parse_loan_type(value: Union[LoanType, str]) -> LoanType:
    """Resolve a loan type name, rejecting anything outside the catalogue"""
    if isinstance(value, LoanType):
        return value
    try:
        return LoanType(str(value).strip().lower())
    except ValueError:
        raise UnknownLoanTypeError(str(value)) from None


def get_loan_type_config(loan_type: Union[LoanType, str]) -> LoanTypeConfig:
    """Look up the configuration for a loan type"""
    return LOAN_TYPES[parse_loan_type(loan_type)]
