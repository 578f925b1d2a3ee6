"""Loan terms calculator - upfront fee, disbursed principal and default charges"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from microfinance_core.config import settings
from microfinance_core.domain.exceptions import ValidationError
from microfinance_core.domain.loan_types import LOAN_TYPES, parse_loan_type
from microfinance_core.domain.models import LoanApplication, LoanTerms, LoanTypeConfig
from microfinance_core.utils.money import HUNDRED, ZERO, parse_money, to_money

logger = logging.getLogger(__name__)

PERCENTAGE_FIELDS = ("interest_rate", "upfront_percentage", "default_charges_percentage")


def recalc_upfront(amount: Any, upfront_percentage: Any) -> Decimal:
    """Upfront fee deducted before disbursement, zero when either input is missing"""
    amount_value = parse_money(amount)
    percentage = parse_money(upfront_percentage)
    if amount_value is None or percentage is None:
        return ZERO
    return amount_value * percentage / HUNDRED


def recalc_principal(amount: Any, upfront_amount: Any) -> Decimal:
    """Amount actually disbursed; never negative"""
    return max(ZERO, to_money(amount) - to_money(upfront_amount))


def recalc_default_charges(principal: Any, percentage: Any) -> Decimal:
    """Default charge on the principal, zero when no percentage is set"""
    pct = parse_money(percentage)
    if pct is None:
        return ZERO
    return to_money(principal) * pct / HUNDRED


def apply_loan_type(amount: Any, config: LoanTypeConfig) -> LoanTerms:
    """
    Reset pricing fields from a loan type and recompute the derived amounts.

    Rate, upfront percentage and interest method always come from the config.
    Upfront amount and principal are recomputed only when amount is numeric;
    otherwise both are zero.
    """
    upfront_amount = ZERO
    principal = ZERO
    if parse_money(amount) is not None:
        upfront_amount = recalc_upfront(amount, config.upfront_percentage)
        principal = recalc_principal(amount, upfront_amount)

    return LoanTerms(
        interest_rate=config.interest_rate,
        upfront_percentage=config.upfront_percentage,
        interest_method=config.interest_method,
        upfront_amount=upfront_amount,
        principal=principal,
    )


def validate_application(
    application: LoanApplication,
    min_purpose_length: Optional[int] = None,
) -> Dict[str, str]:
    """
    Collect field-level errors for a loan application draft.

    Returns an empty dict when the draft is acceptable. Rules:
    - amount must be a positive number
    - term_months must be an integer of at least 1
    - purpose must have at least min_purpose_length characters once trimmed
    - percentage fields, when present, must lie in [0, 100]
    """
    if min_purpose_length is None:
        min_purpose_length = settings.min_purpose_length

    errors: Dict[str, str] = {}

    amount = parse_money(application.amount)
    if amount is None or amount <= 0:
        errors["amount"] = "Valid loan amount is required"

    term = application.term_months
    if isinstance(term, bool) or not isinstance(term, int) or term < 1:
        errors["term_months"] = "Valid loan term is required"

    purpose = (application.purpose or "").strip()
    if len(purpose) < min_purpose_length:
        errors["purpose"] = f"Loan purpose is required (minimum {min_purpose_length} characters)"

    for name in PERCENTAGE_FIELDS:
        raw = getattr(application, name)
        if raw is None:
            continue
        value = parse_money(raw)
        if value is None or value < 0 or value > HUNDRED:
            errors[name] = "Must be between 0 and 100"

    return errors


def ensure_valid(application: LoanApplication) -> None:
    """Raise ValidationError carrying every field error found"""
    errors = validate_application(application)
    if errors:
        raise ValidationError("Loan application is invalid", errors)


def compute_terms(application: LoanApplication) -> LoanTerms:
    """
    Main entry point: validate a draft and derive its complete pricing.

    Validation runs first so no partially derived terms are ever returned.
    Per-application rate and upfront percentage override the loan type
    defaults when given. Default charges apply only to loan types that carry
    them; for the rest the amount is zero and the percentage unset.
    """
    loan_type = parse_loan_type(application.loan_type)
    config = LOAN_TYPES[loan_type]
    ensure_valid(application)

    interest_rate = (
        parse_money(application.interest_rate)
        if application.interest_rate is not None
        else config.interest_rate
    )
    upfront_percentage = (
        parse_money(application.upfront_percentage)
        if application.upfront_percentage is not None
        else config.upfront_percentage
    )

    upfront_amount = recalc_upfront(application.amount, upfront_percentage)
    principal = recalc_principal(application.amount, upfront_amount)

    default_pct: Optional[Decimal] = None
    default_amount = ZERO
    if config.has_default_charges:
        default_pct = parse_money(application.default_charges_percentage)
        default_amount = recalc_default_charges(principal, default_pct)

    logger.debug(
        "Computed loan terms",
        extra={"loan_type": loan_type.value, "principal": str(principal)},
    )

    return LoanTerms(
        interest_rate=interest_rate,
        upfront_percentage=upfront_percentage,
        interest_method=config.interest_method,
        upfront_amount=upfront_amount,
        principal=principal,
        default_charges_percentage=default_pct,
        default_charges_amount=default_amount,
    )
