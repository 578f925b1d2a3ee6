"""Domain-specific exceptions"""

from typing import Dict, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input rejected before any derived value was computed.

    ``errors`` maps the offending field name to a message that can be shown
    next to that field.
    """

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def __str__(self) -> str:
        if self.errors:
            fields = ", ".join(f"{k}: {v}" for k, v in self.errors.items())
            return f"{self.message} ({fields})"
        return self.message


class UnknownLoanTypeError(ValidationError):
    """Loan type name is not one of the configured categories"""

    def __init__(self, loan_type: str):
        super().__init__(
            f"Unknown loan type '{loan_type}'",
            {"loan_type": "Unsupported loan type"},
        )
        self.loan_type = loan_type


class CurrencyMismatchError(ValidationError):
    """Payment currency differs from the currency the dues were assigned in"""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Payment currency {actual} does not match dues currency {expected}",
            {"currency": f"Dues are held in {expected}"},
        )
        self.expected = expected
        self.actual = actual
