"""Money domain exceptions."""

from domainkit.domain.exceptions.base import DomainException


class MoneyDomainException(DomainException):
    """Base exception for money-related domain errors."""


class InvalidMoneyError(MoneyDomainException):
    """Raised when an arithmetic result is not a valid money amount."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Invalid money value: {reason}",
            code="INVALID_MONEY"
        )


class CurrencyMismatchError(MoneyDomainException):
    """Raised when attempting operations with mismatched currencies."""

    def __init__(self, currency1: str, currency2: str):
        super().__init__(
            message=f"Currency mismatch: {currency1} != {currency2}",
            code="CURRENCY_MISMATCH"
        )
