"""Domain exceptions package."""

from domainkit.domain.exceptions.base import DomainException
from domainkit.domain.exceptions.factory_exceptions import (
    ConfigurationError,
    ValidationError,
)
from domainkit.domain.exceptions.money_exceptions import (
    CurrencyMismatchError,
    InvalidMoneyError,
    MoneyDomainException,
)

__all__ = [
    # Base
    "DomainException",
    # Factory exceptions
    "ConfigurationError",
    "ValidationError",
    # Money exceptions
    "MoneyDomainException",
    "CurrencyMismatchError",
    "InvalidMoneyError",
]
