"""Money value object."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, Field

from domainkit.domain.exceptions import (
    CurrencyMismatchError,
    InvalidMoneyError,
    ValidationError,
)
from domainkit.domain.schema import Schema
from domainkit.domain.value_objects.base import ValueObjectFactory, value_object

CURRENCY_PATTERN = r"^[A-Z]{3}$"


def _round_amount(amount: Decimal) -> Decimal:
    """Round to 2 decimal places (standard for most currencies)."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


MONEY_SCHEMA = Schema.object(
    "Money",
    amount=(Annotated[Decimal, Field(gt=0), AfterValidator(_round_amount)], ...),
    currency=(Annotated[str, Field(pattern=CURRENCY_PATTERN)], ...),
)


def _money_methods(factory: ValueObjectFactory) -> dict[str, Any]:
    def _validate_same_currency(self, other) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def _with_amount(self, amount: Decimal):
        try:
            return factory.create({"amount": amount, "currency": self.currency})
        except ValidationError as e:
            raise InvalidMoneyError(f"{amount} {self.currency}") from e

    def add(self, other):
        """
        Add two money amounts (must have same currency).

        Raises:
            CurrencyMismatchError: If currencies don't match
        """
        _validate_same_currency(self, other)
        return _with_amount(self, self.amount + other.amount)

    def subtract(self, other):
        """
        Subtract other money amount from this one (must have same currency).

        Raises:
            CurrencyMismatchError: If currencies don't match
            InvalidMoneyError: If the difference is not a positive amount
        """
        _validate_same_currency(self, other)
        return _with_amount(self, self.amount - other.amount)

    def multiply(self, multiplier: int | float | Decimal):
        if not isinstance(multiplier, Decimal):
            multiplier = Decimal(str(multiplier))
        return _with_amount(self, self.amount * multiplier)

    def is_greater_than(self, other) -> bool:
        _validate_same_currency(self, other)
        return self.amount > other.amount

    return {
        "add": add,
        "subtract": subtract,
        "multiply": multiply,
        "is_greater_than": is_greater_than,
    }


Money = value_object(
    name="Money",
    schema=MONEY_SCHEMA,
    methods_factory=_money_methods,
)
