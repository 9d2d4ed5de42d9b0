"""
Primitive value objects.

Ready-made wrappers around strings, numbers and booleans. Custom value
objects usually extend one of these rather than starting from scratch:

    >>> Percentage = Number.extend(
    ...     name="Percentage",
    ...     schema=lambda base: base.refine(lambda v: 0 <= v <= 100, "Out of range"),
    ...     methods_factory=lambda factory: {},
    ... )
"""

from decimal import Decimal
from typing import Any

from domainkit.domain.schema import Schema
from domainkit.domain.value_objects.base import ValueObjectFactory, value_object


def _raw(value: Any) -> Any:
    value_of = getattr(value, "value_of", None)
    return value_of() if callable(value_of) else value


def _string_methods(factory: ValueObjectFactory) -> dict[str, Any]:
    def length(self) -> int:
        return len(self.value)

    def is_empty(self) -> bool:
        return not self.value

    def upper(self):
        return factory.create(self.value.upper())

    def lower(self):
        return factory.create(self.value.lower())

    return {"length": length, "is_empty": is_empty, "upper": upper, "lower": lower}


def _number_methods(factory: ValueObjectFactory) -> dict[str, Any]:
    def add(self, other):
        return factory.create(self.value + _raw(other))

    def subtract(self, other):
        return factory.create(self.value - _raw(other))

    def multiply(self, other):
        return factory.create(self.value * _raw(other))

    def is_zero(self) -> bool:
        return self.value == 0

    def is_positive(self) -> bool:
        return self.value > 0

    def is_negative(self) -> bool:
        return self.value < 0

    return {
        "add": add,
        "subtract": subtract,
        "multiply": multiply,
        "is_zero": is_zero,
        "is_positive": is_positive,
        "is_negative": is_negative,
    }


def _boolean_methods(factory: ValueObjectFactory) -> dict[str, Any]:
    def negate(self):
        return factory.create(not self.value)

    return {"negate": negate}


String = value_object(
    name="String",
    schema=str,
    methods_factory=_string_methods,
)

NonEmptyString = String.extend(
    name="NonEmptyString",
    schema=lambda base: base.constrain(min_length=1),
    methods_factory=_string_methods,
)

Number = value_object(
    name="Number",
    schema=Schema(int | float | Decimal, name="Number"),
    methods_factory=_number_methods,
)

IntegerNumber = Number.extend(
    name="IntegerNumber",
    schema=lambda base: base.refine(
        lambda v: float(v).is_integer(), "Input should be an integer"
    ),
    methods_factory=_number_methods,
)

PositiveNumber = Number.extend(
    name="PositiveNumber",
    schema=lambda base: base.refine(lambda v: v > 0, "Input should be greater than 0"),
    methods_factory=_number_methods,
)

Boolean = value_object(
    name="Boolean",
    schema=bool,
    methods_factory=_boolean_methods,
)
