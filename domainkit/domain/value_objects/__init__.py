"""Domain value objects package."""

from domainkit.domain.value_objects.base import ValueObject, ValueObjectFactory, value_object
from domainkit.domain.value_objects.money import Money
from domainkit.domain.value_objects.primitives import (
    Boolean,
    IntegerNumber,
    NonEmptyString,
    Number,
    PositiveNumber,
    String,
)
from domainkit.domain.value_objects.schema import (
    generic_value_object_schema,
    specific_value_object_schema,
)

__all__ = [
    # Factory
    "ValueObject",
    "ValueObjectFactory",
    "value_object",
    # Nesting schemas
    "generic_value_object_schema",
    "specific_value_object_schema",
    # Built-in value objects
    "Boolean",
    "IntegerNumber",
    "Money",
    "NonEmptyString",
    "Number",
    "PositiveNumber",
    "String",
]
