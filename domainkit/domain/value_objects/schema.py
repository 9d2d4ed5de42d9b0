"""
Schemas for nesting value objects inside other schemas.

Value object instances carry no persistent type tag, so membership of a
specific type is checked behaviorally: the candidate is re-created through
the factory and compared with the original.

Example:
    >>> Order = Schema.object("Order", total=specific_value_object_schema(Money))
"""

from collections.abc import Callable
from typing import Annotated, Any

from pydantic import PlainValidator

from domainkit.domain.exceptions import ConfigurationError, DomainException
from domainkit.domain.schema import Schema


def generic_value_object_schema(
    type_name: str = "ValueObject",
    type_check: Callable[[Any], bool] | None = None,
) -> Schema:
    """
    Create a schema accepting any value object.

    Args:
        type_name: Name of the expected value object type, used in errors
        type_check: Optional predicate narrowing the accepted values

    Returns:
        Schema accepting objects exposing a callable ``equals``
    """
    message = f"Expected a {type_name}"

    def validate(value: Any) -> Any:
        is_value_object = value is not None and callable(getattr(value, "equals", None))

        if is_value_object and type_check is not None:
            is_value_object = bool(type_check(value))

        if not is_value_object:
            raise ValueError(message)
        return value

    return Schema(Annotated[Any, PlainValidator(validate)], name=type_name)


def specific_value_object_schema(factory: Any) -> Schema:
    """
    Create a schema accepting instances of one value object factory.

    Args:
        factory: Value object factory exposing ``create``

    Returns:
        Schema accepting values the factory re-creates as equal values

    Raises:
        ConfigurationError: If an invalid value object factory is provided
    """
    if factory is None or isinstance(factory, (str, bytes, int, float, bool)):
        raise ConfigurationError("Invalid value object factory provided")

    if not callable(getattr(factory, "create", None)):
        raise ConfigurationError("Invalid value object factory provided")

    type_name = getattr(factory, "name", None) or "ValueObject"
    primitive = getattr(factory, "is_primitive", True)

    def recreates_equal(value: Any) -> bool:
        try:
            payload = value.value_of()
            to_dict = getattr(value, "to_dict", None)
            if not primitive and callable(to_dict):
                payload = to_dict()
            return bool(factory.create(payload).equals(value))
        except (DomainException, ValueError, TypeError, AttributeError):
            return False

    return generic_value_object_schema(type_name=type_name, type_check=recreates_equal)
