"""
Value object factory.

Value objects in Domain-Driven Design are:
1. Defined by their attributes, not an identity
2. Immutable - any modification creates a new instance
3. Comparable by value - two instances with the same attributes are equal

:func:`value_object` turns a schema plus a methods factory into a
:class:`ValueObjectFactory`. Every factory owns a generated subclass of
:class:`ValueObject` carrying the custom methods, so instances stay plain
Python objects with attribute access to their validated fields.

Example:
    >>> Email = value_object(
    ...     name="Email",
    ...     schema=Annotated[str, Field(pattern=r"^[^@]+@[^@]+$")],
    ...     methods_factory=lambda factory: {
    ...         "domain": lambda self: self.value.split("@")[1],
    ...     },
    ... )
    >>> Email.create("ada@example.com").domain()
    'example.com'
"""

from collections.abc import Callable, Mapping
from dataclasses import FrozenInstanceError
from numbers import Number
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from domainkit.core.logging import get_logger
from domainkit.domain.base import (
    MethodsFactory,
    build_methods,
    require_extension_arguments,
    require_factory_arguments,
    to_json,
)
from domainkit.domain.exceptions import ValidationError
from domainkit.domain.schema import PRIMITIVE_KINDS, VALUE_FIELD, Schema, fields_of, schema_kind

logger = get_logger(__name__)

# Field types a single-field composite unwraps to in value_of()
SCALAR_TYPES = (str, bytes, Number)


class ValueObject:
    """
    Base class of every generated value object type.

    Fields live in a read-only mapping and are exposed as attributes.
    Assigning or deleting an attribute raises ``FrozenInstanceError``.
    """

    __slots__ = ("_fields",)

    _name = "ValueObject"
    _primitive = False

    def __init__(self, fields: Mapping[str, Any]) -> None:
        object.__setattr__(self, "_fields", MappingProxyType(dict(fields)))

    def __getattr__(self, item: str) -> Any:
        if item.startswith("_"):
            raise AttributeError(item)
        try:
            return self._fields[item]
        except KeyError:
            raise AttributeError(f"{self._name} has no field {item!r}") from None

    def __setattr__(self, key: str, value: Any) -> None:
        raise FrozenInstanceError(f"cannot assign to field {key!r}: {self._name} is immutable")

    def __delattr__(self, key: str) -> None:
        raise FrozenInstanceError(f"cannot delete field {key!r}: {self._name} is immutable")

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self._fields})

    def value_of(self) -> Any:
        """
        Unwrapped value of this value object.

        Returns:
            The primitive for primitive wrappers (all validated fields as a
            dict when primitive semantics were forced on an object schema),
            the single field value for objects holding exactly one scalar
            field, otherwise ``self``
        """
        if self._primitive:
            if self._fields.keys() == {VALUE_FIELD}:
                return self._fields[VALUE_FIELD]
            return self.to_dict()

        if len(self._fields) == 1:
            (value,) = self._fields.values()
            if isinstance(value, SCALAR_TYPES):
                return value

        return self

    def equals(self, other: Any) -> bool:
        """
        Compare this value object with another for equality.

        Primitive wrappers compare their unwrapped values (a raw primitive
        is accepted as ``other``). Other value objects are equal when they
        hold the same field names with equal values. Booleans never equal
        numbers.
        """
        if other is None:
            return False

        if self is other:
            return True

        if self._primitive:
            value_of = getattr(other, "value_of", None)
            return _strictly_equal(self.value_of(), value_of() if callable(value_of) else other)

        if not isinstance(other, ValueObject):
            return False

        return _strictly_equal(self.to_dict(), other.to_dict())

    def to_string(self) -> str:
        if self._primitive:
            value = self.value_of()
            if isinstance(value, Mapping):
                return f"{self._name}({to_json(value)})"
            return str(value)
        return f"{self._name}({to_json(self._fields)})"

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the validated fields."""
        return dict(self._fields)

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    def __hash__(self) -> int:
        if self._primitive and self._fields.keys() == {VALUE_FIELD}:
            return _hash_value(self._fields[VALUE_FIELD])
        # unhashable field values (lists, models) only contribute their name
        return hash(tuple((key, _hash_value(self._fields[key])) for key in sorted(self._fields)))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in self._fields.items())
        return f"{self._name}({fields})"

    def __copy__(self) -> "ValueObject":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "ValueObject":
        return self


class ValueObjectFactory:
    """
    Reusable blueprint producing validated, immutable value objects.

    Attributes:
        name: Name of the value object type
        schema: Schema every input goes through
        is_primitive: Whether instances wrap a single primitive value
    """

    def __init__(
        self,
        name: str,
        schema: Any,
        methods_factory: MethodsFactory,
        override_is_primitive: bool | None = None,
    ) -> None:
        require_factory_arguments("Value object", name, schema, methods_factory)

        self._name = name
        self._schema = Schema.of(schema)
        self._methods_factory = methods_factory
        self._override_is_primitive = override_is_primitive
        self._is_primitive = (
            schema_kind(self._schema) in PRIMITIVE_KINDS or bool(override_is_primitive)
        )

        # Behavior is built once the factory handle exists, so methods can
        # call back into create() or extend()
        namespace = build_methods(name, methods_factory(self))
        self._instance_type: type[ValueObject] = type(
            name,
            (ValueObject,),
            {
                "__slots__": (),
                "__module__": __name__,
                "_name": name,
                "_primitive": self._is_primitive,
                **namespace,
            },
        )

        logger.debug(
            f"Value object factory built: name={name}, primitive={self._is_primitive}, "
            f"methods={sorted(namespace)}"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> Any:
        return self._schema

    @property
    def is_primitive(self) -> bool:
        return self._is_primitive

    @property
    def instance_type(self) -> type[ValueObject]:
        """Class generated for this factory's instances."""
        return self._instance_type

    def create(self, data: Any) -> ValueObject:
        """
        Create a new value object.

        Args:
            data: Raw input; a value object is unwrapped before validation

        Returns:
            New immutable value object

        Raises:
            ValidationError: If the data does not satisfy the schema
        """
        payload = data
        if isinstance(data, ValueObject):
            payload = data.value_of() if data._primitive else data.to_dict()

        try:
            validated = self._schema.parse(payload)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(self._name, e, data) from e

        return self._instance_type(fields_of(validated))

    def extend(
        self,
        *,
        name: str,
        methods_factory: MethodsFactory,
        schema: Callable[[Any], Any] | None = None,
    ) -> "ValueObjectFactory":
        """
        Derive a new value object factory from this one.

        Args:
            name: Name of the extended value object
            methods_factory: Methods of the extended value object; they
                override the parent's methods on name collision
            schema: Optional function transforming the parent schema

        Returns:
            A new, independent factory

        Raises:
            ConfigurationError: If the name is empty or a callable is missing
        """
        require_extension_arguments("value object", name, methods_factory, schema)

        extended_schema = schema(self._schema) if schema is not None else self._schema
        parent_methods = dict(self._methods_factory(self))

        def combined_methods_factory(factory: "ValueObjectFactory") -> dict[str, Any]:
            return {**parent_methods, **methods_factory(factory)}

        logger.debug(f"Extending value object {self._name} as {name}")

        return ValueObjectFactory(
            name,
            extended_schema,
            combined_methods_factory,
            self._override_is_primitive,
        )

    def __repr__(self) -> str:
        return f"ValueObjectFactory(name={self._name!r}, primitive={self._is_primitive})"


def value_object(
    *,
    name: str,
    schema: Any,
    methods_factory: MethodsFactory,
    override_is_primitive: bool | None = None,
) -> ValueObjectFactory:
    """
    Create a value object factory.

    Args:
        name: Name of the value object
        schema: Schema or pydantic annotation used for validation
        methods_factory: Called with the factory, returns the custom methods
            as ``{name: function(self, ...)}``
        override_is_primitive: Force primitive-wrapper semantics

    Returns:
        ValueObjectFactory exposing create, schema and extend

    Raises:
        ConfigurationError: If a required argument is missing or malformed
    """
    return ValueObjectFactory(name, schema, methods_factory, override_is_primitive)


def _strictly_equal(left: Any, right: Any) -> bool:
    # True == 1 in Python; a boolean only ever equals another boolean
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(
            _strictly_equal(left[key], right[key]) for key in left
        )
    return left == right


def _hash_value(value: Any) -> int:
    try:
        return hash(value)
    except TypeError:
        return 0
