"""
Schema adapter over pydantic.

Factories only rely on a small contract: ``parse(data)`` returning the
validated value or raising ``pydantic.ValidationError``. :class:`Schema`
provides that contract for any pydantic-validatable annotation (a
``BaseModel`` subclass, a plain type such as ``str`` or an ``Annotated``
type carrying ``Field`` constraints) and adds the introspection needed for
primitive detection plus a few transformers used when extending factories.

Example:
    >>> money = Schema.object(
    ...     "Money",
    ...     amount=(Decimal, Field(gt=0)),
    ...     currency=(str, Field(pattern=r"^[A-Z]{3}$")),
    ... )
    >>> money.parse({"amount": "1.50", "currency": "USD"}).amount
    Decimal('1.50')
"""

import types
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import AfterValidator, BaseModel, Field, TypeAdapter, create_model

from domainkit.domain.exceptions import ConfigurationError

STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"
OBJECT = "object"
OTHER = "other"

PRIMITIVE_KINDS = frozenset({STRING, NUMBER, BOOLEAN})

# Field under which non-object validated values are stored
VALUE_FIELD = "value"


class Schema:
    """
    Validation contract backed by a pydantic ``TypeAdapter``.

    Schemas are immutable: every transformer returns a new Schema and
    leaves the receiver untouched, so a parent factory keeps its schema
    when a child factory derives a stricter one.
    """

    def __init__(self, annotation: Any, name: str | None = None) -> None:
        if isinstance(annotation, Schema):
            annotation = annotation.annotation
        self._annotation = annotation
        self._adapter = TypeAdapter(annotation)
        self._name = name

    @classmethod
    def of(cls, schema: Any) -> Any:
        """
        Coerce ``schema`` to something exposing ``parse``.

        Schema instances and duck-typed objects with a callable ``parse``
        are returned unchanged; anything else is treated as a pydantic
        annotation.
        """
        if isinstance(schema, Schema):
            return schema
        if not isinstance(schema, type) and callable(getattr(schema, "parse", None)):
            return schema
        return cls(schema)

    @classmethod
    def object(cls, name: str, /, **fields: Any) -> "Schema":
        """
        Build an object schema from field definitions.

        Args:
            name: Name of the generated pydantic model
            **fields: Either an annotation (required field) or an
                ``(annotation, default_or_field_info)`` tuple

        Returns:
            Schema wrapping the generated model
        """
        model = create_model(name, **_field_definitions(fields))
        return cls(model, name=name)

    @property
    def annotation(self) -> Any:
        """Underlying annotation, usable as a field type in pydantic models."""
        return self._annotation

    @property
    def name(self) -> str:
        if self._name:
            return self._name
        base = _unwrap(self._annotation)
        return getattr(base, "__name__", repr(base))

    @property
    def kind(self) -> str:
        """Base kind of the schema: string, number, boolean, object or other."""
        return _kind_of(_unwrap(self._annotation))

    @property
    def fields(self) -> tuple[str, ...]:
        """Declared field names for object schemas, empty otherwise."""
        base = _unwrap(self._annotation)
        if _kind_of(base) == OBJECT:
            return tuple(base.model_fields)
        return ()

    def parse(self, data: Any) -> Any:
        """
        Validate ``data``.

        Raises:
            pydantic.ValidationError: If the data does not satisfy the schema
        """
        return self._adapter.validate_python(data)

    def constrain(self, **constraints: Any) -> "Schema":
        """Return a schema with extra ``Field`` constraints (``gt``, ``max_length``...)."""
        return Schema(Annotated[self._annotation, Field(**constraints)], name=self._name)

    def refine(self, predicate: Callable[[Any], bool], message: str) -> "Schema":
        """
        Return a schema that additionally requires ``predicate(value)``.

        Args:
            predicate: Check run on the already validated value
            message: Error message reported when the check fails
        """

        def check(value: Any) -> Any:
            if not predicate(value):
                raise ValueError(message)
            return value

        return Schema(Annotated[self._annotation, AfterValidator(check)], name=self._name)

    def extend(self, name: str | None = None, /, **fields: Any) -> "Schema":
        """
        Return an object schema with additional or overridden fields.

        Refinements applied on top of the object schema are kept.

        Raises:
            ConfigurationError: If this is not an object schema
        """
        base = _unwrap(self._annotation)
        if _kind_of(base) != OBJECT:
            raise ConfigurationError(f"Only object schemas can be extended, got {self.name}")

        model_name = name or base.__name__
        model = create_model(model_name, __base__=base, **_field_definitions(fields))

        metadata = get_args(self._annotation)[1:] if get_origin(self._annotation) is Annotated else ()
        annotation = Annotated[(model, *metadata)] if metadata else model
        return Schema(annotation, name=model_name)

    def __repr__(self) -> str:
        return f"Schema({self.name})"


def fields_of(validated: Any) -> dict[str, Any]:
    """
    Turn a validated value into the field mapping stored on instances.

    Models contribute their declared (and extra) fields, mappings their
    items; any other value is stored under ``value``.
    """
    if isinstance(validated, BaseModel):
        fields = {name: getattr(validated, name) for name in type(validated).model_fields}
        if validated.model_extra:
            fields.update(validated.model_extra)
        return fields
    if isinstance(validated, Mapping):
        return dict(validated)
    return {VALUE_FIELD: validated}


def schema_kind(schema: Any) -> str:
    """Base kind of any schema, ``other`` for duck-typed schemas without one."""
    return getattr(schema, "kind", OTHER)


def schema_fields(schema: Any) -> tuple[str, ...]:
    return tuple(getattr(schema, "fields", ()))


def _unwrap(annotation: Any) -> Any:
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def _kind_of(annotation: Any) -> str:
    if get_origin(annotation) in (Union, types.UnionType):
        kinds = {_kind_of(_unwrap(member)) for member in get_args(annotation)}
        return kinds.pop() if len(kinds) == 1 else OTHER

    # parametrized generics such as list[int] are never primitive
    if get_origin(annotation) is not None or not isinstance(annotation, type):
        return OTHER
    # bool is a subclass of int
    if issubclass(annotation, bool):
        return BOOLEAN
    if issubclass(annotation, str):
        return STRING
    if issubclass(annotation, (int, float, Decimal)):
        return NUMBER
    if issubclass(annotation, BaseModel):
        return OBJECT
    return OTHER


def _field_definitions(fields: Mapping[str, Any]) -> dict[str, Any]:
    definitions = {}
    for field_name, definition in fields.items():
        if isinstance(definition, tuple):
            annotation, default = definition
        else:
            annotation, default = definition, ...
        if isinstance(annotation, Schema):
            annotation = annotation.annotation
        definitions[field_name] = (annotation, default)
    return definitions
