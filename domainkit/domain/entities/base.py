"""
Entity factory.

Entities in Domain-Driven Design are:
1. Defined by their identity, not their attributes
2. Mutable - their state can change over time
3. Have a lifecycle - they can be created, updated, and deleted
4. Encapsulate domain logic and business rules

State changes go through :meth:`EntityFactory.update`, which re-validates
the merged state and, for historized entities, records the previous state.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from domainkit.core.config import get_settings
from domainkit.core.logging import get_logger
from domainkit.domain.base import (
    MethodsFactory,
    build_methods,
    require_extension_arguments,
    require_factory_arguments,
    to_json,
)
from domainkit.domain.exceptions import ConfigurationError, ValidationError
from domainkit.domain.schema import Schema, fields_of, schema_fields

logger = get_logger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """
    Snapshot of an entity taken right before an update.

    Attributes:
        timestamp: When the update was applied (UTC)
        state: Field values the entity held before the update
    """

    timestamp: datetime
    state: Mapping[str, Any]

    def get(self, field: str, default: Any = None) -> Any:
        return self.state.get(field, default)


class Entity:
    """
    Base class of every generated entity type.

    Fields are exposed as attributes but can only be changed through the
    owning factory's ``update``, which keeps every state validated.
    """

    __slots__ = ("_fields", "_history")

    _name = "Entity"
    _identity = "id"

    def __init__(self, fields: Mapping[str, Any], historize: bool = False) -> None:
        object.__setattr__(self, "_fields", dict(fields))
        object.__setattr__(self, "_history", [] if historize else None)

    def __getattr__(self, item: str) -> Any:
        if item.startswith("_"):
            raise AttributeError(item)
        try:
            return self._fields[item]
        except KeyError:
            raise AttributeError(f"{self._name} has no field {item!r}") from None

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(
            f"cannot assign to field {key!r} of {self._name}: use the factory's update()"
        )

    def __delattr__(self, key: str) -> None:
        raise AttributeError(f"cannot delete field {key!r} of {self._name}")

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self._fields})

    @property
    def identity_value(self) -> Any:
        """Value of the identity field."""
        return self._fields[self._identity]

    @property
    def history(self) -> tuple[HistoryEntry, ...] | None:
        """
        Pre-update snapshots, oldest first.

        Returns:
            Tuple of history entries, or None if the entity is not historized
        """
        if self._history is None:
            return None
        return tuple(self._history)

    def equals(self, other: Any) -> bool:
        """
        Compare this entity with another.

        Entities are equal when their identity values are equal, whatever
        their other fields hold.
        """
        if other is None:
            return False

        if self is other:
            return True

        if not isinstance(other, Entity):
            return False

        return self.identity_value == other.identity_value

    def to_string(self) -> str:
        return f"{self._name}({to_json(self._fields)})"

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the current fields."""
        return dict(self._fields)

    def _apply(self, fields: Mapping[str, Any]) -> None:
        if self._history is not None:
            self._history.append(
                HistoryEntry(
                    timestamp=datetime.now(UTC),
                    state=MappingProxyType(dict(self._fields)),
                )
            )
        self._fields.clear()
        self._fields.update(fields)

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self.identity_value)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{self._name}({self._identity}={self.identity_value!r})"


class EntityFactory:
    """
    Reusable blueprint producing validated, identity-compared entities.

    Attributes:
        name: Name of the entity type
        schema: Schema every state goes through
        identity: Name of the identity field
        historize: Whether updates are recorded in the entity history
    """

    def __init__(
        self,
        name: str,
        schema: Any,
        identity: str,
        methods_factory: MethodsFactory,
        historize: bool | None = None,
    ) -> None:
        require_factory_arguments("Entity", name, schema, methods_factory)
        if not identity or not isinstance(identity, str):
            raise ConfigurationError(f"Identity field is required for entity {name}")

        self._name = name
        self._schema = Schema.of(schema)
        self._identity = identity
        self._methods_factory = methods_factory
        self._historize = (
            get_settings().default_historize if historize is None else bool(historize)
        )

        declared = schema_fields(self._schema)
        if declared and identity not in declared:
            raise ConfigurationError(
                f"Identity field {identity!r} is not declared by the {name} schema"
            )

        namespace = build_methods(name, methods_factory(self))
        self._instance_type: type[Entity] = type(
            name,
            (Entity,),
            {
                "__slots__": (),
                "__module__": __name__,
                "_name": name,
                "_identity": identity,
                **namespace,
            },
        )

        logger.debug(
            f"Entity factory built: name={name}, identity={identity}, "
            f"historize={self._historize}, methods={sorted(namespace)}"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> Any:
        return self._schema

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def historize(self) -> bool:
        return self._historize

    @property
    def instance_type(self) -> type[Entity]:
        """Class generated for this factory's instances."""
        return self._instance_type

    def create(self, data: Any) -> Entity:
        """
        Create a new entity.

        Args:
            data: Raw input; an entity is unwrapped to its fields first

        Returns:
            New entity, with an empty history when historized

        Raises:
            ValidationError: If the data does not satisfy the schema
            ConfigurationError: If the validated data has no identity field
        """
        payload = data.to_dict() if isinstance(data, Entity) else data
        fields = self._validate(payload, data)

        if self._identity not in fields:
            raise ConfigurationError(
                f"Identity field {self._identity!r} is missing from {self._name} data"
            )

        return self._instance_type(fields, historize=self._historize)

    def update(
        self,
        entity: Entity,
        updates: Mapping[str, Any] | None = None,
        **changes: Any,
    ) -> Entity:
        """
        Update an entity in place while preserving its identity.

        The changes are merged over the current fields and the result is
        validated as a whole. Nothing is applied if validation fails.

        Args:
            entity: Entity to update
            updates: Mapping of field changes
            **changes: Field changes given as keyword arguments

        Returns:
            The same entity instance

        Raises:
            ValidationError: If the merged state does not satisfy the schema
            ConfigurationError: If the identity would change or ``entity``
                is not an entity
        """
        if not isinstance(entity, Entity):
            raise ConfigurationError(
                f"Cannot update {self._name}: expected an entity, got {type(entity).__name__}"
            )
        if updates is not None and not isinstance(updates, Mapping):
            raise ConfigurationError(
                f"Updates for {self._name} must be a mapping, got {type(updates).__name__}"
            )

        changes = {**(updates or {}), **changes}
        current_identity = entity.identity_value

        # identity is compared after coercion, so "1" restates an int id of 1
        merged = {**entity.to_dict(), **changes}
        fields = self._validate(merged, merged)
        if fields.get(self._identity) != current_identity:
            raise ConfigurationError(
                f"Identity field {self._identity!r} of {self._name} cannot be changed"
            )

        entity._apply(fields)

        logger.debug(
            f"Entity updated: name={self._name}, {self._identity}={current_identity!r}, "
            f"fields={sorted(changes)}"
        )
        return entity

    def extend(
        self,
        *,
        name: str,
        methods_factory: MethodsFactory,
        schema: Callable[[Any], Any] | None = None,
        identity: str | None = None,
        historize: bool | None = None,
    ) -> "EntityFactory":
        """
        Derive a new entity factory from this one.

        ``identity`` and ``historize`` are inherited unless overridden.

        Raises:
            ConfigurationError: If the name is empty or a callable is missing
        """
        require_extension_arguments("entity", name, methods_factory, schema)

        extended_schema = schema(self._schema) if schema is not None else self._schema
        parent_methods = dict(self._methods_factory(self))

        def combined_methods_factory(factory: "EntityFactory") -> dict[str, Any]:
            return {**parent_methods, **methods_factory(factory)}

        logger.debug(f"Extending entity {self._name} as {name}")

        return EntityFactory(
            name,
            extended_schema,
            identity or self._identity,
            combined_methods_factory,
            self._historize if historize is None else historize,
        )

    def _validate(self, payload: Any, data: Any) -> dict[str, Any]:
        try:
            validated = self._schema.parse(payload)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(self._name, e, data) from e
        return fields_of(validated)

    def __repr__(self) -> str:
        return (
            f"EntityFactory(name={self._name!r}, identity={self._identity!r}, "
            f"historize={self._historize})"
        )


def entity(
    *,
    name: str,
    schema: Any,
    identity: str,
    methods_factory: MethodsFactory,
    historize: bool | None = None,
) -> EntityFactory:
    """
    Create an entity factory.

    Args:
        name: Name of the entity
        schema: Schema or pydantic annotation used for validation
        identity: Field name that serves as the identity
        methods_factory: Called with the factory, returns the custom methods
            as ``{name: function(self, ...)}``
        historize: Whether to track state changes (defaults to the
            ``default_historize`` setting)

    Returns:
        EntityFactory exposing create, update, schema, identity and extend

    Raises:
        ConfigurationError: If a required argument is missing or malformed
    """
    return EntityFactory(name, schema, identity, methods_factory, historize)
