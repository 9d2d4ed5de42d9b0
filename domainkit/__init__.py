"""domainkit: factories for DDD value objects and entities backed by pydantic schemas."""

from domainkit.domain.entities import Entity, EntityFactory, HistoryEntry, entity
from domainkit.domain.exceptions import ConfigurationError, DomainException, ValidationError
from domainkit.domain.schema import Schema
from domainkit.domain.value_objects import (
    ValueObject,
    ValueObjectFactory,
    generic_value_object_schema,
    specific_value_object_schema,
    value_object,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DomainException",
    "Entity",
    "EntityFactory",
    "HistoryEntry",
    "Schema",
    "ValidationError",
    "ValueObject",
    "ValueObjectFactory",
    "entity",
    "generic_value_object_schema",
    "specific_value_object_schema",
    "value_object",
]
