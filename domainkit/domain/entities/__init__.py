"""Domain entities package."""

from domainkit.domain.entities.base import Entity, EntityFactory, HistoryEntry, entity

__all__ = [
    "Entity",
    "EntityFactory",
    "HistoryEntry",
    "entity",
]
