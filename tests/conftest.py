"""
Pytest configuration and fixtures for domainkit tests.

This module provides:
- Value object factory fixtures
- Entity factory fixtures
"""

from typing import Annotated

import pytest
from pydantic import Field

from domainkit import Schema, entity, value_object


# ============================================================================
# Value Object Fixtures
# ============================================================================
@pytest.fixture
def point_factory():
    """Composite value object with a self-referential method."""

    def methods(factory):
        def move(self, dx, dy):
            return factory.create({"x": self.x + dx, "y": self.y + dy})

        return {"move": move}

    return value_object(
        name="Point",
        schema=Schema.object("Point", x=int, y=int),
        methods_factory=methods,
    )


@pytest.fixture
def name_factory():
    """Primitive string value object."""
    return value_object(
        name="Name",
        schema=Annotated[str, Field(min_length=2)],
        methods_factory=lambda factory: {
            "initial": lambda self: self.value[0],
        },
    )


# ============================================================================
# Entity Fixtures
# ============================================================================
USER_SCHEMA = Schema.object(
    "User",
    id=int,
    name=(Annotated[str, Field(min_length=1)], ...),
    email=(Annotated[str, Field(pattern=r"^[^@]+@[^@]+$")], ...),
    age=(Annotated[int, Field(ge=0)], 0),
)


def _user_methods(factory):
    def rename(self, new_name):
        return factory.update(self, name=new_name)

    def is_adult(self):
        return self.age >= 18

    return {"rename": rename, "is_adult": is_adult}


@pytest.fixture
def user_factory():
    """Entity without history."""
    return entity(
        name="User",
        schema=USER_SCHEMA,
        identity="id",
        methods_factory=_user_methods,
        historize=False,
    )


@pytest.fixture
def historized_user_factory():
    """Entity recording its update history."""
    return entity(
        name="User",
        schema=USER_SCHEMA,
        identity="id",
        methods_factory=_user_methods,
        historize=True,
    )


@pytest.fixture
def user_data():
    return {"id": 1, "name": "Ada", "email": "ada@example.com", "age": 36}
