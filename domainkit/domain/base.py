"""Helpers shared by the value-object and entity factories."""

import functools
import inspect
import json
from collections.abc import Callable, Mapping
from typing import Any

from domainkit.domain.exceptions import ConfigurationError

# Receives the factory handle and returns ``{method name: function(self, ...)}``
MethodsFactory = Callable[[Any], Mapping[str, Callable[..., Any]]]

RESERVED_METHOD_NAMES = frozenset({
    "__init__",
    "__new__",
    "__slots__",
    "__getattr__",
    "__setattr__",
    "__delattr__",
})


def require_factory_arguments(
    kind: str, name: str, schema: Any, methods_factory: Any
) -> None:
    """
    Validate the arguments shared by every factory constructor.

    Raises:
        ConfigurationError: If the name is empty, the schema is missing or
            the methods factory is not callable
    """
    if not name or not isinstance(name, str):
        raise ConfigurationError(f"{kind} name is required")
    if schema is None:
        raise ConfigurationError(f"{kind} schema is required")
    if not callable(methods_factory):
        raise ConfigurationError(f"Methods factory is required for {name}")


def require_extension_arguments(
    kind: str, name: str, methods_factory: Any, schema_transformer: Any
) -> None:
    """
    Validate the arguments of ``extend``.

    Raises:
        ConfigurationError: If the name is empty or a callable is missing
    """
    if not name or not isinstance(name, str):
        raise ConfigurationError(f"Extended {kind} name is required")
    if not callable(methods_factory):
        raise ConfigurationError("Methods factory is required for extension")
    if schema_transformer is not None and not callable(schema_transformer):
        raise ConfigurationError("Schema transformer must be callable")


def build_methods(owner: str, methods: Any) -> dict[str, Any]:
    """
    Turn the mapping returned by a methods factory into a class namespace.

    Plain functions are used as-is so Python binds them to the instance;
    other callables are wrapped so they still receive the instance first.

    Args:
        owner: Factory name, used in error messages
        methods: Mapping returned by the methods factory

    Returns:
        Namespace suitable for ``type()``

    Raises:
        ConfigurationError: If a method is not callable or uses a reserved name
    """
    if methods is None:
        return {}
    if not isinstance(methods, Mapping):
        raise ConfigurationError(
            f"Methods factory for {owner} must return a mapping, got {type(methods).__name__}"
        )

    namespace: dict[str, Any] = {}
    for method_name, method in methods.items():
        if method_name in RESERVED_METHOD_NAMES or (
            method_name.startswith("_") and not method_name.startswith("__")
        ):
            raise ConfigurationError(f"Method name {method_name!r} is reserved on {owner}")

        if inspect.isfunction(method) or isinstance(method, (staticmethod, classmethod)):
            namespace[method_name] = method
        elif callable(method):
            namespace[method_name] = _as_method(method)
        else:
            raise ConfigurationError(f"Method {method_name!r} of {owner} is not callable")
    return namespace


def _as_method(func: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(func)
    def method(self: Any, *args: Any, **kwargs: Any) -> Any:
        return func(self, *args, **kwargs)

    return method


def to_json(fields: Mapping[str, Any]) -> str:
    """Compact JSON rendering of instance fields, used by ``to_string``."""
    return json.dumps(dict(fields), default=_json_default, separators=(",", ":"))


def _json_default(value: Any) -> Any:
    # nested value objects and entities render as their plain data
    value_of = getattr(value, "value_of", None)
    if callable(value_of):
        unwrapped = value_of()
        if unwrapped is not value:
            return unwrapped
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)
