"""Exceptions raised by value-object and entity factories."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from domainkit.domain.exceptions.base import DomainException


class ConfigurationError(DomainException):
    """
    Raised when a factory is built, extended or used with malformed arguments.

    Examples: an empty name, a missing schema, a non-callable methods
    factory, an unknown identity field, or an attempt to change the
    identity of an entity.
    """

    def __init__(self, reason: str):
        super().__init__(message=reason, code="CONFIGURATION_ERROR")


class ValidationError(DomainException):
    """
    Raised when input data does not satisfy a factory schema.

    Wraps the underlying pydantic error so callers never have to deal with
    the schema engine directly.

    Attributes:
        error: The underlying pydantic ValidationError
        issues: Ordered list of ``{"message", "path"}`` dictionaries
        context: ``{"object_type": <factory name>, "input": <offending input>}``
    """

    def __init__(
        self,
        message: str,
        error: PydanticValidationError | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, code="VALIDATION_ERROR")
        self.error = error
        self.context = context or {}
        self.issues = issues_from(error) if error is not None else []

    @property
    def object_type(self) -> str | None:
        """Name of the value object or entity that failed validation."""
        return self.context.get("object_type")

    @property
    def fields(self) -> list[str]:
        """Dotted paths of the fields that failed validation."""
        return [issue["path"] for issue in self.issues if issue["path"]]

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a serializable dictionary."""
        return {
            "code": self.code,
            "message": self.message,
            "object_type": self.object_type,
            "issues": self.issues,
        }

    @classmethod
    def from_pydantic(
        cls, object_type: str, error: PydanticValidationError, data: Any
    ) -> "ValidationError":
        """
        Build a ValidationError from a pydantic failure.

        Args:
            object_type: Name of the factory that rejected the input
            error: The pydantic error raised by the schema
            data: The offending input

        Returns:
            ValidationError with an aggregated message
        """
        issues = issues_from(error)
        details = ", ".join(
            f"{issue['path']}: {issue['message']}" if issue["path"] else issue["message"]
            for issue in issues
        )
        return cls(
            f"Invalid {object_type}: {details}",
            error,
            {"object_type": object_type, "input": data},
        )


def issues_from(error: PydanticValidationError) -> list[dict[str, str]]:
    """Flatten a pydantic error into ``{"message", "path"}`` issues."""
    return [
        {
            "message": detail["msg"],
            "path": ".".join(str(part) for part in detail["loc"]),
        }
        for detail in error.errors()
    ]
