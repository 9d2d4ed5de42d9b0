"""Base domain exception classes."""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all errors raised by the toolkit and by domain code
    built on top of it.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code (defaults to the class name)
    """

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a serializable dictionary."""
        return {"code": self.code, "message": self.message}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r})"
