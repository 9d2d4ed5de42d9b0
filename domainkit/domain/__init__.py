"""Domain layer package.

The domain layer holds the value-object and entity factories, the schema
adapter they validate through, and the exceptions they raise.
"""

from domainkit.domain.exceptions import ConfigurationError, DomainException, ValidationError
from domainkit.domain.schema import Schema

__all__ = [
    "ConfigurationError",
    "DomainException",
    "Schema",
    "ValidationError",
]
