"""Public propschema errors."""

from propschema.config import ConfigError
from propschema.core.errors import (
    DecoyCollisionError,
    ExtensionError,
    IncorrectUsage,
    PropSchemaError,
    ScenarioAssertionFailure,
    UnknownSchemaError,
    UnresolvedTypeError,
)

__all__ = [
    "ConfigError",
    "DecoyCollisionError",
    "ExtensionError",
    "IncorrectUsage",
    "PropSchemaError",
    "ScenarioAssertionFailure",
    "UnknownSchemaError",
    "UnresolvedTypeError",
]
