"""Adapters between user validators and the outcome the engine checks."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from propschema.core.errors import IncorrectUsage

Validator = Callable[[Any, dict[str, Any]], Any]


@dataclass
class ValidationResult:
    valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def with_errors(cls, errors: Mapping[str, list[str]]) -> ValidationResult:
        return cls(valid=not errors, errors=dict(errors))


def as_validation_result(value: Any) -> ValidationResult:
    """Normalize whatever a validator returned."""
    if isinstance(value, ValidationResult):
        return value
    if isinstance(value, bool):
        return ValidationResult(valid=value)
    valid = getattr(value, "valid", None)
    if valid is None:
        valid = getattr(value, "is_valid", None)
    if valid is None:
        raise IncorrectUsage(
            f"Validator returned {value!r}. Expected a `ValidationResult`, a bool, "
            "or an object with `valid` and `errors` attributes"
        )
    if callable(valid):
        valid = valid()
    errors = getattr(value, "errors", None) or {}
    if callable(errors):
        errors = errors()
    return ValidationResult(valid=bool(valid), errors=dict(errors))


def get_validator(target: Any, validator: Validator | None = None) -> Validator:
    """Explicit validator, or the target's own `validate(record)`."""
    if validator is not None:
        return validator
    validate = getattr(target, "validate", None)
    if validate is None or not callable(validate):
        raise IncorrectUsage(f"No validator given and {target!r} does not define `validate(record)`")

    def _validate(_: Any, record: dict[str, Any]) -> Any:
        return validate(record)

    return _validate
