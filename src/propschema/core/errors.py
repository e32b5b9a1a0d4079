"""Base error handling shared by all parts of propschema."""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from propschema.generation.planner import Validity


class PropSchemaError(Exception):
    """Base exception class for all propschema errors."""


class IncorrectUsage(PropSchemaError):
    """Indicates incorrect usage of propschema's public API."""


class UnknownSchemaError(PropSchemaError):
    """The target has not declared a schema."""

    def __init__(self, target: Any) -> None:
        self.target = target
        name = getattr(target, "__qualname__", None) or getattr(target, "__name__", None) or repr(target)
        super().__init__(
            f"`{name}` does not declare a schema\n\n"
            "Add a `__prop_schema__` attribute built with `propschema.prop_schema(...)`"
        )


class UnresolvedTypeError(PropSchemaError):
    """Neither the additional nor the base properties can generate values for a field."""

    def __init__(self, field: str, type_: Any, constraints: Mapping[str, Any]) -> None:
        self.field = field
        self.type = type_
        self.constraints = dict(constraints)
        super().__init__(
            f"Can not generate data for field `{field}` of type {type_!r} with constraints {self.constraints!r}\n\n"
            "Define `generate_prop` for this type in your additional properties provider "
            "or register a handler with `BaseProperties.register`"
        )


class DecoyCollisionError(PropSchemaError):
    """A generated extra field uses the name of a schema field."""

    def __init__(self, key: str, excluded: str | None) -> None:
        self.key = key
        self.excluded = excluded
        if excluded is not None and key == excluded:
            detail = f"it would re-introduce the excluded field `{excluded}`"
        else:
            detail = "it collides with another field of the record"
        super().__init__(f"Extra field `{key}` is not allowed: {detail}")


class ScenarioAssertionFailure(PropSchemaError, AssertionError):
    """A sampled record did not match the expected validity."""

    def __init__(
        self,
        scenario: str,
        expected: Validity,
        record: Mapping[str, Any],
        errors: Mapping[str, Any] | None = None,
    ) -> None:
        self.scenario = scenario
        self.expected = expected
        self.record = dict(record)
        self.errors = dict(errors or {})
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.expected.is_valid:
            detail = f"expected valid, got errors: {self.errors!r}"
        else:
            detail = "expected invalid, got none"
        return f"{self.scenario}: {detail}\n\nRecord: {self.record!r}"


class ExtensionError(PropSchemaError):
    """Failed to load a user-supplied extension module."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Unable to load `{path}`")


def format_exception(error: BaseException, *, with_traceback: bool = False) -> str:
    """Format exception as text."""
    if with_traceback:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return "".join(traceback.format_exception_only(type(error), error)).strip()
