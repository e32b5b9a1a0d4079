from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from propschema.schema import FieldSpec, Schema


class Validity(str, Enum):
    """Expected validator outcome for a generated record."""

    VALID = "valid"
    INVALID = "invalid"

    @property
    def is_valid(self) -> bool:
        return self == Validity.VALID


@dataclass(frozen=True)
class Combination:
    """One exclusion scenario together with its expected outcome."""

    # `None` means all fields are present
    excluded: str | None
    expected: Validity

    __slots__ = ("excluded", "expected")

    @property
    def name(self) -> str:
        label = f"{self.expected.value} record"
        if self.excluded is None:
            return label
        return f"{label} - missing {self.excluded}"


def classify(field: FieldSpec) -> Validity:
    """Whether a record without `field` should still pass validation.

    A default backfills an omitted required field.
    """
    if field.required and not field.has_default:
        return Validity.INVALID
    return Validity.VALID


def plan(schema: Schema) -> list[Combination]:
    """The complete case first, then one case per field in schema order."""
    return [
        Combination(excluded=None, expected=Validity.VALID),
        *(Combination(excluded=field.name, expected=classify(field)) for field in schema),
    ]
