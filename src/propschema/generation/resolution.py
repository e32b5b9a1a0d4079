"""Ordered lookup of generation rules across the additional and base providers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from hypothesis import strategies as st

from propschema.core.errors import IncorrectUsage, UnresolvedTypeError
from propschema.core.loading import load_object
from propschema.generation.properties import BASE_PROPERTIES, BaseProperties, GenerationRule, to_rule
from propschema.schema import TypeTag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extensions:
    """Providers taking part in a single run."""

    additional: Any = None
    filters: Any = None
    base: BaseProperties = BASE_PROPERTIES

    @classmethod
    def load(cls, *, additional: str | None = None, filters: str | None = None) -> Extensions:
        """Import providers from `package.module` or `package.module:attribute` paths."""
        return cls(
            additional=as_provider(additional),
            filters=as_provider(filters),
        )


def get_prop_generator(provider: Any) -> Callable[..., Any] | None:
    if provider is None:
        return None
    return getattr(provider, "generate_prop", None)


def get_misc_generator(provider: Any) -> Callable[..., Any] | None:
    if provider is None:
        return None
    return getattr(provider, "generate_misc", None)


def lookup_additional(
    field_name: str, type_: TypeTag, constraints: Mapping[str, Any], additional: Any
) -> GenerationRule | None:
    """The additional provider's rule for this field, if it defines one."""
    generate_prop = get_prop_generator(additional)
    if generate_prop is None:
        return None
    value = generate_prop(field_name, type_, constraints)
    if value is None:
        return None
    return to_rule(field_name, value)


def resolve_rule(
    field_name: str,
    type_: TypeTag,
    constraints: Mapping[str, Any],
    additional: Any = None,
    *,
    base: BaseProperties = BASE_PROPERTIES,
) -> GenerationRule:
    """Pick the generation rule for a field: additional provider first, then the base table."""
    rule = lookup_additional(field_name, type_, constraints, additional)
    if rule is not None:
        logger.debug("Using additional property for `%s` (%r)", field_name, type_)
        return rule
    rule = base.generate_prop(field_name, type_, constraints)
    if rule is None:
        raise UnresolvedTypeError(field_name, type_, constraints)
    return rule


def resolve_misc(excluded_field: str | None, additional: Any = None) -> list[GenerationRule]:
    """Extra fields injected into a record when `excluded_field` is left out."""
    generate_misc = get_misc_generator(additional)
    if generate_misc is None:
        return []
    values = generate_misc(excluded_field)
    if not values:
        return []
    if not isinstance(values, list):
        values = [values]
    rules = []
    for value in values:
        if isinstance(value, st.SearchStrategy):
            raise IncorrectUsage(f"Extra fields for `{excluded_field}` must be named: use `(key, strategy)` pairs")
        rules.append(to_rule(str(excluded_field), value))
    return rules


def as_provider(value: Any) -> Any:
    """Providers may be passed directly or as `package.module[:attribute]` paths."""
    if isinstance(value, str):
        return load_object(value)
    return value
