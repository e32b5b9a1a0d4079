"""Post-processing of generated rule mappings for a specific exclusion scenario.

A filter provider may define:

    filter_rules(excluded_field, rules) -> dict[str, SearchStrategy] | None
    filter_record(excluded_field, record) -> bool

`excluded_field` is `None` for the scenario with all fields present.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any

from hypothesis import strategies as st

from propschema.core.errors import DecoyCollisionError, IncorrectUsage

Rules = dict[str, st.SearchStrategy]


def apply_rule_filter(filters: Any, excluded_field: str | None, rules: Rules) -> Rules:
    """Pass the assembled rules through the provider's override hook."""
    filter_rules = getattr(filters, "filter_rules", None) if filters is not None else None
    if filter_rules is None:
        return rules
    # Providers get a copy, the caller's mapping stays untouched
    result = filter_rules(excluded_field, dict(rules))
    if result is None:
        return rules
    if not isinstance(result, dict):
        raise IncorrectUsage(f"`filter_rules` must return a dict or None, got {type(result).__name__}")
    if excluded_field is not None and excluded_field in result:
        raise DecoyCollisionError(excluded_field, excluded_field)
    for key, strategy in result.items():
        if not isinstance(strategy, st.SearchStrategy):
            raise IncorrectUsage(f"`filter_rules` returned {strategy!r} for `{key}`, expected a Hypothesis strategy")
    return {str(key): strategy for key, strategy in result.items()}


def get_record_predicate(filters: Any, excluded_field: str | None) -> Callable[[dict[str, Any]], bool] | None:
    """Cross-field constraint applied to every drawn record, if the provider defines one."""
    filter_record = getattr(filters, "filter_record", None) if filters is not None else None
    if filter_record is None:
        return None
    return partial(filter_record, excluded_field)
