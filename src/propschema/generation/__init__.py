from __future__ import annotations

from propschema.generation.maps import (
    RecordGenerator,
    all_incomplete_maps,
    build_all_incomplete,
    build_complete,
    build_incomplete,
    complete_map,
    incomplete_map,
)
from propschema.generation.planner import Combination, Validity, classify, plan
from propschema.generation.properties import BASE_PROPERTIES, BaseProperties, GenerationRule
from propschema.generation.resolution import Extensions, resolve_misc, resolve_rule

__all__ = [
    "BASE_PROPERTIES",
    "BaseProperties",
    "Combination",
    "Extensions",
    "GenerationRule",
    "RecordGenerator",
    "Validity",
    "all_incomplete_maps",
    "build_all_incomplete",
    "build_complete",
    "build_incomplete",
    "classify",
    "complete_map",
    "incomplete_map",
    "plan",
    "resolve_misc",
    "resolve_rule",
]
