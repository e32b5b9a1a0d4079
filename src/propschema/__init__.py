from __future__ import annotations

from propschema import errors
from propschema.config import PropSchemaConfig as Config
from propschema.core.version import PROPSCHEMA_VERSION
from propschema.engine import ScenarioResult, ValidationResult, assert_validity, run
from propschema.generation import (
    BaseProperties,
    Combination,
    Extensions,
    GenerationRule,
    RecordGenerator,
    Validity,
    all_incomplete_maps,
    build_all_incomplete,
    build_complete,
    build_incomplete,
    classify,
    complete_map,
    incomplete_map,
    plan,
    resolve_misc,
    resolve_rule,
)
from propschema.harness import make_tests
from propschema.schema import FieldSpec, Schema, get_schema, prop_field, prop_schema

__version__ = PROPSCHEMA_VERSION

__all__ = [
    "__version__",
    # Schema declaration
    "FieldSpec",
    "Schema",
    "get_schema",
    "prop_field",
    "prop_schema",
    # Providers
    "BaseProperties",
    "Extensions",
    "GenerationRule",
    "resolve_rule",
    "resolve_misc",
    # Record generators
    "RecordGenerator",
    "build_complete",
    "build_incomplete",
    "build_all_incomplete",
    "complete_map",
    "incomplete_map",
    "all_incomplete_maps",
    # Planning
    "Combination",
    "Validity",
    "classify",
    "plan",
    # Execution
    "Config",
    "ScenarioResult",
    "ValidationResult",
    "assert_validity",
    "make_tests",
    "run",
    # Public errors
    "errors",
]
