from __future__ import annotations

from propschema.engine.core import (
    Scenario,
    ScenarioResult,
    Status,
    assert_validity,
    build_scenarios,
    check_sample,
    create_test,
    execute,
    run,
)
from propschema.engine.validation import ValidationResult, Validator, as_validation_result, get_validator

__all__ = [
    "Scenario",
    "ScenarioResult",
    "Status",
    "ValidationResult",
    "Validator",
    "as_validation_result",
    "assert_validity",
    "build_scenarios",
    "check_sample",
    "create_test",
    "execute",
    "get_validator",
    "run",
]
