from __future__ import annotations

from enum import Enum, unique
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import hypothesis


@unique
class HealthCheck(str, Enum):
    """Hypothesis health checks that may fire while drawing records."""

    data_too_large = "data_too_large"
    # Usually a `filter_record` predicate that rejects most records
    filter_too_much = "filter_too_much"
    too_slow = "too_slow"
    large_base_example = "large_base_example"
    all = "all"

    def as_hypothesis(self) -> list[hypothesis.HealthCheck]:
        from hypothesis import HealthCheck as HypothesisHealthCheck

        if self is HealthCheck.all:
            return list(HypothesisHealthCheck)
        return [HypothesisHealthCheck[self.value]]


def parse_health_checks(names: list[str]) -> list[HealthCheck]:
    return [HealthCheck(name) for name in names]


def to_suppressed(checks: list[HealthCheck]) -> list[hypothesis.HealthCheck]:
    """Hypothesis health checks to pass as `suppress_health_check`, without duplicates."""
    suppressed: list[hypothesis.HealthCheck] = []
    for check in checks:
        for item in check.as_hypothesis():
            if item not in suppressed:
                suppressed.append(item)
    return suppressed
