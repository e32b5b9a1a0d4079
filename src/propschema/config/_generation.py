from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from propschema.config._env import resolve
from propschema.config._health_check import HealthCheck, parse_health_checks, to_suppressed
from propschema.core import HYPOTHESIS_IN_MEMORY_DATABASE_IDENTIFIER

if TYPE_CHECKING:
    import hypothesis


@dataclass
class GenerationConfig:
    # Number of records drawn per scenario. Hypothesis' default is used when unset
    max_examples: int | None
    no_shrink: bool
    deterministic: bool
    database: str | None
    suppress_health_check: list[HealthCheck]

    __slots__ = ("max_examples", "no_shrink", "deterministic", "database", "suppress_health_check")

    def __init__(
        self,
        *,
        max_examples: int | None = None,
        no_shrink: bool = False,
        deterministic: bool = False,
        database: str | None = None,
        suppress_health_check: list[HealthCheck] | None = None,
    ) -> None:
        self.max_examples = max_examples
        self.no_shrink = no_shrink
        self.deterministic = deterministic
        self.database = database
        self.suppress_health_check = suppress_health_check or []

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenerationConfig:
        return cls(
            max_examples=data.get("max-examples"),
            no_shrink=data.get("no-shrink", False),
            deterministic=data.get("deterministic", False),
            database=resolve(data.get("database")),
            suppress_health_check=parse_health_checks(data.get("suppress-health-check", [])),
        )

    def update(
        self,
        *,
        max_examples: int | None = None,
        no_shrink: bool | None = None,
        deterministic: bool | None = None,
        database: str | None = None,
        suppress_health_check: list[HealthCheck] | None = None,
    ) -> None:
        if max_examples is not None:
            self.max_examples = max_examples
        if no_shrink is not None:
            self.no_shrink = no_shrink
        if deterministic is not None:
            self.deterministic = deterministic
        if database is not None:
            self.database = database
        if suppress_health_check is not None:
            self.suppress_health_check = suppress_health_check

    @property
    def database_disabled(self) -> bool:
        return self.database is not None and self.database.lower() == "none"

    def get_phases(self) -> list[hypothesis.Phase]:
        """Hypothesis phases in execution order, without the ones this config turns off."""
        import hypothesis

        excluded = {hypothesis.Phase.explain}
        if self.no_shrink:
            excluded.add(hypothesis.Phase.shrink)
        if self.database_disabled:
            excluded.add(hypothesis.Phase.reuse)
        return [phase for phase in hypothesis.Phase if phase not in excluded]

    def as_settings(self) -> hypothesis.settings:
        import hypothesis
        from hypothesis.database import DirectoryBasedExampleDatabase, InMemoryExampleDatabase

        kwargs: dict[str, Any] = {}
        if self.max_examples is not None:
            kwargs["max_examples"] = self.max_examples
        database = self.database
        if database is not None:
            if self.database_disabled:
                kwargs["database"] = None
            elif database == HYPOTHESIS_IN_MEMORY_DATABASE_IDENTIFIER:
                kwargs["database"] = InMemoryExampleDatabase()
            else:
                kwargs["database"] = DirectoryBasedExampleDatabase(database)

        return hypothesis.settings(
            derandomize=self.deterministic,
            print_blob=False,
            deadline=None,
            report_multiple_bugs=False,
            verbosity=hypothesis.Verbosity.quiet,
            suppress_health_check=to_suppressed(self.suppress_health_check),
            phases=self.get_phases(),
            **kwargs,
        )
