from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from propschema.config._env import resolve
from propschema.config._error import ConfigError
from propschema.config._generation import GenerationConfig
from propschema.config._health_check import HealthCheck
from propschema.core import CONFIG_FILE_NAME

if sys.version_info < (3, 11):
    import tomli
else:
    import tomllib as tomli

__all__ = [
    "PropSchemaConfig",
    "ConfigError",
    "GenerationConfig",
    "HealthCheck",
]


@dataclass
class PropSchemaConfig:
    seed: int | None
    workers: int
    # Dotted paths to extension modules, e.g. `myapp.testing.props`
    additional_properties: str | None
    filters: str | None
    generation: GenerationConfig
    _config_path: str | None

    __slots__ = ("seed", "workers", "additional_properties", "filters", "generation", "_config_path")

    def __init__(
        self,
        *,
        seed: int | None = None,
        workers: int = 1,
        additional_properties: str | None = None,
        filters: str | None = None,
        generation: GenerationConfig | None = None,
    ) -> None:
        self.seed = seed
        self.workers = workers
        self.additional_properties = additional_properties
        self.filters = filters
        self.generation = generation or GenerationConfig()
        self._config_path = None

    @property
    def config_path(self) -> str | None:
        """Filesystem path to the loaded configuration file, if any."""
        return self._config_path

    @classmethod
    def discover(cls) -> PropSchemaConfig:
        """Discover the configuration file.

        Search for `propschema.toml` in the current directory and then in each parent directory,
        stopping when a directory containing a '.git' folder is encountered or the filesystem root is reached.
        If a config file is found, load it; otherwise, return a default configuration.
        """
        current_dir = os.getcwd()
        config_file = None

        while True:
            candidate = os.path.join(current_dir, CONFIG_FILE_NAME)
            if os.path.isfile(candidate):
                config_file = candidate
                break

            # Stop searching if we've reached a git repository root
            if os.path.isdir(os.path.join(current_dir, ".git")):
                break

            # Stop if we've reached the filesystem root
            parent = os.path.dirname(current_dir)
            if parent == current_dir:
                break
            current_dir = parent

        if config_file:
            return cls.from_path(config_file)
        return cls()

    def update(
        self,
        *,
        seed: int | None = None,
        workers: int | None = None,
        additional_properties: str | None = None,
        filters: str | None = None,
    ) -> None:
        """Set top-level configuration options."""
        if seed is not None:
            self.seed = seed
        if workers is not None:
            self.workers = workers
        if additional_properties is not None:
            self.additional_properties = additional_properties
        if filters is not None:
            self.filters = filters

    @classmethod
    def from_path(cls, path: PathLike | str) -> PropSchemaConfig:
        """Load configuration from a file path."""
        with open(path, encoding="utf-8") as fd:
            config = cls.from_str(fd.read())
            config._config_path = str(Path(path).resolve())
            return config

    @classmethod
    def from_str(cls, data: str) -> PropSchemaConfig:
        """Parse configuration from a string."""
        parsed = tomli.loads(data)
        return cls.from_dict(parsed)

    @classmethod
    def from_dict(cls, data: dict) -> PropSchemaConfig:
        """Create a config instance from a dictionary."""
        from propschema.config._validator import validate_config

        validate_config(data)
        return cls(
            seed=data.get("seed"),
            workers=data.get("workers", 1),
            additional_properties=resolve(data.get("additional-properties")),
            filters=resolve(data.get("filters")),
            generation=GenerationConfig.from_dict(data.get("generation", {})),
        )
