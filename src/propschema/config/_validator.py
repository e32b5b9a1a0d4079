from __future__ import annotations

import json
from importlib import resources
from typing import Any

import jsonschema.validators

from propschema.config._error import ConfigError

# Shipped next to this module as package data
CONFIG_SCHEMA = json.loads(resources.files("propschema.config").joinpath("schema.json").read_text(encoding="utf-8"))

CONFIG_VALIDATOR = jsonschema.validators.Draft202012Validator(CONFIG_SCHEMA)


def validate_config(data: dict[str, Any]) -> None:
    """Check a parsed `propschema.toml` document, reporting the first problem found."""
    from jsonschema.exceptions import best_match

    error = best_match(CONFIG_VALIDATOR.iter_errors(data))
    if error is not None:
        raise ConfigError.from_validation_error(error)
