from __future__ import annotations

import os
from string import Template
from typing import Any

from propschema.config._error import ConfigError


def resolve(value: Any) -> Any:
    """Substitute `${NAME}` placeholders in string values from the environment.

    Provider paths are often set per environment, e.g. `additional-properties = "${PROPS_MODULE}"`.
    """
    if not isinstance(value, str):
        return value
    template = Template(value)
    try:
        return template.substitute(os.environ)
    except KeyError as exc:
        raise ConfigError(f"Missing environment variable `{exc.args[0]}` in `{value}`") from None
    except ValueError:
        raise ConfigError(f"Invalid placeholder in `{value}`. Use `${{NAME}}` or `$$` for a literal `$`") from None
