from __future__ import annotations

import importlib
import os
import sys
from typing import Any

from propschema.core.errors import ExtensionError

EXTENSIONS_MODULE_ENV_VAR = "PROPSCHEMA_EXTENSIONS"


def load_from_env() -> None:
    extensions = os.getenv(EXTENSIONS_MODULE_ENV_VAR)
    if extensions:
        for path in extensions.split(","):
            load_object(path.strip())


def load_object(path: str) -> Any:
    """Import `package.module` or `package.module:attribute`."""
    module_path, _, attribute = path.partition(":")
    if not module_path:
        raise ExtensionError(path)
    try:
        cwd = os.getcwd()
        if cwd not in sys.path:
            sys.path.append(cwd)  # fix ModuleNotFoundError module in cwd
        module = importlib.import_module(module_path)
    except Exception as exc:
        raise ExtensionError(path) from exc
    if not attribute:
        return module
    obj: Any = module
    try:
        for part in attribute.split("."):
            obj = getattr(obj, part)
    except AttributeError as exc:
        raise ExtensionError(path) from exc
    return obj
