from __future__ import annotations

CONFIG_FILE_NAME = "propschema.toml"
HYPOTHESIS_IN_MEMORY_DATABASE_IDENTIFIER = ":memory:"
