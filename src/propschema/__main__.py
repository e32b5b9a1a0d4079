from propschema.cli import propschema

propschema()
