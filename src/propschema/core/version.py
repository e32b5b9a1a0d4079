from importlib import metadata

try:
    PROPSCHEMA_VERSION = metadata.version("propschema")
except metadata.PackageNotFoundError:
    # Local run without installation
    PROPSCHEMA_VERSION = "dev"
