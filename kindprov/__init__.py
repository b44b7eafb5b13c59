"""Kind cluster configuration building, attribute schemas and TOML patch checks."""

__version__ = "0.1.0"