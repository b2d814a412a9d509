"""Desktop calculator with persistent sessions and synchronized settings."""

__version__ = "0.10.0"
