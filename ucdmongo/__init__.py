"""Parse the flat Unicode Character Database XML and load it into MongoDB."""

__version__ = "0.1.0"
__all__ = ["ucdbool", "properties", "models", "parser", "database", "cli"]