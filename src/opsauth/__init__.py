"""opsauth - authorization core for hotel operations."""

__version__ = "0.1.0"
