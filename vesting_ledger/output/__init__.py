"""Output formatting module."""

from .formatters import JSONFormatter, TableFormatter

__all__ = ["JSONFormatter", "TableFormatter"]
