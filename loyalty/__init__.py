"""Loyal user detection over two days of activity logs."""

__version__ = "0.1.0"
