"""Vendor availability and booking calendar engine."""

__version__ = "0.1.0"
