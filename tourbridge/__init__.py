"""Tourbridge - tabular import/export for tour content."""

__version__ = "0.3.0"
