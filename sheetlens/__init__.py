"""Spreadsheet upload, ownership index and insights API."""

__version__ = "1.0.0"
