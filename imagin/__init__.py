"""Imagin: upload a photo, describe an edit, compare the result."""

__version__ = "0.1.0"
