"""Listing Quality Scorer."""

__version__ = "1.0.0"
