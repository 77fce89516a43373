"""Utility modules for Listing Quality Scorer."""

from .export import Exporter

__all__ = [
    "Exporter",
]
