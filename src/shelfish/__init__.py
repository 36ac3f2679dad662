"""Normalize flat book exports into books, authors and junction tables."""

__version__ = "0.1.0"
