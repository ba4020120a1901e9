"""Elara backend: audio tag metadata, scan cache and play counts."""

__version__ = "0.1.0"
