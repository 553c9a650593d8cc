"""Saboriman - personal music library backend."""

__version__ = "0.1.0"
