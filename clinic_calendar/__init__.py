"""Clinic calendar scheduling core."""

__version__ = "0.1.0"
