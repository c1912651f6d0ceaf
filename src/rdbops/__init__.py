"""Operational analysis of Redis snapshot summaries."""

__version__ = "0.1.0"
