"""Timewise: personal time-tracking dashboard and analysis engine."""

__version__ = "0.1.0"
