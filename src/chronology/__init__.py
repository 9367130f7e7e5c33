"""Chronology - two-level timeline bucketing for notes and other timed items."""

__version__ = "0.3.0"
