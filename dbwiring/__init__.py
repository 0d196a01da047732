"""Explicitly wired data source and SQL accessor over DB-API drivers."""

__version__ = "0.1.0"
