"""Contributor roster service: GitHub contributor lookups behind a small HTTP API."""

__version__ = "1.0.0"
