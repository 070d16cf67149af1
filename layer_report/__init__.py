"""Severity-prioritized vulnerability reports for the most recent layer of an image."""

__version__ = "0.1.0"
