"""Exceptions raised while loading, rendering and saving reports."""

from __future__ import annotations


class ReportError(Exception):
    """Base class for recoverable reporting failures."""


class AnalysisError(ReportError):
    """The image analysis document could not be read or decoded."""


class AssetError(ReportError):
    """The report template could not be located or read."""


class RenderError(ReportError):
    """Template execution failed against the given analysis."""


class FileSystemError(ReportError):
    """The report directory or file could not be written."""


__all__ = [
    "ReportError",
    "AnalysisError",
    "AssetError",
    "RenderError",
    "FileSystemError",
]
