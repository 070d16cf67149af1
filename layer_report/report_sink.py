"""Report persistence helpers."""

from __future__ import annotations

from dataclasses import dataclass
import logging, pathlib

from layer_report.errors import FileSystemError


logger = logging.getLogger("report.sink")


@dataclass(frozen=True)
class ReportConfig:
    """Where and in which format reports are written.

    ``format`` names both the sub directory under ``path`` and, lower-cased,
    the report file extension.
    """

    path: str
    format: str


def report_file_path(config: ReportConfig, name: str) -> pathlib.Path:
    """Return ``<path>/<format>/analysis-<name>.<format>`` for a report name."""
    name_safe = name.replace("/", "_").replace(":", "_")
    directory = pathlib.Path(config.path) / config.format
    return directory / f"analysis-{name_safe}.{config.format.lower()}"


def save_report(name: str, content: str, config: ReportConfig) -> pathlib.Path:
    """Write a rendered report, replacing any previous report of the same name.

    The caller picks ``name`` (usually the image reference); two concurrent
    saves must not share it.
    """
    report_path = report_file_path(config, name)
    try:
        report_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"creating report directory: {e}") from e

    try:
        report_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileSystemError(f"writing report file: {e}") from e

    logger.debug("Wrote %d characters to %s", len(content), report_path)
    print(f"{config.format.upper()} report at {report_path}")
    return report_path
