"""Application entrypoint.

High-level workflow:
    1. Load the image analysis JSON (see `analysis.load_analysis`).
    2. Render the report for the configured format (see `reporting.render_report`).
    3. Persist it under the configured path (see `report_sink.save_report`).

Settings: loaded once in `settings.settings`; command line options override
the report path and format.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import pathlib
from typing import List, Optional

from layer_report import __version__
from layer_report.analysis import load_analysis
from layer_report.errors import ReportError
from layer_report.report_sink import save_report
from layer_report.reporting import render_report
from layer_report.settings import settings

logger = logging.getLogger("report")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layer-report",
        description="Render the vulnerability report of the most recent layer of an image.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("analysis", type=pathlib.Path, help="Image analysis JSON file")
    parser.add_argument("-f", "--format", default=None, help="Report format (HTML or TXT)")
    parser.add_argument("-o", "--output", default=None, help="Base directory for reports")
    parser.add_argument(
        "-t", "--template-dir", type=pathlib.Path, default=None, help="Template directory"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Render and save one report, returning the process exit status."""
    args = build_parser().parse_args(argv)

    config = settings.report_config()
    if args.format:
        config = dataclasses.replace(config, format=args.format.upper())
    if args.output:
        config = dataclasses.replace(config, path=args.output)

    try:
        analysis = load_analysis(args.analysis)
        content = render_report(
            analysis,
            template_dir=args.template_dir or settings.template_dir,
            report_format=config.format,
        )
        path = save_report(analysis.short_name or args.analysis.stem, content, config)
    except ReportError as e:
        logger.error("%s", e)
        return 1
    logger.info("Saved %s report for %s to %s", config.format, analysis.short_name, path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
