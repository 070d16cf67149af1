"""Centralized settings for the layer vulnerability report.

Environment variables:
  REPORT_PATH (str)   - Base directory reports are written under (default: reports)
  REPORT_FORMAT (str) - Report format, HTML or TXT (default: HTML). Also used as
                        the output sub directory and, lower-cased, as file extension.
  TEMPLATE_DIR (str)  - Directory holding analysis-template.<format>.j2 files
                        (default: templates shipped with the package)
  LOG_LEVEL (str)     - Logging level (default: INFO)
"""
from __future__ import annotations

from dataclasses import dataclass
import os, pathlib, logging

from layer_report.report_sink import ReportConfig

DEFAULT_TEMPLATE_DIR = pathlib.Path(__file__).parent / "templates"


@dataclass(frozen=True)
class Settings:
    report_path: str
    report_format: str
    template_dir: pathlib.Path
    log_level: str

    @staticmethod
    def load() -> "Settings":
        template_dir = os.getenv("TEMPLATE_DIR", "")
        return Settings(
            report_path=os.getenv("REPORT_PATH", "reports"),
            report_format=os.getenv("REPORT_FORMAT", "HTML").upper(),
            template_dir=pathlib.Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def report_config(self) -> ReportConfig:
        return ReportConfig(path=self.report_path, format=self.report_format)


settings = Settings.load()

# Configure logging once
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
