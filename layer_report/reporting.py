"""Reporting and rendering utilities.

Provides the helpers templates use to summarize the most recent layer of an
image analysis, and the function rendering a report from those templates.
"""

from __future__ import annotations

from typing import Dict, List
import dataclasses, logging
import pathlib

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    select_autoescape,
)

from layer_report.domain_types import (
    Feature,
    ImageAnalysis,
    VulnerabilitiesBySeverity,
    VulnerabilityCounts,
    VulnerabilityWithFeature,
    inverted_severities,
)
from layer_report.errors import AssetError, RenderError
from layer_report.settings import settings

logger = logging.getLogger("report.reporting")

TEMPLATE_NAME = "analysis-template.{fmt}.j2"


def vulnerabilities(analysis: ImageAnalysis) -> VulnerabilitiesBySeverity:
    """Group every vulnerability of the most recent layer by severity.

    Each entry keeps the ``name:version`` label of the feature it was found in.
    """
    result: VulnerabilitiesBySeverity = {}
    for f in analysis.most_recent_layer().features:
        for v in f.vulnerabilities:
            result.setdefault(v.severity, []).append(
                VulnerabilityWithFeature(vulnerability=v, feature=f.label)
            )
    return result


def all_vulnerabilities(analysis: ImageAnalysis) -> VulnerabilityCounts:
    """Count distinct vulnerability names of the most recent layer per severity.

    When a name shows up with different severities, the first one seen (in
    feature then vulnerability order) is kept.
    """
    seen: Dict[str, str] = {}
    for f in analysis.most_recent_layer().features:
        for v in f.vulnerabilities:
            if v.name not in seen:
                seen[v.name] = v.severity

    result = VulnerabilityCounts()
    for sev in inverted_severities():
        for severity in seen.values():
            if severity == sev:
                result[sev] = result.get(sev, 0) + 1
    logger.debug("%d distinct vulnerabilities in %s", result.total(), analysis.short_name)
    return result


def sorted_vulnerabilities(analysis: ImageAnalysis) -> List[Feature]:
    """Return vulnerable features with their vulnerabilities, most severe first.

    Features without vulnerabilities are left out. Within a severity the
    original order is kept and nothing is deduplicated.
    """
    features: List[Feature] = []
    for f in analysis.most_recent_layer().features:
        if not f.vulnerabilities:
            continue
        ordered = [
            v
            for sev in inverted_severities()
            for v in f.vulnerabilities
            if v.severity == sev
        ]
        features.append(dataclasses.replace(f, vulnerabilities=tuple(ordered)))
    return features


def _environment(template_dir: pathlib.Path) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "html.j2", "xml.j2"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals.update(
        vulnerabilities=vulnerabilities,
        allVulnerabilities=all_vulnerabilities,
        sortedVulnerabilities=sorted_vulnerabilities,
        severities=inverted_severities(),
    )
    return env


def render_report(
    analysis: ImageAnalysis,
    *,
    template_dir: pathlib.Path | None = None,
    report_format: str = "HTML",
) -> str:
    """Render the report of ``analysis`` with the template for ``report_format``.

    Raises ``AssetError`` when the template cannot be read and ``RenderError``
    when it fails against the analysis. A ``jinja2.TemplateSyntaxError`` means
    a broken template and is never wrapped.
    """
    env = _environment(template_dir or settings.template_dir)
    name = TEMPLATE_NAME.format(fmt=report_format.lower())
    try:
        template = env.get_template(name)
    except TemplateNotFound as e:
        raise AssetError(f"accessing template: {e.name} not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise AssetError(f"accessing template: {e}") from e

    try:
        return template.render(analysis=analysis)
    except TemplateSyntaxError:
        raise
    except Exception as e:
        raise RenderError(f"rendering report: {e}") from e
