"""Image analysis loading utilities.

This module encapsulates logic for:
  * Reading an image analysis JSON document (Clair v1 layer envelopes).
  * Converting the decoded document into the read-only report model.
"""

from __future__ import annotations

from typing import Any, Dict, List
import json, logging, pathlib

from layer_report.domain_types import (
    Feature,
    ImageAnalysis,
    Layer,
    Vulnerability,
    normalize_severity,
)
from layer_report.errors import AnalysisError

logger = logging.getLogger("report.analysis")


def _parse_vulnerability(data: Dict[str, Any]) -> Vulnerability:
    return Vulnerability(
        name=str(data.get("Name", "")),
        severity=normalize_severity(str(data.get("Severity") or "")),
        namespace_name=str(data.get("NamespaceName", "")),
        description=str(data.get("Description", "")),
        link=str(data.get("Link", "")),
        fixed_by=str(data.get("FixedBy", "")),
        metadata=dict(data.get("Metadata") or {}),
    )


def _parse_feature(data: Dict[str, Any]) -> Feature:
    return Feature(
        name=str(data.get("Name", "")),
        version=str(data.get("Version", "")),
        namespace_name=str(data.get("NamespaceName", "")),
        version_format=str(data.get("VersionFormat", "")),
        added_by=str(data.get("AddedBy", "")),
        vulnerabilities=tuple(
            _parse_vulnerability(v) for v in data.get("Vulnerabilities") or []
        ),
    )


def _parse_layer(envelope: Dict[str, Any]) -> Layer:
    # Clair wraps each layer as {"Layer": {...}}; bare layers are accepted too.
    data = envelope.get("Layer", envelope) or {}
    return Layer(
        name=str(data.get("Name", "")),
        parent_name=str(data.get("ParentName", "")),
        namespace_name=str(data.get("NamespaceName", "")),
        features=tuple(_parse_feature(f) for f in data.get("Features") or []),
    )


def parse_analysis(data: Dict[str, Any]) -> ImageAnalysis:
    """Build an ``ImageAnalysis`` from an already decoded JSON document."""
    if not isinstance(data, dict):
        raise AnalysisError(f"decoding analysis: expected an object, got {type(data).__name__}")
    try:
        layers: List[Layer] = [_parse_layer(e) for e in data.get("Layers") or []]
    except (AttributeError, TypeError, ValueError) as e:
        raise AnalysisError(f"decoding analysis: {e}") from e
    return ImageAnalysis(
        registry=str(data.get("Registry", "")),
        image_name=str(data.get("ImageName", "")),
        tag=str(data.get("Tag", "")),
        layers=tuple(layers),
    )


def load_analysis(path: str | pathlib.Path) -> ImageAnalysis:
    """Read and decode the image analysis stored at ``path``."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise AnalysisError(f"reading analysis: {e}") from e
    except json.JSONDecodeError as e:
        raise AnalysisError(f"decoding analysis: {e}") from e
    analysis = parse_analysis(data)
    logger.info(
        "Loaded analysis of %s with %d layer(s)", analysis.short_name, len(analysis.layers)
    )
    return analysis
