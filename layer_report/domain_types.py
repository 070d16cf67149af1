from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any, Dict, List, Tuple


# Severity ordering (lowest -> highest)
SEVERITY_ORDER: Tuple[str, ...] = (
    "Unknown",
    "Negligible",
    "Low",
    "Medium",
    "High",
    "Critical",
    "Defcon1",
)
_SEV_RANK = {v.lower(): i for i, v in enumerate(SEVERITY_ORDER)}


def inverted_severities() -> List[str]:
    """Return severities from the most to the least severe."""
    ordered = list(SEVERITY_ORDER)
    ordered.reverse()
    return ordered


def severity_rank(severity: str) -> int:
    """Return the position of severity in ``SEVERITY_ORDER``.

    Matching is case-insensitive; unknown severities are treated as lowest.
    """
    return _SEV_RANK.get(severity.lower() if severity else "", 0)


def normalize_severity(severity: str) -> str:
    """Return the ``SEVERITY_ORDER`` spelling of severity, ``Unknown`` if unrecognised."""
    return SEVERITY_ORDER[severity_rank(severity)]


@dataclass(frozen=True, slots=True)
class Vulnerability:
    """A single vulnerability reported against a feature."""

    name: str
    severity: str = "Unknown"
    namespace_name: str = ""
    description: str = ""
    link: str = ""
    fixed_by: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True, slots=True)
class Feature:
    """Named, versioned package detected inside a layer."""

    name: str
    version: str = ""
    namespace_name: str = ""
    version_format: str = ""
    added_by: str = ""
    vulnerabilities: Tuple[Vulnerability, ...] = ()

    @property
    def label(self) -> str:
        return f"{self.name}:{self.version}"


@dataclass(frozen=True, slots=True)
class Layer:
    name: str = ""
    parent_name: str = ""
    namespace_name: str = ""
    features: Tuple[Feature, ...] = ()


@dataclass(frozen=True, slots=True)
class ImageAnalysis:
    """Analysis of every layer of an image, oldest layer first.

    Attributes:
        registry: Registry host the image was pulled from.
        image_name: Repository name of the image.
        tag: Image tag.
        layers: Analysed layers in the order they were added.
    """

    registry: str = ""
    image_name: str = ""
    tag: str = ""
    layers: Tuple[Layer, ...] = ()

    @property
    def short_name(self) -> str:
        return f"{self.image_name}:{self.tag}" if self.tag else self.image_name

    def most_recent_layer(self) -> Layer:
        """Return the last added layer, or an empty layer if there is none."""
        if not self.layers:
            return Layer()
        return self.layers[-1]


@dataclass(frozen=True, slots=True)
class VulnerabilityWithFeature:
    """Vulnerability joined with the ``name:version`` label of its feature."""

    vulnerability: Vulnerability
    feature: str

    @property
    def name(self) -> str:
        return self.vulnerability.name

    @property
    def severity(self) -> str:
        return self.vulnerability.severity

    @property
    def description(self) -> str:
        return self.vulnerability.description

    @property
    def link(self) -> str:
        return self.vulnerability.link

    @property
    def fixed_by(self) -> str:
        return self.vulnerability.fixed_by

    @property
    def namespace_name(self) -> str:
        return self.vulnerability.namespace_name

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.vulnerability.metadata


class VulnerabilityCounts(dict):
    """Count of distinct vulnerabilities per severity."""

    def total(self) -> int:
        return sum(self.values())

    def count(self, severity: str) -> int:
        return self.get(severity, 0)

    def relative_count(self, severity: str) -> float:
        """Return the share of ``severity`` as a percentage rounded up to two decimals.

        The result is ``nan`` when there are no vulnerabilities at all; templates
        should check ``total()`` before displaying it.
        """
        total = self.total()
        if total == 0:
            return math.nan
        result = self.count(severity) / total * 100
        return math.ceil(result * 100) / 100


# Convenience alias for the per-severity lookup handed to templates
VulnerabilitiesBySeverity = Dict[str, List[VulnerabilityWithFeature]]

__all__ = [
    "SEVERITY_ORDER",
    "inverted_severities",
    "severity_rank",
    "normalize_severity",
    "Vulnerability",
    "Feature",
    "Layer",
    "ImageAnalysis",
    "VulnerabilityWithFeature",
    "VulnerabilityCounts",
    "VulnerabilitiesBySeverity",
]
