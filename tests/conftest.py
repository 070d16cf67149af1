"""Shared pytest fixtures building image analyses in code."""

from __future__ import annotations

import pytest

from layer_report.domain_types import Feature, ImageAnalysis, Layer, Vulnerability


def make_analysis(*features: Feature, older_layers: int = 0) -> ImageAnalysis:
    """Return an analysis whose most recent layer holds ``features``."""
    layers = [Layer(name=f"layer-{i}") for i in range(older_layers)]
    layers.append(Layer(name="top", features=tuple(features)))
    return ImageAnalysis(
        registry="registry.example.com",
        image_name="library/app",
        tag="1.0",
        layers=tuple(layers),
    )


@pytest.fixture()
def openssl() -> Feature:
    return Feature(
        name="openssl",
        version="1.0.1",
        vulnerabilities=(
            Vulnerability(name="CVE-B", severity="Low", link="https://example.com/CVE-B"),
            Vulnerability(name="CVE-A", severity="High", fixed_by="1.0.1g"),
        ),
    )


@pytest.fixture()
def bash() -> Feature:
    return Feature(
        name="bash",
        version="4.3",
        vulnerabilities=(Vulnerability(name="CVE-A", severity="Critical"),),
    )


@pytest.fixture()
def zlib() -> Feature:
    return Feature(name="zlib", version="1.2.8")


@pytest.fixture()
def analysis(openssl: Feature, zlib: Feature, bash: Feature) -> ImageAnalysis:
    return make_analysis(openssl, zlib, bash, older_layers=1)


@pytest.fixture()
def empty_analysis() -> ImageAnalysis:
    return make_analysis()
