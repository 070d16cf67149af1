"""Tests for the aggregation and sorting helpers."""

from __future__ import annotations

import math

from conftest import make_analysis
from layer_report.domain_types import (
    SEVERITY_ORDER,
    Feature,
    ImageAnalysis,
    Vulnerability,
    severity_rank,
)
from layer_report.reporting import (
    all_vulnerabilities,
    sorted_vulnerabilities,
    vulnerabilities,
)


class TestAllVulnerabilities:
    def test_same_name_is_counted_once_with_first_seen_severity(
        self, analysis: ImageAnalysis
    ) -> None:
        counts = all_vulnerabilities(analysis)

        assert counts == {"High": 1, "Low": 1}
        assert counts.total() == 2

    def test_first_seen_depends_on_feature_order(self, openssl: Feature, bash: Feature) -> None:
        counts = all_vulnerabilities(make_analysis(bash, openssl))

        assert counts == {"Critical": 1, "Low": 1}

    def test_only_most_recent_layer_is_counted(self, bash: Feature) -> None:
        older = make_analysis(bash)
        analysis = ImageAnalysis(layers=older.layers + make_analysis().layers)

        assert all_vulnerabilities(analysis) == {}

    def test_counts_are_consistent_with_total_and_percentages(self) -> None:
        feature = Feature(
            name="libc",
            version="2.19",
            vulnerabilities=tuple(
                Vulnerability(name=f"CVE-{i}", severity=sev)
                for i, sev in enumerate(["High", "High", "Low", "Medium", "Critical", "Low", "Low"])
            ),
        )
        counts = all_vulnerabilities(make_analysis(feature))
        total = counts.total()

        assert sum(counts.count(sev) for sev in SEVERITY_ORDER) == total == 7
        for sev in SEVERITY_ORDER:
            assert counts.relative_count(sev) == math.ceil(counts.count(sev) / total * 100 * 100) / 100

    def test_keys_follow_descending_severity(self) -> None:
        feature = Feature(
            name="libc",
            vulnerabilities=(
                Vulnerability(name="CVE-1", severity="Low"),
                Vulnerability(name="CVE-2", severity="Critical"),
                Vulnerability(name="CVE-3", severity="Medium"),
            ),
        )

        assert list(all_vulnerabilities(make_analysis(feature))) == ["Critical", "Medium", "Low"]

    def test_empty_layer_yields_no_counts(self, empty_analysis: ImageAnalysis) -> None:
        counts = all_vulnerabilities(empty_analysis)

        assert counts == {}
        assert counts.total() == 0
        assert math.isnan(counts.relative_count("High"))


class TestSortedVulnerabilities:
    def test_end_to_end_scenario(self, analysis: ImageAnalysis) -> None:
        features = sorted_vulnerabilities(analysis)

        assert [f.label for f in features] == ["openssl:1.0.1", "bash:4.3"]
        assert [(v.name, v.severity) for v in features[0].vulnerabilities] == [
            ("CVE-A", "High"),
            ("CVE-B", "Low"),
        ]
        assert [(v.name, v.severity) for v in features[1].vulnerabilities] == [
            ("CVE-A", "Critical"),
        ]

    def test_order_is_stable_within_severity_and_keeps_duplicates(self) -> None:
        feature = Feature(
            name="kernel",
            version="3.16",
            vulnerabilities=(
                Vulnerability(name="CVE-1", severity="Low"),
                Vulnerability(name="CVE-2", severity="High"),
                Vulnerability(name="CVE-3", severity="Low"),
                Vulnerability(name="CVE-2", severity="High"),
                Vulnerability(name="CVE-4", severity="Defcon1"),
            ),
        )

        (result,) = sorted_vulnerabilities(make_analysis(feature))

        assert [v.name for v in result.vulnerabilities] == ["CVE-4", "CVE-2", "CVE-2", "CVE-1", "CVE-3"]
        ranks = [severity_rank(v.severity) for v in result.vulnerabilities]
        assert ranks == sorted(ranks, reverse=True)

    def test_features_without_vulnerabilities_are_dropped(self, zlib: Feature) -> None:
        assert sorted_vulnerabilities(make_analysis(zlib)) == []

    def test_input_is_not_mutated(self, analysis: ImageAnalysis, openssl: Feature) -> None:
        sorted_vulnerabilities(analysis)

        assert analysis.most_recent_layer().features[0] == openssl
        assert analysis.most_recent_layer().features[0].vulnerabilities[0].name == "CVE-B"

    def test_empty_layer_yields_no_features(self, empty_analysis: ImageAnalysis) -> None:
        assert sorted_vulnerabilities(empty_analysis) == []


class TestVulnerabilities:
    def test_groups_by_severity_with_feature_label(self, analysis: ImageAnalysis) -> None:
        grouped = vulnerabilities(analysis)

        assert set(grouped) == {"Low", "High", "Critical"}
        assert [(v.name, v.feature) for v in grouped["High"]] == [("CVE-A", "openssl:1.0.1")]
        assert [(v.name, v.feature) for v in grouped["Critical"]] == [("CVE-A", "bash:4.3")]

    def test_empty_layer_yields_empty_mapping(self, empty_analysis: ImageAnalysis) -> None:
        assert vulnerabilities(empty_analysis) == {}

    def test_entries_expose_every_vulnerability_field(self) -> None:
        feature = Feature(
            name="openssl",
            version="1.0.1",
            vulnerabilities=(
                Vulnerability(
                    name="CVE-A",
                    severity="High",
                    namespace_name="debian:8",
                    metadata={"NVD": {"CVSSv2": {"Score": 7.5}}},
                ),
            ),
        )

        (entry,) = vulnerabilities(make_analysis(feature))["High"]

        assert entry.namespace_name == "debian:8"
        assert entry.metadata["NVD"]["CVSSv2"]["Score"] == 7.5
