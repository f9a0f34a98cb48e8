"""Tests for mr_version_report.models."""

from __future__ import annotations

import json

from mr_version_report.models import (
    Dependencies,
    ProjectReport,
    ProjectVersion,
    Summary,
    VersionReport,
)


class TestProjectVersion:
    def test_defaults(self) -> None:
        v = ProjectVersion()
        assert v.version == "Unknown"
        assert v.version_changed is False
        assert v.previous_version is None

    def test_accepts_camel_case(self) -> None:
        v = ProjectVersion.model_validate(
            {"version": "1.0.0", "versionChanged": True, "previousVersion": "0.9.0"}
        )
        assert v.version_changed is True
        assert v.previous_version == "0.9.0"

    def test_null_changed_is_false(self) -> None:
        v = ProjectVersion.model_validate({"version": "1.0.0", "versionChanged": None})
        assert v.version_changed is False

    def test_empty_version_is_unknown(self) -> None:
        assert ProjectVersion.model_validate({"version": ""}).version == "Unknown"


class TestDependencies:
    def test_list_of_objects(self) -> None:
        deps = Dependencies.model_validate(
            {"direct": [{"name": "A", "version": "1.0"}], "all": [{"name": "B"}]}
        )
        assert [d.name for d in deps.direct] == ["A"]
        assert deps.transitive[0].name == "B"
        assert deps.transitive[0].version is None

    def test_mapping_of_name_to_version(self) -> None:
        deps = Dependencies.model_validate({"direct": {"A": "1.0", "B": "2.0"}})
        assert [(d.name, d.version) for d in deps.direct] == [("A", "1.0"), ("B", "2.0")]
        assert deps.transitive == []

    def test_serializes_transitive_as_all(self) -> None:
        dumped = Dependencies().model_dump(by_alias=True)
        assert dumped == {"direct": [], "all": []}


class TestProjectReport:
    def test_kind_test_wins_over_packable(self) -> None:
        project = ProjectReport(is_test_project=True, is_packable=True)
        assert project.kind == "Test"

    def test_kind_package(self) -> None:
        assert ProjectReport(is_packable=True).kind == "Package"

    def test_kind_other(self) -> None:
        assert ProjectReport().kind == "Other"

    def test_null_dependencies_become_empty(self) -> None:
        project = ProjectReport.model_validate({"name": "A", "dependencies": None})
        assert project.dependencies.direct == []


class TestSummary:
    def test_from_projects(self, sample_report: VersionReport) -> None:
        summary = Summary.from_projects(sample_report.projects)
        assert summary == Summary(
            total_projects=3, changed_projects=2, test_projects=1, packable_projects=3
        )

    def test_refresh_summary_restores_consistency(
        self, sample_report: VersionReport
    ) -> None:
        sample_report.summary = Summary(total_projects=99)
        sample_report.refresh_summary()
        assert sample_report.summary.total_projects == 3
        assert sample_report.summary.changed_projects == 2


class TestVersionReportJson:
    def test_camel_case_keys_and_indent(self, sample_report: VersionReport) -> None:
        text = sample_report.to_json()
        data = json.loads(text)
        assert data["branchType"] == "Main"
        assert data["summary"]["totalProjects"] == 3
        assert data["projects"][0]["version"]["versionChanged"] is True
        assert data["projects"][0]["isPackable"] is True
        assert '\n  "repository": "/repo"' in text

    def test_omits_unset_optionals(self, sample_report: VersionReport) -> None:
        data = json.loads(sample_report.to_json())
        assert "globalVersion" not in data
        assert "commitSha" not in data["projects"][1]["version"]

    def test_field_order(self, sample_report: VersionReport) -> None:
        data = json.loads(sample_report.to_json())
        assert list(data) == [
            "repository",
            "branch",
            "branchType",
            "projects",
            "summary",
        ]
