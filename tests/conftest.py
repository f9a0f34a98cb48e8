"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from mr_version_report.models import (
    Dependencies,
    Dependency,
    ProjectReport,
    ProjectVersion,
    Summary,
    VersionReport,
)


@pytest.fixture
def nested_payload() -> dict[str, Any]:
    """mr-version output where each project's version is an object."""
    return {
        "repository": "/repo",
        "branch": "feature/login",
        "branchType": "Feature",
        "globalVersion": "2.0.0",
        "projects": [
            {
                "name": "ServiceA",
                "path": "src/ServiceA",
                "version": {
                    "version": "1.2.0",
                    "versionChanged": True,
                    "changeReason": "Code changes",
                    "commitHeight": 3,
                },
                "isPackable": True,
                "dependencies": {
                    "direct": [{"name": "Shared", "version": "1.0.0"}],
                    "all": [{"name": "Shared", "version": "1.0.0"}],
                },
            },
            {
                "name": "Shared",
                "path": "src/Shared",
                "version": {"version": "1.0.0", "versionChanged": False},
                "isPackable": True,
            },
            {
                "name": "ServiceA.Tests",
                "path": "tests/ServiceA.Tests",
                "version": {"version": "1.2.0", "versionChanged": True},
                "isTestProject": True,
                "isPackable": True,
            },
        ],
    }


@pytest.fixture
def flat_payload() -> dict[str, Any]:
    """mr-version output with version fields beside name and path."""
    return {
        "projects": [
            {
                "project": "ServiceB",
                "path": "src/ServiceB",
                "version": "0.3.1",
                "versionChanged": True,
                "changeReason": "Dependency changed",
                "commitSha": "abc123",
            },
            {"name": "Tools", "version": "0.1.0"},
        ]
    }


@pytest.fixture
def sample_report() -> VersionReport:
    """A report with one changed package, one unchanged, one changed test."""
    projects = [
        ProjectReport(
            name="ServiceA",
            path="src/ServiceA",
            full_path="/repo/src/ServiceA",
            version=ProjectVersion(
                version="1.2.0",
                version_changed=True,
                change_reason="Code changes",
                previous_version="1.1.0",
            ),
            is_packable=True,
            dependencies=Dependencies(direct=[Dependency(name="Shared", version="1.0.0")]),
        ),
        ProjectReport(
            name="Shared",
            path="src/Shared",
            full_path="/repo/src/Shared",
            version=ProjectVersion(version="1.0.0"),
            is_packable=True,
        ),
        ProjectReport(
            name="ServiceA.Tests",
            path="tests/ServiceA.Tests",
            full_path="/repo/tests/ServiceA.Tests",
            version=ProjectVersion(version="1.2.0", version_changed=True),
            is_test_project=True,
            is_packable=True,
        ),
    ]
    return VersionReport(
        repository="/repo",
        branch="main",
        branch_type="Main",
        projects=projects,
        summary=Summary.from_projects(projects),
    )


@pytest.fixture
def unchanged_report() -> VersionReport:
    """A report where nothing changed."""
    projects = [
        ProjectReport(name="Core", path="src/Core", version=ProjectVersion(version="3.0.0")),
    ]
    return VersionReport(
        repository="/repo", projects=projects, summary=Summary.from_projects(projects)
    )
