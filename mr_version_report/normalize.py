"""Report normalization: raw mr-version JSON → canonical VersionReport.

mr-version has emitted two shapes of project entry over time:

- nested: ``{"name": ..., "version": {"version": "1.2.0", "versionChanged": true, ...}}``
- flat:   ``{"name": ..., "version": "1.2.0", "versionChanged": true, ...}``

Each entry is decoded into one of two explicit variants at the boundary
(decode_entry) and turned into a ProjectReport by a single function
(reconcile). Summary counts are always derived from the projects.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import ValidationError

from .models import (
    Dependencies,
    FlatProjectEntry,
    NestedProjectEntry,
    ProjectReport,
    Summary,
    VersionReport,
)
from .shell import ReportError, warning
from .versions import fill_sem_ver


def decode_entry(raw: Any) -> NestedProjectEntry | FlatProjectEntry:
    """Decide the shape of a raw project entry and validate it.

    The entry is nested when its ``version`` is an object that itself has a
    ``version`` key; everything else is treated as flat.

    Raises:
        ValidationError: If the entry does not fit the chosen shape.
    """
    version = raw.get("version") if isinstance(raw, dict) else None
    if isinstance(version, dict) and "version" in version:
        return NestedProjectEntry.model_validate(raw)
    return FlatProjectEntry.model_validate(raw)


def _full_path(repository_path: str, relative: str) -> str:
    return os.path.normpath(os.path.join(repository_path, relative))


def reconcile(
    entry: NestedProjectEntry | FlatProjectEntry, repository_path: str
) -> ProjectReport:
    """Build the canonical ProjectReport for a decoded entry.

    Missing fields default as follows: name → project → "Unknown",
    path → "Unknown", fullPath → repository path joined with the relative
    path, booleans → False, dependencies → empty.
    """
    if isinstance(entry, NestedProjectEntry):
        version = entry.version.model_copy(deep=True)
    else:
        version = entry.to_project_version()

    return ProjectReport(
        name=entry.name or entry.project or "Unknown",
        path=entry.path or "Unknown",
        full_path=entry.full_path or _full_path(repository_path, entry.path or ""),
        version=fill_sem_ver(version),
        is_test_project=bool(entry.is_test_project),
        is_packable=bool(entry.is_packable),
        dependencies=entry.dependencies or Dependencies(),
    )


def _from_project_list(
    raw: dict[str, Any], repository_path: str, branch: str | None
) -> VersionReport:
    projects = [reconcile(decode_entry(p), repository_path) for p in raw["projects"]]
    report = VersionReport(
        repository=raw.get("repository") or repository_path,
        branch=raw.get("branch") or branch or "main",
        branch_type=raw.get("branchType") or "Main",
        global_version=raw.get("globalVersion"),
        projects=projects,
    )
    report.refresh_summary()
    return report


def _from_report(
    raw: dict[str, Any], repository_path: str, branch: str | None
) -> VersionReport:
    data = dict(raw)
    data.setdefault("repository", repository_path)
    if branch:
        data.setdefault("branch", branch)
    report = VersionReport.model_validate(data)
    for project in report.projects:
        fill_sem_ver(project.version)

    derived = Summary.from_projects(report.projects)
    if raw.get("summary") is not None and report.summary != derived:
        warning("Report summary does not match its projects; recomputing counts")
    report.refresh_summary()
    return report


def normalize_report(
    raw: Any, repository_path: str, branch: str | None = None
) -> VersionReport:
    """Turn decoded mr-version output into a canonical VersionReport.

    Args:
        raw: Decoded JSON from mr-version.
        repository_path: Repository root, used for repository and fullPath
            defaults.
        branch: Branch override from the configuration, used when the
            payload does not name one.

    Raises:
        ReportError: If the payload is not an object or fails validation.
    """
    if not isinstance(raw, dict):
        raise ReportError(
            f"Failed to parse report output: expected a JSON object, got {type(raw).__name__}"
        )
    try:
        if isinstance(raw.get("projects"), list):
            return _from_project_list(raw, repository_path, branch)
        return _from_report(raw, repository_path, branch)
    except ValidationError as exc:
        raise ReportError(f"Failed to parse report output: {exc}") from exc
