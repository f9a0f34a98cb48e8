"""Previous-version lookup from git tags.

For each changed project, finds the version released before the current one
so the report can show "previous → new". Two tag layouts are supported:

- per-project tags: ``{prefix}{project}/{version}`` (e.g. ``vServiceA/1.1.0``)
- repository-wide tags: ``{prefix}{version}`` (e.g. ``v1.1.0``)

Ordering is git's version-aware sort (``--sort=-version:refname``); this
module never compares versions itself. Lookups are best-effort: a missing
tag or a failing git call just leaves the previous version unset.
"""

from __future__ import annotations

import subprocess

from .models import VersionReport
from .shell import git, info, step


def list_tags(pattern: str, repository_path: str) -> list[str]:
    """List tags matching a glob, newest version first.

    Returns an empty list if git fails or nothing matches.
    """
    try:
        output = git(
            "tag", "-l", pattern, "--sort=-version:refname", cwd=repository_path
        )
    except (subprocess.CalledProcessError, OSError, UnicodeDecodeError):
        return []
    return [tag for tag in output.splitlines() if tag.strip()]


def _first_other_version(
    tags: list[str], prefix: str, current_version: str, *, skip_scoped: bool = False
) -> str | None:
    for tag in tags:
        # Project-scoped tags have no place in the repository-wide pass
        if skip_scoped and "/" in tag:
            continue
        candidate = tag.removeprefix(prefix)
        if candidate != current_version:
            return candidate
    return None


def find_previous_version(
    project_name: str,
    current_version: str,
    repository_path: str,
    tag_prefix: str,
) -> str | None:
    """Find the most recent tagged version that differs from current_version.

    Project-scoped tags are searched first; repository-wide tags are only
    consulted when no project tag qualifies.

    Example:
        Tags vServiceA/1.2.0 and vServiceA/1.1.0, current 1.2.0 → "1.1.0"
    """
    scoped_prefix = f"{tag_prefix}{project_name}/"
    previous = _first_other_version(
        list_tags(f"{scoped_prefix}*", repository_path), scoped_prefix, current_version
    )
    if previous:
        return previous

    return _first_other_version(
        list_tags(f"{tag_prefix}*", repository_path),
        tag_prefix,
        current_version,
        skip_scoped=True,
    )


def enhance_with_previous_versions(
    report: VersionReport, repository_path: str, tag_prefix: str
) -> None:
    """Fill previousVersion for changed projects, in place.

    Only projects with versionChanged set and no previousVersion yet are
    looked up; a value supplied by mr-version is never replaced.
    """
    pending = [
        p for p in report.projects if p.changed and p.version.previous_version is None
    ]
    if not pending:
        return

    step("Resolving previous versions from tags")
    for project in pending:
        previous = find_previous_version(
            project.name, project.version.version, repository_path, tag_prefix
        )
        if previous:
            project.version.previous_version = previous
        info(f"{project.name}: {previous or '<none>'} → {project.version.version}")
