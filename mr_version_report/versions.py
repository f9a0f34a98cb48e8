"""Version parsing utilities.

Handles conversion between version strings reported by mr-version and
decomposed semver fields, with special handling for incomplete version
strings (e.g., "1.0" → "1.0.0").
"""

from __future__ import annotations

import semver

from .models import ProjectVersion, SemVer


def parse_version(version_str: str) -> semver.Version | None:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3-beta.1+sha.abc" → prerelease "beta.1", build "sha.abc"

    A leading "v" is tolerated. Returns None for anything that is not a
    version (e.g., "Unknown").
    """
    text = version_str.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return semver.Version.parse(text, optional_minor_and_patch=True)
    except ValueError:
        return None


def to_semver(version_str: str) -> SemVer | None:
    """Decompose a version string into a SemVer model, or None."""
    parsed = parse_version(version_str)
    if parsed is None:
        return None
    return SemVer(
        major=parsed.major,
        minor=parsed.minor,
        patch=parsed.patch,
        pre_release=parsed.prerelease,
        build_metadata=parsed.build,
    )


def fill_sem_ver(version: ProjectVersion) -> ProjectVersion:
    """Populate ``sem_ver`` from the version string when mr-version left it out.

    An existing sem_ver is never replaced. Modifies and returns ``version``.
    """
    if version.sem_ver is None:
        version.sem_ver = to_semver(version.version)
    return version
