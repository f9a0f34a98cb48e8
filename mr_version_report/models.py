"""Data models for mr-version-report.

These Pydantic models represent the version report as it flows through the
pipeline. Field names serialize as camelCase to match the JSON emitted by
mr-version; either spelling is accepted on input.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _false_if_none(value: Any) -> Any:
    return False if value is None else value


class SemVer(_ReportModel):
    """Decomposed semantic version."""

    major: int
    minor: int
    patch: int
    pre_release: str | None = None
    build_metadata: str | None = None


class ProjectVersion(_ReportModel):
    """Computed version of a single project.

    Attributes:
        version: Current version string, "Unknown" when not reported.
        version_changed: Whether mr-version considers the project changed.
        previous_version: Version released before this one. Only meaningful
            when version_changed is set; filled from git tags when mr-version
            does not supply it.
    """

    version: str = "Unknown"
    sem_ver: SemVer | None = None
    version_changed: bool = False
    change_reason: str | None = None
    commit_sha: str | None = None
    commit_date: str | None = None
    commit_message: str | None = None
    branch_type: str | None = None
    branch_name: str | None = None
    commit_height: int | None = None
    previous_version: str | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _unknown_if_empty(cls, value: Any) -> Any:
        return value or "Unknown"

    @field_validator("version_changed", mode="before")
    @classmethod
    def _changed_default(cls, value: Any) -> Any:
        return _false_if_none(value)


class Dependency(_ReportModel):
    name: str
    version: str | None = None


class Dependencies(_ReportModel):
    """Direct and transitive dependencies of a project.

    Accepts either a list of {name, version} objects or a mapping of
    name → version for each set.
    """

    direct: list[Dependency] = Field(default_factory=list)
    transitive: list[Dependency] = Field(default_factory=list, alias="all")

    @field_validator("direct", "transitive", mode="before")
    @classmethod
    def _coerce_entries(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, dict):
            return [{"name": name, "version": version} for name, version in value.items()]
        if isinstance(value, list):
            return [{"name": v} if isinstance(v, str) else v for v in value]
        return value


class ProjectReport(_ReportModel):
    """One project in the report."""

    name: str = "Unknown"
    path: str = "Unknown"
    full_path: str = ""
    version: ProjectVersion = Field(default_factory=ProjectVersion)
    is_test_project: bool = False
    is_packable: bool = False
    dependencies: Dependencies = Field(default_factory=Dependencies)

    @field_validator("is_test_project", "is_packable", mode="before")
    @classmethod
    def _flag_defaults(cls, value: Any) -> Any:
        return _false_if_none(value)

    @field_validator("dependencies", mode="before")
    @classmethod
    def _empty_dependencies(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def changed(self) -> bool:
        return self.version.version_changed

    @property
    def kind(self) -> str:
        """Display classification; the test flag wins over packable."""
        if self.is_test_project:
            return "Test"
        if self.is_packable:
            return "Package"
        return "Other"


class Summary(_ReportModel):
    total_projects: int = 0
    changed_projects: int = 0
    test_projects: int = 0
    packable_projects: int = 0

    @classmethod
    def from_projects(cls, projects: list[ProjectReport]) -> Summary:
        """Derive the counts from a list of projects."""
        return cls(
            total_projects=len(projects),
            changed_projects=sum(1 for p in projects if p.changed),
            test_projects=sum(1 for p in projects if p.is_test_project),
            packable_projects=sum(1 for p in projects if p.is_packable),
        )


class VersionReport(_ReportModel):
    """Canonical report for one repository and branch."""

    repository: str = "."
    branch: str = "main"
    branch_type: str = "Main"
    global_version: str | None = None
    projects: list[ProjectReport] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)

    def changed_projects(self) -> list[ProjectReport]:
        return [p for p in self.projects if p.changed]

    def refresh_summary(self) -> Summary:
        """Recompute the summary from the projects list and store it."""
        self.summary = Summary.from_projects(self.projects)
        return self.summary

    def to_json(self) -> str:
        """Serialize with camelCase keys and 2-space indentation."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


# Raw project entries as emitted by mr-version. The shape is decided once,
# when decoding; see normalize.decode_entry().


class _RawProjectEntry(_ReportModel):
    name: str | None = None
    project: str | None = None
    path: str | None = None
    full_path: str | None = None
    is_test_project: bool | None = None
    is_packable: bool | None = None
    dependencies: Dependencies | None = None


class NestedProjectEntry(_RawProjectEntry):
    """Entry whose ``version`` is already a ProjectVersion object."""

    version: ProjectVersion


class FlatProjectEntry(_RawProjectEntry):
    """Entry with version fields as siblings of ``name`` and ``path``."""

    version: Any = None
    sem_ver: SemVer | None = None
    version_changed: bool | None = None
    change_reason: str | None = None
    commit_sha: str | None = None
    commit_date: str | None = None
    commit_message: str | None = None
    branch_type: str | None = None
    branch_name: str | None = None
    commit_height: int | None = None
    previous_version: str | None = None

    def to_project_version(self) -> ProjectVersion:
        version = self.version
        if isinstance(version, (int, float)) and not isinstance(version, bool):
            version = str(version)
        elif not isinstance(version, str):
            version = None
        return ProjectVersion(
            version=version or "Unknown",
            sem_ver=self.sem_ver,
            version_changed=bool(self.version_changed),
            change_reason=self.change_reason,
            commit_sha=self.commit_sha,
            commit_date=self.commit_date,
            commit_message=self.commit_message,
            branch_type=self.branch_type,
            branch_name=self.branch_name,
            commit_height=self.commit_height,
            previous_version=self.previous_version,
        )
