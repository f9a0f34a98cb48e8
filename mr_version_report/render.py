"""Report rendering: VersionReport → text.

Every renderer is a pure function of (report, changed_only). The
changed-only flag narrows the list of projects shown; the dedicated
"Changed Projects" section of the markdown output always lists every
changed project.
"""

from __future__ import annotations

import csv
import io

from .config import OutputFormat
from .models import ProjectReport, VersionReport

CSV_HEADER = "Project,Version,Previous Version,Changed,Reason,Type,Path,Dependencies"


def _shown_projects(report: VersionReport, changed_only: bool) -> list[ProjectReport]:
    return report.changed_projects() if changed_only else list(report.projects)


def _direct_names(project: ProjectReport) -> list[str]:
    return [dep.name for dep in project.dependencies.direct]


def render_json(report: VersionReport) -> str:
    """Structured output: the canonical report, 2-space indented."""
    return report.to_json()


def render_csv(report: VersionReport, changed_only: bool) -> str:
    """One quoted row per project under a fixed, unquoted header row."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for project in _shown_projects(report, changed_only):
        version = project.version
        writer.writerow(
            [
                project.name,
                version.version,
                version.previous_version or "",
                "true" if version.version_changed else "false",
                version.change_reason or "",
                project.kind,
                project.path,
                ";".join(_direct_names(project)),
            ]
        )
    rows = buf.getvalue().removesuffix("\n")
    return f"{CSV_HEADER}\n{rows}" if rows else CSV_HEADER


def render_text(report: VersionReport, changed_only: bool) -> str:
    """Plain text: header lines, then one block per project."""
    lines = [
        "=== MonoRepo Version Report ===",
        f"Repository: {report.repository}",
        f"Branch: {report.branch} ({report.branch_type})",
    ]
    if report.global_version:
        lines.append(f"Global Version: {report.global_version}")
    lines.append(f"Total Projects: {report.summary.total_projects}")
    lines.append(f"Changed Projects: {report.summary.changed_projects}")
    lines.append("")

    for project in _shown_projects(report, changed_only):
        version = project.version
        status = "CHANGED" if project.changed else "UNCHANGED"
        lines.append(f"[{status}] {project.name}: {version.version}")
        lines.append(f"  Path: {project.path}")
        if project.changed:
            if version.previous_version:
                lines.append(f"  Previous: {version.previous_version}")
            if version.change_reason:
                lines.append(f"  Reason: {version.change_reason}")
        deps = _direct_names(project)
        if deps:
            lines.append(f"  Dependencies: {', '.join(deps)}")
        lines.append("")

    return "\n".join(lines)


def render_markdown(report: VersionReport, changed_only: bool) -> str:
    """Markdown document with summary, changed, projects and dependency sections."""
    lines: list[str] = ["## 📊 MonoRepo Version Report", ""]
    lines.append(f"**Repository:** `{report.repository}`")
    lines.append(f"**Branch:** `{report.branch}` ({report.branch_type})")
    if report.global_version:
        lines.append(f"**Global Version:** `{report.global_version}`")
    lines.append("")

    summary = report.summary
    lines += [
        "### 📈 Summary",
        "",
        "| Metric | Count |",
        "|--------|-------|",
        f"| Total Projects | {summary.total_projects} |",
        f"| Changed Projects | {summary.changed_projects} |",
        f"| Test Projects | {summary.test_projects} |",
        f"| Packable Projects | {summary.packable_projects} |",
        "",
    ]

    changed = report.changed_projects()
    if changed:
        lines += [
            "### 🔄 Changed Projects",
            "",
            "| Project | Previous Version | New Version | Reason |",
            "|---------|------------------|-------------|--------|",
        ]
        for project in changed:
            version = project.version
            lines.append(
                f"| **{project.name}** | `{version.previous_version or 'N/A'}` "
                f"| `{version.version or 'Unknown'}` | {version.change_reason or 'N/A'} |"
            )
        lines.append("")

    shown = _shown_projects(report, changed_only)
    if shown:
        lines.append("### 🔄 Changed Projects Only" if changed_only else "### 📦 All Projects")
        lines += [
            "",
            "| Project | Version | Type | Path |",
            "|---------|---------|------|------|",
        ]
        for project in shown:
            marker = " 🔄" if project.changed else ""
            lines.append(
                f"| **{project.name}**{marker} | `{project.version.version}` "
                f"| {project.kind} | `{project.path}` |"
            )
        lines.append("")

    with_deps = [p for p in report.projects if p.dependencies.direct]
    if with_deps:
        lines += ["### 🔗 Dependencies", ""]
        for project in with_deps:
            lines += [f"#### {project.name}", ""]
            for dep in project.dependencies.direct:
                lines.append(f"- {dep.name} ({dep.version or 'Unknown'})")
            lines.append("")

    return "\n".join(lines)


def render_report(
    report: VersionReport, fmt: OutputFormat | str, changed_only: bool = False
) -> str:
    """Render the report in the requested format (markdown by default)."""
    output_format = OutputFormat.parse(fmt)
    if output_format is OutputFormat.JSON:
        return render_json(report)
    if output_format is OutputFormat.CSV:
        return render_csv(report, changed_only)
    if output_format is OutputFormat.TEXT:
        return render_text(report, changed_only)
    return render_markdown(report, changed_only)
