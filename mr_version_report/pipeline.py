"""Report pipeline: fetch → normalize → enhance → render → publish.

This module orchestrates one report run:
1. Run mr-version and decode its JSON output
2. Normalize it into a canonical VersionReport
3. Fill in previous versions of changed projects from git tags
4. Render the report in the configured format
5. Write the output file, post the PR comment, append the job summary
   and set the step outputs

Fatal problems surface as ReportError; everything after the output file
is best-effort and only produces warnings.
"""

from __future__ import annotations

from .config import ReportConfig
from .github import ActionContext
from .models import VersionReport
from .normalize import normalize_report
from .publish import (
    append_job_summary,
    post_report_to_pr,
    write_outputs,
    write_report_file,
)
from .render import render_report
from .shell import info, step
from .source import load_raw_report
from .tags import enhance_with_previous_versions


def generate_report(config: ReportConfig) -> VersionReport:
    """Produce the enhanced VersionReport for the configured repository."""
    step("Generating version report")
    raw = load_raw_report(config)
    report = normalize_report(raw, config.repository_path, config.branch)
    info(
        f"{report.summary.total_projects} projects on {report.branch} "
        f"({report.summary.changed_projects} changed)"
    )
    enhance_with_previous_versions(report, config.repository_path, config.tag_prefix)
    return report


def run_report(config: ReportConfig, context: ActionContext) -> VersionReport:
    """Execute the full report run.

    Args:
        config: Settings for this run.
        context: GitHub Actions context (event, payload, output files).

    Raises:
        ReportError: On any fatal problem.
    """
    report = generate_report(config)
    content = render_report(report, config.output_format, config.changed_only)

    report_file = ""
    if config.output_file:
        report_file = str(
            write_report_file(content, config.repository_path, config.output_file)
        )

    if config.post_to_pr:
        step("Posting report to pull request")
        post_report_to_pr(
            content,
            header=config.comment_header,
            update_existing=config.update_existing_comment,
            token=config.token,
            context=context,
        )

    append_job_summary(content, config.output_format, context)
    write_outputs(
        {
            "report-content": content,
            "report-file": report_file,
            "projects-count": str(report.summary.total_projects),
            "changed-projects-count": str(report.summary.changed_projects),
        },
        context,
    )

    if not context.output:
        print(f"\n{content}")

    print(
        f"\n✅ Report generated: {report.summary.total_projects} projects, "
        f"{report.summary.changed_projects} with changes"
    )
    return report
