"""Delivery of the rendered report.

Each destination is independent:

- output file (optional; a write failure is fatal)
- pull request comment through ``gh api`` (optional; failures are warnings)
- GitHub Actions job summary
- GitHub Actions step outputs
"""

from __future__ import annotations

import json
import subprocess
import uuid
from collections.abc import Mapping
from pathlib import Path

from .config import OutputFormat
from .github import ActionContext
from .shell import ReportError, gh, info, warning

SUMMARY_HEADING = "## 📊 Version Report"


def write_report_file(content: str, repository_path: str, output_file: str) -> Path:
    """Write the report to output_file, resolved against the repository root.

    Parent directories must already exist.

    Raises:
        ReportError: If the file cannot be written.
    """
    path = (Path(repository_path) / output_file).resolve()
    try:
        path.write_text(content, encoding="utf-8")
    except (OSError, UnicodeEncodeError) as exc:
        raise ReportError(f"Cannot write report file {path}: {exc}") from exc
    info(f"Report saved to: {path}")
    return path


def _find_comment(comments: list[dict], header: str) -> dict | None:
    for comment in comments:
        if header in (comment.get("body") or ""):
            return comment
    return None


def post_report_to_pr(
    content: str,
    *,
    header: str,
    update_existing: bool,
    token: str | None,
    context: ActionContext,
) -> str:
    """Post the report as a PR comment, or update an earlier one.

    With update_existing, the first comment whose body contains ``header`` is
    edited in place; otherwise, or when no such comment exists, a new comment
    is created.

    Returns:
        What happened: "created", "updated", "skipped" or "failed".
    """
    if not context.is_pull_request:
        warning("Cannot post to PR: not a pull request event")
        return "skipped"

    pr_number = context.pr_number
    if pr_number is None:
        warning("Cannot post to PR: no PR number found")
        return "skipped"

    owner, repo = context.owner_repo
    body = json.dumps({"body": f"{header}\n\n{content}"})

    try:
        if update_existing:
            listing = gh(
                "api",
                f"repos/{owner}/{repo}/issues/{pr_number}/comments?per_page=100",
                token=token,
            )
            comments = json.loads(listing) if listing else []
            existing = _find_comment(comments, header)
            if existing is not None:
                gh(
                    "api",
                    "--method",
                    "PATCH",
                    f"repos/{owner}/{repo}/issues/comments/{existing['id']}",
                    "--input",
                    "-",
                    token=token,
                    input_text=body,
                )
                info(f"Updated existing PR comment #{existing['id']}")
                return "updated"

        gh(
            "api",
            "--method",
            "POST",
            f"repos/{owner}/{repo}/issues/{pr_number}/comments",
            "--input",
            "-",
            token=token,
            input_text=body,
        )
        info(f"Posted new PR comment to #{pr_number}")
        return "created"
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip() or str(exc)
        warning(f"Failed to post PR comment: {detail}")
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        warning(f"Failed to post PR comment: {exc}")
    return "failed"


def job_summary_markdown(content: str, fmt: OutputFormat) -> str:
    """Job summary text for the rendered report.

    Markdown is used as is; json goes in a collapsible block; csv and text
    are shown as a code block.
    """
    if fmt is OutputFormat.MARKDOWN:
        return content
    if fmt is OutputFormat.JSON:
        return (
            f"{SUMMARY_HEADING}\n\n"
            "<details><summary>📋 JSON Report Data</summary>\n\n"
            f"```json\n{content}\n```\n\n"
            "</details>"
        )
    return f"{SUMMARY_HEADING}\n\n```text\n{content}\n```"


def append_job_summary(content: str, fmt: OutputFormat, context: ActionContext) -> None:
    """Append the report to the job summary; no-op outside GitHub Actions."""
    if not context.step_summary:
        return
    try:
        with open(context.step_summary, "a", encoding="utf-8") as fh:
            fh.write(job_summary_markdown(content, fmt) + "\n")
    except OSError as exc:
        warning(f"Failed to write job summary: {exc}")


def _format_output(name: str, value: str) -> str:
    if "\n" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(outputs: Mapping[str, str], context: ActionContext) -> None:
    """Append step outputs to $GITHUB_OUTPUT; no-op outside GitHub Actions."""
    if not context.output:
        return
    try:
        with open(context.output, "a", encoding="utf-8") as fh:
            for name, value in outputs.items():
                fh.write(_format_output(name, value))
    except OSError as exc:
        warning(f"Failed to write step outputs: {exc}")
