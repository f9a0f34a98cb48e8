"""Invocation of the external mr-version tool.

mr-version computes per-project versions from commit history; this module
only builds its command line, runs it once and decodes the JSON it prints.
"""

from __future__ import annotations

import json
import os
from typing import Any

from .config import ReportConfig
from .shell import ReportError, capture


def version_tool() -> str:
    """Executable to run; MR_VERSION_BIN overrides the default name."""
    return os.environ.get("MR_VERSION_BIN") or "mr-version"


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_report_args(config: ReportConfig) -> list[str]:
    """Build the ``mr-version report`` argument list for this run.

    Optional flags (project dir, branch, tag prefix) are left out when
    empty. Test and non-packable projects are always included so the
    summary counts cover the whole repository.
    """
    args = ["report", "--repo", config.repository_path, "--output", "json"]
    if config.project_dir:
        args.extend(["--project-dir", config.project_dir])
    if config.branch:
        args.extend(["--branch", config.branch])
    if config.tag_prefix:
        args.extend(["--tag-prefix", config.tag_prefix])
    args.extend(["--include-commits", _flag(config.include_commits)])
    args.extend(["--include-dependencies", _flag(config.include_dependencies)])
    args.extend(["--include-test-projects", "true"])
    args.extend(["--include-non-packable", "true"])
    return args


def run_version_tool(config: ReportConfig) -> str:
    """Run mr-version and return its stdout.

    Raises:
        ReportError: If the tool is missing, exits non-zero or prints
            output that is not valid UTF-8.
    """
    tool = version_tool()
    try:
        result = capture(tool, *build_report_args(config))
    except OSError as exc:
        raise ReportError(f"mr-version report failed: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ReportError(f"Failed to parse report output: {exc}") from exc
    if result.returncode != 0:
        raise ReportError(f"mr-version report failed: {result.stderr.strip()}")
    return result.stdout


def load_raw_report(config: ReportConfig) -> Any:
    """Run mr-version and decode its JSON output.

    Raises:
        ReportError: On tool failure or if stdout is not valid JSON.
    """
    output = run_version_tool(config)
    try:
        return json.loads(output)
    except json.JSONDecodeError as exc:
        raise ReportError(f"Failed to parse report output: {exc}") from exc
