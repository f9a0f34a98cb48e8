"""CLI entry point for mr-version-report."""

from __future__ import annotations

import argparse
import json
from importlib.metadata import version as pkg_version
from pathlib import Path

from mr_version_report.config import INPUTS, OutputFormat, load_config
from mr_version_report.github import load_action_context
from mr_version_report.normalize import normalize_report
from mr_version_report.pipeline import run_report
from mr_version_report.render import render_report
from mr_version_report.shell import ReportError, fatal

__version__ = pkg_version("mr-version-report")

FORMATS = [f.value for f in OutputFormat]


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    """Map parsed flags back to input names; unset flags stay None."""
    return {name: getattr(args, field, None) for name, (field, _) in INPUTS.items()}


def cmd_report(args: argparse.Namespace) -> None:
    """Generate the report and publish it (usually called from CI)."""
    config = load_config(config_file=args.config, overrides=_overrides(args))
    run_report(config, load_action_context())


def cmd_render(args: argparse.Namespace) -> None:
    """Render a saved mr-version JSON document to stdout."""
    path = Path(args.input)
    try:
        raw = json.loads(path.read_text())
    except OSError as exc:
        raise ReportError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ReportError(f"Failed to parse report output: {exc}") from exc

    report = normalize_report(raw, args.repository_path, args.branch)
    print(render_report(report, args.output_format, args.changed_only))


def _add_report_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="TOML file with a [tool.mr-version-report] table.",
    )
    parser.add_argument(
        "--repository-path", default=None, help="Repository root. (default: .)"
    )
    parser.add_argument(
        "--project-dir", default=None, help="Only report projects under this directory."
    )
    parser.add_argument(
        "--output-format",
        default=None,
        help=f"One of {', '.join(FORMATS)}. (default: markdown)",
    )
    parser.add_argument(
        "--output-file",
        default=None,
        help="Also write the report here, relative to the repository root.",
    )
    parser.add_argument("--branch", default=None, help="Branch name override.")
    parser.add_argument(
        "--tag-prefix", default=None, help="Prefix of version tags. (default: v)"
    )
    for flag, help_text in [
        ("--include-commits", "Include commit details."),
        ("--include-dependencies", "Include project dependencies."),
        ("--changed-only", "Only list changed projects in the projects table."),
        ("--post-to-pr", "Post the report as a pull request comment."),
        ("--update-existing-comment", "Update an earlier report comment if present."),
    ]:
        parser.add_argument(
            flag, action=argparse.BooleanOptionalAction, default=None, help=help_text
        )
    parser.add_argument(
        "--comment-header",
        default=None,
        help="Header identifying the report comment.",
    )
    parser.add_argument(
        "--token", default=None, help="GitHub token. (default: $GITHUB_TOKEN)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mr-version-report",
        description="Version report for monorepos, built on mr-version.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # report subcommand
    report_parser = subparsers.add_parser(
        "report", help="Generate and publish the version report."
    )
    _add_report_options(report_parser)
    report_parser.set_defaults(func=cmd_report)

    # render subcommand
    render_parser = subparsers.add_parser(
        "render", help="Render a saved mr-version JSON report."
    )
    render_parser.add_argument(
        "-i", "--input", required=True, help="mr-version JSON output file."
    )
    render_parser.add_argument(
        "--output-format",
        default="markdown",
        help=f"One of {', '.join(FORMATS)}. (default: %(default)s)",
    )
    render_parser.add_argument(
        "--changed-only", action="store_true", help="Only list changed projects."
    )
    render_parser.add_argument(
        "--repository-path", default=".", help="Repository root. (default: %(default)s)"
    )
    render_parser.add_argument("--branch", default=None, help="Branch name fallback.")
    render_parser.set_defaults(func=cmd_render)

    return parser


def cli(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except ReportError as exc:
        fatal(f"Failed to generate version report: {exc}")
