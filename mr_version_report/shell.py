"""Shell, git and gh utilities.

Provides simple wrappers around subprocess calls for running the external
tools the report depends on (mr-version, git, gh), plus output formatting
helpers for the GitHub Actions log.
"""

from __future__ import annotations

import os
import subprocess
import sys


class ReportError(Exception):
    """A fatal error that aborts the whole report run."""


def in_github_actions() -> bool:
    """True when running inside a GitHub Actions job."""
    return os.environ.get("GITHUB_ACTIONS") == "true"


def capture(
    *args: str,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
    input_text: str | None = None,
    check: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run a command and capture its output as text.

    Args:
        *args: Command and arguments (e.g., "mr-version", "report").
        cwd: Working directory for the command.
        env: Extra environment variables, merged over the current environment.
        input_text: Text fed to the command's stdin.
        check: If True, raise CalledProcessError on non-zero exit.

    Returns:
        CompletedProcess with returncode, stdout and stderr.
    """
    merged_env = {**os.environ, **env} if env else None
    return subprocess.run(
        args,
        cwd=cwd,
        env=merged_env,
        input=input_text,
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=check,
    )


def git(*args: str, cwd: str | None = None, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "tag", "--list").
        cwd: Repository to run in; defaults to the current directory.
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., tag lookup).

    Returns:
        Stripped stdout from the git command.
    """
    return capture("git", *args, cwd=cwd, check=check).stdout.strip()


def gh(
    *args: str,
    token: str | None = None,
    input_text: str | None = None,
    check: bool = True,
) -> str:
    """Run a gh CLI command and return stdout.

    Args:
        *args: Arguments to pass to gh (e.g., "api", "repos/o/r/issues/1/comments").
        token: Token exported as GH_TOKEN for this call only.
        input_text: Request body for ``gh api --input -``.
        check: If True (default), raise on non-zero exit.
    """
    env = {"GH_TOKEN": token} if token else None
    result = capture("gh", *args, env=env, input_text=input_text, check=check)
    return result.stdout.strip()


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of the report pipeline in the job log.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def info(msg: str) -> None:
    """Print an indented progress line."""
    print(f"  {msg}")


def warning(msg: str) -> None:
    """Report a non-fatal problem; shown as an annotation on GitHub."""
    if in_github_actions():
        print(f"::warning::{msg}")
    else:
        print(f"WARNING: {msg}", file=sys.stderr)


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the run.
    """
    if in_github_actions():
        print(f"::error::{msg}")
    else:
        print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)
