"""GitHub Actions run context.

Reads the handful of runner-provided environment variables the publisher
needs. Loaded once and passed along with the ReportConfig.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from .shell import warning


class ActionContext(BaseModel):
    """Where the run was triggered from and where its outputs go.

    Attributes:
        event_name: Triggering event (e.g. "pull_request", "push").
        repository: "owner/repo" of the workflow run.
        payload: Decoded webhook event payload.
        step_summary: Path of the job summary file, if any.
        output: Path of the step outputs file, if any.
    """

    event_name: str = ""
    repository: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)
    step_summary: str | None = None
    output: str | None = None

    @property
    def is_pull_request(self) -> bool:
        return self.event_name == "pull_request"

    @property
    def pr_number(self) -> int | None:
        pull_request = self.payload.get("pull_request") or {}
        number = pull_request.get("number") if isinstance(pull_request, dict) else None
        return number if isinstance(number, int) and number > 0 else None

    @property
    def owner_repo(self) -> tuple[str, str]:
        owner, _, repo = self.repository.partition("/")
        return owner, repo


def load_action_context(environ: Mapping[str, str] | None = None) -> ActionContext:
    """Build the context from GITHUB_* variables.

    An unreadable event payload is reported as a warning and treated as
    empty, which later makes PR posting skip with its own warning.
    """
    env = os.environ if environ is None else environ
    payload: dict[str, Any] = {}
    event_path = env.get("GITHUB_EVENT_PATH")
    if event_path:
        try:
            with open(event_path) as fh:
                loaded = json.load(fh)
            if isinstance(loaded, dict):
                payload = loaded
        except (OSError, json.JSONDecodeError) as exc:
            warning(f"Could not read event payload {event_path}: {exc}")

    return ActionContext(
        event_name=env.get("GITHUB_EVENT_NAME", ""),
        repository=env.get("GITHUB_REPOSITORY", ""),
        payload=payload,
        step_summary=env.get("GITHUB_STEP_SUMMARY") or None,
        output=env.get("GITHUB_OUTPUT") or None,
    )
