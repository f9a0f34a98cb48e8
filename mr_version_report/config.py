"""Run configuration.

A ReportConfig is built once per invocation and passed explicitly to every
stage of the pipeline. Values are layered, lowest precedence first:

1. Defaults declared on ReportConfig
2. An optional TOML file, table [tool.mr-version-report]
3. GitHub Action inputs (INPUT_<NAME> environment variables)
4. Command-line flags

Keys in the TOML file and action inputs use the hyphenated input names
(e.g. "tag-prefix", "changed-only").
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from tomlkit.exceptions import ParseError

from .shell import ReportError, warning

TOML_TABLE = "mr-version-report"
DEFAULT_COMMENT_HEADER = "## 📊 Version Report"


class ConfigError(ReportError):
    """Invalid configuration value."""


class OutputFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    TEXT = "text"
    MARKDOWN = "markdown"

    @classmethod
    def parse(cls, value: str | OutputFormat | None) -> OutputFormat:
        """Case-insensitive lookup; unknown or empty values mean markdown."""
        if isinstance(value, OutputFormat):
            return value
        if not value:
            return cls.MARKDOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            warning(f"Unknown output format '{value}', using markdown")
            return cls.MARKDOWN


class ReportConfig(BaseModel):
    """Immutable settings for one report run."""

    model_config = ConfigDict(frozen=True)

    repository_path: str = "."
    project_dir: str | None = None
    output_format: OutputFormat = OutputFormat.MARKDOWN
    output_file: str | None = None
    branch: str | None = None
    tag_prefix: str = "v"
    include_commits: bool = False
    include_dependencies: bool = False
    changed_only: bool = False
    post_to_pr: bool = False
    update_existing_comment: bool = True
    comment_header: str = DEFAULT_COMMENT_HEADER
    token: str | None = None

    @field_validator("output_format", mode="before")
    @classmethod
    def _parse_format(cls, value: Any) -> OutputFormat:
        return OutputFormat.parse(value)


# Input name → (ReportConfig field, is_boolean)
INPUTS: dict[str, tuple[str, bool]] = {
    "repository-path": ("repository_path", False),
    "project-dir": ("project_dir", False),
    "output-format": ("output_format", False),
    "output-file": ("output_file", False),
    "branch": ("branch", False),
    "tag-prefix": ("tag_prefix", False),
    "include-commits": ("include_commits", True),
    "include-dependencies": ("include_dependencies", True),
    "changed-only": ("changed_only", True),
    "post-to-pr": ("post_to_pr", True),
    "update-existing-comment": ("update_existing_comment", True),
    "comment-header": ("comment_header", False),
    "token": ("token", False),
}

_TRUE = {"true", "True", "TRUE"}
_FALSE = {"false", "False", "FALSE"}


def parse_bool(name: str, value: Any) -> bool:
    """Parse a boolean input using the GitHub Actions YAML 1.2 core schema."""
    if isinstance(value, bool):
        return value
    text = str(value).strip()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def _apply_inputs(values: dict[str, Any], inputs: Mapping[str, Any]) -> None:
    """Copy recognized, non-empty inputs into ``values`` by field name."""
    for name, raw in inputs.items():
        if name not in INPUTS:
            continue
        if raw is None or (isinstance(raw, str) and raw == ""):
            continue
        field, is_bool = INPUTS[name]
        values[field] = parse_bool(name, raw) if is_bool else str(raw)


def load_toml_inputs(path: Path) -> dict[str, Any]:
    """Read the [tool.mr-version-report] table from a TOML file.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        doc = tomlkit.parse(path.read_text()).unwrap()
    except (OSError, ParseError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    table = doc.get("tool", {}).get(TOML_TABLE, {})
    unknown = sorted(set(table) - set(INPUTS))
    for key in unknown:
        warning(f"Ignoring unknown key '{key}' in {path}")
    return {key: table[key] for key in table if key in INPUTS}


def action_inputs(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect GitHub Action inputs from INPUT_<NAME> variables.

    The runner upper-cases input names and keeps hyphens, so the
    "tag-prefix" input arrives as INPUT_TAG-PREFIX.
    """
    found: dict[str, str] = {}
    for name in INPUTS:
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        if key in environ:
            found[name] = environ[key].strip()
    return found


def load_config(
    *,
    config_file: str | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ReportConfig:
    """Build the ReportConfig for this run.

    Args:
        config_file: Optional TOML file with a [tool.mr-version-report] table.
        overrides: Values from the command line, keyed by input name. None
            values are treated as "not given".
        environ: Environment to read action inputs from; defaults to
            os.environ.

    Raises:
        ConfigError: On unreadable config files or invalid values.
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    if config_file:
        _apply_inputs(values, load_toml_inputs(Path(config_file)))
    _apply_inputs(values, action_inputs(env))
    if overrides:
        _apply_inputs(values, overrides)
    if "token" not in values and env.get("GITHUB_TOKEN"):
        values["token"] = env["GITHUB_TOKEN"]
    try:
        return ReportConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
