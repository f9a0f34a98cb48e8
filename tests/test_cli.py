"""Tests for mr_version_report.cli."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from mr_version_report.cli import __version__, build_parser, cli
from mr_version_report.config import OutputFormat
from mr_version_report.shell import ReportError


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli(["--version"])
    assert excinfo.value.code == 0
    assert f"mr-version-report {__version__}" in capsys.readouterr().out


def test_requires_subcommand() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli([])
    assert excinfo.value.code == 2


def test_rejects_unknown_subcommand() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli(["publish"])
    assert excinfo.value.code == 2


class TestReportCommand:
    def test_unset_flags_are_none(self) -> None:
        args = build_parser().parse_args(["report"])
        assert args.changed_only is None
        assert args.tag_prefix is None

    def test_boolean_flags(self) -> None:
        args = build_parser().parse_args(
            ["report", "--changed-only", "--no-update-existing-comment"]
        )
        assert args.changed_only is True
        assert args.update_existing_comment is False

    @patch("mr_version_report.cli.load_action_context")
    @patch("mr_version_report.cli.run_report")
    def test_flags_reach_config(
        self,
        mock_run: MagicMock,
        mock_context: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("INPUT_TAG-PREFIX", "rel-")
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        cli(
            [
                "report",
                "--repository-path",
                "/repo",
                "--output-format",
                "json",
                "--post-to-pr",
                "--token",
                "abc",
            ]
        )

        config = mock_run.call_args.args[0]
        assert config.repository_path == "/repo"
        assert config.output_format is OutputFormat.JSON
        assert config.post_to_pr is True
        assert config.token == "abc"
        assert config.tag_prefix == "rel-"
        assert mock_run.call_args.args[1] is mock_context.return_value

    @patch("mr_version_report.cli.load_action_context")
    @patch("mr_version_report.cli.run_report")
    def test_report_error_is_single_failure(
        self,
        mock_run: MagicMock,
        mock_context: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
        mock_run.side_effect = ReportError("mr-version report failed: boom")

        with pytest.raises(SystemExit) as excinfo:
            cli(["report"])

        assert excinfo.value.code == 1
        assert capsys.readouterr().err == (
            "ERROR: Failed to generate version report: mr-version report failed: boom\n"
        )


class TestRenderCommand:
    def test_renders_saved_report(
        self,
        tmp_path: Path,
        nested_payload: dict[str, Any],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        saved = tmp_path / "report.json"
        saved.write_text(json.dumps(nested_payload))

        cli(["render", "-i", str(saved), "--output-format", "text", "--changed-only"])

        out = capsys.readouterr().out
        assert out.startswith("=== MonoRepo Version Report ===")
        assert "[CHANGED] ServiceA: 1.2.0" in out
        assert "[UNCHANGED]" not in out

    def test_invalid_json(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
        saved = tmp_path / "report.json"
        saved.write_text("{oops")

        with pytest.raises(SystemExit) as excinfo:
            cli(["render", "-i", str(saved)])

        assert excinfo.value.code == 1
        assert "Failed to parse report output" in capsys.readouterr().err

    def test_missing_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
        with pytest.raises(SystemExit) as excinfo:
            cli(["render", "-i", str(tmp_path / "missing.json")])
        assert excinfo.value.code == 1
