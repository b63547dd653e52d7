"""CLI tests via typer.testing.CliRunner."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from pbpup.cli import app as app_module
from pbpup.cli.app import app
from pbpup.cli.settings_cmd import store_path_problem


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


class TestSettingsCommands:
    def test_show(self, runner) -> None:
        result = runner.invoke(app, ["settings", "show"])
        assert result.exit_code == 0
        assert "paste_keys" in result.output

    def test_validate(self, runner) -> None:
        result = runner.invoke(app, ["settings", "validate"])
        assert result.exit_code == 0
        assert "Profile store:" in result.output
        assert "bundled chromium" in result.output

    def test_validate_reports_bad_channel(self, runner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PBPUP_BROWSER__CHANNEL", "firefox")
        result = runner.invoke(app, ["settings", "validate"])
        assert result.exit_code == 1
        assert "browser.channel" in result.output

    def test_validate_reports_unusable_store(self, runner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        monkeypatch.setenv("PBPUP_STORE__PATH", str(blocker / "profiles.db"))
        result = runner.invoke(app, ["settings", "validate"])
        assert result.exit_code == 1
        assert "Profile store unusable" in result.output


class TestStorePathProblem:
    def test_creates_missing_parent(self, tmp_path: Path) -> None:
        target = tmp_path / "new" / "profiles.db"
        assert store_path_problem(target) is None
        assert target.parent.is_dir()

    def test_directory_in_place_of_file(self, tmp_path: Path) -> None:
        assert "is not a file" in store_path_problem(tmp_path)


class TestSessionEntry:
    def test_no_command_runs_session(self, runner, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        monkeypatch.setattr(app_module, "run_session", lambda: calls.append("run") or 0)
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert calls == ["run"]

    def test_exit_code_propagated(self, runner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "run_session", lambda: 1)
        assert runner.invoke(app, []).exit_code == 1

    def test_version(self, runner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "run_session", lambda: pytest.fail("session started"))
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("pbpup ")
