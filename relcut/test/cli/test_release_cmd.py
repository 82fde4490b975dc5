from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from relcut import __version__
from relcut.cli.app import app
from relcut.cli.commands._helpers import exit_on_error
from relcut.cli.context import CLIContext
from relcut.core.config import ReleaseConfig
from relcut.core.errors import ErrorCode
from relcut.core.result import Err, Ok
from relcut.core.workspace import ROOT_ENV_VAR, Workspace
from relcut.output.console import MockConsole
from relcut.services.release.errors import ReleaseError


def _ctx(ws: Workspace) -> CLIContext:
    return CLIContext(workspace=ws, config=ReleaseConfig(), console=MockConsole())


def _patch_context(monkeypatch: pytest.MonkeyPatch, ctx: CLIContext) -> None:
    import relcut.cli.commands.release_cmd as release_cmd

    monkeypatch.setattr(release_cmd, "build_context", lambda: ctx)


def test_check_passes(
    release_tree: Callable[..., Workspace], monkeypatch: pytest.MonkeyPatch
) -> None:
    import relcut.cli.commands.release_cmd as release_cmd

    ctx = _ctx(release_tree())
    _patch_context(monkeypatch, ctx)

    release_cmd.check(version=None, tag="v1.0.0", fix=False)

    assert isinstance(ctx.console, MockConsole)
    assert not ctx.console.has_error()


def test_check_failure_exits_without_repeating_error(
    release_tree: Callable[..., Workspace], monkeypatch: pytest.MonkeyPatch
) -> None:
    import relcut.cli.commands.release_cmd as release_cmd

    ctx = _ctx(release_tree(workflow="drifted"))
    _patch_context(monkeypatch, ctx)

    with pytest.raises(typer.Exit) as exc:
        release_cmd.check(version=None, tag=None, fix=False)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("error: release check failed") == []
    assert ctx.console.find("Release check failed:")


def test_prepare_bad_version_prints_hint(
    release_tree: Callable[..., Workspace], monkeypatch: pytest.MonkeyPatch
) -> None:
    import relcut.cli.commands.release_cmd as release_cmd

    ctx = _ctx(release_tree())
    _patch_context(monkeypatch, ctx)

    with pytest.raises(typer.Exit) as exc:
        release_cmd.prepare(version="v1.2.3")

    assert exc.value.exit_code == 1
    assert isinstance(ctx.console, MockConsole)
    assert "error: use bare version without 'v': v1.2.3" in ctx.console.messages
    assert "hint: try: 1.2.3" in ctx.console.messages


def test_cut_rejects_bad_version_before_git(
    release_tree: Callable[..., Workspace], monkeypatch: pytest.MonkeyPatch
) -> None:
    import relcut.cli.commands.release_cmd as release_cmd

    ctx = _ctx(release_tree())
    _patch_context(monkeypatch, ctx)

    with pytest.raises(typer.Exit) as exc:
        release_cmd.cut(version="1.2", push=False)

    assert exc.value.exit_code == 1
    assert isinstance(ctx.console, MockConsole)
    assert "error: invalid semver: 1.2" in ctx.console.messages


class TestExitOnError:
    def test_ok_of_any_type_returns(self, release_tree: Callable[..., Workspace]) -> None:
        ctx = _ctx(release_tree())

        exit_on_error(Ok("v1.2.3"), ctx)
        exit_on_error(Ok(None), ctx)

        assert isinstance(ctx.console, MockConsole)
        assert ctx.console.messages == []

    def test_err_prints_message_and_hint(self, release_tree: Callable[..., Workspace]) -> None:
        ctx = _ctx(release_tree())
        error = ReleaseError(kind="tag_exists", message="Tag already exists: v1.0.0", hint="bump")

        with pytest.raises(typer.Exit) as exc:
            exit_on_error(Err(error), ctx)

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert isinstance(ctx.console, MockConsole)
        assert ctx.console.messages == ["error: Tag already exists: v1.0.0", "hint: bump"]


class TestApp:
    def test_version_flag(self) -> None:
        result = CliRunner().invoke(app, ["--version"])

        assert result.exit_code == 0
        assert result.stdout.strip() == __version__

    def test_root_option_points_check_at_repository(
        self,
        tmp_path: Path,
        release_tree: Callable[..., Workspace],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        release_tree()
        # Registered so the value set by --root is removed afterwards.
        monkeypatch.setenv(ROOT_ENV_VAR, "")

        result = CliRunner().invoke(app, ["--root", str(tmp_path), "check", "--tag", "v1.0.0"])

        assert result.exit_code == 0
        assert "Release metadata check passed." in result.stdout

    def test_root_option_check_failure_exit_code(
        self,
        tmp_path: Path,
        release_tree: Callable[..., Workspace],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        release_tree(workflow="drifted")
        monkeypatch.setenv(ROOT_ENV_VAR, "")

        result = CliRunner().invoke(app, ["--root", str(tmp_path), "check"])

        assert result.exit_code == 1

    def test_root_must_be_a_directory(self, tmp_path: Path) -> None:
        missing = tmp_path / "nope"

        result = CliRunner().invoke(app, ["--root", str(missing), "check"])

        assert result.exit_code == 1
