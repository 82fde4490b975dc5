from __future__ import annotations

import typer

from relcut.cli.commands._helpers import exit_on_error
from relcut.cli.context import build_context
from relcut.git.repository import Repository
from relcut.services.release.model import CheckOptions, CutOptions
from relcut.services.release.service import cut as cut_release
from relcut.services.release.service import prepare as prepare_release
from relcut.services.release.service import run_check


def check(
    version: str | None = typer.Option(
        None, "--version", help="Expected version for every file (x.y.z)."
    ),
    tag: str | None = typer.Option(None, "--tag", help="Expected release tag (vx.y.z)."),
    fix: bool = typer.Option(False, "--fix", help="Align files before validating."),
) -> None:
    """Validate release metadata (version files, workflow, updater config)."""
    ctx = build_context()
    result = run_check(
        workspace=ctx.workspace,
        config=ctx.config,
        options=CheckOptions(fix=fix, version=version, tag=tag),
        console=ctx.console,
    )
    exit_on_error(result, ctx)


def prepare(
    version: str = typer.Argument(..., help="Release version (x.y.z, no leading v)."),
) -> None:
    """Align every file to VERSION and validate (check --fix --version --tag)."""
    ctx = build_context()
    result = prepare_release(
        workspace=ctx.workspace,
        config=ctx.config,
        version=version,
        console=ctx.console,
    )
    exit_on_error(result, ctx)


def cut(
    version: str = typer.Argument(..., help="Release version (x.y.z, no leading v)."),
    push: bool = typer.Option(False, "--push", help="Push HEAD and the tag to origin."),
) -> None:
    """Prepare VERSION, then commit, tag and optionally push."""
    ctx = build_context()
    result = cut_release(
        workspace=ctx.workspace,
        config=ctx.config,
        options=CutOptions(version=version, push=push),
        repo=Repository(ctx.workspace.root),
        console=ctx.console,
    )
    exit_on_error(result, ctx)
