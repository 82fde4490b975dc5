from __future__ import annotations

import os
from pathlib import Path

import typer

from relcut import __version__
from relcut.cli.commands.release_cmd import check, cut, prepare
from relcut.core.errors import ErrorCode
from relcut.core.workspace import ROOT_ENV_VAR


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    epilog=(
        "Examples:\n\n"
        "  relcut prepare 0.1.0\n\n"
        "  relcut check --tag v0.1.0\n\n"
        "  relcut cut 0.1.0 --push"
    ),
)


# Commands
app.command()(check)
app.command()(prepare)
app.command()(cut)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Repository root (overrides auto detection)",
    ),
) -> None:
    """Keep release metadata consistent and cut releases."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if root is not None:
        try:
            resolved = root.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --root: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not resolved.is_dir():
            typer.echo(f"error: --root '{resolved}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[ROOT_ENV_VAR] = str(resolved)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))


def main() -> None:
    app()
