"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from relcut.core.errors import ErrorCode
from relcut.core.result import Err, Result
from relcut.output.console import Style
from relcut.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from relcut.cli.context import CLIContext

T = TypeVar("T")


def exit_on_error(
    result: Result[T, ReleaseError],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.USER_ERROR,
) -> None:
    """Exit with error if result is Err, otherwise return.

    A failed check has already printed its issue list, so only the exit
    code is left to report for it.
    """
    if isinstance(result, Err):
        error = result.error
        if error.kind != "check_failed":
            ctx.console.error(error.message)
            if error.hint:
                ctx.console.print(f"hint: {error.hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))
