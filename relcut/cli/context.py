from __future__ import annotations

from dataclasses import dataclass

import typer

from relcut.core.config import ReleaseConfig, load_config_or_default
from relcut.core.errors import ErrorCode
from relcut.core.result import Err
from relcut.core.workspace import Workspace, detect_workspace
from relcut.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace: Workspace
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context() -> CLIContext:
    workspace_result = detect_workspace()
    if isinstance(workspace_result, Err):
        typer.echo(f"error: {workspace_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    workspace = workspace_result.value

    config_result = load_config_or_default(workspace.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        workspace=workspace,
        config=config_result.value,
        console=RichConsole(),
    )
