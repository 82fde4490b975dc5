"""Core types: results, configuration, exit codes and the repository root."""

from .config import ConfigError, ManifestConfig, ReleaseConfig, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result
from .workspace import Workspace, WorkspaceError, detect_workspace

__all__ = [
    # config
    "ConfigError",
    "ManifestConfig",
    "ReleaseConfig",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    # workspace
    "Workspace",
    "WorkspaceError",
    "detect_workspace",
]
