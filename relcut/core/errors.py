"""Error codes for CLI exit status.

The release front-end only distinguishes success from failure: every
failed check, prepare or cut exits with 1 so CI steps can gate on it.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands. Values are stable."""

    OK = 0
    USER_ERROR = 1
