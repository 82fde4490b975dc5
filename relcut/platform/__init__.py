"""Platform abstraction layer: processes and files."""

from .files import atomic_write_text, read_text
from .process import ProcessError, run

__all__ = [
    # files
    "atomic_write_text",
    "read_text",
    # process
    "ProcessError",
    "run",
]
