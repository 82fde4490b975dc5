"""Services: use cases built on core, platform, git and output."""

from __future__ import annotations
