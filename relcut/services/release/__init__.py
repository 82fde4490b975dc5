"""Release metadata consistency and release cutting."""

from __future__ import annotations
