"""Wall-clock helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def unix_now() -> int:
    """Return the current Unix time in whole seconds."""
    return int(utc_now().timestamp())
