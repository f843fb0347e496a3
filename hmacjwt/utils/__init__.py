"""Utility helpers for time operations."""

from .time import unix_now, utc_now

__all__ = ["unix_now", "utc_now"]
