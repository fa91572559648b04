"""Adapters - I/O implementations of ports."""

from .sqlite_store import SqliteStore, StoreError
from .clock import SystemClock, FixedClock

__all__ = [
    "SqliteStore",
    "StoreError",
    "SystemClock",
    "FixedClock",
]
