"""Clock capability used to label content directories and staging symlinks.

The label only has to be sortable and unique per cycle; it carries no
other meaning. Production uses the UTC wall clock, tests pass a FixedClock.
"""
from __future__ import annotations

import datetime
from typing import Protocol


class Clock(Protocol):
    """Anything that produces the current naming label."""

    def now(self) -> str: ...


class SystemClock:
    """Wall-clock labels in RFC 3339 form, e.g. ``2024-05-01T12:00:00Z``."""

    def now(self) -> str:
        return datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class FixedClock:
    """Return a caller-controlled label.

    Parameters
    ----------
    label:
        The value returned by :meth:`now` until changed via :meth:`set`.
    """

    def __init__(self, label: str) -> None:
        self._label = label

    def set(self, label: str) -> None:
        self._label = label

    def now(self) -> str:
        return self._label


__all__ = ["Clock", "FixedClock", "SystemClock"]
