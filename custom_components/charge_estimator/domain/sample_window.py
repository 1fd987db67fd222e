"""Time-bounded window of battery level samples.

The window keeps the most recent level readings of the current charging
session, oldest first. Every append prunes readings that are older than the
retention horizon, and the window is cleared when charging stops.

It has NO dependencies on Home Assistant and never raises: an empty or
single-sample window simply yields empty results.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterator

DEFAULT_HORIZON = timedelta(minutes=15)


@dataclass(frozen=True)
class Sample:
    """A single battery level observation."""

    level: float  # 0.0 - 1.0
    timestamp: datetime


class SampleWindow:
    """Ordered buffer of samples bounded by a retention horizon."""

    def __init__(self, horizon: timedelta = DEFAULT_HORIZON) -> None:
        """Initialize an empty window.

        Args:
            horizon: Maximum age of a sample relative to the latest append
        """
        self.horizon = horizon
        self._samples: deque[Sample] = deque()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    def append(self, level: float, now: datetime) -> Sample:
        """Add a sample at the end of the window and prune stale ones."""
        sample = Sample(level=level, timestamp=now)
        self._samples.append(sample)
        self.prune(now)
        return sample

    def prune(self, now: datetime, horizon: timedelta | None = None) -> int:
        """Drop samples older than the horizon.

        A sample exactly at the horizon is kept. Since samples are in
        chronological order, stale ones are always at the front.

        Returns:
            Number of samples removed
        """
        if horizon is None:
            horizon = self.horizon

        removed = 0
        while self._samples and now - self._samples[0].timestamp > horizon:
            self._samples.popleft()
            removed += 1
        return removed

    def clear(self) -> None:
        """Remove every sample."""
        self._samples.clear()

    def first(self) -> Sample | None:
        """Return the oldest retained sample."""
        return self._samples[0] if self._samples else None

    def last(self) -> Sample | None:
        """Return the newest retained sample."""
        return self._samples[-1] if self._samples else None

    def span_seconds(self) -> float:
        """Seconds between the oldest and newest sample."""
        if len(self._samples) < 2:
            return 0.0
        return (self._samples[-1].timestamp - self._samples[0].timestamp).total_seconds()

    def level_delta(self) -> float:
        """Level change between the oldest and newest sample."""
        if len(self._samples) < 2:
            return 0.0
        return self._samples[-1].level - self._samples[0].level

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/diagnostics."""
        first = self.first()
        last = self.last()
        return {
            "count": len(self._samples),
            "horizon_seconds": self.horizon.total_seconds(),
            "first": first.timestamp.isoformat() if first else None,
            "last": last.timestamp.isoformat() if last else None,
            "span_seconds": self.span_seconds(),
            "level_delta": round(self.level_delta(), 4),
        }
