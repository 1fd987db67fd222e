"""Charging session tracking.

A session runs from plug-in to unplug. While it is active, every computed
power estimate is recorded; when it ends a ChargingSessionRecord with the
duration and average/maximum power is appended to an in-memory history.
History is not persisted across restarts.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .formatting import format_duration


class ChargerType(str, Enum):
    """Charger type. Not detectable from battery readings, so selected manually."""

    WIRED = "wired"
    MAGSAFE = "magsafe"
    WIRELESS = "wireless"
    UNKNOWN = "unknown"

    @property
    def description(self) -> str:
        """Short explanation shown next to the charger type."""
        return _CHARGER_DESCRIPTIONS[self]


_CHARGER_DESCRIPTIONS = {
    ChargerType.WIRED: "Charging via cable (manual/estimated)",
    ChargerType.MAGSAFE: "MagSafe charging (manual/estimated)",
    ChargerType.WIRELESS: "Wireless charging (manual/estimated)",
    ChargerType.UNKNOWN: "Charger type is not reported by the device",
}


def _percent(level: float | None) -> float | None:
    return None if level is None else round(level * 100, 1)


@dataclass(frozen=True)
class ChargingSessionRecord:
    """One completed charging session."""

    start: datetime
    duration_minutes: int
    average_power_w: float
    max_power_w: float
    charger_type: ChargerType
    start_level: float | None
    end_level: float | None

    @property
    def formatted_duration(self) -> str:
        """Duration as text, e.g. '1 h · 20 min'."""
        return format_duration(self.duration_minutes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for attributes/logging."""
        return {
            "start": self.start.isoformat(),
            "duration_minutes": self.duration_minutes,
            "duration": self.formatted_duration,
            "average_power_w": round(self.average_power_w, 1),
            "max_power_w": round(self.max_power_w, 1),
            "charger_type": self.charger_type.value,
            "start_level_percent": _percent(self.start_level),
            "end_level_percent": _percent(self.end_level),
        }


class SessionTracker:
    """Builds session records from engine transitions."""

    def __init__(self, max_history: int = 10) -> None:
        """Initialize tracker.

        Args:
            max_history: Number of completed sessions to keep
        """
        self._history: deque[ChargingSessionRecord] = deque(maxlen=max_history)
        self._start: datetime | None = None
        self._start_level: float | None = None
        self._charger_type: ChargerType = ChargerType.UNKNOWN
        self._power_readings: list[float] = []

    @property
    def is_active(self) -> bool:
        """Check if a session is in progress."""
        return self._start is not None

    @property
    def history(self) -> list[ChargingSessionRecord]:
        """Completed sessions, newest first."""
        return list(reversed(self._history))

    @property
    def last_session(self) -> ChargingSessionRecord | None:
        """Most recently completed session."""
        return self._history[-1] if self._history else None

    def start(self, now: datetime, level: float | None, charger_type: ChargerType) -> None:
        """Open a new session, discarding any unfinished one."""
        self._start = now
        self._start_level = level
        self._charger_type = charger_type
        self._power_readings = []

    def set_charger_type(self, charger_type: ChargerType) -> None:
        """Update the charger type of the running session."""
        self._charger_type = charger_type

    def record_power(self, power_w: float) -> None:
        """Record a computed power estimate for the running session."""
        if self._start is None:
            return
        self._power_readings.append(power_w)

    def stop(self, now: datetime, level: float | None) -> ChargingSessionRecord | None:
        """Close the running session.

        Returns:
            The completed record, or None if no session was running
        """
        if self._start is None:
            return None

        readings = self._power_readings
        record = ChargingSessionRecord(
            start=self._start,
            duration_minutes=max(0, int((now - self._start).total_seconds() // 60)),
            average_power_w=sum(readings) / len(readings) if readings else 0.0,
            max_power_w=max(readings, default=0.0),
            charger_type=self._charger_type,
            start_level=self._start_level,
            end_level=level,
        )
        self._history.append(record)

        self._start = None
        self._power_readings = []
        return record
