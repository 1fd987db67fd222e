"""Estimation engine - owner of the sample window and the derived state.

The engine reacts to three kinds of input, which the caller must deliver one
at a time:
- level changes from the battery feed
- charging-state changes from the battery feed
- periodic ticks

Each sampling event appends to the window and re-runs the estimator; the
published snapshot is replaced as a whole, so observers never see fields
from different passes. The engine is pure Python and takes the current time
from its caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .estimator import (
    ChargeEstimator,
    ChargeSpeed,
    Estimate,
    EstimationInput,
    EstimationResult,
    EstimationStatus,
    EstimatorSettings,
    IDLE_ESTIMATE,
)
from .formatting import charge_status_label
from .sample_window import SampleWindow


def clamp_level(level: float) -> float:
    """Clamp a raw sensor level into 0.0 - 1.0."""
    return max(0.0, min(1.0, level))


@dataclass(frozen=True)
class EngineSnapshot:
    """Derived state published after every event."""

    is_charging: bool = False
    battery_level: float = 0.0
    power_w: float = 0.0
    speed: ChargeSpeed = ChargeSpeed.IDLE
    time_remaining_min: int = 0
    sample_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "is_charging": self.is_charging,
            "battery_level": round(self.battery_level, 4),
            "power_w": round(self.power_w, 2),
            "speed": self.speed.value,
            "time_remaining_min": self.time_remaining_min,
            "sample_count": self.sample_count,
        }


class EstimationEngine:
    """Stateful estimator driven by battery events and ticks."""

    def __init__(
        self,
        settings: EstimatorSettings | None = None,
        is_charging: bool = False,
        battery_level: float | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Estimator constants
            is_charging: Initial charging flag
            battery_level: Initial battery level (0.0 - 1.0), None if not read yet
        """
        self.settings = settings or EstimatorSettings()
        self.window = SampleWindow(self.settings.retention_horizon)
        self._is_charging = is_charging
        self._battery_level: float | None = None
        if battery_level is not None:
            self._battery_level = clamp_level(battery_level)
        self._estimate: Estimate = IDLE_ESTIMATE
        self._last_result: EstimationResult | None = None
        self._snapshot = self._build_snapshot()

    @property
    def is_charging(self) -> bool:
        """Current charging flag."""
        return self._is_charging

    @property
    def battery_level(self) -> float | None:
        """Last accepted battery level, None until the first reading."""
        return self._battery_level

    @property
    def estimate(self) -> Estimate:
        """Current published estimate."""
        return self._estimate

    @property
    def last_result(self) -> EstimationResult | None:
        """Result of the last estimation pass."""
        return self._last_result

    @property
    def last_status(self) -> EstimationStatus:
        """How the current estimate was produced."""
        if self._last_result is None:
            return EstimationStatus.NOT_CHARGING
        return self._last_result.status

    def snapshot(self) -> EngineSnapshot:
        """Return the published derived state."""
        return self._snapshot

    def status_label(self) -> str:
        """Human-readable charge status for the current snapshot."""
        snap = self._snapshot
        return charge_status_label(snap.is_charging, snap.battery_level, snap.speed)

    # ========== Event handlers ==========

    def handle_level_change(self, level: float, now: datetime) -> EstimationResult | None:
        """Handle a new level reading from the battery feed.

        Returns:
            The estimation result, or None when not charging
        """
        self._battery_level = clamp_level(level)
        if not self._is_charging:
            self._publish()
            return None
        return self._sample(now)

    def handle_charging_change(
        self,
        is_charging: bool,
        now: datetime,
        level: float | None = None,
    ) -> bool:
        """Handle a charging-state change from the battery feed.

        Args:
            is_charging: New charging flag
            now: Event time
            level: Current level, if the caller has one

        Returns:
            True if the flag changed
        """
        if level is not None:
            self._battery_level = clamp_level(level)

        was_charging = self._is_charging
        self._is_charging = is_charging

        if was_charging and not is_charging:
            self.reset()
            return True

        if not was_charging and is_charging:
            # The reading at plug-in is the first sample of the session
            self._sample(now)
            return True

        self._publish()
        return False

    def handle_tick(self, level: float | None, now: datetime) -> EstimationResult | None:
        """Handle a periodic tick.

        The tick source keeps running whatever the charging state is; ticks
        that arrive while not charging are ignored here.

        Returns:
            The estimation result, or None if the tick was ignored
        """
        if not self._is_charging:
            return None
        if level is not None:
            self._battery_level = clamp_level(level)
        return self._sample(now)

    def recompute(self) -> EstimationResult:
        """Re-run estimation on the current window without sampling."""
        return self._estimate_and_publish()

    def reset(self) -> None:
        """Clear the window and zero every output."""
        self.window.clear()
        self._estimate = IDLE_ESTIMATE
        self._last_result = EstimationResult(
            estimate=IDLE_ESTIMATE,
            status=EstimationStatus.NOT_CHARGING,
        )
        self._publish()

    # ========== Internals ==========

    def _sample(self, now: datetime) -> EstimationResult:
        """Append the current level and re-estimate.

        Nothing is appended while the level has never been read.
        """
        if self._battery_level is not None:
            self.window.append(self._battery_level, now)
        return self._estimate_and_publish()

    def _estimate_and_publish(self) -> EstimationResult:
        """Run the estimator and publish its outputs."""
        result = ChargeEstimator.calculate(
            EstimationInput(
                window=self.window,
                is_charging=self._is_charging,
                battery_level=self._level_or_empty(),
                previous=self._estimate,
                settings=self.settings,
            )
        )
        self._estimate = result.estimate
        self._last_result = result
        self._publish()
        return result

    def _publish(self) -> None:
        """Replace the published snapshot in one step."""
        self._snapshot = self._build_snapshot()

    def _level_or_empty(self) -> float:
        return 0.0 if self._battery_level is None else self._battery_level

    def _build_snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            is_charging=self._is_charging,
            battery_level=self._level_or_empty(),
            power_w=self._estimate.power_w,
            speed=self._estimate.speed,
            time_remaining_min=self._estimate.time_remaining_min,
            sample_count=len(self.window),
        )
