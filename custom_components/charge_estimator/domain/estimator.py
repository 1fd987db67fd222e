"""Pure charging power estimation logic.

This module turns a window of battery level samples into an estimated
charging power, a speed tier and a time-to-full. It has NO dependencies on
Home Assistant - just pure Python logic.

The estimate is derived from the rate of change of the battery level:

    delta_per_hour = d_level / (dt / 3600)
    power_w        = battery_capacity_wh * delta_per_hour

Every degenerate input maps to a defined default instead of an error.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any

from .sample_window import SampleWindow

# Absorbs float noise before truncating to whole minutes (89.99999... -> 90)
_MINUTES_EPSILON = 1e-9


class ChargeSpeed(str, Enum):
    """Charging speed tier."""

    IDLE = "idle"
    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"


class EstimationStatus(str, Enum):
    """How the last estimate was produced."""

    NOT_CHARGING = "not_charging"
    INSUFFICIENT_SAMPLES = "insufficient_samples"
    WINDOW_TOO_SHORT = "window_too_short"
    NO_LEVEL_GAIN = "no_level_gain"
    ESTIMATED = "estimated"


@dataclass
class EstimatorSettings:
    """Tunable constants for one device class."""

    battery_capacity_wh: float = 12.0
    retention_horizon: timedelta = timedelta(minutes=15)
    sample_interval: timedelta = timedelta(seconds=30)
    min_span_seconds: float = 10.0
    slow_threshold_w: float = 10.0
    fast_threshold_w: float = 20.0
    max_power_w: float = 40.0
    max_time_remaining_min: int = 360

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "battery_capacity_wh": self.battery_capacity_wh,
            "retention_horizon_s": self.retention_horizon.total_seconds(),
            "sample_interval_s": self.sample_interval.total_seconds(),
            "min_span_seconds": self.min_span_seconds,
            "slow_threshold_w": self.slow_threshold_w,
            "fast_threshold_w": self.fast_threshold_w,
            "max_power_w": self.max_power_w,
            "max_time_remaining_min": self.max_time_remaining_min,
        }


@dataclass(frozen=True)
class Estimate:
    """Published estimation outputs."""

    power_w: float = 0.0
    speed: ChargeSpeed = ChargeSpeed.IDLE
    time_remaining_min: int = 0


IDLE_ESTIMATE = Estimate()


@dataclass
class EstimationInput:
    """Input data for one estimation pass."""

    window: SampleWindow
    is_charging: bool
    battery_level: float  # 0.0 - 1.0, current reading
    previous: Estimate = IDLE_ESTIMATE
    settings: EstimatorSettings = field(default_factory=EstimatorSettings)


@dataclass
class EstimationResult:
    """Result of one estimation pass."""

    estimate: Estimate
    status: EstimationStatus

    # Intermediate values, for diagnostics
    span_seconds: float = 0.0
    level_delta: float = 0.0
    delta_per_hour: float = 0.0
    raw_power_w: float = 0.0

    @property
    def is_computed(self) -> bool:
        """True when the estimate comes from a measurable level gain."""
        return self.status == EstimationStatus.ESTIMATED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "status": self.status.value,
            "power_w": round(self.estimate.power_w, 2),
            "speed": self.estimate.speed.value,
            "time_remaining_min": self.estimate.time_remaining_min,
            "span_seconds": round(self.span_seconds, 1),
            "level_delta": round(self.level_delta, 4),
            "delta_per_hour": round(self.delta_per_hour, 4),
            "raw_power_w": round(self.raw_power_w, 2),
        }


class ChargeEstimator:
    """Pure estimation logic.

    Each call is a function of its input only: re-running with the same
    window, flag, level and previous estimate yields the same result.
    """

    @staticmethod
    def calculate(input_data: EstimationInput) -> EstimationResult:
        """Estimate power, speed and time remaining.

        Algorithm:
        1. Not charging -> idle; charging with fewer than 2 samples -> normal
        2. Window span too short -> keep the previous estimate
        3. No level gain -> slow, power 0
        4. Power from the hourly level rate, clamped to the power cap
        5. Classify the clamped power into a speed tier
        6. Time to full from the hourly rate, clamped to the time cap

        Args:
            input_data: Estimation input

        Returns:
            EstimationResult with the estimate and how it was produced
        """
        settings = input_data.settings
        window = input_data.window

        # Step 1: not enough data
        if not input_data.is_charging:
            return EstimationResult(
                estimate=Estimate(0.0, ChargeSpeed.IDLE, 0),
                status=EstimationStatus.NOT_CHARGING,
            )
        if len(window) < 2:
            # First reading after plugging in shows "normal" rather than "idle"
            return EstimationResult(
                estimate=Estimate(0.0, ChargeSpeed.NORMAL, 0),
                status=EstimationStatus.INSUFFICIENT_SAMPLES,
            )

        # Step 2: too short to be meaningful, hold the last value
        span = window.span_seconds()
        if span <= settings.min_span_seconds:
            return EstimationResult(
                estimate=input_data.previous,
                status=EstimationStatus.WINDOW_TOO_SHORT,
                span_seconds=span,
            )

        # Step 3: still connected, but no measurable gain
        d_level = window.level_delta()
        if d_level <= 0:
            return EstimationResult(
                estimate=Estimate(0.0, ChargeSpeed.SLOW, 0),
                status=EstimationStatus.NO_LEVEL_GAIN,
                span_seconds=span,
                level_delta=d_level,
            )

        # Step 4: power from the hourly rate
        delta_per_hour = d_level / (span / 3600.0)
        raw_power = settings.battery_capacity_wh * delta_per_hour
        power = max(0.0, min(raw_power, settings.max_power_w))

        # Step 5: speed tier
        speed = ChargeEstimator.classify(power, settings)

        # Step 6: time to full
        time_remaining = ChargeEstimator.time_to_full(
            input_data.battery_level, delta_per_hour, settings
        )

        return EstimationResult(
            estimate=Estimate(power, speed, time_remaining),
            status=EstimationStatus.ESTIMATED,
            span_seconds=span,
            level_delta=d_level,
            delta_per_hour=delta_per_hour,
            raw_power_w=raw_power,
        )

    @staticmethod
    def classify(power_w: float, settings: EstimatorSettings) -> ChargeSpeed:
        """Map a clamped power estimate to a speed tier."""
        if power_w < settings.slow_threshold_w:
            return ChargeSpeed.SLOW
        if power_w < settings.fast_threshold_w:
            return ChargeSpeed.NORMAL
        return ChargeSpeed.FAST

    @staticmethod
    def time_to_full(
        battery_level: float,
        delta_per_hour: float,
        settings: EstimatorSettings,
    ) -> int:
        """Whole minutes until the battery is full at the current rate."""
        if delta_per_hour <= 0:
            return 0

        remaining_level = max(0.0, 1.0 - battery_level)
        minutes = remaining_level / delta_per_hour * 60.0
        minutes = int(math.floor(minutes + _MINUTES_EPSILON))
        return max(0, min(minutes, settings.max_time_remaining_min))
