"""Single Source of Truth - all state read by the entities.

The coordinator writes here after every engine event; entities only read.
The derived estimation fields are written together by publish(), so an entity
update never mixes values from two estimation passes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..domain.engine import EngineSnapshot
from ..domain.estimator import ChargeSpeed, EstimationStatus, EstimatorSettings
from ..domain.formatting import (
    charge_status_label,
    display_readout,
    format_time_remaining,
)
from ..domain.session_tracker import ChargerType, ChargingSessionRecord
from ..estimator_logging import get_logger


@dataclass
class EstimatorState:
    """All state for one config entry."""

    # Configuration (read-only after init)
    settings: EstimatorSettings = field(default_factory=EstimatorSettings)

    # Entity IDs (read-only after init)
    level_sensor_entity: str = ""
    charging_entity: str = ""

    # Published derived state
    is_charging: bool = False
    battery_level: float = 0.0
    estimated_power_w: float = 0.0
    charge_speed: ChargeSpeed = ChargeSpeed.IDLE
    time_remaining_min: int = 0
    sample_count: int = 0
    last_status: EstimationStatus = EstimationStatus.NOT_CHARGING

    # User preferences (informational only, never fed back into estimation)
    show_battery_percentage: bool = False
    charger_type: ChargerType = ChargerType.UNKNOWN

    # Completed sessions, newest first
    sessions: list[ChargingSessionRecord] = field(default_factory=list)

    def __post_init__(self):
        """Initialize logger after dataclass init."""
        self._logger = get_logger()

    def publish(self, snapshot: EngineSnapshot, status: EstimationStatus) -> None:
        """Write all derived fields from one engine snapshot."""
        self.is_charging = snapshot.is_charging
        self.battery_level = snapshot.battery_level
        self.estimated_power_w = snapshot.power_w
        self.charge_speed = snapshot.speed
        self.time_remaining_min = snapshot.time_remaining_min
        self.sample_count = snapshot.sample_count
        self.last_status = status
        self._logger.debug("STATE_PUBLISHED", status=status.value, **snapshot.to_dict())

    @property
    def charge_status(self) -> str:
        """Human-readable charge status."""
        return charge_status_label(self.is_charging, self.battery_level, self.charge_speed)

    @property
    def formatted_time_remaining(self) -> str:
        """Time remaining as text."""
        return format_time_remaining(
            self.time_remaining_min, self.is_charging, self.battery_level
        )

    @property
    def readout(self) -> str:
        """Main readout honoring the display preference."""
        return display_readout(
            self.show_battery_percentage,
            self.battery_level,
            self.estimated_power_w,
            self.is_charging,
        )

    @property
    def last_session(self) -> ChargingSessionRecord | None:
        """Most recently completed session."""
        return self.sessions[0] if self.sessions else None

    def to_dict(self) -> dict[str, Any]:
        """Export full state as dictionary."""
        return {
            "settings": self.settings.to_dict(),
            "level_sensor_entity": self.level_sensor_entity,
            "charging_entity": self.charging_entity,
            "is_charging": self.is_charging,
            "battery_level": self.battery_level,
            "estimated_power_w": self.estimated_power_w,
            "charge_speed": self.charge_speed.value,
            "time_remaining_min": self.time_remaining_min,
            "sample_count": self.sample_count,
            "last_status": self.last_status.value,
            "show_battery_percentage": self.show_battery_percentage,
            "charger_type": self.charger_type.value,
            "sessions": [session.to_dict() for session in self.sessions],
        }
