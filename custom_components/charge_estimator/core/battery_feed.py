"""Battery feed - single point of access to the phone's battery entities.

This module provides a small capability interface over Home Assistant state:
- current battery level (fraction 0.0 - 1.0)
- current charging flag
- subscription to changes of either

The estimation engine never touches HA directly, so it can be driven by
synthetic event sequences in tests.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Awaitable, Callable

from homeassistant.const import STATE_ON, STATE_UNAVAILABLE, STATE_UNKNOWN
from homeassistant.helpers.event import async_track_state_change_event

from ..const import CHARGING_STATES
from ..estimator_logging import get_logger
from .state import EstimatorState

if TYPE_CHECKING:
    from homeassistant.core import Event, HomeAssistant, State

LevelCallback = Callable[[float], Awaitable[None]]
ChargingCallback = Callable[[bool], Awaitable[None]]
ErrorCallback = Callable[[str], Awaitable[None]]


class BatteryFeed:
    """Reads and watches the battery level and charging entities."""

    def __init__(self, hass: HomeAssistant, state: EstimatorState) -> None:
        """Initialize the battery feed.

        Args:
            hass: Home Assistant instance
            state: Estimator state holding the entity ids
        """
        self.hass = hass
        self.state = state
        self._logger = get_logger()

    # ========== Parsing ==========

    def parse_level(self, state: State | None) -> float | None:
        """Convert a battery level state (percent) into a 0-1 fraction.

        Negative readings from faulty sensors are clamped to 0.

        Returns:
            Level, or None if the state is missing or not numeric
        """
        if state is None:
            self._logger.warning("LEVEL_SENSOR_NOT_FOUND", entity_id=self.state.level_sensor_entity)
            return None

        if state.state in (STATE_UNKNOWN, STATE_UNAVAILABLE):
            self._logger.warning("LEVEL_SENSOR_UNAVAILABLE", entity_id=state.entity_id)
            return None

        try:
            percent = float(state.state)
            if not math.isfinite(percent):
                raise ValueError(f"non-finite level: {state.state}")
        except (ValueError, TypeError) as ex:
            self._logger.error(
                "LEVEL_SENSOR_INVALID_VALUE",
                entity_id=state.entity_id,
                value=state.state,
                error=str(ex),
            )
            return None

        return max(0.0, min(1.0, percent / 100.0))

    def parse_charging(self, state: State | None) -> bool | None:
        """Convert a charging entity state into a charging flag.

        Binary sensors are charging when "on"; state sensors (such as the
        companion app's battery state) when "charging" or "full".

        Returns:
            Charging flag, or None if the state is missing or unavailable
        """
        if state is None:
            self._logger.warning("CHARGING_ENTITY_NOT_FOUND", entity_id=self.state.charging_entity)
            return None

        if state.state in (STATE_UNKNOWN, STATE_UNAVAILABLE):
            self._logger.warning("CHARGING_ENTITY_UNAVAILABLE", entity_id=state.entity_id)
            return None

        value = str(state.state).strip().lower()
        return value == STATE_ON or value in CHARGING_STATES

    # ========== Reading ==========

    def get_battery_level(self) -> float | None:
        """Get the current battery level (0.0 - 1.0)."""
        level = self.parse_level(self.hass.states.get(self.state.level_sensor_entity))
        if level is not None:
            self._logger.debug("LEVEL_READ", level=level)
        return level

    def is_charging(self) -> bool:
        """Get the current charging flag. Unknown reads as not charging."""
        return bool(self.parse_charging(self.hass.states.get(self.state.charging_entity)))

    # ========== Subscriptions ==========

    def async_subscribe(
        self,
        on_level: LevelCallback,
        on_charging: ChargingCallback,
        on_error: ErrorCallback | None = None,
    ) -> list[Callable[[], None]]:
        """Subscribe to level and charging changes.

        Unusable states are logged and not forwarded; on_error, if given,
        receives the entity id.

        Returns:
            Unsubscribe functions
        """

        async def _level_listener(event: Event) -> None:
            if _attributes_only(event):
                return
            level = self.parse_level(event.data.get("new_state"))
            if level is not None:
                await on_level(level)
            elif on_error is not None:
                await on_error(event.data["entity_id"])

        async def _charging_listener(event: Event) -> None:
            if _attributes_only(event):
                return
            charging = self.parse_charging(event.data.get("new_state"))
            if charging is not None:
                await on_charging(charging)
            elif on_error is not None:
                await on_error(event.data["entity_id"])

        unsubs = [
            async_track_state_change_event(
                self.hass, [self.state.level_sensor_entity], _level_listener
            ),
            async_track_state_change_event(
                self.hass, [self.state.charging_entity], _charging_listener
            ),
        ]
        self._logger.debug(
            "FEED_SUBSCRIBED",
            level_sensor=self.state.level_sensor_entity,
            charging_entity=self.state.charging_entity,
        )
        return unsubs


def _attributes_only(event: Event) -> bool:
    """True when only the attributes of the entity changed."""
    old_state = event.data.get("old_state")
    new_state = event.data.get("new_state")
    return (
        old_state is not None
        and new_state is not None
        and old_state.state == new_state.state
    )
