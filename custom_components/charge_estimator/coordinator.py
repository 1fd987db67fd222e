"""Charge Estimator Coordinator - thin orchestrator for all components.

It:
- Builds settings and state from the config entry
- Subscribes to the battery feed and schedules the sampling tick
- Delegates all estimation logic to the domain engine
- Publishes state and emits events after every engine update

It does NOT contain any estimation logic.

The sampling tick runs for the whole lifetime of the entry and is gated on the
charging flag inside the engine. Starting and stopping the timer on charging
changes would race with state-change delivery; a few no-op ticks are the price.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

from homeassistant.core import ServiceCall
from homeassistant.helpers.event import async_track_time_interval
from homeassistant.util import dt as dt_util

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

from .const import (
    CONF_BATTERY_CAPACITY,
    CONF_BATTERY_LEVEL_SENSOR,
    CONF_CHARGING_ENTITY,
    CONF_FAST_THRESHOLD,
    CONF_MAX_POWER,
    CONF_MAX_TIME_REMAINING,
    CONF_MIN_SPAN_SECONDS,
    CONF_RETENTION_MINUTES,
    CONF_SAMPLE_INTERVAL,
    CONF_SLOW_THRESHOLD,
    DEFAULT_BATTERY_CAPACITY,
    DEFAULT_FAST_THRESHOLD,
    DEFAULT_MAX_POWER,
    DEFAULT_MAX_TIME_REMAINING,
    DEFAULT_MIN_SPAN_SECONDS,
    DEFAULT_RETENTION_MINUTES,
    DEFAULT_SAMPLE_INTERVAL,
    DEFAULT_SLOW_THRESHOLD,
    DOMAIN,
    SERVICE_SAMPLE_NOW,
    SESSION_HISTORY_SIZE,
)
from .core.battery_feed import BatteryFeed
from .core.events import EstimatorEvent, EstimatorEventBus, EventData
from .core.state import EstimatorState
from .domain.engine import EstimationEngine
from .domain.estimator import EstimationResult, EstimatorSettings
from .domain.session_tracker import ChargerType, SessionTracker
from .estimator_logging import get_logger


class ChargeEstimatorCoordinator:
    """Thin orchestrator for Charge Estimator.

    This class:
    - Initializes all components
    - Routes level changes, charging changes and ticks to the engine
    - Publishes engine snapshots to the shared state
    - Tracks charging sessions through the event bus
    """

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        """Initialize the coordinator."""
        self.hass = hass
        self.entry = entry
        self._listeners: list[Callable[[], None]] = []
        self._logger = get_logger()

        self._logger.info("COORDINATOR_INIT_START", entry_id=entry.entry_id)

        self.settings = self._create_settings_from_config()
        self.state = EstimatorState(
            settings=self.settings,
            level_sensor_entity=entry.data.get(CONF_BATTERY_LEVEL_SENSOR, ""),
            charging_entity=entry.data.get(CONF_CHARGING_ENTITY, ""),
        )

        self.events = EstimatorEventBus(hass, entry.entry_id)
        self.feed = BatteryFeed(hass, self.state)
        self.engine = EstimationEngine(self.settings)
        self.sessions = SessionTracker(max_history=SESSION_HISTORY_SIZE)

        self._logger.info("COORDINATOR_INIT_COMPLETE", **self.settings.to_dict())

    def _create_settings_from_config(self) -> EstimatorSettings:
        """Create estimator settings from config entry data and options."""
        data = self.entry.data
        options = self.entry.options

        def get_config(key, default):
            return options.get(key, data.get(key, default))

        return EstimatorSettings(
            battery_capacity_wh=float(get_config(CONF_BATTERY_CAPACITY, DEFAULT_BATTERY_CAPACITY)),
            retention_horizon=timedelta(
                minutes=float(get_config(CONF_RETENTION_MINUTES, DEFAULT_RETENTION_MINUTES))
            ),
            sample_interval=timedelta(
                seconds=float(get_config(CONF_SAMPLE_INTERVAL, DEFAULT_SAMPLE_INTERVAL))
            ),
            min_span_seconds=float(get_config(CONF_MIN_SPAN_SECONDS, DEFAULT_MIN_SPAN_SECONDS)),
            slow_threshold_w=float(get_config(CONF_SLOW_THRESHOLD, DEFAULT_SLOW_THRESHOLD)),
            fast_threshold_w=float(get_config(CONF_FAST_THRESHOLD, DEFAULT_FAST_THRESHOLD)),
            max_power_w=float(get_config(CONF_MAX_POWER, DEFAULT_MAX_POWER)),
            max_time_remaining_min=int(
                get_config(CONF_MAX_TIME_REMAINING, DEFAULT_MAX_TIME_REMAINING)
            ),
        )

    async def async_init(self) -> None:
        """Read the initial battery state and start listening."""
        self._logger.info("COORDINATOR_ASYNC_INIT_START")

        self.events.on(EstimatorEvent.CHARGING_STARTED, self._on_charging_started)
        self.events.on(EstimatorEvent.CHARGING_STOPPED, self._on_charging_stopped)

        # Initial read
        now = dt_util.utcnow()
        level = self.feed.get_battery_level()
        if level is not None:
            self.engine.handle_level_change(level, now)
        if self.feed.is_charging():
            await self.async_handle_charging_change(True, now)
        else:
            self._publish()

        self._listeners.extend(
            self.feed.async_subscribe(
                self._handle_level_event,
                self._handle_charging_event,
                self._handle_feed_error,
            )
        )
        self._listeners.append(
            async_track_time_interval(self.hass, self._handle_tick, self.settings.sample_interval)
        )

        self.hass.services.async_register(DOMAIN, SERVICE_SAMPLE_NOW, self._handle_sample_now_service)

        self._logger.info("COORDINATOR_ASYNC_INIT_COMPLETE", **self.engine.snapshot().to_dict())

    def async_unload(self) -> None:
        """Unsubscribe from the feed and the tick source."""
        for remove in self._listeners:
            remove()
        self._listeners.clear()

        if not self._other_entries_loaded():
            self.hass.services.async_remove(DOMAIN, SERVICE_SAMPLE_NOW)

        self._logger.info("COORDINATOR_UNLOADED")

    def _other_entries_loaded(self) -> bool:
        """True if another entry of this integration is still set up."""
        return any(entry_id != self.entry.entry_id for entry_id in self.hass.data.get(DOMAIN, {}))

    # ========== Feed and tick handlers ==========

    async def _handle_level_event(self, level: float) -> None:
        await self.async_handle_level_change(level, dt_util.utcnow())

    async def _handle_charging_event(self, is_charging: bool) -> None:
        await self.async_handle_charging_change(is_charging, dt_util.utcnow())

    async def _handle_feed_error(self, entity_id: str) -> None:
        await self.events.emit(
            EstimatorEvent.SENSOR_ERROR, entity_id=entity_id, source="state_change"
        )

    async def _handle_tick(self, now: datetime) -> None:
        await self.async_handle_tick(now)

    async def _handle_sample_now_service(self, call: ServiceCall) -> None:
        await self.async_sample_now()

    async def async_handle_level_change(self, level: float, now: datetime) -> None:
        """Feed a level reading to the engine."""
        result = self.engine.handle_level_change(level, now)
        self._publish()
        await self.events.emit(EstimatorEvent.LEVEL_CHANGED, level=round(level, 4))
        await self._after_estimation(result)

    async def async_handle_charging_change(self, is_charging: bool, now: datetime) -> None:
        """Feed a charging flag to the engine and open/close the session."""
        level = self.feed.get_battery_level()
        changed = self.engine.handle_charging_change(is_charging, now, level)
        self._publish()

        if not changed:
            await self.events.emit_state_update()
            return

        if is_charging:
            self._logger.info("CHARGING_STARTED", level=self.engine.battery_level)
            await self.events.emit(
                EstimatorEvent.CHARGING_STARTED,
                level=self.engine.battery_level,
                now=now,
            )
            await self._after_estimation(self.engine.last_result)
        else:
            self._logger.info("CHARGING_STOPPED", level=self.engine.battery_level)
            await self.events.emit(
                EstimatorEvent.CHARGING_STOPPED,
                level=self.engine.battery_level,
                now=now,
            )
            await self.events.emit_state_update()

    async def async_handle_tick(self, now: datetime) -> None:
        """Re-sample on the fixed cadence while charging."""
        if not self.engine.is_charging:
            return

        level = self.feed.get_battery_level()
        if level is None:
            await self.events.emit(
                EstimatorEvent.SENSOR_ERROR,
                entity_id=self.state.level_sensor_entity,
                source="tick",
            )

        result = self.engine.handle_tick(level, now)
        self._publish()
        await self._after_estimation(result)

    async def async_sample_now(self) -> None:
        """Take a sample immediately, as a tick would."""
        self._logger.info("SAMPLE_NOW_REQUESTED")
        await self.async_handle_tick(dt_util.utcnow())

    async def _after_estimation(self, result: EstimationResult | None) -> None:
        """Record and announce an estimation pass."""
        if result is None:
            await self.events.emit_state_update()
            return

        await self.events.emit(
            EstimatorEvent.SAMPLE_TAKEN, **self.engine.window.to_dict()
        )

        if result.is_computed:
            self.sessions.record_power(result.estimate.power_w)

        await self.events.emit_estimate_updated(
            result.estimate.power_w,
            result.estimate.speed.value,
            result.estimate.time_remaining_min,
            result.status.value,
        )

    # ========== Session handling ==========

    async def _on_charging_started(self, event: EventData) -> None:
        self.sessions.start(event.data["now"], event.data["level"], self.state.charger_type)

    async def _on_charging_stopped(self, event: EventData) -> None:
        record = self.sessions.stop(event.data["now"], event.data["level"])
        if record is None:
            return

        self.state.sessions = self.sessions.history
        self._logger.info("SESSION_CLOSED", **record.to_dict())
        await self.events.emit(EstimatorEvent.SESSION_CLOSED, **record.to_dict())

    # ========== Preferences ==========

    def set_charger_type(self, charger_type: ChargerType) -> None:
        """Set the manually selected charger type."""
        self.state.charger_type = charger_type
        self.sessions.set_charger_type(charger_type)
        self._logger.info("CHARGER_TYPE_SET", charger_type=charger_type.value)

    async def set_show_battery_percentage(self, enabled: bool) -> None:
        """Set the display preference. Does not affect estimation."""
        self.state.show_battery_percentage = enabled
        self._logger.info("DISPLAY_PREFERENCE_SET", show_battery_percentage=enabled)
        await self.events.emit_state_update()

    # ========== Utility ==========

    def _publish(self) -> None:
        """Copy the engine snapshot into the shared state."""
        self.state.publish(self.engine.snapshot(), self.engine.last_status)
