"""Event Bus for component communication.

Every event is logged, so the sequence of samples, transitions and published
estimates can be followed in the logs. Handlers run in registration order;
a failing handler is logged and does not stop the others.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from homeassistant.helpers.dispatcher import async_dispatcher_send

from ..const import SIGNAL_UPDATE
from ..estimator_logging import get_logger

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class EstimatorEvent(str, Enum):
    """Event types for the Charge Estimator integration."""

    # Battery feed
    LEVEL_CHANGED = "charge_estimator.level_changed"
    CHARGING_STARTED = "charge_estimator.charging_started"
    CHARGING_STOPPED = "charge_estimator.charging_stopped"

    # Sampling
    SAMPLE_TAKEN = "charge_estimator.sample_taken"
    ESTIMATE_UPDATED = "charge_estimator.estimate_updated"

    # Sessions
    SESSION_CLOSED = "charge_estimator.session_closed"

    # Errors
    SENSOR_ERROR = "charge_estimator.sensor_error"

    # UI update trigger
    UI_UPDATE = "charge_estimator.ui_update"


@dataclass
class EventData:
    """Container for event data."""

    event: EstimatorEvent
    timestamp: datetime
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "event": self.event.value,
            "timestamp": self.timestamp.isoformat(),
            "data": self.data,
        }


EventHandler = Callable[[EventData], Awaitable[None]]

# Events that refresh the entities
_UI_EVENTS = (EstimatorEvent.UI_UPDATE, EstimatorEvent.ESTIMATE_UPDATED)


class EstimatorEventBus:
    """Central event bus for one config entry."""

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        """Initialize the event bus.

        Args:
            hass: Home Assistant instance
            entry_id: Config entry the bus belongs to
        """
        self.hass = hass
        self.signal = SIGNAL_UPDATE.format(entry_id)
        self._logger = get_logger()
        self._handlers: dict[EstimatorEvent, list[EventHandler]] = {}

    async def emit(self, event: EstimatorEvent, **data: Any) -> None:
        """Emit an event.

        Args:
            event: Event type to emit
            **data: Event data
        """
        event_data = EventData(event=event, timestamp=datetime.now(), data=data)

        self._logger.debug(f"EVENT_{event.name}", **data)

        for handler in list(self._handlers.get(event, [])):
            try:
                await handler(event_data)
            except Exception as ex:
                self._logger.error(
                    "EVENT_HANDLER_ERROR",
                    event=event.name,
                    handler=getattr(handler, "__name__", repr(handler)),
                    error=str(ex),
                )

        if event in _UI_EVENTS:
            async_dispatcher_send(self.hass, self.signal)

    def on(self, event: EstimatorEvent, handler: EventHandler) -> Callable[[], None]:
        """Register an event handler.

        Returns:
            Unsubscribe function
        """
        self._handlers.setdefault(event, []).append(handler)

        def unsubscribe() -> None:
            self.off(event, handler)

        return unsubscribe

    def off(self, event: EstimatorEvent, handler: EventHandler) -> None:
        """Unregister an event handler."""
        if event in self._handlers and handler in self._handlers[event]:
            self._handlers[event].remove(handler)

    async def emit_state_update(self) -> None:
        """Convenience method to emit UI update event."""
        await self.emit(EstimatorEvent.UI_UPDATE)

    async def emit_estimate_updated(
        self,
        power_w: float,
        speed: str,
        time_remaining_min: int,
        status: str,
    ) -> None:
        """Convenience method to emit estimate update event."""
        await self.emit(
            EstimatorEvent.ESTIMATE_UPDATED,
            power_w=round(power_w, 2),
            speed=speed,
            time_remaining_min=time_remaining_min,
            status=status,
        )
