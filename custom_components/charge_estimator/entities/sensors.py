"""Sensor entities using factory pattern.

Instead of defining each sensor manually, we use a data-driven approach.
Add a new sensor = add one line to SENSOR_DEFINITIONS.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.const import PERCENTAGE, EntityCategory, UnitOfPower, UnitOfTime
from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.dispatcher import async_dispatcher_connect

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..core.state import EstimatorState

from ..const import DEFAULT_NAME, DOMAIN, SIGNAL_UPDATE
from ..domain.estimator import ChargeSpeed


@dataclass
class SensorDefinition:
    """Definition for a sensor entity."""

    key: str  # Unique identifier
    name: str  # Display name
    value_fn: Callable[[Any], Any]  # Function to get value from state
    attrs_fn: Callable[[Any], dict[str, Any]] | None = None
    unit: str | None = None
    device_class: SensorDeviceClass | None = None
    state_class: SensorStateClass | None = None
    options: list[str] | None = None
    entity_category: EntityCategory | None = None
    icon: str | None = None


def _last_session_attributes(state: EstimatorState) -> dict[str, Any]:
    session = state.last_session
    if session is None:
        return {"session_count": 0}
    return {**session.to_dict(), "session_count": len(state.sessions)}


# All sensor definitions in one place
SENSOR_DEFINITIONS: list[SensorDefinition] = [
    # Estimates
    SensorDefinition(
        key="estimated_power",
        name="Estimated Power",
        value_fn=lambda s: round(s.estimated_power_w, 1),
        unit=UnitOfPower.WATT,
        device_class=SensorDeviceClass.POWER,
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:flash",
    ),
    SensorDefinition(
        key="charge_speed",
        name="Charge Speed",
        value_fn=lambda s: s.charge_speed.value,
        device_class=SensorDeviceClass.ENUM,
        options=[speed.value for speed in ChargeSpeed],
        icon="mdi:speedometer",
    ),
    SensorDefinition(
        key="time_remaining",
        name="Time Remaining",
        value_fn=lambda s: s.time_remaining_min,
        attrs_fn=lambda s: {"formatted": s.formatted_time_remaining},
        unit=UnitOfTime.MINUTES,
        device_class=SensorDeviceClass.DURATION,
        icon="mdi:timer-sand",
    ),

    # Battery
    SensorDefinition(
        key="battery_level",
        name="Battery Level",
        value_fn=lambda s: round(s.battery_level * 100, 1),
        unit=PERCENTAGE,
        device_class=SensorDeviceClass.BATTERY,
        state_class=SensorStateClass.MEASUREMENT,
    ),

    # Presentation
    SensorDefinition(
        key="charge_status",
        name="Charge Status",
        value_fn=lambda s: s.charge_status,
        icon="mdi:battery-charging-outline",
    ),
    SensorDefinition(
        key="readout",
        name="Readout",
        value_fn=lambda s: s.readout,
        attrs_fn=lambda s: {"show_battery_percentage": s.show_battery_percentage},
        icon="mdi:text-box-outline",
    ),

    # Sessions
    SensorDefinition(
        key="last_session",
        name="Last Charging Session",
        value_fn=lambda s: s.last_session.duration_minutes if s.last_session else None,
        attrs_fn=_last_session_attributes,
        unit=UnitOfTime.MINUTES,
        device_class=SensorDeviceClass.DURATION,
        icon="mdi:history",
    ),

    # Diagnostics
    SensorDefinition(
        key="sample_count",
        name="Sample Count",
        value_fn=lambda s: s.sample_count,
        attrs_fn=lambda s: {"last_status": s.last_status.value},
        state_class=SensorStateClass.MEASUREMENT,
        entity_category=EntityCategory.DIAGNOSTIC,
        icon="mdi:counter",
    ),
]


class EstimatorSensor(SensorEntity):
    """Generic Charge Estimator sensor entity."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        entry_id: str,
        state: EstimatorState,
        definition: SensorDefinition,
    ) -> None:
        """Initialize the sensor."""
        self._state = state
        self._definition = definition
        self._signal = SIGNAL_UPDATE.format(entry_id)

        self._attr_unique_id = f"{entry_id}_{definition.key}"
        self._attr_name = definition.name
        self._attr_native_unit_of_measurement = definition.unit
        self._attr_device_class = definition.device_class
        self._attr_state_class = definition.state_class
        self._attr_options = definition.options
        self._attr_entity_category = definition.entity_category
        if definition.icon:
            self._attr_icon = definition.icon

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="Charge Estimator",
        )

    async def async_added_to_hass(self) -> None:
        """Register for updates."""
        self.async_on_remove(
            async_dispatcher_connect(
                self.hass,
                self._signal,
                self._handle_update,
            )
        )
        self._handle_update()

    @callback
    def _handle_update(self) -> None:
        """Handle state update."""
        try:
            self._attr_native_value = self._definition.value_fn(self._state)
            if self._definition.attrs_fn:
                self._attr_extra_state_attributes = self._definition.attrs_fn(self._state)
        except (ValueError, TypeError, AttributeError, KeyError):
            # Specific exceptions for data access issues
            self._attr_native_value = None
        self.async_write_ha_state()


async def async_setup_sensors(
    hass: HomeAssistant,
    entry: ConfigEntry,
    state: EstimatorState,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up all sensor entities."""
    entities = [
        EstimatorSensor(entry.entry_id, state, definition)
        for definition in SENSOR_DEFINITIONS
    ]
    async_add_entities(entities)
