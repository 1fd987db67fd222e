"""Binary sensor entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.dispatcher import async_dispatcher_connect

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..core.state import EstimatorState

from ..const import DEFAULT_NAME, DOMAIN, SIGNAL_UPDATE


@dataclass
class BinarySensorDefinition:
    """Definition for a binary sensor."""

    key: str
    name: str
    value_fn: Callable[[Any], bool]
    device_class: BinarySensorDeviceClass | None = None


BINARY_SENSOR_DEFINITIONS: list[BinarySensorDefinition] = [
    BinarySensorDefinition(
        key="charging",
        name="Charging",
        value_fn=lambda s: s.is_charging,
        device_class=BinarySensorDeviceClass.BATTERY_CHARGING,
    ),
]


class EstimatorBinarySensor(BinarySensorEntity):
    """Generic Charge Estimator binary sensor."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        entry_id: str,
        state: EstimatorState,
        definition: BinarySensorDefinition,
    ) -> None:
        """Initialize."""
        self._state = state
        self._definition = definition
        self._signal = SIGNAL_UPDATE.format(entry_id)

        self._attr_unique_id = f"{entry_id}_{definition.key}"
        self._attr_name = definition.name
        self._attr_device_class = definition.device_class

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
            self._attr_is_on = bool(self._definition.value_fn(self._state))
        except (ValueError, TypeError, AttributeError, KeyError):
            self._attr_is_on = False
        self.async_write_ha_state()


async def async_setup_binary_sensors(
    hass: HomeAssistant,
    entry: ConfigEntry,
    state: EstimatorState,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up binary sensor entities."""
    entities = [
        EstimatorBinarySensor(entry.entry_id, state, definition)
        for definition in BINARY_SENSOR_DEFINITIONS
    ]
    async_add_entities(entities)
