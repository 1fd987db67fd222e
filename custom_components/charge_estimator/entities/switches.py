"""Switch entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.switch import SwitchEntity
from homeassistant.const import STATE_ON, EntityCategory
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.restore_state import RestoreEntity

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..coordinator import ChargeEstimatorCoordinator

from ..const import DEFAULT_NAME, DOMAIN
from ..estimator_logging import get_logger


class ShowBatteryPercentageSwitch(SwitchEntity, RestoreEntity):
    """Switch between the battery percentage and the power estimate readout.

    Display preference only; estimation never reads it.
    """

    _attr_has_entity_name = True
    _attr_should_poll = False
    _attr_icon = "mdi:percent-outline"

    def __init__(
        self,
        entry_id: str,
        coordinator: ChargeEstimatorCoordinator,
    ) -> None:
        """Initialize."""
        self._coordinator = coordinator

        self._attr_unique_id = f"{entry_id}_show_battery_percentage"
        self._attr_name = "Show Battery Percentage"
        self._attr_is_on = coordinator.state.show_battery_percentage

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="Charge Estimator",
        )

    async def async_added_to_hass(self) -> None:
        """Restore previous state when added to Home Assistant."""
        await super().async_added_to_hass()

        last_state = await self.async_get_last_state()
        if last_state is not None:
            self._attr_is_on = last_state.state == STATE_ON
            await self._coordinator.set_show_battery_percentage(self._attr_is_on)

    async def async_turn_on(self, **kwargs) -> None:
        """Show the battery percentage."""
        self._attr_is_on = True
        await self._coordinator.set_show_battery_percentage(True)
        self.async_write_ha_state()

    async def async_turn_off(self, **kwargs) -> None:
        """Show the power estimate."""
        self._attr_is_on = False
        await self._coordinator.set_show_battery_percentage(False)
        self.async_write_ha_state()


class DebugLoggingSwitch(SwitchEntity):
    """Switch to control debug file logging."""

    _attr_has_entity_name = True
    _attr_should_poll = False
    _attr_icon = "mdi:bug"
    _attr_entity_category = EntityCategory.DIAGNOSTIC

    def __init__(self, entry_id: str) -> None:
        """Initialize."""
        self._logger = get_logger()

        self._attr_unique_id = f"{entry_id}_debug_logging"
        self._attr_name = "Debug Logging"
        self._attr_is_on = self._logger.file_logging_enabled

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="Charge Estimator",
        )

    async def async_turn_on(self, **kwargs) -> None:
        """Turn on debug logging."""
        self._logger.set_file_logging(True)
        self._attr_is_on = True
        self.async_write_ha_state()

    async def async_turn_off(self, **kwargs) -> None:
        """Turn off debug logging."""
        self._logger.set_file_logging(False)
        self._attr_is_on = False
        self.async_write_ha_state()

    @property
    def extra_state_attributes(self) -> dict:
        """Return extra attributes."""
        return {"log_dir": str(self._logger.log_dir)}


async def async_setup_switches(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: ChargeEstimatorCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up switch entities."""
    async_add_entities([
        ShowBatteryPercentageSwitch(entry.entry_id, coordinator),
        DebugLoggingSwitch(entry.entry_id),
    ])
