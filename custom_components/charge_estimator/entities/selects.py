"""Select entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.select import SelectEntity
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.restore_state import RestoreEntity

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..coordinator import ChargeEstimatorCoordinator

from ..const import DEFAULT_NAME, DOMAIN
from ..domain.session_tracker import ChargerType


class ChargerTypeSelect(SelectEntity, RestoreEntity):
    """Manually selected charger type.

    Battery readings cannot tell a cable from a wireless pad, so the user
    picks it. The value is attached to charging sessions.
    """

    _attr_has_entity_name = True
    _attr_should_poll = False
    _attr_icon = "mdi:power-plug-outline"
    _attr_options = [charger_type.value for charger_type in ChargerType]

    def __init__(
        self,
        entry_id: str,
        coordinator: ChargeEstimatorCoordinator,
    ) -> None:
        """Initialize."""
        self._coordinator = coordinator

        self._attr_unique_id = f"{entry_id}_charger_type"
        self._attr_name = "Charger Type"
        self._attr_current_option = coordinator.state.charger_type.value

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="Charge Estimator",
        )

    async def async_added_to_hass(self) -> None:
        """Restore previous selection when added to Home Assistant."""
        await super().async_added_to_hass()

        last_state = await self.async_get_last_state()
        if last_state is not None and last_state.state in self.options:
            self._apply(ChargerType(last_state.state))

    async def async_select_option(self, option: str) -> None:
        """Change the selected charger type."""
        self._apply(ChargerType(option))
        self.async_write_ha_state()

    @property
    def extra_state_attributes(self) -> dict:
        """Return extra attributes."""
        return {"description": ChargerType(self._attr_current_option).description}

    def _apply(self, charger_type: ChargerType) -> None:
        self._attr_current_option = charger_type.value
        self._coordinator.set_charger_type(charger_type)


async def async_setup_selects(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: ChargeEstimatorCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up select entities."""
    async_add_entities([
        ChargerTypeSelect(entry.entry_id, coordinator),
    ])
