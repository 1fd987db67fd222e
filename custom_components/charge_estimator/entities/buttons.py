"""Button entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.button import ButtonEntity
from homeassistant.helpers.device_registry import DeviceInfo

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..coordinator import ChargeEstimatorCoordinator

from ..const import DEFAULT_NAME, DOMAIN
from ..estimator_logging import get_logger


class SampleNowButton(ButtonEntity):
    """Button to take a battery sample immediately."""

    _attr_has_entity_name = True
    _attr_icon = "mdi:refresh"

    def __init__(
        self,
        entry_id: str,
        coordinator: ChargeEstimatorCoordinator,
    ) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._logger = get_logger()

        self._attr_unique_id = f"{entry_id}_sample_now"
        self._attr_name = "Sample Now"

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="Charge Estimator",
        )

    async def async_press(self) -> None:
        """Handle button press."""
        self._logger.info("SAMPLE_NOW_BUTTON_PRESSED")
        await self._coordinator.async_sample_now()


async def async_setup_buttons(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: ChargeEstimatorCoordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up button entities."""
    async_add_entities([
        SampleNowButton(entry.entry_id, coordinator),
    ])
