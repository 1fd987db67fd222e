"""The Charge Estimator integration.

Estimates a phone's charging power, charge speed and time to full from the
battery level and charging state entities reported by the companion app:
- Shared state (core/state.py)
- Event-driven updates (core/events.py)
- Battery entity access (core/battery_feed.py)
- Pure estimation logic (domain/*.py)
- Factory-based entities (entities/*.py)
- Unified logging (estimator_logging/*.py)
"""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant

from .const import DOMAIN
from .coordinator import ChargeEstimatorCoordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.SENSOR,
    Platform.BINARY_SENSOR,
    Platform.SELECT,
    Platform.SWITCH,
    Platform.BUTTON,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Charge Estimator from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    # Create coordinator
    coordinator = ChargeEstimatorCoordinator(hass, entry)
    await coordinator.async_init()

    # Store coordinator
    hass.data[DOMAIN][entry.entry_id] = coordinator

    # Forward to platforms
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    # Tuning changes rebuild the engine
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    _LOGGER.info("Charge Estimator initialized for %s", entry.title)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        coordinator: ChargeEstimatorCoordinator = hass.data[DOMAIN].pop(entry.entry_id)
        coordinator.async_unload()

    return unload_ok


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry after an options change."""
    await hass.config_entries.async_reload(entry.entry_id)
