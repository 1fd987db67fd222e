"""Test select and switch entities."""
from unittest.mock import patch

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry, mock_restore_cache

from homeassistant.core import HomeAssistant, State

from custom_components.charge_estimator.const import (
    CONF_BATTERY_CAPACITY,
    CONF_BATTERY_LEVEL_SENSOR,
    CONF_CHARGING_ENTITY,
    DOMAIN,
)
from custom_components.charge_estimator.domain.session_tracker import ChargerType
from custom_components.charge_estimator.estimator_logging import get_logger

from .conftest import CHARGING_SENSOR, LEVEL_SENSOR, entity_id_for


@pytest.mark.asyncio
async def test_charger_type_select(hass: HomeAssistant, setup_integration, coordinator):
    """Test choosing a charger type."""
    entity_id = entity_id_for(hass, "select", setup_integration, "charger_type")
    state = hass.states.get(entity_id)
    assert state.state == "unknown"
    assert state.attributes.get("options") == ["wired", "magsafe", "wireless", "unknown"]

    await hass.services.async_call(
        "select",
        "select_option",
        {"entity_id": entity_id, "option": "magsafe"},
        blocking=True,
    )
    await hass.async_block_till_done()

    assert hass.states.get(entity_id).state == "magsafe"
    assert coordinator.state.charger_type == ChargerType.MAGSAFE
    assert hass.states.get(entity_id).attributes.get("description") == (
        "MagSafe charging (manual/estimated)"
    )


@pytest.mark.asyncio
async def test_show_battery_percentage_switch(hass: HomeAssistant, setup_integration, coordinator):
    """Test the display preference switch changes the readout."""
    switch_id = entity_id_for(hass, "switch", setup_integration, "show_battery_percentage")
    readout_id = entity_id_for(hass, "sensor", setup_integration, "readout")
    assert hass.states.get(readout_id).state == "0 W"

    await hass.services.async_call(
        "switch", "turn_on", {"entity_id": switch_id}, blocking=True
    )
    await hass.async_block_till_done()

    assert hass.states.get(switch_id).state == "on"
    assert coordinator.state.show_battery_percentage is True
    assert hass.states.get(readout_id).state == "50%"

    await hass.services.async_call(
        "switch", "turn_off", {"entity_id": switch_id}, blocking=True
    )
    await hass.async_block_till_done()

    assert hass.states.get(readout_id).state == "0 W"


@pytest.mark.asyncio
async def test_debug_logging_switch(hass: HomeAssistant, setup_integration):
    """Test the debug switch toggles file logging."""
    entity_id = entity_id_for(hass, "switch", setup_integration, "debug_logging")
    assert hass.states.get(entity_id).state == "off"

    with patch.object(get_logger(), "set_file_logging") as mock_set:
        await hass.services.async_call(
            "switch", "turn_on", {"entity_id": entity_id}, blocking=True
        )
        await hass.async_block_till_done()

    mock_set.assert_called_once_with(True)
    assert hass.states.get(entity_id).state == "on"


@pytest.mark.asyncio
async def test_preferences_restored(hass: HomeAssistant, mock_battery_states):
    """Test charger type and display preference survive a restart."""
    for entity_id, state in mock_battery_states.items():
        hass.states.async_set(entity_id, state.state, state.attributes)

    entry = MockConfigEntry(
        domain=DOMAIN,
        entry_id="restore_entry",
        data={
            CONF_BATTERY_LEVEL_SENSOR: LEVEL_SENSOR,
            CONF_CHARGING_ENTITY: CHARGING_SENSOR,
            CONF_BATTERY_CAPACITY: 12.0,
        },
    )
    entry.add_to_hass(hass)

    mock_restore_cache(
        hass,
        [
            State("select.charge_estimator_charger_type", "wireless"),
            State("switch.charge_estimator_show_battery_percentage", "on"),
        ],
    )

    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    coordinator = hass.data[DOMAIN][entry.entry_id]
    assert coordinator.state.charger_type == ChargerType.WIRELESS
    assert coordinator.state.show_battery_percentage is True
    assert hass.states.get(entity_id_for(hass, "sensor", entry, "readout")).state == "50%"

    await hass.config_entries.async_unload(entry.entry_id)
    await hass.async_block_till_done()
