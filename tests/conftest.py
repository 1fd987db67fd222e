"""Fixtures for testing."""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant, State
from homeassistant.helpers import entity_registry as er

from custom_components.charge_estimator.const import (
    DOMAIN,
    CONF_BATTERY_CAPACITY,
    CONF_BATTERY_LEVEL_SENSOR,
    CONF_CHARGING_ENTITY,
)

LEVEL_SENSOR = "sensor.phone_battery_level"
CHARGING_SENSOR = "sensor.phone_battery_state"

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Enable custom integrations defined in the test dir."""
    yield


@pytest.fixture
def mock_config_entry():
    """Mock a config entry."""
    entry = MagicMock()
    entry.data = {
        CONF_BATTERY_LEVEL_SENSOR: LEVEL_SENSOR,
        CONF_CHARGING_ENTITY: CHARGING_SENSOR,
        CONF_BATTERY_CAPACITY: 12.0,
    }
    entry.options = {}
    entry.entry_id = "test_entry_id"
    return entry


@pytest.fixture
def mock_battery_states():
    """Mock phone battery states, unplugged at 50%."""
    return {
        LEVEL_SENSOR: State(
            LEVEL_SENSOR,
            "50",
            {"unit_of_measurement": "%", "device_class": "battery"},
        ),
        CHARGING_SENSOR: State(CHARGING_SENSOR, "not_charging"),
    }


@pytest.fixture
async def setup_integration(hass: HomeAssistant, mock_battery_states):
    """Set up integration with mock states."""
    for entity_id, state in mock_battery_states.items():
        hass.states.async_set(entity_id, state.state, state.attributes)

    entry = MockConfigEntry(
        domain=DOMAIN,
        title="Charge Estimator",
        data={
            CONF_BATTERY_LEVEL_SENSOR: LEVEL_SENSOR,
            CONF_CHARGING_ENTITY: CHARGING_SENSOR,
            CONF_BATTERY_CAPACITY: 12.0,
        },
    )
    entry.add_to_hass(hass)

    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    yield entry

    if entry.state is ConfigEntryState.LOADED:
        await hass.config_entries.async_unload(entry.entry_id)
        await hass.async_block_till_done()


@pytest.fixture
def coordinator(hass: HomeAssistant, setup_integration):
    """Coordinator of the set up entry."""
    return hass.data[DOMAIN][setup_integration.entry_id]


def entity_id_for(hass: HomeAssistant, platform: str, entry, key: str) -> str:
    """Look up an entity id by its unique id."""
    entity_id = er.async_get(hass).async_get_entity_id(
        platform, DOMAIN, f"{entry.entry_id}_{key}"
    )
    assert entity_id is not None, f"{platform} {key} not created"
    return entity_id
