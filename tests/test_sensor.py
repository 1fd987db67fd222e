"""Test sensor entities."""
import pytest
from homeassistant.core import HomeAssistant

from custom_components.charge_estimator.entities.sensors import SENSOR_DEFINITIONS

from .conftest import entity_id_for


@pytest.mark.asyncio
async def test_sensors_created(hass: HomeAssistant, setup_integration):
    """Test all sensors are created."""
    for definition in SENSOR_DEFINITIONS:
        entity_id = entity_id_for(hass, "sensor", setup_integration, definition.key)
        assert hass.states.get(entity_id) is not None, f"Sensor {entity_id} not created"


@pytest.mark.asyncio
async def test_sensor_units(hass: HomeAssistant, setup_integration):
    """Test sensors have correct units."""
    expected_units = {
        "estimated_power": "W",
        "time_remaining": "min",
        "battery_level": "%",
        "last_session": "min",
    }
    for key, unit in expected_units.items():
        state = hass.states.get(entity_id_for(hass, "sensor", setup_integration, key))
        assert state.attributes.get("unit_of_measurement") == unit, (
            f"{key} should have {unit} unit"
        )


@pytest.mark.asyncio
async def test_initial_values_unplugged(hass: HomeAssistant, setup_integration):
    """Test sensor values for a phone off the charger at 50%."""

    def value(key):
        return hass.states.get(entity_id_for(hass, "sensor", setup_integration, key)).state

    assert float(value("estimated_power")) == 0.0
    assert value("charge_speed") == "idle"
    assert value("time_remaining") == "0"
    assert float(value("battery_level")) == 50.0
    assert value("charge_status") == "Not connected"
    assert value("readout") == "0 W"
    assert value("last_session") == "unknown"
    assert value("sample_count") == "0"


@pytest.mark.asyncio
async def test_charge_speed_options(hass: HomeAssistant, setup_integration):
    """Test the speed sensor is an enum of the speed tiers."""
    state = hass.states.get(entity_id_for(hass, "sensor", setup_integration, "charge_speed"))
    assert state.attributes.get("options") == ["idle", "slow", "normal", "fast"]


@pytest.mark.asyncio
async def test_time_remaining_formatted_attribute(hass: HomeAssistant, setup_integration):
    """Test the time remaining sensor carries a readable form."""
    state = hass.states.get(entity_id_for(hass, "sensor", setup_integration, "time_remaining"))
    assert state.attributes.get("formatted") == "Not connected"
