"""Test binary sensor entities."""
import pytest
from homeassistant.core import HomeAssistant

from .conftest import CHARGING_SENSOR, entity_id_for


@pytest.mark.asyncio
async def test_charging_sensor_created(hass: HomeAssistant, setup_integration):
    """Test the charging binary sensor is created and off."""
    state = hass.states.get(entity_id_for(hass, "binary_sensor", setup_integration, "charging"))
    assert state is not None
    assert state.state == "off"
    assert state.attributes.get("device_class") == "battery_charging"


@pytest.mark.asyncio
async def test_charging_sensor_follows_phone(hass: HomeAssistant, setup_integration):
    """Test the charging binary sensor follows the phone's charging state."""
    entity_id = entity_id_for(hass, "binary_sensor", setup_integration, "charging")

    hass.states.async_set(CHARGING_SENSOR, "charging")
    await hass.async_block_till_done()
    assert hass.states.get(entity_id).state == "on"

    hass.states.async_set(CHARGING_SENSOR, "not_charging")
    await hass.async_block_till_done()
    assert hass.states.get(entity_id).state == "off"
