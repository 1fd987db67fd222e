"""Test button entities."""
import pytest
from homeassistant.core import HomeAssistant

from .conftest import CHARGING_SENSOR, entity_id_for


@pytest.mark.asyncio
async def test_button_created(hass: HomeAssistant, setup_integration):
    """Test sample now button is created."""
    entity_id = entity_id_for(hass, "button", setup_integration, "sample_now")
    assert hass.states.get(entity_id) is not None, "Button entity not created"


@pytest.mark.asyncio
async def test_button_press(hass: HomeAssistant, setup_integration, coordinator):
    """Test pressing the sample now button while charging."""
    hass.states.async_set(CHARGING_SENSOR, "charging")
    await hass.async_block_till_done()
    assert coordinator.state.sample_count == 1

    await hass.services.async_call(
        "button",
        "press",
        {"entity_id": entity_id_for(hass, "button", setup_integration, "sample_now")},
        blocking=True,
    )
    await hass.async_block_till_done()

    assert coordinator.state.sample_count == 2
    count_state = hass.states.get(entity_id_for(hass, "sensor", setup_integration, "sample_count"))
    assert count_state.state == "2"


@pytest.mark.asyncio
async def test_button_press_while_unplugged(hass: HomeAssistant, setup_integration, coordinator):
    """Test pressing the button while unplugged takes no sample."""
    await hass.services.async_call(
        "button",
        "press",
        {"entity_id": entity_id_for(hass, "button", setup_integration, "sample_now")},
        blocking=True,
    )
    await hass.async_block_till_done()

    assert coordinator.state.sample_count == 0
