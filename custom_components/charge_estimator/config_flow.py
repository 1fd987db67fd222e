"""Config flow for Charge Estimator integration."""
from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.data_entry_flow import FlowResult
from homeassistant.core import callback
from homeassistant.helpers import selector

from .const import (
    CONF_BATTERY_CAPACITY,
    CONF_BATTERY_LEVEL_SENSOR,
    CONF_CHARGING_ENTITY,
    CONF_FAST_THRESHOLD,
    CONF_MAX_POWER,
    CONF_MAX_TIME_REMAINING,
    CONF_MIN_SPAN_SECONDS,
    CONF_RETENTION_MINUTES,
    CONF_SAMPLE_INTERVAL,
    CONF_SLOW_THRESHOLD,
    DEFAULT_BATTERY_CAPACITY,
    DEFAULT_FAST_THRESHOLD,
    DEFAULT_MAX_POWER,
    DEFAULT_MAX_TIME_REMAINING,
    DEFAULT_MIN_SPAN_SECONDS,
    DEFAULT_NAME,
    DEFAULT_RETENTION_MINUTES,
    DEFAULT_SAMPLE_INTERVAL,
    DEFAULT_SLOW_THRESHOLD,
    DOMAIN,
)

TUNING_DEFAULTS: dict[str, Any] = {
    CONF_RETENTION_MINUTES: DEFAULT_RETENTION_MINUTES,
    CONF_SAMPLE_INTERVAL: DEFAULT_SAMPLE_INTERVAL,
    CONF_MIN_SPAN_SECONDS: DEFAULT_MIN_SPAN_SECONDS,
    CONF_SLOW_THRESHOLD: DEFAULT_SLOW_THRESHOLD,
    CONF_FAST_THRESHOLD: DEFAULT_FAST_THRESHOLD,
    CONF_MAX_POWER: DEFAULT_MAX_POWER,
    CONF_MAX_TIME_REMAINING: DEFAULT_MAX_TIME_REMAINING,
}


def _number(
    min_value: float,
    max_value: float,
    step: float,
    unit: str,
    mode: selector.NumberSelectorMode = selector.NumberSelectorMode.BOX,
) -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            min=min_value,
            max=max_value,
            step=step,
            unit_of_measurement=unit,
            mode=mode,
        )
    )


def _capacity_field(default: float) -> dict:
    return {
        vol.Required(CONF_BATTERY_CAPACITY, default=default): _number(1, 200, 0.5, "Wh"),
    }


def _tuning_fields(values: dict[str, Any]) -> dict:
    """Schema fields for the estimator tuning parameters."""
    return {
        vol.Required(
            CONF_RETENTION_MINUTES, default=values[CONF_RETENTION_MINUTES]
        ): _number(1, 60, 1, "min", selector.NumberSelectorMode.SLIDER),
        vol.Required(
            CONF_SAMPLE_INTERVAL, default=values[CONF_SAMPLE_INTERVAL]
        ): _number(5, 600, 5, "s"),
        vol.Required(
            CONF_MIN_SPAN_SECONDS, default=values[CONF_MIN_SPAN_SECONDS]
        ): _number(1, 300, 1, "s"),
        vol.Required(
            CONF_SLOW_THRESHOLD, default=values[CONF_SLOW_THRESHOLD]
        ): _number(0.5, 100, 0.5, "W"),
        vol.Required(
            CONF_FAST_THRESHOLD, default=values[CONF_FAST_THRESHOLD]
        ): _number(0.5, 100, 0.5, "W"),
        vol.Required(
            CONF_MAX_POWER, default=values[CONF_MAX_POWER]
        ): _number(1, 200, 1, "W"),
        vol.Required(
            CONF_MAX_TIME_REMAINING, default=values[CONF_MAX_TIME_REMAINING]
        ): _number(10, 1440, 10, "min"),
    }


def validate_tuning(user_input: dict[str, Any]) -> dict[str, str]:
    """Check the speed thresholds are ordered below the power cap."""
    errors: dict[str, str] = {}

    slow = user_input.get(CONF_SLOW_THRESHOLD, DEFAULT_SLOW_THRESHOLD)
    fast = user_input.get(CONF_FAST_THRESHOLD, DEFAULT_FAST_THRESHOLD)
    max_power = user_input.get(CONF_MAX_POWER, DEFAULT_MAX_POWER)

    if slow >= fast or fast > max_power:
        errors["base"] = "invalid_thresholds"

    return errors


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Charge Estimator."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        self.core_info: dict[str, Any] = {}

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Step 1: Battery entities and capacity."""
        errors: dict[str, str] = {}

        if user_input is not None:
            # Validate entities exist
            level_state = self.hass.states.get(user_input[CONF_BATTERY_LEVEL_SENSOR])
            charging_state = self.hass.states.get(user_input[CONF_CHARGING_ENTITY])

            if level_state is None:
                errors[CONF_BATTERY_LEVEL_SENSOR] = "entity_not_found"
            if charging_state is None:
                errors[CONF_CHARGING_ENTITY] = "entity_not_found"

            if not errors:
                await self.async_set_unique_id(user_input[CONF_BATTERY_LEVEL_SENSOR])
                self._abort_if_unique_id_configured()

                self.core_info = user_input
                return await self.async_step_tuning()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_BATTERY_LEVEL_SENSOR): selector.EntitySelector(
                        selector.EntitySelectorConfig(
                            domain="sensor", device_class="battery"
                        )
                    ),
                    vol.Required(CONF_CHARGING_ENTITY): selector.EntitySelector(
                        selector.EntitySelectorConfig(domain=["binary_sensor", "sensor"])
                    ),
                    **_capacity_field(DEFAULT_BATTERY_CAPACITY),
                }
            ),
            errors=errors,
        )

    async def async_step_tuning(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Step 2: Estimator tuning."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = validate_tuning(user_input)

            if not errors:
                data = {**self.core_info, **user_input}
                return self.async_create_entry(title=DEFAULT_NAME, data=data)

        return self.async_show_form(
            step_id="tuning",
            data_schema=vol.Schema(_tuning_fields(TUNING_DEFAULTS)),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        """Create the options flow."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Handle options flow for Charge Estimator."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        """Initialize options flow."""
        self._config_entry = config_entry

    def _get_value(self, key: str, default: Any) -> Any:
        """Get value from options or data with fallback to default."""
        return self._config_entry.options.get(
            key,
            self._config_entry.data.get(key, default)
        )

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Manage the options - single page for simplicity."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = validate_tuning(user_input)

            if not errors:
                return self.async_create_entry(title="", data=user_input)

        current = {key: self._get_value(key, default) for key, default in TUNING_DEFAULTS.items()}

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    **_capacity_field(
                        self._get_value(CONF_BATTERY_CAPACITY, DEFAULT_BATTERY_CAPACITY)
                    ),
                    **_tuning_fields(current),
                }
            ),
            errors=errors,
        )
