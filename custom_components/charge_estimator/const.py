"""Constants for the Charge Estimator integration."""

DOMAIN = "charge_estimator"

# Configuration Keys
CONF_BATTERY_LEVEL_SENSOR = "battery_level_sensor_entity_id"
CONF_CHARGING_ENTITY = "charging_state_entity_id"
CONF_BATTERY_CAPACITY = "battery_capacity_wh"

# Tuning Parameters
CONF_RETENTION_MINUTES = "retention_horizon_minutes"
CONF_SAMPLE_INTERVAL = "sample_interval_seconds"
CONF_MIN_SPAN_SECONDS = "min_span_seconds"
CONF_SLOW_THRESHOLD = "slow_threshold_w"
CONF_FAST_THRESHOLD = "fast_threshold_w"
CONF_MAX_POWER = "max_power_w"
CONF_MAX_TIME_REMAINING = "max_time_remaining_minutes"

# Defaults
DEFAULT_NAME = "Charge Estimator"
DEFAULT_BATTERY_CAPACITY = 12.0  # Wh, modern handset
DEFAULT_RETENTION_MINUTES = 15
DEFAULT_SAMPLE_INTERVAL = 30
DEFAULT_MIN_SPAN_SECONDS = 10.0
DEFAULT_SLOW_THRESHOLD = 10.0
DEFAULT_FAST_THRESHOLD = 20.0
DEFAULT_MAX_POWER = 40.0
DEFAULT_MAX_TIME_REMAINING = 360  # 6 hours

# Battery feed states that count as "connected"
CHARGING_STATES = ("charging", "full")

# Session history kept in memory
SESSION_HISTORY_SIZE = 10

# Services
SERVICE_SAMPLE_NOW = "sample_now"

# Dispatcher signal, formatted with the config entry id
SIGNAL_UPDATE = f"{DOMAIN}_update_{{}}"
