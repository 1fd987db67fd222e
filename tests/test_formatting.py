"""Test the text renderings of the estimation state."""
import pytest

from custom_components.charge_estimator.domain.estimator import ChargeSpeed
from custom_components.charge_estimator.domain.formatting import (
    charge_status_label,
    display_readout,
    format_battery_percentage,
    format_duration,
    format_power,
    format_time_remaining,
)


@pytest.mark.parametrize(
    ("is_charging", "level", "speed", "expected"),
    [
        (False, 1.0, ChargeSpeed.IDLE, "Fully charged"),
        (False, 0.99, ChargeSpeed.IDLE, "Fully charged"),
        (False, 0.5, ChargeSpeed.IDLE, "Not connected"),
        (True, 0.5, ChargeSpeed.SLOW, "Slow charging"),
        (True, 0.5, ChargeSpeed.NORMAL, "Normal charging"),
        (True, 0.5, ChargeSpeed.FAST, "Fast charging"),
    ],
)
def test_charge_status_label(is_charging, level, speed, expected):
    assert charge_status_label(is_charging, level, speed) == expected


def test_format_power():
    assert format_power(12.345, True) == "12.3 W"
    assert format_power(0.0, True) == "0 W"
    assert format_power(12.3, False) == "0 W"


def test_format_battery_percentage_truncates():
    assert format_battery_percentage(0.429) == "42%"
    assert format_battery_percentage(1.0) == "100%"


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [(0, "0 min"), (35, "35 min"), (120, "2 h"), (80, "1 h · 20 min")],
)
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected


def test_format_time_remaining():
    assert format_time_remaining(90, True, 0.55) == "1 h · 30 min"
    assert format_time_remaining(45, True, 0.8) == "45 min"
    assert format_time_remaining(0, True, 0.5) == "Estimating..."
    assert format_time_remaining(0, False, 0.5) == "Not connected"
    assert format_time_remaining(0, True, 1.0) == "Fully charged"


def test_display_readout_follows_preference():
    assert display_readout(True, 0.42, 15.0, True) == "42%"
    assert display_readout(False, 0.42, 15.0, True) == "15.0 W"
