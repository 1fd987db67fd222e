"""Human-readable renderings of the published estimation state."""

from __future__ import annotations

from .estimator import ChargeSpeed

FULL_LEVEL = 0.99

_SPEED_LABELS = {
    ChargeSpeed.SLOW: "Slow charging",
    ChargeSpeed.NORMAL: "Normal charging",
    ChargeSpeed.FAST: "Fast charging",
    ChargeSpeed.IDLE: "Idle",
}


def charge_status_label(is_charging: bool, battery_level: float, speed: ChargeSpeed) -> str:
    """Describe the charging status from the published state alone."""
    if not is_charging:
        return "Fully charged" if battery_level >= FULL_LEVEL else "Not connected"
    return _SPEED_LABELS[speed]


def format_power(power_w: float, is_charging: bool) -> str:
    """Format the estimated power, e.g. '12.3 W'."""
    if power_w <= 0 or not is_charging:
        return "0 W"
    return f"{power_w:.1f} W"


def format_battery_percentage(battery_level: float) -> str:
    """Format a 0-1 level as a whole percentage, e.g. '42%'."""
    return f"{int(battery_level * 100)}%"


def format_duration(minutes: int) -> str:
    """Format a duration, e.g. '35 min', '2 h', '1 h · 20 min'."""
    if minutes < 60:
        return f"{minutes} min"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours} h"
    return f"{hours} h · {rest} min"


def format_time_remaining(minutes: int, is_charging: bool, battery_level: float) -> str:
    """Format the time-to-full estimate, with a fallback text while unknown."""
    if minutes <= 0:
        if battery_level >= FULL_LEVEL:
            return "Fully charged"
        if not is_charging:
            return "Not connected"
        return "Estimating..."

    hours, rest = divmod(minutes, 60)
    if hours > 0:
        return f"{hours} h · {rest} min"
    return f"{rest} min"


def display_readout(
    show_percentage: bool,
    battery_level: float,
    power_w: float,
    is_charging: bool,
) -> str:
    """Main readout: battery percentage or estimated power, per user preference."""
    if show_percentage:
        return format_battery_percentage(battery_level)
    return format_power(power_w, is_charging)
