"""Test the pure charging power estimator."""
from datetime import timedelta

import pytest

from custom_components.charge_estimator.domain.estimator import (
    ChargeEstimator,
    ChargeSpeed,
    Estimate,
    EstimationInput,
    EstimationStatus,
    EstimatorSettings,
)
from custom_components.charge_estimator.domain.sample_window import SampleWindow

from .conftest import T0


def _window(*points):
    """Build a window from (seconds, level) pairs."""
    window = SampleWindow()
    for seconds, level in points:
        window.append(level, T0 + timedelta(seconds=seconds))
    return window


def _calculate(window, level, is_charging=True, previous=Estimate(), settings=None):
    return ChargeEstimator.calculate(
        EstimationInput(
            window=window,
            is_charging=is_charging,
            battery_level=level,
            previous=previous,
            settings=settings or EstimatorSettings(),
        )
    )


def test_ten_minute_gain_is_slow_charging():
    """Five percentage points in ten minutes on a 12 Wh battery."""
    result = _calculate(_window((0, 0.50), (600, 0.55)), 0.55)

    assert result.status == EstimationStatus.ESTIMATED
    assert result.estimate.power_w == pytest.approx(3.6)
    assert result.estimate.speed == ChargeSpeed.SLOW
    assert result.estimate.time_remaining_min == 90
    assert result.delta_per_hour == pytest.approx(0.30)


def test_short_span_keeps_previous_estimate():
    """A window shorter than the minimum span changes nothing."""
    previous = Estimate(power_w=15.0, speed=ChargeSpeed.NORMAL, time_remaining_min=42)

    result = _calculate(_window((0, 0.50), (5, 0.51)), 0.51, previous=previous)

    assert result.status == EstimationStatus.WINDOW_TOO_SHORT
    assert result.estimate == previous


def test_span_at_threshold_is_still_too_short():
    result = _calculate(_window((0, 0.50), (10, 0.51)), 0.51)
    assert result.status == EstimationStatus.WINDOW_TOO_SHORT


def test_level_drop_while_charging_is_slow():
    """Sensor noise lowering the level reads as slow charging at 0 W."""
    result = _calculate(_window((0, 0.80), (120, 0.79)), 0.79)

    assert result.status == EstimationStatus.NO_LEVEL_GAIN
    assert result.estimate == Estimate(0.0, ChargeSpeed.SLOW, 0)


def test_flat_level_while_charging_is_slow():
    result = _calculate(_window((0, 0.80), (120, 0.80)), 0.80)
    assert result.estimate == Estimate(0.0, ChargeSpeed.SLOW, 0)


def test_power_is_capped():
    """55 W worth of level gain publishes exactly the cap."""
    # 12 Wh * d/(60/3600) = 55 W  ->  d = 55/12/60
    d_level = 55.0 / 12.0 / 60.0
    result = _calculate(_window((0, 0.20), (60, 0.20 + d_level)), 0.20 + d_level)

    assert result.raw_power_w == pytest.approx(55.0)
    assert result.estimate.power_w == 40.0
    assert result.estimate.speed == ChargeSpeed.FAST


def test_not_charging_is_idle():
    result = _calculate(_window((0, 0.50), (600, 0.55)), 0.55, is_charging=False)

    assert result.status == EstimationStatus.NOT_CHARGING
    assert result.estimate == Estimate(0.0, ChargeSpeed.IDLE, 0)


@pytest.mark.parametrize("points", [(), ((0, 0.5),)])
def test_fewer_than_two_samples_is_normal(points):
    result = _calculate(_window(*points), 0.5)

    assert result.status == EstimationStatus.INSUFFICIENT_SAMPLES
    assert result.estimate == Estimate(0.0, ChargeSpeed.NORMAL, 0)


@pytest.mark.parametrize(
    ("power", "speed"),
    [
        (0.0, ChargeSpeed.SLOW),
        (9.99, ChargeSpeed.SLOW),
        (10.0, ChargeSpeed.NORMAL),
        (19.99, ChargeSpeed.NORMAL),
        (20.0, ChargeSpeed.FAST),
        (40.0, ChargeSpeed.FAST),
    ],
)
def test_classify_boundaries(power, speed):
    assert ChargeEstimator.classify(power, EstimatorSettings()) == speed


def test_time_to_full_is_capped():
    """A trickle charge never reports more than six hours."""
    result = _calculate(_window((0, 0.10), (900, 0.101)), 0.101)

    assert result.status == EstimationStatus.ESTIMATED
    assert result.estimate.time_remaining_min == 360


def test_time_to_full_truncates_minutes():
    settings = EstimatorSettings()
    # 0.5 remaining at 0.4/h = 75 min; 0.5 at 0.35/h = 85.7 min
    assert ChargeEstimator.time_to_full(0.5, 0.4, settings) == 75
    assert ChargeEstimator.time_to_full(0.5, 0.35, settings) == 85
    assert ChargeEstimator.time_to_full(1.0, 0.35, settings) == 0


def test_custom_settings_are_used():
    settings = EstimatorSettings(
        battery_capacity_wh=20.0,
        slow_threshold_w=5.0,
        fast_threshold_w=5.5,
    )
    result = _calculate(_window((0, 0.50), (600, 0.55)), 0.55, settings=settings)

    assert result.estimate.power_w == pytest.approx(6.0)
    assert result.estimate.speed == ChargeSpeed.FAST


def test_estimate_is_repeatable():
    window = _window((0, 0.30), (300, 0.33), (600, 0.36))

    first = _calculate(window, 0.36)
    second = _calculate(window, 0.36, previous=first.estimate)

    assert first.estimate == second.estimate


@pytest.mark.parametrize(
    "points",
    [
        ((0, 0.0), (11, 1.0)),
        ((0, 0.99), (3600, 1.0)),
        ((0, 0.5), (30, 0.45)),
        ((0, 0.01), (900, 0.02)),
        ((0, 0.2), (60, 0.9)),
    ],
)
def test_outputs_stay_within_bounds(points):
    window = _window(*points)
    level = points[-1][1]
    settings = EstimatorSettings()

    estimate = _calculate(window, level).estimate

    assert 0.0 <= estimate.power_w <= settings.max_power_w
    assert 0 <= estimate.time_remaining_min <= settings.max_time_remaining_min
    assert isinstance(estimate.time_remaining_min, int)
