"""Domain logic module - estimation logic without HA dependencies.

Everything in this package:
- Takes the current time from the caller
- Doesn't access HA directly
- Is easy to unit test
"""

from .engine import EngineSnapshot, EstimationEngine
from .estimator import ChargeEstimator, ChargeSpeed, Estimate, EstimatorSettings
from .sample_window import Sample, SampleWindow
from .session_tracker import ChargerType, ChargingSessionRecord, SessionTracker

__all__ = [
    "ChargeEstimator",
    "ChargeSpeed",
    "ChargerType",
    "ChargingSessionRecord",
    "EngineSnapshot",
    "Estimate",
    "EstimationEngine",
    "EstimatorSettings",
    "Sample",
    "SampleWindow",
    "SessionTracker",
]
