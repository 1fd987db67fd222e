"""Core module for Charge Estimator.

Contains the fundamental building blocks:
- State: Single source of truth read by the entities
- Events: Event bus for component communication
- Battery feed: Access to the phone's battery entities
"""

from .state import EstimatorState
from .events import EstimatorEventBus, EstimatorEvent
from .battery_feed import BatteryFeed

__all__ = ["EstimatorState", "EstimatorEventBus", "EstimatorEvent", "BatteryFeed"]
