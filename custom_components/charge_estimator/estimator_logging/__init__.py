"""Unified logging module for Charge Estimator."""

from .unified_logger import EstimatorLogger, get_logger

__all__ = ["EstimatorLogger", "get_logger"]
