"""Tests for the Charge Estimator integration."""
