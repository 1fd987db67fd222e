"""Test the unified event logger."""
from unittest.mock import patch

from custom_components.charge_estimator.estimator_logging.unified_logger import (
    EstimatorLogger,
)

LOGGER_MODULE = "custom_components.charge_estimator.estimator_logging.unified_logger"


def test_exit_hook_registered_once(tmp_path):
    """Test toggling file logging does not stack exit hooks."""
    with patch(f"{LOGGER_MODULE}.atexit.register") as mock_register, patch.object(
        EstimatorLogger, "_writer_loop"
    ):
        logger = EstimatorLogger(log_dir=tmp_path)

        for _ in range(3):
            logger.set_file_logging(True)
            logger.set_file_logging(False)

    mock_register.assert_called_once_with(logger._shutdown_writer)
    assert logger.file_logging_enabled is False


def test_file_logging_off_by_default(tmp_path):
    """Test no writer thread runs until file logging is enabled."""
    with patch(f"{LOGGER_MODULE}.atexit.register"):
        logger = EstimatorLogger(log_dir=tmp_path)

    assert logger.file_logging_enabled is False
    assert logger._writer_thread is None
