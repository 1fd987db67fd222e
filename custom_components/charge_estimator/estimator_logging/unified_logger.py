"""Unified event logger for Charge Estimator.

This logger writes to:
1. Home Assistant logs (through the standard logging module) - ALWAYS
2. Rotating file log (for debug) - when file logging is enabled
3. Daily structured logs (JSON lines, for analysis) - when file logging is enabled

Events are logged by name with keyword context:

    get_logger().info("ESTIMATE_UPDATED", power_w=12.3, speed="normal")

IMPORTANT: All file I/O is done in a background thread to avoid blocking the event loop.
"""

from __future__ import annotations

import atexit
import json
import logging
import queue
import threading
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)


class EstimatorLogger:
    """Unified logger for the integration.

    Features:
    - Always logs to HA logs at the requested level
    - Optional rotating file (max 5MB, 3 backups)
    - Optional daily structured logs in YEAR/MONTH/DAY format
    - All file I/O runs in a background thread (non-blocking)
    """

    # Log levels
    CRITICAL = "critical"
    INFO = "info"
    DEBUG = "debug"
    WARNING = "warning"
    ERROR = "error"

    def __init__(
        self,
        name: str = "estimator",
        log_dir: Path | None = None,
        file_logging_enabled: bool = False,
        max_file_size_mb: int = 5,
        backup_count: int = 3,
    ) -> None:
        """Initialize the unified logger.

        Args:
            name: Logger name
            log_dir: Base directory for logs (default: component directory/log)
            file_logging_enabled: Whether to enable file logging
            max_file_size_mb: Max size of rotating log file
            backup_count: Number of backup files to keep
        """
        self.name = name
        self._file_logging_enabled = file_logging_enabled
        self._max_file_size_mb = max_file_size_mb
        self._backup_count = backup_count

        if log_dir is None:
            log_dir = Path(__file__).parent.parent / "log"
        self.log_dir = log_dir

        self._ha_logger = logging.getLogger(f"custom_components.charge_estimator.{name}")

        self._rotating_log_file = self.log_dir / "charge_estimator.log"
        self._file_handler: RotatingFileHandler | None = None

        # Background thread for file I/O
        self._write_queue: queue.Queue = queue.Queue()
        self._shutdown_event = threading.Event()
        self._writer_thread: threading.Thread | None = None
        atexit.register(self._shutdown_writer)

        if file_logging_enabled:
            self._start_writer_thread()

    def _start_writer_thread(self) -> None:
        """Start the background writer thread."""
        if self._writer_thread is not None and self._writer_thread.is_alive():
            return

        self._shutdown_event.clear()
        self._writer_thread = threading.Thread(
            target=self._writer_loop,
            name="ChargeEstimatorLogWriter",
            daemon=True,
        )
        self._writer_thread.start()

    def _shutdown_writer(self) -> None:
        """Stop the writer thread and wait for it briefly."""
        if self._writer_thread is None:
            return

        self._shutdown_event.set()
        # Sentinel wakes the thread up
        self._write_queue.put(None)
        self._writer_thread.join(timeout=2.0)
        self._writer_thread = None

    def _writer_loop(self) -> None:
        """Background thread loop that processes the write queue."""
        self._init_file_handler_sync()

        while not self._shutdown_event.is_set():
            try:
                item = self._write_queue.get(timeout=0.5)
            except queue.Empty:
                continue

            if item is None:
                break

            self._write_to_daily_log_sync(*item)
            self._write_queue.task_done()

        if self._file_handler:
            self._ha_logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def _init_file_handler_sync(self) -> None:
        """Attach the rotating file handler (runs in background thread)."""
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._file_handler = RotatingFileHandler(
                self._rotating_log_file,
                maxBytes=self._max_file_size_mb * 1024 * 1024,
                backupCount=self._backup_count,
                encoding="utf-8",
            )
        except OSError as ex:
            _LOGGER.error("Failed to set up file handler: %s", ex)
            return

        self._file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        self._file_handler.setLevel(logging.DEBUG)
        self._ha_logger.addHandler(self._file_handler)

    def _get_daily_log_file(self, dt: datetime) -> Path:
        """Get path to the daily structured log file."""
        daily_dir = self.log_dir / str(dt.year) / f"{dt.month:02d}" / f"{dt.day:02d}"
        daily_dir.mkdir(parents=True, exist_ok=True)
        return daily_dir / "events.log"

    def _write_to_daily_log_sync(
        self, event: str, level: str, data: dict, timestamp: datetime
    ) -> None:
        """Append a structured event to the daily log (runs in background thread)."""
        entry = {
            "timestamp": timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3],
            "level": level,
            "event": event,
            "data": data,
        }
        try:
            with open(self._get_daily_log_file(timestamp), "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, default=str) + "\n")
        except OSError as ex:
            _LOGGER.error("Failed to write to daily log: %s", ex)

    def _queue_daily_log(self, event: str, level: str, data: dict) -> None:
        """Queue a daily log write (non-blocking)."""
        if not self._file_logging_enabled:
            return
        self._write_queue.put_nowait((event, level, data, datetime.now()))

    @staticmethod
    def format_message(event: str, data: dict[str, Any]) -> str:
        """Render an event and its context as a single log line."""
        if not data:
            return event
        data_str = " | ".join(f"{k}={v}" for k, v in data.items())
        return f"{event} | {data_str}"

    def log(self, level: str, event: str, **data: Any) -> None:
        """Log an event at specified level.

        Args:
            level: Log level (critical, info, debug, warning, error)
            event: Event name (e.g., "CHARGING_STARTED", "ESTIMATE_UPDATED")
            **data: Additional context data
        """
        message = self.format_message(event, data)

        if level == self.CRITICAL:
            self._ha_logger.critical(message)
        elif level == self.ERROR:
            self._ha_logger.error(message)
        elif level == self.WARNING:
            self._ha_logger.warning(message)
        elif level == self.INFO:
            self._ha_logger.info(message)
        else:
            self._ha_logger.debug(message)

        self._queue_daily_log(event, level, data)

    def critical(self, event: str, **data: Any) -> None:
        """Log critical event."""
        self.log(self.CRITICAL, event, **data)

    def error(self, event: str, **data: Any) -> None:
        """Log error event."""
        self.log(self.ERROR, event, **data)

    def warning(self, event: str, **data: Any) -> None:
        """Log warning event."""
        self.log(self.WARNING, event, **data)

    def info(self, event: str, **data: Any) -> None:
        """Log info event - visible in HA logs."""
        self.log(self.INFO, event, **data)

    def debug(self, event: str, **data: Any) -> None:
        """Log debug event."""
        self.log(self.DEBUG, event, **data)

    def set_file_logging(self, enabled: bool) -> None:
        """Enable or disable file logging."""
        was_enabled = self._file_logging_enabled
        self._file_logging_enabled = enabled

        if enabled and not was_enabled:
            self._start_writer_thread()
        elif was_enabled and not enabled:
            self._shutdown_writer()

        self.info("FILE_LOGGING_CHANGED", enabled=enabled)

    @property
    def file_logging_enabled(self) -> bool:
        """Check if file logging is enabled."""
        return self._file_logging_enabled


# Singleton instance
_logger_instance: EstimatorLogger | None = None


def get_logger() -> EstimatorLogger:
    """Get or create the singleton logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = EstimatorLogger()
    return _logger_instance
