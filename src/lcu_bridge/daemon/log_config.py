"""Bridge logging configuration.

Owns the logger configuration (handlers, formatters) for the whole
"lcu-bridge" logger tree. Other modules get their own logger via:
    _logger = logging.getLogger(f"{APP_NAME}.<area>")

Child loggers propagate to the "lcu-bridge" logger, so configuring it
here once covers every module.
"""

from __future__ import annotations

__all__ = [
    "configure_logging",
    "log_event",
]

import logging

from lcu_bridge.config import BridgeConfig, get_system_log_path
from lcu_bridge.constants import APP_NAME
from lcu_bridge.models import SystemEvent
from lcu_bridge.utils.file_helpers import set_secure_permissions
from lcu_bridge.utils.logging.iso_formatter import ConsoleFormatter, ISO8601Formatter

_root_logger = logging.getLogger(APP_NAME)
_root_logger.setLevel(logging.INFO)
_root_logger.propagate = False

_logger = logging.getLogger(f"{APP_NAME}.daemon")

# Track if file logging has been configured
_file_handler_configured: bool = False

# Initialize with stderr-only until config is loaded
if not _root_logger.handlers:
    _stderr_handler = logging.StreamHandler()
    _stderr_handler.setFormatter(ConsoleFormatter())
    _root_logger.addHandler(_stderr_handler)


def configure_logging(config: BridgeConfig) -> None:
    """Configure bridge logging with a file handler.

    Sets up:
    - stderr handler: INFO+ for operator visibility
    - file handler: WARNING+ only (connection losses, failures)

    Args:
        config: Bridge configuration with log directory.
    """
    global _file_handler_configured

    if _file_handler_configured:
        return

    for handler in _root_logger.handlers:
        handler.close()
    _root_logger.handlers.clear()

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(logging.INFO)
    stderr_handler.setFormatter(ConsoleFormatter())
    _root_logger.addHandler(stderr_handler)

    log_path = get_system_log_path(config)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        set_secure_permissions(log_path.parent, is_directory=True)
    except OSError:
        pass  # stderr will still work

    try:
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.WARNING)
        file_handler.setFormatter(ISO8601Formatter())
        _root_logger.addHandler(file_handler)
        _file_handler_configured = True
    except OSError as e:
        log_event(
            logging.WARNING,
            SystemEvent(
                event="file_logging_failed",
                message="Failed to configure file logging",
                error_type=type(e).__name__,
                error_message=str(e),
                details={"log_path": str(log_path)},
            ),
        )


def log_event(level: int, event: SystemEvent) -> None:
    """Log a SystemEvent at the specified level.

    Serializes the event to a dict (excluding None values) and logs it.
    The ISO8601Formatter adds the timestamp during serialization.

    Args:
        level: Logging level (e.g., logging.INFO, logging.WARNING).
        event: The event to log.
    """
    _logger.log(level, event.model_dump(exclude_none=True))
