"""Bridge configuration for lcu-bridge.

Config is stored as JSON in the OS-appropriate application directory.

Example usage:
    # Load from config file (defaults if missing or invalid)
    config = load_config()

    # Save configuration
    save_config(config)
"""

from __future__ import annotations

__all__ = [
    "BridgeConfig",
    "get_config_path",
    "get_log_dir",
    "get_system_log_path",
    "load_config",
    "load_config_strict",
    "save_config",
]

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from lcu_bridge.constants import (
    APP_NAME,
    DEFAULT_LIVENESS_PATH,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_UI_PORT,
    MAX_POLL_INTERVAL_SECONDS,
    MAX_REQUEST_TIMEOUT_SECONDS,
    MIN_POLL_INTERVAL_SECONDS,
    MIN_REQUEST_TIMEOUT_SECONDS,
)
from lcu_bridge.exceptions import ConfigurationError
from lcu_bridge.utils.file_helpers import get_app_dir, get_platform_log_dir, set_secure_permissions

_logger = logging.getLogger(f"{APP_NAME}.config")


class BridgeConfig(BaseModel):
    """Bridge configuration.

    Attributes:
        ui_port: HTTP port the UI command surface listens on (loopback only).
        poll_interval_seconds: Fixed delay between supervisor ticks.
        request_timeout_seconds: Timeout for each call to the local client.
        liveness_path: Cheap read used to detect a dropped session.
        lockfile_path: Explicit lockfile location. When unset the default
            install locations are searched.
        log_dir: Base directory for logs. Bridge logs go in <log_dir>/lcu-bridge/.
    """

    ui_port: int = Field(
        default=DEFAULT_UI_PORT,
        ge=1024,
        le=65535,
        description="HTTP port for the UI command surface",
    )
    poll_interval_seconds: float = Field(
        default=DEFAULT_POLL_INTERVAL_SECONDS,
        ge=MIN_POLL_INTERVAL_SECONDS,
        le=MAX_POLL_INTERVAL_SECONDS,
        description="Seconds between connection supervisor ticks",
    )
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SECONDS,
        ge=MIN_REQUEST_TIMEOUT_SECONDS,
        le=MAX_REQUEST_TIMEOUT_SECONDS,
        description="Timeout for each request to the local client",
    )
    liveness_path: str = Field(
        default=DEFAULT_LIVENESS_PATH,
        pattern=r"^/",
        description="Client API path used as liveness check",
    )
    lockfile_path: str | None = Field(
        default=None,
        description="Explicit path to the client's lockfile",
    )
    log_dir: str = Field(
        default_factory=get_platform_log_dir,
        min_length=1,
        description="Base directory for logs",
    )

    model_config = {"extra": "ignore"}  # Ignore unknown fields for forward compat


def get_config_path() -> Path:
    """Get the full path to the config file.

    Returns:
        Path to config.json in the application directory.
    """
    return get_app_dir() / "config.json"


def get_log_dir(config: BridgeConfig) -> Path:
    """Get bridge log directory (<log_dir>/lcu-bridge/)."""
    return Path(config.log_dir).expanduser() / APP_NAME


def get_system_log_path(config: BridgeConfig) -> Path:
    """Get full path to the system log file (<log_dir>/lcu-bridge/system.jsonl)."""
    return get_log_dir(config) / "system.jsonl"


def load_config(config_path: Path | None = None) -> BridgeConfig:
    """Load configuration from file.

    If the config file doesn't exist, returns default configuration.
    Invalid JSON or validation errors return defaults with a warning.

    Args:
        config_path: Config file location. Defaults to get_config_path().

    Returns:
        BridgeConfig: Loaded or default configuration.
    """
    path = config_path or get_config_path()

    if not path.exists():
        return BridgeConfig()

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
        return BridgeConfig.model_validate(data)
    except json.JSONDecodeError as e:
        _logger.warning(
            {
                "event": "config_invalid_json",
                "message": f"Invalid JSON in config, using defaults: {e}",
                "error_type": type(e).__name__,
                "error_message": str(e),
                "details": {"config_path": str(path)},
            }
        )
    except ValidationError as e:
        _logger.warning(
            {
                "event": "config_validation_failed",
                "message": f"Invalid config values, using defaults: {e}",
                "error_type": type(e).__name__,
                "error_message": str(e),
                "details": {"config_path": str(path)},
            }
        )
    except OSError as e:
        _logger.warning(
            {
                "event": "config_read_failed",
                "message": f"Failed to read config file, using defaults: {e}",
                "error_type": type(e).__name__,
                "error_message": str(e),
                "details": {"config_path": str(path)},
            }
        )
    return BridgeConfig()


def load_config_strict(config_path: Path | None = None) -> BridgeConfig:
    """Load configuration, raising on invalid content.

    A missing file is not an error (defaults apply). Used by the bridge
    process so a broken config is reported instead of silently ignored.

    Raises:
        ConfigurationError: If the file is unreadable, not JSON, or invalid.
    """
    path = config_path or get_config_path()

    if not path.exists():
        return BridgeConfig()

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    try:
        return BridgeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config in {path}: {e}") from e


def save_config(config: BridgeConfig, config_path: Path | None = None) -> Path:
    """Save configuration to file with owner-only permissions.

    Returns:
        Path the config was written to.

    Raises:
        OSError: If unable to write config file.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        json.dump(config.model_dump(), f, indent=2)
        f.write("\n")

    set_secure_permissions(path)
    return path
