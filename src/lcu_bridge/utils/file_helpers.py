"""Shared file utilities for lcu-bridge.

- get_app_dir: OS-appropriate application (config) directory
- get_platform_log_dir: OS-appropriate base log directory
- set_secure_permissions: Owner-only file/directory permissions
"""

from __future__ import annotations

__all__ = [
    "get_app_dir",
    "get_platform_log_dir",
    "set_secure_permissions",
]

import os
import sys
from pathlib import Path

import click

from lcu_bridge.constants import APP_NAME


def get_app_dir() -> Path:
    """Get the OS-appropriate application directory.

    Uses click.get_app_dir() which returns:
    - macOS: ~/Library/Application Support/lcu-bridge
    - Linux: ~/.config/lcu-bridge (XDG compliant)
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\lcu-bridge

    Returns:
        Path to the application directory.
    """
    return Path(click.get_app_dir(APP_NAME))


def get_platform_log_dir() -> str:
    """Get platform-appropriate base log directory (unexpanded).

    Platform conventions:
        - macOS: ~/Library/Logs
        - Linux: $XDG_STATE_HOME, falling back to ~/.local/state
        - Windows: ~/AppData/Local
    """
    if sys.platform == "darwin":
        return "~/Library/Logs"
    elif sys.platform == "win32":
        return "~/AppData/Local"
    return os.environ.get("XDG_STATE_HOME", "~/.local/state")


def set_secure_permissions(path: Path, *, is_directory: bool = False) -> None:
    """Restrict a file (0o600) or directory (0o700) to its owner.

    Does nothing on Windows. Permission errors are ignored.

    Args:
        path: Path to file or directory.
        is_directory: If True, use directory permissions (0o700).
    """
    if sys.platform == "win32":
        return

    try:
        path.chmod(0o700 if is_directory else 0o600)
    except OSError:
        pass  # Permission changes might fail on some systems
