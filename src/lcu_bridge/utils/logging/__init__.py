"""Logging helpers (formatters) for lcu-bridge."""

from .iso_formatter import ConsoleFormatter, ISO8601Formatter

__all__ = ["ConsoleFormatter", "ISO8601Formatter"]
