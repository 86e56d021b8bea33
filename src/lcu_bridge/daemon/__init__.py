"""Bridge process: wiring, logging configuration and lifecycle helpers."""

from .log_config import configure_logging, log_event
from .server import run_bridge

__all__ = [
    "configure_logging",
    "log_event",
    "run_bridge",
]
