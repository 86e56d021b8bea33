"""lcu-bridge: connection supervisor and event relay for the League client API."""

__version__ = "0.1.0"
