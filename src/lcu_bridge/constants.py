"""Application-wide constants for lcu-bridge.

Constants that define application behavior.
For user-configurable settings, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    # Bridge API server
    "DEFAULT_UI_PORT",
    "BRIDGE_HOST",
    "API_SERVER_SHUTDOWN_TIMEOUT_SECONDS",
    "HTTP_LISTEN_BACKLOG",
    # Connection supervisor
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "MIN_POLL_INTERVAL_SECONDS",
    "MAX_POLL_INTERVAL_SECONDS",
    "DEFAULT_LIVENESS_PATH",
    # Request timeouts
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "MIN_REQUEST_TIMEOUT_SECONDS",
    "MAX_REQUEST_TIMEOUT_SECONDS",
    "CLI_REQUEST_TIMEOUT_SECONDS",
    "WEBSOCKET_OPEN_TIMEOUT_SECONDS",
    # Local client discovery
    "LCU_HOST",
    "LCU_USERNAME",
    "DEFAULT_LOCKFILE_DIRS",
    "LOCKFILE_NAME",
    # UI event stream
    "SSE_QUEUE_MAXSIZE",
    "SSE_KEEPALIVE_SECONDS",
]

# Application identity
APP_NAME = "lcu-bridge"

# Bridge API server (local only, consumed by the UI shell)
DEFAULT_UI_PORT = 8799
BRIDGE_HOST = "127.0.0.1"
API_SERVER_SHUTDOWN_TIMEOUT_SECONDS = 5.0
HTTP_LISTEN_BACKLOG = 100

# Connection supervisor tick interval. Fixed interval, no backoff.
DEFAULT_POLL_INTERVAL_SECONDS = 5.0
MIN_POLL_INTERVAL_SECONDS = 0.5
MAX_POLL_INTERVAL_SECONDS = 300.0

# Cheap read used to detect a silently dropped session
DEFAULT_LIVENESS_PATH = "/lol-summoner/v1/current-summoner"

# Per-call timeouts for the local client and outbound fetches
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
MIN_REQUEST_TIMEOUT_SECONDS = 0.5
MAX_REQUEST_TIMEOUT_SECONDS = 120.0
CLI_REQUEST_TIMEOUT_SECONDS = 30.0
WEBSOCKET_OPEN_TIMEOUT_SECONDS = 5.0

# The client always listens on loopback and authenticates as "riot"
LCU_HOST = "127.0.0.1"
LCU_USERNAME = "riot"
LOCKFILE_NAME = "lockfile"

# Install locations searched for the lockfile when none is configured
DEFAULT_LOCKFILE_DIRS: tuple[str, ...] = (
    "C:/Riot Games/League of Legends",
    "D:/Riot Games/League of Legends",
    "/Applications/League of Legends.app/Contents/LoL",
)

# Per-subscriber buffer for the UI event stream
SSE_QUEUE_MAXSIZE = 1000
SSE_KEEPALIVE_SECONDS = 30.0
