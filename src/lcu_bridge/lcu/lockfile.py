"""Discovery of the local client's port and token.

On every launch the client writes a lockfile into its install directory:

    LeagueClient:<pid>:<port>:<password>:<protocol>

The port and password change per launch, so the file is re-read on every
connection attempt.
"""

from __future__ import annotations

__all__ = [
    "LockfileCredentials",
    "find_lockfile",
    "parse_lockfile",
    "read_credentials",
]

import base64
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from lcu_bridge.constants import DEFAULT_LOCKFILE_DIRS, LCU_HOST, LCU_USERNAME, LOCKFILE_NAME
from lcu_bridge.exceptions import ConnectFailedError

_LOCKFILE_FIELDS = 5
_MAX_PORT = 65535


@dataclass(frozen=True)
class LockfileCredentials:
    """Credentials read from the lockfile.

    Attributes:
        process: Name of the process that wrote the lockfile.
        pid: Process ID of the client.
        port: Local port of the REST API and push channel.
        password: Per-launch token, used with the "riot" user.
        protocol: URL scheme, normally "https".
    """

    process: str
    pid: int
    port: int
    password: str
    protocol: str

    @property
    def base_url(self) -> str:
        """REST base URL, e.g. https://127.0.0.1:54321."""
        return f"{self.protocol}://{LCU_HOST}:{self.port}"

    @property
    def websocket_url(self) -> str:
        """Push channel URL, e.g. wss://127.0.0.1:54321/."""
        scheme = "wss" if self.protocol == "https" else "ws"
        return f"{scheme}://{LCU_HOST}:{self.port}/"

    @property
    def auth_header(self) -> str:
        """Value of the Authorization header (HTTP basic)."""
        token = base64.b64encode(f"{LCU_USERNAME}:{self.password}".encode("ascii")).decode("ascii")
        return f"Basic {token}"


def parse_lockfile(text: str) -> LockfileCredentials:
    """Parse lockfile content.

    Raises:
        ConnectFailedError: If the content does not have the expected shape.
    """
    parts = text.strip().split(":")
    if len(parts) != _LOCKFILE_FIELDS:
        raise ConnectFailedError(f"Malformed lockfile: expected {_LOCKFILE_FIELDS} fields, got {len(parts)}")

    process, pid, port, password, protocol = parts
    try:
        credentials = LockfileCredentials(
            process=process,
            pid=int(pid),
            port=int(port),
            password=password,
            protocol=protocol,
        )
    except ValueError as e:
        raise ConnectFailedError(f"Malformed lockfile: {e}") from e

    if not 0 < credentials.port <= _MAX_PORT:
        raise ConnectFailedError(f"Malformed lockfile: port {credentials.port} out of range")
    return credentials


def find_lockfile(
    explicit_path: str | Path | None = None,
    search_dirs: Iterable[str | Path] = DEFAULT_LOCKFILE_DIRS,
) -> Path | None:
    """Locate the lockfile.

    An explicit path wins and is never substituted by a search result.

    Returns:
        Path to an existing lockfile, or None.
    """
    if explicit_path is not None:
        path = Path(explicit_path).expanduser()
        return path if path.is_file() else None

    for directory in search_dirs:
        candidate = Path(directory).expanduser() / LOCKFILE_NAME
        if candidate.is_file():
            return candidate
    return None


def read_credentials(
    explicit_path: str | Path | None = None,
    search_dirs: Iterable[str | Path] = DEFAULT_LOCKFILE_DIRS,
) -> LockfileCredentials:
    """Find and parse the lockfile.

    Raises:
        ConnectFailedError: If the client is not running (no lockfile) or
            the lockfile cannot be read or parsed.
    """
    path = find_lockfile(explicit_path, search_dirs)
    if path is None:
        raise ConnectFailedError("League client is not running (lockfile not found)")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConnectFailedError(f"Cannot read lockfile {path}: {e}") from e
    return parse_lockfile(text)
