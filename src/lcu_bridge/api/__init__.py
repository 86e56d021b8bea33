"""HTTP command surface for the UI (FastAPI + SSE)."""

from .routes import create_bridge_api_app

__all__ = [
    "create_bridge_api_app",
]
