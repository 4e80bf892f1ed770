"""Runtime configuration helpers for the relay server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    """Immutable application configuration loaded from the environment."""

    debug: bool
    host: str
    port: int
    log_level: str
    static_folder: str
    # WebSocket configuration
    websocket_cors_origins: str
    websocket_ping_interval: int
    websocket_ping_timeout: int
    socketio_async_mode: str
    # Observability
    metrics_enabled: bool

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        return Settings(
            # toggle Flask debugger (disabled in prod)
            debug=env.get("FLASK_DEBUG", "false").lower() in _TRUTHY,
            host=env.get("HOST", "0.0.0.0"),  # nosec B104 - Required for containerized deployment
            port=int(env.get("PORT", "3000")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            # directory holding the browser bundle served at /
            static_folder=env.get("STATIC_FOLDER", "public"),

            # websocket configuration
            websocket_cors_origins=env.get("WEBSOCKET_CORS_ORIGINS", "*"),
            websocket_ping_interval=int(env.get("WEBSOCKET_PING_INTERVAL", "25")),
            websocket_ping_timeout=int(env.get("WEBSOCKET_PING_TIMEOUT", "60")),
            # eventlet in production, threading for tests and local debugging
            socketio_async_mode=env.get("SOCKETIO_ASYNC_MODE", "eventlet"),

            metrics_enabled=env.get("METRICS_ENABLED", "true").lower() in _TRUTHY,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings loaded from environment variables."""

    return Settings.from_env()
