"""WebSocket relay application for host-driven quiz games.

This module provides the Flask-SocketIO application that keeps one host and
its players in sync. All session state is in memory:
1. SessionStore holds every live game (host, players, latest snapshot)
2. ConnectionRegistry maps each connection to the role it holds
3. Socket.IO rooms (one per game code) carry the broadcasts

Architecture:
    Host → syncState → This Server → Socket.IO room → Players

NOTE: Eventlet monkey patching is done in wsgi.py entry point
"""

import logging
import os
from typing import Optional

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from prometheus_client import CollectorRegistry
from prometheus_flask_exporter import PrometheusMetrics

from showrelay import __version__
from showrelay.common.config import Settings, get_settings
from showrelay.server.controllers import RelayController, SessionController
from showrelay.server.models import SessionStore
from showrelay.server.utils.channel import SocketIOChannel
from showrelay.server.utils.connection_registry import ConnectionRegistry
from showrelay.server.utils.metrics import RelayMetrics

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None):
    """Application factory for the relay server."""
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level)

    # Browser bundle is served from the working directory, next to the process
    app = Flask(
        __name__,
        static_folder=os.path.abspath(settings.static_folder),
        static_url_path='',
    )
    app.config['DEBUG'] = settings.debug

    # Configure CORS
    CORS(app, resources={
        r"/api/*": {
            "origins": settings.websocket_cors_origins,
            "methods": ["GET", "OPTIONS"],
            "allow_headers": ["Content-Type"],
        }
    })

    # Single process, in-memory rooms: no message queue
    socketio = SocketIO(
        app,
        cors_allowed_origins=settings.websocket_cors_origins,
        async_mode=settings.socketio_async_mode,
        ping_interval=settings.websocket_ping_interval,
        ping_timeout=settings.websocket_ping_timeout,
        logger=settings.debug,
        engineio_logger=settings.debug,
    )

    relay_metrics = None
    if settings.metrics_enabled:
        # Per-app registry so repeated create_app() calls don't collide
        registry = CollectorRegistry()
        metrics = PrometheusMetrics(app, registry=registry)
        metrics.info("showrelay_server_info", "Quiz show relay server", version=__version__)
        relay_metrics = RelayMetrics(registry)

    # Initialize services
    session_store = SessionStore()
    connection_registry = ConnectionRegistry()
    channel = SocketIOChannel(socketio)

    # Store dependencies in app.extensions
    app.extensions['settings'] = settings
    app.extensions['session_store'] = session_store
    app.extensions['connection_registry'] = connection_registry
    app.extensions['relay_metrics'] = relay_metrics
    app.extensions['session_controller'] = SessionController(
        session_store, connection_registry, channel, relay_metrics
    )
    app.extensions['relay_controller'] = RelayController(session_store, channel, relay_metrics)

    # Register HTTP routes
    from showrelay.server.routes.health_routes import init_health_routes
    app.register_blueprint(init_health_routes())

    @app.route('/')
    def index():
        return app.send_static_file('index.html')

    # Register Socket.IO event handlers
    from showrelay.server.socket_handlers import session_handlers, relay_handlers
    session_handlers.register_handlers(socketio)
    relay_handlers.register_handlers(socketio)

    logger.info(
        "relay_server_initialized async_mode=%s metrics=%s",
        settings.socketio_async_mode, settings.metrics_enabled,
    )
    return app


def main():
    settings = get_settings()
    app = create_app(settings)
    logger.info("=" * 60)
    logger.info("Starting relay server on %s:%s", settings.host, settings.port)
    logger.info("=" * 60)
    app.extensions['socketio'].run(app, host=settings.host, port=settings.port)


if __name__ == '__main__':
    main()
