"""Health check routes for the relay server."""

from flask import Blueprint, jsonify, current_app

from showrelay import __version__


def init_health_routes():
    """Initialize health check routes."""
    health_bp = Blueprint('health', __name__)

    @health_bp.route('/api/health', methods=['GET'])
    def health_check():
        """Liveness check with a count of what is currently being relayed."""
        session_store = current_app.extensions['session_store']
        return jsonify({
            'status': 'healthy',
            'service': 'show-relay',
            'version': __version__,
            'sessions': session_store.session_count(),
            'players': session_store.player_count(),
        }), 200

    return health_bp
