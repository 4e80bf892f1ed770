"""Binding guard for Socket.IO handlers.

Resolves the sender's session binding from the connection registry and hands
it to the handler. Events from connections that never created or joined a
game are dropped without any reply.
"""

import logging
from functools import wraps

from flask import current_app, request

logger = logging.getLogger(__name__)


def socket_bound(f):
    """Decorator requiring the sender to hold a session role.

    The wrapped handler receives the ``Binding`` as its first argument,
    followed by whatever the client sent.
    """
    @wraps(f)
    def wrapped(*args, **kwargs):
        registry = current_app.extensions['connection_registry']
        binding = registry.lookup(request.sid)

        if binding is None:
            event = request.event['message']
            logger.info("event_rejected event=%s reason=unbound sid=%s", event, request.sid)
            metrics = current_app.extensions.get('relay_metrics')
            if metrics is not None:
                metrics.rejected(event)
            return None

        return f(binding, *args, **kwargs)

    return wrapped
