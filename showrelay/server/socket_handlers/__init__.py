"""Socket.IO event handlers for the relay server.

These handlers only decode client payloads and resolve the sender; all
session bookkeeping lives in the controllers.
"""

from showrelay.server.socket_handlers import session_handlers
from showrelay.server.socket_handlers import relay_handlers

__all__ = ['session_handlers', 'relay_handlers']
