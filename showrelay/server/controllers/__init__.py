from showrelay.server.controllers.relay_controller import RelayController
from showrelay.server.controllers.role_assignor import join_session
from showrelay.server.controllers.session_controller import SessionController

__all__ = ["RelayController", "SessionController", "join_session"]
