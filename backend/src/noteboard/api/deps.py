"""Shared route dependencies for the realtime hub and dispatcher."""

from starlette.requests import HTTPConnection

from ..config import get_settings
from ..database import get_session_factory
from ..realtime import CommandDispatcher, HubRegistry


def get_hub_registry(connection: HTTPConnection) -> HubRegistry:
    """Hub registry living on ``app.state``; built on first use if startup did not."""
    state = connection.app.state
    hubs = getattr(state, "hubs", None)
    if hubs is None:
        settings = get_settings()
        hubs = state.hubs = HubRegistry(settings.broadcast_scope, settings.ws_prune_on_send_failure)
    return hubs


def get_dispatcher(connection: HTTPConnection) -> CommandDispatcher:
    state = connection.app.state
    dispatcher = getattr(state, "dispatcher", None)
    if dispatcher is None:
        dispatcher = state.dispatcher = CommandDispatcher(
            get_session_factory(),
            get_hub_registry(connection),
            max_frame_bytes=get_settings().ws_max_message_bytes,
        )
    return dispatcher
