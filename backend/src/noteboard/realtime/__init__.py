"""Realtime position channel: hubs, frame decoding and command dispatch."""

from .dispatcher import CommandDispatcher, DispatchOutcome
from .hub import BroadcastHub, Connection, HubRegistry
from .protocol import decode_frame

__all__ = [
    "BroadcastHub",
    "CommandDispatcher",
    "Connection",
    "DispatchOutcome",
    "HubRegistry",
    "decode_frame",
]
