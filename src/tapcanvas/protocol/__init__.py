from .constants import LIFESPAN_S, MARKER_RADIUS, T_ADD, T_INIT, T_REMOVE
from .messages import (
    AddEvent,
    AddIntent,
    InitEvent,
    MarkerOut,
    RemoveEvent,
    RemoveIntent,
    encode,
    parse_event,
    parse_intent,
)

__all__ = [
    "LIFESPAN_S",
    "MARKER_RADIUS",
    "T_ADD",
    "T_INIT",
    "T_REMOVE",
    "AddEvent",
    "AddIntent",
    "InitEvent",
    "MarkerOut",
    "RemoveEvent",
    "RemoveIntent",
    "encode",
    "parse_event",
    "parse_intent",
]
