from .connection import CanvasClient, connect
from .reconciler import Canvas, Confirmed, LocalMarker, Pending, marker_id, random_color

__all__ = [
    "Canvas",
    "CanvasClient",
    "Confirmed",
    "LocalMarker",
    "Pending",
    "connect",
    "marker_id",
    "random_color",
]
