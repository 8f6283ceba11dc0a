from __future__ import annotations


class TapCanvasError(Exception):
    """Base class for every error raised by tapcanvas."""


class StorageError(TapCanvasError):
    """A marker store operation failed (I/O, locked database, closed connection)."""


class ProtocolError(TapCanvasError):
    """A frame was not JSON, had an unknown `type`, or had missing/wrong-typed fields."""


class ConnectionClosed(TapCanvasError):
    """A broadcast target is no longer reachable."""
