from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

import websockets

from tapcanvas.errors import ProtocolError
from tapcanvas.protocol.messages import AddEvent, InitEvent, RemoveEvent, encode, parse_event

from .reconciler import Canvas

logger = logging.getLogger(__name__)

ServerEvent = InitEvent | AddEvent | RemoveEvent
OnEvent = Callable[[ServerEvent, Canvas], Optional[Awaitable[None]]]


class CanvasClient:
    """
    One client session: a websocket plus the local `Canvas` it keeps in sync.

    `ws` is anything with async `send(str)` and async iteration over incoming
    frames (a `websockets` client connection in practice).
    """

    def __init__(self, ws, canvas: Canvas | None = None) -> None:
        self.ws = ws
        self.canvas = canvas or Canvas()

    async def tap(self, x: int, y: int, now: int | None = None) -> None:
        intent = self.canvas.tap(x, y, now)
        await self.ws.send(encode(intent))

    async def listen(self, on_event: OnEvent | None = None) -> None:
        """Apply server events until the connection ends. Malformed frames are skipped."""
        async for raw in self.ws:
            try:
                event = parse_event(raw)
            except ProtocolError as e:
                logger.warning("skipping server frame: %s", e)
                continue
            self.canvas.apply(event)
            if on_event is not None:
                res = on_event(event, self.canvas)
                if res is not None:
                    await res


def connect(ws_url: str, **kwargs):
    """`async with connect(url) as ws: CanvasClient(ws)`; same limits the tools use."""
    kwargs.setdefault("max_size", 2**22)
    return websockets.connect(ws_url, **kwargs)
