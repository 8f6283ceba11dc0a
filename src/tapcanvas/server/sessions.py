from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass, field

from fastapi import WebSocket

from tapcanvas.errors import ConnectionClosed, ProtocolError, StorageError
from tapcanvas.protocol.messages import (
    AddEvent,
    AddIntent,
    InitEvent,
    MarkerOut,
    RemoveEvent,
    RemoveIntent,
    encode,
    parse_intent,
)

from .store import MarkerStore

logger = logging.getLogger(__name__)


@dataclass
class ConnectionRegistry:
    """Live sockets that receive broadcasts. Iterated via snapshot so churn is safe."""

    clients: set[WebSocket] = field(default_factory=set)

    def add(self, ws: WebSocket) -> None:
        self.clients.add(ws)

    def discard(self, ws: WebSocket) -> None:
        self.clients.discard(ws)

    def snapshot(self) -> list[WebSocket]:
        return list(self.clients)

    def __len__(self) -> int:
        return len(self.clients)

    @staticmethod
    async def send(ws: WebSocket, data: str) -> None:
        try:
            await ws.send_text(data)
        except Exception as e:
            raise ConnectionClosed(str(e) or type(e).__name__) from e

    async def broadcast(self, data: str) -> int:
        """Send to every socket live right now; returns how many got it."""
        dead: list[WebSocket] = []
        sent = 0
        for ws in self.snapshot():
            try:
                await self.send(ws, data)
                sent += 1
            except ConnectionClosed:
                dead.append(ws)
        for ws in dead:
            self.discard(ws)
        return sent


class Coordinator:
    """
    Broker between client intents and the marker store.

    Store calls run in a worker thread and are awaited before any broadcast, so a
    connection's own intents never overlap; intents from different connections
    interleave freely at the store.
    """

    def __init__(self, store: MarkerStore, *, debug_log_msgs: bool = False) -> None:
        self.store = store
        self.registry = ConnectionRegistry()
        self.debug_log_msgs = debug_log_msgs

    async def connect(self, ws: WebSocket) -> None:
        """CONNECTING -> ACTIVE: register, then unicast the full snapshot."""
        self.registry.add(ws)
        logger.info("client connected (%d live)", len(self.registry))
        try:
            markers = await asyncio.to_thread(self.store.list_all)
        except StorageError:
            logger.exception("cannot load snapshot for new client")
            return
        init = InitEvent(elements=[MarkerOut(**asdict(m)) for m in markers])
        await self.registry.send(ws, encode(init))

    def disconnect(self, ws: WebSocket) -> None:
        self.registry.discard(ws)
        logger.info("client disconnected (%d live)", len(self.registry))

    async def handle_frame(self, raw: str | bytes) -> None:
        try:
            msg = parse_intent(raw)
        except ProtocolError as e:
            logger.debug("dropping malformed frame: %s", e)
            return
        if self.debug_log_msgs:
            logger.info("in type=%s %s", msg.type, raw)

        if isinstance(msg, AddIntent):
            await self.add(msg)
        elif isinstance(msg, RemoveIntent):
            await self.remove(msg)

    async def add(self, intent: AddIntent) -> AddEvent | None:
        try:
            marker_id = await asyncio.to_thread(
                self.store.insert, intent.x, intent.y, intent.color, intent.created_at
            )
        except StorageError:
            logger.exception("add not persisted; dropping intent")
            return None
        event = AddEvent(
            id=marker_id,
            x=intent.x,
            y=intent.y,
            color=intent.color,
            created_at=intent.created_at,
        )
        logger.info("marker %d saved at (%d, %d)", marker_id, intent.x, intent.y)
        await self.registry.broadcast(encode(event))
        return event

    async def remove(self, intent: RemoveIntent) -> RemoveEvent | None:
        # a falsy id means the client tapped its own pending marker; nothing to do
        if not intent.id:
            return None
        try:
            await asyncio.to_thread(self.store.remove, intent.id)
        except StorageError:
            logger.exception("remove of marker %d failed; not broadcasting", intent.id)
            return None
        event = RemoveEvent(id=intent.id)
        logger.info("marker %d removed", intent.id)
        await self.registry.broadcast(encode(event))
        return event
