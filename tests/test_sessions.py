from __future__ import annotations

import asyncio

from tapcanvas.server.sessions import ConnectionRegistry


class FakeWebSocket:
    def __init__(self, *, broken: bool = False) -> None:
        self.broken = broken
        self.frames: list[str] = []

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise RuntimeError("Cannot call send once a close message has been sent.")
        self.frames.append(data)


def test_dead_target_does_not_stop_fanout():
    a, dead, b = FakeWebSocket(), FakeWebSocket(broken=True), FakeWebSocket()
    registry = ConnectionRegistry()
    for ws in (a, dead, b):
        registry.add(ws)

    sent = asyncio.run(registry.broadcast('{"type":"remove","id":1}'))

    assert sent == 2
    assert a.frames == ['{"type":"remove","id":1}']
    assert b.frames == ['{"type":"remove","id":1}']
    assert dead not in registry.clients
    assert len(registry) == 2


def test_broadcast_iterates_a_snapshot_while_clients_leave():
    registry = ConnectionRegistry()
    late = FakeWebSocket()

    class Leaver(FakeWebSocket):
        async def send_text(self, data: str) -> None:
            await super().send_text(data)
            registry.discard(late)

    first = Leaver()
    registry.clients = {first, late}
    # whatever order the set yields, iteration must not blow up on the mutation
    sent = asyncio.run(registry.broadcast("x"))
    assert sent == 2
    assert late not in registry.clients
