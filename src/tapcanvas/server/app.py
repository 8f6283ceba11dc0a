from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import Response

from tapcanvas.errors import ConnectionClosed

from .config import Settings, get_settings
from .rendering import render_snapshot_png
from .sessions import Coordinator
from .store import MarkerStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: MarkerStore | None = None) -> FastAPI:
    """
    Build the app. The store is opened on startup and closed on shutdown.

    Passing `store` lets callers (tests) supply their own; it is opened/closed the
    same way.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or get_settings()
        st = store or MarkerStore(cfg.db_path)
        st.open()
        app.state.settings = cfg
        app.state.coordinator = Coordinator(st, debug_log_msgs=cfg.debug_log_msgs)
        try:
            yield
        finally:
            st.close()

    app = FastAPI(lifespan=lifespan)

    @app.get("/healthz")
    def healthz(request: Request):
        coord: Coordinator = request.app.state.coordinator
        return {"ok": True, "clients": len(coord.registry), "markers": coord.store.count()}

    @app.get("/snapshot.png")
    async def snapshot(request: Request, w: int = 800, h: int = 600):
        # Debug view of the shared canvas as a client would see it right now.
        coord: Coordinator = request.app.state.coordinator
        cfg: Settings = request.app.state.settings
        markers = await asyncio.to_thread(coord.store.list_all)
        png = render_snapshot_png(
            markers=markers,
            now=int(time.time()),
            lifespan_s=cfg.marker_lifespan_s,
            radius=cfg.marker_radius,
            size=(max(1, w), max(1, h)),
        )
        return Response(content=png, media_type="image/png")

    @app.websocket("/ws")
    async def ws(ws: WebSocket):
        coord: Coordinator = ws.app.state.coordinator
        await ws.accept()
        try:
            await coord.connect(ws)
            while True:
                msg = await ws.receive()
                if msg["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(msg.get("code", 1000))
                # binary frames are parsed too; anything unparseable is dropped there
                raw = msg.get("text")
                await coord.handle_frame(raw if raw is not None else msg.get("bytes") or b"")
        except (WebSocketDisconnect, ConnectionClosed):
            pass
        finally:
            coord.disconnect(ws)

    return app


app = create_app()
