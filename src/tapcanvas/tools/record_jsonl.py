from __future__ import annotations

import argparse
import asyncio
import json
import time
from pathlib import Path

from tapcanvas.client.connection import CanvasClient, connect
from tapcanvas.client.reconciler import Canvas


def _now_ms() -> int:
    return int(time.time() * 1000)


async def record(ws_url: str, out_path: Path, *, echo: bool) -> None:
    """Follow the canvas as a passive client and log every server event."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("a", encoding="utf-8") as f:

        def on_event(event, canvas: Canvas) -> None:
            msg = event.model_dump(mode="json")
            if echo:
                canvas.prune()
                print(f"[record] type={event.type} visible={len(canvas.markers)} msg={msg}")
            f.write(json.dumps({"ts": _now_ms(), "msg": msg}, ensure_ascii=False) + "\n")
            f.flush()

        async with connect(ws_url) as ws:
            await CanvasClient(ws).listen(on_event)


def main() -> None:
    ap = argparse.ArgumentParser(description="Record canvas events to a JSONL file.")
    ap.add_argument("--ws", required=True, help="WebSocket URL, e.g. ws://127.0.0.1:3000/ws")
    ap.add_argument("--out", required=True, help="Output JSONL path")
    ap.add_argument("--print", action="store_true", help="Print received events to stdout")
    args = ap.parse_args()

    asyncio.run(record(args.ws, Path(args.out), echo=args.print))


if __name__ == "__main__":
    main()
