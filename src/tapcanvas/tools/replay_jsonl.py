from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from tapcanvas.client.connection import connect


def _split_line(obj: object) -> tuple[int | None, dict] | None:
    if not isinstance(obj, dict):
        return None
    inner = obj.get("msg")
    if isinstance(inner, dict):
        ts = obj.get("ts")
        return (int(ts) if isinstance(ts, (int, float)) else None), inner
    return None, obj


def load_events(jsonl_path: Path) -> list[tuple[int | None, dict]]:
    """
    Canvas traffic as (ts_ms, msg) pairs, in file order.

    A line is either a `tapcanvas-record` entry (`{"ts": ms, "msg": event}`) or a
    bare intent such as `{"type": "add", "x": 10, ...}`; bare lines carry no timing.
    Blank lines and non-object lines are skipped.
    """
    with jsonl_path.open(encoding="utf-8") as f:
        parsed = (_split_line(json.loads(line)) for line in f if line.strip())
        return [e for e in parsed if e is not None]


def as_intent(msg: dict) -> dict:
    # A recorded confirmed `add` carries the server id; strip it to replay as an intent.
    if msg.get("type") == "add":
        return {k: v for k, v in msg.items() if k != "id"}
    return msg


async def replay(
    ws_url: str,
    jsonl_path: Path,
    *,
    speed: float = 1.0,
    default_dt_ms: int = 0,
    only_type: str | None = None,
) -> int:
    """Replay recorded or hand-written intents into the server; returns how many were sent."""
    events = load_events(jsonl_path)
    sent = 0

    async with connect(ws_url) as ws:
        prev_ts: int | None = None
        for ts, msg in events:
            if msg.get("type") == "init":
                continue
            if only_type and msg.get("type") != only_type:
                continue

            if ts is not None and prev_ts is not None:
                dt_ms = max(0, ts - prev_ts)
            else:
                dt_ms = default_dt_ms

            prev_ts = ts if ts is not None else prev_ts
            if dt_ms:
                await asyncio.sleep((dt_ms / 1000.0) / max(0.01, speed))

            await ws.send(json.dumps(as_intent(msg), ensure_ascii=False, separators=(",", ":")))
            sent += 1
    return sent


def main() -> None:
    ap = argparse.ArgumentParser(
        description="Send recorded canvas traffic (or hand-written intents) back to a server.",
    )
    ap.add_argument("--ws", required=True, help="canvas socket, e.g. ws://127.0.0.1:3000/ws")
    ap.add_argument("--in", dest="inp", required=True, type=Path, help="JSONL file to replay")
    ap.add_argument("--speed", type=float, default=1.0, help="time compression; 4 plays four times faster")
    ap.add_argument(
        "--default-dt-ms",
        type=int,
        default=0,
        help="pause before lines without a recorded timestamp",
    )
    ap.add_argument(
        "--only-type",
        choices=["add", "remove"],
        help="replay just the taps that place (add) or erase (remove) markers",
    )
    args = ap.parse_args()

    sent = asyncio.run(
        replay(args.ws, args.inp, speed=args.speed, default_dt_ms=args.default_dt_ms, only_type=args.only_type)
    )
    print(f"[replay] sent {sent} intent(s)")


if __name__ == "__main__":
    main()
