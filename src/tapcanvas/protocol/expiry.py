"""Fade-out shared by every client and the server's snapshot render."""

from __future__ import annotations


def opacity(created_at: int, now: int, lifespan_s: int) -> float:
    """Linear fade from 1 at creation to 0 at `lifespan_s`, clamped to [0, 1]."""
    age = now - created_at
    return min(1.0, max(0.0, 1.0 - age / lifespan_s))


def is_expired(created_at: int, now: int, lifespan_s: int) -> bool:
    return now - created_at >= lifespan_s
