"""
Client-side view of the shared canvas.

Markers the user creates show up immediately as `Pending` and are upgraded to
`Confirmed` when the server echoes them back with an id. Expiry is a pure function
of `created_at`; the server is never told about it.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Optional, Union

from tapcanvas.protocol.constants import LIFESPAN_S, MARKER_RADIUS
from tapcanvas.protocol import expiry
from tapcanvas.protocol.messages import (
    AddEvent,
    AddIntent,
    InitEvent,
    RemoveEvent,
    RemoveIntent,
)


@dataclass(frozen=True)
class Pending:
    x: int
    y: int
    color: str
    created_at: int

    def confirm(self, marker_id: int) -> Confirmed:
        return Confirmed(
            id=marker_id, x=self.x, y=self.y, color=self.color, created_at=self.created_at
        )


@dataclass(frozen=True)
class Confirmed:
    id: int
    x: int
    y: int
    color: str
    created_at: int


LocalMarker = Union[Pending, Confirmed]


def marker_id(m: LocalMarker) -> Optional[int]:
    return m.id if isinstance(m, Confirmed) else None


def now_s() -> int:
    return int(time.time())


def random_color(rng: random.Random | None = None) -> str:
    """One hue per client session."""
    hue = (rng or random).random() * 360
    return f"hsl({hue}, 100%, 70%)"


class Canvas:
    """
    Local marker set for one client.

    - **color**: this session's tag, used for every marker it places
    - **lifespan_s**: age at which a marker is fully faded and dropped
    - **radius**: marker radius in px, also the tap hit-test half-width
    """

    def __init__(
        self,
        color: str | None = None,
        *,
        lifespan_s: int = LIFESPAN_S,
        radius: int = MARKER_RADIUS,
    ) -> None:
        self.color = color or random_color()
        self.lifespan_s = lifespan_s
        self.radius = radius
        self.markers: list[LocalMarker] = []

    # --- local user actions -------------------------------------------------

    def place(self, x: int, y: int, now: int | None = None) -> AddIntent:
        created_at = now_s() if now is None else now
        self.markers.append(Pending(x=x, y=y, color=self.color, created_at=created_at))
        return AddIntent(x=x, y=y, color=self.color, created_at=created_at)

    def hit_test(self, x: int, y: int) -> int | None:
        """Index of the first marker whose box of half-width `radius` contains (x, y)."""
        for i, m in enumerate(self.markers):
            if abs(x - m.x) <= self.radius and abs(y - m.y) <= self.radius:
                return i
        return None

    def tap(self, x: int, y: int, now: int | None = None) -> AddIntent | RemoveIntent:
        """Remove the marker under the tap, or place a new one if there is none."""
        i = self.hit_test(x, y)
        if i is None:
            return self.place(x, y, now)
        hit = self.markers.pop(i)
        # pending markers go out with id=None, which the server ignores
        return RemoveIntent(id=marker_id(hit))

    # --- server events ------------------------------------------------------

    def apply(self, event: InitEvent | AddEvent | RemoveEvent) -> None:
        if isinstance(event, InitEvent):
            self.markers = [Confirmed(**e.model_dump()) for e in event.elements]
        elif isinstance(event, AddEvent):
            self._confirm(event)
        elif isinstance(event, RemoveEvent):
            self.markers = [m for m in self.markers if marker_id(m) != event.id]

    def _confirm(self, event: AddEvent) -> None:
        if any(marker_id(m) == event.id for m in self.markers):
            return
        for i, m in enumerate(self.markers):
            # created_at is not part of the key; the server echoes it unchanged
            if isinstance(m, Pending) and (m.x, m.y, m.color) == (event.x, event.y, event.color):
                self.markers[i] = m.confirm(event.id)
                return
        self.markers.append(
            Confirmed(
                id=event.id,
                x=event.x,
                y=event.y,
                color=event.color,
                created_at=event.created_at,
            )
        )

    # --- expiry -------------------------------------------------------------

    def opacity(self, m: LocalMarker, now: int) -> float:
        return expiry.opacity(m.created_at, now, self.lifespan_s)

    def is_expired(self, m: LocalMarker, now: int) -> bool:
        return expiry.is_expired(m.created_at, now, self.lifespan_s)

    def visible(self, now: int | None = None) -> list[LocalMarker]:
        now = now_s() if now is None else now
        return [m for m in self.markers if not self.is_expired(m, now)]

    def prune(self, now: int | None = None) -> int:
        """Drop expired markers (the redraw pass); returns how many went."""
        kept = self.visible(now)
        dropped = len(self.markers) - len(kept)
        self.markers = kept
        return dropped

    @property
    def pending(self) -> list[Pending]:
        return [m for m in self.markers if isinstance(m, Pending)]

    @property
    def confirmed(self) -> list[Confirmed]:
        return [m for m in self.markers if isinstance(m, Confirmed)]
