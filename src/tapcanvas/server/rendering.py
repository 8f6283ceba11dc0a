from __future__ import annotations

import io

from PIL import Image, ImageColor, ImageDraw

from tapcanvas.protocol.expiry import is_expired, opacity

from .store import Marker

_FALLBACK_RGB = (160, 160, 160)


def _rgb(color: str) -> tuple[int, int, int]:
    try:
        return ImageColor.getrgb(color)[:3]
    except ValueError:
        return _FALLBACK_RGB


def render_snapshot_png(
    *,
    markers: list[Marker],
    now: int,
    lifespan_s: int,
    radius: int,
    size: tuple[int, int] = (800, 600),
) -> bytes:
    """
    Render stored markers as they would look to a client at `now`.

    - **markers**: rows from the store, drawn in id order (later on top)
    - expired markers (age >= lifespan) are skipped, not purged
    """
    img = Image.new("RGB", size, (255, 255, 255))
    draw = ImageDraw.Draw(img, "RGBA")  # RGBA mode blends fills over what's below

    for m in markers:
        if is_expired(m.created_at, now, lifespan_s):
            continue
        alpha = int(255 * opacity(m.created_at, now, lifespan_s))
        r, g, b = _rgb(m.color)
        box = [m.x - radius, m.y - radius, m.x + radius, m.y + radius]
        draw.ellipse(box, fill=(r, g, b, alpha), outline=(0, 0, 0, alpha))

    bio = io.BytesIO()
    img.save(bio, format="PNG", optimize=True)
    return bio.getvalue()
