from __future__ import annotations

import json
from typing import Annotated, Literal, Optional, TypeAlias, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from tapcanvas.errors import ProtocolError

# Coordinates are integer screen px; created_at is unix seconds set once by the
# creating client and echoed unchanged by the server.


class MarkerOut(BaseModel):
    """A confirmed marker as it travels on the wire."""

    id: int
    x: int
    y: int
    color: str
    created_at: int


class AddIntent(BaseModel):
    # no coercion: "100", 100.0 and true are rejected, not turned into ints
    model_config = ConfigDict(strict=True)

    type: Literal["add"] = "add"
    x: int
    y: int
    color: str
    created_at: Annotated[int, Field(description="unix seconds")]


class RemoveIntent(BaseModel):
    model_config = ConfigDict(strict=True)

    type: Literal["remove"] = "remove"
    # null when the tapped marker was still pending; the server ignores it
    id: Optional[int] = None


class InitEvent(BaseModel):
    type: Literal["init"] = "init"
    elements: list[MarkerOut]


class AddEvent(MarkerOut):
    type: Literal["add"] = "add"


class RemoveEvent(BaseModel):
    type: Literal["remove"] = "remove"
    id: int


InboundMsg: TypeAlias = Annotated[Union[AddIntent, RemoveIntent], Field(discriminator="type")]
OutboundMsg: TypeAlias = Annotated[
    Union[InitEvent, AddEvent, RemoveEvent], Field(discriminator="type")
]

_inbound = TypeAdapter(InboundMsg)
_outbound = TypeAdapter(OutboundMsg)


def _parse(adapter: TypeAdapter, raw: str | bytes):
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        # covers invalid JSON, unknown/missing `type` and bad fields alike
        raise ProtocolError(f"bad frame: {e.error_count()} error(s): {e.errors()[0]['msg']}") from e


def parse_intent(raw: str | bytes) -> AddIntent | RemoveIntent:
    """Parse a client -> server frame. Raises ProtocolError."""
    return _parse(_inbound, raw)


def parse_event(raw: str | bytes) -> InitEvent | AddEvent | RemoveEvent:
    """Parse a server -> client frame. Raises ProtocolError."""
    return _parse(_outbound, raw)


def encode(msg: BaseModel) -> str:
    return json.dumps(msg.model_dump(mode="json"), separators=(",", ":"), ensure_ascii=False)
