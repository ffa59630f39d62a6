"""Inbound websocket frames, modelled as a union tagged by ``type``."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError


class HistoryFetchFrame(BaseModel):
    type: Literal["history-fetch"]
    user1: str
    user2: str


class SendFrame(BaseModel):
    type: Literal["send"]
    sender: str
    recipient: str
    kind: str
    payload: str


class PingFrame(BaseModel):
    type: Literal["ping"]


InboundFrame = Annotated[
    Union[HistoryFetchFrame, SendFrame, PingFrame],
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[InboundFrame] = TypeAdapter(InboundFrame)


class FrameError(ValueError):
    """Raised when an inbound frame cannot be understood."""


def parse_frame(raw: str | bytes) -> HistoryFetchFrame | SendFrame | PingFrame:
    """Decode ``raw`` into one of the known frame types.

    Raises :class:`FrameError` with a client facing description otherwise.
    """

    try:
        return _inbound_adapter.validate_json(raw)
    except ValidationError as exc:
        raise FrameError(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    error = exc.errors()[0]
    error_type = error.get("type")
    if error_type == "json_invalid":
        return "Invalid message format."
    if error_type == "union_tag_not_found":
        return "Frame type is missing."
    if error_type == "union_tag_invalid":
        tag = (error.get("ctx") or {}).get("tag")
        return f"Unknown frame type {tag!r}."
    if error_type in ("dict_type", "model_type", "model_attributes_type"):
        return "Invalid message format."

    location = error.get("loc") or ()
    frame_type = location[0] if location else "frame"
    field = ".".join(str(part) for part in location[1:]) or "frame"
    if error_type == "missing":
        return f"Malformed {frame_type!r} frame: {field} is required."
    return f"Malformed {frame_type!r} frame: {field} {error.get('msg', 'is invalid').lower()}."


__all__ = [
    "FrameError",
    "HistoryFetchFrame",
    "InboundFrame",
    "PingFrame",
    "SendFrame",
    "parse_frame",
]
