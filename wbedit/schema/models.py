from __future__ import annotations

from typing import Literal, TypeAlias

from pydantic import BaseModel

ErrorKind: TypeAlias = Literal[
    "Io",
    "Config",
    "Parse",
    "Validation",
    "NotFound",
    "PermissionDenied",
    "AlreadyExists",
    "Internal",
]

SessionType: TypeAlias = Literal["wayland", "x11"]


class ErrorPayload(BaseModel):
    type: ErrorKind
    message: str


class WaybarConfigFile(BaseModel):
    """Raw JSONC content as read from disk, comments included."""

    content: str
    path: str


class CompositorInfo(BaseModel):
    name: str
    version: str | None = None
    session_type: SessionType
