"""Typed views of the Telegram webhook payload.

Only the fields the relay reads are modelled; everything else Telegram sends
is ignored. The pydantic models describe the wire shape, the frozen
dataclasses at the bottom are what the rest of the pipeline works with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class _TelegramObject(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class TelegramEntity(_TelegramObject):
    type: str
    offset: int = 0
    length: int = 0
    url: str | None = None  # only set on text_link entities


class PhotoSize(_TelegramObject):
    # Left untyped: a bad id only costs the media, not the whole post
    file_id: Any = None
    width: int | None = None
    height: int | None = None


class Video(_TelegramObject):
    file_id: Any = None
    mime_type: str | None = None


class Document(_TelegramObject):
    file_id: Any = None
    mime_type: str | None = None
    file_name: str | None = None


class ChannelPost(_TelegramObject):
    text: str | None = None
    caption: str | None = None
    entities: list[TelegramEntity] = []
    caption_entities: list[TelegramEntity] = []
    # Telegram orders photo sizes from smallest to largest
    photo: list[PhotoSize] = []
    video: Video | None = None
    document: Document | None = None


class Update(_TelegramObject):
    update_id: int | None = None
    channel_post: ChannelPost | None = None


class MediaKind(StrEnum):
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"


@dataclass(frozen=True)
class Entity:
    type: str
    url: str | None = None


@dataclass(frozen=True)
class MediaRef:
    """The single attachment picked for embedding."""

    kind: MediaKind
    file_id: object
    mime_type: str | None = None


@dataclass(frozen=True)
class InboundPost:
    """A channel post reduced to what gets relayed."""

    text: str
    entities: tuple[Entity, ...] = field(default_factory=tuple)
    media: MediaRef | None = None
