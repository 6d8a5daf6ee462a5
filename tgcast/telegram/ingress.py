from __future__ import annotations

from typing import Any

import structlog

from tgcast.telegram.media import select_media
from tgcast.telegram.models import Entity, InboundPost, Update

logger = structlog.get_logger()


def is_channel_post(payload: Any) -> bool:
    """Return True if the webhook payload carries a channel post.

    Falsy values (null, false, 0, "") count as absent; an empty object is
    still a post.
    """
    if not isinstance(payload, dict):
        return False
    channel_post = payload.get("channel_post")
    return isinstance(channel_post, dict) or bool(channel_post)


def parse_update(payload: Any) -> InboundPost | None:
    """Validate a webhook payload into an InboundPost.

    Returns None for updates that are not channel posts. Raises
    ``pydantic.ValidationError`` when the channel post is malformed.
    """
    if not is_channel_post(payload):
        return None

    update = Update.model_validate(payload)
    post = update.channel_post

    if post.text:
        text, raw_entities = post.text, post.entities
    else:
        text, raw_entities = post.caption or "", post.caption_entities

    inbound = InboundPost(
        text=text,
        entities=tuple(Entity(type=e.type, url=e.url) for e in raw_entities),
        media=select_media(post),
    )
    logger.debug(
        "channel_post_parsed",
        update_id=update.update_id,
        text_length=len(inbound.text),
        entity_count=len(inbound.entities),
        media_kind=inbound.media.kind if inbound.media else None,
    )
    return inbound
