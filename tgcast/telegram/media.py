"""Pick the attachment to embed and turn its file_id into a public URL."""

from __future__ import annotations

import aiohttp
import structlog
from aiogram.client.telegram import PRODUCTION, TelegramAPIServer

from tgcast.telegram.models import ChannelPost, MediaKind, MediaRef

logger = structlog.get_logger()


def select_media(post: ChannelPost) -> MediaRef | None:
    """Choose at most one attachment from a channel post.

    Priority: largest photo, then video, then an image document, then a
    video document. Other documents are not embeddable.
    """
    if post.photo:
        return MediaRef(kind=MediaKind.PHOTO, file_id=post.photo[-1].file_id)

    if post.video is not None:
        return MediaRef(
            kind=MediaKind.VIDEO,
            file_id=post.video.file_id,
            mime_type=post.video.mime_type,
        )

    document = post.document
    if document is not None:
        mime_type = document.mime_type or ""
        if mime_type.startswith("image/") or mime_type.startswith("video/"):
            return MediaRef(
                kind=MediaKind.DOCUMENT,
                file_id=document.file_id,
                mime_type=document.mime_type,
            )
        logger.info("document_not_embeddable", mime_type=document.mime_type)

    return None


async def resolve_file_url(
    file_id: object,
    bot_token: str | None,
    api_server: TelegramAPIServer = PRODUCTION,
) -> str | None:
    """Resolve a Telegram file_id to a public download URL via getFile.

    Returns None when the id is unusable, the token is missing, or the lookup
    fails in any way.
    """
    if not isinstance(file_id, str) or not file_id:
        logger.warning("invalid_file_id", file_id_type=type(file_id).__name__)
        return None

    if not bot_token:
        logger.warning("telegram_bot_token_missing")
        return None

    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                api_server.api_url(bot_token, "getFile"),
                params={"file_id": file_id},
            ) as resp:
                payload = await resp.json(content_type=None)
    except Exception as exc:
        logger.warning("get_file_failed", file_id=file_id, error=str(exc))
        return None

    if not isinstance(payload, dict) or payload.get("ok") is not True:
        logger.warning(
            "get_file_rejected",
            file_id=file_id,
            description=payload.get("description") if isinstance(payload, dict) else None,
        )
        return None

    result = payload.get("result")
    file_path = result.get("file_path") if isinstance(result, dict) else None
    if not isinstance(file_path, str) or not file_path:
        logger.warning("get_file_missing_path", file_id=file_id)
        return None

    url = api_server.file_url(bot_token, file_path)
    logger.info("media_resolved", file_id=file_id, file_path=file_path)
    return url
