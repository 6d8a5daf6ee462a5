from __future__ import annotations

import json

import structlog
from aiogram.client.telegram import TelegramAPIServer
from aiohttp import web
from pydantic import ValidationError

from tgcast.config import Settings
from tgcast.publishers import BasePublisher, PublishRequest, PublishResult
from tgcast.telegram import InboundPost, is_channel_post, parse_update, resolve_file_url
from tgcast.utils.formatters import fit_text
from tgcast.utils.link_extractor import prioritize_embeds

logger = structlog.get_logger()

SETTINGS_KEY = web.AppKey("settings", Settings)
PUBLISHER_KEY = web.AppKey("publisher", BasePublisher)
TELEGRAM_SERVER_KEY = web.AppKey("telegram_server", TelegramAPIServer)


async def handle_webhook(request: web.Request) -> web.Response:
    """Relay a Telegram channel post to Farcaster."""
    raw_body = ""
    try:
        raw_body = await request.text()
        payload = json.loads(raw_body)
        logger.info("webhook_received", payload=payload)

        if not is_channel_post(payload):
            return web.json_response({"message": "Ignoring non-channel message"})

        try:
            post = parse_update(payload)
        except ValidationError as exc:
            logger.warning("channel_post_invalid", errors=exc.error_count())
            return web.json_response(
                {
                    "success": False,
                    "error": "Invalid channel post",
                    "details": json.loads(exc.json(include_url=False)),
                },
                status=500,
            )

        result = await relay_post(
            post,
            settings=request.app[SETTINGS_KEY],
            publisher=request.app[PUBLISHER_KEY],
            telegram_server=request.app[TELEGRAM_SERVER_KEY],
        )
    except Exception:
        logger.exception("webhook_failed", raw_payload=raw_body[:2000])
        return web.json_response(
            {"success": False, "error": "Internal server error"},
            status=500,
        )

    if not result.ok:
        return web.json_response(
            {"success": False, "error": "Failed to post", "details": result.data},
            status=500,
        )
    return web.json_response({"success": True, "data": result.data})


async def relay_post(
    post: InboundPost,
    *,
    settings: Settings,
    publisher: BasePublisher,
    telegram_server: TelegramAPIServer,
) -> PublishResult:
    """Resolve media, pick embeds, fit the text and publish, in that order."""
    media_url: str | None = None
    if post.media is not None:
        media_url = await resolve_file_url(
            post.media.file_id,
            settings.telegram_bot_token,
            telegram_server,
        )
        if media_url is None:
            logger.warning("media_unavailable", kind=post.media.kind)

    embeds = prioritize_embeds(
        post.text,
        post.entities,
        media_url=media_url,
        limit=settings.max_embeds,
    )
    text = fit_text(post.text, max_bytes=settings.max_cast_bytes)
    if text != post.text:
        logger.info("text_truncated", original_length=len(post.text), fitted_length=len(text))

    logger.info("publishing_cast", embeds=embeds, text_preview=text[:80])
    return await publisher.publish(PublishRequest(text=text, embeds=tuple(embeds)))
