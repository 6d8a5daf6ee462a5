from __future__ import annotations

from aiogram.client.telegram import TelegramAPIServer
from aiohttp import web

from tgcast.config import Settings
from tgcast.publishers import BasePublisher, NeynarPublisher
from tgcast.web.handlers import (
    PUBLISHER_KEY,
    SETTINGS_KEY,
    TELEGRAM_SERVER_KEY,
    handle_webhook,
)
from tgcast.web.middlewares import logging_middleware


def create_app(settings: Settings, publisher: BasePublisher | None = None) -> web.Application:
    """Build the webhook application.

    ``publisher`` defaults to a NeynarPublisher configured from ``settings``.
    """
    app = web.Application(middlewares=[logging_middleware])
    app[SETTINGS_KEY] = settings
    app[PUBLISHER_KEY] = publisher or NeynarPublisher.from_settings(settings)
    app[TELEGRAM_SERVER_KEY] = TelegramAPIServer.from_base(settings.telegram_api_base)
    app.router.add_post(settings.webhook_path, handle_webhook)
    return app
