from __future__ import annotations

import logging
import sys

import structlog
from aiohttp import web

from tgcast.config import settings
from tgcast.web.app import create_app


def configure_logging() -> None:
    """Set up structlog with JSON rendering for production, pretty for dev."""
    if sys.stderr.isatty():
        renderers = [structlog.dev.ConsoleRenderer()]
    else:
        # JSON has no native traceback rendering
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def main() -> None:
    configure_logging()
    log = structlog.get_logger()

    log.info(
        "starting_relay",
        log_level=settings.log_level,
        webhook_path=settings.webhook_path,
        has_bot_token=bool(settings.telegram_bot_token),
        has_signer=bool(settings.warpcast_signer_uuid),
        has_api_key=bool(settings.neynar_api_key),
    )

    app = create_app(settings)
    web.run_app(app, host=settings.host, port=settings.port, print=None)


if __name__ == "__main__":
    main()
