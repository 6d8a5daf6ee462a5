from __future__ import annotations

import time
from typing import Any

import aiohttp
import structlog

from tgcast.config import Settings
from tgcast.publishers.base import BasePublisher, PublishRequest, PublishResult

logger = structlog.get_logger()

DEFAULT_CAST_URL = "https://api.neynar.com/v2/farcaster/cast"


class NeynarPublisher(BasePublisher):
    """Publish casts to Farcaster through the Neynar API."""

    def __init__(
        self,
        signer_uuid: str | None,
        api_key: str | None,
        api_url: str = DEFAULT_CAST_URL,
    ) -> None:
        self._signer_uuid = signer_uuid
        self._api_key = api_key
        self._api_url = api_url

    @classmethod
    def from_settings(cls, settings: Settings) -> NeynarPublisher:
        return cls(
            signer_uuid=settings.warpcast_signer_uuid,
            api_key=settings.neynar_api_key,
            api_url=settings.neynar_cast_url,
        )

    def build_body(self, request: PublishRequest) -> dict[str, Any]:
        body: dict[str, Any] = {
            "signer_uuid": self._signer_uuid,
            "text": request.text,
        }
        # Neynar treats an empty list differently from no embeds at all
        if request.embeds:
            body["embeds"] = [{"url": url} for url in request.embeds]
        return body

    async def publish(self, request: PublishRequest) -> PublishResult:
        if not self._signer_uuid or not self._api_key:
            logger.warning(
                "neynar_config_missing",
                has_signer=bool(self._signer_uuid),
                has_api_key=bool(self._api_key),
            )
            return PublishResult(
                ok=False,
                data={"error": "Missing Neynar signer UUID or API key"},
            )

        body = self.build_body(request)
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "x-api-key": self._api_key,
        }

        start = time.monotonic()
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self._api_url, json=body, headers=headers) as resp:
                    status = resp.status
                    data = await resp.json(content_type=None)
        except Exception as exc:
            logger.error("cast_request_failed", error=str(exc))
            return PublishResult(
                ok=False,
                data={"error": "Failed to reach Neynar", "message": str(exc)},
            )
        duration_ms = int((time.monotonic() - start) * 1000)

        if not isinstance(data, dict):
            logger.error("cast_response_malformed", status=status, duration_ms=duration_ms)
            return PublishResult(
                ok=False,
                data={"error": "Unexpected response from Neynar", "status": status},
            )

        if not 200 <= status < 300 or "errors" in data:
            logger.error(
                "cast_rejected",
                status=status,
                duration_ms=duration_ms,
                response=data,
            )
            return PublishResult(ok=False, data=data)

        cast = data.get("cast")
        logger.info(
            "cast_published",
            status=status,
            duration_ms=duration_ms,
            embed_count=len(request.embeds),
            cast_hash=cast.get("hash") if isinstance(cast, dict) else None,
        )
        return PublishResult(ok=True, data=data)
