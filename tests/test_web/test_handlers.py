import pytest
from unittest.mock import AsyncMock, patch

from aiohttp.test_utils import TestClient, TestServer

from tgcast.config import Settings
from tgcast.publishers import BasePublisher, PublishRequest, PublishResult
from tgcast.web.app import create_app

WEBHOOK = "/api/telegram"


class RecordingPublisher(BasePublisher):
    def __init__(self, result: PublishResult | None = None) -> None:
        self.result = result or PublishResult(ok=True, data={"success": True, "cast": {"hash": "0x1"}})
        self.requests: list[PublishRequest] = []

    async def publish(self, request: PublishRequest) -> PublishResult:
        self.requests.append(request)
        return self.result


class ExplodingPublisher(BasePublisher):
    async def publish(self, request: PublishRequest) -> PublishResult:
        raise RuntimeError("unexpected")


def _settings(**kwargs) -> Settings:
    options = {
        "telegram_bot_token": "123:T",
        "warpcast_signer_uuid": "signer",
        "neynar_api_key": "key",
    }
    options.update(kwargs)
    return Settings(_env_file=None, **options)


@pytest.mark.asyncio
async def test_non_channel_message_ignored():
    publisher = RecordingPublisher()
    with patch("tgcast.web.handlers.resolve_file_url", AsyncMock()) as resolver:
        async with TestClient(TestServer(create_app(_settings(), publisher))) as client:
            resp = await client.post(WEBHOOK, json={"update_id": 1, "message": {"text": "hi"}})
            body = await resp.json()

    assert resp.status == 200
    assert body == {"message": "Ignoring non-channel message"}
    assert publisher.requests == []
    resolver.assert_not_called()


@pytest.mark.asyncio
async def test_caption_url_becomes_embed():
    publisher = RecordingPublisher()
    payload = {"channel_post": {"caption": "Look at this https://example.com/x"}}

    async with TestClient(TestServer(create_app(_settings(), publisher))) as client:
        resp = await client.post(WEBHOOK, json=payload)
        body = await resp.json()

    assert resp.status == 200
    assert body == {"success": True, "data": {"success": True, "cast": {"hash": "0x1"}}}
    assert publisher.requests == [
        PublishRequest(text="Look at this https://example.com/x", embeds=("https://example.com/x",))
    ]


@pytest.mark.asyncio
async def test_photo_resolved_and_prioritized():
    publisher = RecordingPublisher()
    payload = {
        "channel_post": {
            "caption": "New drop https://shop.com https://blog.com",
            "photo": [{"file_id": "small"}, {"file_id": "large"}],
            "video": {"file_id": "vid"},
        }
    }
    media_url = "https://api.telegram.org/file/bot123:T/photos/large.jpg"

    with patch(
        "tgcast.web.handlers.resolve_file_url", AsyncMock(return_value=media_url)
    ) as resolver:
        async with TestClient(TestServer(create_app(_settings(), publisher))) as client:
            resp = await client.post(WEBHOOK, json=payload)

    assert resp.status == 200
    assert resolver.await_args.args[0] == "large"
    assert resolver.await_args.args[1] == "123:T"
    assert publisher.requests[0].embeds == (media_url, "https://shop.com")


@pytest.mark.asyncio
async def test_unresolved_media_falls_back_to_links():
    publisher = RecordingPublisher()
    payload = {
        "channel_post": {
            "text": "Read more",
            "entities": [{"type": "text_link", "offset": 0, "length": 4, "url": "https://a.com"}],
            "video": {"file_id": "vid"},
        }
    }

    with patch("tgcast.web.handlers.resolve_file_url", AsyncMock(return_value=None)):
        async with TestClient(TestServer(create_app(_settings(), publisher))) as client:
            resp = await client.post(WEBHOOK, json=payload)

    assert resp.status == 200
    assert publisher.requests[0].embeds == ("https://a.com",)


@pytest.mark.asyncio
async def test_long_text_fitted():
    publisher = RecordingPublisher()
    payload = {"channel_post": {"text": "word " * 50}}

    async with TestClient(TestServer(create_app(_settings(max_cast_bytes=20), publisher))) as client:
        resp = await client.post(WEBHOOK, json=payload)

    assert resp.status == 200
    text = publisher.requests[0].text
    assert len(text.encode("utf-8")) <= 20
    assert text.endswith("...")


@pytest.mark.asyncio
async def test_publish_failure_returns_500():
    error_body = {"message": "Invalid signer", "errors": [{"code": "InvalidField"}]}
    publisher = RecordingPublisher(PublishResult(ok=False, data=error_body))

    async with TestClient(TestServer(create_app(_settings(), publisher))) as client:
        resp = await client.post(WEBHOOK, json={"channel_post": {"text": "hi"}})
        body = await resp.json()

    assert resp.status == 500
    assert body == {"success": False, "error": "Failed to post", "details": error_body}


@pytest.mark.asyncio
async def test_missing_secrets_degrade_to_500_without_network():
    settings = Settings(_env_file=None, telegram_bot_token=None, warpcast_signer_uuid=None, neynar_api_key=None)

    with patch("tgcast.publishers.neynar.aiohttp.ClientSession") as session_cls:
        async with TestClient(TestServer(create_app(settings))) as client:
            resp = await client.post(WEBHOOK, json={"channel_post": {"text": "hi"}})
            body = await resp.json()

    assert resp.status == 500
    assert body["success"] is False
    assert "error" in body["details"]
    session_cls.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_channel_post_returns_500():
    publisher = RecordingPublisher()
    payload = {"channel_post": {"text": "hi", "entities": [{"offset": 0}]}}

    async with TestClient(TestServer(create_app(_settings(), publisher))) as client:
        resp = await client.post(WEBHOOK, json=payload)
        body = await resp.json()

    assert resp.status == 500
    assert body["error"] == "Invalid channel post"
    assert body["details"]
    assert publisher.requests == []


@pytest.mark.asyncio
async def test_invalid_json_returns_500():
    async with TestClient(TestServer(create_app(_settings(), RecordingPublisher()))) as client:
        resp = await client.post(WEBHOOK, data="{not json")
        body = await resp.json()

    assert resp.status == 500
    assert body == {"success": False, "error": "Internal server error"}


@pytest.mark.asyncio
async def test_unexpected_exception_returns_500():
    async with TestClient(TestServer(create_app(_settings(), ExplodingPublisher()))) as client:
        resp = await client.post(WEBHOOK, json={"channel_post": {"text": "hi"}})
        body = await resp.json()

    assert resp.status == 500
    assert body == {"success": False, "error": "Internal server error"}


@pytest.mark.asyncio
async def test_custom_webhook_path():
    publisher = RecordingPublisher()
    app = create_app(_settings(webhook_path="/hooks/tg"), publisher)

    async with TestClient(TestServer(app)) as client:
        resp = await client.post("/hooks/tg", json={"message": {}})
        missing = await client.post(WEBHOOK, json={"message": {}})

    assert resp.status == 200
    assert missing.status == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [False, "", 0])
async def test_falsy_channel_post_ignored(value):
    publisher = RecordingPublisher()

    async with TestClient(TestServer(create_app(_settings(), publisher))) as client:
        resp = await client.post(WEBHOOK, json={"channel_post": value})
        body = await resp.json()

    assert resp.status == 200
    assert body == {"message": "Ignoring non-channel message"}
    assert publisher.requests == []


@pytest.mark.asyncio
async def test_non_string_file_id_still_publishes():
    publisher = RecordingPublisher()
    payload = {"channel_post": {"caption": "x https://a.com", "photo": [{"file_id": 123}]}}

    with patch("tgcast.telegram.media.aiohttp.ClientSession") as session_cls:
        async with TestClient(TestServer(create_app(_settings(), publisher))) as client:
            resp = await client.post(WEBHOOK, json=payload)

    assert resp.status == 200
    assert publisher.requests == [PublishRequest(text="x https://a.com", embeds=("https://a.com",))]
    session_cls.assert_not_called()
