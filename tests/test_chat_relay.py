import json

import pytest

from notebook_relay.infrastructure.webhook_client import WebhookClient
from notebook_relay.webhooks.services import ChatMessageRelay

from .helpers import RecordingWebhook, json_reply, network_failure, text_reply

VALID_BODY = json.dumps(
    {"session_id": "nb-1", "message": "What is in chapter 2?", "user_id": "user-7"}
).encode()


async def run_relay(settings, webhook: RecordingWebhook, body: bytes = VALID_BODY):
    async with webhook.client() as client:
        relay = ChatMessageRelay(settings, WebhookClient(client))
        return await relay.relay(body)


class TestChatRelaySuccess:
    """Successful relays."""

    @pytest.mark.asyncio
    async def test_json_response_is_returned(self, make_settings) -> None:
        webhook = RecordingWebhook(json_reply({"ok": True}))

        result = await run_relay(make_settings(), webhook)

        assert result.status_code == 200
        assert result.content == {"success": True, "data": {"ok": True}}

    @pytest.mark.asyncio
    async def test_non_json_response_falls_back(self, make_settings) -> None:
        webhook = RecordingWebhook(text_reply("done"))

        result = await run_relay(make_settings(), webhook)

        assert result.status_code == 200
        assert result.content["success"] is True
        assert result.content["data"] == {
            "message": "Webhook processed successfully",
            "response": "done",
        }

    @pytest.mark.asyncio
    async def test_payload_and_headers(self, make_settings) -> None:
        webhook = RecordingWebhook(json_reply({"ok": True}))

        await run_relay(make_settings(), webhook)

        sent = webhook.requests[0]
        assert str(sent.url) == "https://hooks.example.com/chat"
        assert sent.headers["authorization"] == "Bearer token-1234567890"
        assert sent.headers["content-type"] == "application/json"
        payload = webhook.last_json()
        assert payload["session_id"] == "nb-1"
        assert payload["message"] == "What is in chapter 2?"
        assert payload["user_id"] == "user-7"
        assert payload["timestamp"].endswith("Z")

    @pytest.mark.asyncio
    async def test_missing_fields_are_passed_through(self, make_settings) -> None:
        webhook = RecordingWebhook(json_reply({"ok": True}))

        result = await run_relay(make_settings(), webhook, json.dumps({"message": "hi"}).encode())

        assert result.status_code == 200
        payload = webhook.last_json()
        assert payload["session_id"] is None
        assert payload["user_id"] is None
        assert payload["message"] == "hi"


class TestChatRelayErrors:
    """Every failure becomes a single 500 with diagnostics."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "missing,variable",
        [
            ("notebook_chat_url", "NOTEBOOK_CHAT_URL"),
            ("notebook_generation_auth", "NOTEBOOK_GENERATION_AUTH"),
        ],
    )
    async def test_missing_configuration(self, make_settings, missing, variable) -> None:
        webhook = RecordingWebhook(json_reply({"ok": True}))

        result = await run_relay(make_settings(**{missing: None}), webhook)

        assert result.status_code == 500
        assert variable in result.content["error"]
        assert webhook.call_count == 0

    @pytest.mark.asyncio
    async def test_malformed_url(self, make_settings) -> None:
        webhook = RecordingWebhook(json_reply({"ok": True}))

        result = await run_relay(make_settings(notebook_chat_url="not a url"), webhook)

        assert result.status_code == 500
        assert "Invalid NOTEBOOK_CHAT_URL format" in result.content["error"]
        assert webhook.call_count == 0

    @pytest.mark.asyncio
    async def test_network_failure(self, make_settings) -> None:
        webhook = RecordingWebhook(network_failure)

        result = await run_relay(make_settings(), webhook)

        assert result.status_code == 500
        assert "https://hooks.example.com/chat" in result.content["error"]

    @pytest.mark.asyncio
    async def test_upstream_error(self, make_settings) -> None:
        webhook = RecordingWebhook(text_reply("unavailable", status_code=503))

        result = await run_relay(make_settings(), webhook)

        assert result.status_code == 500
        assert "503" in result.content["error"]
        assert "unavailable" in result.content["error"]

    @pytest.mark.asyncio
    async def test_error_details(self, make_settings) -> None:
        webhook = RecordingWebhook(network_failure)

        result = await run_relay(make_settings(notebook_generation_auth=None), webhook)

        details = result.content["details"]
        assert details["webhookUrl"] == "https://hooks.example.com/chat"
        assert details["hasAuth"] is False
        assert details["timestamp"]

    @pytest.mark.asyncio
    async def test_invalid_json_body(self, make_settings) -> None:
        webhook = RecordingWebhook(json_reply({"ok": True}))

        result = await run_relay(make_settings(), webhook, b"[1, 2")

        assert result.status_code == 500
        assert result.content["error"]
        assert webhook.call_count == 0
