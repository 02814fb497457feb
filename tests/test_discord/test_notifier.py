"""Tests for follow-up delivery (text and multipart file messages)."""

import json

import httpx
import pytest

from dictbot.discord.notifier import (
    MAX_CONTENT_LENGTH,
    DeliveryMode,
    FollowupNotifier,
    truncate_content,
)
from dictbot.errors import DeliveryError

API = "https://discord.test/api/v10"


def _notifier(status: int = 200, body: str = "{}"):
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        request.read()
        requests.append(request)
        return httpx.Response(status, text=body)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FollowupNotifier(client, API), requests


async def test_send_text_patches_original():
    notifier, requests = _notifier()

    await notifier.send_text("app-1", "tok", "hello")

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "PATCH"
    assert str(request.url) == f"{API}/webhooks/app-1/tok/messages/@original"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"content": "hello"}


async def test_send_text_followup_posts_to_webhook():
    notifier, requests = _notifier()

    await notifier.send_text("app-1", "tok", "more", mode=DeliveryMode.FOLLOWUP)

    assert requests[0].method == "POST"
    assert str(requests[0].url) == f"{API}/webhooks/app-1/tok"


async def test_send_text_non_2xx_raises_with_status_and_body():
    notifier, _ = _notifier(status=404, body='{"message": "Unknown Webhook"}')

    with pytest.raises(DeliveryError) as info:
        await notifier.send_text("app-1", "tok", "hello")

    assert info.value.status_code == 404
    assert "Unknown Webhook" in info.value.body


async def test_send_text_client_error_is_not_retried():
    notifier, requests = _notifier(status=400)

    with pytest.raises(DeliveryError):
        await notifier.send_text("app-1", "tok", "hello")

    assert len(requests) == 1


async def test_send_file_builds_multipart_body(tmp_path):
    path = tmp_path / "dictionary_by_source.txt"
    path.write_bytes(b"\x8c\xa2 dog\r\n")
    notifier, requests = _notifier()

    await notifier.send_file("app-1", "tok", "Grouped by source", path)

    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == f"{API}/webhooks/app-1/tok"
    assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
    body = request.content
    assert b'name="content"' in body
    assert b"Grouped by source" in body
    assert b'name="files[0]"; filename="dictionary_by_source.txt"' in body
    assert b"Content-Type: application/octet-stream" in body
    assert b"\x8c\xa2 dog\r\n" in body


async def test_send_file_can_edit_original(tmp_path):
    path = tmp_path / "a.txt"
    path.write_bytes(b"x")
    notifier, requests = _notifier()

    await notifier.send_file("app-1", "tok", "first", path, mode=DeliveryMode.EDIT_ORIGINAL)

    assert requests[0].method == "PATCH"
    assert str(requests[0].url).endswith("/messages/@original")


async def test_send_file_non_2xx_raises(tmp_path):
    path = tmp_path / "a.txt"
    path.write_bytes(b"x")
    notifier, _ = _notifier(status=413, body="Request entity too large")

    with pytest.raises(DeliveryError) as info:
        await notifier.send_file("app-1", "tok", "first", path)

    assert info.value.status_code == 413


async def test_send_file_missing_file_raises(tmp_path):
    notifier, requests = _notifier()

    with pytest.raises(FileNotFoundError):
        await notifier.send_file("app-1", "tok", "gone", tmp_path / "missing.txt")

    assert requests == []


async def test_long_content_is_truncated():
    notifier, requests = _notifier()

    await notifier.send_text("app-1", "tok", "x" * 5000)

    content = json.loads(requests[0].content)["content"]
    assert len(content) == MAX_CONTENT_LENGTH


def test_truncate_content_keeps_short_text():
    assert truncate_content("short") == "short"
