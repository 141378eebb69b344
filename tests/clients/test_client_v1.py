"""Tests for ClientV1 against an httpx.MockTransport backend."""
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from craiyon.clients.options import ClientConfig, RequestOptions
from craiyon.clients.v1 import ClientV1
from craiyon.errors import BackendError, MalformedResponseError, RateLimitedError, TransportError


def _client(handler, **config) -> ClientV1:
    config.setdefault("base_url", "https://backend.test")
    return ClientV1(ClientConfig(**config), transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_generate_posts_prompt_and_keeps_image_order():
    seen = []
    images = ["YQ==", "Yg==", "Yw==", "ZA=="]

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"images": images, "version": "v1-test"})

    result = await _client(handler).generate("a red fox")

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://backend.test/generate"
    assert request.headers["content-type"] == "application/json"
    assert request.headers["accept"] == "application/json"
    assert json.loads(request.content) == {"prompt": "a red fox"}
    assert len(result.images) == 4
    assert result.as_base64() == images
    assert result.as_bytes() == [b"a", b"b", b"c", b"d"]
    assert result.version == "v1-test"


@pytest.mark.asyncio
async def test_generate_strips_newlines_from_inline_images():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"images": ["aGVs\nbG8=\n"], "version": "x"})

    result = await _client(handler).generate(RequestOptions(prompt="hello"))

    assert result.as_base64() == ["aGVsbG8="]
    assert result.as_bytes() == [b"hello"]


@pytest.mark.asyncio
async def test_always_failing_backend_tries_budget_plus_one():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(500, text=f"error {len(attempts)}")

    client = _client(handler, max_retries=2)
    with pytest.raises(BackendError) as exc_info:
        await client.generate("cat")

    assert len(attempts) == 3
    assert exc_info.value.status_code == 500
    assert not isinstance(exc_info.value, RateLimitedError)


@pytest.mark.asyncio
async def test_request_max_retries_overrides_client_default():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(503)

    client = _client(handler, max_retries=5)
    with pytest.raises(BackendError):
        await client.generate(RequestOptions(prompt="cat", max_retries=0))

    assert len(attempts) == 1
    assert client.config.max_retries == 5


@pytest.mark.asyncio
async def test_rate_limited_then_success_waits_ten_seconds():
    responses = [
        httpx.Response(429),
        httpx.Response(200, json={"images": ["YQ=="], "version": "v1"}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    with patch("craiyon.clients.runner.sleep", new_callable=AsyncMock) as mock_sleep:
        result = await _client(handler).generate("cat", max_retries=1)

    mock_sleep.assert_awaited_once_with(10.0)
    assert result.as_bytes() == [b"a"]


@pytest.mark.asyncio
async def test_transport_failure_surfaces_as_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        await _client(handler, max_retries=1).generate("cat")

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_missing_images_fails_fast():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(200, json={"version": "v1"})

    with pytest.raises(MalformedResponseError):
        await _client(handler, max_retries=3).generate("cat")

    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_non_json_body_fails_fast():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(MalformedResponseError):
        await _client(handler, max_retries=3).generate("cat")


def test_builders_return_new_client():
    client = ClientV1()
    changed = client.with_base_url("https://mirror.test/").with_max_retries(0)

    assert changed is not client
    assert client.config.base_url == "https://backend.craiyon.com"
    assert client.config.max_retries == 3
    assert changed.generate_images_url == "https://mirror.test/generate"
    assert changed.config.max_retries == 0


def test_builder_rejects_negative_retries():
    with pytest.raises(ValueError):
        ClientV1().with_max_retries(-1)
