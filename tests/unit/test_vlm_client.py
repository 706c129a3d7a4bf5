# ============================================================================
# FILE: tests/unit/test_vlm_client.py
# ============================================================================
"""
Unit tests for the Gemini client (no network: aiohttp is faked)
"""

import base64

import aiohttp
import pytest

from lab_ingestion.extractors import GeminiVisionClient
from lab_ingestion.extractors import vlm_client
from lab_ingestion.utils.exceptions import VisionServiceError


class FakeResponse:
    def __init__(self, status=200, payload=None, text=""):
        self.status = status
        self._payload = payload
        self._text = text

    async def json(self, content_type=None):
        return self._payload

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Records posted requests and replies with a canned response."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def __call__(self, timeout=None):
        self.timeout = timeout
        return self

    def post(self, url, params=None, json=None):
        self.requests.append({"url": url, "params": params, "json": json})
        if self.error is not None:
            raise self.error
        return self.response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def _gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client():
    return GeminiVisionClient(
        api_key="test-key",
        model="gemini-test",
        base_url="https://example.test/v1beta/",
        timeout=5,
        temperature=0.1,
    )


@pytest.mark.asyncio
async def test_single_request_for_all_pages(monkeypatch):
    """Test all pages go out in one request and the reply text comes back"""
    session = FakeSession(FakeResponse(payload=_gemini_reply('{"rows": []}')))
    monkeypatch.setattr(vlm_client.aiohttp, "ClientSession", session)

    text = await _client().extract_table_data([b"page-1", b"page-2"])

    assert text == '{"rows": []}'
    assert len(session.requests) == 1

    request = session.requests[0]
    assert request["url"] == "https://example.test/v1beta/models/gemini-test:generateContent"
    assert request["params"] == {"key": "test-key"}

    parts = request["json"]["contents"][0]["parts"]
    assert "2 pages" in parts[0]["text"]
    assert parts[1]["inline_data"] == {
        "mime_type": "image/png",
        "data": base64.b64encode(b"page-1").decode("ascii"),
    }
    assert len(parts) == 3
    assert request["json"]["generationConfig"]["temperature"] == 0.1


@pytest.mark.asyncio
async def test_error_status(monkeypatch):
    """Test non-200 replies raise with the status"""
    session = FakeSession(FakeResponse(status=429, text="quota exceeded"))
    monkeypatch.setattr(vlm_client.aiohttp, "ClientSession", session)

    with pytest.raises(VisionServiceError) as exc_info:
        await _client().extract_table_data([b"page"])
    assert exc_info.value.status == 429


@pytest.mark.asyncio
async def test_transport_error(monkeypatch):
    """Test connection failures raise VisionServiceError"""
    session = FakeSession(error=aiohttp.ClientConnectionError("refused"))
    monkeypatch.setattr(vlm_client.aiohttp, "ClientSession", session)

    with pytest.raises(VisionServiceError):
        await _client().extract_table_data([b"page"])


@pytest.mark.asyncio
async def test_missing_key():
    """Test the client is unavailable without a key"""
    client = GeminiVisionClient(api_key="")

    assert client.is_available is False
    with pytest.raises(VisionServiceError):
        await client.extract_table_data([b"page"])


@pytest.mark.asyncio
async def test_no_images(monkeypatch):
    """Test nothing is sent for an empty page list"""
    session = FakeSession(FakeResponse(payload=_gemini_reply("x")))
    monkeypatch.setattr(vlm_client.aiohttp, "ClientSession", session)

    assert await _client().extract_table_data([]) == ""
    assert session.requests == []


@pytest.mark.parametrize("data", [
    {},
    {"candidates": []},
    {"candidates": [{"content": {"parts": []}}]},
    {"candidates": [{"finishReason": "SAFETY"}]},
])
def test_candidate_text_missing(data):
    """Test replies without candidate text"""
    assert GeminiVisionClient._candidate_text(data) == ""
