# tests/test_api_basic.py
import asyncio

import pytest

from textgen.api.routers import generate as generate_router
from textgen.providers.base import HttpError, SafetyBlockedError
from textgen.schemas.generation import GenerationResult

BODY = {"model_name": "openai/gpt-4o", "provider": "router", "api_key": "sk-x", "base_prompt": "hi"}


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_providers_lists_routes(client):
    r = await client.get("/providers")
    assert r.status_code == 200
    adapters = {route["adapter"] for route in r.json()["routes"]}
    assert adapters == {"router", "native_multimodal", "conversational"}


@pytest.mark.asyncio
async def test_generate_nonstream_ok(client, monkeypatch):
    async def fake_generate_text(request, *, on_interaction=None, on_token=None):
        assert request.stream is False
        assert request.api_key.get_secret_value() == "sk-x"
        return GenerationResult(text="hello")
    monkeypatch.setattr(generate_router, "generate_text", fake_generate_text)
    r = await client.post("/generate", json=BODY)
    assert r.status_code == 200
    data = r.json()
    assert data["text"] == "hello"
    assert data["model_name"] == "openai/gpt-4o"


@pytest.mark.asyncio
async def test_generate_stream_ok(client, monkeypatch):
    async def fake_generate_text(request, *, on_interaction=None, on_token=None):
        for token in ("he", "", "llo"):
            on_token(token)
            await asyncio.sleep(0)
        return GenerationResult(text="hello")
    monkeypatch.setattr(generate_router, "generate_text", fake_generate_text)
    r = await client.post("/generate", json={**BODY, "stream": True})
    assert r.status_code == 200
    assert r.text == "hello"


@pytest.mark.asyncio
async def test_missing_key_is_400(client):
    body = {k: v for k, v in BODY.items() if k != "api_key"}
    r = await client.post("/generate", json=body)
    assert r.status_code == 400
    assert "API key" in r.json()["detail"]


@pytest.mark.asyncio
async def test_unknown_provider_is_400(client):
    r = await client.post("/generate", json={**BODY, "provider": "foo"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_video_on_router_is_400_even_when_streaming(client):
    r = await client.post("/generate", json={**BODY, "video_url": "https://x/v.mp4", "stream": True})
    assert r.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("error, status", [(HttpError(503, "Service Unavailable"), 502), (SafetyBlockedError(), 422)])
async def test_provider_errors_are_mapped(client, monkeypatch, error, status):
    async def fake_generate_text(request, *, on_interaction=None, on_token=None):
        raise error
    monkeypatch.setattr(generate_router, "generate_text", fake_generate_text)
    r = await client.post("/generate", json=BODY)
    assert r.status_code == status


@pytest.mark.asyncio
async def test_validation_422(client):
    r = await client.post("/generate", json={**BODY, "base_prompt": ""})
    assert r.status_code == 422
