# tests/conftest.py
import os
import logging
from typing import AsyncIterator, Iterable, List

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure test-friendly env before textgen.core.config is imported
os.environ.setdefault("APP_REFERER", "http://test.local")
os.environ.setdefault("APP_TITLE", "Test App")
os.environ["ROUTER_API_KEY"] = ""
os.environ["GOOGLE_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""

# IMPORTANT: import the app after envs are set
import textgen.main as main_module
from textgen.schemas.generation import InteractionEvent


class ChunkedStream(httpx.AsyncByteStream):
    # replays the same byte chunks on every iteration, one read per chunk
    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = list(chunks)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            yield chunk


def sse_response(chunks: Iterable[bytes], status: int = 200) -> httpx.Response:
    return httpx.Response(
        status,
        headers={"Content-Type": "text/event-stream"},
        stream=ChunkedStream(chunks),
    )


class Recorder:
    def __init__(self) -> None:
        self.events: List[InteractionEvent] = []
        self.tokens: List[str] = []

    def on_interaction(self, event: InteractionEvent) -> None:
        self.events.append(event)

    def on_token(self, token: str) -> None:
        self.tokens.append(token)

    @property
    def kinds(self) -> List[str]:
        return [e.type.value for e in self.events]


@pytest.fixture
def recorder():
    return Recorder()


@pytest_asyncio.fixture
async def app():
    return main_module.app

@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO, logger="textgen")
    return caplog

@pytest.fixture
def caplog_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="textgen")
    return caplog

@pytest.fixture
def sse():
    return sse_response


class FakeGenaiClient:
    # stands in for google.genai.Client: exposes .aio.models and both close calls
    def __init__(self, models) -> None:
        self.models = models
        self.aio = self
        self.keys: List[str] = []
        self.aclosed = False
        self.closed = False

    async def aclose(self) -> None:
        self.aclosed = True

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_genai(monkeypatch):
    from textgen.providers import native_multimodal

    def install(models) -> FakeGenaiClient:
        fake = FakeGenaiClient(models)

        def make_client(api_key):
            fake.keys.append(api_key)
            return fake

        monkeypatch.setattr(native_multimodal, "_make_client", make_client)
        return fake
    return install
