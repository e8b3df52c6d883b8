# OpenAI-compatible router adapter (httpx)
# POSTs {model, messages, temperature, stream} to ROUTER_URL
# non-stream: returns choices[0].message.content
# stream: reads Server-Sent-Events `data:` lines until the [DONE] sentinel

import logging
from typing import Any, Dict

import httpx

from textgen.core import config
from textgen.providers.base import HttpError, UpstreamError
from textgen.schemas.generation import GenerationRequest, GenerationResult
from textgen.services.interactions import InteractionEmitter
from textgen.services.stream import (
    DONE_SENTINEL,
    StreamAccumulator,
    decode_chunk,
    extract_router_token,
    parse_sse_line,
)

logger = logging.getLogger(__name__)


def authorization_header(api_key: str) -> str:
    # keys already carrying a bearer scheme (any casing) are not prefixed twice
    value = api_key.strip()
    if not value.lower().startswith("bearer "):
        value = f"Bearer {value}"
    return value


def build_headers(api_key: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": authorization_header(api_key),
        "HTTP-Referer": config.APP_REFERER,
        "X-Title": config.APP_TITLE,
    }


def _message_content(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


async def _read_stream(
    client: httpx.AsyncClient,
    headers: Dict[str, str],
    payload: Dict[str, Any],
    emitter: InteractionEmitter,
) -> str:
    acc = StreamAccumulator()
    async with client.stream("POST", config.ROUTER_URL, headers=headers, json=payload) as r:
        if not r.is_success:
            raise HttpError(r.status_code, r.reason_phrase)
        # aiter_lines carries partial multi-byte sequences and partial lines across reads
        async for line in r.aiter_lines():
            data = parse_sse_line(line)
            if data is None:
                continue
            if data == DONE_SENTINEL:
                break
            chunk = decode_chunk(data)
            if chunk is None:
                continue
            emitter.token(acc.add(extract_router_token(chunk)))
    return acc.text


async def generate(
    prompt: str,
    *,
    request: GenerationRequest,
    model: str,
    stream: bool,
    emitter: InteractionEmitter,
) -> GenerationResult:
    messages = [{"role": "user", "content": prompt}]
    emitter.prompt({"model": model, "messages": messages})

    payload = {
        "model": model,
        "messages": messages,
        "temperature": request.temperature,
        "stream": stream,
    }
    headers = build_headers(request.api_key.get_secret_value())
    timeout = httpx.Timeout(config.REQUEST_TIMEOUT, connect=config.CONNECT_TIMEOUT)
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            if stream:
                text = await _read_stream(client, headers, payload, emitter)
            else:
                r = await client.post(config.ROUTER_URL, headers=headers, json=payload)
                if not r.is_success:
                    raise HttpError(r.status_code, r.reason_phrase)
                try:
                    data = r.json()
                except ValueError as e:
                    raise UpstreamError(f"Router returned an unreadable response: {e}") from e
                text = _message_content(data)
    except httpx.HTTPError as e:
        raise UpstreamError(f"Router HTTP error: {e}") from e
    return GenerationResult(text=text)
