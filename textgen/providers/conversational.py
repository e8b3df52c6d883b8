# conversational adapter built on the anthropic SDK (Messages API)
# fixed max_tokens ceiling; search augmentation is a textual hint added by the dispatcher
# streaming: only content_block_delta events carrying a text_delta produce tokens
# one client per call, closed with the call, with the SDK's own retries switched off

import logging
from contextlib import aclosing
from typing import Any

from anthropic import AsyncAnthropic

from textgen.core import config
from textgen.providers.base import UpstreamError
from textgen.schemas.generation import GenerationRequest, GenerationResult
from textgen.services.interactions import InteractionEmitter
from textgen.services.stream import StreamAccumulator, guard_stream

logger = logging.getLogger(__name__)


def _make_client(api_key: str) -> AsyncAnthropic:
    return AsyncAnthropic(api_key=api_key, max_retries=0)


def _upstream_error(e: Exception) -> UpstreamError:
    logger.error("Anthropic API error: %s", e)
    return UpstreamError(str(e))


def _is_text_delta(event: Any) -> bool:
    return (
        getattr(event, "type", None) == "content_block_delta"
        and getattr(getattr(event, "delta", None), "type", None) == "text_delta"
    )


def _first_text(response: Any) -> str:
    content = getattr(response, "content", None) or []
    if content and getattr(content[0], "type", None) == "text":
        return content[0].text or ""
    return ""


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

    params = {
        "model": model,
        "max_tokens": config.CONVERSATIONAL_MAX_TOKENS,
        "temperature": request.temperature,
        "messages": messages,
    }
    async with _make_client(request.api_key.get_secret_value()) as client:
        if stream:
            acc = StreamAccumulator()
            try:
                events = await client.messages.create(**params, stream=True)
            except Exception as e:
                raise _upstream_error(e) from e
            async with aclosing(guard_stream(events, _upstream_error)) as guarded:
                async for event in guarded:
                    if _is_text_delta(event):
                        emitter.token(acc.add(event.delta.text or ""))
            text = acc.text
        else:
            try:
                response = await client.messages.create(**params)
            except Exception as e:
                raise _upstream_error(e) from e
            text = _first_text(response)
    return GenerationResult(text=text)
