"""
Native multimodal adapter built on the google-genai SDK.

Accepts a video reference as a typed file part and, when search augmentation
is requested, attaches the native Google Search tool instead of rewriting the
prompt. After the call (streamed or not) the response is checked for prompt
blocks, missing candidates and abnormal finish reasons before any text is
handed back.
"""

import logging
from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterator, Dict

from google import genai
from google.genai import types

from textgen.core import config
from textgen.providers.base import (
    ContentBlockedError,
    EmptyStreamError,
    GenerationStoppedError,
    NoCandidatesError,
    SafetyBlockedError,
    UpstreamError,
)
from textgen.schemas.generation import GenerationRequest, GenerationResult
from textgen.services.interactions import InteractionEmitter
from textgen.services.stream import StreamAccumulator, guard_stream

logger = logging.getLogger(__name__)


def http_options() -> types.HttpOptions:
    # a single attempt: failures surface to the caller instead of being retried
    return types.HttpOptions(retry_options=types.HttpRetryOptions(attempts=1))


def _make_client(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key, http_options=http_options())


@asynccontextmanager
async def _open_client(api_key: str) -> AsyncIterator[Any]:
    # the client, its pools and the key it holds live only for one call
    client = _make_client(api_key)
    try:
        yield client.aio
    finally:
        await client.aio.aclose()
        client.close()


def build_contents(prompt: str, video_url: str | None) -> list[types.Content]:
    parts = [types.Part(text=prompt)]
    if video_url:
        parts.append(
            types.Part(file_data=types.FileData(file_uri=video_url, mime_type=config.VIDEO_MIME_TYPE))
        )
    return [types.Content(role="user", parts=parts)]


def build_config(request: GenerationRequest) -> types.GenerateContentConfig:
    opts: Dict[str, Any] = {"temperature": request.temperature}
    if request.response_mime_type:
        opts["response_mime_type"] = request.response_mime_type
    if request.safety_settings:
        opts["safety_settings"] = list(request.safety_settings)
    if request.use_search:
        opts["tools"] = [types.Tool(google_search=types.GoogleSearch())]
    return types.GenerateContentConfig(**opts)


def _upstream_error(e: Exception) -> UpstreamError:
    logger.error("An error occurred during Gemini API call: %s", e)
    msg = str(e)
    if "application/json" in msg and "tool" in msg:
        return UpstreamError(
            f"API Error: {msg}. Note: JSON response type is not supported with Google Search tool."
        )
    return UpstreamError(msg)


def check_response(response: Any) -> Any:
    """Raise for blocked, empty or abnormally finished responses; return the first candidate."""
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None)
    if block_reason:
        raise ContentBlockedError(block_reason)

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        raise NoCandidatesError(block_reason)

    first = candidates[0]
    finish_reason = getattr(first, "finish_reason", None)
    if finish_reason and finish_reason != types.FinishReason.STOP:
        if finish_reason == types.FinishReason.SAFETY:
            logger.error("Safety ratings: %s", getattr(first, "safety_ratings", None))
            raise SafetyBlockedError(getattr(first, "safety_ratings", None))
        raise GenerationStoppedError(getattr(finish_reason, "value", finish_reason))
    return first


async def generate(
    prompt: str,
    *,
    request: GenerationRequest,
    model: str,
    stream: bool,
    emitter: InteractionEmitter,
) -> GenerationResult:
    contents = build_contents(prompt, request.video_url)
    gen_config = build_config(request)
    emitter.prompt({"model": model, "contents": contents, "config": gen_config})

    async with _open_client(request.api_key.get_secret_value()) as aio:
        if stream:
            acc = StreamAccumulator()
            try:
                chunks = await aio.models.generate_content_stream(
                    model=model, contents=contents, config=gen_config
                )
            except Exception as e:
                raise _upstream_error(e) from e
            async with aclosing(guard_stream(chunks, _upstream_error)) as guarded:
                async for chunk in guarded:
                    # only the last chunk is kept for finish reason / grounding metadata
                    acc.observe(chunk)
                    emitter.token(acc.add(chunk.text or ""))
            if acc.last_chunk is None:
                raise EmptyStreamError()
            response, text = acc.last_chunk, acc.text
        else:
            try:
                response = await aio.models.generate_content(
                    model=model, contents=contents, config=gen_config
                )
            except Exception as e:
                raise _upstream_error(e) from e
            text = response.text or ""

    first = check_response(response)
    return GenerationResult(text=text, grounding_metadata=getattr(first, "grounding_metadata", None))
