import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from textgen.core import config
from textgen.providers.base import (
    ConfigurationError,
    ContentBlockedError,
    GenerationStoppedError,
    NoCandidatesError,
    ProviderError,
    SafetyBlockedError,
    UnknownProviderError,
    UnsupportedInputError,
    UnsupportedModelError,
)
from textgen.providers.factory import resolve_adapter
from textgen.schemas.api import GenerateBody, GenerateResponse
from textgen.schemas.generation import GenerationRequest
from textgen.services.generation import check_request, generate_text

router = APIRouter(tags=["generate"])
logger = logging.getLogger(__name__)

_FALLBACK_KEYS = {
    "router": config.ROUTER_API_KEY,
    "native_multimodal": config.GOOGLE_API_KEY,
    "conversational": config.ANTHROPIC_API_KEY,
}

_STATUS_BY_ERROR = (
    ((ConfigurationError, UnknownProviderError, UnsupportedModelError, UnsupportedInputError), 400),
    ((ContentBlockedError, NoCandidatesError, SafetyBlockedError, GenerationStoppedError), 422),
)


def status_for(error: ProviderError) -> int:
    for classes, status in _STATUS_BY_ERROR:
        if isinstance(error, classes):
            return status
    return 502


def _to_request(body: GenerateBody) -> GenerationRequest:
    route = resolve_adapter(body.provider, body.model_name)
    fields = body.model_dump(exclude_none=True, exclude={"api_key"})
    return GenerationRequest(**fields, api_key=body.api_key or _FALLBACK_KEYS.get(route.label, ""))


@router.post("/generate", response_model=GenerateResponse)
async def generate(body: GenerateBody):
    try:
        gen_request = _to_request(body)
        check_request(gen_request)
    except ProviderError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))

    # Non-stream path
    if not gen_request.stream:
        try:
            result = await generate_text(gen_request)
        except ProviderError as e:
            raise HTTPException(status_code=status_for(e), detail=str(e))
        return GenerateResponse(
            text=result.text,
            grounding_metadata=result.grounding_metadata,
            model_name=gen_request.model_name,
            provider=gen_request.provider,
        )

    # Stream path: tokens are handed from the on_token callback to the response body
    queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()

    async def run() -> None:
        try:
            await generate_text(gen_request, on_token=queue.put_nowait)
        finally:
            queue.put_nowait(None)

    task = asyncio.create_task(run())

    async def streamer():
        try:
            while True:
                token = await queue.get()
                if token is None:
                    break
                if token:
                    yield token.encode("utf-8")
            await task
        except Exception as e:
            logger.exception("streaming error occurred: %s", e)
        finally:
            if not task.done():
                logger.info("client disconnected, stopping stream")
                task.cancel()
            elif not task.cancelled():
                # marks a failure that happened after the client went away as retrieved
                task.exception()

    return StreamingResponse(streamer(), media_type="text/plain; charset=utf-8")
