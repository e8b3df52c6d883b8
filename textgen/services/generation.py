"""
generate_text: the single entry point of the package.

Validates the request, picks an adapter, shapes the prompt and hands off to
the adapter. Every ProviderError is reported once as an ERROR interaction and
then re-raised; a successful call ends with exactly one RESPONSE interaction.
Exceptions raised by the caller's own callbacks, and task cancellation, pass
through without an ERROR event.
"""

import logging

from textgen.providers.base import ConfigurationError, ProviderError, UnsupportedInputError
from textgen.providers.factory import AdapterRoute, resolve_adapter
from textgen.schemas.generation import GenerationRequest, GenerationResult
from textgen.services.interactions import InteractionCallback, InteractionEmitter, TokenCallback
from textgen.services.prompt import build_prompt, with_research_hint

logger = logging.getLogger(__name__)

_INPUT_LABELS = {"router": "OpenRouter", "conversational": "Anthropic", "native_multimodal": "Gemini"}


def check_request(request: GenerationRequest) -> AdapterRoute:
    """Fail fast on anything that can be rejected before a network call."""
    if not request.api_key.get_secret_value().strip():
        raise ConfigurationError("API key is missing or empty")
    route = resolve_adapter(request.provider, request.model_name)
    if request.video_url and not route.accepts_video:
        raise UnsupportedInputError(
            f"Video input is not supported for {_INPUT_LABELS.get(route.label, route.label)} provider."
        )
    return route


async def generate_text(
    request: GenerationRequest,
    *,
    on_interaction: InteractionCallback = None,
    on_token: TokenCallback = None,
) -> GenerationResult:
    emitter = InteractionEmitter(request.model_name, on_interaction, on_token)
    try:
        route = check_request(request)
        prompt = build_prompt(request.base_prompt, request.additional_user_text)
        if request.use_search and not route.native_search:
            prompt = with_research_hint(prompt)
        result = await route.generate(
            prompt,
            request=request,
            model=route.model,
            stream=request.stream or emitter.wants_tokens,
            emitter=emitter,
        )
    except ProviderError as e:
        logger.error("generation failed for model %s: %s", request.model_name, e)
        emitter.error(e)
        raise
    emitter.response(result)
    return result
