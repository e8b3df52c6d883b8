# error taxonomy shared by every provider adapter, plus the adapter contract
# each adapter module exposes one `generate(...)` coroutine with the GenerateFn shape

from typing import Any, Awaitable, Callable, Optional

from textgen.schemas.generation import GenerationResult


class ProviderError(Exception):
    pass


class ConfigurationError(ProviderError):
    pass


class UnknownProviderError(ProviderError):
    def __init__(self, provider: str) -> None:
        super().__init__(f"Unknown provider: {provider}")
        self.provider = provider


class UnsupportedModelError(ProviderError):
    def __init__(self, model_name: str) -> None:
        super().__init__(f"Native provider not supported for model: {model_name}")
        self.model_name = model_name


class UnsupportedInputError(ProviderError):
    pass


class HttpError(ProviderError):
    def __init__(self, status: int, status_text: str) -> None:
        super().__init__(f"{status} {status_text}".strip())
        self.status = status
        self.status_text = status_text


class MalformedChunkError(ProviderError):
    # recoverable: logged and skipped by the stream readers, never raised to the caller
    def __init__(self, payload: str, reason: str) -> None:
        super().__init__(f"Failed to parse stream chunk ({reason}): {payload!r}")
        self.payload = payload
        self.reason = reason


class EmptyStreamError(ProviderError):
    def __init__(self) -> None:
        super().__init__("No response received from streaming")


class ContentBlockedError(ProviderError):
    def __init__(self, reason: Any) -> None:
        super().__init__(f"Content generation failed: Prompt blocked (reason: {reason})")
        self.reason = reason


class NoCandidatesError(ProviderError):
    def __init__(self, block_reason: Any = None) -> None:
        msg = "Content generation failed: No candidates returned."
        if block_reason:
            msg = f"{msg} Prompt feedback: {block_reason}"
        super().__init__(msg)
        self.block_reason = block_reason


class SafetyBlockedError(ProviderError):
    def __init__(self, safety_ratings: Any = None) -> None:
        super().__init__("Content generation failed: Response blocked due to safety settings.")
        self.safety_ratings = safety_ratings


class GenerationStoppedError(ProviderError):
    def __init__(self, reason: Any) -> None:
        super().__init__(f"Content generation failed: Stopped due to {reason}.")
        self.reason = reason


class UpstreamError(ProviderError):
    pass


# generate(prompt, *, request, model, stream, emitter) -> GenerationResult
GenerateFn = Callable[..., Awaitable[GenerationResult]]
TokenCallback = Optional[Callable[[str], None]]
