# resolves (provider, model name prefix) to one adapter through a closed lookup table

from dataclasses import dataclass
from typing import Dict, List, NamedTuple

from textgen.providers import conversational, native_multimodal, router
from textgen.providers.base import GenerateFn, UnknownProviderError, UnsupportedModelError

# "openrouter" is the identifier older callers send for the router
PROVIDER_ALIASES: Dict[str, str] = {
    "router": "router",
    "openrouter": "router",
    "native": "native",
}


class _Entry(NamedTuple):
    label: str
    generate: GenerateFn
    accepts_video: bool
    native_search: bool
    strip_prefix: bool


# (provider kind, model name prefix); "" matches any model name
_ROUTES: Dict[tuple, _Entry] = {
    ("router", ""): _Entry("router", router.generate, False, False, False),
    ("native", "google/"): _Entry("native_multimodal", native_multimodal.generate, True, True, True),
    ("native", "anthropic/"): _Entry("conversational", conversational.generate, False, False, True),
}


@dataclass(frozen=True)
class AdapterRoute:
    label: str
    model: str
    generate: GenerateFn
    accepts_video: bool
    native_search: bool


def resolve_adapter(provider: str, model_name: str) -> AdapterRoute:
    kind = PROVIDER_ALIASES.get(provider)
    if kind is None:
        raise UnknownProviderError(provider)
    for (route_kind, prefix), entry in _ROUTES.items():
        if route_kind != kind or not model_name.startswith(prefix):
            continue
        model = model_name[len(prefix):] if entry.strip_prefix else model_name
        return AdapterRoute(
            label=entry.label,
            model=model,
            generate=entry.generate,
            accepts_video=entry.accepts_video,
            native_search=entry.native_search,
        )
    raise UnsupportedModelError(model_name)


def supported_routes() -> List[Dict[str, object]]:
    return [
        {
            "provider": kind,
            "model_prefix": prefix or None,
            "adapter": entry.label,
            "accepts_video": entry.accepts_video,
            "native_search": entry.native_search,
        }
        for (kind, prefix), entry in _ROUTES.items()
    ]
