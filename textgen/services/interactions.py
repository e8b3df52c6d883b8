# fans lifecycle events out to the caller's observers
# observers run inline on the calling task; whatever they raise propagates untouched

import logging
from typing import Any, Callable, Optional

from textgen.schemas.generation import (
    GenerationResult,
    InteractionEvent,
    InteractionType,
    NormalizedToken,
)

InteractionCallback = Optional[Callable[[InteractionEvent], None]]
TokenCallback = Optional[Callable[[str], None]]

logger = logging.getLogger(__name__)


class InteractionEmitter:
    def __init__(
        self,
        model_name: Optional[str] = None,
        on_interaction: InteractionCallback = None,
        on_token: TokenCallback = None,
    ) -> None:
        self.model_name = model_name
        self._on_interaction = on_interaction
        self._on_token = on_token
        self._terminal_sent = False

    @property
    def wants_tokens(self) -> bool:
        return self._on_token is not None

    def _emit(self, kind: InteractionType, data: Any) -> None:
        if self._on_interaction is None:
            return
        self._on_interaction(InteractionEvent(type=kind, data=data, model_name=self.model_name))

    def prompt(self, payload: Any) -> None:
        self._emit(InteractionType.PROMPT, payload)

    def token(self, token: NormalizedToken) -> None:
        logger.debug("token of %d chars, %d accumulated", len(token.text), len(token.accumulated))
        if self._on_token is not None:
            self._on_token(token.text)
        self._emit(InteractionType.TOKEN, token.text)

    def response(self, result: GenerationResult) -> None:
        # RESPONSE and ERROR are mutually exclusive; only the first terminal event goes out
        if self._terminal_sent:
            return
        self._terminal_sent = True
        self._emit(InteractionType.RESPONSE, result)

    def error(self, exc: BaseException) -> None:
        if self._terminal_sent:
            return
        self._terminal_sent = True
        self._emit(InteractionType.ERROR, exc)
