"""
Shared pieces for turning incremental provider payloads into tokens.

Byte decoding and line reassembly are left to httpx (Response.aiter_lines keeps
an incremental UTF-8 decoder and holds a partial trailing line until the next
read or the end of the body). What remains here is provider-neutral:

* parse_sse_line: pull the payload out of one Server-Sent-Events line
* extract_router_token: read choices[0].delta.content from a parsed chunk
* StreamAccumulator: ordered running concatenation plus the last raw chunk
* guard_stream: report vendor failures raised mid-stream as UpstreamError
"""

import json
import logging
import re
from typing import Any, AsyncIterator, Callable, Dict, Optional

from textgen.providers.base import MalformedChunkError, UpstreamError
from textgen.schemas.generation import NormalizedToken

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"
_DATA_PREFIX = re.compile(r"^data:\s*")


def parse_sse_line(line: str) -> Optional[str]:
    """Return the payload of a `data:` line, or None for anything else (comments, events, blanks)."""
    trimmed = line.strip()
    if not trimmed.startswith("data:"):
        return None
    return _DATA_PREFIX.sub("", trimmed, count=1)


def decode_chunk(payload: str) -> Optional[Dict[str, Any]]:
    # malformed chunks are logged and skipped; the stream keeps going
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning("%s", MalformedChunkError(payload, e.msg))
        return None
    if not isinstance(data, dict):
        logger.warning("%s", MalformedChunkError(payload, "not a JSON object"))
        return None
    return data


def extract_router_token(chunk: Dict[str, Any]) -> str:
    # absent choices/delta/content is an empty token, not an error
    choices = chunk.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    delta = choices[0].get("delta") or {}
    content = delta.get("content") if isinstance(delta, dict) else None
    return content if isinstance(content, str) else ""


class StreamAccumulator:
    def __init__(self) -> None:
        self._text = ""
        self.last_chunk: Any = None

    @property
    def text(self) -> str:
        return self._text

    def add(self, token: str) -> NormalizedToken:
        self._text += token
        return NormalizedToken(text=token, accumulated=self._text)

    def observe(self, chunk: Any) -> None:
        """Remember the most recent raw chunk; its metadata describes the finished response."""
        self.last_chunk = chunk


async def guard_stream(
    chunks: AsyncIterator[Any],
    wrap: Callable[[Exception], UpstreamError],
) -> AsyncIterator[Any]:
    """
    Re-yield a vendor stream, turning anything the vendor raises while producing
    the next chunk into an UpstreamError. The consumer's own loop body runs outside
    this frame, so exceptions from observers are never wrapped.
    """
    try:
        async for chunk in chunks:
            yield chunk
    except Exception as e:
        raise wrap(e) from e
