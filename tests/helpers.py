"""Test helpers: SSE encoding and a network-free provider."""

from typing import AsyncIterator, Iterable, Optional

import httpx
import orjson

from halp.models import Done, ProviderConfig, StreamEvent, TextDelta
from halp.providers.base import BaseProvider
from halp.utils.sse import SSEFrame

SSE_HEADERS = {"content-type": "text/event-stream"}


def sse_frame(data, event: Optional[str] = None) -> bytes:
    """Encode one SSE frame; dicts are serialized as JSON."""
    if not isinstance(data, str):
        data = orjson.dumps(data).decode()
    frame = f"data: {data}\n\n"
    if event:
        frame = f"event: {event}\n{frame}"
    return frame.encode()


def sse_body(*frames) -> bytes:
    return b"".join(f if isinstance(f, bytes) else sse_frame(f) for f in frames)


async def byte_chunks(data: bytes, size: int) -> AsyncIterator[bytes]:
    for i in range(0, len(data), size):
        yield data[i : i + size]


def sse_response(body, status_code: int = 200) -> httpx.Response:
    """Streaming response with an SSE content type; body may be bytes or chunks."""
    return httpx.Response(status_code, headers=SSE_HEADERS, content=body)


def deltas(*texts: str) -> list[StreamEvent]:
    return [TextDelta(t) for t in texts] + [Done()]


class ScriptedProvider(BaseProvider):
    """Provider that replays a fixed event sequence without any network."""

    name = "scripted"

    def __init__(self, config: ProviderConfig, events: Iterable[StreamEvent]):
        super().__init__(config)
        self.events = list(events)
        self.closed = False

    @property
    def endpoint(self) -> str:
        return "/"

    def build_payload(self, prompt: str, system_prompt: str) -> dict:
        return {}

    def decode(self, frame: SSEFrame) -> Optional[StreamEvent]:
        return None

    async def stream_completion(self, prompt: str, system_prompt: str):
        try:
            for event in self.events:
                yield event
        finally:
            self.closed = True
