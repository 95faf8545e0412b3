"""
Server-sent events frame decoding.

Line splitting, comment lines and multi-line `data:` joins are handled by
httpx-sse; this module maps its events onto SSEFrame.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Optional

import httpx
from httpx_sse import EventSource, ServerSentEvent

SSE_DONE_SIGNAL = "[DONE]"
# httpx decodes response text with errors="replace"
REPLACEMENT_CHAR = "\ufffd"


@dataclass
class SSEFrame:
    """A complete server-sent event"""

    data: str
    event: Optional[str] = None

    @property
    def is_done_signal(self) -> bool:
        return self.data.strip() == SSE_DONE_SIGNAL

    @property
    def has_invalid_text(self) -> bool:
        """True when the payload bytes were not valid for the response encoding."""
        return REPLACEMENT_CHAR in self.data


def to_frame(sse: ServerSentEvent) -> Optional[SSEFrame]:
    # Events without data (e.g. a bare `event:` line) carry nothing to decode
    if not sse.data:
        return None
    return SSEFrame(data=sse.data, event=sse.event)


async def iter_frames(response: httpx.Response) -> AsyncIterator[SSEFrame]:
    """Lazily turn a streaming response into SSE frames.

    Ends when the underlying stream ends. An unterminated trailing event is
    discarded, as the SSE format requires. Raises httpx_sse.SSEError when the
    response is not `text/event-stream`.
    """
    async for sse in EventSource(response).aiter_sse():
        frame = to_frame(sse)
        if frame is not None:
            yield frame
