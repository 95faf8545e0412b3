import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional

import httpx
import orjson

from halp.models import Done, Error, ProviderConfig, StreamEvent, TextDelta, is_terminal
from halp.utils.exceptions import (
    HalpError,
    MalformedFrame,
    ProviderReportedError,
    ResponseTooLarge,
    TransportError,
)
from halp.utils.sse import SSEFrame, iter_frames

logger = logging.getLogger(__name__)

# Cap on how much of an error body ends up in a message
ERROR_BODY_LIMIT = 500


class BaseProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses describe the request (`endpoint`, `headers`, `build_payload`)
    and project one vendor frame into a StreamEvent (`decode`). The base class
    owns the HTTP stream and guarantees exactly one terminal event.
    """

    name: str  # Provider identifier: "anthropic", "openai", "gemini", ...
    default_base_url: str = ""

    def __init__(self, config: ProviderConfig):
        self.config = config
        self.model = config.model
        self.api_key = config.api_key
        self.base_url = self._resolve_base_url(config.api_base_url or self.default_base_url)
        self._client: Optional[httpx.AsyncClient] = None

    def _resolve_base_url(self, url: str) -> str:
        """Accept either a base URL or the full endpoint URL."""
        url = url.rstrip("/")
        path = self.endpoint.split("?")[0]
        if path and url.endswith(path):
            url = url[: -len(path)]
        return url

    @property
    def timeout(self) -> float:
        """Transport timeout in seconds."""
        return float(self.config.timeout)

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Path (relative to base_url) of the streaming endpoint."""

    def headers(self) -> dict:
        return {"Content-Type": "application/json"}

    @abstractmethod
    def build_payload(self, prompt: str, system_prompt: str) -> dict:
        """Request body for a single-turn streaming completion."""

    @abstractmethod
    def decode(self, frame: SSEFrame) -> Optional[StreamEvent]:
        """
        Project one SSE frame into a StreamEvent.

        Returns None for frames that only carry metadata. Raises
        MalformedFrame when the payload is not valid JSON.
        """

    def is_configured(self) -> bool:
        """Check if provider has valid API key"""
        return bool(self.api_key)

    def _load_json(self, frame: SSEFrame) -> dict:
        try:
            data = orjson.loads(frame.data)
        except orjson.JSONDecodeError as e:
            raise MalformedFrame(f"Invalid JSON in {self.name} frame: {e}", frame.data) from e
        if not isinstance(data, dict):
            raise MalformedFrame(f"Unexpected {self.name} payload type", frame.data)
        return data

    def _provider_error(self, message: str) -> Error:
        error = ProviderReportedError(f"API error: {message}")
        return Error(message=error.message, cause=error)

    def _error_event(self, error: HalpError) -> Error:
        return Error(message=error.message, cause=error)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers(),
                timeout=self.timeout,
            )
        return self._client

    async def cleanup(self):
        """Cleanup HTTP client resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def stream_completion(
        self, prompt: str, system_prompt: str
    ) -> AsyncIterator[StreamEvent]:
        """Stream a completion as normalized events.

        Single-pass: the request is issued on first iteration and the client
        is closed once the stream ends. The last event is always Done or Error.
        """
        payload = self.build_payload(prompt, system_prompt)
        try:
            client = self._get_client()
            async with client.stream("POST", self.endpoint, json=payload) as response:
                if not response.is_success:
                    yield self._error_event(await self._status_error(response))
                    return
                async for event in self._stream_events(response):
                    yield event
        except httpx.InvalidURL as e:
            yield self._error_event(TransportError(f"Invalid API URL {self.base_url!r}: {e}"))
        except httpx.TimeoutException as e:
            yield self._error_event(TransportError(f"Request timed out: {e}"))
        except httpx.HTTPError as e:
            yield self._error_event(TransportError(f"Request failed: {e}"))
        finally:
            await self.cleanup()

    async def _status_error(self, response: httpx.Response) -> TransportError:
        """Read the error body for a failed response."""
        body = (await response.aread()).decode("utf-8", errors="replace")
        try:
            error_json = orjson.loads(body)
            detail = error_json.get("error", {}).get("message") or body
        except (orjson.JSONDecodeError, AttributeError):
            detail = body or "Unknown error"
        logger.debug(f"{self.name} API error: status={response.status_code}, body={body}")
        return TransportError(
            f"API error ({response.status_code}): {detail[:ERROR_BODY_LIMIT]}",
            status_code=response.status_code,
        )

    async def _stream_events(self, response: httpx.Response) -> AsyncIterator[StreamEvent]:
        """
        Decode SSE frames from a streaming response.

        Args:
            response: The httpx streaming response

        Yields:
            TextDelta events, then one terminal event. A transport that closes
            without a terminal marker ends with an implicit Done, unless the
            last frame was malformed.
        """
        received = 0
        last_malformed: Optional[MalformedFrame] = None

        async for frame in iter_frames(response):
            if frame.is_done_signal:
                yield Done()
                return

            try:
                if frame.has_invalid_text:
                    raise MalformedFrame(f"Invalid UTF-8 in {self.name} frame", frame.data)
                event = self.decode(frame)
            except MalformedFrame as e:
                logger.debug(f"Skipping malformed {self.name} frame: {e}")
                last_malformed = e
                continue
            last_malformed = None

            if event is None:
                continue
            if isinstance(event, TextDelta):
                if not event.text:
                    continue
                received += len(event.text.encode("utf-8"))
                if received > self.config.max_response_bytes:
                    yield self._error_event(ResponseTooLarge(self.config.max_response_bytes))
                    return
            yield event
            if is_terminal(event):
                return

        if last_malformed is not None:
            yield self._error_event(last_malformed)
        else:
            yield Done()


class OpenAIFormatProvider(BaseProvider):
    """Base class for providers using the OpenAI chat completions format.

    Subclasses only need to set `name` and `default_base_url`.
    """

    name: str = ""  # Override in subclass
    default_base_url: str = ""  # Override in subclass

    @property
    def endpoint(self) -> str:
        return "/chat/completions"

    def headers(self) -> dict:
        headers = super().headers()
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def build_payload(self, prompt: str, system_prompt: str) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.config.max_tokens,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "stream": True,
        }

    def decode(self, frame: SSEFrame) -> Optional[StreamEvent]:
        data = self._load_json(frame)

        if error := data.get("error"):
            message = error.get("message") if isinstance(error, dict) else str(error)
            return self._provider_error(message or "unknown error")

        choices = data.get("choices") or []
        if not choices:
            return None

        choice = choices[0]
        delta = choice.get("delta") or {}
        if content := delta.get("content"):
            return TextDelta(content)
        if choice.get("finish_reason"):
            return Done()
        return None
