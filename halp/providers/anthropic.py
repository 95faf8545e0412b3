from typing import Optional

from halp.models import Done, StreamEvent, TextDelta
from halp.providers.base import BaseProvider
from halp.utils.sse import SSEFrame

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(BaseProvider):
    name = "anthropic"
    default_base_url = "https://api.anthropic.com/v1"

    @property
    def endpoint(self) -> str:
        return "/messages"

    def headers(self) -> dict:
        headers = super().headers()
        headers["x-api-key"] = self.api_key or ""
        headers["anthropic-version"] = ANTHROPIC_VERSION
        return headers

    def build_payload(self, prompt: str, system_prompt: str) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.config.max_tokens,
            "system": system_prompt,
            "messages": [{"role": "user", "content": prompt}],
            "stream": True,
        }

    def decode(self, frame: SSEFrame) -> Optional[StreamEvent]:
        """Project a Claude Messages API event."""
        data = self._load_json(frame)
        event_type = data.get("type") or frame.event

        if event_type == "content_block_delta":
            delta = data.get("delta") or {}
            # input_json_delta and thinking deltas carry no command text
            if delta.get("type", "text_delta") == "text_delta" and delta.get("text"):
                return TextDelta(delta["text"])
            return None
        if event_type == "message_stop":
            return Done()
        if event_type == "error":
            error = data.get("error") or {}
            return self._provider_error(error.get("message") or "unknown error")
        # message_start, content_block_start/stop, message_delta, ping
        return None
