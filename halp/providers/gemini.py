from typing import Optional

from halp.models import Done, StreamEvent, TextDelta
from halp.providers.base import BaseProvider
from halp.utils.sse import SSEFrame


class GeminiProvider(BaseProvider):
    name = "gemini"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"

    @property
    def endpoint(self) -> str:
        return f"/models/{self.model}:streamGenerateContent?alt=sse"

    def headers(self) -> dict:
        headers = super().headers()
        headers["x-goog-api-key"] = self.api_key or ""
        return headers

    def build_payload(self, prompt: str, system_prompt: str) -> dict:
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": self.config.max_tokens,
            },
        }

    def _extract_content(self, data: dict) -> str | None:
        """Extract text content from Gemini SSE data."""
        candidates = data.get("candidates") or []
        if not candidates:
            return None
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text") or "" for part in parts)
        return text or None

    def decode(self, frame: SSEFrame) -> Optional[StreamEvent]:
        data = self._load_json(frame)

        if error := data.get("error"):
            message = error.get("message") if isinstance(error, dict) else str(error)
            return self._provider_error(message or "unknown error")

        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            return self._provider_error(f"prompt blocked ({block_reason})")

        if text := self._extract_content(data):
            return TextDelta(text)

        # Gemini puts finishReason on the last candidate, usually alongside text
        candidates = data.get("candidates") or []
        if candidates and candidates[0].get("finishReason"):
            return Done()
        return None
