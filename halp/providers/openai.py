from halp.providers.base import OpenAIFormatProvider


class OpenAIProvider(OpenAIFormatProvider):
    """OpenAI GPT provider."""

    name = "openai"
    default_base_url = "https://api.openai.com/v1"

    def build_payload(self, prompt: str, system_prompt: str) -> dict:
        payload = super().build_payload(prompt, system_prompt)
        # Current OpenAI models reject max_tokens in favour of this field
        payload["max_completion_tokens"] = payload.pop("max_tokens")
        return payload
