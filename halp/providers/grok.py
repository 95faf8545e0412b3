from halp.providers.base import OpenAIFormatProvider


class GrokProvider(OpenAIFormatProvider):
    """xAI Grok provider - uses OpenAI-compatible API."""

    name = "grok"
    default_base_url = "https://api.x.ai/v1"
