"""
OpenAI-compatible provider for Ollama, LM Studio, vLLM, and other OpenAI-compatible APIs.
"""

from halp.providers.base import OpenAIFormatProvider


class OpenAICompatibleProvider(OpenAIFormatProvider):
    """Provider for OpenAI-compatible APIs (Ollama, LM Studio, vLLM, etc.).

    Defaults to a local Ollama server; point `api_base_url` elsewhere for
    other servers. The API key is optional.
    """

    name = "openai-compatible"
    default_base_url = "http://localhost:11434/v1"

    def is_configured(self) -> bool:
        """Check if provider is configured (always true for compatible providers)."""
        # Local servers usually run without auth
        return True
