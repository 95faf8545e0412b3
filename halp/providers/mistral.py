from halp.providers.base import OpenAIFormatProvider


class MistralProvider(OpenAIFormatProvider):
    """Mistral AI provider."""

    name = "mistral"
    default_base_url = "https://api.mistral.ai/v1"
