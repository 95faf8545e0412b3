import logging
from typing import Dict, List, Type

from halp.models import ProviderConfig
from halp.providers.anthropic import AnthropicProvider
from halp.providers.base import BaseProvider
from halp.providers.gemini import GeminiProvider
from halp.providers.grok import GrokProvider
from halp.providers.mistral import MistralProvider
from halp.providers.openai import OpenAIProvider
from halp.providers.openai_compatible import OpenAICompatibleProvider
from halp.utils.exceptions import UnknownProvider

logger = logging.getLogger(__name__)


# Mapping of provider names to their classes
PROVIDER_CLASSES: Dict[str, Type[BaseProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
    "mistral": MistralProvider,
    "grok": GrokProvider,
    "openai-compatible": OpenAICompatibleProvider,
}

# Alternate spellings accepted in configuration
PROVIDER_ALIASES: Dict[str, str] = {
    "claude": "anthropic",
    "gpt": "openai",
    "google": "gemini",
    "xai": "grok",
    "ollama": "openai-compatible",
}


def canonical_provider_name(name: str) -> str:
    """Normalize a configured provider name, raising UnknownProvider if unsupported."""
    key = name.strip().lower()
    key = PROVIDER_ALIASES.get(key, key)
    if key not in PROVIDER_CLASSES:
        raise UnknownProvider(name, known=provider_names())
    return key


def provider_names() -> List[str]:
    """Return the canonical names of all registered providers"""
    return list(PROVIDER_CLASSES.keys())


def create_provider(config: ProviderConfig) -> BaseProvider:
    """Build a fresh single-use provider for one request."""
    provider_class = PROVIDER_CLASSES[canonical_provider_name(config.name)]
    logger.debug(f"Using provider '{provider_class.name}' with model '{config.model}'")
    return provider_class(config)
