import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings, TomlConfigSettingsSource

from halp.models.provider import DEFAULT_MAX_TOKENS, DEFAULT_TIMEOUT, MAX_RESPONSE_SIZE, ProviderConfig
from halp.providers.registry import canonical_provider_name
from halp.utils.exceptions import ConfigError


def setup_logging(verbose: bool = False):
    """Configure application logging.

    Logs go to stderr; stdout is reserved for the generated command.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

# Model used when none is configured
DEFAULT_MODELS = {
    "anthropic": "claude-haiku-4-5",
    "openai": "gpt-5-nano",
    "gemini": "gemini-2.5-flash",
    "mistral": "mistral-small-latest",
    "grok": "grok-3-mini",
    "openai-compatible": "llama3.2",
}

# Provider-specific API key variables, checked after HALP_API_KEY and the config file
PROVIDER_KEY_ENV = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "grok": "XAI_API_KEY",
}


def config_path() -> Path:
    """Location of the TOML config file ($XDG_CONFIG_HOME or ~/.config)."""
    config_dir = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_dir) if config_dir else Path.home() / ".config"
    return base / "halp" / "config.toml"


class Settings(BaseSettings):
    # Provider selection
    provider: str = "anthropic"
    model: Optional[str] = None

    # Credentials and endpoint
    api_key: Optional[str] = None
    api_base_url: Optional[str] = None

    # Custom system prompt template ({{os}}, {{shell}}, {{cwd}})
    system_prompt: Optional[str] = None

    # Request limits
    timeout: float = DEFAULT_TIMEOUT
    max_response_bytes: int = MAX_RESPONSE_SIZE
    max_tokens: int = DEFAULT_MAX_TOKENS

    class Config:
        env_prefix = "HALP_"
        extra = "ignore"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """Precedence: init kwargs > HALP_* env vars > config file."""
        sources = [init_settings, env_settings]
        path = config_path()
        try:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=path))
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Ignoring unreadable config file {path}: {e}")
        return tuple(sources)


def load_settings(**overrides) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_provider_config(settings: Optional[Settings] = None) -> ProviderConfig:
    """
    Resolve the provider configuration for one request.

    API key priority: HALP_API_KEY > config file > provider-specific env var.

    Raises:
        UnknownProvider: the configured provider is not supported
        ConfigError: no API key could be found
    """
    if settings is None:
        settings = load_settings()

    name = canonical_provider_name(settings.provider)
    model = settings.model or DEFAULT_MODELS[name]

    api_key = settings.api_key
    key_env = PROVIDER_KEY_ENV.get(name)
    if not api_key and key_env:
        api_key = os.environ.get(key_env)
    if not api_key and key_env:
        raise ConfigError(
            f"No API key found. Set HALP_API_KEY, add api_key to {config_path()}, "
            f"or set {key_env}"
        )

    try:
        return ProviderConfig(
            name=name,
            model=model,
            api_key=api_key,
            api_base_url=settings.api_base_url,
            timeout=settings.timeout,
            max_response_bytes=settings.max_response_bytes,
            max_tokens=settings.max_tokens,
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
