"""Shared fixtures for halp tests."""

import pytest

from halp.models import ProviderConfig, StreamEvent
from helpers import ScriptedProvider


@pytest.fixture
def provider_config():
    def _make(name: str = "anthropic", **kwargs) -> ProviderConfig:
        kwargs.setdefault("model", "test-model")
        kwargs.setdefault("api_key", "test-key")
        return ProviderConfig(name=name, **kwargs)

    return _make


@pytest.fixture
def scripted_provider(provider_config):
    def _make(*events: StreamEvent) -> ScriptedProvider:
        return ScriptedProvider(provider_config(), events)

    return _make


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep real credentials and config files out of tests."""
    for var in (
        "HALP_PROVIDER",
        "HALP_MODEL",
        "HALP_API_KEY",
        "HALP_API_BASE_URL",
        "HALP_SYSTEM_PROMPT",
        "HALP_TIMEOUT",
        "HALP_MAX_RESPONSE_BYTES",
        "HALP_MAX_TOKENS",
        "ANTHROPIC_API_KEY",
        "OPENAI_API_KEY",
        "GEMINI_API_KEY",
        "MISTRAL_API_KEY",
        "XAI_API_KEY",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
