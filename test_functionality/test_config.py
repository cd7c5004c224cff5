import pytest

from regassist.domain.exceptions import ConfigurationError
from regassist.infrastructure.config import Settings


def test_from_env_reads_overrides(monkeypatch):
    monkeypatch.setenv("REGULATIONS_GOV_API_KEY", "reg")
    monkeypatch.setenv("LLM_PROVIDER", " OpenAI ")
    monkeypatch.setenv("OPENAI_API_KEY", "sk")
    monkeypatch.setenv("AGENT_MAX_ROUNDS", "4")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")

    settings = Settings.from_env()

    assert settings.llm_provider == "openai"
    assert settings.active_llm_model == "gpt-4.1-mini"
    assert settings.active_llm_api_key == "sk"
    assert settings.agent_max_rounds == 4
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    settings.validate()


def test_validate_lists_every_missing_credential():
    with pytest.raises(ConfigurationError) as info:
        Settings(llm_provider="google").validate()
    assert "REGULATIONS_GOV_API_KEY" in str(info.value)
    assert "GEMINI_API_KEY" in str(info.value)


def test_ollama_needs_no_model_key():
    settings = Settings(regulations_api_key="reg", llm_provider="ollama")
    settings.validate()
    assert settings.credential_status() == {
        "regulationsApiKey": True, "llmApiKey": True, "llmProvider": "ollama",
    }


def test_validate_rejects_unknown_provider():
    settings = Settings(regulations_api_key="reg", llm_provider="anthropic")
    with pytest.raises(ConfigurationError, match="Unsupported LLM_PROVIDER: 'anthropic'"):
        settings.validate()
