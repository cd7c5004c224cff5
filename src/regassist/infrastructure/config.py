"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from the environment (and a
.env file) or passed explicitly in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from regassist.domain.exceptions import ConfigurationError


SUPPORTED_PROVIDERS = ("google", "openai", "groq", "ollama")


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the regulations assistant.

    Construct via from_env() or pass explicitly in tests. Nothing reads
    os.environ after startup.
    """

    # ── Regulations.gov ─────────────────────────────────────────
    regulations_api_key: str = ""
    regulations_base_url: str = "https://api.regulations.gov/v4"
    regulations_page_size: int = 5
    regulations_timeout: float = 15.0

    # ── Centralized LLM Provider ────────────────────────────────
    # One setting controls the agent, the briefing pipeline and the
    # analysis services. Allowed: "google", "openai", "groq", "ollama"
    llm_provider: str = "google"

    # Model names: only the one matching llm_provider is used.
    llm_model_google: str = "gemini-2.5-flash"
    llm_model_openai: str = "gpt-4.1-mini"
    llm_model_groq: str = "llama-3.3-70b-versatile"
    llm_model_ollama: str = "llama3.2"

    # Connection details
    google_api_key: str = ""
    openai_api_key: str = ""
    groq_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434/"

    # Agent
    agent_max_rounds: int = 8
    model_timeout: float = 60.0

    # REST adapter
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: ("http://localhost:5173", "http://127.0.0.1:5173")
    )
    log_level: str = "INFO"

    @property
    def active_llm_model(self) -> str:
        """Return the model name for the currently active LLM provider."""
        if self.llm_provider == "openai":
            return self.llm_model_openai
        elif self.llm_provider == "groq":
            return self.llm_model_groq
        elif self.llm_provider == "ollama":
            return self.llm_model_ollama
        return self.llm_model_google

    @property
    def active_llm_api_key(self) -> str:
        """Return the API key for the active provider ("" for ollama)."""
        return {
            "google": self.google_api_key,
            "openai": self.openai_api_key,
            "groq": self.groq_api_key,
        }.get(self.llm_provider, "")

    def credential_status(self) -> dict[str, object]:
        """Which credentials are configured (never the values themselves)."""
        return {
            "regulationsApiKey": bool(self.regulations_api_key),
            "llmApiKey": self.llm_provider == "ollama" or bool(self.active_llm_api_key),
            "llmProvider": self.llm_provider,
        }

    def validate(self) -> None:
        """Fail fast when a required credential is missing.

        Raises:
            ConfigurationError: for an unknown LLM_PROVIDER, or listing every
                missing variable.
        """
        if self.llm_provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unsupported LLM_PROVIDER: '{self.llm_provider}'. "
                "Must be 'google', 'openai', 'groq', or 'ollama'."
            )
        missing = []
        if not self.regulations_api_key:
            missing.append(
                "REGULATIONS_GOV_API_KEY (get a free key at https://api.regulations.gov/)"
            )
        key_vars = {
            "google": "GEMINI_API_KEY",
            "openai": "OPENAI_API_KEY",
            "groq": "GROQ_API_KEY",
        }
        if self.llm_provider in key_vars and not self.active_llm_api_key:
            missing.append(key_vars[self.llm_provider])
        if missing:
            raise ConfigurationError(
                "Missing required environment variables: " + ", ".join(missing)
            )

    @classmethod
    def from_env(cls) -> Settings:
        """Build Settings from the process environment and a local .env file."""
        from dotenv import load_dotenv
        load_dotenv()

        return cls(
            regulations_api_key=os.getenv("REGULATIONS_GOV_API_KEY", ""),
            regulations_base_url=os.getenv(
                "REGULATIONS_BASE_URL", "https://api.regulations.gov/v4"
            ),
            regulations_page_size=int(os.getenv("REGULATIONS_PAGE_SIZE", "5")),
            regulations_timeout=float(os.getenv("REGULATIONS_TIMEOUT", "15")),

            llm_provider=os.getenv("LLM_PROVIDER", "google").lower().strip(),
            llm_model_google=os.getenv("LLM_MODEL_GOOGLE", "gemini-2.5-flash"),
            llm_model_openai=os.getenv("LLM_MODEL_OPENAI", "gpt-4.1-mini"),
            llm_model_groq=os.getenv("LLM_MODEL_GROQ", "llama-3.3-70b-versatile"),
            llm_model_ollama=os.getenv("LLM_MODEL_OLLAMA", "llama3.2"),
            google_api_key=os.getenv("GEMINI_API_KEY", ""),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/"),

            agent_max_rounds=int(os.getenv("AGENT_MAX_ROUNDS", "8")),
            model_timeout=float(os.getenv("MODEL_TIMEOUT", "60")),

            cors_origins=_split_csv(
                os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
