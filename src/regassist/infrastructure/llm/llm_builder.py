"""
infrastructure.llm.llm_builder - Centralized chat model construction.

Single source of truth for building the chat model shared by the agent,
the briefing pipeline and the analysis services. The provider is
controlled by the LLM_PROVIDER environment variable.

Supported providers:
    - "google"  → langchain_google_genai.ChatGoogleGenerativeAI
    - "openai"  → langchain_openai.ChatOpenAI
    - "groq"    → langchain_groq.ChatGroq
    - "ollama"  → langchain_ollama.ChatOllama

Clients are built with retries disabled: a failed call is surfaced to
the caller immediately.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from langchain_core.language_models import BaseChatModel

logger = logging.getLogger(__name__)


def build_llm(
    *,
    provider: str,
    model: str,
    temperature: float = 0,
    api_key: str = "",
    ollama_base_url: str = "http://localhost:11434/",
    timeout: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> BaseChatModel:
    """Build a tool-calling chat model for the given provider.

    Args:
        provider: One of "google", "openai", "groq", "ollama".
        model: Model name for the selected provider.
        temperature: Sampling temperature.
        api_key: API key for the hosted providers (ignored for ollama).
        ollama_base_url: Ollama server URL (only used when provider="ollama").
        timeout: Per-request timeout in seconds passed to the client.
        max_tokens: Maximum output tokens, provider default when None.

    Returns:
        A configured LangChain chat model.

    Raises:
        ValueError: If the provider is unknown or required credentials are missing.
    """
    provider = provider.lower().strip()

    if provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        if not api_key:
            raise ValueError("GEMINI_API_KEY is required when LLM_PROVIDER='google'")

        kwargs: Dict[str, Any] = {
            "model": model,
            "temperature": temperature,
            "google_api_key": api_key,
            "max_retries": 0,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        if max_tokens is not None:
            kwargs["max_output_tokens"] = max_tokens

        logger.info("Building Gemini chat model (model=%s)", model)
        return ChatGoogleGenerativeAI(**kwargs)

    elif provider == "openai":
        from langchain_openai import ChatOpenAI

        if not api_key:
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER='openai'")

        kwargs = {
            "model": model,
            "temperature": temperature,
            "openai_api_key": api_key,
            "max_retries": 0,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        logger.info("Building OpenAI chat model (model=%s)", model)
        return ChatOpenAI(**kwargs)

    elif provider == "groq":
        from langchain_groq import ChatGroq

        if not api_key:
            raise ValueError("GROQ_API_KEY is required when LLM_PROVIDER='groq'")

        kwargs = {
            "model": model,
            "temperature": temperature,
            "groq_api_key": api_key,
            "max_retries": 0,
            "max_tokens": max_tokens if max_tokens is not None else 2048,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout

        logger.info("Building Groq chat model (model=%s)", model)
        return ChatGroq(**kwargs)

    elif provider == "ollama":
        from langchain_ollama import ChatOllama

        kwargs = {
            "model": model,
            "temperature": temperature,
            "base_url": ollama_base_url,
        }
        if max_tokens is not None:
            kwargs["num_predict"] = max_tokens

        logger.info("Building ChatOllama (model=%s)", model)
        return ChatOllama(**kwargs)

    else:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: '{provider}'. "
            "Must be 'google', 'openai', 'groq', or 'ollama'."
        )
