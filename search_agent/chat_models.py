"""Chat model construction for the configured LLM provider."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_core.language_models import BaseChatModel

from .constants import COMPLETION_TEMPERATURE
from .exceptions import ConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from .config import AgentConfig


def build_chat_model(cfg: "AgentConfig") -> BaseChatModel:
    """Build the chat model used for every completion request.

    Args:
        cfg: Agent configuration with provider, model name and credentials

    Returns:
        A configured LangChain chat model

    Raises:
        ConfigurationError: If the provider is unknown
    """
    provider = cfg.provider.lower().strip()

    if provider == "groq":
        from langchain_groq import ChatGroq

        logging.info("Building Groq chat model (model=%s)", cfg.model)
        return ChatGroq(
            model=cfg.model,
            temperature=COMPLETION_TEMPERATURE,
            groq_api_key=cfg.groq_api_key,
        )

    if provider == "ollama":
        from langchain_ollama import ChatOllama

        logging.info("Building ChatOllama (model=%s, base_url=%s)", cfg.model, cfg.ollama_base_url)
        return ChatOllama(
            model=cfg.model,
            temperature=COMPLETION_TEMPERATURE,
            base_url=cfg.ollama_base_url,
        )

    raise ConfigurationError(f"Unsupported provider: '{cfg.provider}'. Must be 'groq' or 'ollama'.")


__all__ = ["build_chat_model"]
