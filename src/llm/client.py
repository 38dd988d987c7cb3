"""
LLM client factory

Creates the chat model behind the generation backend based on provider
configuration.
"""

from typing import Optional
from loguru import logger

from src.config.settings import settings, is_backend_configured


def log_provider_status() -> None:
    """Log which provider is configured (key masked)."""
    provider = settings.llm_provider.lower()
    if provider == "openai":
        if is_backend_configured():
            key = settings.openai_api_key
            masked_key = key[:8] + "..." + key[-4:] if len(key) > 12 else "***"
            logger.info(f"✅ LLM Provider: OpenAI | Model: {settings.openai_model} | API key loaded: {masked_key}")
        else:
            logger.warning("⚠️  LLM Provider: OpenAI but OPENAI_API_KEY not set - the assistant will report a configuration error")
    elif provider == "ollama":
        logger.info(f"✅ LLM Provider: Ollama | Base URL: {settings.ollama_base_url} | Model: {settings.ollama_model}")
    else:
        logger.warning(f"⚠️  Unknown LLM provider: {settings.llm_provider}. Supported: 'openai', 'ollama'")


def create_llm(
    temperature: Optional[float] = None,
    max_completion_tokens: Optional[int] = None,
    model: Optional[str] = None,
):
    """
    Factory function to create appropriate LLM based on provider configuration.

    Args:
        temperature: Generation temperature (defaults to settings.assistant_temperature)
        max_completion_tokens: Max tokens for completion (defaults to settings.max_output_tokens)
        model: Model name (defaults to provider-specific model)

    Returns:
        LangChain ChatModel instance (ChatOpenAI or ChatOllama)
    """
    provider = settings.llm_provider.lower()
    max_tokens = max_completion_tokens or settings.max_output_tokens
    temperature = temperature if temperature is not None else settings.assistant_temperature

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER=openai")

        return ChatOpenAI(
            model=model or settings.openai_model,
            api_key=settings.openai_api_key,
            temperature=temperature,
            max_completion_tokens=max_tokens,
        )

    elif provider == "ollama":
        from langchain_community.chat_models import ChatOllama

        return ChatOllama(
            model=model or settings.ollama_model,
            base_url=settings.ollama_base_url,
            temperature=temperature,
            num_predict=max_tokens,  # Ollama uses num_predict instead of max_completion_tokens
        )

    else:
        raise ValueError(f"Unsupported LLM provider: {provider}. Supported: 'openai', 'ollama'")
