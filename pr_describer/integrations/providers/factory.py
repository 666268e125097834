"""
Provider Factory.

This module provides factory functions to create the appropriate
provider based on configuration using a simple mapping approach.
"""

from __future__ import annotations

import logging
from typing import Any

from pr_describer.core.config import config
from pr_describer.integrations.providers.base import BaseProvider
from pr_describer.integrations.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

# Provider mapping - canonical names to provider classes
PROVIDER_MAP: dict[str, type[BaseProvider]] = {
    "openai": OpenAIProvider,
}


def get_provider(
    provider: str | None = None,
    model: str | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
    agent: str | None = None,
    **kwargs: Any,
) -> BaseProvider:
    """
    Get the appropriate provider based on configuration.

    Args:
        provider: Provider name (openai)
        model: Model name/ID
        max_tokens: Maximum tokens to generate
        temperature: Sampling temperature
        agent: Agent name for per-agent configuration
        **kwargs: Additional provider-specific parameters

    Returns:
        Configured provider instance

    Raises:
        ValueError: If provider is not supported
    """
    provider_name = (provider or config.ai.provider or "openai").lower()

    provider_class = PROVIDER_MAP.get(provider_name)
    if not provider_class:
        supported = ", ".join(sorted(PROVIDER_MAP))
        raise ValueError(f"Unsupported provider: {provider_name}. Supported: {supported}")

    if not model:
        model = config.ai.get_model_for_provider(provider_name)

    # Precedence: explicit params > agent config > global config
    tokens = max_tokens if max_tokens is not None else config.ai.get_max_tokens_for_agent(agent)
    temp = temperature if temperature is not None else config.ai.get_temperature_for_agent(agent)

    provider_kwargs = kwargs.copy()
    if provider_class == OpenAIProvider:
        provider_kwargs.setdefault("api_key", config.ai.api_key)

    return provider_class(
        model=model,
        max_tokens=tokens,
        temperature=temp,
        **provider_kwargs,
    )


def get_chat_model(
    provider: str | None = None,
    model: str | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
    agent: str | None = None,
    **kwargs: Any,
) -> Any:
    """
    Get a chat model instance using the appropriate provider.

    This is a convenience function that creates a provider and returns its chat model.
    """
    provider_instance = get_provider(
        provider=provider,
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        agent=agent,
        **kwargs,
    )

    logger.info(f"Using {provider_instance.get_provider_name()} chat model {provider_instance.model}")
    return provider_instance.get_chat_model()
