"""
OpenAI Provider implementation.
"""

from typing import Any

from langchain_openai import ChatOpenAI

from pr_describer.core.errors import ConfigurationError
from pr_describer.integrations.providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    """OpenAI Provider."""

    def get_chat_model(self) -> Any:
        """Get OpenAI chat model."""
        api_key = self.kwargs.get("api_key")
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set")

        return ChatOpenAI(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            api_key=api_key,
            **{k: v for k, v in self.kwargs.items() if k != "api_key"},
        )

    def get_provider_name(self) -> str:
        """Get provider name."""
        return "openai"
