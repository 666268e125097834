"""
Chat model provider interface.

The description agent asks a provider for a langchain chat model; each
provider knows how to build one from the configured model and sampling
settings.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseProvider(ABC):
    """Builds chat models for one LLM vendor."""

    def __init__(self, model: str, max_tokens: int = 256, temperature: float = 0.7, **kwargs: Any) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.kwargs = kwargs

    @abstractmethod
    def get_chat_model(self) -> Any:
        """Return a chat model that supports ``ainvoke``."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Canonical provider name, as used in AI_PROVIDER."""
