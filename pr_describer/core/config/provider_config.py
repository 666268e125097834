"""
Provider configuration.
"""

from dataclasses import dataclass
from typing import cast


@dataclass
class AgentConfig:
    """Per-agent configuration."""

    max_tokens: int = 256
    temperature: float = 0.7


@dataclass
class ProviderConfig:
    """Provider configuration."""

    api_key: str
    provider: str = "openai"
    max_tokens: int = 256
    temperature: float = 0.7
    openai_model: str | None = None
    # Per-agent configurations
    description_agent: AgentConfig | None = None

    def get_model_for_provider(self, provider: str) -> str:
        """Get the appropriate model for the given provider with fallbacks."""
        if provider.lower() == "openai":
            return self.openai_model or "gpt-3.5-turbo"
        return "gpt-3.5-turbo"

    def get_max_tokens_for_agent(self, agent: str | None = None) -> int:
        """Get max tokens for agent with fallback to global config."""
        if agent and hasattr(self, agent):
            agent_config = getattr(self, agent)
            if isinstance(agent_config, AgentConfig):
                return int(cast("int", agent_config.max_tokens))
        return int(self.max_tokens)

    def get_temperature_for_agent(self, agent: str | None = None) -> float:
        """Get temperature for agent with fallback to global config."""
        if agent and hasattr(self, agent):
            agent_config = getattr(self, agent)
            if isinstance(agent_config, AgentConfig):
                return float(cast("float", agent_config.temperature))
        return float(self.temperature)
