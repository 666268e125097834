"""
Provider integrations for model services.

The main entry point is the factory functions:
- get_provider() - Get a provider instance
- get_chat_model() - Get a ready-to-use chat model
"""

from pr_describer.integrations.providers.factory import get_chat_model, get_provider

__all__ = [
    "get_provider",
    "get_chat_model",
]
