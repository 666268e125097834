from abc import ABC, abstractmethod
from typing import Any

from pr_describer.core.models import WebhookEvent


class EventHandler(ABC):
    """
    Abstract base class for all webhook event handlers.

    Handlers are thin: can_handle() decides on the request path whether an
    event is actionable, handle() runs later in the background and delegates
    to event_processors.
    """

    @abstractmethod
    def can_handle(self, event: WebhookEvent) -> bool:
        """Return True if this event should trigger background processing."""
        pass

    @abstractmethod
    async def handle(self, event: WebhookEvent) -> Any:
        """
        Process the incoming webhook event.

        Args:
            event: The verified and parsed WebhookEvent object.
        """
        pass
