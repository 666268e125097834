from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventType(Enum):
    """Supported GitHub event types."""

    PING = "ping"
    PULL_REQUEST = "pull_request"


class WebhookEvent:
    """
    A representation of an incoming webhook event, as received from GitHub
    and before any processing work has been scheduled for it.
    """

    def __init__(self, event_name: str | None, payload: dict[str, Any], delivery_id: str | None = None):
        self.event_name = event_name
        self.payload = payload
        self.delivery_id = delivery_id
        repository = payload.get("repository")
        self.repository = repository if isinstance(repository, dict) else {}

    @property
    def event_type(self) -> EventType | None:
        """The normalized event type, or None for events we do not know about."""
        if not self.event_name:
            return None
        # Normalize event names such as deployment_review.requested
        try:
            return EventType(self.event_name.split(".")[0])
        except ValueError:
            return None

    @property
    def action(self) -> str | None:
        return self.payload.get("action")

    @property
    def repo_full_name(self) -> str:
        """The full name of the repository (e.g., 'owner/repo')."""
        full_name = self.repository.get("full_name")
        if full_name:
            return full_name
        owner = (self.repository.get("owner") or {}).get("login", "")
        name = self.repository.get("name", "")
        return f"{owner}/{name}" if owner and name else name


class ChangedFile(BaseModel):
    """A single file entry from the 'list pull request files' API."""

    model_config = ConfigDict(extra="ignore")

    filename: str
    status: str = Field("modified", description="added, removed, modified, renamed, ...")
    additions: int = Field(0, ge=0)
    deletions: int = Field(0, ge=0)
    changes: int = Field(0, ge=0)
    patch: str | None = Field(None, description="Unified diff text; absent for binary or very large files")
