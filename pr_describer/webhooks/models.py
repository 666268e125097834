from enum import Enum

from pydantic import BaseModel, Field


class RepositoryOwner(BaseModel):
    """Owner of the repository the event belongs to."""

    login: str = Field(..., description="User or organization login")


class WebhookRepository(BaseModel):
    """GitHub repository metadata from webhook payload."""

    name: str = Field(..., description="Repository name (without owner)")
    owner: RepositoryOwner = Field(..., description="Repository owner")
    full_name: str | None = Field(None, description="Owner/repo format")


class PullRequestInfo(BaseModel):
    """The subset of the pull request object we rely on."""

    number: int = Field(..., description="Pull request number")
    title: str | None = Field(None, description="Pull request title")


class WebhookInstallation(BaseModel):
    """GitHub App installation that received the event."""

    id: int = Field(..., description="Installation ID used to mint access tokens")


class PullRequestEventModel(BaseModel):
    """Payload of a pull_request webhook event."""

    action: str = Field(..., description="Event action type (e.g., 'opened', 'closed')")
    pull_request: PullRequestInfo
    repository: WebhookRepository
    installation: WebhookInstallation | None = None


class WebhookOutcome(str, Enum):
    """Terminal states of webhook admission."""

    PONG = "pong"
    DUPLICATE = "duplicate"
    ACCEPTED = "accepted"
    IGNORED = "ignored"


class WebhookResponse(BaseModel):
    """Standardized result of admitting one webhook delivery."""

    outcome: WebhookOutcome = Field(..., description="Terminal admission state")
    status_code: int = Field(200, description="HTTP status returned to GitHub")
    detail: str = Field(..., description="Plain-text acknowledgment body")
    event_type: str | None = Field(None, description="Raw X-GitHub-Event value")
