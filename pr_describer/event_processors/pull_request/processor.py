import logging
from typing import Any

from pydantic import BaseModel

from pr_describer.agents.description_agent import PRDescriptionAgent
from pr_describer.core.config import config
from pr_describer.core.utils.logging import log_operation
from pr_describer.event_processors.pull_request.summarizer import DiffSummarizer
from pr_describer.integrations.github import GitHubClient, github_client
from pr_describer.webhooks.models import PullRequestEventModel

logger = logging.getLogger(__name__)


class ProcessingResult(BaseModel):
    """Result of drafting a description for one pull request."""

    repo_full_name: str
    pr_number: int
    summary_chars: int
    description_updated: bool


class PullRequestProcessor:
    """
    Drafts and publishes the description of a newly opened pull request.

    Lists the PR's changed files, summarizes them, asks the description agent
    for a description, and writes it back as the PR body.
    """

    def __init__(
        self,
        github: GitHubClient | None = None,
        description_agent: PRDescriptionAgent | None = None,
        summarizer: DiffSummarizer | None = None,
    ):
        self.github_client = github or github_client
        self.description_agent = description_agent or PRDescriptionAgent()
        self.summarizer = summarizer or DiffSummarizer(
            max_summary_chars=config.summary.max_summary_chars,
            max_patch_per_file=config.summary.max_patch_per_file,
        )

    async def process(self, payload: dict[str, Any]) -> ProcessingResult:
        """
        Run the summarize, describe, update sequence for a pull_request.opened payload.

        Raises:
            pydantic.ValidationError: If the payload lacks required fields.
            ValueError: If the payload has no installation id.
            GitHubApiError: If the changed files cannot be listed.
        """
        event = PullRequestEventModel.model_validate(payload)
        if event.installation is None:
            raise ValueError("Installation ID is missing from the payload")

        owner = event.repository.owner.login
        repo = event.repository.name
        pr_number = event.pull_request.number
        installation_id = event.installation.id

        async with log_operation("pr_description", repo=f"{owner}/{repo}", pr_number=pr_number):
            pages = self.github_client.iter_pull_request_files(
                owner, repo, pr_number, installation_id, per_page=config.summary.files_per_page
            )
            summary = await self.summarizer.summarize(pr_number, owner, repo, pages)

            description = await self.description_agent.generate(summary)

            updated = await self.github_client.update_pull_request_body(
                owner, repo, pr_number, description, installation_id
            )
            if not updated:
                logger.warning(f"Description for PR #{pr_number} in {owner}/{repo} was not saved")

        return ProcessingResult(
            repo_full_name=f"{owner}/{repo}",
            pr_number=pr_number,
            summary_chars=len(summary),
            description_updated=updated,
        )
