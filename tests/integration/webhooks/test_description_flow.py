from collections.abc import AsyncIterator, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from pr_describer.core.errors import GitHubApiError
from pr_describer.core.models import ChangedFile, EventType
from pr_describer.event_processors.pull_request.processor import PullRequestProcessor
from pr_describer.event_processors.pull_request.summarizer import DiffSummarizer
from pr_describer.main import create_app
from pr_describer.tasks.task_queue import TaskQueue, TaskStatus
from pr_describer.webhooks.deduplication import DeliveryDeduplicator
from pr_describer.webhooks.dispatcher import WebhookDispatcher
from pr_describer.webhooks.handlers.pull_request import PullRequestEventHandler

SignedRequest = Callable[..., tuple[bytes, dict[str, str]]]


@pytest.fixture
def github() -> MagicMock:
    async def iter_files(*args, **kwargs) -> AsyncIterator[list[ChangedFile]]:
        yield [
            ChangedFile(filename="src/retry.py", status="added", additions=40, changes=40, patch="+" + "r" * 1000),
            ChangedFile(filename="README.md", status="modified", additions=2, deletions=1, changes=3, patch="+docs"),
        ]

    client = MagicMock()
    client.iter_pull_request_files = MagicMock(side_effect=iter_files)
    client.update_pull_request_body = AsyncMock(return_value=True)
    return client


@pytest.fixture
def description_agent() -> MagicMock:
    agent = MagicMock()
    agent.generate = AsyncMock(return_value="Adds a retry helper and documents it.")
    return agent


@pytest.fixture
def dispatcher(github: MagicMock, description_agent: MagicMock) -> WebhookDispatcher:
    processor = PullRequestProcessor(github=github, description_agent=description_agent, summarizer=DiffSummarizer())
    dispatcher = WebhookDispatcher(deduplicator=DeliveryDeduplicator(), queue=TaskQueue())
    dispatcher.register_handler(EventType.PULL_REQUEST, PullRequestEventHandler(processor=processor))
    return dispatcher


@pytest.fixture
def app(dispatcher: WebhookDispatcher, webhook_secret: str) -> FastAPI:
    return create_app(dispatcher=dispatcher)


class TestDescriptionFlowIntegration:
    """Integration tests for Router -> Dispatcher -> TaskQueue -> Processor."""

    @pytest.mark.asyncio
    async def test_end_to_end_pr_description(
        self,
        app: FastAPI,
        dispatcher: WebhookDispatcher,
        github: MagicMock,
        description_agent: MagicMock,
        pr_opened_payload: dict[str, object],
        signed_request: SignedRequest,
    ) -> None:
        body, headers = signed_request(pr_opened_payload, "pull_request", "72d3162e-cc78-11e3-81ab-4c9367dc0958")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/webhook", content=body, headers=headers)
        await dispatcher.queue.join()

        assert response.status_code == 202
        summary = description_agent.generate.await_args.args[0]
        assert summary.startswith("PR #42 in octocat/hello-world\n")
        assert "file: src/retry.py" in summary
        assert "\n... truncated ...\n" in summary
        assert "patch:\n+docs\n" in summary
        github.update_pull_request_body.assert_awaited_once_with(
            "octocat", "hello-world", 42, "Adds a retry helper and documents it.", 123
        )

    @pytest.mark.asyncio
    async def test_downstream_failure_is_logged_not_surfaced(
        self,
        app: FastAPI,
        dispatcher: WebhookDispatcher,
        github: MagicMock,
        description_agent: MagicMock,
        pr_opened_payload: dict[str, object],
        signed_request: SignedRequest,
    ) -> None:
        async def failing_files(*args, **kwargs) -> AsyncIterator[list[ChangedFile]]:
            raise GitHubApiError("Failed to list files", status=502)
            yield []  # pragma: no cover

        github.iter_pull_request_files.side_effect = failing_files
        body, headers = signed_request(pr_opened_payload, "pull_request", "d-fail")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/webhook", content=body, headers=headers)
        await dispatcher.queue.join()

        assert response.status_code == 202
        [task] = dispatcher.queue.tasks.values()
        assert task.status is TaskStatus.FAILED
        description_agent.generate.assert_not_called()
        github.update_pull_request_body.assert_not_called()

    @pytest.mark.asyncio
    async def test_health_endpoints(self, app: FastAPI) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            root = await client.get("/")
            tasks = await client.get("/health/tasks")

        assert root.json()["status"] == "ok"
        assert tasks.status_code == 200
        assert tasks.json()["tasks"]["total"] == 0
        assert tasks.json()["remembered_deliveries"] == 0
