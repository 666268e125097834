import hashlib
import hmac
from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from pr_describer.core.config import config
from pr_describer.core.models import EventType
from pr_describer.main import create_app
from pr_describer.tasks.task_queue import TaskQueue
from pr_describer.webhooks.deduplication import DeliveryDeduplicator
from pr_describer.webhooks.dispatcher import WebhookDispatcher
from pr_describer.webhooks.handlers.pull_request import PullRequestEventHandler

SignedRequest = Callable[..., tuple[bytes, dict[str, str]]]


@pytest.fixture
def processor() -> MagicMock:
    processor = MagicMock()
    processor.process = AsyncMock(return_value=None)
    return processor


@pytest.fixture
def dispatcher(processor: MagicMock) -> WebhookDispatcher:
    dispatcher = WebhookDispatcher(deduplicator=DeliveryDeduplicator(), queue=TaskQueue())
    dispatcher.register_handler(EventType.PULL_REQUEST, PullRequestEventHandler(processor=processor))
    return dispatcher


@pytest.fixture
def app(dispatcher: WebhookDispatcher, webhook_secret: str) -> FastAPI:
    """Create FastAPI test app with a fresh dispatcher and a known secret."""
    return create_app(dispatcher=dispatcher)


async def _post(app: FastAPI, body: bytes, headers: dict[str, str]):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.post("/webhook", content=body, headers=headers)


class TestWebhookRouter:
    """Test webhook router endpoint."""

    @pytest.mark.asyncio
    async def test_missing_signature_rejected(self, app: FastAPI, processor: MagicMock) -> None:
        response = await _post(app, b"{}", {"X-GitHub-Event": "ping", "Content-Type": "application/json"})

        assert response.status_code == 401
        assert response.json()["detail"] == "No signature found"
        processor.process.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_signature_rejected_regardless_of_payload(
        self, app: FastAPI, pr_opened_payload: dict[str, object], signed_request: SignedRequest
    ) -> None:
        body, headers = signed_request(pr_opened_payload, "pull_request", "d-1")
        del headers["X-Hub-Signature-256"]

        response = await _post(app, body, headers)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_signature_rejected(self, app: FastAPI, signed_request: SignedRequest) -> None:
        body, headers = signed_request({"zen": "Design for failure."}, "ping")

        response = await _post(app, body + b" ", headers)

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid signature"

    @pytest.mark.asyncio
    async def test_ping_returns_pong(self, app: FastAPI, signed_request: SignedRequest) -> None:
        body, headers = signed_request({"zen": "Practicality beats purity."}, "ping", "d-ping")

        response = await _post(app, body, headers)

        assert response.status_code == 200
        assert response.text == "pong"

    @pytest.mark.asyncio
    async def test_pr_opened_accepted(
        self,
        app: FastAPI,
        dispatcher: WebhookDispatcher,
        processor: MagicMock,
        pr_opened_payload: dict[str, object],
        signed_request: SignedRequest,
    ) -> None:
        body, headers = signed_request(pr_opened_payload, "pull_request", "d-1")

        response = await _post(app, body, headers)
        await dispatcher.queue.join()

        assert response.status_code == 202
        assert response.text == "Accepted"
        processor.process.assert_awaited_once_with(pr_opened_payload)

    @pytest.mark.asyncio
    async def test_redelivered_pr_opened_is_duplicate(
        self,
        app: FastAPI,
        dispatcher: WebhookDispatcher,
        processor: MagicMock,
        pr_opened_payload: dict[str, object],
        signed_request: SignedRequest,
    ) -> None:
        body, headers = signed_request(pr_opened_payload, "pull_request", "d-1")

        first = await _post(app, body, headers)
        second = await _post(app, body, headers)
        await dispatcher.queue.join()

        assert first.status_code == 202
        assert second.status_code == 200
        assert second.text == "Duplicate delivery"
        assert processor.process.await_count == 1

    @pytest.mark.asyncio
    async def test_already_remembered_delivery_is_duplicate(
        self,
        app: FastAPI,
        dispatcher: WebhookDispatcher,
        processor: MagicMock,
        pr_opened_payload: dict[str, object],
        signed_request: SignedRequest,
    ) -> None:
        dispatcher.deduplicator.remember("d-known")
        body, headers = signed_request(pr_opened_payload, "pull_request", "d-known")

        response = await _post(app, body, headers)
        await dispatcher.queue.join()

        assert response.status_code == 200
        assert response.text == "Duplicate delivery"
        processor.process.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("event", "payload"),
        [
            ("push", {"ref": "refs/heads/main"}),
            ("issues", {"action": "opened"}),
            ("pull_request", {"action": "closed", "pull_request": {"number": 1}}),
        ],
    )
    async def test_other_events_acknowledged(
        self,
        app: FastAPI,
        processor: MagicMock,
        signed_request: SignedRequest,
        event: str,
        payload: dict[str, object],
    ) -> None:
        body, headers = signed_request(payload, event, "d-other")

        response = await _post(app, body, headers)

        assert response.status_code == 200
        assert response.text == "Event received"
        processor.process.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("event", "payload"),
        [
            ("pull_request", {"action": ["opened"]}),
            ("issues", {"action": "opened", "installation": 5}),
        ],
    )
    async def test_malformed_payload_shapes_acknowledged(
        self,
        app: FastAPI,
        processor: MagicMock,
        signed_request: SignedRequest,
        event: str,
        payload: dict[str, object],
    ) -> None:
        body, headers = signed_request(payload, event, "d-odd")

        response = await _post(app, body, headers)

        assert response.status_code == 200
        assert response.text == "Event received"
        processor.process.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_json_rejected_after_authentication(self, app: FastAPI, webhook_secret: str) -> None:
        body = b"not json"
        digest = hmac.new(webhook_secret.encode(), msg=body, digestmod=hashlib.sha256).hexdigest()
        headers = {"X-GitHub-Event": "ping", "X-Hub-Signature-256": f"sha256={digest}"}

        response = await _post(app, body, headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid JSON payload"

    @pytest.mark.asyncio
    async def test_missing_secret_fails_request_path(
        self, app: FastAPI, monkeypatch: pytest.MonkeyPatch, signed_request: SignedRequest
    ) -> None:
        monkeypatch.setattr(config.github, "webhook_secret", "")
        body, headers = signed_request({}, "ping")

        response = await _post(app, body, headers)

        assert response.status_code == 500
