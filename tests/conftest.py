"""
Shared fixtures for signing webhook payloads the way GitHub does.
"""

import hashlib
import hmac
import json
from collections.abc import Callable

import pytest

from pr_describer.core.config import config

TEST_WEBHOOK_SECRET = "test-secret"


def sign(body: bytes, secret: str = TEST_WEBHOOK_SECRET) -> str:
    """Compute the X-Hub-Signature-256 header value for a body."""
    return "sha256=" + hmac.new(secret.encode(), msg=body, digestmod=hashlib.sha256).hexdigest()


@pytest.fixture
def webhook_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    """Configure a known webhook secret for the duration of a test."""
    monkeypatch.setattr(config.github, "webhook_secret", TEST_WEBHOOK_SECRET)
    return TEST_WEBHOOK_SECRET


@pytest.fixture
def signed_request() -> Callable[..., tuple[bytes, dict[str, str]]]:
    """Build a (body, headers) pair for a webhook delivery with a valid signature."""

    def _build(
        payload: dict[str, object], event: str, delivery_id: str | None = None
    ) -> tuple[bytes, dict[str, str]]:
        body = json.dumps(payload).encode()
        headers = {
            "X-GitHub-Event": event,
            "X-Hub-Signature-256": sign(body),
            "Content-Type": "application/json",
        }
        if delivery_id:
            headers["X-GitHub-Delivery"] = delivery_id
        return body, headers

    return _build


@pytest.fixture
def pr_opened_payload() -> dict[str, object]:
    """Minimal pull_request.opened payload."""
    return {
        "action": "opened",
        "number": 42,
        "pull_request": {"number": 42, "title": "Add retry logic", "user": {"login": "octocat"}},
        "repository": {"name": "hello-world", "full_name": "octocat/hello-world", "owner": {"login": "octocat"}},
        "installation": {"id": 123},
    }
