from functools import lru_cache

import structlog

from pr_describer.core.models import EventType, WebhookEvent
from pr_describer.event_processors.pull_request.processor import ProcessingResult, PullRequestProcessor
from pr_describer.webhooks.handlers.base import EventHandler

logger = structlog.get_logger()

PROCESSED_ACTIONS = frozenset({"opened"})


# Instantiate processor once (singleton-like) but lazily
@lru_cache(maxsize=1)
def get_pr_processor() -> PullRequestProcessor:
    return PullRequestProcessor()


class PullRequestEventHandler(EventHandler):
    """Thin handler for pull request webhook events—delegates to the PR processor."""

    def __init__(self, processor: PullRequestProcessor | None = None):
        self._processor = processor

    @property
    def processor(self) -> PullRequestProcessor:
        if self._processor is None:
            self._processor = get_pr_processor()
        return self._processor

    def can_handle(self, event: WebhookEvent) -> bool:
        action = event.action
        return event.event_type is EventType.PULL_REQUEST and isinstance(action, str) and action in PROCESSED_ACTIONS

    async def handle(self, event: WebhookEvent) -> ProcessingResult:
        log = logger.bind(
            event_type="pull_request",
            repo=event.repo_full_name,
            pr_number=(event.payload.get("pull_request") or {}).get("number"),
            action=event.action,
            delivery_id=event.delivery_id,
        )
        log.info("pr_handler_invoked")
        return await self.processor.process(event.payload)
