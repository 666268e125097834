import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pr_describer.core.config import config
from pr_describer.core.errors import ConfigurationError
from pr_describer.core.models import EventType
from pr_describer.core.utils.logging import configure_logging
from pr_describer.integrations.github import github_client
from pr_describer.tasks.task_queue import TaskQueue
from pr_describer.webhooks.deduplication import DeliveryDeduplicator
from pr_describer.webhooks.dispatcher import WebhookDispatcher
from pr_describer.webhooks.handlers.pull_request import PullRequestEventHandler
from pr_describer.webhooks.router import router as webhook_router

logger = logging.getLogger(__name__)


def build_dispatcher() -> WebhookDispatcher:
    """Create the dispatcher with its idempotency state and register event handlers."""
    dispatcher = WebhookDispatcher(
        deduplicator=DeliveryDeduplicator(max_size=config.webhook.max_delivery_ids),
        queue=TaskQueue(),
    )
    dispatcher.register_handler(EventType.PULL_REQUEST, PullRequestEventHandler())
    return dispatcher


# --- Application Lifecycle ---


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown logic."""
    logger.info("PR Describer starting up...")
    try:
        config.validate()
    except ConfigurationError as e:
        # Missing settings fail the request paths that need them, not startup
        logger.warning(f"{e}")

    yield

    logger.info("PR Describer shutting down...")
    await app.state.dispatcher.queue.shutdown()
    await github_client.close()


def create_app(dispatcher: WebhookDispatcher | None = None) -> FastAPI:
    """Application factory. Tests pass their own dispatcher."""
    app = FastAPI(
        title="PR Describer",
        description="Drafts pull request descriptions from GitHub webhooks.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.dispatcher = dispatcher or build_dispatcher()

    # --- Include Routers ---

    app.include_router(webhook_router, prefix="/webhook", tags=["GitHub Webhooks"])

    # --- Health Check Endpoints ---

    @app.get("/", tags=["Health Check"])
    async def read_root():
        """A simple health check endpoint to confirm the service is running."""
        return {"status": "ok", "message": "PR Describer is running."}

    @app.get("/health/tasks", tags=["Health Check"])
    async def health_tasks():
        """Check the status of background tasks."""
        return {
            "task_queue_status": "running",
            "tasks": app.state.dispatcher.queue.stats(),
            "remembered_deliveries": len(app.state.dispatcher.deduplicator),
        }

    return app


# --- Application Setup ---

configure_logging(config.logging)

app = create_app()
