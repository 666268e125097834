import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from pr_describer.core.models import WebhookEvent
from pr_describer.webhooks.auth import verify_github_signature
from pr_describer.webhooks.dispatcher import WebhookDispatcher

logger = structlog.get_logger()
router = APIRouter()


# Dependency provider for the dispatcher instance owned by the application.
# Tests build their own app with a fresh dispatcher on app.state.
def get_dispatcher(request: Request) -> WebhookDispatcher:
    """Returns the WebhookDispatcher attached to the running application."""
    return request.app.state.dispatcher


def _create_event_from_request(request: Request, payload: dict) -> WebhookEvent:
    """Factory function to create a WebhookEvent from raw request data."""
    return WebhookEvent(
        event_name=request.headers.get("X-GitHub-Event"),
        payload=payload,
        delivery_id=request.headers.get("X-GitHub-Delivery"),
    )


@router.post("", summary="Endpoint for all GitHub webhooks", response_class=PlainTextResponse)
async def github_webhook_endpoint(
    request: Request,
    is_verified: bool = Depends(verify_github_signature),
    dispatcher_instance: WebhookDispatcher = Depends(get_dispatcher),
) -> PlainTextResponse:
    """
    This endpoint receives all events from a configured GitHub App.

    - The signature dependency rejects unauthenticated requests with 401.
    - Redeliveries of an already accepted event are acknowledged with 200.
    - pull_request.opened is accepted with 202 and processed in the background,
      so GitHub never waits on the language model or the GitHub API.
    """
    # The 'is_verified' dependency handles raising an error on failure,
    # so we don't need to check its return value here.

    try:
        payload = await request.json()
    except ValueError as e:
        logger.warning("webhook_invalid_json", error=str(e))
        raise HTTPException(status_code=400, detail="Invalid JSON payload") from e
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    event = _create_event_from_request(request, payload)
    logger.info("webhook_received", event_name=event.event_name, delivery_id=event.delivery_id)

    result = await dispatcher_instance.dispatch(event)
    return PlainTextResponse(result.detail, status_code=result.status_code)
