import structlog

from pr_describer.core.models import EventType, WebhookEvent
from pr_describer.tasks.task_queue import TaskQueue
from pr_describer.webhooks.deduplication import DeliveryDeduplicator
from pr_describer.webhooks.handlers.base import EventHandler
from pr_describer.webhooks.models import WebhookOutcome, WebhookResponse

logger = structlog.get_logger(__name__)


class WebhookDispatcher:
    """
    Admits authenticated webhook events and routes them to registered handlers.

    Owns the idempotency state for the process: a delivery id is remembered
    once its event has been accepted for processing, and later deliveries
    with the same id are acknowledged without doing the work again.
    """

    def __init__(self, deduplicator: DeliveryDeduplicator, queue: TaskQueue):
        self.deduplicator = deduplicator
        self.queue = queue
        # The registry maps an EventType to an instance of an EventHandler class
        self._handlers: dict[EventType, EventHandler] = {}

    def register_handler(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Registers a handler instance for a specific event type.

        Args:
            event_type: The EventType to handle (e.g., EventType.PULL_REQUEST).
            handler: An instance of a class that implements the EventHandler interface.
        """
        if event_type in self._handlers:
            logger.warning("handler_overridden", event_type=event_type.value)
        self._handlers[event_type] = handler
        logger.info("handler_registered", event_type=event_type.value, handler=handler.__class__.__name__)

    async def dispatch(self, event: WebhookEvent) -> WebhookResponse:
        """
        Decide the outcome for one delivery and schedule work if needed.

        Nothing between the duplicate check and remember() awaits, so two
        concurrent deliveries with the same id cannot both be accepted.
        """
        log = logger.bind(event_name=event.event_name, delivery_id=event.delivery_id, action=event.action)

        if event.delivery_id and self.deduplicator.seen(event.delivery_id):
            log.info("duplicate_delivery_skipped")
            return WebhookResponse(
                outcome=WebhookOutcome.DUPLICATE,
                status_code=200,
                detail="Duplicate delivery",
                event_type=event.event_name,
            )

        event_type = event.event_type
        if event_type is EventType.PING:
            log.info("ping_received")
            return WebhookResponse(
                outcome=WebhookOutcome.PONG, status_code=200, detail="pong", event_type=event.event_name
            )

        handler = self._handlers.get(event_type) if event_type else None
        if handler is None or not handler.can_handle(event):
            log.info("event_ignored")
            return WebhookResponse(
                outcome=WebhookOutcome.IGNORED,
                status_code=200,
                detail="Event received",
                event_type=event.event_name,
            )

        if event.delivery_id:
            self.deduplicator.remember(event.delivery_id)
        self.queue.enqueue(handler.handle, event_type.value, event, delivery_id=event.delivery_id)
        log.info("event_accepted", handler=handler.__class__.__name__)
        return WebhookResponse(
            outcome=WebhookOutcome.ACCEPTED, status_code=202, detail="Accepted", event_type=event.event_name
        )
