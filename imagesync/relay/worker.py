"""
Upload-notification relay worker.

The worker drains upload notices from the notification queue and publishes a
human-readable text for each one to the fanout topic. A message is deleted
only after its publish succeeded, so a crash between the two steps produces a
duplicate notification on redelivery rather than a lost one.
"""

import asyncio
import enum
from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from imagesync.core.errors import (
    BrokerUnavailable, DeleteFailure, DeserializationFailure, QueueUnavailable,
)
from imagesync.models.notice import QueueMessage, UploadNotice
from imagesync.publisher.base import NotificationFanout
from imagesync.queues.base import NotificationQueue
from imagesync.utils.metrics import RELAY_RECEIVE_FAILURES, record_relay_outcome

logger = structlog.get_logger(__name__)

DEFAULT_POLL_INTERVAL = 60.0
DEFAULT_BATCH_SIZE = 10
DEFAULT_WAIT_SECONDS = 5


class RelayOutcome(str, enum.Enum):
    """Result of relaying a single message."""
    PUBLISHED = "published"
    PUBLISHED_NOT_DELETED = "published_not_deleted"
    MALFORMED = "malformed"
    PUBLISH_FAILED = "publish_failed"
    ERROR = "error"


@dataclass
class TickResult:
    """Summary of one poll-and-process cycle."""

    polled_ok: bool = True
    outcomes: List[RelayOutcome] = field(default_factory=list)

    @property
    def received(self) -> int:
        return len(self.outcomes)

    @property
    def published(self) -> int:
        return sum(
            1 for o in self.outcomes
            if o in (RelayOutcome.PUBLISHED, RelayOutcome.PUBLISHED_NOT_DELETED)
        )

    @property
    def deleted(self) -> int:
        return self.outcomes.count(RelayOutcome.PUBLISHED)

    @property
    def failed(self) -> int:
        return sum(
            1 for o in self.outcomes
            if o in (RelayOutcome.MALFORMED, RelayOutcome.PUBLISH_FAILED, RelayOutcome.ERROR)
        )


class RelayWorker:
    """
    Polling loop relaying upload notices from a queue to a fanout topic.

    States: Idle -> Polling -> Processing(batch) -> Idle, until stopped. A stop
    request takes effect at the Idle -> Polling boundary, so a batch already
    being processed always completes its publish/delete pairs.
    """

    def __init__(
            self,
            queue: NotificationQueue,
            fanout: NotificationFanout,
            poll_interval: float = DEFAULT_POLL_INTERVAL,
            batch_size: int = DEFAULT_BATCH_SIZE,
            wait_seconds: int = DEFAULT_WAIT_SECONDS,
    ) -> None:
        """
        Initialize the relay worker.

        Args:
            queue: Queue the notices are received from
            fanout: Topic the formatted notices are published to
            poll_interval: Seconds between the start of consecutive idle periods
            batch_size: Maximum messages requested per receive (1-10)
            wait_seconds: Long-poll wait for each receive
        """
        self.queue = queue
        self.fanout = fanout
        self.poll_interval = poll_interval
        self.batch_size = max(1, min(batch_size, 10))
        self.wait_seconds = max(0, wait_seconds)
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def stop_requested(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()

    def stop(self) -> None:
        """Request a cooperative stop; the worker exits before its next poll."""
        logger.info("Relay stop requested")
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        self._stop_event.set()

    async def run(self) -> None:
        """Run ticks on a fixed interval until stop() is called."""
        if self._stop_event is None:
            self._stop_event = asyncio.Event()

        logger.info(
            "Relay worker started",
            poll_interval=self.poll_interval,
            batch_size=self.batch_size,
            wait_seconds=self.wait_seconds,
        )

        while not self._stop_event.is_set():
            try:
                await self.run_once()
            except Exception as e:
                RELAY_RECEIVE_FAILURES.inc()
                logger.exception("Relay tick failed", error=str(e))

            # Idle until the next tick or a stop request
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                pass

        logger.info("Relay worker stopped")

    async def run_once(self) -> TickResult:
        """
        Poll the queue once and process the received batch.

        Returns:
            Per-message outcomes of this tick
        """
        try:
            messages = await self.queue.receive_batch(self.batch_size, self.wait_seconds)
        except QueueUnavailable as e:
            RELAY_RECEIVE_FAILURES.inc()
            logger.error("Failed to receive notification batch", error=str(e))
            return TickResult(polled_ok=False)

        logger.info("Received notification batch", count=len(messages))

        result = TickResult()
        for message in messages:
            try:
                outcome = await self.process_message(message)
            except Exception as e:
                # One message must never abort the rest of the batch
                logger.exception("Unexpected error relaying message", message_id=message.id, error=str(e))
                outcome = RelayOutcome.ERROR

            record_relay_outcome(outcome.value)
            result.outcomes.append(outcome)

        if messages:
            logger.info(
                "Notification batch processed",
                received=result.received,
                published=result.published,
                deleted=result.deleted,
                failed=result.failed,
            )
        return result

    async def process_message(self, message: QueueMessage) -> RelayOutcome:
        """
        Relay a single message: parse, format, publish, then delete.

        Args:
            message: The received queue message

        Returns:
            The outcome of relaying the message
        """
        log = logger.bind(message_id=message.id)

        try:
            notice = UploadNotice.from_message_body(message.body)
        except DeserializationFailure as e:
            log.error("Malformed upload notice left on queue", error=str(e))
            return RelayOutcome.MALFORMED

        try:
            broker_message_id = await self.fanout.publish(notice.format_text())
        except BrokerUnavailable as e:
            log.error("Failed to publish upload notice", image=notice.name, error=str(e))
            return RelayOutcome.PUBLISH_FAILED

        log.info("Published upload notice", image=notice.name, broker_message_id=broker_message_id)

        try:
            await self.queue.delete_message(message.receipt_token)
        except DeleteFailure as e:
            log.warning(
                "Failed to delete relayed message; it may be delivered again",
                image=notice.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            return RelayOutcome.PUBLISHED_NOT_DELETED

        log.info("Deleted relayed message", image=notice.name)
        return RelayOutcome.PUBLISHED
