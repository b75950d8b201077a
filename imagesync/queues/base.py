"""
Base notification queue.

This module defines the abstract base class for durable, at-least-once
notification queues.
"""

import abc
from typing import List

from imagesync.models.notice import QueueMessage


class NotificationQueue(abc.ABC):
    """Abstract base class for notification queues."""

    @abc.abstractmethod
    async def receive_batch(self, max_count: int, wait_seconds: int) -> List[QueueMessage]:
        """
        Receive up to ``max_count`` messages.

        Never blocks longer than ``wait_seconds`` waiting for messages to
        become available. Received messages stay on the queue until deleted.

        Args:
            max_count: Maximum number of messages to return
            wait_seconds: Long-poll wait in seconds

        Returns:
            Zero or more messages, each carrying a receipt token

        Raises:
            QueueUnavailable: If the queue cannot be reached
        """

    @abc.abstractmethod
    async def delete_message(self, receipt_token: str) -> None:
        """
        Acknowledge and remove a received message.

        Args:
            receipt_token: Token of the received message

        Raises:
            TokenExpired: If the token was already used or its visibility window lapsed
            DeleteFailure: If the queue rejected the delete for another reason
        """

    @abc.abstractmethod
    async def send_message(self, body: str) -> str:
        """
        Place a message on the queue.

        Args:
            body: Message body

        Returns:
            Message ID

        Raises:
            QueueUnavailable: If the queue cannot be reached
        """
