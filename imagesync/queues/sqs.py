"""
Amazon SQS notification queue.

This module provides the notification queue implementation for an SQS queue.
The boto3 client is synchronous, so calls run in the default executor.
"""

import asyncio
from typing import Any, List

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from imagesync.core.errors import DeleteFailure, QueueUnavailable, TokenExpired
from imagesync.models.notice import QueueMessage
from imagesync.queues.base import NotificationQueue

logger = structlog.get_logger(__name__)

# SQS accepts between 1 and 10 messages per receive and at most 20 seconds of long polling
MAX_BATCH_SIZE = 10
MAX_WAIT_SECONDS = 20

_EXPIRED_TOKEN_CODES = {
    "ReceiptHandleIsInvalid",
    "AWS.SimpleQueueService.ReceiptHandleIsInvalid",
    "InvalidParameterValue",
}


class SqsNotificationQueue(NotificationQueue):
    """Notification queue backed by Amazon SQS."""

    def __init__(self, sqs_client: Any, queue_url: str) -> None:
        """
        Initialize the SQS queue.

        Args:
            sqs_client: boto3 SQS client
            queue_url: URL of the queue
        """
        self.sqs_client = sqs_client
        self.queue_url = queue_url

    async def receive_batch(self, max_count: int, wait_seconds: int) -> List[QueueMessage]:
        loop = asyncio.get_event_loop()
        try:
            response = await loop.run_in_executor(
                None,
                lambda: self.sqs_client.receive_message(
                    QueueUrl=self.queue_url,
                    MaxNumberOfMessages=max(1, min(max_count, MAX_BATCH_SIZE)),
                    WaitTimeSeconds=max(0, min(wait_seconds, MAX_WAIT_SECONDS)),
                )
            )
        except (ClientError, BotoCoreError) as e:
            raise QueueUnavailable(f"Failed to receive from SQS: {str(e)}") from e

        return [
            QueueMessage(
                id=raw["MessageId"],
                receipt_token=raw["ReceiptHandle"],
                body=raw.get("Body", ""),
            )
            for raw in response.get("Messages", [])
        ]

    async def delete_message(self, receipt_token: str) -> None:
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(
                None,
                lambda: self.sqs_client.delete_message(
                    QueueUrl=self.queue_url,
                    ReceiptHandle=receipt_token,
                )
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in _EXPIRED_TOKEN_CODES:
                raise TokenExpired(f"Receipt handle rejected: {code}", receipt_token) from e
            raise DeleteFailure(f"Failed to delete SQS message: {str(e)}", receipt_token) from e
        except BotoCoreError as e:
            raise DeleteFailure(f"Failed to delete SQS message: {str(e)}", receipt_token) from e

    async def send_message(self, body: str) -> str:
        loop = asyncio.get_event_loop()
        try:
            response = await loop.run_in_executor(
                None,
                lambda: self.sqs_client.send_message(QueueUrl=self.queue_url, MessageBody=body)
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to send message to SQS", error=str(e))
            raise QueueUnavailable(f"Failed to send to SQS: {str(e)}") from e

        message_id = response["MessageId"]
        logger.info("Message sent", queue_url=self.queue_url, message_id=message_id)
        return message_id
