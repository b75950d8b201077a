"""
Notification queue package.

This package provides the durable queue interface drained by the relay and
its Amazon SQS implementation.
"""

from imagesync.queues.base import NotificationQueue
from imagesync.queues.sqs import SqsNotificationQueue

__all__ = ["NotificationQueue", "SqsNotificationQueue"]
