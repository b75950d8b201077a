"""
Publisher package for broadcasting notifications to subscribers.

This package provides the fanout interface used by the relay and its
Amazon SNS implementation.
"""

from imagesync.publisher.base import NotificationFanout, Subscription
from imagesync.publisher.sns import SnsNotificationFanout

__all__ = ["NotificationFanout", "SnsNotificationFanout", "Subscription"]
