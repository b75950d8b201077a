"""
Base fanout publisher.

This module defines the abstract base class for pub/sub broadcasters that
deliver relay notices to every current subscriber.
"""

import abc
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Subscription:
    """A subscriber endpoint registered with the fanout topic."""

    endpoint: str
    protocol: str
    subscription_id: str

    @property
    def confirmed(self) -> bool:
        return self.subscription_id != "PendingConfirmation"


class NotificationFanout(abc.ABC):
    """Abstract base class for notification fanout brokers."""

    @abc.abstractmethod
    async def publish(self, text: str) -> str:
        """
        Deliver a text message to all current subscribers.

        Args:
            text: Message text

        Returns:
            Broker message ID

        Raises:
            BrokerUnavailable: If the broker did not accept the message
        """

    @abc.abstractmethod
    async def subscribe(self, endpoint: str, protocol: str = "email") -> str:
        """
        Register an endpoint as a subscriber.

        Args:
            endpoint: Subscriber address (e.g. an email address)
            protocol: Delivery protocol

        Returns:
            Subscription ID (may be pending until the subscriber confirms)

        Raises:
            BrokerUnavailable: If the broker rejected the request
        """

    @abc.abstractmethod
    async def unsubscribe(self, endpoint: str) -> bool:
        """
        Remove the subscription of an endpoint.

        Args:
            endpoint: Subscriber address

        Returns:
            Whether a confirmed subscription was found and removed

        Raises:
            BrokerUnavailable: If the broker rejected the request
        """

    @abc.abstractmethod
    async def list_subscriptions(self) -> List[Subscription]:
        """
        List the current subscriptions.

        Raises:
            BrokerUnavailable: If the broker rejected the request
        """
