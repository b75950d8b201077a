"""
Amazon SNS fanout publisher.

This module provides the fanout implementation for an SNS topic. The boto3
client is synchronous, so calls run in the default executor.
"""

import asyncio
from typing import Any, List

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from imagesync.core.errors import BrokerUnavailable
from imagesync.publisher.base import NotificationFanout, Subscription

logger = structlog.get_logger(__name__)


class SnsNotificationFanout(NotificationFanout):
    """Fanout publisher for an Amazon SNS topic."""

    def __init__(self, sns_client: Any, topic_arn: str) -> None:
        """
        Initialize the SNS publisher.

        Args:
            sns_client: boto3 SNS client
            topic_arn: ARN of the notification topic
        """
        self.sns_client = sns_client
        self.topic_arn = topic_arn

    async def _call(self, operation: str, **kwargs: Any) -> Any:
        loop = asyncio.get_event_loop()
        method = getattr(self.sns_client, operation)
        try:
            return await loop.run_in_executor(None, lambda: method(**kwargs))
        except (ClientError, BotoCoreError) as e:
            raise BrokerUnavailable(f"SNS {operation} failed: {str(e)}") from e

    async def publish(self, text: str) -> str:
        response = await self._call("publish", TopicArn=self.topic_arn, Message=text)
        return response["MessageId"]

    async def subscribe(self, endpoint: str, protocol: str = "email") -> str:
        response = await self._call(
            "subscribe",
            TopicArn=self.topic_arn,
            Protocol=protocol,
            Endpoint=endpoint,
            ReturnSubscriptionArn=False,
        )
        subscription_id = response.get("SubscriptionArn", "PendingConfirmation")
        logger.info("Subscription requested", endpoint=endpoint, protocol=protocol)
        return subscription_id

    async def unsubscribe(self, endpoint: str) -> bool:
        for subscription in await self.list_subscriptions():
            if subscription.endpoint != endpoint:
                continue
            if not subscription.confirmed:
                logger.warning("Subscription not confirmed yet, cannot remove", endpoint=endpoint)
                return False

            await self._call("unsubscribe", SubscriptionArn=subscription.subscription_id)
            logger.info("Subscription removed", endpoint=endpoint)
            return True

        return False

    def _list_all(self) -> List[Subscription]:
        paginator = self.sns_client.get_paginator("list_subscriptions_by_topic")
        return [
            Subscription(
                endpoint=raw["Endpoint"],
                protocol=raw["Protocol"],
                subscription_id=raw["SubscriptionArn"],
            )
            for page in paginator.paginate(TopicArn=self.topic_arn)
            for raw in page.get("Subscriptions", [])
        ]

    async def list_subscriptions(self) -> List[Subscription]:
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, self._list_all)
        except (ClientError, BotoCoreError) as e:
            raise BrokerUnavailable(f"SNS list_subscriptions_by_topic failed: {str(e)}") from e
