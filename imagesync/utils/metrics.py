"""
Metrics utilities for the Image Store Sync service.

This module provides the Prometheus collectors for the consistency audit and
the notification relay, and the endpoint that exposes them.
"""

import structlog
from fastapi import FastAPI
from prometheus_client import (
    CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, Histogram,
    generate_latest,
)
from starlette.responses import Response

logger = structlog.get_logger(__name__)

custom_registry = CollectorRegistry()

# System metrics
SYSTEM_INFO = Gauge(
    "system_info",
    "Information about the Image Store Sync service",
    ["version", "environment"],
    registry=custom_registry
)

# HTTP metrics
REQUEST_COUNT = Counter(
    "api_requests_total",
    "Total count of API requests",
    ["method", "endpoint", "status"],
    registry=custom_registry
)
REQUEST_LATENCY = Histogram(
    "api_request_latency_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
    registry=custom_registry
)

# Consistency audit metrics
AUDITS = Counter(
    "consistency_audits_total",
    "Total number of consistency audits",
    ["result"],
    registry=custom_registry
)
AUDIT_TIME = Histogram(
    "consistency_audit_time_seconds",
    "Consistency audit duration in seconds",
    registry=custom_registry
)
AUDIT_DIFFERENCES = Gauge(
    "consistency_audit_differences",
    "Number of differences found by the last audit",
    ["kind"],
    registry=custom_registry
)

# Relay metrics
RELAY_MESSAGES = Counter(
    "relay_messages_total",
    "Total number of notification messages handled by the relay",
    ["outcome"],
    registry=custom_registry
)
RELAY_RECEIVE_FAILURES = Counter(
    "relay_receive_failures_total",
    "Total number of failed queue receives",
    registry=custom_registry
)


def setup_metrics_endpoint(app: FastAPI) -> None:
    """
    Set up the metrics endpoint for Prometheus scraping.

    Args:
        app: FastAPI application
    """

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Expose Prometheus metrics."""
        return Response(
            content=generate_latest(custom_registry),
            media_type=CONTENT_TYPE_LATEST,
        )

    from imagesync.core.config import settings

    SYSTEM_INFO.labels(
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    ).set(1)

    logger.info("Metrics endpoint configured at /metrics")


def record_audit(consistent: bool, missing: int, extra: int, duration: float) -> None:
    """
    Record a completed consistency audit.

    Args:
        consistent: Whether the stores agreed
        missing: Number of catalog names without a blob
        extra: Number of blobs without a catalog entry
        duration: Audit duration in seconds
    """
    AUDITS.labels(result="consistent" if consistent else "inconsistent").inc()
    AUDIT_TIME.observe(duration)
    AUDIT_DIFFERENCES.labels(kind="missing_in_blob_store").set(missing)
    AUDIT_DIFFERENCES.labels(kind="extra_in_blob_store").set(extra)


def record_audit_failure() -> None:
    """Record an audit that failed because a store was unavailable."""
    AUDITS.labels(result="unavailable").inc()


def record_relay_outcome(outcome: str) -> None:
    """
    Record the outcome of relaying a single message.

    Args:
        outcome: RelayOutcome value
    """
    RELAY_MESSAGES.labels(outcome=outcome).inc()
