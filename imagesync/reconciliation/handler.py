"""
Scheduled and command-line triggers for the consistency audit.

``lambda_handler`` is invoked by a scheduler event; ``main`` backs the
``imagesync-audit`` command. Both build the engine for a single audit and
release the catalog connection pool afterwards.
"""

import argparse
import asyncio
import sys
from typing import Any, Dict, Mapping, Optional, Sequence

import structlog

from imagesync.core.config import Settings, settings
from imagesync.core.dependencies import create_reconciliation_engine
from imagesync.core.errors import StoreUnavailable
from imagesync.db.session import dispose_engine
from imagesync.models.report import ReconciliationReport
from imagesync.utils.logging import configure_logging

logger = structlog.get_logger(__name__)

UNKNOWN_SOURCE = "Unknown"
CLI_SOURCE = "cli"


def source_from_event(event: Optional[Mapping[str, Any]]) -> str:
    """
    Extract the trigger label from a scheduler event.

    Args:
        event: The invocation event, if any

    Returns:
        The event's ``detail-type`` (or ``DetailType``), or ``"Unknown"``
    """
    if not event:
        return UNKNOWN_SOURCE
    return event.get("detail-type") or event.get("DetailType") or UNKNOWN_SOURCE


async def run_audit(source: str, app_settings: Settings = settings) -> ReconciliationReport:
    """
    Build an engine, run one audit and dispose of the catalog engine.

    Args:
        source: Label of the audit trigger
        app_settings: Settings the collaborators are built from

    Returns:
        The reconciliation report

    Raises:
        StoreUnavailable: If either store could not be read
    """
    engine, db_engine = create_reconciliation_engine(app_settings)
    try:
        return await engine.audit(source)
    finally:
        await dispose_engine(db_engine)


def lambda_handler(event: Optional[Dict[str, Any]], context: Any) -> Dict[str, Any]:
    """
    Entry point for scheduled audits.

    A store failure propagates so the invocation is reported as failed.

    Args:
        event: Scheduler event
        context: Runtime context (unused)

    Returns:
        Response with status code 200 and the report JSON as body
    """
    configure_logging(log_level=settings.LOG_LEVEL)
    source = source_from_event(event)
    logger.info("Scheduled consistency audit invoked", source=source)

    report = asyncio.run(run_audit(source))

    return {"statusCode": 200, "body": report.model_dump_json()}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run one audit from the command line and print the report as JSON.

    Args:
        argv: Command-line arguments, defaults to ``sys.argv[1:]``

    Returns:
        Exit status: 0 when the audit ran, 1 when a store was unavailable
    """
    parser = argparse.ArgumentParser(
        prog="imagesync-audit",
        description="Compare the image catalog with the blob store.",
    )
    parser.add_argument(
        "--source",
        default=CLI_SOURCE,
        help="Label describing what triggered the audit (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    # Keep stdout for the report
    configure_logging(log_level=settings.LOG_LEVEL, stream=sys.stderr)

    try:
        report = asyncio.run(run_audit(args.source))
    except StoreUnavailable as e:
        logger.error("Consistency audit could not run", store=e.store, error=str(e))
        return 1

    print(report.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
