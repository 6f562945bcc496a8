"""Account-wide sweep: reconcile every log group and report one aggregate."""

from __future__ import annotations

from typing import Any, Dict, Optional

from log_retention.clients.logs import LogGroupClient, iter_log_groups
from log_retention.clients.metrics import MetricsPublisher
from log_retention.errors import OperationError, Severity
from log_retention.models.results import BatchResultBuilder
from log_retention.models.settings import RetentionConfig
from log_retention.retention.reconciler import reconcile
from log_retention.utils.logger import get_logger

logger = get_logger(__name__)


def reconcile_all(
    client: LogGroupClient,
    config: RetentionConfig,
    builder: BatchResultBuilder,
    prefix: Optional[str] = None,
) -> None:
    """Reconcile groups one at a time in listing order, folding outcomes into ``builder``.

    Per-group failures are collected and the sweep moves on. A failed page fetch
    is not a per-group failure and propagates.
    """
    for group in iter_log_groups(client, prefix):
        logger.debug(f"Working on {group.resource_arn}", extra={"log_group": group.name})
        try:
            outcome = reconcile(group, client, config)
        except OperationError as e:
            logger.error(f"Failure updating retention: {e}", extra={"log_group": group.name})
            builder.record_error(e)
            continue
        builder.record(outcome)


def sweep_all(
    client: LogGroupClient,
    metrics: MetricsPublisher,
    config: RetentionConfig,
    prefix: Optional[str] = None,
) -> Dict[str, Any]:
    """Sweep every log group, publish the five counters once, and summarise.

    Counters are published even when the listing itself fails part way.

    Raises:
        OperationError: ``ERROR`` severity listing every collected failure, so the
            caller retries the whole (idempotent) sweep.
    """
    builder = BatchResultBuilder()
    try:
        reconcile_all(client, config, builder, prefix)
    except OperationError:
        logger.error(f"Listing log groups failed after {builder.total} group(s)")
        raise
    finally:
        result = builder.build()
        metrics.publish(result.to_metrics())

    if result.succeeded:
        summary = result.to_summary()
        logger.info(
            "Success. "
            + ", ".join(f"{key}={value}" for key, value in summary.items() if key != "message")
        )
        return summary

    message = result.failure_message()
    logger.error(message)
    raise OperationError(message, Severity.ERROR)
