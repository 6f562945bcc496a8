"""Event-driven path: fix the retention of a single newly created log group."""

from __future__ import annotations

import json
from typing import Any, Dict, Tuple

from pydantic import ValidationError

from log_retention.clients.logs import LogGroupClient, find_log_group
from log_retention.clients.metrics import MetricsPublisher
from log_retention.errors import OperationError
from log_retention.models.events import LogGroupCreatedEvent
from log_retention.models.results import Metric, MetricName, ReconciliationOutcome
from log_retention.models.settings import RetentionConfig
from log_retention.retention.reconciler import exemption_tag, set_default_retention
from log_retention.utils.logger import get_logger

logger = get_logger(__name__)


def _describe_context(context: Any) -> str:
    if context is None:
        return "None"
    request_id = getattr(context, "aws_request_id", None)
    function_name = getattr(context, "function_name", None)
    if request_id or function_name:
        return f"request_id={request_id}, function_name={function_name}"
    return repr(context)


def parse_event(payload: Any, context: Any = None) -> LogGroupCreatedEvent:
    """Parse a CloudTrail ``CreateLogGroup`` notification.

    Malformed or unrelated payloads are expected noise (for instance a caller that
    lacked permission to create the group), so they surface as warnings carrying
    the raw payload for troubleshooting.
    """
    try:
        return LogGroupCreatedEvent.model_validate(payload)
    except ValidationError as e:
        raise OperationError.warning(
            "Error deserializing input payload. "
            f"Payload: `{json.dumps(payload, default=str)}`. "
            f"Context: `{_describe_context(context)}`. "
            f"Error: `{e}`."
        ) from e


def get_existing_retention(log_group_name: str, client: LogGroupClient) -> int:
    """Current retention of the named group, 0 when none is set."""
    group = find_log_group(client, log_group_name)
    if group is None:
        raise OperationError.warning(
            f"Did not find log group named {log_group_name}. Maybe it was deleted immediately after creation?",
            resource=log_group_name,
        )
    return group.retention_in_days


def _process(
    event: LogGroupCreatedEvent, client: LogGroupClient, config: RetentionConfig
) -> Tuple[ReconciliationOutcome, str]:
    name = event.log_group_name

    existing_retention = get_existing_retention(name, client)
    if existing_retention != 0:
        message = f"Not setting retention for {name} because it is set to {existing_retention} days already."
        logger.info(message, extra={"log_group": name})
        return ReconciliationOutcome.ALREADY_HAS_RETENTION, message

    log_group_arn = event.log_group_arn(config.partition)
    override = exemption_tag(client.list_tags(log_group_arn), config)
    if override is not None:
        message = (
            f"Not setting retention for {name} because tag `{config.override_tag_key}`=`{override}` exists on it."
        )
        logger.info(message, extra={"log_group": name})
        return ReconciliationOutcome.ALREADY_TAGGED_FOR_EXEMPTION, message

    set_default_retention(name, log_group_arn, client, config)
    logger.info(f"Retention set successfully for {name}", extra={"log_group": name})
    return ReconciliationOutcome.UPDATED, "Retention set successfully"


def handle_creation_event(
    payload: Any,
    client: LogGroupClient,
    metrics: MetricsPublisher,
    config: RetentionConfig,
    context: Any = None,
) -> Dict[str, Any]:
    """Reconcile the log group named in a creation event and emit one counter.

    Raises:
        OperationError: ``WARNING`` for malformed events or a vanished group,
            ``ERROR`` for log service failures (an ``Errored`` counter is emitted).
    """
    event = parse_event(payload, context)
    try:
        outcome, message = _process(event, client, config)
    except OperationError as e:
        if not e.is_warning:
            metrics.publish([Metric.count(MetricName.ERRORED)])
        raise

    metrics.publish([Metric.count(MetricName.for_outcome(outcome))])
    return {"message": message}


def resolve_error(error: OperationError) -> Dict[str, Any]:
    """Turn a warning into a successful response; re-raise anything else."""
    if error.is_warning:
        logger.warning(f"WARN in Lambda function: {error}")
        return error.to_dict()
    logger.error(f"ERROR in Lambda function: {error}")
    raise error
