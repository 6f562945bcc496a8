"""Retention setter Lambda: reacts to CloudTrail ``CreateLogGroup`` events.

EventBridge delivers the CloudTrail record; the handler applies the default
retention to the created log group unless it already has one or carries the
``retention`` override tag. Malformed events and groups deleted before they
could be described are reported as successful invocations so they do not
trigger alarms or retries.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import boto3

from log_retention.clients.logs import CloudWatchLogsClient, client_config
from log_retention.clients.metrics import CloudWatchMetricsPublisher
from log_retention.errors import OperationError
from log_retention.models.settings import RetentionConfig
from log_retention.retention.event import handle_creation_event, resolve_error
from log_retention.utils.logger import extract_correlation_id, get_logger


def main(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    log = get_logger(__name__, correlation_id=extract_correlation_id(event, context))
    log.debug(f"Received payload: {json.dumps(event, default=str)}")

    config = RetentionConfig.load()
    logs_client = CloudWatchLogsClient(boto3.client("logs", config=client_config()))
    metrics = CloudWatchMetricsPublisher(
        boto3.client("cloudwatch", config=client_config()),
        namespace=config.metric_namespace,
        dimensions={"function": config.function_name} if config.function_name else None,
    )

    try:
        return handle_creation_event(event, logs_client, metrics, config, context=context)
    except OperationError as error:
        return resolve_error(error)
