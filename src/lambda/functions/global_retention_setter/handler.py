"""Global retention setter Lambda: scheduled sweep over every log group.

Any log group without retention and without the ``retention`` override tag gets
the default retention. Per-group failures do not stop the sweep but fail the
invocation at the end so the schedule retries the whole (idempotent) pass.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import boto3

from log_retention.clients.logs import CloudWatchLogsClient, client_config
from log_retention.clients.metrics import CloudWatchMetricsPublisher
from log_retention.errors import OperationError
from log_retention.models.settings import RetentionConfig
from log_retention.retention.sweep import sweep_all
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
        return sweep_all(logs_client, metrics, config)
    except OperationError as error:
        log.error(f"ERROR in Lambda function: {error}")
        raise
