"""CloudWatch metrics publisher.

Metric loss must never fail the business operation: every failure is logged
and swallowed here.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, Sequence

import boto3

from log_retention.clients.logs import client_config
from log_retention.errors import TRANSPORT_ERRORS
from log_retention.models.results import Metric
from log_retention.utils.logger import get_logger

logger = get_logger(__name__)


class MetricsPublisher(Protocol):
    def publish(self, metrics: Sequence[Metric]) -> None: ...


class CloudWatchMetricsPublisher:
    def __init__(self, client: Any, namespace: str, dimensions: Optional[Dict[str, str]] = None) -> None:
        self._client = client
        self.namespace = namespace
        self.dimensions = dict(dimensions or {})

    @classmethod
    def create(
        cls, namespace: str, function_name: Optional[str] = None, region_name: Optional[str] = None
    ) -> "CloudWatchMetricsPublisher":
        dimensions = {"function": function_name} if function_name else None
        client = boto3.client("cloudwatch", region_name=region_name, config=client_config())
        return cls(client, namespace, dimensions)

    def _datum(self, metric: Metric, timestamp: datetime) -> Dict[str, Any]:
        datum: Dict[str, Any] = {
            "MetricName": metric.name.value,
            "Value": metric.value,
            "Unit": "Count",
            "Timestamp": timestamp,
        }
        if self.dimensions:
            datum["Dimensions"] = [{"Name": key, "Value": value} for key, value in self.dimensions.items()]
        return datum

    def publish(self, metrics: Sequence[Metric]) -> None:
        if not metrics:
            return
        now = datetime.now(timezone.utc)
        metric_data: List[Dict[str, Any]] = [self._datum(m, now) for m in metrics]
        try:
            self._client.put_metric_data(Namespace=self.namespace, MetricData=metric_data)
        except TRANSPORT_ERRORS as e:
            logger.error(f"Failed to publish metrics to {self.namespace}: {str(e)}")
            return
        logger.info(
            f"Published {len(metric_data)} metric(s) to {self.namespace}: "
            + ", ".join(f"{m.name.value}={m.value:g}" for m in metrics)
        )
