"""AWS client facades used by the retention engine.

Each facade exposes only the operations the engine needs so tests can swap in
in-memory fakes without emulating the full boto3 surface.
"""

from __future__ import annotations

from .logs import (
    CloudWatchLogsClient,
    DryRunLogGroupClient,
    LogGroupClient,
    find_log_group,
    iter_log_group_pages,
    iter_log_groups,
)
from .metrics import CloudWatchMetricsPublisher, MetricsPublisher

__all__ = [
    "CloudWatchLogsClient",
    "DryRunLogGroupClient",
    "LogGroupClient",
    "find_log_group",
    "iter_log_group_pages",
    "iter_log_groups",
    "CloudWatchMetricsPublisher",
    "MetricsPublisher",
]
