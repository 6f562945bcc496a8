"""Models subpackage exposed via Common Layer."""

from .events import LogGroupCreatedEvent
from .log_group import LogGroupPage, LogGroupState, strip_arn_wildcard
from .results import BatchResult, BatchResultBuilder, Metric, MetricName, ReconciliationOutcome
from .settings import RetentionConfig

__all__ = [
    "LogGroupCreatedEvent",
    "LogGroupPage",
    "LogGroupState",
    "strip_arn_wildcard",
    "BatchResult",
    "BatchResultBuilder",
    "Metric",
    "MetricName",
    "ReconciliationOutcome",
    "RetentionConfig",
]
