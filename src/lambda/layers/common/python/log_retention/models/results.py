"""Per-group outcomes, sweep aggregates and the metric names derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from log_retention.errors import OperationError


class ReconciliationOutcome(str, Enum):
    ALREADY_HAS_RETENTION = "AlreadyHasRetention"
    ALREADY_TAGGED_FOR_EXEMPTION = "AlreadyTaggedForExemption"
    UPDATED = "Updated"


class MetricName(str, Enum):
    """Metric names shared by both Lambdas so dashboards line up."""

    TOTAL = "Total"
    UPDATED = "Updated"
    ALREADY_HAS_RETENTION = "AlreadyHasRetention"
    ALREADY_TAGGED_WITH_RETENTION = "AlreadyTaggedWithRetention"
    ERRORED = "Errored"

    @classmethod
    def for_outcome(cls, outcome: ReconciliationOutcome) -> "MetricName":
        return _OUTCOME_METRICS[outcome]


_OUTCOME_METRICS = {
    ReconciliationOutcome.ALREADY_HAS_RETENTION: MetricName.ALREADY_HAS_RETENTION,
    ReconciliationOutcome.ALREADY_TAGGED_FOR_EXEMPTION: MetricName.ALREADY_TAGGED_WITH_RETENTION,
    ReconciliationOutcome.UPDATED: MetricName.UPDATED,
}


@dataclass(frozen=True)
class Metric:
    name: MetricName
    value: float

    @classmethod
    def count(cls, name: MetricName, value: int = 1) -> "Metric":
        return cls(name=name, value=float(value))


@dataclass(frozen=True)
class BatchResult:
    total: int = 0
    updated: int = 0
    already_has_retention: int = 0
    already_tagged_for_exemption: int = 0
    errors: Tuple[OperationError, ...] = ()

    @property
    def errored(self) -> int:
        return len(self.errors)

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def to_metrics(self) -> List[Metric]:
        return [
            Metric.count(MetricName.TOTAL, self.total),
            Metric.count(MetricName.UPDATED, self.updated),
            Metric.count(MetricName.ALREADY_HAS_RETENTION, self.already_has_retention),
            Metric.count(MetricName.ALREADY_TAGGED_WITH_RETENTION, self.already_tagged_for_exemption),
            Metric.count(MetricName.ERRORED, self.errored),
        ]

    def to_summary(self) -> Dict[str, Any]:
        return {
            "message": "Success",
            "totalGroups": self.total,
            "updated": self.updated,
            "alreadyHasRetention": self.already_has_retention,
            "alreadyTaggedWithRetention": self.already_tagged_for_exemption,
        }

    def failure_message(self) -> str:
        details = "; ".join(str(error) for error in self.errors)
        return f"Failed to update retention for {self.errored} of {self.total} log group(s): [{details}]"


@dataclass
class BatchResultBuilder:
    """Running accumulator for a sweep; ``build()`` freezes it into a BatchResult."""

    counts: Dict[ReconciliationOutcome, int] = field(default_factory=lambda: {o: 0 for o in ReconciliationOutcome})
    errors: List[OperationError] = field(default_factory=list)

    def record(self, outcome: ReconciliationOutcome) -> None:
        self.counts[outcome] += 1

    def record_error(self, error: OperationError) -> None:
        self.errors.append(error)

    @property
    def total(self) -> int:
        return sum(self.counts.values()) + len(self.errors)

    def build(self) -> BatchResult:
        return BatchResult(
            total=self.total,
            updated=self.counts[ReconciliationOutcome.UPDATED],
            already_has_retention=self.counts[ReconciliationOutcome.ALREADY_HAS_RETENTION],
            already_tagged_for_exemption=self.counts[ReconciliationOutcome.ALREADY_TAGGED_FOR_EXEMPTION],
            errors=tuple(self.errors),
        )
