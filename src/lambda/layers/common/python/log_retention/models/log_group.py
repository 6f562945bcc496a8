"""Log group snapshot as read from DescribeLogGroups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

ARN_WILDCARD_SUFFIX = ":*"


def strip_arn_wildcard(arn: str) -> str:
    """Drop the trailing ``:*`` DescribeLogGroups appends; the tagging APIs reject it."""
    if arn.endswith(ARN_WILDCARD_SUFFIX):
        return arn[: -len(ARN_WILDCARD_SUFFIX)]
    return arn


@dataclass(frozen=True)
class LogGroupState:
    name: str
    arn: str
    retention_in_days: int = 0
    # None means the tags were not part of the snapshot and must be read
    tags: Optional[Mapping[str, str]] = None

    @property
    def resource_arn(self) -> str:
        return strip_arn_wildcard(self.arn)

    @property
    def has_retention(self) -> bool:
        return self.retention_in_days != 0

    @classmethod
    def from_describe(cls, item: Mapping[str, Any]) -> "LogGroupState":
        return cls(
            name=item["logGroupName"],
            arn=item["arn"],
            retention_in_days=int(item.get("retentionInDays") or 0),
        )


@dataclass(frozen=True)
class LogGroupPage:
    log_groups: List[LogGroupState]
    next_token: Optional[str] = None

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "LogGroupPage":
        groups = [LogGroupState.from_describe(item) for item in response.get("logGroups", [])]
        return cls(log_groups=groups, next_token=response.get("nextToken") or None)
