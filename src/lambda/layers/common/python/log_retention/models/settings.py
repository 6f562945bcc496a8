"""Environment settings for the retention Lambdas provided via Common Layer."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

DEFAULT_RETENTION_DAYS = 30
DEFAULT_METRIC_NAMESPACE = "LogRotation"
DEFAULT_PARTITION = "aws"

# Presence of this tag key (any value) exempts a log group from management
OVERRIDE_TAG_KEY = "retention"
# Marks groups whose retention this tool set; must never collide with OVERRIDE_TAG_KEY
PROVENANCE_TAG_KEY = "retention-set-by"
PROVENANCE_TAG = {PROVENANCE_TAG_KEY: "default-log-retention"}


@dataclass(frozen=True)
class RetentionConfig:
    default_retention_days: int = DEFAULT_RETENTION_DAYS
    provenance_tags: Mapping[str, str] = field(default_factory=dict)
    metric_namespace: str = DEFAULT_METRIC_NAMESPACE
    partition: str = DEFAULT_PARTITION
    function_name: Optional[str] = None
    override_tag_key: str = OVERRIDE_TAG_KEY

    @property
    def tags_to_apply(self) -> Dict[str, str]:
        """Configured tags merged with the fixed provenance tag, which wins on key clashes."""
        return {**self.provenance_tags, **PROVENANCE_TAG}

    @staticmethod
    def load(environ: Optional[Mapping[str, str]] = None) -> "RetentionConfig":
        env = os.environ if environ is None else environ
        return RetentionConfig(
            default_retention_days=_parse_retention(env.get("LOG_RETENTION_IN_DAYS")),
            provenance_tags=_parse_tags(env.get("LOG_GROUP_TAGS")),
            metric_namespace=env.get("METRIC_NAMESPACE") or DEFAULT_METRIC_NAMESPACE,
            partition=env.get("AWS_PARTITION") or DEFAULT_PARTITION,
            function_name=env.get("AWS_LAMBDA_FUNCTION_NAME") or None,
        )


def _parse_retention(raw: Optional[str]) -> int:
    try:
        days = int(str(raw).strip())
    except (TypeError, ValueError):
        return DEFAULT_RETENTION_DAYS
    return days if days > 0 else DEFAULT_RETENTION_DAYS


def _parse_tags(raw: Optional[str]) -> Dict[str, str]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except ValueError:
        return {}
    if not isinstance(parsed, dict):
        return {}
    return {str(k): str(v) for k, v in parsed.items()}
