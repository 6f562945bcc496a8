"""Typed configuration contract for environment-specific settings."""

from __future__ import annotations

from typing import Dict, NotRequired, Required, TypedDict


class EnvironmentConfig(TypedDict, total=False):
    """Strongly-typed environment configuration contract."""

    region: Required[str]
    account_id: NotRequired[str | None]

    lambda_memory: NotRequired[int]
    setter_timeout: NotRequired[int]
    sweep_timeout: NotRequired[int]
    log_retention_days: NotRequired[int]
    log_level: NotRequired[str]

    default_log_retention_days: NotRequired[int]
    log_group_tags: NotRequired[Dict[str, str]]
    metric_namespace: NotRequired[str]
    partition: NotRequired[str]
    sweep_schedule: NotRequired[str]
    event_retry_attempts: NotRequired[int]

    tags: NotRequired[Dict[str, str]]
