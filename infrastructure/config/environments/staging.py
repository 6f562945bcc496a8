"""Staging environment configuration."""

import os

staging_config = {
    "account_id": os.environ.get("CDK_DEFAULT_ACCOUNT"),
    "region": "ap-northeast-2",
    "lambda_memory": 128,
    "setter_timeout": 60,
    "sweep_timeout": 900,
    "log_retention_days": 30,
    "log_level": "INFO",
    "default_log_retention_days": 30,
    "log_group_tags": {"ManagedBy": "default-log-retention", "Environment": "staging"},
    "metric_namespace": "LogRotation",
    "partition": "aws",
    "sweep_schedule": "rate(1 day)",
    "event_retry_attempts": 2,
    "tags": {
        "Environment": "staging",
        "Project": "DefaultLogRetention",
        "Owner": "PlatformTeam",
    },
}
