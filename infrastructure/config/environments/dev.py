"""Development environment configuration."""

import os

dev_config = {
    "account_id": os.environ.get("CDK_DEFAULT_ACCOUNT"),
    "region": "ap-northeast-2",
    "lambda_memory": 128,
    "setter_timeout": 60,
    "sweep_timeout": 900,
    # Retention of the Lambdas' own log groups
    "log_retention_days": 14,
    "log_level": "DEBUG",
    # Default applied to log groups without retention
    "default_log_retention_days": 14,
    "log_group_tags": {"ManagedBy": "default-log-retention", "Environment": "dev"},
    "metric_namespace": "LogRotation",
    "partition": "aws",
    "sweep_schedule": "rate(1 day)",
    "event_retry_attempts": 2,
    "tags": {
        "Environment": "dev",
        "Project": "DefaultLogRetention",
        "Owner": "PlatformTeam",
    },
}
