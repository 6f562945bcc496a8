"""Production environment configuration."""

import os

prod_config = {
    "account_id": os.environ.get("CDK_DEFAULT_ACCOUNT"),
    "region": "ap-northeast-2",
    "lambda_memory": 256,
    "setter_timeout": 60,
    # Large accounts page through thousands of groups under API throttling
    "sweep_timeout": 900,
    "log_retention_days": 90,
    "log_level": "INFO",
    "default_log_retention_days": 90,
    "log_group_tags": {"ManagedBy": "default-log-retention", "Environment": "prod"},
    "metric_namespace": "LogRotation",
    # Set to "aws-cn" or "aws-us-gov" when deploying outside the commercial partition
    "partition": "aws",
    "sweep_schedule": "cron(0 3 * * ? *)",
    "event_retry_attempts": 2,
    "tags": {
        "Environment": "prod",
        "Project": "DefaultLogRetention",
        "Owner": "PlatformTeam",
    },
}
