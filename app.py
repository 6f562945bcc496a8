#!/usr/bin/env python3
"""
Default Log Retention CDK App
Applies a default retention policy to CloudWatch log groups on creation and on a schedule.
"""

import aws_cdk as cdk

from infrastructure.stacks.log_retention_stack import LogRetentionStack

# Configuration
from infrastructure.config.environments import get_environment_config

app = cdk.App()

# Get environment configuration
environment = app.node.try_get_context("environment") or "dev"
config = get_environment_config(environment)

# CDK environment (account/region)
cdk_env = cdk.Environment(account=config.get("account_id"), region=config.get("region", "ap-northeast-2"))

log_retention_stack = LogRetentionStack(
    app,
    f"DefaultLogRetention-{environment}",
    environment=environment,
    config=config,
    env=cdk_env,
)

# ========================================
# TAGGING STRATEGY
# ========================================

for key, value in config.get("tags", {}).items():
    cdk.Tags.of(app).add(key, value)
cdk.Tags.of(app).add("ManagedBy", "CDK")

app.synth()
