"""Default log retention stack: event-driven setter plus scheduled sweep."""

from __future__ import annotations

import json
from typing import Dict, List

from aws_cdk import (
    CfnOutput,
    Duration,
    Stack,
    aws_events as events,
    aws_events_targets as targets,
    aws_iam as iam,
    aws_lambda as lambda_,
    aws_logs as logs,
)
from aws_cdk.aws_lambda_python_alpha import BundlingOptions, PythonFunction, PythonLayerVersion
from constructs import Construct

from infrastructure.config.types import EnvironmentConfig

LOG_ACTIONS: List[str] = [
    "logs:DescribeLogGroups",
    "logs:ListTagsForResource",
    "logs:ListTagsLogGroup",
    "logs:PutRetentionPolicy",
    "logs:TagResource",
    "logs:TagLogGroup",
]


class LogRetentionStack(Stack):
    """Provision both retention Lambdas, their triggers and permissions."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        config: EnvironmentConfig,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.env_name = environment
        self.config = config

        retention_days = int(self.config.get("default_log_retention_days", 30))
        if retention_days <= 0:
            raise ValueError("default_log_retention_days must be a positive number of days")

        self.common_layer = self._create_common_layer()

        self.retention_setter = self._create_function(
            "RetentionSetter",
            function_name=f"{self.env_name}-log-retention-setter",
            entry="src/lambda/functions/retention_setter",
            timeout=Duration.seconds(int(self.config.get("setter_timeout", 60))),
        )
        self.global_retention_setter = self._create_function(
            "GlobalRetentionSetter",
            function_name=f"{self.env_name}-global-log-retention-setter",
            entry="src/lambda/functions/global_retention_setter",
            timeout=Duration.seconds(int(self.config.get("sweep_timeout", 900))),
        )

        self.creation_rule = self._create_log_group_created_rule()
        self.sweep_schedule = self._create_sweep_schedule()
        self._create_outputs()

    def _function_environment(self) -> Dict[str, str]:
        return {
            "ENVIRONMENT": self.env_name,
            "LOG_RETENTION_IN_DAYS": str(int(self.config.get("default_log_retention_days", 30))),
            "LOG_GROUP_TAGS": json.dumps(self.config.get("log_group_tags", {})),
            "METRIC_NAMESPACE": str(self.config.get("metric_namespace", "LogRotation")),
            "AWS_PARTITION": str(self.config.get("partition", "aws")),
            "LOG_LEVEL": str(self.config.get("log_level", "INFO")),
        }

    def _create_function(
        self, construct_id: str, *, function_name: str, entry: str, timeout: Duration
    ) -> lambda_.IFunction:
        function = PythonFunction(
            self,
            construct_id,
            function_name=function_name,
            runtime=lambda_.Runtime.PYTHON_3_12,
            entry=entry,
            index="handler.py",
            handler="main",
            memory_size=int(self.config.get("lambda_memory", 128)),
            timeout=timeout,
            log_retention=self._log_retention(),
            layers=[self.common_layer],
            environment=self._function_environment(),
        )
        function.add_to_role_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                actions=LOG_ACTIONS,
                resources=["*"],
            )
        )
        function.add_to_role_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                actions=["cloudwatch:PutMetricData"],
                resources=["*"],
                conditions={
                    "StringEquals": {"cloudwatch:namespace": str(self.config.get("metric_namespace", "LogRotation"))}
                },
            )
        )
        return function

    def _create_common_layer(self) -> lambda_.ILayerVersion:
        """Create Common Layer with the retention engine and its pydantic dependency."""
        return PythonLayerVersion(
            self,
            "CommonLayer",
            entry="src/lambda/layers/common",
            layer_version_name=f"{self.env_name}-log-retention-common-layer",
            description="Default log retention engine and AWS facades",
            compatible_runtimes=[lambda_.Runtime.PYTHON_3_12],
            bundling=BundlingOptions(
                command=[
                    "bash",
                    "-c",
                    "set -euxo pipefail; "
                    "mkdir -p /asset-output/python; "
                    "cp -R /asset-input/python/. /asset-output/python/; "
                    "if [ -f requirements.txt ]; then pip install -q -r requirements.txt -t /asset-output/python; fi",
                ],
                asset_excludes=["tests", "__pycache__", "*.pyc"],
            ),
        )

    def _create_log_group_created_rule(self) -> events.Rule:
        """Route CloudTrail CreateLogGroup calls to the retention setter."""
        rule = events.Rule(
            self,
            "LogGroupCreatedRule",
            rule_name=f"{self.env_name}-log-group-created",
            event_pattern=events.EventPattern(
                source=["aws.logs"],
                detail_type=["AWS API Call via CloudTrail"],
                detail={
                    "eventSource": ["logs.amazonaws.com"],
                    "eventName": ["CreateLogGroup"],
                },
            ),
        )
        rule.add_target(
            targets.LambdaFunction(
                self.retention_setter,
                retry_attempts=int(self.config.get("event_retry_attempts", 2)),
            )
        )
        return rule

    def _create_sweep_schedule(self) -> events.Rule:
        """Create scheduled trigger for the account-wide sweep."""
        rule = events.Rule(
            self,
            "GlobalRetentionSchedule",
            rule_name=f"{self.env_name}-global-log-retention-schedule",
            schedule=events.Schedule.expression(str(self.config.get("sweep_schedule", "rate(1 day)"))),
        )
        rule.add_target(targets.LambdaFunction(self.global_retention_setter))
        return rule

    def _create_outputs(self) -> None:
        CfnOutput(
            self,
            "RetentionSetterArn",
            value=self.retention_setter.function_arn,
            description="Event-driven log retention setter function ARN",
        )
        CfnOutput(
            self,
            "GlobalRetentionSetterArn",
            value=self.global_retention_setter.function_arn,
            description="Scheduled log retention sweep function ARN",
        )

    def _log_retention(self) -> logs.RetentionDays:
        retention_map = {
            1: logs.RetentionDays.ONE_DAY,
            3: logs.RetentionDays.THREE_DAYS,
            5: logs.RetentionDays.FIVE_DAYS,
            7: logs.RetentionDays.ONE_WEEK,
            14: logs.RetentionDays.TWO_WEEKS,
            30: logs.RetentionDays.ONE_MONTH,
            90: logs.RetentionDays.THREE_MONTHS,
        }
        return retention_map.get(self.config.get("log_retention_days", 14), logs.RetentionDays.TWO_WEEKS)
