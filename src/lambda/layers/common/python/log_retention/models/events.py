"""Typed CloudTrail event models for the retention setter using Pydantic v2.

Only the fields needed to locate the created log group are modelled; anything
else in the EventBridge envelope is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class UserIdentity(_CamelModel):
    account_id: str


class CreateLogGroupParameters(_CamelModel):
    log_group_name: str

    @field_validator("log_group_name")
    @classmethod
    def _require_name(cls, v: str) -> str:  # type: ignore[override]
        if not v.strip():
            raise ValueError("logGroupName must not be empty")
        return v


class CloudTrailEventDetail(_CamelModel):
    aws_region: str
    user_identity: UserIdentity
    request_parameters: CreateLogGroupParameters


class LogGroupCreatedEvent(_CamelModel):
    """EventBridge envelope of a CloudTrail ``CreateLogGroup`` call."""

    detail: CloudTrailEventDetail

    @classmethod
    def build(cls, account_id: str, region: str, log_group_name: str) -> "LogGroupCreatedEvent":
        return cls.model_validate(
            {
                "detail": {
                    "awsRegion": region,
                    "userIdentity": {"accountId": account_id},
                    "requestParameters": {"logGroupName": log_group_name},
                }
            }
        )

    @property
    def account_id(self) -> str:
        return self.detail.user_identity.account_id

    @property
    def region(self) -> str:
        return self.detail.aws_region

    @property
    def log_group_name(self) -> str:
        return self.detail.request_parameters.log_group_name

    def log_group_arn(self, partition: str) -> str:
        """Rebuild the log group ARN; the notification only carries the bare name."""
        return f"arn:{partition}:logs:{self.region}:{self.account_id}:log-group:{self.log_group_name}"
