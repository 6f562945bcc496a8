"""CloudWatch Logs facade used by the reconciler.

``LogGroupClient`` is the capability set the engine depends on. Production code
wraps a boto3 ``logs`` client in ``CloudWatchLogsClient``; tests supply fakes.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional, Protocol

import boto3
from botocore.config import Config

from log_retention.errors import TRANSPORT_ERRORS, OperationError
from log_retention.models.log_group import LogGroupPage, LogGroupState
from log_retention.utils.logger import get_logger

logger = get_logger(__name__)

def client_config() -> Config:
    """Retry settings for every boto3 client built here.

    Account-level API rate limits make throttling routine during a sweep. A new
    ``Config`` per client, since botocore normalises ``retries`` in place.
    """
    return Config(retries={"mode": "adaptive", "max_attempts": 10})


class LogGroupClient(Protocol):
    def describe_log_groups(
        self, prefix: Optional[str] = None, next_token: Optional[str] = None
    ) -> LogGroupPage: ...

    def list_tags(self, resource_arn: str) -> Dict[str, str]: ...

    def put_retention_policy(self, log_group_name: str, retention_in_days: int) -> None: ...

    def tag_resource(self, resource_arn: str, tags: Mapping[str, str]) -> None: ...


class CloudWatchLogsClient:
    """Thin adapter translating boto3 failures into ``OperationError``."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def create(cls, region_name: Optional[str] = None) -> "CloudWatchLogsClient":
        return cls(boto3.client("logs", region_name=region_name, config=client_config()))

    def describe_log_groups(self, prefix: Optional[str] = None, next_token: Optional[str] = None) -> LogGroupPage:
        kwargs: Dict[str, Any] = {}
        if prefix:
            kwargs["logGroupNamePrefix"] = prefix
        if next_token:
            kwargs["nextToken"] = next_token
        try:
            response = self._client.describe_log_groups(**kwargs)
        except TRANSPORT_ERRORS as exc:
            raise OperationError.from_boto(exc, resource=prefix) from exc
        return LogGroupPage.from_response(response)

    def iter_pages(self, prefix: Optional[str] = None) -> Iterator[LogGroupPage]:
        """Walk the listing with the boto3 paginator, one page per request."""
        kwargs: Dict[str, Any] = {}
        if prefix:
            kwargs["logGroupNamePrefix"] = prefix
        paginator = self._client.get_paginator("describe_log_groups")
        try:
            for response in paginator.paginate(**kwargs):
                yield LogGroupPage.from_response(response)
        except TRANSPORT_ERRORS as exc:
            raise OperationError.from_boto(exc, resource=prefix) from exc

    def list_tags(self, resource_arn: str) -> Dict[str, str]:
        try:
            response = self._client.list_tags_for_resource(resourceArn=resource_arn)
        except TRANSPORT_ERRORS as exc:
            raise OperationError.from_boto(exc, resource=resource_arn) from exc
        return dict(response.get("tags") or {})

    def put_retention_policy(self, log_group_name: str, retention_in_days: int) -> None:
        try:
            self._client.put_retention_policy(logGroupName=log_group_name, retentionInDays=retention_in_days)
        except TRANSPORT_ERRORS as exc:
            raise OperationError.from_boto(exc, resource=log_group_name) from exc

    def tag_resource(self, resource_arn: str, tags: Mapping[str, str]) -> None:
        try:
            self._client.tag_resource(resourceArn=resource_arn, tags=dict(tags))
        except TRANSPORT_ERRORS as exc:
            raise OperationError.from_boto(exc, resource=resource_arn) from exc


class DryRunLogGroupClient:
    """Delegates reads, logs writes instead of performing them.

    ``skipped_writes`` counts the writes withheld, for the end-of-run report.
    """

    def __init__(self, delegate: LogGroupClient) -> None:
        self._delegate = delegate
        self.skipped_writes = 0

    def describe_log_groups(self, prefix: Optional[str] = None, next_token: Optional[str] = None) -> LogGroupPage:
        return self._delegate.describe_log_groups(prefix, next_token)

    def iter_pages(self, prefix: Optional[str] = None) -> Iterator[LogGroupPage]:
        return iter_log_group_pages(self._delegate, prefix)

    def list_tags(self, resource_arn: str) -> Dict[str, str]:
        return self._delegate.list_tags(resource_arn)

    def put_retention_policy(self, log_group_name: str, retention_in_days: int) -> None:
        self.skipped_writes += 1
        logger.info(
            f"[dry-run] Would set retention of {retention_in_days} days on {log_group_name}",
            extra={"log_group": log_group_name},
        )

    def tag_resource(self, resource_arn: str, tags: Mapping[str, str]) -> None:
        self.skipped_writes += 1
        logger.info(f"[dry-run] Would tag {resource_arn} with {dict(tags)}")


def iter_log_group_pages(client: LogGroupClient, prefix: Optional[str] = None) -> Iterator[LogGroupPage]:
    """Lazily yield every page of the listing.

    Clients exposing ``iter_pages`` page themselves. Otherwise the first request
    carries no token and a page without a token is the last one.
    """
    iter_pages = getattr(client, "iter_pages", None)
    if iter_pages is not None:
        yield from iter_pages(prefix)
        return
    next_token: Optional[str] = None
    while True:
        page = client.describe_log_groups(prefix, next_token)
        yield page
        if not page.next_token:
            return
        next_token = page.next_token


def iter_log_groups(client: LogGroupClient, prefix: Optional[str] = None) -> Iterator[LogGroupState]:
    for page in iter_log_group_pages(client, prefix):
        yield from page.log_groups


def find_log_group(client: LogGroupClient, log_group_name: str) -> Optional[LogGroupState]:
    """Return the exact-name match from the first page of a prefix listing.

    Names sort lexicographically, so an exact match is always first among its prefix.
    """
    page = client.describe_log_groups(log_group_name, None)
    for group in page.log_groups:
        if group.name == log_group_name:
            return group
    return None
