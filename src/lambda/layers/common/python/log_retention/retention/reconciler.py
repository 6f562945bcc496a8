"""Single log group reconciliation.

Steps run in a fixed order and each one short-circuits:

1. a non-zero retention is left untouched (no API calls),
2. tags are read from the wildcard-stripped ARN,
3. an override tag (any value) exempts the group,
4. the default retention is applied,
5. configured tags plus the provenance tag are attached.

A failure at step 5 leaves retention set without the provenance tag; the next
run sees the retention and reports ``ALREADY_HAS_RETENTION``.
"""

from __future__ import annotations

from typing import Mapping, Optional

from log_retention.clients.logs import LogGroupClient
from log_retention.models.log_group import LogGroupState
from log_retention.models.results import ReconciliationOutcome
from log_retention.models.settings import RetentionConfig
from log_retention.utils.logger import get_logger

logger = get_logger(__name__)


def exemption_tag(tags: Mapping[str, str], config: RetentionConfig) -> Optional[str]:
    """Return the override tag value when present; an empty value still exempts."""
    if config.override_tag_key in tags:
        return tags[config.override_tag_key]
    return None


def set_default_retention(
    log_group_name: str, resource_arn: str, client: LogGroupClient, config: RetentionConfig
) -> None:
    days = config.default_retention_days
    client.put_retention_policy(log_group_name, days)
    logger.info(f"Set retention of {days} days on {log_group_name}.", extra={"log_group": log_group_name})

    if config.provenance_tags:
        client.tag_resource(resource_arn, config.tags_to_apply)
        logger.info(f"Tagged {resource_arn}.", extra={"log_group": log_group_name})


def reconcile(group: LogGroupState, client: LogGroupClient, config: RetentionConfig) -> ReconciliationOutcome:
    """Bring one log group in line with the default retention policy.

    Raises:
        OperationError: with ``ERROR`` severity when any log service call fails.
    """
    if group.has_retention:
        logger.debug(
            f"Log group {group.name} has retention of {group.retention_in_days} days already. Not setting.",
            extra={"log_group": group.name},
        )
        return ReconciliationOutcome.ALREADY_HAS_RETENTION

    resource_arn = group.resource_arn
    tags = client.list_tags(resource_arn) if group.tags is None else group.tags

    override = exemption_tag(tags, config)
    if override is not None:
        logger.info(
            f"Not setting retention for {group.name} because tag "
            f"`{config.override_tag_key}`=`{override}` exists on it.",
            extra={"log_group": group.name},
        )
        return ReconciliationOutcome.ALREADY_TAGGED_FOR_EXEMPTION

    set_default_retention(group.name, resource_arn, client, config)
    return ReconciliationOutcome.UPDATED
