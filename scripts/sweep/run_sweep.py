#!/usr/bin/env python3
"""Run the default log retention sweep from a workstation.

Uses the ambient AWS credentials and region. With ``--dry-run`` the log groups
are still listed and their tags read, but no retention or tags are written and
no metrics are published.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

try:
    from log_retention.clients.logs import CloudWatchLogsClient, DryRunLogGroupClient, LogGroupClient
    from log_retention.clients.metrics import CloudWatchMetricsPublisher
    from log_retention.errors import OperationError
    from log_retention.models.results import Metric
    from log_retention.models.settings import RetentionConfig
    from log_retention.retention.sweep import sweep_all
except ModuleNotFoundError:  # pragma: no cover - local CLI fallback
    repo_root = Path(__file__).resolve().parents[2]
    layer_path = repo_root / "src" / "lambda" / "layers" / "common" / "python"
    if str(layer_path) not in sys.path:
        sys.path.append(str(layer_path))
    from log_retention.clients.logs import CloudWatchLogsClient, DryRunLogGroupClient, LogGroupClient  # type: ignore  # noqa: E402
    from log_retention.clients.metrics import CloudWatchMetricsPublisher  # type: ignore  # noqa: E402
    from log_retention.errors import OperationError  # type: ignore  # noqa: E402
    from log_retention.models.results import Metric  # type: ignore  # noqa: E402
    from log_retention.models.settings import RetentionConfig  # type: ignore  # noqa: E402
    from log_retention.retention.sweep import sweep_all  # type: ignore  # noqa: E402


class _PrintingPublisher:
    """Stand-in publisher for dry runs; prints the counters instead of sending them."""

    def publish(self, metrics: Sequence[Metric]) -> None:
        for metric in metrics:
            print(f"[dry-run] metric {metric.name.value}={metric.value:g}")


def build_config(retention_days: Optional[int]) -> RetentionConfig:
    environ = dict(os.environ)
    if retention_days is not None:
        environ["LOG_RETENTION_IN_DAYS"] = str(retention_days)
    return RetentionConfig.load(environ)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Apply the default retention to every CloudWatch log group")
    parser.add_argument("--region", "-r", help="AWS region (defaults to the ambient configuration)")
    parser.add_argument("--prefix", "-p", help="Only sweep log groups whose name starts with this prefix")
    parser.add_argument("--retention-days", type=int, help="Override LOG_RETENTION_IN_DAYS for this run")
    parser.add_argument("--dry-run", action="store_true", help="Report what would change without writing")
    args = parser.parse_args(argv)

    config = build_config(args.retention_days)
    logs_client: LogGroupClient = CloudWatchLogsClient.create(region_name=args.region)
    dry_run: Optional[DryRunLogGroupClient] = None
    if args.dry_run:
        logs_client = dry_run = DryRunLogGroupClient(logs_client)
        publisher = _PrintingPublisher()
    else:
        publisher = CloudWatchMetricsPublisher.create(config.metric_namespace, region_name=args.region)

    print(f"Sweeping log groups (prefix={args.prefix!r}, retention={config.default_retention_days} days)")
    try:
        summary = sweep_all(logs_client, publisher, config, prefix=args.prefix)
    except OperationError as error:
        print(json.dumps(error.to_dict(), indent=2))
        return 1

    print(json.dumps(summary, indent=2))
    if dry_run is not None:
        print(f"[dry-run] Skipped {dry_run.skipped_writes} write(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
