"""Common Layer package for the default log retention Lambdas.

Hosts the reconciliation engine shared by the event-driven setter and the
account-wide sweep, plus the thin boto3 adapters and settings they rely on.
"""

from __future__ import annotations

__all__: list[str] = []
