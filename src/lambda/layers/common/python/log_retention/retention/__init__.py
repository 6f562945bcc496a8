"""Reconciliation engine shared by the event-driven setter and the sweep."""

from .event import get_existing_retention, handle_creation_event, parse_event, resolve_error
from .reconciler import exemption_tag, reconcile, set_default_retention
from .sweep import reconcile_all, sweep_all

__all__ = [
    "get_existing_retention",
    "handle_creation_event",
    "parse_event",
    "resolve_error",
    "exemption_tag",
    "reconcile",
    "set_default_retention",
    "reconcile_all",
    "sweep_all",
]
