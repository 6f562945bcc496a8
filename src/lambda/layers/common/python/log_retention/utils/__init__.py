"""Logging helpers exposed via Common Layer."""

from .logger import extract_correlation_id, get_logger

__all__ = ["extract_correlation_id", "get_logger"]
