"""Shared utilities."""

from task_service.utils.logging import get_logger, setup_logging
from task_service.utils.metrics import get_metrics

__all__ = [
    "get_logger",
    "setup_logging",
    "get_metrics",
]
