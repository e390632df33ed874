"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    HttpMetrics,
    EntryMetrics,
    setup_metrics,
    get_metrics_handler,
)

__all__ = [
    "HttpMetrics",
    "EntryMetrics",
    "setup_metrics",
    "get_metrics_handler",
]
