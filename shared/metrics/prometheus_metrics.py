"""Prometheus metrics definitions and helpers.

Provides the HTTP and entry metrics for the bloglist service.
"""

from typing import Callable

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    REGISTRY,
    CollectorRegistry,
)


class HttpMetrics:
    """Request-level metrics recorded by the logging middleware."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize HTTP metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
            registry=registry,
        )

        self.requests_in_progress = Gauge(
            "http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method", "endpoint"],
            registry=registry,
        )


class EntryMetrics:
    """Entry mutation metrics, labelled by collection."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize entry metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.mutations = Counter(
            "entry_mutations_total",
            "Total number of successful entry mutations",
            ["collection", "operation"],
            registry=registry,
        )

        self.failures = Counter(
            "entry_failures_total",
            "Total number of requests rejected with a client error",
            ["collection", "error_type"],
            registry=registry,
        )


def setup_metrics(registry: CollectorRegistry = REGISTRY) -> tuple[HttpMetrics, EntryMetrics]:
    """Setup and return metric instances.

    Args:
        registry: Prometheus registry to register the metrics with

    Returns:
        Tuple of (HttpMetrics, EntryMetrics)
    """
    return HttpMetrics(registry), EntryMetrics(registry)


def get_metrics_handler(registry: CollectorRegistry = REGISTRY) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(registry)

    return metrics_handler
