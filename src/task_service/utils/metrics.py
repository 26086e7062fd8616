"""Prometheus metrics for observability."""

from functools import lru_cache

from prometheus_client import Counter, Gauge, Histogram, Info

from task_service import __version__


class Metrics:
    """Prometheus metrics for the task service."""

    def __init__(self) -> None:
        """Initialize all metrics."""
        # Service info
        self.info = Info(
            "task_service",
            "Task service information",
        )
        self.info.info({"version": __version__})

        # Store operations
        self.task_operations_total = Counter(
            "task_operations_total",
            "Total number of task store operations",
            ["operation", "status"],
        )

        self.task_operation_duration_seconds = Histogram(
            "task_operation_duration_seconds",
            "Duration of task store operations in seconds",
            ["operation"],
            buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
        )

        self.task_count = Gauge(
            "task_count",
            "Current number of stored tasks",
        )

        # HTTP
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests handled",
            ["method", "route", "status_code"],
        )

    def record_task_operation(
        self,
        operation: str,
        status: str,
        duration: float,
    ) -> None:
        """Record a task store operation metric.

        Args:
            operation: Operation name (create, get, list, delete, delete_all, by_tag, by_due)
            status: Operation status (success, not_found)
            duration: Operation duration in seconds
        """
        self.task_operations_total.labels(
            operation=operation,
            status=status,
        ).inc()
        self.task_operation_duration_seconds.labels(
            operation=operation,
        ).observe(duration)

    def record_http_request(self, method: str, route: str, status_code: int) -> None:
        """Record a handled HTTP request."""
        self.http_requests_total.labels(
            method=method,
            route=route,
            status_code=str(status_code),
        ).inc()


@lru_cache
def get_metrics() -> Metrics:
    """Get cached metrics instance."""
    return Metrics()
