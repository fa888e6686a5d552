"""
Prometheus metrics for the studio booking backend.

Service timings come from the @measure_operation decorator; domain counters
track booking creation, studio lock contention and payment outcomes.
"""

from threading import Lock
from time import monotonic
from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Custom registry to avoid conflicts with default process metrics
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "studio_booking_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "studio_booking_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "studio_booking_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

bookings_created_total = Counter(
    "studio_booking_bookings_created_total",
    "Booking creation attempts by outcome",
    ["outcome"],  # created | conflict | lock_timeout
    registry=REGISTRY,
)

booking_lock_total = Counter(
    "studio_booking_booking_lock_total",
    "Studio booking lock operations",
    ["action", "result"],  # acquire/release x success/timeout
    registry=REGISTRY,
)

booking_lock_wait_seconds = Histogram(
    "studio_booking_booking_lock_wait_seconds",
    "Time spent waiting for the studio booking lock",
    registry=REGISTRY,
    buckets=(0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0),
)

payments_total = Counter(
    "studio_booking_payments_total",
    "Payment ledger transitions",
    ["operation", "result"],  # intent/confirm/refund x payment status or error
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

    _cache_lock: Lock = Lock()
    _cache_payload: Optional[bytes] = None
    _cache_ts: Optional[float] = None
    _cache_ttl_seconds: float = 1.0

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation name (e.g., 'create_booking')
            duration: Operation duration in seconds
            status: 'success' or 'error'
            error_type: Exception class name if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()

        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()
        PrometheusMetrics._invalidate_cache()

    @staticmethod
    def record_booking_created(outcome: str) -> None:
        bookings_created_total.labels(outcome=outcome).inc()
        PrometheusMetrics._invalidate_cache()

    @staticmethod
    def record_booking_lock(action: str, result: str, wait_seconds: Optional[float] = None) -> None:
        booking_lock_total.labels(action=action, result=result).inc()
        if wait_seconds is not None:
            booking_lock_wait_seconds.observe(max(wait_seconds, 0.0))
        PrometheusMetrics._invalidate_cache()

    @staticmethod
    def record_payment(operation: str, result: str) -> None:
        payments_total.labels(operation=operation, result=result).inc()
        PrometheusMetrics._invalidate_cache()

    @staticmethod
    def get_metrics() -> bytes:
        """Metrics in Prometheus text exposition format, cached briefly between scrapes."""
        now = monotonic()
        payload = PrometheusMetrics._cache_payload
        ts = PrometheusMetrics._cache_ts

        if payload is not None and ts is not None and (now - ts) <= PrometheusMetrics._cache_ttl_seconds:
            return payload

        with PrometheusMetrics._cache_lock:
            PrometheusMetrics._cache_payload = cast(bytes, generate_latest(REGISTRY))
            PrometheusMetrics._cache_ts = monotonic()
            return PrometheusMetrics._cache_payload

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)

    @staticmethod
    def _invalidate_cache() -> None:
        with PrometheusMetrics._cache_lock:
            PrometheusMetrics._cache_ts = None
            PrometheusMetrics._cache_payload = None


# Singleton instance
prometheus_metrics = PrometheusMetrics()
