"""
Prometheus metrics endpoint for monitoring infrastructure.

Public, following standard Prometheus practice. Exposes the service
operation timings recorded by @measure_operation along with the booking
and payment counters.
"""

from fastapi import APIRouter, Response

from ...monitoring.prometheus_metrics import PrometheusMetrics

router = APIRouter(tags=["monitoring"])


@router.get("/metrics", include_in_schema=False)
def prometheus_metrics_endpoint() -> Response:
    return Response(
        content=PrometheusMetrics.get_metrics(),
        media_type=PrometheusMetrics.get_content_type(),
    )
