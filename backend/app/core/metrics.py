"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'hotel_booking_attempts_total',
    'Total booking creation attempts',
    ['outcome']  # created, or the error code that rejected it
)

booking_latency = Histogram(
    'hotel_booking_latency_seconds',
    'Booking creation latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_retries = Counter(
    'hotel_booking_retry_attempts_total',
    'Booking retries caused by room version conflicts'
)

lifecycle_transitions = Counter(
    'hotel_booking_transitions_total',
    'Booking lifecycle transitions',
    ['transition']  # released, refund_requested, refunded, paid, payment_failed
)

# Cache metrics
cache_operations = Counter(
    'hotel_cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(outcome: str):
    """Record booking attempt. Outcome: created or an error code"""
    booking_attempts.labels(outcome=outcome).inc()


def record_transition(transition: str):
    lifecycle_transitions.labels(transition=transition).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
