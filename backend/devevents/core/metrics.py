"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

import time
from contextlib import contextmanager

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

from devevents.core.errors import (
    ConflictError,
    FieldValidationError,
    NotFoundError,
    ReferentialIntegrityError,
)

# Write-path metrics
record_writes = Counter(
    'record_writes_total',
    'Create/update attempts on stored records',
    ['entity', 'outcome']  # outcome: success, invalid, conflict, missing_reference, error
)

record_write_latency = Histogram(
    'record_write_latency_seconds',
    'Latency of validated write operations',
    ['entity'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

validation_failures = Counter(
    'validation_failures_total',
    'Writes rejected by field validation',
    ['entity']
)

slug_collisions = Counter(
    'slug_collisions_total',
    'Slug probes that hit an existing event and needed a numeric suffix'
)

# Connection metrics
db_connection_attempts = Counter(
    'db_connection_attempts_total',
    'Database connection establishment attempts',
    ['result']  # success, failure
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_write(entity: str, outcome: str):
    """Record a write attempt. Entity: event, booking, user."""
    record_writes.labels(entity=entity, outcome=outcome).inc()


def record_validation_failure(entity: str):
    validation_failures.labels(entity=entity).inc()


def record_slug_collision():
    slug_collisions.inc()


def record_connection_attempt(success: bool):
    result = "success" if success else "failure"
    db_connection_attempts.labels(result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()


_OUTCOMES = {
    FieldValidationError: "invalid",
    ReferentialIntegrityError: "missing_reference",
    ConflictError: "conflict",
    NotFoundError: "not_found",
}


@contextmanager
def track_write(entity: str):
    """Time a write and count it under the outcome its exception (if any) maps to."""
    start = time.perf_counter()
    outcome = "success"
    try:
        yield
    except Exception as e:
        outcome = next(
            (label for error_type, label in _OUTCOMES.items() if isinstance(e, error_type)),
            "error",
        )
        if outcome == "invalid":
            record_validation_failure(entity)
        raise
    finally:
        record_write(entity, outcome)
        record_write_latency.labels(entity=entity).observe(time.perf_counter() - start)
