"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Account metrics
auth_attempts = Counter(
    'event_buddy_auth_attempts_total',
    'Signup, signin and signout attempts',
    ['action', 'result']  # signup/signin/signout, success/failure
)

active_sessions = Gauge(
    'event_buddy_active_sessions',
    'Sessions held by the in-process session store'
)

# Event metrics
event_operations = Counter(
    'event_buddy_event_operations_total',
    'Event writes',
    ['operation']  # create, update, delete
)

membership_changes = Counter(
    'event_buddy_membership_changes_total',
    'Join and leave requests',
    ['action', 'result']  # join/leave, success/rejected/inconsistent
)

# Upload metrics
image_uploads = Counter(
    'event_buddy_image_uploads_total',
    'Image upload attempts',
    ['result']  # stored, rejected
)

image_upload_bytes = Histogram(
    'event_buddy_image_upload_bytes',
    'Size of stored images',
    buckets=[10_000, 100_000, 500_000, 1_000_000, 2_500_000, 5_000_000]
)

# Database metrics
db_operations = Counter(
    'event_buddy_db_operations_total',
    'Total database operations',
    ['operation']  # read, write, error
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )

# Convenience functions for instrumentation
def record_auth_attempt(action: str, success: bool):
    result = "success" if success else "failure"
    auth_attempts.labels(action=action, result=result).inc()

def record_event_operation(operation: str):
    """Operation: create, update, delete"""
    event_operations.labels(operation=operation).inc()

def record_membership_change(action: str, result: str):
    """Result: success, rejected, inconsistent"""
    membership_changes.labels(action=action, result=result).inc()

def record_upload(stored: bool, size: int = 0):
    image_uploads.labels(result="stored" if stored else "rejected").inc()
    if stored:
        image_upload_bytes.observe(size)

def record_db_operation(operation: str):
    """Record database operation. Operation: read, write, error"""
    db_operations.labels(operation=operation).inc()
