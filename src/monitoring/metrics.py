"""Prometheus metrics for the notification service."""

from fastapi import APIRouter, Response
from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["monitoring"])


# Per-channel outcomes of multi-channel notifications
notification_deliveries = Counter(
    'notification_deliveries_total',
    'Total number of channel delivery attempts',
    ['channel', 'status']
)

# Direct email endpoints (password reset, welcome, security alert)
email_requests = Counter(
    'email_requests_total',
    'Total number of direct email requests',
    ['endpoint', 'method', 'status']
)


@router.get("/metrics", response_class=Response)
async def get_metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
