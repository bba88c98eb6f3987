"""Metrics for failure and advisory paths."""

from prometheus_client import Counter

from tinyfloat.core.config import settings

# Error metrics
errors_total = Counter(
    'tinyfloat_errors_total',
    'Total number of TinyFloat errors raised',
    ['error']
)

# Advisory metrics
precision_loss_total = Counter(
    'tinyfloat_precision_loss_total',
    'Number of float constructions that lost binary precision'
)


def track_error(error: str):
    """Track a raised error by its class name."""
    if settings.ENABLE_METRICS:
        errors_total.labels(error=error).inc()


def track_precision_loss():
    """Track a float construction with residual binary error."""
    if settings.ENABLE_METRICS:
        precision_loss_total.inc()
