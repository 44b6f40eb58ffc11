"""Observability for the REST back-end integration.

Features:
- Structured logging with JSON output for production
- Console output with colors for development
- Prometheus-compatible metrics of deliveries and notifications

Example:
    >>> from hb2b_rest.observability import get_logger, get_metrics
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("hb2b.delivery.sending", message_id="msg-1")
    >>>
    >>> metrics = get_metrics()
    >>> metrics.increment_counter("hb2b_deliveries_total", {"kind": "receipt", "status": "success"})
"""

from hb2b_rest.observability.logging import (
    configure_logging,
    get_logger,
    log_context,
)
from hb2b_rest.observability.metrics import (
    MetricsCollector,
    get_metrics,
    reset_metrics,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
    "get_metrics",
    "reset_metrics",
    "MetricsCollector",
]
