"""
Prometheus metrics blueprint for observability.

Exposes /metrics endpoint with HTTP request metrics and the inventory
counters defined in app.metrics (movements, productions, stock rejections).
This endpoint should be restricted to internal network or monitoring systems only.
"""
from flask import Blueprint, Response, request, g
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
import time

from app.metrics import (
    registry,
    http_requests_total, http_request_duration_seconds, http_requests_in_flight
)

metrics_bp = Blueprint('metrics', __name__)


def setup_metrics_instrumentation(app):
    """
    Setup before_request and after_request hooks for automatic metrics collection.

    This should be called from app factory after app creation.
    """

    @app.before_request
    def before_request_metrics():
        """Record request start time and increment in-flight counter."""
        g._prometheus_metrics_start_time = time.time()
        http_requests_in_flight.inc()

    @app.after_request
    def after_request_metrics(response):
        """Record request metrics after response is ready."""
        try:
            if hasattr(g, '_prometheus_metrics_start_time'):
                duration = time.time() - g._prometheus_metrics_start_time

                # Endpoint name, e.g. 'inventory.create_movement'
                endpoint = request.endpoint or 'unknown'

                http_request_duration_seconds.labels(
                    method=request.method,
                    endpoint=endpoint
                ).observe(duration)

                http_requests_total.labels(
                    method=request.method,
                    endpoint=endpoint,
                    http_status=response.status_code
                ).inc()

                http_requests_in_flight.dec()
        except Exception as e:
            # Metrics never break the request
            app.logger.warning(f"Failed to record metrics: {e}")

        return response


@metrics_bp.route('/metrics')
def metrics():
    """
    Prometheus metrics endpoint.

    SECURITY NOTE: not authenticated, restrict it by network/firewall rules.
    """
    # In multi-process mode the registry aggregates every Gunicorn worker
    data = generate_latest(registry)
    return Response(data, mimetype=CONTENT_TYPE_LATEST)
