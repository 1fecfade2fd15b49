"""HTTP metrics middleware."""

import time

from flask import Flask, g, request

from taskapi.telemetry import UNTRACED_PATHS, get_meter


def register_metrics_middleware(app: Flask) -> None:
    """Register HTTP metrics middleware on Flask app.

    Args:
        app: Flask application instance.
    """
    meter = get_meter(__name__)

    http_requests_total = meter.create_counter(
        name="http_requests_total",
        description="Total HTTP requests",
        unit="1",
    )

    http_request_duration = meter.create_histogram(
        name="http_request_duration_ms",
        description="HTTP request duration in milliseconds",
        unit="ms",
    )

    def start_timer() -> None:
        g.request_start_time = time.perf_counter()

    # Must precede hooks that can short-circuit the request, such as the 405 guard
    app.before_request_funcs.setdefault(None, []).insert(0, start_timer)

    @app.after_request
    def record_request(response):
        if request.path in UNTRACED_PATHS:
            return response

        start_time = getattr(g, "request_start_time", None)
        duration_ms = (time.perf_counter() - start_time) * 1000 if start_time else 0

        # Route pattern keeps task ids out of metric attributes
        route = request.url_rule.rule if request.url_rule else "unmatched"

        attributes = {
            "method": request.method,
            "route": route,
            "status": str(response.status_code),
        }

        http_requests_total.add(1, attributes)
        http_request_duration.record(duration_ms, attributes)

        return response
