"""
Observability Middleware

Flask hooks that time each request, tag the active span with PIX route
details and emit one structured log line per request.
"""

import time
import logging
from flask import Flask, request, g
from opentelemetry import trace
from opentelemetry.instrumentation.flask import FlaskInstrumentor

SLOW_REQUEST_MS = 500


def add_observability_middleware(app: Flask, instrument: bool = True):
    """Add request timing, span attributes and request logging to the app."""

    if instrument:
        # Auto-instrument Flask
        FlaskInstrumentor().instrument_app(app)

    logger = logging.getLogger(__name__)
    slow_request_ms = app.config.get('SLOW_REQUEST_MS', SLOW_REQUEST_MS)

    @app.before_request
    def before_request():
        """Start timing and capture the trace id."""
        g.start_time = time.time()
        g.trace_id = None

        span = trace.get_current_span()
        if span.is_recording():
            g.trace_id = format(span.get_span_context().trace_id, "032x")

            attributes = {
                "http.method": request.method,
                "http.target": request.path,
                "http.user_agent": request.headers.get("User-Agent", "")
            }
            level_id = (request.view_args or {}).get('level_id')
            if level_id:
                attributes["pix.level_id"] = level_id
            span.set_attributes(attributes)

    @app.after_request
    def after_request(response):
        """Log request completion and expose the trace id."""
        duration_ms = round((time.time() - g.get('start_time', time.time())) * 1000, 2)

        span = trace.get_current_span()
        if span.is_recording():
            span.set_attributes({
                "http.status_code": response.status_code,
                "http.duration_ms": duration_ms
            })

        log = logger.warning if duration_ms > slow_request_ms else logger.info
        log(
            "HTTP request completed",
            extra={
                "method": request.method,
                "path": request.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "content_type": response.mimetype,
                "trace_id": g.get('trace_id'),
                "request_size": request.content_length or 0
            }
        )

        if g.get('trace_id'):
            response.headers['X-Trace-Id'] = g.trace_id

        return response
