"""
OpenTelemetry Configuration

Tracing and log-level setup for the Luz PIX API. Called once from
``create_app()`` before any blueprint is registered.
"""

import os
import logging
from typing import List, Optional
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

SERVICE_NAME = 'luz-pix-api'
DEFAULT_OTLP_ENDPOINT = 'http://localhost:4318/v1/traces'

# Share of traces kept per environment
SAMPLE_RATES = {
    'production': 0.1,
    'staging': 0.5,
}

LOG_LEVELS = {
    'production': logging.WARNING,
    'staging': logging.INFO,
    'development': logging.DEBUG,
    'test': logging.WARNING,
}

logger = logging.getLogger(__name__)

_tracer_provider: Optional[TracerProvider] = None


def setup_observability(environment: str = None, otel_enabled: bool = None):
    """Configure logging, then tracing unless it is disabled."""
    global _tracer_provider

    environment = environment or os.getenv('ENVIRONMENT', 'development')
    if otel_enabled is None:
        otel_enabled = os.getenv('OTEL_ENABLED', 'true').lower() == 'true'

    setup_structured_logging(environment)

    # Tracing stays on the no-op provider
    if not otel_enabled or _tracer_provider is not None:
        return

    sample_rate = float(os.getenv('OTEL_SAMPLE_RATE', SAMPLE_RATES.get(environment, 1.0)))
    resource = Resource.create({
        "service.name": SERVICE_NAME,
        "service.version": os.getenv('SERVICE_VERSION', '1.0.0'),
        "deployment.environment": environment
    })

    tracer_provider = TracerProvider(sampler=TraceIdRatioBased(sample_rate), resource=resource)
    for exporter in build_span_exporters(environment):
        tracer_provider.add_span_processor(BatchSpanProcessor(exporter, max_export_batch_size=512))

    trace.set_tracer_provider(tracer_provider)
    _tracer_provider = tracer_provider

    logger.info(
        "Tracing configured",
        extra={"environment": environment, "service": SERVICE_NAME, "sample_rate": sample_rate}
    )


def build_span_exporters(environment: str) -> List[SpanExporter]:
    """
    Pick span exporters for an environment.

    Production exports over OTLP/HTTP only when an endpoint is configured,
    staging always exports (to a local collector by default) and every other
    environment prints spans to the console.
    """
    endpoint = os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')

    if environment == 'production':
        if not endpoint:
            return []
        api_key = os.getenv('OTEL_API_KEY')
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else None
        return [OTLPSpanExporter(endpoint=endpoint, headers=headers)]

    if environment == 'staging':
        return [OTLPSpanExporter(endpoint=endpoint or DEFAULT_OTLP_ENDPOINT)]

    exporters: List[SpanExporter] = [ConsoleSpanExporter()]
    if endpoint:
        exporters.append(OTLPSpanExporter(endpoint=endpoint))
    return exporters


def setup_structured_logging(environment: str):
    """Configure logging levels per environment."""
    logging.basicConfig(
        level=LOG_LEVELS.get(environment, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
        handlers=[logging.StreamHandler()]
    )

    if environment == 'production':
        logging.getLogger('werkzeug').setLevel(logging.WARNING)
        logging.getLogger('PIL').setLevel(logging.WARNING)
    elif environment == 'development':
        # Request and encoding details
        logging.getLogger('routes').setLevel(logging.DEBUG)
        logging.getLogger('services').setLevel(logging.DEBUG)
        logging.getLogger('PIL').setLevel(logging.INFO)
