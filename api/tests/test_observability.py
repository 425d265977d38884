# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for tracing and logging setup.
"""

import logging

from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from observability.config import build_span_exporters, setup_structured_logging


class TestSpanExporters:
    """Test exporter selection per environment."""

    def test_production_without_endpoint(self, monkeypatch):
        """Test production exports nothing unless an endpoint is set."""
        monkeypatch.delenv('OTEL_EXPORTER_OTLP_ENDPOINT', raising=False)

        assert build_span_exporters('production') == []

    def test_production_with_endpoint(self, monkeypatch):
        """Test production exports over OTLP."""
        monkeypatch.setenv('OTEL_EXPORTER_OTLP_ENDPOINT', 'https://otel.example.com/v1/traces')

        exporters = build_span_exporters('production')

        assert len(exporters) == 1
        assert isinstance(exporters[0], OTLPSpanExporter)

    def test_staging_defaults_to_local_collector(self, monkeypatch):
        """Test staging always exports."""
        monkeypatch.delenv('OTEL_EXPORTER_OTLP_ENDPOINT', raising=False)

        exporters = build_span_exporters('staging')

        assert len(exporters) == 1
        assert isinstance(exporters[0], OTLPSpanExporter)

    def test_development_uses_console(self, monkeypatch):
        """Test development prints spans."""
        monkeypatch.delenv('OTEL_EXPORTER_OTLP_ENDPOINT', raising=False)

        exporters = build_span_exporters('development')

        assert len(exporters) == 1
        assert isinstance(exporters[0], ConsoleSpanExporter)


class TestStructuredLogging:
    """Test logger levels."""

    def test_production_quiets_werkzeug(self):
        """Test request logs are reduced in production."""
        setup_structured_logging('production')

        assert logging.getLogger('werkzeug').level == logging.WARNING
