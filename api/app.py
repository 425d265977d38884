"""
Luz PIX API - Flask Application Entry Point

This module builds the Flask application with OpenAPI 3.0 support,
configures middleware, and wires the PIX donation endpoints.
"""

import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from flask import jsonify
from flask_openapi3 import OpenAPI, Info, Tag

from observability.config import setup_observability, SERVICE_NAME
from observability.middleware import add_observability_middleware

# Import middleware and utilities
from middleware.error_handler import ErrorHandlerMiddleware, register_custom_error_handlers
from middleware.validation import ValidationMiddleware, validation_error_response
from services.hal import create_hal_formatter
from domain.donations import (
    ReceiverConfig, DEFAULT_PIX_KEY, DEFAULT_DISPLAY_KEY, DEFAULT_CNPJ_KEY,
    DEFAULT_MERCHANT_NAME, DEFAULT_MERCHANT_CITY
)
from models.entities import QrRenderOptions
from models.responses import HealthCheckResponse
from routes.pix import pix_bp

SERVICE_VERSION = os.getenv('SERVICE_VERSION', '1.0.0')
STARTED_AT = time.time()

# OpenAPI info
info = Info(
    title="Luz PIX API",
    version=SERVICE_VERSION,
    description="PIX BR-Code payloads and QR codes for the Aliança donation page"
)

health_tag = Tag(name="Health", description="System health and status")


def load_config() -> Dict[str, Any]:
    """Read configuration from environment variables."""
    environment = os.getenv('ENVIRONMENT', 'development')

    return {
        # Environment configuration
        'ENVIRONMENT': environment,
        'DEBUG': environment == 'development',
        'BASE_URL': os.getenv('BASE_URL', 'http://localhost:5000'),

        # Feature flags
        'OTEL_ENABLED': os.getenv('OTEL_ENABLED', 'true').lower() == 'true',

        # Receiver configuration
        'PIX_KEY': os.getenv('PIX_KEY', DEFAULT_PIX_KEY),
        'PIX_DISPLAY_KEY': os.getenv('PIX_DISPLAY_KEY', DEFAULT_DISPLAY_KEY),
        'PIX_CNPJ_KEY': os.getenv('PIX_CNPJ_KEY', DEFAULT_CNPJ_KEY),
        'PIX_MERCHANT_NAME': os.getenv('PIX_MERCHANT_NAME', DEFAULT_MERCHANT_NAME),
        'PIX_MERCHANT_CITY': os.getenv('PIX_MERCHANT_CITY', DEFAULT_MERCHANT_CITY),

        # QR rendering
        'QR_WIDTH': int(os.getenv('QR_WIDTH', '640')),
        'QR_ERROR_CORRECTION': os.getenv('QR_ERROR_CORRECTION', 'M'),
    }


def create_app(config: Optional[Dict[str, Any]] = None) -> OpenAPI:
    """
    Create and configure the Flask application.

    Args:
        config: Overrides applied on top of the environment configuration

    Returns:
        Configured application
    """
    # Tags are collected from the routes
    app = OpenAPI(
        __name__,
        info=info,
        validation_error_status=400,
        validation_error_callback=validation_error_response
    )

    app.config.update(load_config())
    if config:
        app.config.update(config)

    # Initialize observability first
    setup_observability(app.config['ENVIRONMENT'], app.config['OTEL_ENABLED'])
    add_observability_middleware(app, instrument=app.config['OTEL_ENABLED'])

    app.config['PIX_RECEIVER'] = ReceiverConfig(
        pix_key=app.config['PIX_KEY'],
        merchant_name=app.config['PIX_MERCHANT_NAME'],
        merchant_city=app.config['PIX_MERCHANT_CITY'],
        display_key=app.config['PIX_DISPLAY_KEY'],
        cnpj_key=app.config['PIX_CNPJ_KEY']
    )
    app.config['QR_OPTIONS'] = QrRenderOptions(
        width=app.config['QR_WIDTH'],
        error_correction=app.config['QR_ERROR_CORRECTION']
    )

    # Initialize middleware
    hal_formatter = create_hal_formatter(app.config['BASE_URL'])
    ErrorHandlerMiddleware(app, app.config['BASE_URL'])
    register_custom_error_handlers(app, hal_formatter)

    # Make services available to routes
    app.hal_formatter = hal_formatter
    app.validation_middleware = ValidationMiddleware()

    # Register routes
    app.register_api(pix_bp)

    @app.get('/api/healthz', tags=[health_tag], responses={"200": HealthCheckResponse})
    def health_check():
        """Health check endpoint"""
        return jsonify({
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": app.config['ENVIRONMENT'],
            "timestamp": datetime.now(timezone.utc).isoformat()
        })

    @app.get('/api/status', tags=[health_tag])
    def system_status():
        """System status and configuration summary"""
        status_data = {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": app.config['ENVIRONMENT'],
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": round(time.time() - STARTED_AT, 2),
            "configuration": {
                "pix_key_configured": bool(app.config['PIX_KEY'].strip()),
                "merchant_name": app.config['PIX_RECEIVER'].merchant_name,
                "merchant_city": app.config['PIX_RECEIVER'].merchant_city,
                "qr_width": app.config['QR_OPTIONS'].width,
                "otel_enabled": app.config['OTEL_ENABLED']
            }
        }

        return jsonify(hal_formatter.builder.build_resource_response(status_data, "status"))

    @app.get('/')
    def root():
        """Root endpoint"""
        return jsonify({
            "message": "Luz PIX API",
            "version": SERVICE_VERSION,
            "docs": "/openapi"
        })

    return app


if __name__ == '__main__':
    # Development server
    application = create_app()
    application.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=application.config['DEBUG']
    )
