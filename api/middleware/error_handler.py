# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Error handling middleware.

Every failure leaves the API as an RFC 7807 problem document with HAL links:
HTTP errors raised by Flask, application exceptions raised by the routes and
PIX encoding errors raised by the domain (always 422).
"""

from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException
from typing import Dict, Any, Optional, Tuple
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import logging

from domain.pix import PixEncodingError
from services.hal import HalFormatter

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

ENCODING_ERROR_STATUS = 422

# Status code -> (problem type, title)
HTTP_PROBLEMS = {
    400: ("bad-request", "Bad Request"),
    404: ("resource-not-found", "Resource Not Found"),
    405: ("method-not-allowed", "Method Not Allowed"),
    415: ("unsupported-media-type", "Unsupported Media Type"),
}


class CustomException(Exception):
    """Base class for custom application exceptions."""

    def __init__(self, message: str, status_code: int = 500, error_type: str = "application-error"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type


class ValidationException(CustomException):
    """Request body failed validation."""

    def __init__(self, message: str, validation_errors: list = None):
        super().__init__(message, 400, "validation-error")
        self.validation_errors = validation_errors or []


class NotFoundException(CustomException):
    """Requested alliance level or resource does not exist."""

    def __init__(self, message: str):
        super().__init__(message, 404, "resource-not-found")


def _trace_error(
    span_name: str,
    error_type: str,
    status: int,
    detail: str,
    error: Optional[Exception] = None
) -> None:
    """Record the failure on a span and in the log."""
    with tracer.start_as_current_span(span_name) as span:
        span.set_attributes({
            "error.type": error_type,
            "error.status": status,
            "http.method": request.method,
            "http.path": request.path
        })

        context = {
            "error_type": error_type,
            "status_code": status,
            "detail": detail,
            "path": request.path,
            "method": request.method
        }

        if status >= 500:
            if error is not None:
                span.record_exception(error)
                context["error_class"] = error.__class__.__name__
            span.set_status(Status(StatusCode.ERROR, error_type))
            logger.error(f"Server error: {error_type}", extra=context, exc_info=error is not None)
        else:
            logger.warning(f"Client error: {error_type}", extra=context)


class ErrorHandlerMiddleware:
    """Registers problem-document handlers for HTTP and unexpected errors."""

    def __init__(self, app: Flask, base_url: str):
        self.app = app
        self.hal_formatter = HalFormatter(base_url)
        self.register_error_handlers()

    def register_error_handlers(self):
        """Register error handlers with Flask application."""
        for status in HTTP_PROBLEMS:
            self.app.register_error_handler(status, self.handle_client_error)

        self.app.register_error_handler(500, self.handle_server_error)
        self.app.register_error_handler(Exception, self.handle_unexpected_error)

    def handle_client_error(self, error: HTTPException) -> Tuple[Dict[str, Any], int]:
        """
        Handle 4xx HTTP errors.

        Codes without an entry in ``HTTP_PROBLEMS`` keep their status and use
        the generic ``http-error`` type.
        """
        error_type, title = HTTP_PROBLEMS.get(error.code, ("http-error", error.name))
        detail = str(error.description) if error.description else title

        _trace_error("error_handler.client_error", error_type, error.code, detail)

        if error_type == "resource-not-found":
            return self.hal_formatter.format_not_found_error(detail, request.path), error.code

        return self.hal_formatter.builder.build_error_response(
            error_type, title, error.code, detail, request.path
        ), error.code

    def handle_server_error(self, error: HTTPException) -> Tuple[Dict[str, Any], int]:
        """Handle explicit 500 responses."""
        detail = str(error.description) if error.description else "Internal Server Error"

        _trace_error("error_handler.server_error", "internal-server-error", 500, detail)

        if self.app.config.get('ENVIRONMENT') == 'production':
            detail = "An internal server error occurred"

        return self.hal_formatter.format_server_error(detail, request.path), 500

    def handle_unexpected_error(self, error: Exception) -> Tuple[Dict[str, Any], int]:
        """
        Handle exceptions no other handler claimed.

        Args:
            error: Unexpected exception

        Returns:
            Tuple of (problem document, status code)
        """
        if isinstance(error, HTTPException) and error.code and error.code < 500:
            return self.handle_client_error(error)

        _trace_error(
            "error_handler.unexpected_error",
            "unexpected-error",
            500,
            str(error),
            error
        )

        detail = "An unexpected error occurred"
        if self.app.config.get('ENVIRONMENT') != 'production':
            detail = f"{error.__class__.__name__}: {error}"

        return self.hal_formatter.format_server_error(detail, request.path), 500


def register_custom_error_handlers(app: Flask, hal_formatter: HalFormatter):
    """
    Register handlers for application exceptions and PIX encoding errors.

    Args:
        app: Flask application
        hal_formatter: HAL formatter instance
    """

    @app.errorhandler(CustomException)
    def handle_custom_exception(error: CustomException):
        _trace_error(
            "error_handler.custom_exception",
            error.error_type,
            error.status_code,
            error.message
        )

        if isinstance(error, ValidationException):
            error_response = hal_formatter.format_validation_error(
                error.message,
                request.path,
                error.validation_errors
            )
        elif isinstance(error, NotFoundException):
            error_response = hal_formatter.format_not_found_error(error.message, request.path)
        else:
            error_response = hal_formatter.format_server_error(error.message, request.path)

        return jsonify(error_response), error.status_code

    @app.errorhandler(PixEncodingError)
    def handle_pix_encoding_error(error: PixEncodingError):
        _trace_error(
            "error_handler.pix_encoding_error",
            error.error_type,
            ENCODING_ERROR_STATUS,
            str(error)
        )

        error_response = hal_formatter.format_encoding_error(
            error.error_type,
            error.title,
            str(error),
            request.path
        )

        return jsonify(error_response), ENCODING_ERROR_STATUS
