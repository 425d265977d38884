# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request validation middleware using Pydantic models.
Provides request body validation and error formatting.
"""

from flask import Response, current_app, jsonify, make_response, request
from typing import Type, TypeVar, Dict, Any, List
from pydantic import BaseModel, ValidationError
from opentelemetry import trace
import logging

from middleware.error_handler import ValidationException

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

M = TypeVar('M', bound=BaseModel)


class ValidationMiddleware:
    """Middleware for request validation using Pydantic models."""

    def format_validation_errors(self, validation_error: ValidationError) -> List[Dict[str, Any]]:
        """
        Format Pydantic validation errors for API response.

        Args:
            validation_error: Pydantic ValidationError

        Returns:
            List of formatted error dictionaries
        """
        errors = []

        for error in validation_error.errors():
            field_path = ".".join(str(loc) for loc in error["loc"])
            errors.append({
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
                "input": _json_safe(error.get("input"))
            })

        return errors

    def parse_json_body(self, model_class: Type[M]) -> M:
        """
        Validate the JSON request body against a Pydantic model.

        Args:
            model_class: Pydantic model class for validation

        Returns:
            Validated model instance

        Raises:
            ValidationException: If the body is missing or invalid
        """
        with tracer.start_as_current_span("validation.json_body") as span:
            span.set_attribute("validation.model", model_class.__name__)

            request_data = request.get_json(silent=True)
            if not isinstance(request_data, dict):
                span.set_attribute("validation.success", False)
                raise ValidationException("Request body must be a JSON object")

            try:
                validated = model_class.model_validate(request_data)
            except ValidationError as e:
                errors = self.format_validation_errors(e)
                span.set_attributes({
                    "validation.success": False,
                    "validation.error_count": len(errors)
                })
                logger.warning(
                    "Request body validation failed",
                    extra={
                        "model": model_class.__name__,
                        "path": request.path,
                        "validation_errors": errors,
                        "payload_keys": list(request_data.keys())
                    }
                )
                raise ValidationException("Request validation failed", errors) from e

            span.set_attribute("validation.success", True)
            return validated


def _json_safe(value: Any) -> Any:
    """Keep JSON-native inputs, stringify anything else."""
    if value is None or isinstance(value, (str, int, float, bool, list, dict)):
        return value
    return str(value)


def validation_error_response(validation_error: ValidationError) -> Response:
    """
    Turn a path or query validation failure into a problem document.

    Registered as the flask-openapi3 ``validation_error_callback``, so the
    parameters that flask-openapi3 validates produce the same 400 body as a
    rejected JSON body.
    """
    errors = current_app.validation_middleware.format_validation_errors(validation_error)

    logger.warning(
        "Request parameter validation failed",
        extra={
            "path": request.path,
            "validation_errors": errors
        }
    )

    error_response = current_app.hal_formatter.format_validation_error(
        "Request parameter validation failed",
        request.path,
        errors
    )
    return make_response(jsonify(error_response), current_app.validation_error_status)
