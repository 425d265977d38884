# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas and data models for the Luz PIX API.
"""

# Base models
from .base import ApiModel, FrozenModel

# Enumerations
from .enums import ErrorCorrectionLevel, ImageFormat

# Value objects
from .entities import QrRenderOptions

# Request models
from .requests import (
    PixPayloadRequest,
    PixVerifyRequest,
    LevelPath,
    QrCodeQuery
)

# Response models
from .responses import (
    HalLink,
    HalResponse,
    AllianceLevelResponse,
    AllianceLevelCollection,
    PixPayloadResponse,
    PixVerifyResponse,
    HealthCheckResponse,
    ErrorResponse,
    ValidationErrorResponse
)

__all__ = [
    # Base
    "ApiModel",
    "FrozenModel",
    
    # Enums
    "ErrorCorrectionLevel",
    "ImageFormat",
    
    # Value objects
    "QrRenderOptions",
    
    # Requests
    "PixPayloadRequest",
    "PixVerifyRequest",
    "LevelPath",
    "QrCodeQuery",
    
    # Responses
    "HalLink",
    "HalResponse",
    "AllianceLevelResponse",
    "AllianceLevelCollection",
    "PixPayloadResponse",
    "PixVerifyResponse",
    "HealthCheckResponse",
    "ErrorResponse",
    "ValidationErrorResponse"
]
