# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request models for API endpoints.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from .base import ApiModel
from .enums import ImageFormat


class PixPayloadRequest(ApiModel):
    """Request model for encoding an ad hoc PIX payload."""
    
    amount: Decimal = Field(..., description="Amount in BRL")
    txid: Optional[str] = Field(None, max_length=200, description="Transaction reference")
    description: Optional[str] = Field(None, max_length=500, description="Payment note")
    level_id: Optional[str] = Field(None, description="Alliance level the donation belongs to")
    pix_key: Optional[str] = Field(None, max_length=200, description="Override of the receiver key")
    merchant_name: Optional[str] = Field(None, max_length=200, description="Override of the receiver name")
    merchant_city: Optional[str] = Field(None, max_length=200, description="Override of the receiver city")
    include_qr_code: bool = Field(default=False, description="Embed a PNG data URL in the response")


class PixVerifyRequest(ApiModel):
    """Request model for decoding and verifying a payload."""
    
    payload: str = Field(..., min_length=1, max_length=512, description="PIX copia e cola payload")
    
    @field_validator('payload')
    @classmethod
    def validate_payload(cls, v):
        """Strip surrounding whitespace."""
        if not v.strip():
            raise ValueError('Payload cannot be empty')
        return v.strip()


class LevelPath(BaseModel):
    """Path parameters for level endpoints."""
    
    level_id: str = Field(..., description="Alliance level identifier")


class QrCodeQuery(BaseModel):
    """Query parameters for QR code rendering."""
    
    format: ImageFormat = Field(default=ImageFormat.PNG, description="Response format")
    width: Optional[int] = Field(None, ge=64, le=2048, description="Image width in pixels")
