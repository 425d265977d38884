# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Response models for API endpoints with HAL support.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field
from .base import ApiModel


class HalLink(BaseModel):
    """HAL link representation."""
    
    href: str = Field(..., description="Link URL")
    method: Optional[str] = Field(None, description="HTTP method")
    type: Optional[str] = Field(None, description="Content type")
    title: Optional[str] = Field(None, description="Link title")
    templated: Optional[bool] = Field(None, description="Whether URL is templated")


class HalResponse(ApiModel):
    """Base HAL response with links."""
    
    links: Dict[str, HalLink] = Field(default_factory=dict, alias="_links", description="HAL links")


class AllianceLevelResponse(HalResponse):
    """Alliance level resource."""
    
    id: str = Field(..., description="Level identifier")
    title: str = Field(..., description="Level title")
    subtitle: str = Field(..., description="Level subtitle")
    amount: str = Field(..., description="Suggested amount, two decimals")
    amount_display: str = Field(..., description="Suggested amount formatted in pt-BR")
    txid: str = Field(..., description="Transaction reference")
    concept: str = Field(..., description="Level concept")
    cta: str = Field(..., description="Call to action")
    highlight: bool = Field(..., description="Whether the level is featured")
    payload: Optional[str] = Field(None, description="PIX copia e cola payload")
    copy_text: Optional[str] = Field(None, description="Text offered by the copy button")
    pix_key_display: Optional[str] = Field(None, description="Receiver key formatted for display")
    cnpj_key: Optional[str] = Field(None, description="Alternative CNPJ key")


class AllianceLevelCollection(HalResponse):
    """Collection of alliance levels."""
    
    total: int = Field(..., description="Total number of levels")
    embedded: Dict[str, List[AllianceLevelResponse]] = Field(
        default_factory=dict, alias="_embedded", description="Embedded levels"
    )


class PixPayloadResponse(HalResponse):
    """Encoded PIX payload."""
    
    payload: str = Field(..., description="PIX copia e cola payload")
    crc: str = Field(..., description="Trailing CRC16 checksum")
    amount: str = Field(..., description="Serialized amount")
    copy_text: str = Field(..., description="Text offered by the copy button")
    pix_key_display: str = Field(..., description="Receiver key formatted for display")
    cnpj_key: str = Field(..., description="Alternative CNPJ key")
    level_id: Optional[str] = Field(None, description="Alliance level identifier")
    qr_code_data_url: Optional[str] = Field(None, description="PNG data URL of the QR code")


class PixVerifyResponse(HalResponse):
    """Result of decoding a payload."""
    
    valid: bool = Field(..., description="Whether the payload decoded and its CRC matched")
    pix_key: Optional[str] = Field(None, description="Receiver key")
    merchant_name: Optional[str] = Field(None, description="Receiver name")
    merchant_city: Optional[str] = Field(None, description="Receiver city")
    amount: Optional[str] = Field(None, description="Amount")
    txid: Optional[str] = Field(None, description="Transaction reference")
    description: Optional[str] = Field(None, description="Payment note")
    crc: Optional[str] = Field(None, description="Trailing CRC16 checksum")
    fields: List[Dict[str, str]] = Field(default_factory=list, description="Top-level TLV fields")
    error_type: Optional[str] = Field(None, description="Why the payload was rejected")
    detail: Optional[str] = Field(None, description="Rejection detail")


class HealthCheckResponse(BaseModel):
    """Health check response model."""
    
    status: str = Field(..., description="Overall health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Environment name")
    timestamp: str = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response model following RFC 7807."""
    
    type: str = Field(..., description="Error type URI")
    title: str = Field(..., description="Error title")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Error detail")
    instance: str = Field(..., description="Request instance")
    errors: Optional[List[Dict[str, Any]]] = Field(None, description="Validation errors")
    links: Optional[Dict[str, HalLink]] = Field(None, alias="_links", description="HAL links")


class ValidationErrorResponse(ErrorResponse):
    """Validation error response with field details."""
    
    errors: List[Dict[str, Any]] = Field(..., description="Field validation errors")
