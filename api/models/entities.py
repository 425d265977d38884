# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Value objects shared between the API layer and the rendering services.
"""

import re
from pydantic import Field, field_validator
from .base import FrozenModel
from .enums import ErrorCorrectionLevel


HEX_COLOR_PATTERN = re.compile(r'^#[0-9A-Fa-f]{6}$')


class QrRenderOptions(FrozenModel):
    """Rendering settings handed to the QR image renderer."""
    
    error_correction: ErrorCorrectionLevel = Field(
        default=ErrorCorrectionLevel.MEDIUM,
        description="Error correction level"
    )
    margin: int = Field(default=1, ge=0, le=16, description="Quiet zone width in modules")
    width: int = Field(default=640, ge=64, le=2048, description="Image width and height in pixels")
    dark: str = Field(default="#111111", description="Module color")
    light: str = Field(default="#FFFFFF", description="Background color")
    
    @field_validator('dark', 'light')
    @classmethod
    def validate_color(cls, v):
        """Validate #RRGGBB color format."""
        if not HEX_COLOR_PATTERN.match(v):
            raise ValueError('Color must be in #RRGGBB format')
        return v.upper()
