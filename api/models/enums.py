# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the Luz PIX API.
"""

from enum import Enum


class ErrorCorrectionLevel(str, Enum):
    """QR code error correction levels (share of recoverable codewords)."""
    LOW = "L"
    MEDIUM = "M"
    QUARTILE = "Q"
    HIGH = "H"


class ImageFormat(str, Enum):
    """Image formats the QR renderer can produce."""
    PNG = "png"
    DATA_URL = "data_url"
