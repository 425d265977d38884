# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - Response formatting and rendering integrations.
"""

from .hal import HalFormatter, HalResponseBuilder, create_hal_formatter
from .qr_renderer import build_qr_image, render_qr_png, render_qr_data_url

__all__ = [
    "HalFormatter",
    "HalResponseBuilder",
    "create_hal_formatter",
    "build_qr_image",
    "render_qr_png",
    "render_qr_data_url"
]
