# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
QR code rendering for PIX payloads.

Turns a payload string into a scannable PNG, either as raw bytes (served by
the API) or as a ``data:image/png;base64`` URL (embedded in JSON responses).
"""

import base64
import io
import logging
from typing import Optional

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from PIL import Image
from opentelemetry import trace

from models.entities import QrRenderOptions
from models.enums import ErrorCorrectionLevel

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

ERROR_CORRECTION_CONSTANTS = {
    ErrorCorrectionLevel.LOW: ERROR_CORRECT_L,
    ErrorCorrectionLevel.MEDIUM: ERROR_CORRECT_M,
    ErrorCorrectionLevel.QUARTILE: ERROR_CORRECT_Q,
    ErrorCorrectionLevel.HIGH: ERROR_CORRECT_H,
}


def build_qr_image(payload: str, options: Optional[QrRenderOptions] = None) -> Image.Image:
    """
    Build a square RGB image of exactly ``options.width`` pixels.

    Args:
        payload: Text to encode
        options: Rendering settings, defaults when omitted

    Returns:
        Pillow image
    """
    options = options or QrRenderOptions()
    level = ErrorCorrectionLevel(options.error_correction)

    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECTION_CONSTANTS[level],
        box_size=1,
        border=options.margin
    )
    qr.add_data(payload)
    qr.make(fit=True)

    # Largest whole-pixel module size that fits, then stretch to the exact width
    qr.box_size = max(1, options.width // (qr.modules_count + 2 * options.margin))
    image = qr.make_image(fill_color=options.dark, back_color=options.light).convert("RGB")

    if image.size != (options.width, options.width):
        image = image.resize((options.width, options.width), Image.Resampling.NEAREST)

    return image


def render_qr_png(payload: str, options: Optional[QrRenderOptions] = None) -> bytes:
    """Render a payload as PNG bytes."""
    options = options or QrRenderOptions()

    with tracer.start_as_current_span("qr.render") as span:
        span.set_attributes({
            "qr.payload_length": len(payload),
            "qr.width": options.width,
            "qr.error_correction": str(ErrorCorrectionLevel(options.error_correction).value)
        })

        image = build_qr_image(payload, options)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        png = buffer.getvalue()

        logger.debug(
            "QR code rendered",
            extra={
                "payload_length": len(payload),
                "width": options.width,
                "png_size": len(png)
            }
        )

        return png


def render_qr_data_url(payload: str, options: Optional[QrRenderOptions] = None) -> str:
    """Render a payload as a ``data:image/png;base64,...`` URL."""
    encoded = base64.b64encode(render_qr_png(payload, options)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
