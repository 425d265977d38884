# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for QR code rendering.
"""

import base64
import io

import pytest
from PIL import Image

from models.entities import QrRenderOptions
from services.qr_renderer import build_qr_image, render_qr_data_url, render_qr_png

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestBuildQrImage:
    """Test image construction."""

    @pytest.mark.parametrize("width", [64, 128, 333, 640])
    def test_exact_width(self, reference_payload, width):
        """Test the image is square at the requested width."""
        image = build_qr_image(reference_payload, QrRenderOptions(width=width))

        assert image.size == (width, width)
        assert image.mode == "RGB"

    def test_colors(self, reference_payload):
        """Test quiet zone uses the light color and modules the dark one."""
        options = QrRenderOptions(width=256, margin=4, dark="#112233", light="#FAFAFA")
        image = build_qr_image(reference_payload, options)
        colors = {color for _, color in image.getcolors(maxcolors=256)}

        assert image.getpixel((0, 0)) == (0xFA, 0xFA, 0xFA)
        assert (0x11, 0x22, 0x33) in colors

    def test_defaults(self, reference_payload):
        """Test default options render at 640 pixels."""
        assert build_qr_image(reference_payload).size == (640, 640)


class TestRenderQr:
    """Test PNG and data URL rendering."""

    def test_png_bytes(self, reference_payload):
        """Test PNG output decodes back to an image."""
        png = render_qr_png(reference_payload, QrRenderOptions(width=128))

        assert png.startswith(PNG_SIGNATURE)
        assert Image.open(io.BytesIO(png)).size == (128, 128)

    def test_data_url(self, reference_payload):
        """Test data URL wraps the PNG bytes."""
        options = QrRenderOptions(width=128)
        data_url = render_qr_data_url(reference_payload, options)
        prefix = "data:image/png;base64,"

        assert data_url.startswith(prefix)
        assert base64.b64decode(data_url[len(prefix):]).startswith(PNG_SIGNATURE)

    def test_higher_error_correction_changes_image(self, reference_payload):
        """Test the error correction level is honored."""
        low = render_qr_png(reference_payload, QrRenderOptions(width=128, error_correction="L"))
        high = render_qr_png(reference_payload, QrRenderOptions(width=128, error_correction="H"))

        assert low != high
