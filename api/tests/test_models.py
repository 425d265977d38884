# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for Pydantic models.
"""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from models.entities import QrRenderOptions
from models.enums import ErrorCorrectionLevel, ImageFormat
from models.requests import PixPayloadRequest, PixVerifyRequest, QrCodeQuery
from models.responses import HalLink, PixPayloadResponse


class TestQrRenderOptions:
    """Test QR rendering options validation."""

    def test_defaults(self):
        """Test defaults match the donation page rendering."""
        options = QrRenderOptions()

        assert options.error_correction == ErrorCorrectionLevel.MEDIUM
        assert options.margin == 1
        assert options.width == 640
        assert options.dark == "#111111"
        assert options.light == "#FFFFFF"

    def test_color_normalized(self):
        """Test colors are upper-cased."""
        options = QrRenderOptions(dark="#0a0b0c", light="#fafafa")

        assert options.dark == "#0A0B0C"
        assert options.light == "#FAFAFA"

    @pytest.mark.parametrize("color", ["black", "#FFF", "111111", "#GGGGGG"])
    def test_invalid_color(self, color):
        """Test non #RRGGBB colors are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            QrRenderOptions(dark=color)

        assert "Color must be in #RRGGBB format" in str(exc_info.value)

    @pytest.mark.parametrize("width", [0, 63, 4096])
    def test_width_bounds(self, width):
        """Test width limits."""
        with pytest.raises(ValidationError):
            QrRenderOptions(width=width)

    def test_error_correction_from_letter(self):
        """Test the level accepts its letter."""
        options = QrRenderOptions(error_correction="H")

        assert options.error_correction == ErrorCorrectionLevel.HIGH

    def test_immutable(self):
        """Test options cannot be mutated."""
        options = QrRenderOptions()

        with pytest.raises(ValidationError):
            options.width = 320


class TestPixPayloadRequest:
    """Test payload request validation."""

    def test_minimal_request(self):
        """Test only the amount is required."""
        request = PixPayloadRequest(amount="7.77")

        assert request.amount == Decimal("7.77")
        assert request.txid is None
        assert request.include_qr_code is False

    def test_missing_amount(self):
        """Test amount is required."""
        with pytest.raises(ValidationError):
            PixPayloadRequest(txid="JACO777")

    def test_non_numeric_amount(self):
        """Test non-numeric amounts are rejected."""
        with pytest.raises(ValidationError):
            PixPayloadRequest(amount="seven")

    def test_non_positive_amount_left_to_encoder(self):
        """Test zero passes model validation so the encoder can reject it."""
        request = PixPayloadRequest(amount=0)

        assert request.amount == Decimal("0")


class TestPixVerifyRequest:
    """Test verify request validation."""

    def test_strips_payload(self):
        """Test surrounding whitespace is removed."""
        request = PixVerifyRequest(payload="  000201  ")

        assert request.payload == "000201"

    def test_blank_payload(self):
        """Test blank payloads are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            PixVerifyRequest(payload="   ")

        assert "Payload cannot be empty" in str(exc_info.value)


class TestQrCodeQuery:
    """Test QR code query parameters."""

    def test_defaults(self):
        """Test PNG is the default format."""
        query = QrCodeQuery()

        assert query.format == ImageFormat.PNG
        assert query.width is None

    def test_data_url_format(self):
        """Test data URL format selection."""
        assert QrCodeQuery(format="data_url").format == ImageFormat.DATA_URL


class TestResponses:
    """Test response models."""

    def test_links_alias(self):
        """Test links serialize under the HAL key."""
        response = PixPayloadResponse(
            payload="000201",
            crc="ABCD",
            amount="7.77",
            copy_text="000201",
            pix_key_display="(11) 96504-0342",
            cnpj_key="54.100.589/0001-29",
            _links={"self": HalLink(href="https://api.example.com/api/pix/payload")}
        )

        dumped = response.model_dump(by_alias=True)

        assert "_links" in dumped
        assert dumped["_links"]["self"]["href"] == "https://api.example.com/api/pix/payload"
