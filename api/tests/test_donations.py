# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for the alliance level catalog.
"""

import pytest
from decimal import Decimal

from domain import donations
from domain.donations import ReceiverConfig
from domain.pix import crc16, decode_pix_payload


class TestLevelCatalog:
    """Test alliance level lookup."""

    def test_levels_in_display_order(self):
        """Test the three levels keep their order."""
        levels = donations.list_levels()

        assert [level.id for level in levels] == ["jaco", "pesca", "318"]
        assert [level.amount for level in levels] == [
            Decimal("7.77"), Decimal("77.77"), Decimal("318.00")
        ]

    def test_only_top_level_highlighted(self):
        """Test only the Abrahamic level is featured."""
        highlighted = [level.id for level in donations.list_levels() if level.highlight]

        assert highlighted == ["318"]

    def test_get_level(self):
        """Test lookup by id."""
        level = donations.get_level("pesca")

        assert level.title == "A Pesca Maravilhosa"
        assert level.txid == "PESCA7777"

    def test_unknown_level(self):
        """Test unknown ids return None."""
        assert donations.get_level("unknown") is None


class TestLevelPayload:
    """Test payload building for levels."""

    def test_level_request(self, receiver):
        """Test the level fills txid and description."""
        level = donations.get_level("jaco")
        request = donations.build_level_request(level, receiver)

        assert request.pix_key == receiver.pix_key
        assert request.merchant_name == "Fraternidade Luz"
        assert request.amount == Decimal("7.77")
        assert request.txid == "JACO777"
        assert request.description == "A Semente de Jacó"

    def test_amount_override(self, receiver):
        """Test a donor-chosen amount replaces the suggestion."""
        level = donations.get_level("jaco")
        request = donations.build_level_request(level, receiver, amount=50)

        assert request.amount == 50

    @pytest.mark.parametrize("level_id,amount,txid,description", [
        ("jaco", "7.77", "JACO777", "A SEMENTE DE JACO"),
        ("pesca", "77.77", "PESCA7777", "A PESCA MARAVILHOSA"),
        ("318", "318.00", "SEJABENCAO318", "SEJA A PROPRIA BENCAO"),
    ])
    def test_level_payloads(self, receiver, level_id, amount, txid, description):
        """Test each level encodes a verifiable payload."""
        payload = donations.build_level_payload(donations.get_level(level_id), receiver)
        decoded = decode_pix_payload(payload)

        assert crc16(payload[:-4]) == payload[-4:]
        assert decoded.amount == amount
        assert decoded.txid == txid
        assert decoded.description == description
        assert decoded.merchant_city == "SAO PAULO"

    def test_custom_receiver(self):
        """Test a different receiver changes the key and merchant."""
        receiver = ReceiverConfig(
            pix_key="54100589000129",
            merchant_name="Igreja Ação",
            merchant_city="Curitiba"
        )
        payload = donations.build_level_payload(donations.get_level("pesca"), receiver)
        decoded = decode_pix_payload(payload)

        assert decoded.pix_key == "54100589000129"
        assert decoded.merchant_name == "IGREJA ACAO"
        assert decoded.merchant_city == "CURITIBA"


class TestDisplayHelpers:
    """Test display helpers used by the donation page."""

    @pytest.mark.parametrize("amount,expected", [
        (Decimal("7.77"), "R$ 7,77"),
        (Decimal("318"), "R$ 318,00"),
        (1234.5, "R$ 1.234,50"),
        ("1000000", "R$ 1.000.000,00"),
    ])
    def test_format_brl(self, amount, expected):
        """Test pt-BR currency formatting."""
        assert donations.format_brl(amount) == expected

    def test_clipboard_text_prefers_payload(self, receiver):
        """Test the copy button offers the payload."""
        assert donations.clipboard_text("000201...", receiver) == "000201..."

    def test_clipboard_text_falls_back_to_key(self, receiver):
        """Test the raw key is copied when no payload exists."""
        assert donations.clipboard_text("", receiver) == receiver.pix_key
        assert donations.clipboard_text(None, receiver) == receiver.pix_key
