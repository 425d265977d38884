# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import os
import pytest
from decimal import Decimal

# Set test environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['OTEL_ENABLED'] = 'false'

from app import create_app
from domain.donations import ReceiverConfig
from domain.pix import PaymentRequest


@pytest.fixture
def app():
    """Application configured for tests."""
    application = create_app({
        'TESTING': True,
        'ENVIRONMENT': 'test',
        'OTEL_ENABLED': False,
        'BASE_URL': 'https://api.example.com',
        'QR_WIDTH': 128
    })
    return application


@pytest.fixture
def client(app):
    """Create test client."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def receiver():
    """Default donation receiver."""
    return ReceiverConfig()


@pytest.fixture
def sample_payment_request():
    """Payment request of the Jacó seed level."""
    return PaymentRequest(
        pix_key="+5511965040342",
        merchant_name="Fraternidade Luz",
        merchant_city="Sao Paulo",
        amount=Decimal("7.77"),
        txid="JACO777",
        description="A Semente de Jacó"
    )


@pytest.fixture
def reference_payload():
    """Static payload published in the PIX BR-Code manual."""
    return (
        "00020126580014br.gov.bcb.pix0136123e4567-e12b-12d1-a456-426655440000"
        "5204000053039865802BR5913Fulano de Tal6008BRASILIA62070503***63041D3D"
    )
