# SPDX-License-Identifier: Apache-2.0

"""
Donation ("Aliança") level catalog and per-level payload building.

Pure data and functions: each alliance level carries a default amount and a
reference code, and the receiver configuration supplies the PIX key and the
merchant data printed on the payment.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from domain.pix import Amount, PaymentRequest, build_pix_payload


DEFAULT_PIX_KEY = "+5511965040342"
DEFAULT_DISPLAY_KEY = "(11) 96504-0342"
DEFAULT_CNPJ_KEY = "54.100.589/0001-29"
DEFAULT_MERCHANT_NAME = "Fraternidade Luz"
DEFAULT_MERCHANT_CITY = "Sao Paulo"


@dataclass(frozen=True)
class ReceiverConfig:
    """Who receives the donations."""
    pix_key: str = DEFAULT_PIX_KEY
    merchant_name: str = DEFAULT_MERCHANT_NAME
    merchant_city: str = DEFAULT_MERCHANT_CITY
    display_key: str = DEFAULT_DISPLAY_KEY
    cnpj_key: str = DEFAULT_CNPJ_KEY


@dataclass(frozen=True)
class AllianceLevel:
    """A donation tier with its suggested amount."""
    id: str
    title: str
    subtitle: str
    amount: Decimal
    txid: str
    concept: str
    cta: str
    highlight: bool = False


ALLIANCE_LEVELS = (
    AllianceLevel(
        id="jaco",
        title="A Semente de Jacó",
        subtitle="O Início",
        amount=Decimal("7.77"),
        txid="JACO777",
        concept='A fé no pouco: "Quem é fiel no pouco, sobre muito será colocado." (Mateus 25:21)',
        cta="Plantar Semente de Jacó",
    ),
    AllianceLevel(
        id="pesca",
        title="A Pesca Maravilhosa",
        subtitle="A Abundância",
        amount=Decimal("77.77"),
        txid="PESCA7777",
        concept="Para quem já vive o milagre. Uma boa pesca, redes cheias.",
        cta="Honrar a Pesca Maravilhosa",
    ),
    AllianceLevel(
        id="318",
        title="Seja a Própria Bênção",
        subtitle="Nível Abraâmico",
        amount=Decimal("318.00"),
        txid="SEJABENCAO318",
        concept="Você não pede mais a bênção: você se torna a própria bênção que sustenta a obra.",
        cta="Firmar Aliança 318",
        highlight=True,
    ),
)


def list_levels() -> List[AllianceLevel]:
    """Return all alliance levels in display order."""
    return list(ALLIANCE_LEVELS)


def get_level(level_id: str) -> Optional[AllianceLevel]:
    """Find a level by id, or None when it does not exist."""
    for level in ALLIANCE_LEVELS:
        if level.id == level_id:
            return level
    return None


def build_level_request(
    level: AllianceLevel,
    receiver: ReceiverConfig,
    amount: Optional[Amount] = None
) -> PaymentRequest:
    """
    Build the payment request for a level.

    The level title travels as the payment description and its reference
    code as the transaction id. ``amount`` overrides the suggested value,
    since each donor gives what their heart decides.
    """
    return PaymentRequest(
        pix_key=receiver.pix_key,
        merchant_name=receiver.merchant_name,
        merchant_city=receiver.merchant_city,
        amount=level.amount if amount is None else amount,
        txid=level.txid,
        description=level.title,
    )


def build_level_payload(
    level: AllianceLevel,
    receiver: ReceiverConfig,
    amount: Optional[Amount] = None
) -> str:
    """Encode the PIX payload for a level."""
    return build_pix_payload(build_level_request(level, receiver, amount))


def clipboard_text(payload: Optional[str], receiver: ReceiverConfig) -> str:
    """Text offered by the copy button: the payload, else the raw key."""
    return payload or receiver.pix_key


def format_brl(amount: Amount) -> str:
    """Format an amount the pt-BR way, e.g. ``R$ 1.234,56``."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    grouped = f"{value:,.2f}"
    return "R$ " + grouped.replace(",", "_").replace(".", ",").replace("_", ".")
