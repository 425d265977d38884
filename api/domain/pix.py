# SPDX-License-Identifier: Apache-2.0

"""
PIX BR-Code payload encoding and decoding.

This module contains pure functions that build the static "PIX copia e cola"
payload scanned by Brazilian banking apps: EMV tag-length-value fields closed
by a CRC16/CCITT-FALSE checksum. Nothing here performs I/O or keeps state, so
every function is safe to call concurrently.
"""

import re
import unicodedata
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import List, Optional, Tuple, Union


PIX_GUI = "BR.GOV.BCB.PIX"

# Top-level tags
PAYLOAD_FORMAT_INDICATOR = "00"
POINT_OF_INITIATION_METHOD = "01"
MERCHANT_ACCOUNT_INFORMATION = "26"
MERCHANT_CATEGORY_CODE = "52"
TRANSACTION_CURRENCY = "53"
TRANSACTION_AMOUNT = "54"
COUNTRY_CODE = "58"
MERCHANT_NAME = "59"
MERCHANT_CITY = "60"
ADDITIONAL_DATA_FIELD = "62"
CRC = "63"

# Merchant account information (26) sub-tags
ACCOUNT_GUI = "00"
ACCOUNT_KEY = "01"
ACCOUNT_DESCRIPTION = "02"

# Additional data field (62) sub-tags
ADDITIONAL_TXID = "05"

PAYLOAD_FORMAT = "01"
STATIC_INITIATION = "11"
CATEGORY_CODE_UNSPECIFIED = "0000"
CURRENCY_BRL = "986"
COUNTRY_BR = "BR"

MAX_FIELD_LENGTH = 99
CRC_MARKER = CRC + "04"

MERCHANT_NAME_MAX_LENGTH = 25
MERCHANT_CITY_MAX_LENGTH = 15
TXID_MAX_LENGTH = 25
DESCRIPTION_MAX_LENGTH = 72

DEFAULT_MERCHANT_NAME = "RECEBEDOR"
DEFAULT_MERCHANT_CITY = "SAO PAULO"
DEFAULT_TXID = "***"

_DISALLOWED_CHARS = re.compile(r"[^A-Z0-9 $%*+\-./:]")
_CENTS = Decimal("0.01")

Amount = Union[Decimal, float, int, str]


class PixEncodingError(ValueError):
    """Base class for PIX payload encoding and decoding failures."""

    error_type = "pix-encoding-error"
    title = "PIX Encoding Error"


class MissingKeyError(PixEncodingError):
    """Raised when the payee key is missing or blank."""

    error_type = "missing-pix-key"
    title = "Missing PIX Key"


class InvalidAmountError(PixEncodingError):
    """Raised when the amount is not a finite, strictly positive number."""

    error_type = "invalid-amount"
    title = "Invalid Amount"


class FieldTooLongError(PixEncodingError):
    """Raised when a field value does not fit the two-digit length prefix."""

    error_type = "field-too-long"
    title = "Field Too Long"

    def __init__(self, tag: str, length: int):
        super().__init__(
            f"PIX field {tag} exceeds max length ({length} > {MAX_FIELD_LENGTH})"
        )
        self.tag = tag
        self.length = length


class InvalidPayloadError(PixEncodingError):
    """Raised when a payload does not follow the TLV grammar."""

    error_type = "invalid-payload"
    title = "Invalid Payload"


class ChecksumMismatchError(InvalidPayloadError):
    """Raised when the trailing CRC16 does not match the payload."""

    error_type = "checksum-mismatch"
    title = "Checksum Mismatch"

    def __init__(self, expected: str, actual: str):
        super().__init__(f"PIX checksum mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class PaymentRequest:
    """Parameters of a static PIX charge."""
    pix_key: str
    merchant_name: str
    merchant_city: str
    amount: Amount
    txid: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class PixField:
    """A single decoded tag-length-value field."""
    tag: str
    value: str


@dataclass(frozen=True)
class DecodedPayload:
    """Fields recovered from a checksum-verified payload."""
    pix_key: str
    merchant_name: str
    merchant_city: str
    amount: Optional[str]
    txid: Optional[str]
    description: Optional[str]
    crc: str
    fields: Tuple[PixField, ...] = ()


def format_field(tag: str, value: str) -> str:
    """
    Encode a single field as TAG + LENGTH + VALUE.

    The length is the UTF-8 byte count of the value, which equals the
    character count for every sanitized (ASCII) field.

    Args:
        tag: Two-digit field identifier
        value: Field content, possibly a concatenation of encoded sub-fields

    Returns:
        Encoded field

    Raises:
        FieldTooLongError: If the value does not fit in two length digits
    """
    length = len(value.encode("utf-8"))
    if length > MAX_FIELD_LENGTH:
        raise FieldTooLongError(tag, length)

    return f"{tag}{length:02d}{value}"


def sanitize_text(value: Optional[str], max_length: int, fallback: str = "") -> str:
    """
    Fold accents, upper-case and strip characters scanners reject.

    Args:
        value: Raw text (None is treated as empty)
        max_length: Maximum number of characters kept
        fallback: Value returned when nothing survives sanitization

    Returns:
        Sanitized text, or the fallback
    """
    decomposed = unicodedata.normalize("NFD", value or "")
    folded = "".join(char for char in decomposed if not unicodedata.combining(char))
    normalized = _DISALLOWED_CHARS.sub("", folded.upper()).strip()[:max_length]

    if normalized:
        return normalized

    return fallback


def format_amount(amount: Amount) -> str:
    """
    Serialize an amount with exactly two decimals and a '.' separator.

    Floats go through their shortest repr before rounding, and cents are
    rounded half-up, so 77.775 becomes "77.78".

    Raises:
        InvalidAmountError: If the amount is not finite or not above zero
        FieldTooLongError: If the serialized amount cannot fit field 54
    """
    if isinstance(amount, bool):
        raise InvalidAmountError(f"PIX amount must be a number, got {amount!r}")

    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(f"PIX amount must be a number, got {amount!r}") from exc

    if not value.is_finite() or value <= 0:
        raise InvalidAmountError("PIX amount must be greater than zero")

    # Integer digits plus ".00"
    length = max(value.adjusted(), 0) + 4
    if length > MAX_FIELD_LENGTH:
        raise FieldTooLongError(TRANSACTION_AMOUNT, length)

    with localcontext() as context:
        context.prec = max(context.prec, length)
        cents = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    if cents <= 0:
        raise InvalidAmountError("PIX amount rounds to zero")

    return f"{cents:f}"


def crc16(payload: Union[str, bytes]) -> str:
    """
    CRC16/CCITT-FALSE (poly 0x1021, init 0xFFFF, no reflection, no final XOR).

    Returns:
        Checksum as four uppercase hexadecimal digits
    """
    data = payload.encode("utf-8") if isinstance(payload, str) else payload
    crc = 0xFFFF

    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF

    return f"{crc:04X}"


def build_pix_payload(request: PaymentRequest) -> str:
    """
    Build a static PIX BR-Code payload.

    Fields are emitted in canonical order and the payload ends with the
    ``6304`` marker followed by the CRC16 of everything before it.

    Args:
        request: Payment parameters

    Returns:
        Complete payload ready for a QR code or "copia e cola"

    Raises:
        MissingKeyError: If the key is blank
        InvalidAmountError: If the amount is not finite or not above zero
        FieldTooLongError: If an assembled field exceeds 99 bytes
    """
    pix_key = (request.pix_key or "").strip()
    if not pix_key:
        raise MissingKeyError("PIX key is required")

    amount = format_amount(request.amount)
    merchant_name = sanitize_text(request.merchant_name, MERCHANT_NAME_MAX_LENGTH, DEFAULT_MERCHANT_NAME)
    merchant_city = sanitize_text(request.merchant_city, MERCHANT_CITY_MAX_LENGTH, DEFAULT_MERCHANT_CITY)
    txid = sanitize_text(request.txid, TXID_MAX_LENGTH, DEFAULT_TXID)
    description = sanitize_text(request.description, DESCRIPTION_MAX_LENGTH) if request.description else ""

    account_fields = [
        format_field(ACCOUNT_GUI, PIX_GUI),
        format_field(ACCOUNT_KEY, pix_key),
    ]
    if description:
        account_fields.append(format_field(ACCOUNT_DESCRIPTION, description))

    payload = "".join([
        format_field(PAYLOAD_FORMAT_INDICATOR, PAYLOAD_FORMAT),
        format_field(POINT_OF_INITIATION_METHOD, STATIC_INITIATION),
        format_field(MERCHANT_ACCOUNT_INFORMATION, "".join(account_fields)),
        format_field(MERCHANT_CATEGORY_CODE, CATEGORY_CODE_UNSPECIFIED),
        format_field(TRANSACTION_CURRENCY, CURRENCY_BRL),
        format_field(TRANSACTION_AMOUNT, amount),
        format_field(COUNTRY_CODE, COUNTRY_BR),
        format_field(MERCHANT_NAME, merchant_name),
        format_field(MERCHANT_CITY, merchant_city),
        format_field(ADDITIONAL_DATA_FIELD, format_field(ADDITIONAL_TXID, txid)),
        CRC_MARKER,
    ])

    return payload + crc16(payload)


def parse_fields(text: str) -> List[PixField]:
    """
    Split a TLV string into its fields without interpreting them.

    Raises:
        InvalidPayloadError: On a malformed header or a truncated value
    """
    data = text.encode("utf-8")
    fields = []
    position = 0

    while position < len(data):
        header = data[position:position + 4]
        if len(header) < 4 or not header.isdigit():
            raise InvalidPayloadError(f"Malformed field header at offset {position}")

        tag = header[:2].decode("ascii")
        length = int(header[2:])
        start = position + 4
        end = start + length
        if end > len(data):
            raise InvalidPayloadError(
                f"Field {tag} declares {length} bytes but only {len(data) - start} remain"
            )

        try:
            value = data[start:end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidPayloadError(f"Field {tag} is not valid UTF-8") from exc

        fields.append(PixField(tag=tag, value=value))
        position = end

    return fields


def decode_pix_payload(payload: str) -> DecodedPayload:
    """
    Parse and checksum-verify a static PIX payload.

    Args:
        payload: Complete payload including the trailing CRC

    Returns:
        DecodedPayload with the payee, amount and reference fields

    Raises:
        InvalidPayloadError: If the payload breaks the TLV grammar
        ChecksumMismatchError: If the CRC does not match
    """
    payload = (payload or "").strip()
    fields = parse_fields(payload)

    if not fields or fields[0] != PixField(PAYLOAD_FORMAT_INDICATOR, PAYLOAD_FORMAT):
        raise InvalidPayloadError("Payload must start with format indicator 000201")

    crc_field = fields[-1]
    if crc_field.tag != CRC or len(crc_field.value) != 4:
        raise InvalidPayloadError("Payload must end with a 6304 CRC field")

    expected = crc16(payload[:-4])
    actual = crc_field.value.upper()
    if expected != actual:
        raise ChecksumMismatchError(expected, actual)

    top_level = {field.tag: field.value for field in fields}

    account_info = top_level.get(MERCHANT_ACCOUNT_INFORMATION)
    if account_info is None:
        raise InvalidPayloadError("Missing merchant account information (26)")

    account = {field.tag: field.value for field in parse_fields(account_info)}
    if account.get(ACCOUNT_GUI, "").upper() != PIX_GUI:
        raise InvalidPayloadError("Merchant account information is not a PIX template")
    if not account.get(ACCOUNT_KEY):
        raise InvalidPayloadError("Missing PIX key (26.01)")

    for tag in (MERCHANT_NAME, MERCHANT_CITY):
        if tag not in top_level:
            raise InvalidPayloadError(f"Missing mandatory field {tag}")

    txid = None
    additional_data = top_level.get(ADDITIONAL_DATA_FIELD)
    if additional_data:
        additional = {field.tag: field.value for field in parse_fields(additional_data)}
        txid = additional.get(ADDITIONAL_TXID)

    return DecodedPayload(
        pix_key=account[ACCOUNT_KEY],
        merchant_name=top_level[MERCHANT_NAME],
        merchant_city=top_level[MERCHANT_CITY],
        amount=top_level.get(TRANSACTION_AMOUNT),
        txid=txid,
        description=account.get(ACCOUNT_DESCRIPTION),
        crc=actual,
        fields=tuple(fields),
    )


def verify_pix_payload(payload: str) -> bool:
    """Check whether a payload decodes and its checksum matches."""
    try:
        decode_pix_payload(payload)
    except PixEncodingError:
        return False

    return True
