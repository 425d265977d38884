# SPDX-License-Identifier: Apache-2.0

"""
PIX donation endpoints.

This module exposes the alliance level catalog, payload encoding for a level
or an arbitrary amount, QR code rendering and payload verification.
"""

from flask import Response, current_app, jsonify
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import logging
from typing import Any, Dict, Optional

from domain import donations
from domain.donations import AllianceLevel, ReceiverConfig
from domain.pix import (
    PaymentRequest, PixEncodingError, build_pix_payload,
    decode_pix_payload, format_amount
)
from middleware.error_handler import NotFoundException
from models.enums import ImageFormat
from models.requests import LevelPath, PixPayloadRequest, PixVerifyRequest, QrCodeQuery
from models.responses import (
    AllianceLevelCollection, AllianceLevelResponse, ErrorResponse,
    PixPayloadResponse, PixVerifyResponse, ValidationErrorResponse
)
from services.qr_renderer import render_qr_data_url, render_qr_png

# Set up logging and tracing
logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

# Create API blueprint
pix_tag = Tag(name="PIX", description="PIX donation payloads and QR codes")
pix_bp = APIBlueprint(
    'pix',
    __name__,
    url_prefix='/api/pix',
    abp_tags=[pix_tag]
)


def _receiver() -> ReceiverConfig:
    return current_app.config['PIX_RECEIVER']


def _require_level(level_id: str) -> AllianceLevel:
    level = donations.get_level(level_id)
    if level is None:
        raise NotFoundException(f"Alliance level '{level_id}' not found")
    return level


def _level_data(
    level: AllianceLevel,
    receiver: Optional[ReceiverConfig] = None,
    payload: Optional[str] = None
) -> Dict[str, Any]:
    """
    Serialize a level for the HAL formatter.

    With a receiver the copy button data is filled in, falling back to the
    raw key when no payload could be encoded.
    """
    data = AllianceLevelResponse(
        id=level.id,
        title=level.title,
        subtitle=level.subtitle,
        amount=format_amount(level.amount),
        amount_display=donations.format_brl(level.amount),
        txid=level.txid,
        concept=level.concept,
        cta=level.cta,
        highlight=level.highlight,
        payload=payload
    )

    if receiver is not None:
        data.copy_text = donations.clipboard_text(payload, receiver)
        data.pix_key_display = receiver.display_key
        data.cnpj_key = receiver.cnpj_key

    return data.model_dump(mode='json', exclude={'links'})


@pix_bp.get('/levels', responses={"200": AllianceLevelCollection})
def list_alliance_levels():
    """
    List alliance levels.

    Returns the donation tiers in display order with their suggested amounts.
    """
    with tracer.start_as_current_span("pix.levels.list") as span:
        levels = [_level_data(level) for level in donations.list_levels()]
        span.set_attribute("pix.levels_count", len(levels))

        return jsonify(current_app.hal_formatter.format_level_collection(levels)), 200


@pix_bp.get('/levels/<level_id>', responses={"200": AllianceLevelResponse, "404": ErrorResponse})
def get_alliance_level(path: LevelPath):
    """
    Get an alliance level with its PIX payload.
    """
    with tracer.start_as_current_span(
        "pix.levels.get",
        attributes={"pix.level_id": path.level_id}
    ) as span:
        level = _require_level(path.level_id)
        receiver = _receiver()

        with tracer.start_as_current_span("domain.pix.build_payload") as domain_span:
            try:
                payload = donations.build_level_payload(level, receiver)
            except PixEncodingError as e:
                # The page still offers the raw key for copying
                domain_span.set_status(Status(StatusCode.ERROR, e.error_type))
                logger.warning(
                    "PIX payload unavailable for level",
                    extra={"level_id": level.id, "error_type": e.error_type, "detail": str(e)}
                )
                payload = None

        span.set_attribute("pix.payload_available", payload is not None)
        if payload:
            span.set_attribute("pix.crc", payload[-4:])

        data = _level_data(level, receiver, payload)
        return jsonify(current_app.hal_formatter.format_level(data)), 200


@pix_bp.get('/levels/<level_id>/qrcode', responses={"404": ErrorResponse})
def get_alliance_level_qrcode(path: LevelPath, query: QrCodeQuery):
    """
    Render the QR code of an alliance level.

    Returns a PNG image, or a JSON document with a data URL when
    ``format=data_url``.
    """
    with tracer.start_as_current_span(
        "pix.levels.qrcode",
        attributes={"pix.level_id": path.level_id}
    ) as span:
        level = _require_level(path.level_id)
        payload = donations.build_level_payload(level, _receiver())

        options = current_app.config['QR_OPTIONS']
        if query.width:
            options = options.model_copy(update={'width': query.width})

        span.set_attributes({
            "qr.format": query.format.value,
            "qr.width": options.width
        })

        if query.format == ImageFormat.DATA_URL:
            return jsonify({
                "level_id": level.id,
                "payload": payload,
                "data_url": render_qr_data_url(payload, options)
            }), 200

        return Response(
            render_qr_png(payload, options),
            mimetype='image/png',
            headers={'Cache-Control': 'public, max-age=3600'}
        )


@pix_bp.post(
    '/payload',
    responses={"200": PixPayloadResponse, "400": ValidationErrorResponse, "422": ErrorResponse}
)
def create_pix_payload():
    """
    Encode a PIX payload.

    Uses the configured receiver unless overridden. When ``level_id`` is
    given, the level's reference code and title fill in the transaction id
    and the description.
    """
    with tracer.start_as_current_span("pix.payload.create") as span:
        body = current_app.validation_middleware.parse_json_body(PixPayloadRequest)
        receiver = _receiver()

        level = _require_level(body.level_id) if body.level_id else None
        if level:
            span.set_attribute("pix.level_id", level.id)

        txid = body.txid
        description = body.description
        if level:
            txid = level.txid if txid is None else txid
            description = level.title if description is None else description

        pix_key = receiver.pix_key if body.pix_key is None else body.pix_key
        payment = PaymentRequest(
            pix_key=pix_key,
            merchant_name=body.merchant_name or receiver.merchant_name,
            merchant_city=body.merchant_city or receiver.merchant_city,
            amount=body.amount,
            txid=txid,
            description=description
        )

        with tracer.start_as_current_span("domain.pix.build_payload") as domain_span:
            try:
                payload = build_pix_payload(payment)
            except PixEncodingError as e:
                domain_span.set_status(Status(StatusCode.ERROR, e.error_type))
                raise

        amount = format_amount(body.amount)
        span.set_attributes({
            "pix.amount": amount,
            "pix.crc": payload[-4:]
        })

        logger.info(
            "PIX payload generated",
            extra={
                "level_id": level.id if level else None,
                "amount": amount,
                "crc": payload[-4:],
                "payload_length": len(payload)
            }
        )

        qr_code_data_url = None
        if body.include_qr_code:
            qr_code_data_url = render_qr_data_url(payload, current_app.config['QR_OPTIONS'])

        data = PixPayloadResponse(
            payload=payload,
            crc=payload[-4:],
            amount=amount,
            copy_text=donations.clipboard_text(payload, receiver),
            pix_key_display=receiver.display_key if body.pix_key is None else pix_key.strip(),
            cnpj_key=receiver.cnpj_key,
            level_id=level.id if level else None,
            qr_code_data_url=qr_code_data_url
        ).model_dump(mode='json', exclude={'links'})

        return jsonify(current_app.hal_formatter.format_payload(data, data['level_id'])), 200


@pix_bp.post('/verify', responses={"200": PixVerifyResponse, "400": ValidationErrorResponse})
def verify_pix_payload():
    """
    Decode a PIX payload and verify its checksum.

    Always answers 200; ``valid`` tells whether the payload is sound.
    """
    with tracer.start_as_current_span("pix.payload.verify") as span:
        body = current_app.validation_middleware.parse_json_body(PixVerifyRequest)

        try:
            decoded = decode_pix_payload(body.payload)
        except PixEncodingError as e:
            span.set_attributes({
                "pix.valid": False,
                "pix.error_type": e.error_type
            })
            logger.info(
                "PIX payload rejected",
                extra={"error_type": e.error_type, "detail": str(e)}
            )
            data = PixVerifyResponse(
                valid=False,
                error_type=e.error_type,
                detail=str(e)
            ).model_dump(mode='json', exclude={'links'})
            return jsonify(current_app.hal_formatter.format_verification(data)), 200

        span.set_attribute("pix.valid", True)
        data = PixVerifyResponse(
            valid=True,
            pix_key=decoded.pix_key,
            merchant_name=decoded.merchant_name,
            merchant_city=decoded.merchant_city,
            amount=decoded.amount,
            txid=decoded.txid,
            description=decoded.description,
            crc=decoded.crc,
            fields=[{"tag": field.tag, "value": field.value} for field in decoded.fields]
        ).model_dump(mode='json', exclude={'links'})

        return jsonify(current_app.hal_formatter.format_verification(data)), 200
