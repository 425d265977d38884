# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
HAL (Hypertext Application Language) response formatting utilities.
Implements HATEOAS responses with affordance links for PIX resources.
"""

from typing import Dict, List, Any, Optional
from urllib.parse import urljoin

from models.responses import HalLink

PROBLEM_BASE_URI = "https://api.fraternidadeluz.org/problems"


class HalLinkBuilder:
    """Builder for HAL links with proper URL construction."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/') + '/'

    def build_link(
        self,
        path: str,
        method: str = "GET",
        content_type: Optional[str] = None,
        title: Optional[str] = None,
        templated: bool = False
    ) -> HalLink:
        """Build a HAL link with proper URL construction."""
        href = urljoin(self.base_url, path.lstrip('/'))

        return HalLink(
            href=href,
            method=method,
            type=content_type,
            title=title,
            templated=templated
        )

    def build_self_link(self, resource_path: str) -> HalLink:
        """Build self link for a resource."""
        return self.build_link(resource_path, title="Self")

    def build_collection_link(self, collection_path: str) -> HalLink:
        """Build link to parent collection."""
        return self.build_link(collection_path, title="Collection")

    def build_post_link(self, path: str, title: str) -> HalLink:
        """Build a link to an endpoint that takes a JSON body."""
        return self.build_link(path, method="POST", content_type="application/json", title=title)


def serialize_links(links: Dict[str, HalLink]) -> Dict[str, Dict[str, Any]]:
    """Dump links for a JSON body, leaving out unset attributes."""
    return {rel: link.model_dump(exclude_none=True) for rel, link in links.items()}


class AffordanceLinkBuilder:
    """Builder for the actions available on each PIX resource."""

    def __init__(self, base_url: str):
        self.link_builder = HalLinkBuilder(base_url)

    def build_level_affordances(self, level_id: str) -> Dict[str, HalLink]:
        """Build links for an alliance level."""
        level_path = f"/api/pix/levels/{level_id}"

        return {
            'self': self.link_builder.build_self_link(level_path),
            'collection': self.link_builder.build_collection_link("/api/pix/levels"),
            'qrcode': self.link_builder.build_link(
                f"{level_path}/qrcode",
                content_type="image/png",
                title="QR code"
            ),
            'payload': self.link_builder.build_post_link("/api/pix/payload", "Encode custom amount")
        }

    def build_payload_affordances(self, level_id: Optional[str] = None) -> Dict[str, HalLink]:
        """Build links for an encoded payload."""
        links = {
            'self': self.link_builder.build_post_link("/api/pix/payload", "Self"),
            'verify': self.link_builder.build_post_link("/api/pix/verify", "Verify payload")
        }

        if level_id:
            links['level'] = self.link_builder.build_link(
                f"/api/pix/levels/{level_id}",
                title="Alliance level"
            )

        return links


class HalResponseBuilder:
    """Main HAL response builder."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/')
        self.link_builder = HalLinkBuilder(base_url)
        self.affordance_builder = AffordanceLinkBuilder(base_url)

    def build_resource_response(
        self,
        data: Dict[str, Any],
        resource_type: str,
        resource_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Build a HAL resource response with appropriate affordance links."""
        response = dict(data)

        if resource_type == "level":
            links = self.affordance_builder.build_level_affordances(resource_id or "")
        elif resource_type == "payload":
            links = self.affordance_builder.build_payload_affordances(resource_id)
        elif resource_type == "verification":
            links = {
                'self': self.link_builder.build_post_link("/api/pix/verify", "Self"),
                'levels': self.link_builder.build_link("/api/pix/levels", title="Alliance levels")
            }
        else:
            links = {
                'self': self.link_builder.build_self_link(f"/api/{resource_type}")
            }

        response['_links'] = serialize_links(links)
        return response

    def build_collection_response(
        self,
        items: List[Dict[str, Any]],
        collection_path: str,
        embedded_rel: str = "items"
    ) -> Dict[str, Any]:
        """Build a HAL collection response."""
        links = {
            'self': self.link_builder.build_self_link(collection_path)
        }

        return {
            'total': len(items),
            '_links': serialize_links(links),
            '_embedded': {
                embedded_rel: items
            }
        }

    def build_error_response(
        self,
        error_type: str,
        title: str,
        status: int,
        detail: str,
        instance: str,
        validation_errors: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Build RFC 7807 compliant error response with HAL links."""
        error_response = {
            'type': f"{PROBLEM_BASE_URI}/{error_type}",
            'title': title,
            'status': status,
            'detail': detail,
            'instance': instance
        }

        if validation_errors:
            error_response['errors'] = validation_errors

        links = {
            'help': self.link_builder.build_link(
                f"/docs/errors#{error_type}",
                title="Error documentation"
            )
        }

        if error_type == "validation-error":
            links['schema'] = self.link_builder.build_link(
                "/openapi/openapi.json",
                title="API schema"
            )
        elif error_type == "resource-not-found":
            links['levels'] = self.link_builder.build_link(
                "/api/pix/levels",
                title="Alliance levels"
            )
        elif error_type in ("invalid-payload", "checksum-mismatch"):
            links['verify'] = self.link_builder.build_post_link("/api/pix/verify", "Verify payload")

        error_response['_links'] = serialize_links(links)
        return error_response


class HalFormatter:
    """High-level HAL formatter with convenience methods."""

    def __init__(self, base_url: str):
        self.builder = HalResponseBuilder(base_url)

    def format_level(self, level: Dict[str, Any]) -> Dict[str, Any]:
        """Format an alliance level with HAL links."""
        return self.builder.build_resource_response(level, "level", level['id'])

    def format_level_collection(self, levels: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Format the alliance level catalog with HAL links."""
        formatted_levels = [self.format_level(level) for level in levels]
        return self.builder.build_collection_response(
            formatted_levels,
            "/api/pix/levels",
            embedded_rel="levels"
        )

    def format_payload(
        self,
        payload: Dict[str, Any],
        level_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Format an encoded payload with HAL links."""
        return self.builder.build_resource_response(payload, "payload", level_id)

    def format_verification(self, verification: Dict[str, Any]) -> Dict[str, Any]:
        """Format a payload verification result."""
        return self.builder.build_resource_response(verification, "verification")

    def format_validation_error(
        self,
        detail: str,
        instance: str,
        validation_errors: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Format a validation error response."""
        return self.builder.build_error_response(
            "validation-error",
            "Validation Error",
            400,
            detail,
            instance,
            validation_errors
        )

    def format_encoding_error(
        self,
        error_type: str,
        title: str,
        detail: str,
        instance: str
    ) -> Dict[str, Any]:
        """Format a PIX encoding error response."""
        return self.builder.build_error_response(
            error_type,
            title,
            422,
            detail,
            instance
        )

    def format_not_found_error(
        self,
        detail: str,
        instance: str
    ) -> Dict[str, Any]:
        """Format a not found error response."""
        return self.builder.build_error_response(
            "resource-not-found",
            "Resource Not Found",
            404,
            detail,
            instance
        )

    def format_server_error(
        self,
        detail: str,
        instance: str
    ) -> Dict[str, Any]:
        """Format a server error response."""
        return self.builder.build_error_response(
            "internal-server-error",
            "Internal Server Error",
            500,
            detail,
            instance
        )


def create_hal_formatter(base_url: str) -> HalFormatter:
    """Create a HAL formatter instance."""
    return HalFormatter(base_url)
