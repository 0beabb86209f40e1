"""Fetch single nodes from the OpenStreetMap API."""

from __future__ import annotations

import logging

from campus_coffee.common.constants import OSM_API_BASE_URL
from campus_coffee.common.errors import OsmNodeNotFoundError
from campus_coffee.common.http import HttpClient, HttpRequestError
from campus_coffee.common.logging import get_logger, log_event
from campus_coffee.common.models import OsmNode


def node_url(base_url: str, node_id: int) -> str:
    return f"{base_url.rstrip('/')}/node/{node_id}.json"


def parse_node_payload(node_id: int, payload) -> OsmNode:
    """Build an ``OsmNode`` from an API 0.6 JSON document.

    Raises ``ValueError`` when the document has no usable element.
    """
    if not isinstance(payload, dict):
        raise ValueError("payload is not a JSON object")
    elements = payload.get("elements")
    if not isinstance(elements, list) or not elements:
        raise ValueError("payload has no elements list")

    element = elements[0]
    if not isinstance(element, dict):
        raise ValueError("element is not a JSON object")
    lat = element.get("lat")
    lon = element.get("lon")
    if lat is None or lon is None:
        raise ValueError("element has no coordinates")

    tags = element.get("tags") or {}
    if not isinstance(tags, dict):
        raise ValueError("element tags are not a JSON object")
    return OsmNode(
        node_id=node_id,
        lat=float(lat),
        lon=float(lon),
        tags={str(key): str(value) for key, value in tags.items() if value is not None},
    )


class OsmDataService:
    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        base_url: str = OSM_API_BASE_URL,
        logger: logging.Logger | None = None,
        owns_client: bool | None = None,
    ) -> None:
        self.owns_client = http_client is None if owns_client is None else owns_client
        self.http_client = http_client or HttpClient()
        self.base_url = base_url
        self.logger = logger or get_logger("osm")

    def close(self) -> None:
        if self.owns_client:
            self.http_client.close()

    def fetch_node(self, node_id: int) -> OsmNode:
        log_event(self.logger, f"fetching OSM node data for node ID: {node_id}", node_id=node_id, event="OSM_FETCH_START")
        url = node_url(self.base_url, node_id)

        try:
            payload = self.http_client.get_json(url)
        except HttpRequestError as exc:
            log_event(
                self.logger,
                f"OSM API error for node {node_id}: {exc}",
                level=logging.ERROR,
                node_id=node_id,
                event="OSM_FETCH_FAIL",
                status="error",
                error_code=OsmNodeNotFoundError.error_code,
            )
            raise OsmNodeNotFoundError(node_id) from exc

        try:
            node = parse_node_payload(node_id, payload)
        except (AttributeError, TypeError, ValueError) as exc:
            log_event(
                self.logger,
                f"failed to parse OSM node {node_id}: {exc}",
                level=logging.ERROR,
                node_id=node_id,
                event="OSM_FETCH_FAIL",
                status="error",
                error_code=OsmNodeNotFoundError.error_code,
            )
            raise OsmNodeNotFoundError(node_id) from exc

        log_event(
            self.logger,
            f"fetched OSM node {node_id} with {len(node.tags)} tags",
            level=logging.DEBUG,
            node_id=node_id,
            event="OSM_FETCH_END",
            status="ok",
        )
        return node
