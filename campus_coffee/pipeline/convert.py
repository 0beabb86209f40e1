"""Convert OpenStreetMap nodes into validated POS drafts.

The conversion is a pure function of the node: no I/O and no shared state.
Every rule that fails raises ``OsmNodeMissingFieldsError`` for the node,
whether the tag is absent, blank, unparseable or an unsupported value.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType

from campus_coffee.common.errors import OsmNodeMissingFieldsError
from campus_coffee.common.logging import get_logger, log_event
from campus_coffee.common.models import CampusType, OsmNode, Pos, PosType

NAME_TAG = "name"
AMENITY_TAG = "amenity"
DESCRIPTION_TAG = "description"
CUISINE_TAG = "cuisine"
ADDRESS_TAGS = ("addr:street", "addr:housenumber", "addr:postcode", "addr:city")

AMENITY_TO_POS_TYPE = MappingProxyType(
    {
        "cafe": PosType.CAFE,
        # Restaurants serving coffee are listed as cafés.
        "restaurant": PosType.CAFE,
        "bakery": PosType.BAKERY,
    }
)

POSTAL_CODE_TO_CAMPUS = MappingProxyType(
    {
        69117: CampusType.ALTSTADT,
        69120: CampusType.INF,
    }
)

FALLBACK_AMENITY_LABEL = "place"

_INTEGER_RE = re.compile(r"[+-]?\d+")

_logger = get_logger("convert")


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _fail(node: OsmNode, message: str, logger: logging.Logger, detail: str | None = None) -> OsmNodeMissingFieldsError:
    log_event(
        logger,
        message,
        level=logging.ERROR,
        node_id=node.node_id,
        event="OSM_CONVERT_FAIL",
        status="error",
        error_code=OsmNodeMissingFieldsError.error_code,
    )
    return OsmNodeMissingFieldsError(node.node_id, detail)


def parse_postal_code(raw: str | None) -> int | None:
    if raw is None or not _INTEGER_RE.fullmatch(raw):
        return None
    return int(raw)


def resolve_pos_type(amenity: str | None) -> PosType | None:
    if is_blank(amenity):
        return None
    return AMENITY_TO_POS_TYPE.get(amenity.lower())


def resolve_campus(postal_code: int) -> CampusType | None:
    return POSTAL_CODE_TO_CAMPUS.get(postal_code)


def build_description(tags, city: str | None) -> str:
    """Pick the description tag, else synthesize one from cuisine or city.

    Reads ``amenity`` again instead of trusting earlier validation, so the
    label falls back to ``place`` whenever the tag is absent or blank.
    """
    description = tags.get(DESCRIPTION_TAG)
    if not is_blank(description):
        return description

    amenity = tags.get(AMENITY_TAG)
    label = FALLBACK_AMENITY_LABEL if is_blank(amenity) else amenity
    cuisine = tags.get(CUISINE_TAG)
    if not is_blank(cuisine):
        return f"A {label} serving {cuisine} cuisine"
    return f"A {label} in {city}"


def convert_osm_node_to_pos(node: OsmNode, logger: logging.Logger | None = None) -> Pos:
    logger = logger or _logger
    tags = node.tags
    log_event(logger, "converting OSM node to POS", level=logging.DEBUG, node_id=node.node_id, event="OSM_CONVERT_START")

    name = tags.get(NAME_TAG)
    if is_blank(name):
        raise _fail(node, f"OSM node {node.node_id} missing required 'name' tag", logger, "Missing tag: name")

    amenity = tags.get(AMENITY_TAG)
    if is_blank(amenity):
        raise _fail(node, f"OSM node {node.node_id} missing 'amenity' tag", logger, "Missing tag: amenity")
    pos_type = resolve_pos_type(amenity)
    if pos_type is None:
        raise _fail(
            node,
            f"OSM node {node.node_id} has unsupported amenity type: {amenity}",
            logger,
            f"Unsupported amenity: {amenity}",
        )

    missing = [key for key in ADDRESS_TAGS if is_blank(tags.get(key))]
    if missing:
        missing_str = ", ".join(missing)
        raise _fail(
            node,
            f"OSM node {node.node_id} missing required address fields: {missing_str}",
            logger,
            f"Missing tags: {missing_str}",
        )
    street, house_number, raw_postal_code, city = (tags[key] for key in ADDRESS_TAGS)

    postal_code = parse_postal_code(raw_postal_code)
    if postal_code is None:
        raise _fail(
            node,
            f"OSM node {node.node_id} has invalid postal code: {raw_postal_code}",
            logger,
            f"Invalid postal code: {raw_postal_code}",
        )

    campus = resolve_campus(postal_code)
    if campus is None:
        raise _fail(
            node,
            f"OSM node {node.node_id} has postal code {postal_code} that doesn't match known campuses",
            logger,
            f"Unknown campus postal code: {postal_code}",
        )

    description = build_description(tags, city)

    log_event(
        logger,
        f"mapped OSM node {node.node_id} to POS '{name}'",
        level=logging.DEBUG,
        node_id=node.node_id,
        event="OSM_CONVERT_END",
        status="ok",
    )
    return Pos(
        name=name,
        description=description,
        type=pos_type,
        campus=campus,
        street=street,
        house_number=house_number,
        postal_code=postal_code,
        city=city,
    )
