"""Data models used across the POS import."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from campus_coffee.common.time_utils import from_iso, to_iso


class PosType(str, Enum):
    CAFE = "CAFE"
    BAKERY = "BAKERY"


class CampusType(str, Enum):
    ALTSTADT = "ALTSTADT"
    INF = "INF"


@dataclass(frozen=True)
class OsmNode:
    """An OpenStreetMap node as returned by the OSM API.

    ``tags`` is stored as a read-only view; a key that is absent is distinct
    from a key mapped to an empty string.
    """

    node_id: int
    lat: float
    lon: float
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))


@dataclass(frozen=True)
class Pos:
    name: str
    description: str
    type: PosType
    campus: CampusType
    street: str
    house_number: str
    postal_code: int
    city: str
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["type"] = self.type.value
        payload["campus"] = self.campus.value
        payload["created_at"] = to_iso(self.created_at)
        payload["updated_at"] = to_iso(self.updated_at)
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Pos":
        return cls(
            id=payload.get("id"),
            name=payload["name"],
            description=payload["description"],
            type=PosType(payload["type"]),
            campus=CampusType(payload["campus"]),
            street=payload["street"],
            house_number=payload["house_number"],
            postal_code=int(payload["postal_code"]),
            city=payload["city"],
            created_at=from_iso(payload.get("created_at")),
            updated_at=from_iso(payload.get("updated_at")),
        )
