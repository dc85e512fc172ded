"""RecyclingPoint - A drop-off location mirrored from the remote store.

Identity is the remote document id. Points are never patched locally:
every snapshot replaces the whole list.
"""

from dataclasses import dataclass
from typing import Any

from recycling_map.constants import FirestoreConfig


@dataclass(frozen=True)
class RecyclingPoint:
    """A recycling drop-off point.

    Attributes:
        id: Remote document id
        name: Display name
        commune: Commune / locality
        schedule: Free-text opening hours
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees
        materials: Accepted materials in source order (duplicates kept)

    Example:
        point = RecyclingPoint.from_document("p1", {"nombre": "Punto Limpio", ...})
        print(point.lon_lat)
    """

    id: str
    name: str
    commune: str
    schedule: str
    lat: float
    lon: float
    materials: tuple[str, ...] = ()

    @property
    def lat_lon(self) -> tuple[float, float]:
        """Return (lat, lon) tuple - standard geographic order."""
        return (self.lat, self.lon)

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple - GeoJSON/Pydeck order."""
        return (self.lon, self.lat)

    def accepts_any(self, materials: set[str] | frozenset[str]) -> bool:
        """True if at least one accepted material is in ``materials``."""
        return any(m in materials for m in self.materials)

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "RecyclingPoint":
        """Create a point from a remote document.

        Missing text fields become "" and missing materials become ().
        Coordinates are required.

        Raises:
            ValueError: If latitude/longitude are missing or not numeric,
                or materials is neither a list nor a string.
        """
        try:
            lat = float(data[FirestoreConfig.FIELD_LAT])
            lon = float(data[FirestoreConfig.FIELD_LON])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Point {doc_id} has invalid coordinates: {e}") from e

        materials = data.get(FirestoreConfig.FIELD_MATERIALS) or ()
        if isinstance(materials, str):
            materials = (materials,)
        elif not isinstance(materials, (list, tuple)):
            raise ValueError(f"Point {doc_id} has invalid materials: {materials!r}")

        return cls(
            id=doc_id,
            name=str(data.get(FirestoreConfig.FIELD_NAME, "")),
            commune=str(data.get(FirestoreConfig.FIELD_COMMUNE, "")),
            schedule=str(data.get(FirestoreConfig.FIELD_SCHEDULE, "")),
            lat=lat,
            lon=lon,
            materials=tuple(str(m) for m in materials),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the remote document layout (id excluded)."""
        return {
            FirestoreConfig.FIELD_NAME: self.name,
            FirestoreConfig.FIELD_COMMUNE: self.commune,
            FirestoreConfig.FIELD_SCHEDULE: self.schedule,
            FirestoreConfig.FIELD_LAT: self.lat,
            FirestoreConfig.FIELD_LON: self.lon,
            FirestoreConfig.FIELD_MATERIALS: list(self.materials),
        }

    def __repr__(self) -> str:
        return f"RecyclingPoint({self.id}, {self.name!r}, materials={list(self.materials)})"
