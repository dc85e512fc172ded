"""Derived View Engine - Filters, visible points and favorite annotations.

Everything here is computed from the store snapshot plus the filter
selection; nothing is mutated independently.

Rules:
- Material universe: distinct materials of all known points, sorted
  ascending by code point (case-sensitive). This is the checkbox order.
- Visible points: all points when no filter is active, otherwise the points
  accepting at least one selected material. Source order is kept.
- Favorite flag: point.id in the favorite id set, nothing else.
- Favorites list: favorites whose point is known, in point order. Favorite
  ids with no known point are skipped.

The same inputs always give an equal DerivedView, so reruns render the
same markers.
"""

import hashlib
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from recycling_map.core.state_store import LocalStateStore, StoreSnapshot
from recycling_map.model.recycling_point import RecyclingPoint

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


@dataclass(frozen=True)
class AnnotatedPoint:
    """A visible point paired with its favorite flag."""

    point: RecyclingPoint
    is_favorite: bool

    @property
    def id(self) -> str:
        return self.point.id


@dataclass(frozen=True)
class DerivedView:
    """Everything the map, filter panel and favorites list render from."""

    materials: tuple[str, ...] = ()
    active_filters: frozenset[str] = field(default_factory=frozenset)
    points: tuple[AnnotatedPoint, ...] = ()
    favorites: tuple[RecyclingPoint, ...] = ()
    total_points: int = 0
    points_loaded: bool = False
    version: int = 0

    @property
    def visible_count(self) -> int:
        return len(self.points)

    def find(self, point_id: str) -> AnnotatedPoint | None:
        """Visible point by id, or None if filtered out / unknown."""
        for annotated in self.points:
            if annotated.id == point_id:
                return annotated
        return None


def material_universe(points: Iterable[RecyclingPoint]) -> tuple[str, ...]:
    """Distinct materials across all points, sorted ascending."""
    materials: set[str] = set()
    for point in points:
        materials.update(point.materials)
    return tuple(sorted(materials))


def visible_points(
    points: Iterable[RecyclingPoint],
    selection: set[str] | frozenset[str],
) -> tuple[RecyclingPoint, ...]:
    """Points passing the filter. An empty selection means no filter."""
    if not selection:
        return tuple(points)
    return tuple(p for p in points if p.accepts_any(selection))


def is_favorite(point: RecyclingPoint, favorite_ids: set[str] | frozenset[str]) -> bool:
    return point.id in favorite_ids


def annotate_points(
    points: Iterable[RecyclingPoint],
    favorite_ids: set[str] | frozenset[str],
) -> tuple[AnnotatedPoint, ...]:
    return tuple(AnnotatedPoint(point=p, is_favorite=is_favorite(p, favorite_ids)) for p in points)


def favorite_points(
    points: Iterable[RecyclingPoint],
    favorite_ids: set[str] | frozenset[str],
) -> tuple[RecyclingPoint, ...]:
    """Known points that are favorites, in point order (dangling ids skipped)."""
    return tuple(p for p in points if p.id in favorite_ids)


def filter_element_id(material: str) -> str:
    """Readable element id for a material ("Papel y cartón" -> "filter-Papel-y-cartón")."""
    return "filter-" + _WHITESPACE.sub("-", material)


def filter_widget_key(material: str) -> str:
    """Streamlit key for a material checkbox.

    filter_element_id maps "Tetra pak" and "Tetra-pak" to the same id; the
    digest of the raw material keeps their keys apart.
    """
    digest = hashlib.sha1(material.encode("utf-8")).hexdigest()[:12]
    return f"{filter_element_id(material)}-{digest}"


def compute_view(snapshot: StoreSnapshot, selection: set[str] | frozenset[str]) -> DerivedView:
    """Compute the full derived view for one snapshot and filter selection.

    Only materials in the current universe can be active.
    """
    materials = material_universe(snapshot.points)
    active = frozenset(selection) & frozenset(materials)
    shown = visible_points(snapshot.points, active)
    return DerivedView(
        materials=materials,
        active_filters=active,
        points=annotate_points(shown, snapshot.favorite_ids),
        favorites=favorite_points(snapshot.points, snapshot.favorite_ids),
        total_points=len(snapshot.points),
        points_loaded=snapshot.points_loaded,
        version=snapshot.version,
    )


class DerivedViewEngine:
    """Keeps a DerivedView current for the store and the filter selection.

    Recomputes on every store change (as a store listener) and on every
    filter change.

    Example:
        engine = DerivedViewEngine(store)
        engine.toggle_filter("Vidrio")
        for annotated in engine.view.points:
            ...
    """

    def __init__(self, store: LocalStateStore) -> None:
        self._store = store
        self._selection: frozenset[str] = frozenset()
        self._view = DerivedView()
        store.add_listener(self._on_store_changed)
        self.recompute()

    @property
    def view(self) -> DerivedView:
        return self._view

    @property
    def selection(self) -> frozenset[str]:
        return self._selection

    def recompute(self) -> DerivedView:
        """Recompute from the current store snapshot and selection."""
        view = compute_view(self._store.snapshot, self._selection)
        # Prune so a material that disappeared does not come back checked
        self._selection = view.active_filters
        self._view = view
        logger.debug(
            f"[VIEW] Recomputed: {view.visible_count}/{view.total_points} visible, "
            f"{len(view.materials)} materials, filters={sorted(view.active_filters)}"
        )
        return view

    def toggle_filter(self, material: str) -> DerivedView:
        """Check an unchecked material or uncheck a checked one."""
        if material in self._selection:
            self._selection = self._selection - {material}
        else:
            self._selection = self._selection | {material}
        return self.recompute()

    def set_filters(self, materials: Iterable[str]) -> DerivedView:
        """Replace the whole selection (checkbox state read back from widgets)."""
        self._selection = frozenset(materials)
        return self.recompute()

    def clear_filters(self) -> DerivedView:
        self._selection = frozenset()
        return self.recompute()

    def _on_store_changed(self, snapshot: StoreSnapshot) -> None:
        self.recompute()
