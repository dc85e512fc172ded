"""Tests for the derived view: material universe, filtering, favorite flags.

Property tests use hypothesis over small material alphabets so filters and
points overlap often.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from recycling_map.core.derived_view import (
    DerivedViewEngine,
    compute_view,
    favorite_points,
    filter_element_id,
    filter_widget_key,
    is_favorite,
    material_universe,
    visible_points,
)
from recycling_map.core.state_store import LocalStateStore, StoreSnapshot
from recycling_map.model.recycling_point import RecyclingPoint
from recycling_map.model.session import Session

MATERIALS = ["glass", "plastic", "paper", "Papel y cartón", "Vidrio", "metal"]


@st.composite
def point_lists(draw: st.DrawFn) -> list[RecyclingPoint]:
    count = draw(st.integers(min_value=0, max_value=8))
    return [
        RecyclingPoint(
            id=f"p{i}",
            name=f"Point {i}",
            commune="",
            schedule="",
            lat=0.0,
            lon=0.0,
            materials=tuple(draw(st.lists(st.sampled_from(MATERIALS), max_size=4))),
        )
        for i in range(count)
    ]


selections = st.frozensets(st.sampled_from(MATERIALS + ["unknown"]), max_size=4)


# =============================================================================
# PURE FUNCTIONS
# =============================================================================


class TestScenarioAB:
    """Two points: a accepts plastic+glass, b accepts glass."""

    def test_plastic_filter_shows_only_a(self, points_ab: tuple[RecyclingPoint, ...]) -> None:
        assert [p.id for p in visible_points(points_ab, {"plastic"})] == ["a"]

    def test_empty_filter_shows_all(self, points_ab: tuple[RecyclingPoint, ...]) -> None:
        assert [p.id for p in visible_points(points_ab, set())] == ["a", "b"]

    def test_glass_filter_shows_both(self, points_ab: tuple[RecyclingPoint, ...]) -> None:
        assert [p.id for p in visible_points(points_ab, {"glass"})] == ["a", "b"]

    def test_material_universe_sorted(self, points_ab: tuple[RecyclingPoint, ...]) -> None:
        assert material_universe(points_ab) == ("glass", "plastic")

    def test_favorite_flags(self, point_a: RecyclingPoint, point_b: RecyclingPoint) -> None:
        favorites = frozenset({"b"})
        assert is_favorite(point_a, favorites) is False
        assert is_favorite(point_b, favorites) is True


class TestMaterialUniverse:
    def test_empty(self) -> None:
        assert material_universe([]) == ()

    def test_case_sensitive_code_point_order(self) -> None:
        points = [RecyclingPoint("x", "", "", "", 0.0, 0.0, ("vidrio", "Vidrio", "Papel"))]
        assert material_universe(points) == ("Papel", "Vidrio", "vidrio")

    @given(points=point_lists())
    @settings(max_examples=50)
    def test_universe_is_sorted_and_distinct(self, points: list[RecyclingPoint]) -> None:
        universe = material_universe(points)
        assert list(universe) == sorted(set(universe))
        assert set(universe) == {m for p in points for m in p.materials}


class TestVisiblePoints:
    @given(points=point_lists(), selection=selections)
    @settings(max_examples=50)
    def test_visible_is_ordered_subsequence(self, points: list[RecyclingPoint], selection: frozenset[str]) -> None:
        shown = visible_points(points, selection)
        positions = [points.index(p) for p in shown]
        assert positions == sorted(positions)

    @given(points=point_lists(), selection=selections)
    @settings(max_examples=50)
    def test_every_visible_point_matches_a_filter(
        self, points: list[RecyclingPoint], selection: frozenset[str]
    ) -> None:
        shown = visible_points(points, selection)
        if not selection:
            assert list(shown) == points
        else:
            assert all(set(p.materials) & selection for p in shown)
            hidden = [p for p in points if p not in shown]
            assert not any(set(p.materials) & selection for p in hidden)

    def test_point_without_materials_hidden_by_any_filter(self) -> None:
        bare = RecyclingPoint("x", "", "", "", 0.0, 0.0, ())
        assert visible_points([bare], set()) == (bare,)
        assert visible_points([bare], {"glass"}) == ()


class TestFavoritePoints:
    def test_dangling_favorite_ids_are_skipped(self, points_ab: tuple[RecyclingPoint, ...]) -> None:
        assert [p.id for p in favorite_points(points_ab, frozenset({"b", "gone"}))] == ["b"]

    def test_follows_point_order(self, points_ab: tuple[RecyclingPoint, ...]) -> None:
        assert [p.id for p in favorite_points(points_ab, frozenset({"b", "a"}))] == ["a", "b"]


class TestFilterElementId:
    def test_whitespace_replaced(self) -> None:
        assert filter_element_id("Papel y cartón") == "filter-Papel-y-cartón"

    def test_every_whitespace_char_replaced(self) -> None:
        assert filter_element_id("a  b\tc") == "filter-a--b-c"


class TestFilterWidgetKey:
    def test_whitespace_and_hyphen_do_not_collide(self) -> None:
        assert filter_element_id("Tetra pak") == filter_element_id("Tetra-pak")
        assert filter_widget_key("Tetra pak") != filter_widget_key("Tetra-pak")
        assert filter_widget_key("a b") != filter_widget_key("a\tb")

    def test_starts_with_element_id(self) -> None:
        assert filter_widget_key("Papel y cartón").startswith("filter-Papel-y-cartón-")

    @given(materials=st.lists(st.text(alphabet=" -\tab", min_size=1, max_size=6), unique=True, max_size=20))
    def test_distinct_materials_get_distinct_keys(self, materials: list[str]) -> None:
        assert len({filter_widget_key(m) for m in materials}) == len(materials)


class TestComputeView:
    def test_selection_outside_universe_is_ignored(self, points_ab: tuple[RecyclingPoint, ...]) -> None:
        snapshot = StoreSnapshot(points=points_ab, points_loaded=True)
        view = compute_view(snapshot, frozenset({"metal"}))
        assert view.active_filters == frozenset()
        assert view.visible_count == 2

    def test_annotation_and_favorites(self, points_ab: tuple[RecyclingPoint, ...]) -> None:
        snapshot = StoreSnapshot(points=points_ab, favorite_ids=frozenset({"b"}), points_loaded=True)
        view = compute_view(snapshot, frozenset({"glass"}))
        assert [(p.id, p.is_favorite) for p in view.points] == [("a", False), ("b", True)]
        assert [p.id for p in view.favorites] == ["b"]
        assert view.find("b") is not None and view.find("zzz") is None

    @given(points=point_lists(), selection=selections)
    @settings(max_examples=30)
    def test_same_inputs_give_equal_views(self, points: list[RecyclingPoint], selection: frozenset[str]) -> None:
        snapshot = StoreSnapshot(points=tuple(points), favorite_ids=frozenset({"p0"}))
        assert compute_view(snapshot, selection) == compute_view(snapshot, selection)


# =============================================================================
# ENGINE
# =============================================================================


class TestDerivedViewEngine:
    def test_recomputes_on_store_change(
        self, store: LocalStateStore, engine: DerivedViewEngine, session_u1: Session, points_ab: tuple
    ) -> None:
        store.begin_session(session_u1)
        assert engine.view.total_points == 0 and not engine.view.points_loaded

        store.replace_points(points_ab)
        assert engine.view.total_points == 2 and engine.view.points_loaded

        store.replace_favorites({"a"})
        assert [p.id for p in engine.view.favorites] == ["a"]

    def test_toggle_filter_twice_restores(
        self, store: LocalStateStore, engine: DerivedViewEngine, session_u1: Session, points_ab: tuple
    ) -> None:
        store.begin_session(session_u1)
        store.replace_points(points_ab)

        engine.toggle_filter("plastic")
        assert [p.id for p in engine.view.points] == ["a"]
        engine.toggle_filter("plastic")
        assert engine.view.active_filters == frozenset()
        assert engine.view.visible_count == 2

    def test_vanished_material_is_pruned(
        self,
        store: LocalStateStore,
        engine: DerivedViewEngine,
        session_u1: Session,
        points_ab: tuple,
        point_b: RecyclingPoint,
    ) -> None:
        store.begin_session(session_u1)
        store.replace_points(points_ab)
        engine.toggle_filter("plastic")

        # Point a (the only plastic point) is deleted remotely
        store.replace_points((point_b,))
        assert engine.selection == frozenset()
        assert [p.id for p in engine.view.points] == ["b"]

        # Plastic comes back unchecked
        store.replace_points(points_ab)
        assert engine.view.active_filters == frozenset()

    def test_set_and_clear_filters(
        self, store: LocalStateStore, engine: DerivedViewEngine, session_u1: Session, points_ab: tuple
    ) -> None:
        store.begin_session(session_u1)
        store.replace_points(points_ab)
        engine.set_filters(["glass", "plastic"])
        assert engine.view.active_filters == frozenset({"glass", "plastic"})
        engine.clear_filters()
        assert engine.selection == frozenset()

    def test_store_clear_empties_view(
        self, store: LocalStateStore, engine: DerivedViewEngine, session_u1: Session, points_ab: tuple
    ) -> None:
        store.begin_session(session_u1)
        store.replace_points(points_ab)
        store.replace_favorites({"a"})
        engine.toggle_filter("glass")

        store.clear()
        view = engine.view
        assert view.points == () and view.favorites == () and view.materials == ()
        assert view.active_filters == frozenset()
