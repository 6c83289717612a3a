"""Tests for walls/actor.py: wall diffing and the wall actor lifecycle."""
import pytest
from shared.types import Shape, Line, VectorPath, Wall, Style, is_wall, move, line
from reconcile.errors import WiringError
from reconcile.reconciler import Reconciler
from walls.constants import WALL_KEY, DOOR_KEY
from walls.actor import WallActor, WALL_KIND, diff_walls, build_wall, is_wall_source
from walls.contours import drawing_to_contours


def _segments(n, item_id="p"):
    """Wall-flagged path with *n* disjoint short segments (one contour each)."""
    cmds = []
    for i in range(n):
        cmds += [move((0, 100 * i)), line((10, 100 * i))]
    return VectorPath(id=item_id, commands=cmds, style=Style(4), metadata={WALL_KEY: True})


def _walls_of(items, drawing_id):
    return [i for i in items.get_items() if is_wall(i) and i.attached_to == drawing_id]


def _set_segments(n):
    def mutate(item):
        item.commands = _segments(n).commands
    return mutate


# ============================================================
# diff_walls
# ============================================================

class TestDiffWalls:
    @pytest.mark.parametrize("m,n", [(0, 0), (0, 2), (2, 0), (1, 3), (3, 1), (2, 2)])
    def test_counts(self, m, n):
        prev = [f"w{i}" for i in range(m)]
        contours = [[(float(i), 0.0)] for i in range(n)]
        diff = diff_walls(prev, contours)
        assert len(diff.created) == max(0, n - m)
        assert [i for i, _ in diff.updated_at] == list(range(min(m, n)))
        assert diff.deleted_ids == prev[n:]
        # after applying, one wall per contour
        assert m - len(diff.deleted_ids) + len(diff.created) == n

    def test_matches_by_position(self):
        diff = diff_walls(["a", "b"], [[(1, 1)], [(2, 2)], [(3, 3)]])
        assert diff.updated_at == [(0, [(1, 1)]), (1, [(2, 2)])]
        assert diff.created == [[(3, 3)]]
        assert diff.deleted_ids == []

    def test_trailing_deletes(self):
        diff = diff_walls(["a", "b", "c"], [[(1, 1)]])
        assert diff.deleted_ids == ["b", "c"]


# ============================================================
# Helpers
# ============================================================

def test_build_wall_copies_transform():
    drawing = Shape(id="s", position=(5, 6), rotation=30, scale=(2, 3))
    wall = build_wall(drawing, [(0, 0), (1, 1)])
    assert wall.attached_to == "s"
    assert wall.points == [(0, 0), (1, 1)]
    assert (wall.position, wall.rotation, wall.scale) == ((5, 6), 30, (2, 3))
    assert wall.id != build_wall(drawing, []).id


def test_is_wall_source():
    assert is_wall_source(Shape(id="s", metadata={WALL_KEY: True}))
    assert not is_wall_source(Shape(id="s"))
    assert not is_wall_source(Wall(id="w", metadata={WALL_KEY: True}))


# ============================================================
# Wiring
# ============================================================

class TestWiring:
    def test_actor_requires_door_reactor(self, items, engine):
        with pytest.raises(WiringError, match="DoorReactor"):
            WallActor(Reconciler(items, engine), _segments(1))

    def test_kind_requires_door_reactor(self, items, engine):
        with pytest.raises(WiringError, match="DoorReactor"):
            Reconciler(items, engine).register_actor(WALL_KIND)


# ============================================================
# Lifecycle through the reconciler
# ============================================================

class TestWallActor:
    def test_construct_creates_one_wall_per_contour(self, reconciler, items, engine):
        drawing = _segments(3)
        items.create_items(drawing)
        reconciler.reconcile(items.get_items())
        walls = _walls_of(items, "p")
        assert len(walls) == 3
        assert len(reconciler.actor("wall", "p").walls) == 3
        assert engine.live_handles == 0

    def test_wall_points_match_contours(self, reconciler, items, engine):
        drawing = Line(id="l", start_position=(0, 0), end_position=(50, 0), style=Style(6),
                       position=(10, 10), metadata={WALL_KEY: True})
        items.create_items(drawing)
        reconciler.reconcile(items.get_items())
        (wall,) = _walls_of(items, "l")
        assert wall.points == drawing_to_contours(drawing, engine)[0]
        assert wall.position == (10, 10)

    def test_unflagged_drawing_ignored(self, reconciler, items):
        items.create_items(Shape(id="s", width=10, height=10))
        reconciler.reconcile(items.get_items())
        assert reconciler.actor("wall", "s") is None
        assert items.created == ["s"]

    def test_grow_appends_walls(self, reconciler, items):
        items.create_items(_segments(1))
        reconciler.reconcile(items.get_items())
        first_id = reconciler.actor("wall", "p").walls[0].id
        items.update_items([("p", _set_segments(3))])
        reconciler.reconcile(items.get_items())
        actor = reconciler.actor("wall", "p")
        assert len(actor.walls) == 3
        assert actor.walls[0].id == first_id
        assert len(_walls_of(items, "p")) == 3

    def test_shrink_deletes_trailing_walls(self, reconciler, items):
        items.create_items(_segments(3))
        reconciler.reconcile(items.get_items())
        ids = [w.id for w in reconciler.actor("wall", "p").walls]
        items.update_items([("p", _set_segments(1))])
        reconciler.reconcile(items.get_items())
        assert [w.id for w in reconciler.actor("wall", "p").walls] == ids[:1]
        assert sorted(items.deleted) == sorted(ids[1:])
        assert [w.id for w in _walls_of(items, "p")] == ids[:1]

    def test_shrink_to_zero_and_back(self, reconciler, items):
        items.create_items(_segments(2))
        reconciler.reconcile(items.get_items())
        items.update_items([("p", _set_segments(0))])
        reconciler.reconcile(items.get_items())
        assert _walls_of(items, "p") == []
        items.update_items([("p", _set_segments(2))])
        reconciler.reconcile(items.get_items())
        assert len(_walls_of(items, "p")) == 2

    def test_update_always_reissues_patches(self, reconciler, items):
        items.create_items(_segments(2))
        reconciler.reconcile(items.get_items())
        reconciler.reconcile(items.get_items())
        assert len(items.updated) == 2

    def test_repeated_update_converges(self, reconciler, items):
        items.create_items(_segments(2))
        reconciler.reconcile(items.get_items())
        reconciler.reconcile(items.get_items())
        once = sorted((w.id, tuple(w.points)) for w in _walls_of(items, "p"))
        reconciler.reconcile(items.get_items())
        twice = sorted((w.id, tuple(w.points)) for w in _walls_of(items, "p"))
        assert once == twice

    def test_update_follows_transform(self, reconciler, items):
        items.create_items(_segments(1))
        reconciler.reconcile(items.get_items())
        items.update_items([("p", lambda item: setattr(item, "position", (40, 40)))])
        reconciler.reconcile(items.get_items())
        (wall,) = _walls_of(items, "p")
        assert wall.position == (40, 40)

    def test_update_with_non_drawing_is_noop(self, reconciler, items):
        items.create_items(_segments(2))
        reconciler.reconcile(items.get_items())
        actor = reconciler.actor("wall", "p")
        actor.update(Wall(id="p"))
        assert reconciler.patcher.is_empty()
        assert len(actor.walls) == 2

    def test_non_drawing_parent_stays_inert(self, reconciler):
        actor = WallActor(reconciler, Wall(id="w"))
        assert actor.walls == []
        assert reconciler.patcher.is_empty()

    def test_removed_drawing_deletes_every_wall(self, reconciler, items):
        items.create_items(_segments(3))
        reconciler.reconcile(items.get_items())
        ids = [w.id for w in reconciler.actor("wall", "p").walls]
        remaining = [i for i in items.get_items() if i.id != "p"]
        reconciler.reconcile(remaining)
        assert sorted(items.deleted) == sorted(ids)
        assert reconciler.actor("wall", "p") is None
        before = (list(items.created), list(items.updated), list(items.deleted))
        reconciler.reconcile([i for i in items.get_items() if i.id != "p"])
        assert (items.created, items.updated, items.deleted) == before

    def test_unflagging_deletes_walls(self, reconciler, items):
        items.create_items(_segments(2))
        reconciler.reconcile(items.get_items())
        items.update_items([("p", lambda item: item.metadata.pop(WALL_KEY))])
        reconciler.reconcile(items.get_items())
        assert _walls_of(items, "p") == []
        assert reconciler.actor("wall", "p") is None

    def test_door_splits_and_rejoins_wall(self, reconciler, items):
        wall_line = Line(id="l", start_position=(0, 0), end_position=(200, 0), style=Style(10),
                         metadata={WALL_KEY: True})
        door = Shape(id="d", width=40, height=40, position=(80, -20), metadata={DOOR_KEY: True})
        items.create_items(wall_line, door)
        reconciler.reconcile(items.get_items())
        assert len(_walls_of(items, "l")) == 2
        items.update_items([("d", lambda item: setattr(item, "position", (500, 500)))])
        reconciler.reconcile(items.get_items())
        assert len(_walls_of(items, "l")) == 1


# ============================================================
# Failed passes
# ============================================================

def _fail_for(monkeypatch, drawing_id):
    contours = WallActor._contours

    def failing(self, drawing):
        if drawing.id == drawing_id:
            raise RuntimeError("contours failed")
        return contours(self, drawing)

    monkeypatch.setattr(WallActor, "_contours", failing)


class TestFailedPass:
    def test_grown_actor_rolls_back(self, reconciler, items, monkeypatch):
        items.create_items(_segments(1, "a"), _segments(1, "b"))
        reconciler.reconcile(items.get_items())
        items.update_items([("a", _set_segments(3))])
        _fail_for(monkeypatch, "b")
        with pytest.raises(RuntimeError, match="contours failed"):
            reconciler.reconcile(items.get_items())
        assert len(reconciler.actor("wall", "a").walls) == len(_walls_of(items, "a")) == 1
        monkeypatch.undo()
        reconciler.reconcile(items.get_items())
        actor_ids = [w.id for w in reconciler.actor("wall", "a").walls]
        assert sorted(actor_ids) == sorted(w.id for w in _walls_of(items, "a"))
        assert len(actor_ids) == 3

    def test_deleted_actor_restored(self, reconciler, items, monkeypatch):
        items.create_items(_segments(2, "a"), _segments(1, "b"))
        reconciler.reconcile(items.get_items())
        ids = [w.id for w in reconciler.actor("wall", "a").walls]
        without_a = [i for i in items.get_items() if i.id != "a"]
        _fail_for(monkeypatch, "b")
        with pytest.raises(RuntimeError, match="contours failed"):
            reconciler.reconcile(without_a)
        assert [w.id for w in reconciler.actor("wall", "a").walls] == ids
        assert len(_walls_of(items, "a")) == 2
        monkeypatch.undo()
        reconciler.reconcile(without_a)
        assert reconciler.actor("wall", "a") is None
        assert _walls_of(items, "a") == []
