import pytest

from maptransform.errors import TileCoordError
from maptransform.geo.point import Coordinate
from maptransform.geo.tile_coord import TileCoord, cover


def _tuples(tiles):
    return {(t.z, t.x, t.y, t.w) for t in tiles}


class TestPackedId:
    def test_known_ids(self):
        assert TileCoord(0, 0, 0).id == 0
        assert TileCoord(1, 1, 0).id == 33
        assert TileCoord(1, 0, 0, 1).id == 257
        assert TileCoord(1, 0, 0, -1).id == 129

    @pytest.mark.parametrize(
        "z, x, y, w",
        [
            (0, 0, 0, 0),
            (0, 0, 0, -1),
            (3, 7, 0, 2),
            (3, 0, 7, -2),
            (12, 4095, 17, 1),
            (20, 2**20 - 1, 2**20 - 1, -2),
            (20, 524288, 0, 2),
        ],
    )
    def test_from_id_round_trip(self, z, x, y, w):
        coord = TileCoord(z, x, y, w)

        restored = TileCoord.from_id(coord.id)

        assert (restored.z, restored.x, restored.y, restored.w) == (z, x, y, w)

    def test_world_copies_have_distinct_ids(self):
        ids = {TileCoord(2, 1, 1, w).id for w in range(-2, 3)}

        assert len(ids) == 5

    def test_zoom_outside_packing_range(self):
        with pytest.raises(TileCoordError):
            TileCoord(32, 0, 0)
        with pytest.raises(ValueError):
            TileCoord(-1, 0, 0)


class TestNavigation:
    def test_root_has_no_parent(self):
        assert TileCoord(0, 0, 0).parent(10) is None

    def test_parent(self):
        assert TileCoord(3, 5, 6, -1).parent(10) == TileCoord(2, 2, 3, -1)

    def test_overscaled_parent_keeps_position(self):
        assert TileCoord(4, 5, 2, 1).parent(3) == TileCoord(3, 5, 2, 1)

    def test_children(self):
        children = TileCoord(1, 1, 0, 2).children(10)

        assert children == [
            TileCoord(2, 2, 0, 2),
            TileCoord(2, 3, 0, 2),
            TileCoord(2, 2, 1, 2),
            TileCoord(2, 3, 1, 2),
        ]

    def test_overscaled_child(self):
        assert TileCoord(3, 5, 2, 1).children(3) == [TileCoord(4, 5, 2, 1)]

    @pytest.mark.parametrize("coord", [TileCoord(1, 1, 1), TileCoord(5, 17, 30, -1), TileCoord(9, 0, 511, 2)])
    def test_parent_children_inverse(self, coord):
        assert coord in coord.parent(coord.z).children(coord.z)

    def test_wrapped(self):
        coord = TileCoord(4, 3, 9, -2)

        assert coord.wrapped().w == 0
        assert coord.wrapped().key == coord.key
        assert coord.wrapped().wrapped() == coord.wrapped()


class TestValueSemantics:
    def test_str(self):
        assert str(TileCoord(3, 2, 1, 5)) == "3/2/1"

    def test_equality_and_hashing(self):
        tiles = {TileCoord(2, 1, 1), TileCoord(2, 1, 1), TileCoord(2, 1, 1, 1)}

        assert len(tiles) == 2

    def test_to_coordinate(self):
        assert TileCoord(2, 1, 3, -1).to_coordinate(10) == Coordinate(-3, 3, 2)
        assert TileCoord(5, 3, 2, 1).to_coordinate(3) == Coordinate(11, 2, 3)


class TestCover:
    def test_full_world_at_zoom_one(self):
        corners = [Coordinate(0, 0, 1), Coordinate(2, 0, 1), Coordinate(2, 2, 1), Coordinate(0, 2, 1)]

        assert _tuples(cover(1, corners, 1)) == {(1, 0, 0, 0), (1, 1, 0, 0), (1, 0, 1, 0), (1, 1, 1, 0)}

    def test_columns_wrap_into_world_copies(self):
        corners = [
            Coordinate(-0.5, 0, 1),
            Coordinate(0.5, 0, 1),
            Coordinate(0.5, 1, 1),
            Coordinate(-0.5, 1, 1),
        ]

        assert _tuples(cover(1, corners, 1)) == {(1, 1, 0, -1), (1, 0, 0, 0)}

    def test_rows_outside_the_world_are_dropped(self):
        corners = [
            Coordinate(0, -1, 1),
            Coordinate(1, -1, 1),
            Coordinate(1, 0.5, 1),
            Coordinate(0, 0.5, 1),
        ]

        assert _tuples(cover(1, corners, 1)) == {(1, 0, 0, 0)}

    def test_rotated_quad(self):
        diamond = [Coordinate(2, 0.5, 2), Coordinate(3.5, 2, 2), Coordinate(2, 3.5, 2), Coordinate(0.5, 2, 2)]

        tiles = _tuples(cover(2, diamond, 2))

        assert {(2, 1, 1, 0), (2, 2, 1, 0), (2, 1, 2, 0), (2, 2, 2, 0)} <= tiles
        assert (2, 0, 0, 0) not in tiles
        assert (2, 3, 3, 0) not in tiles

    def test_winding_does_not_matter(self):
        clockwise = [Coordinate(0.2, 0.2, 2), Coordinate(2.7, 0.4, 2), Coordinate(2.5, 2.6, 2), Coordinate(0.3, 2.2, 2)]

        counter_clockwise = [clockwise[0], clockwise[3], clockwise[2], clockwise[1]]

        assert _tuples(cover(2, clockwise, 2)) == _tuples(cover(2, counter_clockwise, 2))

    def test_output_zoom_marks_overscaled_tiles(self):
        corners = [Coordinate(0, 0, 1), Coordinate(1, 0, 1), Coordinate(1, 1, 1), Coordinate(0, 1, 1)]

        assert _tuples(cover(1, corners, 4)) == {(4, 0, 0, 0)}

    def test_corners_near_tile_boundaries_are_snapped(self):
        corners = [
            Coordinate(-1e-12, -1e-12, 0),
            Coordinate(1 + 1e-12, 0, 0),
            Coordinate(1 + 1e-12, 1 + 1e-12, 0),
            Coordinate(0, 1, 0),
        ]

        assert _tuples(cover(0, corners, 0)) == {(0, 0, 0, 0)}
