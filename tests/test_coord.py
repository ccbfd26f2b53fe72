"""Unit tests for coordinates, extents and the cartesian iterator.

Covers arithmetic, flat indexing, dimension checks and the scan order that
grid storage and pattern matching both depend on.
"""

import numpy as np
import pytest
from gridrewrite.core.coord import Coordinate, as_coordinate, cartesian_iter, strides, volume


class TestCoordinateArithmetic:
    """Test value semantics of coordinates."""

    def test_equality(self):
        """Coordinates compare component-wise."""
        assert Coordinate.of(1, 2, 3, 4) == Coordinate.of(1, 2, 3, 4)
        assert Coordinate.of(1, 2, 3, 4) != Coordinate.of(-100, 2, 3, 4)

    def test_add(self):
        assert Coordinate.of(1, 2, 3, 4) + Coordinate.of(5, 6, 7, 8) == Coordinate.of(6, 8, 10, 12)

    def test_sub(self):
        assert Coordinate.of(1, 2, 3, 4) - Coordinate.of(0, 2, 4, 8) == Coordinate.of(1, 0, -1, -4)

    def test_add_plain_tuple(self):
        """Tuples are promoted to coordinates."""
        assert Coordinate.of(1, 1) + (2, 3) == Coordinate.of(3, 4)

    def test_hashable(self):
        """Coordinates can be used as dict keys and set members."""
        seen = {Coordinate.of(0, 0), Coordinate.of(0, 0), Coordinate.of(1, 0)}
        assert len(seen) == 2

    def test_sequence_protocol(self):
        coord = Coordinate.of(4, 5, 6)
        assert len(coord) == 3
        assert coord.dimension == 3
        assert coord[1] == 5
        assert tuple(coord) == (4, 5, 6)

    def test_zero_and_one(self):
        assert Coordinate.zero(3) == Coordinate.of(0, 0, 0)
        assert Coordinate.one(2) == Coordinate.of(1, 1)

    def test_as_coordinate(self):
        """Bare ints become 1D coordinates."""
        assert as_coordinate(7) == Coordinate.of(7)
        assert as_coordinate((1, 2)) == Coordinate.of(1, 2)

    def test_numpy_integers(self):
        """numpy integer scalars count as ints, both bare and inside tuples."""
        assert as_coordinate(np.int64(3)) == Coordinate.of(3)
        assert as_coordinate((np.int32(1), np.int64(2))) == Coordinate.of(1, 2)
        assert Coordinate.of(np.int64(4)).axes == (4,)
        assert type(Coordinate.of(np.int64(4))[0]) is int

    def test_numpy_array_as_sequence(self):
        assert as_coordinate(np.array([2, 5])) == Coordinate.of(2, 5)

    def test_float_axes_rejected(self):
        """Non-integer axes raise instead of being truncated."""
        with pytest.raises(TypeError):
            Coordinate.of(1.9, 1.2)

        with pytest.raises(TypeError):
            as_coordinate((1, 2.0))

        with pytest.raises(TypeError):
            as_coordinate(1.5)


class TestDimensionChecks:
    """Mixing dimensions is rejected."""

    def test_add_mismatch(self):
        with pytest.raises(ValueError, match="Dimension mismatch"):
            Coordinate.of(1, 2) + Coordinate.of(1, 2, 3)

    def test_sub_mismatch(self):
        with pytest.raises(ValueError, match="Dimension mismatch"):
            Coordinate.of(1) - Coordinate.of(1, 2)

    def test_empty_coordinate(self):
        with pytest.raises(ValueError, match="at least one axis"):
            Coordinate(())


class TestVolumeAndFlatIndex:
    """Test extent volume and flat index conversion."""

    @pytest.mark.parametrize("extent,expected", [
        ((5,), 5),
        ((3, 4), 12),
        ((2, 3, 4), 24),
        ((8, 4), 32),
        ((3, 0), 0),
    ])
    def test_volume_is_product(self, extent, expected):
        """Volume multiplies the axes."""
        assert volume(extent) == expected
        assert Coordinate(extent).volume() == expected

    def test_flat_index_first_axis_fastest(self):
        extent = Coordinate.of(3, 4)
        assert Coordinate.of(0, 0).to_flat(extent) == 0
        assert Coordinate.of(1, 0).to_flat(extent) == 1
        assert Coordinate.of(0, 1).to_flat(extent) == 3
        assert Coordinate.of(1, 2).to_flat(extent) == 7

    def test_flat_index_matches_scan_order(self):
        """The n-th scanned coordinate has flat index n."""
        extent = Coordinate.of(3, 2, 4)
        for n, coord in enumerate(cartesian_iter(extent)):
            assert coord.to_flat(extent) == n

    @pytest.mark.parametrize("extent,expected", [
        ((5,), (1,)),
        ((3, 4), (1, 3)),
        ((2, 3, 4), (1, 2, 6)),
    ])
    def test_strides(self, extent, expected):
        """First axis has stride 1, each later axis steps over the ones before it."""
        assert strides(extent) == expected

    def test_strides_agree_with_flat_index(self):
        extent = Coordinate.of(3, 2, 4)
        steps = strides(extent)
        for coord in cartesian_iter(extent):
            assert coord.to_flat(extent) == sum(a * s for a, s in zip(coord, steps))

    def test_flat_index_out_of_bounds(self):
        with pytest.raises(IndexError):
            Coordinate.of(3, 0).to_flat((3, 4))

        with pytest.raises(IndexError):
            Coordinate.of(-1, 0).to_flat((3, 4))

    def test_within(self):
        assert Coordinate.of(2, 3).within((3, 4))
        assert not Coordinate.of(2, 4).within((3, 4))
        assert not Coordinate.of(-1, 0).within((3, 4))


class TestCartesianIter:
    """Test the deterministic scan order."""

    def test_iter_1d(self):
        assert list(cartesian_iter(3)) == [Coordinate.of(0), Coordinate.of(1), Coordinate.of(2)]

    def test_iter_2d(self):
        """Axis 0 advances first."""
        assert list(cartesian_iter((2, 2))) == [
            Coordinate.of(0, 0), Coordinate.of(1, 0), Coordinate.of(0, 1), Coordinate.of(1, 1)
        ]

    def test_iter_is_nested_loop(self):
        scanned = iter(cartesian_iter((10, 10)))
        for y in range(10):
            for x in range(10):
                assert next(scanned) == Coordinate.of(x, y)
        with pytest.raises(StopIteration):
            next(scanned)

    def test_iter_from_negative_corner(self):
        """Iteration can start below the origin."""
        scanned = iter(cartesian_iter((3, 3, 3), begin=(-1, -1, -1)))
        for z in range(-1, 2):
            for y in range(-1, 2):
                for x in range(-1, 2):
                    assert next(scanned) == Coordinate.of(x, y, z)
        with pytest.raises(StopIteration):
            next(scanned)

    def test_iter_4d_offset(self):
        scanned = list(cartesian_iter((4, 3, 2, 2), begin=(-1, -2, -3, -4)))
        assert scanned[0] == Coordinate.of(-1, -2, -3, -4)
        assert scanned[1] == Coordinate.of(0, -2, -3, -4)
        assert scanned[4] == Coordinate.of(-1, -1, -3, -4)
        assert scanned[-1] == Coordinate.of(2, 0, -2, -3)

    def test_empty_extent(self):
        assert list(cartesian_iter((0, 3))) == []

    def test_restartable(self):
        """Each call starts a fresh scan."""
        extent = Coordinate.of(2, 3)
        assert list(extent.cartesian_iter()) == list(extent.cartesian_iter())

    def test_begin_dimension_mismatch(self):
        with pytest.raises(ValueError, match="Dimension mismatch"):
            list(cartesian_iter((2, 2), begin=(0, 0, 0)))


@pytest.mark.parametrize("extent", [
    (1,),
    (7,),
    (3, 5),
    (8, 4),
    (2, 3, 4),
    (2, 2, 2, 3),
])
class TestCartesianIterProperties:
    """Scan covers exactly the extent."""

    def test_count_equals_volume(self, extent):
        assert len(list(cartesian_iter(extent))) == volume(extent)

    def test_unique_and_in_bounds(self, extent):
        scanned = list(cartesian_iter(extent))
        assert len(set(scanned)) == len(scanned)
        for coord in scanned:
            assert all(0 <= a < e for a, e in zip(coord, extent))
