"""Right-angle rotation groups for N-dimensional grids.

A rotation made only of quarter turns maps every axis onto some other axis,
possibly reversed. It is therefore fully described by a signed permutation of
the axes. Signed permutations with determinant +1 are the rotations; those
with determinant -1 are reflections and are excluded.

The enumeration follows
https://math.stackexchange.com/questions/2603222/simple-rotations-in-n-dimensions-limited-to-right-angle-rotations

Rotation indices are assigned by a breadth-first walk of the group starting at
the identity and applying the quarter turns of the planes (0,1), (1,2), ...
Index 0 is always the identity and index 1 the quarter turn of plane (0,1).
In 2D the walk visits 0, 90, 180 and 270 degrees in order, so indices add.
"""

from collections import deque
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple
import logging

import numpy as np

from .coord import Coordinate, CoordinateLike, as_coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformedAxis:
    """Output axis derived from source_axis of the input, optionally reversed."""
    source_axis: int
    negated: bool = False


@dataclass(frozen=True)
class RotationConfiguration:
    """One member of the rotation group: output axis i comes from axes[i]."""
    axes: Tuple[TransformedAxis, ...]

    @classmethod
    def identity(cls, dimension: int) -> 'RotationConfiguration':
        return cls(tuple(TransformedAxis(i) for i in range(dimension)))

    @classmethod
    def quarter_turn(cls, dimension: int, first: int, second: int) -> 'RotationConfiguration':
        """90 degree turn in the plane of two axes: first <- -second, second <- first."""
        axes = [TransformedAxis(i) for i in range(dimension)]
        axes[first] = TransformedAxis(second, negated=True)
        axes[second] = TransformedAxis(first)
        return cls(tuple(axes))

    @property
    def dimension(self) -> int:
        return len(self.axes)

    @property
    def permutation(self) -> Tuple[int, ...]:
        return tuple(axis.source_axis for axis in self.axes)

    @property
    def parity(self) -> bool:
        """Permutation parity (True = odd)."""
        return permutation_parity(self.permutation)

    @property
    def negation_parity(self) -> bool:
        """True if an odd number of axes are negated."""
        return sum(axis.negated for axis in self.axes) % 2 == 1

    def is_orientation_preserving(self) -> bool:
        """Determinant +1 check: permutation parity equals negation parity."""
        return self.parity == self.negation_parity

    def as_matrix(self) -> np.ndarray:
        """Signed permutation matrix M with M @ v rotating a centred vector."""
        matrix = np.zeros((self.dimension, self.dimension), dtype=np.int64)
        for out_axis, axis in enumerate(self.axes):
            matrix[out_axis, axis.source_axis] = -1 if axis.negated else 1
        return matrix

    def then(self, other: 'RotationConfiguration') -> 'RotationConfiguration':
        """Composite rotation: apply self first, then other."""
        axes = []
        for second in other.axes:
            first = self.axes[second.source_axis]
            axes.append(TransformedAxis(first.source_axis, first.negated != second.negated))
        return RotationConfiguration(tuple(axes))

    def inverse(self) -> 'RotationConfiguration':
        axes = [None] * self.dimension
        for out_axis, axis in enumerate(self.axes):
            axes[axis.source_axis] = TransformedAxis(out_axis, axis.negated)
        return RotationConfiguration(tuple(axes))

    def output_extent(self, extent: CoordinateLike) -> Coordinate:
        """Extent of a grid after this rotation (axes are relabelled)."""
        extent = as_coordinate(extent)
        return Coordinate(tuple(extent[axis.source_axis] for axis in self.axes))

    def apply(self, coord: CoordinateLike, extent: CoordinateLike) -> Coordinate:
        """Rotate coord about the centre of a grid with the given extent."""
        coord = as_coordinate(coord)
        extent = as_coordinate(extent)
        out = []
        for axis in self.axes:
            value = coord[axis.source_axis]
            if axis.negated:
                value = extent[axis.source_axis] - 1 - value
            out.append(value)
        return Coordinate(tuple(out))


def permutation_parity(arrangement: Sequence[int]) -> bool:
    """Parity of a permutation from its cycle decomposition (True = odd).

    A cycle of length L is made of L-1 transpositions.
    """
    parity = False
    visited = [False] * len(arrangement)
    for start in range(len(arrangement)):
        if visited[start]:
            continue
        idx = start
        cycle_length = 0
        while not visited[idx]:
            visited[idx] = True
            idx = arrangement[idx]
            cycle_length += 1
        parity ^= (cycle_length - 1) % 2 == 1
    return parity


def is_permutation(arrangement: Sequence[int]) -> bool:
    """True if no axis index repeats."""
    seen = set()
    for axis in arrangement:
        if axis in seen:
            return False
        seen.add(axis)
    return True


def _negation_configurations(permutation: Tuple[int, ...], parity: bool) -> List[RotationConfiguration]:
    """Every sign assignment for a permutation that keeps the determinant +1.

    The first D-1 signs are free (the bits of an integer); the last sign is
    forced so that negation parity equals permutation parity.
    """
    dimension = len(permutation)
    out = []
    for negation_bits in range(2 ** (dimension - 1)):
        negated = [bool(negation_bits & (1 << bit)) for bit in range(dimension - 1)]
        negation_parity = bin(negation_bits).count('1') % 2 == 1
        negated.append(parity != negation_parity)
        out.append(RotationConfiguration(tuple(
            TransformedAxis(axis, flag) for axis, flag in zip(permutation, negated))))
    return out


def enumerate_rotations(dimension: int) -> List[RotationConfiguration]:
    """All orientation-preserving right-angle rotations of D-dimensional space.

    Candidate axis arrangements are the D**D base-D numbers; those with a
    repeated axis are dropped, the rest are expanded over their valid sign
    assignments. Returned in generation order (arrangement, then signs).

    Args:
        dimension: Number of axes (>= 1)

    Returns:
        List of D! * 2**(D-1) rotation configurations
    """
    if dimension < 1:
        raise ValueError(f"Dimension must be positive, got {dimension}")

    rotations = []
    for arrangement_index in range(dimension ** dimension):
        # digit k of the base-D number is the source of output axis k
        arrangement = tuple((arrangement_index // dimension ** digit) % dimension
                            for digit in range(dimension))
        if not is_permutation(arrangement):
            continue
        rotations.extend(_negation_configurations(arrangement, permutation_parity(arrangement)))

    logger.debug(f"Enumerated {len(rotations)} rotations for {dimension}D")
    return rotations


def _line_rotations() -> List[RotationConfiguration]:
    """1D group: plane rotations that keep axis 0 on itself, restricted to it.

    A line has no proper rotation besides the identity; the half turn of an
    enclosing plane acts on it as the point reflection through its centre.
    """
    restricted = []
    for config in enumerate_rotations(2):
        if config.axes[0].source_axis == 0:
            axis = RotationConfiguration((config.axes[0],))
            if axis not in restricted:
                restricted.append(axis)
    return sorted(restricted, key=lambda c: c.axes[0].negated)


class RotationGroup:
    """Canonically indexed rotation group for a fixed dimension.

    Attributes:
        dimension: Number of axes the rotations act on
        configurations: Rotations in canonical index order
    """

    def __init__(self, dimension: int):
        if dimension < 1:
            raise ValueError(f"Dimension must be positive, got {dimension}")
        self.dimension = dimension

        if dimension == 1:
            self.configurations = _line_rotations()
        else:
            self.configurations = self._walk_from_identity()
            enumerated = set(enumerate_rotations(dimension))
            if set(self.configurations) != enumerated:
                raise RuntimeError(
                    f"Quarter turns generate {len(self.configurations)} rotations "
                    f"but {len(enumerated)} were enumerated for {dimension}D")

        self._index: Dict[RotationConfiguration, int] = {
            config: i for i, config in enumerate(self.configurations)}

        logger.debug(f"Built {dimension}D rotation group with {len(self)} members")

    def _walk_from_identity(self) -> List[RotationConfiguration]:
        generators = [RotationConfiguration.quarter_turn(self.dimension, axis, axis + 1)
                      for axis in range(self.dimension - 1)]
        identity = RotationConfiguration.identity(self.dimension)
        ordered = [identity]
        seen = {identity}
        queue = deque([identity])
        while queue:
            current = queue.popleft()
            for generator in generators:
                nxt = current.then(generator)
                if nxt not in seen:
                    seen.add(nxt)
                    ordered.append(nxt)
                    queue.append(nxt)
        return ordered

    @property
    def num_rotations(self) -> int:
        return len(self.configurations)

    def __len__(self) -> int:
        return len(self.configurations)

    def __getitem__(self, times: int) -> RotationConfiguration:
        return self.configurations[self.canonical(times)]

    def canonical(self, times: int) -> int:
        """Reduce any integer to a valid rotation index."""
        return times % len(self.configurations)

    def index_of(self, config: RotationConfiguration) -> int:
        return self._index[config]

    def compose(self, first: int, second: int) -> int:
        """Index of rotating by first and then by second."""
        return self._index[self[first].then(self[second])]

    def inverse(self, times: int) -> int:
        return self._index[self[times].inverse()]

    def _check(self, value: Coordinate) -> Coordinate:
        if value.dimension != self.dimension:
            raise ValueError(
                f"Dimension mismatch: {value.dimension}D coordinate used with "
                f"{self.dimension}D rotation group")
        return value

    def rotate(self, coord: CoordinateLike, times: int, extent: CoordinateLike) -> Coordinate:
        coord = self._check(as_coordinate(coord))
        extent = self._check(as_coordinate(extent))
        return self[times].apply(coord, extent)

    def rotated_extent(self, extent: CoordinateLike, times: int) -> Coordinate:
        return self[times].output_extent(self._check(as_coordinate(extent)))


@lru_cache(maxsize=None)
def rotation_group(dimension: int) -> RotationGroup:
    """Shared rotation group for a dimension."""
    return RotationGroup(dimension)


def num_rotations(dimension: int) -> int:
    return rotation_group(dimension).num_rotations


def rotated_extent(extent: CoordinateLike, times: int) -> Coordinate:
    """Extent of a grid after rotating it by a rotation index."""
    extent = as_coordinate(extent)
    return rotation_group(extent.dimension).rotated_extent(extent, times)
