"""
Large World Coordinates
=======================

Positions at planetary-system scale stored as an integer segment index plus
a small floating point offset inside the segment. Differences between two
coordinates subtract the segments exactly in integer arithmetic before any
floating point scaling, so nearby bodies far from the origin keep
sub-millimetre resolution.
"""

import numpy as np
from typing import Iterable

from .config import WorldConfig


DEFAULT_SEGMENT_LENGTH = WorldConfig.lwc_segment_length


class LargeWorldCoordinate:
    """
    Segmented position vector.

    Invariant after every mutation: each offset component lies in
    [0, segment_length).
    """

    __slots__ = ('segment', 'offset', 'segment_length')

    def __init__(self,
                 x: float = 0.0,
                 y: float = 0.0,
                 z: float = 0.0,
                 segment_length: float = DEFAULT_SEGMENT_LENGTH):
        self.segment_length = float(segment_length)
        self.segment = np.zeros(3, dtype=np.int64)
        self.offset = np.zeros(3)
        self.set(x, y, z)

    @classmethod
    def from_vector(cls, v: Iterable[float],
                    segment_length: float = DEFAULT_SEGMENT_LENGTH) -> 'LargeWorldCoordinate':
        """Create from a global position vector [m]."""
        x, y, z = v
        return cls(x, y, z, segment_length=segment_length)

    def set(self, x: float, y: float, z: float):
        """Set the coordinate from global components [m]."""
        self.segment[:] = 0
        self.offset[:] = (x, y, z)
        self.normalise()

    def copy(self) -> 'LargeWorldCoordinate':
        """Independent copy of this coordinate."""
        lwc = LargeWorldCoordinate.__new__(LargeWorldCoordinate)
        lwc.segment_length = self.segment_length
        lwc.segment = self.segment.copy()
        lwc.offset = self.offset.copy()
        return lwc

    def assign(self, other: 'LargeWorldCoordinate'):
        """Overwrite this coordinate in place with another one."""
        if other.segment_length != self.segment_length:
            self.set(*other.global_position())
            return
        self.segment[:] = other.segment
        self.offset[:] = other.offset

    def normalise(self):
        """Move whole segments out of the offset into the segment index."""
        shift = np.floor(self.offset / self.segment_length)
        if np.any(shift):
            self.segment += shift.astype(np.int64)
            self.offset -= shift * self.segment_length

        # Rounding may leave an offset equal to the segment length
        overflow = self.offset >= self.segment_length
        if np.any(overflow):
            self.segment[overflow] += 1
            self.offset[overflow] -= self.segment_length

    def translate(self, delta: Iterable[float]) -> 'LargeWorldCoordinate':
        """
        Move the coordinate by a vector [m].

        Returns:
            self, for chaining
        """
        self.offset += np.asarray(delta, dtype=float)
        self.normalise()
        return self

    def global_position(self) -> np.ndarray:
        """Position as a plain float vector [m]."""
        return self.segment.astype(float) * self.segment_length + self.offset

    def dist(self, other: 'LargeWorldCoordinate') -> np.ndarray:
        """
        Vector from other to self [m].

        Args:
            other: Reference coordinate

        Returns:
            self - other as a float vector
        """
        if other.segment_length != self.segment_length:
            return self.global_position() - other.global_position()
        seg_diff = (self.segment - other.segment).astype(float) * self.segment_length
        return seg_diff + (self.offset - other.offset)

    def __add__(self, delta) -> 'LargeWorldCoordinate':
        return self.copy().translate(delta)

    def __sub__(self, other: 'LargeWorldCoordinate') -> np.ndarray:
        return self.dist(other)

    def __eq__(self, other) -> bool:
        if not isinstance(other, LargeWorldCoordinate):
            return NotImplemented
        return (self.segment_length == other.segment_length
                and np.array_equal(self.segment, other.segment)
                and np.array_equal(self.offset, other.offset))

    __hash__ = None

    def isclose(self, other: 'LargeWorldCoordinate', atol: float = 1e-6) -> bool:
        """True when both coordinates are within atol metres per axis."""
        return bool(np.all(np.abs(self.dist(other)) <= atol))

    def __repr__(self) -> str:
        return (f"LargeWorldCoordinate(segment={self.segment.tolist()}, "
                f"offset={self.offset.tolist()})")

