"""Geometry data models for field-boundary tracing.

A ray is traced through the field sampler's domain and yields an ordered
list of segments, one per contiguous stretch of non-zero field.

All positions in mm. Directions are unit-free and need not be normalized.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

Vector3 = NDArray[np.float64]


def as_vector3(value: ArrayLike) -> Vector3:
    """Convert a 3-component sequence into a read-only float array.

    Raises:
        ValueError: If *value* does not have exactly three components.
    """
    vec = np.array(value, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3D vector, got shape {vec.shape}")
    vec.setflags(write=False)
    return vec


def zero_vector() -> Vector3:
    """Zero vector, used as the 'left the world' sentinel."""
    return as_vector3((0.0, 0.0, 0.0))


@dataclass(frozen=True)
class Ray:
    """A straight particle trajectory.

    Attributes:
        position: Any point on the trajectory [mm].
        direction: Direction of travel (unnormalized allowed).
    """
    position: Vector3
    direction: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_vector3(self.position))
        object.__setattr__(self, "direction", as_vector3(self.direction))
        if not np.any(self.direction):
            raise ValueError("Ray direction must not be the zero vector")

    @property
    def unit_direction(self) -> Vector3:
        """Normalized direction of travel."""
        return self.direction / np.linalg.norm(self.direction)

    @property
    def is_axis_aligned(self) -> bool:
        """True if the direction is parallel to one of the world axes."""
        return int(np.count_nonzero(self.direction)) == 1


@dataclass(frozen=True)
class Segment:
    """Entry/exit pair of one contiguous non-zero field stretch.

    The terminal pair emitted when a search leaves the world box carries
    the zero vector as its exit point; it is held apart from the real
    segments by ``BoundaryList.sentinel``.

    Attributes:
        entry: Entry point [mm].
        exit: Exit point [mm].
    """
    entry: Vector3
    exit: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, "entry", as_vector3(self.entry))
        object.__setattr__(self, "exit", as_vector3(self.exit))

    @property
    def length_mm(self) -> float:
        """Segment length [mm]."""
        return float(np.linalg.norm(self.exit - self.entry))


@dataclass
class BoundaryList:
    """Ordered field segments along a ray, in traversal order.

    ``len()`` and iteration cover only real segments, so a ray that never
    enters a field yields an empty list. ``pairs`` additionally exposes
    the terminal sentinel when the trace left the world box.

    Attributes:
        segments: Real (entry, exit) segments.
        sentinel: Terminal marker pair, or None if the trace ended otherwise.
    """
    segments: list[Segment] = field(default_factory=list)
    sentinel: Segment | None = None

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __getitem__(self, index: int) -> Segment:
        return self.segments[index]

    @property
    def pairs(self) -> list[Segment]:
        """All emitted pairs, the sentinel last when present."""
        if self.sentinel is None:
            return list(self.segments)
        return [*self.segments, self.sentinel]

    @property
    def exited_world(self) -> bool:
        """True if the trace terminated by leaving the world box."""
        return self.sentinel is not None

    @property
    def total_length_mm(self) -> float:
        """Summed length of all real segments [mm]."""
        return sum(s.length_mm for s in self.segments)
