"""Magnetic field samplers — the oracle queried by boundary tracing.

A field sampler maps a 3D position [mm] to a field vector [T] and MUST
return an exact zero vector outside its defined volumes; boundary search
compares samples against zero with exact equality.

Concrete samplers describe a field as a set of regions:
    - UniformFieldBox: constant field inside an axis-aligned box.
    - UniformFieldCylinder: constant field inside a z-aligned cylinder.
    - FieldMapVolume: tabulated field on a regular grid (trilinear).
    - CompositeField: sum of any of the above.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence, runtime_checkable

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.interpolate import RegularGridInterpolator

from axionfield.models.geometry import Vector3, as_vector3

logger = logging.getLogger(__name__)


@runtime_checkable
class FieldSampler(Protocol):
    """Position [mm] → magnetic field vector [T]."""

    def field_at(self, position: ArrayLike) -> Vector3:
        ...


def transverse_component(field: ArrayLike, direction: ArrayLike) -> NDArray[np.float64]:
    """Field component perpendicular to the direction of travel.

    B⊥ = B − (B·û)û

    Args:
        field: Field vector(s) [T], shape (3,) or (N, 3).
        direction: Direction of travel (unnormalized allowed).
    Returns:
        Transverse vector(s) [T], same shape as *field*.
    """
    b = np.asarray(field, dtype=np.float64)
    u = np.asarray(direction, dtype=np.float64)
    u = u / np.linalg.norm(u)
    parallel = b @ u
    return b - np.multiply.outer(parallel, u)


def transverse_magnitude(field: ArrayLike, direction: ArrayLike) -> NDArray[np.float64] | float:
    """Magnitude of the transverse field component [T]."""
    bt = transverse_component(field, direction)
    mag = np.linalg.norm(bt, axis=-1)
    if np.ndim(mag) == 0:
        return float(mag)
    return mag


# ── Regions ──


class UniformFieldBox:
    """Constant field inside an axis-aligned box, zero elsewhere.

    Args:
        lower: Box corner with the smallest coordinates [mm].
        upper: Box corner with the largest coordinates [mm].
        field: Field vector inside the box [T].
    """

    def __init__(self, lower: ArrayLike, upper: ArrayLike, field: ArrayLike) -> None:
        self._lower = as_vector3(lower)
        self._upper = as_vector3(upper)
        if np.any(self._upper <= self._lower):
            raise ValueError("Box upper corner must exceed lower corner on every axis")
        self._field = as_vector3(field)
        self._zero = np.zeros(3)

    def contains(self, position: ArrayLike) -> bool:
        """True if *position* lies inside the box (boundaries included)."""
        p = np.asarray(position, dtype=np.float64)
        return bool(np.all(p >= self._lower) and np.all(p <= self._upper))

    def field_at(self, position: ArrayLike) -> Vector3:
        if self.contains(position):
            return self._field.copy()
        return self._zero.copy()


class UniformFieldCylinder:
    """Constant field inside a cylinder whose axis is parallel to z.

    This is the usual magnet bore shape: the axion travels along the
    bore axis and the field is transverse to it.

    Args:
        center: Center of the cylinder [mm].
        radius: Bore radius [mm].
        length: Bore length along z [mm].
        field: Field vector inside the bore [T].
    """

    def __init__(
        self,
        center: ArrayLike,
        radius: float,
        length: float,
        field: ArrayLike,
    ) -> None:
        if radius <= 0 or length <= 0:
            raise ValueError("Cylinder radius and length must be positive")
        self._center = as_vector3(center)
        self._radius = float(radius)
        self._half_length = float(length) / 2.0
        self._field = as_vector3(field)

    def contains(self, position: ArrayLike) -> bool:
        p = np.asarray(position, dtype=np.float64) - self._center
        if abs(p[2]) > self._half_length:
            return False
        return bool(p[0] * p[0] + p[1] * p[1] <= self._radius * self._radius)

    def field_at(self, position: ArrayLike) -> Vector3:
        if self.contains(position):
            return self._field.copy()
        return np.zeros(3)


class FieldMapVolume:
    """Tabulated field on a regular grid, trilinearly interpolated.

    Outside the grid the field is exactly zero. Inside, interpolated
    values are returned as computed; a map that is zero at its edges
    therefore also yields exact zeros there.

    Args:
        x: Grid coordinates along x [mm], strictly ascending.
        y: Grid coordinates along y [mm], strictly ascending.
        z: Grid coordinates along z [mm], strictly ascending.
        values: Field vectors [T], shape (len(x), len(y), len(z), 3).
        offset: Translation applied to the grid [mm].
    """

    def __init__(
        self,
        x: Sequence[float],
        y: Sequence[float],
        z: Sequence[float],
        values: ArrayLike,
        offset: ArrayLike = (0.0, 0.0, 0.0),
    ) -> None:
        grid = tuple(np.asarray(axis, dtype=np.float64) for axis in (x, y, z))
        data = np.asarray(values, dtype=np.float64)
        expected = tuple(len(axis) for axis in grid) + (3,)
        if data.shape != expected:
            raise ValueError(
                f"Field map shape {data.shape} does not match grid {expected}"
            )
        self._offset = as_vector3(offset)
        self._lower = np.array([axis[0] for axis in grid])
        self._upper = np.array([axis[-1] for axis in grid])
        self._interp = RegularGridInterpolator(
            grid, data, method="linear", bounds_error=False, fill_value=0.0,
        )
        logger.debug(
            "Field map loaded: %d x %d x %d nodes", *expected[:3],
        )

    def field_at(self, position: ArrayLike) -> Vector3:
        local = np.asarray(position, dtype=np.float64) - self._offset
        if np.any(local < self._lower) or np.any(local > self._upper):
            return np.zeros(3)
        return self._interp(local[np.newaxis, :])[0]


class CompositeField:
    """Sum of independent field regions.

    Regions may be disjoint (several magnets along the line of sight)
    or overlapping. Where no region contributes the result is an exact
    zero vector.

    Args:
        regions: Field samplers to combine.
    """

    def __init__(self, regions: Sequence[FieldSampler] = ()) -> None:
        self._regions: list[FieldSampler] = list(regions)

    def add_region(self, region: FieldSampler) -> None:
        """Append a region to the composite."""
        self._regions.append(region)

    @property
    def regions(self) -> list[FieldSampler]:
        return list(self._regions)

    def field_at(self, position: ArrayLike) -> Vector3:
        total = np.zeros(3)
        for region in self._regions:
            total += region.field_at(position)
        return total
