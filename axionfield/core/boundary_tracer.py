"""Field-boundary tracer — locates the non-zero field segments along a ray.

Walks a ray through the field sampler's domain and returns the ordered
(entry, exit) pairs of every contiguous stretch of non-zero field.

Search strategy:
  1. Move the ray start to a far upstream plane on the dominant travel
     axis, so every search begins outside any field volume.
  2. Step coarsely along the ray while the field is exactly zero and the
     probed coordinate stays inside the world box.
  3. On the first non-zero sample, back off one step and bisect until the
     step is below the requested resolution → entry point.
  4. Step on from the entry until the field vanishes → exit point.
     Axis-aligned rays step at the converged resolution; oblique rays
     step coarsely and bisect again.
  5. Repeat from the exit until the probe leaves the world box.

Steps are measured along the dominant axis; the two other coordinates
follow by linear interpolation. All lengths in mm.
"""

from __future__ import annotations

import logging

import numpy as np

from axionfield.core.exceptions import MissingCollaboratorError
from axionfield.core.field_sampler import FieldSampler
from axionfield.models.geometry import (
    BoundaryList,
    Ray,
    Segment,
    Vector3,
    zero_vector,
)
from axionfield.models.simulation import TracerConfig

logger = logging.getLogger(__name__)

_AXIS_NAMES = ("x", "y", "z")


def move_to_plane(
    position: Vector3,
    direction: Vector3,
    axis: int,
    plane: float,
) -> Vector3:
    """Point where the line through *position* crosses ``coord[axis] = plane``.

    Args:
        position: Point on the line [mm].
        direction: Line direction; must have a non-zero *axis* component.
        axis: Axis index of the plane normal.
        plane: Plane coordinate [mm].
    Returns:
        Intersection point [mm].
    """
    t = (plane - position[axis]) / direction[axis]
    return position + t * direction


class BoundaryTracer:
    """Coarse-to-fine boundary search over a black-box field sampler.

    Args:
        field: Field sampler; must return an exact zero vector outside
            its volumes.
        config: Search parameters. Defaults to TracerConfig().
    """

    def __init__(
        self,
        field: FieldSampler | None,
        config: TracerConfig | None = None,
    ) -> None:
        if field is None:
            raise MissingCollaboratorError("Boundary tracing requires a field sampler")
        self._field = field
        self._config = config or TracerConfig()
        if self._config.far_plane_mm >= self._config.world_limit_mm:
            raise ValueError("Far plane must lie inside the world box")
        if self._config.coarse_step_mm <= 0:
            raise ValueError("Coarse step must be positive")

    @property
    def config(self) -> TracerConfig:
        return self._config

    def trace(self, ray: Ray, min_step: float | None = None) -> BoundaryList:
        """Locate every non-zero field segment crossed by *ray*.

        Args:
            ray: Trajectory [mm].
            min_step: Terminal resolution [mm]. Defaults to the config value.
        Returns:
            BoundaryList in traversal order. Empty if no field is crossed.
        """
        if min_step is None:
            min_step = self._config.min_step_mm
        if min_step <= 0:
            raise ValueError(f"min_step must be positive, got {min_step}")

        direction = ray.direction
        vertical = self._config.vertical_axis
        if direction[vertical] > 0:
            logger.warning(
                "Ray direction %s ascends along %s; the trace assumes downward "
                "travel and proceeds best effort",
                direction.tolist(), _AXIS_NAMES[vertical],
            )

        axis = int(np.argmax(np.abs(direction)))
        sign = 1.0 if direction[axis] > 0 else -1.0
        # Displacement per unit of travel along the dominant axis
        slope = direction / abs(direction[axis])
        refine_exit = not ray.is_axis_aligned

        position = move_to_plane(
            ray.position, direction, axis, -sign * self._config.far_plane_mm,
        )

        boundaries = BoundaryList()
        while True:
            entry, dr, inside = self._find_entry(position, slope, axis, min_step)
            if not inside:
                boundaries.sentinel = Segment(entry, zero_vector())
                break

            exit_point, beyond, inside = self._find_exit(
                entry, slope, axis, min_step,
                dr if not refine_exit else None,
            )
            if np.array_equal(exit_point, entry):
                # Region thinner than the step: close at the first zero sample
                exit_point = beyond
            boundaries.segments.append(Segment(entry, exit_point))
            logger.debug(
                "Field segment %d: entry=%s exit=%s",
                len(boundaries), entry.tolist(), exit_point.tolist(),
            )
            if not inside:
                logger.warning(
                    "Field is non-zero up to the world boundary; segment "
                    "closed at %s", exit_point.tolist(),
                )
                boundaries.sentinel = Segment(exit_point, zero_vector())
                break
            position = beyond

        if not boundaries.segments:
            logger.debug("Ray %s crosses no field region", ray.position.tolist())
        return boundaries

    def crosses_field(self, ray: Ray, min_step: float | None = None) -> bool:
        """True if the ray traverses at least one non-zero field segment."""
        return len(self.trace(ray, min_step)) > 0

    # ------------------------------------------------------------------
    # Search primitives
    # ------------------------------------------------------------------

    def _is_zero(self, position: Vector3) -> bool:
        return not np.any(self._field.field_at(position))

    def _in_world(self, position: Vector3, axis: int) -> bool:
        return abs(position[axis]) <= self._config.world_limit_mm

    def _find_entry(
        self,
        position: Vector3,
        slope: Vector3,
        axis: int,
        min_step: float,
    ) -> tuple[Vector3, float, bool]:
        """Search forward from a zero-field point for the next entry.

        Returns:
            (point, step, inside). When *inside* is False the probe left
            the world box and *point* is the last position inside it.
            Otherwise *point* is the first non-zero sample and *step* the
            converged resolution.
        """
        dr = self._config.coarse_step_mm
        while True:
            probe = position + slope * dr
            if not self._in_world(probe, axis):
                return position, dr, False
            if not self._is_zero(probe):
                break
            position = probe

        # Invariant: field(position) == 0, field(position + dr) != 0
        while dr > min_step:
            dr /= 2.0
            mid = position + slope * dr
            if self._is_zero(mid):
                position = mid
        return position + slope * dr, dr, True

    def _find_exit(
        self,
        entry: Vector3,
        slope: Vector3,
        axis: int,
        min_step: float,
        fixed_step: float | None,
    ) -> tuple[Vector3, Vector3, bool]:
        """Search forward from an entry point for the field exit.

        With *fixed_step* the walk proceeds at that resolution without
        bisection; otherwise it steps coarsely and bisects.

        Returns:
            (last_nonzero, first_zero, inside). When *inside* is False the
            field did not vanish before the world boundary.
        """
        dr = fixed_step if fixed_step is not None else self._config.coarse_step_mm
        position = entry
        while True:
            probe = position + slope * dr
            if not self._in_world(probe, axis):
                return position, probe, False
            if self._is_zero(probe):
                break
            position = probe

        if fixed_step is None:
            # Invariant: field(position) != 0, field(position + dr) == 0
            while dr > min_step:
                dr /= 2.0
                mid = position + slope * dr
                if not self._is_zero(mid):
                    position = mid
        return position, position + slope * dr, True
