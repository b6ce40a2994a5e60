"""Field profile sampler — transverse field series along a segment."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import ArrayLike, NDArray

from axionfield.constants import DEFAULT_PROFILE_SAMPLES, MIN_PROFILE_SAMPLES
from axionfield.core.exceptions import MissingCollaboratorError
from axionfield.core.field_sampler import FieldSampler, transverse_component
from axionfield.models.geometry import Ray, Segment
from axionfield.models.profile import FieldProfile

logger = logging.getLogger(__name__)


class FieldProfileSampler:
    """Uniformly samples the transverse field between two points.

    Positions are linearly interpolated between entry (t = 0) and exit
    (t = 1). No smoothing or adaptive refinement.

    Args:
        field: Field sampler.
    """

    def __init__(self, field: FieldSampler | None) -> None:
        if field is None:
            raise MissingCollaboratorError("Field profile sampling requires a field sampler")
        self._field = field

    def sample(
        self,
        entry: ArrayLike,
        exit: ArrayLike,
        direction: ArrayLike,
        n: int = DEFAULT_PROFILE_SAMPLES,
    ) -> FieldProfile:
        """Transverse field magnitudes at *n* evenly spaced points.

        Args:
            entry: Segment entry point [mm].
            exit: Segment exit point [mm].
            direction: Direction of travel.
            n: Number of samples, >= 2.
        Returns:
            FieldProfile with magnitudes [T].
        Raises:
            ValueError: If n < 2 or *direction* is the zero vector.
        """
        segment, vectors = self._sample_transverse(entry, exit, direction, n)
        return FieldProfile(
            segment=segment,
            samples=np.linalg.norm(vectors, axis=1),
        )

    def sample_vectors(
        self,
        entry: ArrayLike,
        exit: ArrayLike,
        direction: ArrayLike,
        n: int = DEFAULT_PROFILE_SAMPLES,
    ) -> FieldProfile:
        """Like :meth:`sample`, also keeping the transverse vectors."""
        segment, vectors = self._sample_transverse(entry, exit, direction, n)
        return FieldProfile(
            segment=segment,
            samples=np.linalg.norm(vectors, axis=1),
            vectors=vectors,
        )

    def sample_by_step(
        self,
        entry: ArrayLike,
        exit: ArrayLike,
        direction: ArrayLike,
        step_mm: float,
    ) -> FieldProfile:
        """Sample with a target spacing instead of a sample count.

        n = round(L / step) + 1, never below 2.
        """
        if step_mm <= 0:
            raise ValueError(f"Integration step must be positive, got {step_mm}")
        length = Segment(entry, exit).length_mm
        n = max(MIN_PROFILE_SAMPLES, int(round(length / step_mm)) + 1)
        return self.sample(entry, exit, direction, n)

    def _sample_transverse(
        self,
        entry: ArrayLike,
        exit: ArrayLike,
        direction: ArrayLike,
        n: int,
    ) -> tuple[Segment, NDArray[np.float64]]:
        if n < MIN_PROFILE_SAMPLES:
            raise ValueError(f"A field profile needs at least {MIN_PROFILE_SAMPLES} samples, got {n}")
        segment = Segment(entry, exit)
        # Rejects a zero direction
        unit = Ray(segment.entry, direction).unit_direction
        t = np.linspace(0.0, 1.0, n)
        positions = segment.entry + np.multiply.outer(t, segment.exit - segment.entry)
        # entry + (exit - entry) may differ from exit by rounding
        positions[-1] = segment.exit

        fields = np.array([self._field.field_at(p) for p in positions])
        vectors = transverse_component(fields, unit)
        logger.debug(
            "Sampled %d points over %.3f mm (step %.4g mm)",
            n, segment.length_mm, segment.length_mm / (n - 1),
        )
        return segment, vectors
