"""Field profile data model.

Reference: FieldProfileSampler — uniform sampling of the transverse field
along one boundary segment.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from axionfield.models.geometry import Segment


def _empty_float_array() -> NDArray[np.float64]:
    return np.array([], dtype=np.float64)


@dataclass
class FieldProfile:
    """Evenly spaced transverse field samples along a segment.

    Sample ``i`` of ``N`` sits at parameter t = i / (N - 1); the first and
    last samples are exactly at the segment endpoints.

    Attributes:
        segment: The sampled segment [mm].
        samples: Transverse field magnitudes [T], shape (N,).
        vectors: Transverse field vectors [T], shape (N, 3), or empty
            when only magnitudes were requested.
    """
    segment: Segment
    samples: NDArray[np.float64] = field(default_factory=_empty_float_array)
    vectors: NDArray[np.float64] = field(default_factory=_empty_float_array)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def length_mm(self) -> float:
        """Sampled segment length [mm]."""
        return self.segment.length_mm

    @property
    def step_mm(self) -> float:
        """Spacing between consecutive samples [mm]."""
        if len(self.samples) < 2:
            return 0.0
        return self.length_mm / (len(self.samples) - 1)

    @property
    def average(self) -> float:
        """Mean transverse field over the samples [T]."""
        if len(self.samples) == 0:
            return 0.0
        return float(np.mean(self.samples))
