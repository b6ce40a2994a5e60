"""Propagation configuration and result data models.

Per-event input (AxionParticle), injected configuration (TracerConfig,
PropagationConfig) and the per-event output (PropagationResult).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from axionfield.constants import (
    DEFAULT_COARSE_STEP_MM,
    DEFAULT_EXTRA_ABSORPTION_LENGTH_MM,
    DEFAULT_MIN_STEP_MM,
    DEFAULT_PROFILE_SAMPLES,
    FAR_PLANE_MM,
    VERTICAL_AXIS,
    WORLD_LIMIT_MM,
)
from axionfield.models.geometry import BoundaryList, Ray, Vector3, as_vector3
from axionfield.models.results import ConversionResult


class ConversionFormula(Enum):
    """Which probability formula the pipeline evaluates per segment."""
    HOMOGENEOUS = "homogeneous"
    PROFILE = "profile"


class PropagationStatus(Enum):
    """Outcome of a propagation evaluation."""
    NOT_EVALUATED = "not_evaluated"
    CONVERTED = "converted"
    NO_FIELD_CROSSED = "no_field_crossed"


@dataclass
class AxionParticle:
    """Incoming axion event.

    Attributes:
        position: A point on the trajectory [mm].
        direction: Direction of travel.
        energy_keV: Axion energy [keV], > 0.
        mass_eV: Axion rest mass [eV], >= 0.
    """
    position: Vector3
    direction: Vector3
    energy_keV: float
    mass_eV: float = 0.0

    def __post_init__(self) -> None:
        self.position = as_vector3(self.position)
        self.direction = as_vector3(self.direction)

    @property
    def ray(self) -> Ray:
        """Trajectory of this particle."""
        return Ray(self.position, self.direction)


@dataclass
class TracerConfig:
    """Boundary search parameters.

    Attributes:
        min_step_mm: Terminal bisection resolution [mm].
        coarse_step_mm: Initial search step [mm].
        far_plane_mm: Distance of the upstream start plane [mm].
        world_limit_mm: Half-size of the world box on the probed axis [mm].
        vertical_axis: Axis index along which travel must not ascend.
    """
    min_step_mm: float = DEFAULT_MIN_STEP_MM
    coarse_step_mm: float = DEFAULT_COARSE_STEP_MM
    far_plane_mm: float = FAR_PLANE_MM
    world_limit_mm: float = WORLD_LIMIT_MM
    vertical_axis: int = VERTICAL_AXIS


@dataclass
class PropagationConfig:
    """Field propagation pipeline parameters.

    Attributes:
        formula: Per-segment probability formula.
        profile_samples: Samples per segment when no integration step is set.
        integration_step_mm: Sample spacing [mm]; overrides profile_samples.
        extra_absorption_length_mm: Buffer gas length beyond the field [mm].
        tracer: Boundary search parameters.
    """
    formula: ConversionFormula = ConversionFormula.PROFILE
    profile_samples: int = DEFAULT_PROFILE_SAMPLES
    integration_step_mm: Optional[float] = None
    extra_absorption_length_mm: float = DEFAULT_EXTRA_ABSORPTION_LENGTH_MM
    tracer: TracerConfig = field(default_factory=TracerConfig)


@dataclass
class PropagationResult:
    """Observables of one propagated axion.

    Attributes:
        status: Evaluation outcome.
        field_average_T: Length-weighted mean transverse field [T].
        probability: Summed conversion probability over segments.
        coherence_length_mm: Total field length traversed [mm].
        transmission: Medium-only transmission of the extra length.
        segments: Per-segment conversion results.
        boundaries: Traced field boundaries.
        elapsed_seconds: Wall-clock time [s].
    """
    status: PropagationStatus = PropagationStatus.NOT_EVALUATED
    field_average_T: float = 0.0
    probability: float = 0.0
    coherence_length_mm: float = 0.0
    transmission: float = 1.0
    segments: list[ConversionResult] = field(default_factory=list)
    boundaries: BoundaryList = field(default_factory=BoundaryList)
    elapsed_seconds: float = 0.0

    def observables(self) -> dict[str, float]:
        """Named scalar observables exposed to the event pipeline."""
        return {
            "fieldAverage": float(self.field_average_T),
            "probability": float(self.probability),
            "coherenceLength": float(self.coherence_length_mm),
            "transmission": float(self.transmission),
        }
