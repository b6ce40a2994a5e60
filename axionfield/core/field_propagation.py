"""Field propagation — orchestrates tracing, sampling and conversion.

For each incoming axion:
  1. Trace the field boundaries along its trajectory.
  2. Sample the transverse field profile of every segment.
  3. Evaluate the conversion probability per segment and sum.
  4. Optionally compute the photon transmission through an extra
     buffer-gas length beyond the field region.

Observables: fieldAverage [T], probability, coherenceLength [mm],
transmission.

Segments are treated as independent conversion opportunities: the total
probability is the sum of per-segment probabilities, not a coherent sum
of amplitudes over the whole trajectory.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Iterable

from axionfield.core.boundary_tracer import BoundaryTracer
from axionfield.core.conversion_engine import ConversionProbabilityEngine
from axionfield.core.exceptions import MissingCollaboratorError
from axionfield.core.field_profile import FieldProfileSampler
from axionfield.core.field_sampler import FieldSampler
from axionfield.models.geometry import Segment
from axionfield.models.profile import FieldProfile
from axionfield.models.results import ConversionResult
from axionfield.models.simulation import (
    AxionParticle,
    ConversionFormula,
    PropagationConfig,
    PropagationResult,
    PropagationStatus,
)

logger = logging.getLogger(__name__)


class FieldPropagation:
    """Axion propagation through a magnetic field volume.

    Collaborators are resolved once by the caller and injected here.

    Args:
        field: Magnetic field sampler (required).
        engine: Conversion probability engine (required).
        config: Pipeline parameters. Defaults to PropagationConfig().
        tracer: Boundary tracer. Built from *field* and the config's
            tracer settings when omitted.

    Raises:
        MissingCollaboratorError: If *field* or *engine* is None.
    """

    def __init__(
        self,
        field: FieldSampler | None,
        engine: ConversionProbabilityEngine | None,
        config: PropagationConfig | None = None,
        tracer: BoundaryTracer | None = None,
    ) -> None:
        if field is None:
            raise MissingCollaboratorError("Magnetic field was not defined")
        if engine is None:
            raise MissingCollaboratorError("No conversion probability engine was defined")
        self._config = config or PropagationConfig()
        self._engine = engine
        self._tracer = tracer or BoundaryTracer(field, self._config.tracer)
        self._sampler = FieldProfileSampler(field)

    @property
    def config(self) -> PropagationConfig:
        return self._config

    def process(self, particle: AxionParticle) -> PropagationResult:
        """Propagate one axion and compute its observables.

        Args:
            particle: Incoming axion [mm, keV, eV].
        Returns:
            PropagationResult. A track that crosses no field yields
            probability 0 with status NO_FIELD_CROSSED.
        """
        t0 = time.perf_counter()
        ray = particle.ray
        boundaries = self._tracer.trace(ray)

        if not boundaries:
            logger.warning(
                "Track from %s along %s does not cross the field volume",
                particle.position.tolist(), particle.direction.tolist(),
            )
            return PropagationResult(
                status=PropagationStatus.NO_FIELD_CROSSED,
                boundaries=boundaries,
                elapsed_seconds=time.perf_counter() - t0,
            )

        segment_results: list[ConversionResult] = []
        weighted_field = 0.0
        for segment in boundaries:
            if segment.length_mm <= 0:
                logger.debug("Skipping zero-length segment at %s", segment.entry.tolist())
                continue
            profile = self._sample_segment(segment, ray.direction)
            result = self._convert(particle, profile)
            segment_results.append(result)
            weighted_field += profile.average * segment.length_mm

        if not segment_results:
            logger.warning(
                "Track from %s crosses only zero-length field segments",
                particle.position.tolist(),
            )
            return PropagationResult(
                status=PropagationStatus.NO_FIELD_CROSSED,
                boundaries=boundaries,
                elapsed_seconds=time.perf_counter() - t0,
            )

        coherence_length = math.fsum(r.coherence_length_mm for r in segment_results)
        field_average = weighted_field / coherence_length if coherence_length > 0 else 0.0
        probability = self._engine.total_probability(segment_results)

        transmission = self._engine.medium_transmission(
            particle.energy_keV, self._config.extra_absorption_length_mm,
        )

        logger.debug(
            "Propagation: %d segment(s), <B>=%g T, P=%g, Lcoh=%g mm, T=%g",
            len(segment_results), field_average, probability,
            coherence_length, transmission,
        )
        return PropagationResult(
            status=PropagationStatus.CONVERTED,
            field_average_T=field_average,
            probability=probability,
            coherence_length_mm=coherence_length,
            transmission=transmission,
            segments=segment_results,
            boundaries=boundaries,
            elapsed_seconds=time.perf_counter() - t0,
        )

    def process_many(
        self,
        particles: Iterable[AxionParticle],
        progress_callback: Callable[[int], None] | None = None,
    ) -> list[PropagationResult]:
        """Propagate independent axions one after another.

        Args:
            particles: Incoming axions.
            progress_callback: Called with the number of processed events.
        Returns:
            One PropagationResult per particle, in input order.
        """
        results: list[PropagationResult] = []
        for particle in particles:
            results.append(self.process(particle))
            if progress_callback is not None:
                progress_callback(len(results))
        return results

    def _sample_segment(self, segment: Segment, direction) -> FieldProfile:
        step = self._config.integration_step_mm
        if step is not None:
            return self._sampler.sample_by_step(segment.entry, segment.exit, direction, step)
        return self._sampler.sample(
            segment.entry, segment.exit, direction, self._config.profile_samples,
        )

    def _convert(self, particle: AxionParticle, profile: FieldProfile) -> ConversionResult:
        if self._config.formula is ConversionFormula.HOMOGENEOUS:
            return self._engine.probability_homogeneous(
                particle.energy_keV, particle.mass_eV,
                profile.average, profile.length_mm,
            )
        return self._engine.probability_profile(
            particle.energy_keV, particle.mass_eV, profile,
        )
