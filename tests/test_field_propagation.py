"""Integration tests for FieldPropagation — trace, sample, convert."""

import logging
import math

import pytest

from axionfield.core.conversion_engine import ConversionProbabilityEngine
from axionfield.core.exceptions import MissingCollaboratorError
from axionfield.core.field_propagation import FieldPropagation
from axionfield.core.field_sampler import (
    CompositeField,
    UniformFieldBox,
    UniformFieldCylinder,
)
from axionfield.core.medium import UniformMedium
from axionfield.models.geometry import BoundaryList, Segment
from axionfield.models.simulation import (
    AxionParticle,
    ConversionFormula,
    PropagationConfig,
    PropagationResult,
    PropagationStatus,
    TracerConfig,
)

EA_KEV = 4.2
FAST_TRACER = TracerConfig(min_step_mm=0.1)


class PointTracer:
    """Tracer that reports a single zero-length segment."""

    def trace(self, ray, min_step=None):
        point = (0.0, 0.0, -100.0)
        return BoundaryList(segments=[Segment(point, point)])


def _magnet(z_low: float, z_high: float, b: float = 2.0) -> UniformFieldBox:
    return UniformFieldBox((-50, -50, z_low), (50, 50, z_high), (b, 0.0, 0.0))


def _axion(mass_eV: float = 0.0, direction=(0.0, 0.0, -1.0)) -> AxionParticle:
    return AxionParticle((0.0, 0.0, 0.0), direction, EA_KEV, mass_eV)


def _config(**kwargs) -> PropagationConfig:
    kwargs.setdefault("tracer", FAST_TRACER)
    return PropagationConfig(**kwargs)


@pytest.fixture(scope="module")
def vacuum() -> ConversionProbabilityEngine:
    return ConversionProbabilityEngine()


@pytest.fixture(scope="module")
def single_magnet(vacuum):
    """4 m long, 2 T magnet between z = −4100 and −100 mm."""
    propagation = FieldPropagation(_magnet(-4100.0, -100.0), vacuum, _config())
    return propagation.process(_axion())


# ── Collaborators ──


class TestCollaborators:

    def test_missing_field(self, vacuum):
        with pytest.raises(MissingCollaboratorError):
            FieldPropagation(None, vacuum)

    def test_missing_engine(self):
        with pytest.raises(MissingCollaboratorError):
            FieldPropagation(_magnet(-200.0, -100.0), None)

    def test_default_config(self, vacuum):
        propagation = FieldPropagation(_magnet(-200.0, -100.0), vacuum)
        assert propagation.config.formula is ConversionFormula.PROFILE


# ── No field crossed ──


class TestNoFieldCrossed:

    def test_zero_observables(self, vacuum, caplog):
        propagation = FieldPropagation(CompositeField(), vacuum, _config())
        with caplog.at_level(logging.WARNING, logger="axionfield.core.field_propagation"):
            result = propagation.process(_axion())
        assert result.status is PropagationStatus.NO_FIELD_CROSSED
        assert result.probability == 0.0
        assert result.coherence_length_mm == 0.0
        assert result.field_average_T == 0.0
        assert result.segments == []
        assert "does not cross the field volume" in caplog.text

    def test_missed_magnet(self, vacuum):
        propagation = FieldPropagation(_magnet(-4100.0, -100.0), vacuum, _config())
        result = propagation.process(
            AxionParticle((200.0, 0.0, 0.0), (0.0, 0.0, -1.0), EA_KEV),
        )
        assert result.status is PropagationStatus.NO_FIELD_CROSSED
        assert result.observables()["probability"] == 0.0

    def test_only_zero_length_segments(self, vacuum):
        """Degenerate segments are not a field crossing."""
        propagation = FieldPropagation(
            _magnet(-200.0, -100.0), vacuum, _config(), tracer=PointTracer(),
        )
        result = propagation.process(_axion())
        assert result.status is PropagationStatus.NO_FIELD_CROSSED
        assert result.probability == 0.0
        assert isinstance(result.coherence_length_mm, float)
        assert result.coherence_length_mm == 0.0

    def test_unevaluated_result(self):
        result = PropagationResult()
        assert result.status is PropagationStatus.NOT_EVALUATED
        assert result.transmission == 1.0


# ── Single magnet ──


class TestSingleMagnet:

    def test_status(self, single_magnet):
        assert single_magnet.status is PropagationStatus.CONVERTED
        assert len(single_magnet.segments) == 1

    def test_coherence_length(self, single_magnet):
        assert single_magnet.coherence_length_mm == pytest.approx(4000.0, abs=0.2)

    def test_field_average(self, single_magnet):
        assert single_magnet.field_average_T == pytest.approx(2.0)

    def test_probability_is_bl_half_squared(self, single_magnet, vacuum):
        expected = vacuum.bl_half_squared(2.0, single_magnet.coherence_length_mm)
        assert single_magnet.probability == pytest.approx(expected, rel=1e-9)
        assert single_magnet.probability == pytest.approx(1.568e-19, rel=1e-3)

    def test_observables(self, single_magnet):
        obs = single_magnet.observables()
        assert set(obs) == {"fieldAverage", "probability", "coherenceLength", "transmission"}
        assert obs["transmission"] == 1.0

    def test_boundaries_recorded(self, single_magnet):
        assert len(single_magnet.boundaries) == 1
        assert single_magnet.elapsed_seconds >= 0.0


# ── Thin field sheet ──


class TestThinSheet:
    """Field sheet thinner than the tracer resolution."""

    def test_scores_conversion(self, vacuum):
        sheet = UniformFieldBox((-50, -50, -100.005), (50, 50, -100.0), (2.0, 0.0, 0.0))
        propagation = FieldPropagation(
            sheet, vacuum, _config(tracer=TracerConfig(min_step_mm=0.01)),
        )
        result = propagation.process(_axion())
        assert result.status is PropagationStatus.CONVERTED
        assert len(result.segments) == 1
        assert 0.0 < result.coherence_length_mm <= 0.01
        assert result.probability > 0.0


# ── Multiple magnets ──


class TestTwoMagnets:

    @pytest.fixture(scope="class")
    def result(self, vacuum):
        field = CompositeField([_magnet(-4100.0, -100.0, 2.0), _magnet(-9100.0, -6100.0, 1.0)])
        return FieldPropagation(field, vacuum, _config()).process(_axion())

    def test_segment_count(self, result):
        assert len(result.segments) == 2

    def test_probabilities_add(self, result, vacuum):
        first, second = result.segments
        expected = (
            vacuum.bl_half_squared(2.0, first.coherence_length_mm)
            + vacuum.bl_half_squared(1.0, second.coherence_length_mm)
        )
        assert result.probability == pytest.approx(expected, rel=1e-9)

    def test_coherence_length_summed(self, result):
        assert result.coherence_length_mm == pytest.approx(7000.0, abs=0.4)

    def test_length_weighted_average(self, result):
        assert result.field_average_T == pytest.approx((2.0 * 4000 + 1.0 * 3000) / 7000, rel=1e-4)


# ── Formulas and media ──


class TestFormulas:

    @pytest.fixture(scope="class")
    def gas(self) -> ConversionProbabilityEngine:
        return ConversionProbabilityEngine(UniformMedium(photon_mass_eV=0.005, absorption_per_cm=1e-3))

    @pytest.mark.parametrize("ma", [0.0, 0.01])
    def test_homogeneous_matches_profile(self, gas, ma):
        field = _magnet(-4100.0, -100.0)
        profile = FieldPropagation(field, gas, _config()).process(_axion(ma))
        closed = FieldPropagation(
            field, gas, _config(formula=ConversionFormula.HOMOGENEOUS),
        ).process(_axion(ma))
        assert closed.probability == pytest.approx(profile.probability, rel=1e-6)

    def test_integration_step(self, vacuum, single_magnet):
        propagation = FieldPropagation(
            _magnet(-4100.0, -100.0), vacuum, _config(integration_step_mm=50.0),
        )
        result = propagation.process(_axion())
        assert result.probability == pytest.approx(single_magnet.probability, rel=1e-9)

    def test_extra_absorption_length(self):
        engine = ConversionProbabilityEngine(UniformMedium(absorption_per_cm=1e-3))
        propagation = FieldPropagation(
            _magnet(-4100.0, -100.0), engine, _config(extra_absorption_length_mm=1000.0),
        )
        result = propagation.process(_axion())
        assert result.transmission == pytest.approx(math.exp(-0.1))

    def test_cylindrical_bore(self, vacuum):
        """9 T over 9.26 m along the bore axis."""
        bore = UniformFieldCylinder((0, 0, -5000), radius=21.5, length=9260, field=(0, 9.0, 0))
        result = FieldPropagation(bore, vacuum, _config()).process(_axion())
        assert result.coherence_length_mm == pytest.approx(9260.0, abs=0.2)
        assert result.probability == pytest.approx(
            vacuum.bl_half_squared(9.0, result.coherence_length_mm), rel=1e-9,
        )


# ── Batches and orientation ──


class TestEvents:

    def test_process_many_progress(self, vacuum):
        propagation = FieldPropagation(_magnet(-600.0, -100.0), vacuum, _config())
        seen = []
        results = propagation.process_many(
            [_axion(), _axion(0.01), AxionParticle((500, 0, 0), (0, 0, -1), EA_KEV)],
            progress_callback=seen.append,
        )
        assert seen == [1, 2, 3]
        assert [r.status for r in results] == [
            PropagationStatus.CONVERTED,
            PropagationStatus.CONVERTED,
            PropagationStatus.NO_FIELD_CROSSED,
        ]

    def test_ascending_axion_processed(self, vacuum, caplog):
        propagation = FieldPropagation(_magnet(-600.0, -100.0), vacuum, _config())
        with caplog.at_level(logging.WARNING, logger="axionfield.core.boundary_tracer"):
            result = propagation.process(_axion(direction=(0.0, 0.0, 1.0)))
        assert "ascends" in caplog.text
        assert result.status is PropagationStatus.CONVERTED
        assert result.coherence_length_mm == pytest.approx(500.0, abs=0.2)
