"""Tests for propagation media — uniform medium and buffer gas."""

import math

import pytest

from axionfield.core.medium import BufferGas, Medium, UniformMedium


class TestUniformMedium:

    def test_values_energy_independent(self):
        medium = UniformMedium(photon_mass_eV=0.02, absorption_per_cm=1e-3)
        assert medium.photon_mass(1.0) == 0.02
        assert medium.photon_mass(10.0) == 0.02
        assert medium.absorption_coefficient(4.2) == 1e-3

    def test_default_is_vacuum_like(self):
        medium = UniformMedium()
        assert medium.photon_mass(4.2) == 0.0
        assert medium.absorption_coefficient(4.2) == 0.0

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            UniformMedium(photon_mass_eV=-1.0)

    def test_satisfies_protocol(self):
        assert isinstance(UniformMedium(), Medium)


class TestBufferGas:
    """Helium-like gas with a two-point absorption table."""

    @pytest.fixture(scope="class")
    def gas(self) -> BufferGas:
        return BufferGas(
            density_g_cm3=1.0e-4,
            z_over_a=0.5,
            energies_keV=[1.0, 10.0],
            mass_attenuation_cm2_g=[100.0, 1.0],
        )

    def test_plasma_photon_mass(self, gas):
        expected = 28.77 * math.sqrt(0.5 * 1.0e-4)
        assert gas.photon_mass(4.2) == pytest.approx(expected)
        assert gas.photon_mass(4.2) == pytest.approx(0.2034, rel=1e-3)

    def test_table_nodes(self, gas):
        assert gas.mass_attenuation(1.0) == pytest.approx(100.0)
        assert gas.mass_attenuation(10.0) == pytest.approx(1.0)

    def test_log_log_interpolation(self, gas):
        """Power law between nodes: μ/ρ ∝ E⁻² → 10 cm²/g at √10 keV."""
        assert gas.mass_attenuation(math.sqrt(10.0)) == pytest.approx(10.0)

    def test_constant_outside_table(self, gas):
        assert gas.mass_attenuation(50.0) == pytest.approx(1.0)
        assert gas.mass_attenuation(0.5) == pytest.approx(100.0)

    def test_absorption_coefficient(self, gas):
        assert gas.absorption_coefficient(10.0) == pytest.approx(1.0e-4)
        assert gas.density == 1.0e-4

    def test_non_positive_energy(self, gas):
        with pytest.raises(ValueError):
            gas.mass_attenuation(0.0)

    def test_mismatched_table(self):
        with pytest.raises(ValueError):
            BufferGas(1e-4, 0.5, [1.0, 2.0], [1.0])

    def test_unsorted_table(self):
        with pytest.raises(ValueError):
            BufferGas(1e-4, 0.5, [2.0, 1.0], [1.0, 2.0])
