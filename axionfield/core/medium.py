"""Propagation media — photon effective mass and absorption.

A medium is consumed as a pure function of the axion energy:
    photon_mass(E)            [eV]
    absorption_coefficient(E) [cm⁻¹]

No medium (None) means vacuum: m_γ = 0, Γ = 0.
"""

from __future__ import annotations

import logging
import math
from typing import Protocol, Sequence, runtime_checkable

import numpy as np

from axionfield.constants import PLASMA_MASS_PREFACTOR_EV

logger = logging.getLogger(__name__)


@runtime_checkable
class Medium(Protocol):
    """Energy-dependent photon properties of a buffer medium."""

    def photon_mass(self, energy_keV: float) -> float:
        ...

    def absorption_coefficient(self, energy_keV: float) -> float:
        ...


class UniformMedium:
    """Medium with energy-independent photon mass and absorption.

    Args:
        photon_mass_eV: Effective photon mass [eV].
        absorption_per_cm: Absorption coefficient Γ [cm⁻¹].
    """

    def __init__(self, photon_mass_eV: float = 0.0, absorption_per_cm: float = 0.0) -> None:
        if photon_mass_eV < 0 or absorption_per_cm < 0:
            raise ValueError("Photon mass and absorption must be non-negative")
        self._mass = float(photon_mass_eV)
        self._gamma = float(absorption_per_cm)

    def photon_mass(self, energy_keV: float) -> float:
        return self._mass

    def absorption_coefficient(self, energy_keV: float) -> float:
        return self._gamma


class BufferGas:
    """Buffer gas with plasma photon mass and tabulated X-ray absorption.

    m_γ [eV] = 28.77 × sqrt(Z/A × ρ [g/cm³])
    Γ [cm⁻¹] = (μ/ρ)(E) [cm²/g] × ρ [g/cm³]

    μ/ρ is interpolated log-log between tabulated energies and held
    constant outside the table.

    Args:
        density_g_cm3: Gas density [g/cm³].
        z_over_a: Ratio of atomic number to mass number.
        energies_keV: Tabulation energies [keV], ascending.
        mass_attenuation_cm2_g: μ/ρ at each energy [cm²/g].
    """

    def __init__(
        self,
        density_g_cm3: float,
        z_over_a: float,
        energies_keV: Sequence[float],
        mass_attenuation_cm2_g: Sequence[float],
    ) -> None:
        if density_g_cm3 < 0:
            raise ValueError("Gas density must be non-negative")
        energies = np.asarray(energies_keV, dtype=np.float64)
        mu_rho = np.asarray(mass_attenuation_cm2_g, dtype=np.float64)
        if energies.shape != mu_rho.shape or energies.size == 0:
            raise ValueError("Absorption table needs matching, non-empty columns")
        if np.any(energies <= 0) or np.any(mu_rho <= 0):
            raise ValueError("Absorption table values must be positive")
        if np.any(np.diff(energies) <= 0):
            raise ValueError("Absorption table energies must be strictly ascending")

        self._density = float(density_g_cm3)
        self._z_over_a = float(z_over_a)
        self._log_E = np.log(energies)
        self._log_mu = np.log(mu_rho)
        logger.debug(
            "Buffer gas: rho=%g g/cm3, Z/A=%g, m_gamma=%g eV",
            self._density, self._z_over_a, self.photon_mass(0.0),
        )

    @property
    def density(self) -> float:
        """Gas density [g/cm³]."""
        return self._density

    def photon_mass(self, energy_keV: float) -> float:
        """Plasma photon mass [eV] (energy independent)."""
        return PLASMA_MASS_PREFACTOR_EV * math.sqrt(self._z_over_a * self._density)

    def mass_attenuation(self, energy_keV: float) -> float:
        """μ/ρ at *energy_keV* via log-log interpolation [cm²/g]."""
        if energy_keV <= 0:
            raise ValueError(f"Energy must be positive, got {energy_keV}")
        return float(np.exp(np.interp(np.log(energy_keV), self._log_E, self._log_mu)))

    def absorption_coefficient(self, energy_keV: float) -> float:
        """Γ = μ/ρ × ρ [cm⁻¹]."""
        return self.mass_attenuation(energy_keV) * self._density
