"""Conversion probability engine — axion-photon oscillation with absorption.

Two interchangeable formulas:
    - Homogeneous field (closed form, van Bibber et al.):
        P = (BL/2)² · [1 + e^(−ΓL) − 2e^(−ΓL/2)·cos φ] / (φ² + (ΓL/2)²)
    - Arbitrary transverse field profile (numerical integral):
        P = (1/2M)² · |∫ B(x)·e^((Γ/2)(x − L))·e^(−iqx) dx|²

φ = q·L with q = (m_a² − m_γ²) / 2E_a. Probabilities are given for an
axion-photon coupling g_aγ = 1e-10 GeV⁻¹.

Units: E_a [keV], m_a and m_γ [eV], B [T], L [mm], Γ [cm⁻¹].

Numeric precision is chosen per engine (numpy floating dtype) instead of
process-wide state. The closed form is evaluated as
    [expm1(−ΓL/2)² + 4e^(−ΓL/2)·sin²(φ/2)] / (φ² + (ΓL/2)²)
which is algebraically identical and free of cancellation as φ, ΓL → 0.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

import numpy as np
from numpy.typing import ArrayLike, DTypeLike
from scipy.integrate import trapezoid

from axionfield.constants import MIN_PROFILE_SAMPLES, REFERENCE_COUPLING_SQUARED
from axionfield.core.medium import Medium
from axionfield.core.units import (
    keV_to_eV,
    m_to_cm,
    meters_to_inverse_eV,
    mm_to_cm,
    mm_to_m,
    tesla_meter_to_GeV,
)
from axionfield.models.profile import FieldProfile
from axionfield.models.results import ConversionResult

logger = logging.getLogger(__name__)


def _validate_kinematics(energy_keV: float, mass_eV: float, length_mm: float) -> None:
    if not energy_keV > 0:
        raise ValueError(f"Axion energy must be positive, got {energy_keV} keV")
    if not mass_eV >= 0:
        raise ValueError(f"Axion mass must be non-negative, got {mass_eV} eV")
    if not length_mm > 0:
        raise ValueError(f"Coherence length must be positive, got {length_mm} mm")


class ConversionProbabilityEngine:
    """Axion-photon conversion probability in a magnetic field.

    Args:
        medium: Buffer medium providing m_γ(E) and Γ(E). None = vacuum.
        precision: Floating dtype for the probability formulas
            (``np.float64`` default, ``np.longdouble`` for extended).
    """

    def __init__(
        self,
        medium: Medium | None = None,
        precision: DTypeLike = np.float64,
    ) -> None:
        dtype = np.dtype(precision)
        if not np.issubdtype(dtype, np.floating):
            raise ValueError(f"Precision must be a floating dtype, got {dtype}")
        self._medium = medium
        self._dtype = dtype
        if medium is None:
            logger.info("No medium assigned; assuming vacuum (m_gamma = 0, Gamma = 0)")

    @property
    def medium(self) -> Medium | None:
        return self._medium

    @property
    def precision(self) -> np.dtype:
        return self._dtype

    # ------------------------------------------------------------------
    # Medium properties
    # ------------------------------------------------------------------

    def photon_mass(self, energy_keV: float) -> float:
        """Effective photon mass m_γ [eV] (0 in vacuum)."""
        if self._medium is None:
            return 0.0
        return float(self._medium.photon_mass(energy_keV))

    def absorption_coefficient(self, energy_keV: float) -> float:
        """Photon absorption Γ [cm⁻¹] (0 in vacuum)."""
        if self._medium is None:
            return 0.0
        return float(self._medium.absorption_coefficient(energy_keV))

    def medium_transmission(self, energy_keV: float, length_mm: float) -> float:
        """Photon transmission through extra medium length, e^(−Γ·L).

        Args:
            energy_keV: Photon energy [keV].
            length_mm: Absorbing length beyond the field region [mm].
        Returns:
            Transmission [0–1]; 1 in vacuum or for non-positive length.
        """
        if self._medium is None or length_mm <= 0:
            return 1.0
        gamma = self.absorption_coefficient(energy_keV)
        return math.exp(-gamma * mm_to_cm(length_mm))

    # ------------------------------------------------------------------
    # Coupling factors
    # ------------------------------------------------------------------

    def bl(self, field_T: float, length_mm: float) -> float:
        """g·B·L in natural units for g_aγ = 1e-10 GeV⁻¹.

        Args:
            field_T: Field magnitude [T].
            length_mm: Field length [mm].
        """
        return mm_to_m(length_mm) * field_T * tesla_meter_to_GeV() * 1.0e-10

    def bl_half_squared(self, field_T: float, length_mm: float) -> float:
        """(g·B·L/2)² for g_aγ = 1e-10 GeV⁻¹.

        Conversion probability of a massless axion in vacuum.
        """
        half = mm_to_m(length_mm) * field_T * tesla_meter_to_GeV() / 2.0
        return half * half * REFERENCE_COUPLING_SQUARED

    def profile_prefactor(self) -> float:
        """(1/2M)² prefactor of the profile integral [T⁻² m⁻²]."""
        half = tesla_meter_to_GeV() / 2.0
        return half * half * REFERENCE_COUPLING_SQUARED

    # ------------------------------------------------------------------
    # Probability formulas
    # ------------------------------------------------------------------

    def probability_homogeneous(
        self,
        energy_keV: float,
        mass_eV: float,
        field_T: float,
        length_mm: float,
    ) -> ConversionResult:
        """Conversion probability in a homogeneous transverse field.

        Args:
            energy_keV: Axion energy [keV].
            mass_eV: Axion mass [eV].
            field_T: Transverse field magnitude (or segment average) [T].
            length_mm: Coherence length [mm].
        Returns:
            ConversionResult with the (clamped) probability.
        """
        _validate_kinematics(energy_keV, mass_eV, length_mm)
        photon_mass = self.photon_mass(energy_keV)
        bl2 = self.bl_half_squared(field_T, length_mm)

        logger.debug(
            "Homogeneous conversion: Ea=%g keV, ma=%g eV, mgamma=%g eV, "
            "B=%g T, Lcoh=%g mm",
            energy_keV, mass_eV, photon_mass, field_T, length_mm,
        )

        if mass_eV == 0.0 and photon_mass == 0.0:
            return self._result(bl2, field_T, length_mm, photon_mass, 0.0, 0.0)

        phi, gamma_L = self._phase_and_absorption(
            energy_keV, mass_eV, photon_mass, length_mm,
        )
        f = self._dtype.type
        denom = phi * phi + gamma_L * gamma_L / f(4)
        if denom == 0:
            # Resonant vacuum limit (m_a == m_gamma, no absorption)
            raw = f(bl2)
        else:
            half_decay = np.exp(-gamma_L / f(2))
            numer = (
                np.expm1(-gamma_L / f(2)) ** 2
                + f(4) * half_decay * np.sin(phi / f(2)) ** 2
            )
            raw = f(bl2) * numer / denom

        logger.debug("phi=%g, Gamma*L=%g, P=%g", float(phi), float(gamma_L), float(raw))
        return self._result(raw, field_T, length_mm, photon_mass, phi, gamma_L)

    def probability_profile(
        self,
        energy_keV: float,
        mass_eV: float,
        profile: FieldProfile | ArrayLike,
        length_mm: float | None = None,
    ) -> ConversionResult:
        """Conversion probability for an arbitrary transverse field profile.

        Sample i of N+1 sits at x_i = L·i/N. The phase- and
        absorption-weighted field

            Bx_i = B_i · e^((ΓL/2)(i/N − 1)) · cos(−q·L·i/N)
            By_i = B_i · e^((ΓL/2)(i/N − 1)) · sin(−q·L·i/N)

        is integrated over [0, L] with the trapezoidal rule.

        Args:
            energy_keV: Axion energy [keV].
            mass_eV: Axion mass [eV].
            profile: FieldProfile, or transverse field samples [T].
            length_mm: Coherence length [mm]. Defaults to the profile's
                segment length.
        Returns:
            ConversionResult with the (clamped) probability.
        """
        if isinstance(profile, FieldProfile):
            samples = profile.samples
            if length_mm is None:
                length_mm = profile.length_mm
        else:
            samples = np.asarray(profile, dtype=np.float64)
        if length_mm is None:
            raise ValueError("Coherence length is required for a bare sample series")
        if samples.ndim != 1 or len(samples) < MIN_PROFILE_SAMPLES:
            raise ValueError(
                f"Field profile needs at least {MIN_PROFILE_SAMPLES} scalar samples"
            )
        _validate_kinematics(energy_keV, mass_eV, length_mm)

        photon_mass = self.photon_mass(energy_keV)
        if self._medium is None:
            logger.debug("Profile conversion without medium: vacuum assumed")
        phi, gamma_L = self._phase_and_absorption(
            energy_keV, mass_eV, photon_mass, length_mm,
        )

        f = self._dtype.type
        n = len(samples) - 1
        b = samples.astype(self._dtype)
        frac = np.arange(n + 1, dtype=self._dtype) / f(n)
        weight = np.exp((gamma_L / f(2)) * (frac - f(1)))
        bx = b * weight * np.cos(-phi * frac)
        by = b * weight * np.sin(-phi * frac)

        length_m = mm_to_m(f(length_mm))
        dx = length_m / f(n)
        ix = trapezoid(bx, dx=dx)
        iy = trapezoid(by, dx=dx)

        raw = f(self.profile_prefactor()) * (ix * ix + iy * iy)
        field_avg = float(np.mean(samples))

        logger.debug(
            "Profile conversion: %d samples, Ea=%g keV, ma=%g eV, Lcoh=%g mm, "
            "phi=%g, Gamma*L=%g, P=%g",
            n + 1, energy_keV, mass_eV, length_mm,
            float(phi), float(gamma_L), float(raw),
        )
        return self._result(raw, field_avg, length_mm, photon_mass, phi, gamma_L)

    def total_probability(self, results: Iterable[ConversionResult | float]) -> float:
        """Incoherent sum of per-segment probabilities.

        Segments are independent conversion opportunities; amplitudes
        are not combined across segments.
        """
        return math.fsum(
            r.probability if isinstance(r, ConversionResult) else float(r)
            for r in results
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _phase_and_absorption(
        self,
        energy_keV: float,
        mass_eV: float,
        photon_mass_eV: float,
        length_mm: float,
    ) -> tuple[np.floating, np.floating]:
        """Phase mismatch φ = q·L and absorption Γ·L, both dimensionless."""
        f = self._dtype.type
        energy_eV = keV_to_eV(f(energy_keV))
        q = (f(mass_eV) ** 2 - f(photon_mass_eV) ** 2) / (f(2) * energy_eV)
        length_m = mm_to_m(f(length_mm))
        phi = q * meters_to_inverse_eV(length_m)
        gamma_L = f(self.absorption_coefficient(energy_keV)) * m_to_cm(length_m)
        return phi, gamma_L

    def _result(
        self,
        raw: float | np.floating,
        field_T: float,
        length_mm: float,
        photon_mass: float,
        phi: float | np.floating,
        gamma_L: float | np.floating,
    ) -> ConversionResult:
        raw = float(raw)
        probability = min(max(raw, 0.0), 1.0)
        clamped = probability != raw
        if clamped:
            logger.warning(
                "Conversion probability %g outside [0, 1]; clamped to %g",
                raw, probability,
            )
        return ConversionResult(
            probability=probability,
            raw_probability=raw,
            clamped=clamped,
            field_T=float(field_T),
            coherence_length_mm=float(length_mm),
            photon_mass_eV=float(photon_mass),
            phase=float(phi),
            gamma_L=float(gamma_L),
        )
