"""Unit conversion module — single conversion point between user and natural units.

CRITICAL: All unit conversions MUST go through this module.

User-facing units:
    Length   : mm
    Energy   : keV (axion / photon energy)
    Mass     : eV
    Field    : T
    Γ        : cm⁻¹

Internal (conversion model) units:
    Length   : m, cm (absorption), eV⁻¹ (phase)
    Energy   : eV
"""

from typing import NewType

from axionfield.constants import (
    INVERSE_EV_PER_METER,
    LIGHT_SPEED_M_S,
    NATURAL_ELECTRON_CHARGE,
)

# Unit type aliases, checked by IDEs only
Meter = NewType('Meter', float)
Cm = NewType('Cm', float)
EV = NewType('EV', float)
InverseEV = NewType('InverseEV', float)


# ---------------------------------------------------------------------------
# Length conversions
# ---------------------------------------------------------------------------

def mm_to_m(mm: float) -> Meter:
    """User (mm) → m."""
    return Meter(mm / 1000.0)


def mm_to_cm(mm: float) -> Cm:
    """User (mm) → cm."""
    return Cm(mm * 0.1)


def m_to_cm(m: float) -> Cm:
    """m → cm."""
    return Cm(m * 100.0)


def meters_to_inverse_eV(m: float) -> InverseEV:
    """Length [m] → natural units [eV⁻¹].

    Args:
        m: Length [m].

    Returns:
        Length [eV⁻¹].
    """
    return InverseEV(m * INVERSE_EV_PER_METER)


# ---------------------------------------------------------------------------
# Energy conversions
# ---------------------------------------------------------------------------

def keV_to_eV(kev: float) -> EV:
    """keV → eV."""
    return EV(kev * 1000.0)


# ---------------------------------------------------------------------------
# Coupling
# ---------------------------------------------------------------------------

def tesla_meter_to_GeV() -> float:
    """Field × length product of 1 T·m expressed in GeV.

    B·L [GeV] = B [T] × L [m] × c / e_natural × 1e-9
    """
    return LIGHT_SPEED_M_S / NATURAL_ELECTRON_CHARGE * 1.0e-9
