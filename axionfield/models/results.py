"""Conversion engine result data models.

Dataclasses returned by ConversionProbabilityEngine.
"""

from dataclasses import dataclass


@dataclass
class ConversionResult:
    """Axion-photon conversion probability for one field segment.

    Attributes:
        probability: Conversion probability, clamped to [0, 1].
        raw_probability: Probability as evaluated, before clamping.
        clamped: True if the evaluated value fell outside [0, 1].
        field_T: Field magnitude used, or the profile average [T].
        coherence_length_mm: Segment length [mm].
        photon_mass_eV: Effective photon mass in the medium [eV].
        phase: Accumulated phase mismatch q·L [dimensionless].
        gamma_L: Absorption Γ·L [dimensionless].
    """
    probability: float = 0.0
    raw_probability: float = 0.0
    clamped: bool = False
    field_T: float = 0.0
    coherence_length_mm: float = 0.0
    photon_mass_eV: float = 0.0
    phase: float = 0.0
    gamma_L: float = 0.0
