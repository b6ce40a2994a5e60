"""Package-wide constants.

Defaults for boundary tracing, field sampling and the conversion model.
Lengths in mm, energies in keV, masses in eV.
"""

APP_VERSION = "0.1.0"

# Boundary tracing [mm]
DEFAULT_MIN_STEP_MM = 0.01
DEFAULT_COARSE_STEP_MM = 5.0
FAR_PLANE_MM = 25_000.0
WORLD_LIMIT_MM = 40_000.0

# Designated vertical axis (0 = x, 1 = y, 2 = z); travel is expected downward
VERTICAL_AXIS = 2

# Field profile sampling
DEFAULT_PROFILE_SAMPLES = 10_000
MIN_PROFILE_SAMPLES = 2

# Extra buffer-gas length outside the magnet [mm]
DEFAULT_EXTRA_ABSORPTION_LENGTH_MM = 0.0

# Physical constants
LIGHT_SPEED_M_S = 299_792_458.0
NATURAL_ELECTRON_CHARGE = 0.30282212  # sqrt(4*pi*alpha)
INVERSE_EV_PER_METER = 5_067_730.58  # 1 m in eV^-1 (1 / hbar c)
REFERENCE_COUPLING_SQUARED = 1.0e-20  # g_ag = 1e-10 GeV^-1, squared

# Plasma photon mass prefactor: m_gamma [eV] = 28.77 * sqrt(Z/A * rho[g/cm3])
PLASMA_MASS_PREFACTOR_EV = 28.77
