"""Constants used across the ufcgrf package.

Numerical settings of the GRF resolution engine and the defaults of the
curve data service live here so that no module hardcodes them.
"""

from __future__ import annotations

# =============================================================================
# Interpolation
# =============================================================================

# Number of log-spaced points on every resampled / extended curve grid
GRID_POINTS = 400

# Suffix appended to the name of a curve re-sampled onto an extended grid
EXTENDED_SUFFIX = " (extended)"

# Separator characters terminating a "key = value" pair in GRF titles
FILTER_TERMINATORS = (",", ")")


# =============================================================================
# Curve data service
# =============================================================================

DEFAULT_BASE_URL = "http://127.0.0.1:8000"
DEFAULT_ENDPOINT = "/api/grf/data/"
DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_GRF_FILENAME = "02_154.GRF"

ENV_BASE_URL = "UFCGRF_API_BASE_URL"
ENV_ENDPOINT = "UFCGRF_API_ENDPOINT"
ENV_TIMEOUT = "UFCGRF_API_TIMEOUT"


# =============================================================================
# UFC 3-340-02 design charts
# =============================================================================

# Charge weight factor applied to the nominal explosive weight (20 % margin)
CHARGE_WEIGHT_FACTOR = 1.2

# Figures 2-73 .. 2-100: scaled peak reflected pressure, panels A-D
PRESSURE_FIGURES = range(73, 101)

# Figures 2-101 .. 2-148: scaled reflected impulse, panels A-D
IMPULSE_FIGURES = range(101, 149)

FIGURE_PANELS = ("A", "B", "C", "D")

# Filter keys carried by the reflected pressure / impulse chart titles
SHOCK_FILTER_KEYS = ("N", "l/L", "h/H", "L/H")
