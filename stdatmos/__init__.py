"""
Tabulated U.S. Standard Atmosphere 1976
=======================================
Temperature, pressure, density and speed of sound from -2 km to 86 km,
interpolated from the published USSA-1976 tables:
  - Merged 0.5 km / 2 km reference grid
  - Monotone cubic (pchip) or linear interpolation
  - Flat clamping outside the table, with an OutOfRangeWarning
  - Metric (°C, Pa, kg/m³, m/s) or imperial (°F, lbf/ft², slug/ft³, ft/s)

Usage:
    from stdatmos import evaluate
    evaluate(11000)                         # all four, metric
    evaluate(5000, 'ft', ['rho', 'a'])      # density and speed of sound, imperial
"""

from .exceptions import InvalidInput, OutOfRangeWarning
from .table import (
    TableSample, REFERENCE_TABLE, MIN_ALTITUDE_KM, MAX_ALTITUDE_KM,
    samples, column, sample_at,
)
from .units import UnitSystem, UNIT_LABELS
from .evaluator import (
    Field, ALL_FIELDS, METHODS, DEFAULT_METHOD,
    evaluate, atmosphere_profile, parse_fields,
)
from .validation import (
    validate_against_reference, run_all_validations, REFERENCE_POINTS,
)
from .visualization import (
    plot_atmosphere, plot_interpolation_comparison, plot_validation,
)

__version__ = "1.0.0"
__all__ = [
    'evaluate', 'atmosphere_profile', 'parse_fields',
    'Field', 'ALL_FIELDS', 'METHODS', 'DEFAULT_METHOD',
    'UnitSystem', 'UNIT_LABELS',
    'InvalidInput', 'OutOfRangeWarning',
    'TableSample', 'REFERENCE_TABLE', 'MIN_ALTITUDE_KM', 'MAX_ALTITUDE_KM',
    'samples', 'column', 'sample_at',
    'validate_against_reference', 'run_all_validations', 'REFERENCE_POINTS',
    'plot_atmosphere', 'plot_interpolation_comparison', 'plot_validation',
]
