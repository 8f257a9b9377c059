"""
Unit Systems and Conversions
============================
The reference table is SI. Results are reported either in metric
(°C, Pa, kg/m³, m/s) or in engineering English units
(°F, lbf/ft², slug/ft³, ft/s).

Conversion factors are the exact or NIST-published values:
  1 ft        = 0.3048 m (exact)
  1 lbf/ft²   = 47.880258980 Pa
  1 slug/ft³  = 515.378818 kg/m³
"""

from enum import Enum

from .exceptions import InvalidInput


# ── Conversion Constants ──────────────────────────────────────────────────
FT_TO_M            = 0.3048          # m per ft
KELVIN_OFFSET      = 273.15          # K at 0 °C
PSF_TO_PA          = 47.880258980    # Pa per lbf/ft²
SLUG_FT3_TO_KG_M3  = 515.378818      # kg/m³ per slug/ft³


class UnitSystem(Enum):
    METRIC = 'metric'
    IMPERIAL = 'imperial'

    @classmethod
    def parse(cls, value) -> 'UnitSystem':
        """Accept a UnitSystem or one of its string aliases (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            system = _UNIT_ALIASES.get(value.strip().lower())
            if system is not None:
                return system
        raise InvalidInput(
            f"Unknown unit system {value!r}. "
            f"Available: {sorted(_UNIT_ALIASES)}"
        )


_UNIT_ALIASES = {
    'metric': UnitSystem.METRIC,
    'm': UnitSystem.METRIC,
    'si': UnitSystem.METRIC,
    'imperial': UnitSystem.IMPERIAL,
    'ft': UnitSystem.IMPERIAL,
    'english': UnitSystem.IMPERIAL,
}


def feet_to_meters(h_ft):
    return h_ft * FT_TO_M


def kelvin_to_celsius(t_k):
    return t_k - KELVIN_OFFSET


def celsius_to_fahrenheit(t_c):
    return t_c * 1.8 + 32.0


def pascal_to_psf(p_pa):
    """Pressure, Pa → lbf/ft²."""
    return p_pa / PSF_TO_PA


def density_to_slug_ft3(rho_kg_m3):
    """Density, kg/m³ → slug/ft³."""
    return rho_kg_m3 / SLUG_FT3_TO_KG_M3


def mps_to_fps(a_m_s):
    return a_m_s / FT_TO_M


_METRIC_TO_IMPERIAL = {
    'temperature': celsius_to_fahrenheit,
    'pressure': pascal_to_psf,
    'density': density_to_slug_ft3,
    'speed_of_sound': mps_to_fps,
}


def metric_to_imperial(name: str, value):
    """Convert one metric quantity (°C, Pa, kg/m³, m/s) to imperial."""
    return _METRIC_TO_IMPERIAL[name](value)


# Display labels, indexed by unit system then field name
UNIT_LABELS = {
    UnitSystem.METRIC: {
        'altitude': 'm',
        'temperature': '°C',
        'pressure': 'Pa',
        'density': 'kg/m³',
        'speed_of_sound': 'm/s',
    },
    UnitSystem.IMPERIAL: {
        'altitude': 'ft',
        'temperature': '°F',
        'pressure': 'lbf/ft²',
        'density': 'slug/ft³',
        'speed_of_sound': 'ft/s',
    },
}
