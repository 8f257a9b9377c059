"""
Atmosphere Evaluator
====================
Temperature, pressure, density and speed of sound at an altitude, read
from the USSA-1976 reference table.

Between grid points each quantity is interpolated independently against
altitude. Two methods are available:
  - 'pchip'  : monotone piecewise cubic (shape-preserving, default)
  - 'linear' : piecewise linear

Both methods reproduce the table exactly at grid altitudes. Outside the
table (-2 to 86 km) the nearest boundary sample is returned unchanged and
an OutOfRangeWarning is issued; nothing is extrapolated.
"""

import math
import warnings
from enum import Enum
from typing import Dict, Tuple

import numpy as np
from scipy.interpolate import PchipInterpolator

from . import table
from .exceptions import InvalidInput, OutOfRangeWarning
from .units import UnitSystem, feet_to_meters, kelvin_to_celsius, metric_to_imperial


class Field(Enum):
    TEMPERATURE = 'temperature'
    PRESSURE = 'pressure'
    DENSITY = 'density'
    SPEED_OF_SOUND = 'speed_of_sound'

    @classmethod
    def parse(cls, name) -> 'Field':
        """Accept a Field, its value, or a short symbol (T, P, rho, a)."""
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            field = _FIELD_ALIASES.get(name.strip().lower())
            if field is not None:
                return field
        raise InvalidInput(
            f"Unknown output field {name!r}. "
            f"Available: {sorted(_FIELD_ALIASES)}"
        )


_FIELD_ALIASES = {
    'temperature': Field.TEMPERATURE,
    't': Field.TEMPERATURE,
    'pressure': Field.PRESSURE,
    'p': Field.PRESSURE,
    'density': Field.DENSITY,
    'rho': Field.DENSITY,
    'speed_of_sound': Field.SPEED_OF_SOUND,
    'a': Field.SPEED_OF_SOUND,
}

ALL_FIELDS = tuple(Field)

# Position of each field inside a TableSample
_SAMPLE_INDEX = {
    Field.TEMPERATURE: 1,
    Field.PRESSURE: 2,
    Field.DENSITY: 3,
    Field.SPEED_OF_SOUND: 4,
}


# ══════════════════════════════════════════════════════════════════════════
#  Interpolators — built once over the immutable table
# ══════════════════════════════════════════════════════════════════════════

METHODS = ('pchip', 'linear')
DEFAULT_METHOD = 'pchip'

_ALT_KM = table.column('altitude')
_SI_COLUMNS = {field: table.column(field.value) for field in Field}
_PCHIP = {
    field: PchipInterpolator(_ALT_KM, values, extrapolate=False)
    for field, values in _SI_COLUMNS.items()
}


def _interpolate(field: Field, alt_km, method: str):
    if method == 'pchip':
        return _PCHIP[field](alt_km)
    return np.interp(alt_km, _ALT_KM, _SI_COLUMNS[field])


def _to_output_units(field: Field, si_value, system: UnitSystem):
    """SI table value → reported value (°C/°F for temperature)."""
    value = kelvin_to_celsius(si_value) if field is Field.TEMPERATURE else si_value
    if system is UnitSystem.IMPERIAL:
        return metric_to_imperial(field.value, value)
    return value


# ══════════════════════════════════════════════════════════════════════════
#  Argument checks
# ══════════════════════════════════════════════════════════════════════════

def parse_fields(fields=None) -> Tuple[Field, ...]:
    """
    Normalise an output selection to an ordered tuple of Fields.

    Accepts None or 'all' (every field), a single name, a comma-separated
    string such as 'T,rho', or any iterable of names / Field members.
    """
    if fields is None:
        return ALL_FIELDS
    if isinstance(fields, str):
        if fields.strip().lower() == 'all':
            return ALL_FIELDS
        items = fields.split(',')
    elif isinstance(fields, Field):
        items = [fields]
    else:
        try:
            items = list(fields)
        except TypeError:
            raise InvalidInput(f"Cannot read output fields from {fields!r}") from None

    selected = {Field.parse(item) for item in items}
    if not selected:
        raise InvalidInput("At least one output field must be requested")
    return tuple(f for f in ALL_FIELDS if f in selected)


def _check_method(method: str) -> str:
    if method not in METHODS:
        raise InvalidInput(
            f"Unknown interpolation method {method!r}. Available: {list(METHODS)}"
        )
    return method


def _warn_out_of_range(alt_km: float, stacklevel: int = 3) -> None:
    warnings.warn(
        f"Altitude {alt_km:g} km out of supported range "
        f"({table.MIN_ALTITUDE_KM:g} to {table.MAX_ALTITUDE_KM:g} km); "
        f"clamping to nearest valid value",
        OutOfRangeWarning,
        stacklevel=stacklevel,
    )


# ══════════════════════════════════════════════════════════════════════════
#  Public operations
# ══════════════════════════════════════════════════════════════════════════

def evaluate(altitude: float, unit_system='metric', fields=None,
             method: str = DEFAULT_METHOD) -> Dict[str, float]:
    """
    Standard-atmosphere properties at one altitude.

    Parameters
    ----------
    altitude : float
        Geometric altitude, in m (metric) or ft (imperial)
    unit_system : str or UnitSystem
        'metric' / 'm' / 'si' or 'imperial' / 'ft' / 'english'
    fields : str, Field, iterable or None
        Quantities to return; None or 'all' returns all four
    method : str
        'pchip' (default) or 'linear'

    Returns
    -------
    dict
        Field name → value, in canonical field order. Metric units are
        °C, Pa, kg/m³, m/s; imperial units are °F, lbf/ft², slug/ft³, ft/s.

    Raises
    ------
    InvalidInput
        Unknown unit system, field or method; empty selection; non-finite
        altitude.
    """
    system = UnitSystem.parse(unit_system)
    selected = parse_fields(fields)
    _check_method(method)

    try:
        altitude = float(altitude)
    except (TypeError, ValueError):
        raise InvalidInput(f"Altitude must be a real number, got {altitude!r}") from None
    if not math.isfinite(altitude):
        raise InvalidInput(f"Altitude must be finite, got {altitude!r}")

    alt_m = feet_to_meters(altitude) if system is UnitSystem.IMPERIAL else altitude
    alt_km = alt_m / 1000.0

    if alt_km < table.MIN_ALTITUDE_KM:
        _warn_out_of_range(alt_km)
        sample = table.REFERENCE_TABLE[0]
    elif alt_km > table.MAX_ALTITUDE_KM:
        _warn_out_of_range(alt_km)
        sample = table.REFERENCE_TABLE[-1]
    else:
        sample = table.sample_at(alt_km)

    result = {}
    for field in selected:
        if sample is not None:
            si_value = sample[_SAMPLE_INDEX[field]]
        else:
            si_value = float(_interpolate(field, alt_km, method))
        result[field.value] = float(_to_output_units(field, si_value, system))
    return result


def atmosphere_profile(altitudes, unit_system='metric', fields=None,
                       method: str = DEFAULT_METHOD) -> dict:
    """
    Vectorised evaluate() over an array of altitudes.

    Returns a dict with key 'altitude' (the input, unchanged) and one
    array per requested field. Elements outside the table are clamped to
    the boundary samples; a single OutOfRangeWarning covers the call.
    """
    system = UnitSystem.parse(unit_system)
    selected = parse_fields(fields)
    _check_method(method)

    alt = np.asarray(altitudes, dtype=float)
    if not np.all(np.isfinite(alt)):
        raise InvalidInput("Altitudes must all be finite")

    alt_m = feet_to_meters(alt) if system is UnitSystem.IMPERIAL else alt
    alt_km = alt_m / 1000.0

    below = alt_km < table.MIN_ALTITUDE_KM
    above = alt_km > table.MAX_ALTITUDE_KM
    if np.any(below | above):
        worst = alt_km[below | above]
        _warn_out_of_range(float(worst[np.argmax(np.abs(worst))]))

    clamped = np.clip(alt_km, table.MIN_ALTITUDE_KM, table.MAX_ALTITUDE_KM)

    profile = {'altitude': alt}
    for field in selected:
        si = np.array(_interpolate(field, clamped, method), dtype=float)
        si[below] = table.REFERENCE_TABLE[0][_SAMPLE_INDEX[field]]
        si[above] = table.REFERENCE_TABLE[-1][_SAMPLE_INDEX[field]]
        profile[field.value] = _to_output_units(field, si, system)
    return profile


if __name__ == "__main__":
    print("USSA-1976 Table Evaluation (pchip)")
    print("=" * 60)
    print(f"{'Alt (m)':>10} {'T (°C)':>9} {'P (Pa)':>12} {'ρ (kg/m³)':>12} {'a (m/s)':>9}")
    print("-" * 60)
    for h in [0, 1000, 5000, 10000, 11000, 15000, 20000, 50000, 86000]:
        r = evaluate(h)
        print(f"{h:>10.0f} {r['temperature']:>9.2f} {r['pressure']:>12.1f} "
              f"{r['density']:>12.5f} {r['speed_of_sound']:>9.2f}")
