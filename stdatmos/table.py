"""
U.S. Standard Atmosphere 1976 Reference Table
=============================================
Tabulated temperature, pressure, density and speed of sound on a fixed
geometric-altitude grid from -2 km to 86 km.

Two grids are carried, as published:
  - Coarse grid: 2 km spacing over the full range (-2 to 86 km)
  - Fine grid:   0.5 km spacing over the lower atmosphere (-0.5 to 20 km)

The working table is the merge of the two. Where both grids hold the same
altitude the fine-grid sample is kept, so the lower 20 km are resolved at
0.5 km and the upper layers at 2 km.

All values are SI: km, K, Pa, kg/m³, m/s.

Reference: U.S. Standard Atmosphere, 1976 (NOAA-S/T 76-1562)
"""

import math
from typing import Iterable, NamedTuple, Optional, Tuple

import numpy as np


class TableSample(NamedTuple):
    """One row of the reference table."""
    altitude_km: float
    temperature_K: float
    pressure_Pa: float
    density_kg_m3: float
    speed_of_sound_m_s: float


# ══════════════════════════════════════════════════════════════════════════
#  Published grids — (alt km, T K, P Pa, ρ kg/m³, a m/s)
# ══════════════════════════════════════════════════════════════════════════

COARSE_GRID = (
    ( -2.0, 301.2,    127800,      1.478, 347.9),
    (  0.0, 288.1,    101325,      1.225, 340.3),
    (  2.0, 275.2,     79501,      1.007, 332.5),
    (  4.0, 262.2,     61660,     0.8190, 324.6),
    (  6.0, 249.2,     47217,     0.6600, 316.5),
    (  8.0, 236.2,     35651,     0.5260, 308.1),
    ( 10.0, 223.3,     26499,     0.4140, 299.5),
    ( 12.0, 216.6,     19399,     0.3120, 295.1),
    ( 14.0, 216.6,     14170,     0.2280, 295.1),
    ( 16.0, 216.6,     10352,     0.1660, 295.1),
    ( 18.0, 216.6,      7565,     0.1220, 295.1),
    ( 20.0, 216.6,      5529,    0.08900, 295.1),
    ( 22.0, 218.6,      4047,    0.06451, 296.4),
    ( 24.0, 220.6,      2972,    0.04694, 297.7),
    ( 26.0, 222.5,      2188,    0.03426, 299.1),
    ( 28.0, 224.5,      1616,    0.02508, 300.4),
    ( 30.0, 226.5,      1197,    0.01841, 301.7),
    ( 32.0, 228.5,       889,    0.01355, 303.0),
    ( 34.0, 233.7,     663.4,   0.009887, 306.5),
    ( 36.0, 239.3,     498.5,   0.007257, 310.1),
    ( 38.0, 244.8,     377.1,   0.005366, 313.7),
    ( 40.0, 250.4,     287.1,   0.003995, 317.2),
    ( 42.0, 255.9,       220,   0.002995, 320.7),
    ( 44.0, 261.4,     169.5,   0.002259, 324.1),
    ( 46.0, 266.9,     131.3,   0.001714, 327.5),
    ( 48.0, 270.6,     102.3,   0.001317, 329.8),
    ( 50.0, 270.6,     79.77,   0.001027, 329.8),
    ( 52.0, 269.0,     62.21,  0.0008055, 328.8),
    ( 54.0, 263.5,     48.33,  0.0006389, 325.4),
    ( 56.0, 258.0,     37.36,  0.0005044, 322.0),
    ( 58.0, 252.5,     28.72,  0.0003962, 318.6),
    ( 60.0, 247.0,     21.96,  0.0003096, 315.1),
    ( 62.0, 241.5,     16.69,  0.0002407, 311.5),
    ( 64.0, 236.0,     12.60,  0.0001860, 308.0),
    ( 66.0, 230.5,     9.459,  0.0001429, 304.4),
    ( 68.0, 225.1,     7.051,  0.0001091, 300.7),
    ( 70.0, 219.6,     5.220,  8.281e-05, 297.1),
    ( 72.0, 214.3,     3.835,  6.236e-05, 293.4),
    ( 74.0, 210.3,     2.800,  4.637e-05, 290.7),
    ( 76.0, 206.4,     2.033,  3.430e-05, 288.0),
    ( 78.0, 202.5,     1.467,  2.523e-05, 285.3),
    ( 80.0, 198.6,     1.052,  1.845e-05, 282.5),
    ( 82.0, 194.7,    0.7498,  1.341e-05, 279.7),
    ( 84.0, 190.8,    0.5308,  9.690e-06, 276.9),
    ( 86.0, 186.9,    0.3732,  6.955e-06, 274.1),
)

FINE_GRID = (
    ( -0.5, 291.4,    107477,      1.285, 342.2),
    (  0.0, 288.1,    101325,      1.225, 340.3),
    (  0.5, 284.9,     95461,      1.167, 338.4),
    (  1.0, 281.7,     89876,      1.112, 336.4),
    (  1.5, 278.4,     84559,      1.058, 334.5),
    (  2.0, 275.2,     79501,      1.007, 332.5),
    (  2.5, 271.9,     74691,     0.9570, 330.6),
    (  3.0, 268.7,     70121,     0.9090, 328.6),
    (  3.5, 265.4,     65780,     0.8630, 326.6),
    (  4.0, 262.2,     61660,     0.8190, 324.6),
    (  4.5, 258.9,     57752,     0.7770, 322.6),
    (  5.0, 255.7,     54048,     0.7360, 320.5),
    (  5.5, 252.4,     50539,     0.6970, 318.5),
    (  6.0, 249.2,     47217,     0.6600, 316.5),
    (  6.5, 245.9,     44075,     0.6240, 314.4),
    (  7.0, 242.7,     41105,     0.5900, 312.3),
    (  7.5, 239.5,     38299,     0.5570, 310.2),
    (  8.0, 236.2,     35651,     0.5260, 308.1),
    (  8.5, 233.0,     33154,     0.4960, 306.0),
    (  9.0, 229.7,     30800,     0.4670, 303.8),
    (  9.5, 226.5,     28584,     0.4400, 301.7),
    ( 10.0, 223.3,     26499,     0.4140, 299.5),
    ( 10.5, 220.0,     24540,     0.3890, 297.4),
    ( 11.0, 216.8,     22699,     0.3650, 295.2),
    ( 11.5, 216.6,     20984,     0.3370, 295.1),
    ( 12.0, 216.6,     19399,     0.3120, 295.1),
    ( 12.5, 216.6,     17933,     0.2880, 295.1),
    ( 13.0, 216.6,     16579,     0.2670, 295.1),
    ( 13.5, 216.6,     15327,     0.2460, 295.1),
    ( 14.0, 216.6,     14170,     0.2280, 295.1),
    ( 14.5, 216.6,     13100,     0.2110, 295.1),
    ( 15.0, 216.6,     12111,     0.1950, 295.1),
    ( 15.5, 216.6,     11197,     0.1800, 295.1),
    ( 16.0, 216.6,     10352,     0.1660, 295.1),
    ( 16.5, 216.6,      9571,     0.1540, 295.1),
    ( 17.0, 216.6,      8849,     0.1420, 295.1),
    ( 17.5, 216.6,      8182,     0.1320, 295.1),
    ( 18.0, 216.6,      7565,     0.1220, 295.1),
    ( 18.5, 216.6,      6994,     0.1120, 295.1),
    ( 19.0, 216.6,      6467,     0.1040, 295.1),
    ( 19.5, 216.6,      5979,    0.09600, 295.1),
    ( 20.0, 216.6,      5529,    0.08900, 295.1),
)


# ══════════════════════════════════════════════════════════════════════════
#  Grid merge and build-time checks
# ══════════════════════════════════════════════════════════════════════════

def merge_grids(coarse: Iterable[tuple], fine: Iterable[tuple]) -> Tuple[TableSample, ...]:
    """
    Merge two grids into one sorted table.

    Every fine-grid row is kept; a coarse-grid row is added only when its
    altitude is not already present.
    """
    merged = {}
    for row in fine:
        sample = TableSample(*(float(v) for v in row))
        merged.setdefault(sample.altitude_km, sample)
    for row in coarse:
        sample = TableSample(*(float(v) for v in row))
        merged.setdefault(sample.altitude_km, sample)
    return tuple(merged[alt] for alt in sorted(merged))


def _check_samples(table: Tuple[TableSample, ...]) -> None:
    """Raise ValueError if the literal data is malformed."""
    if len(table) < 2:
        raise ValueError("Reference table needs at least two samples")
    for sample in table:
        if not all(math.isfinite(v) for v in sample):
            raise ValueError(f"Non-finite value in table row {sample}")
        if min(sample[1:]) <= 0.0:
            raise ValueError(f"Non-positive physical value in table row {sample}")
    for prev, nxt in zip(table, table[1:]):
        if nxt.altitude_km <= prev.altitude_km:
            raise ValueError(
                f"Altitudes not strictly increasing: "
                f"{prev.altitude_km} km then {nxt.altitude_km} km"
            )


REFERENCE_TABLE = merge_grids(COARSE_GRID, FINE_GRID)
_check_samples(REFERENCE_TABLE)

MIN_ALTITUDE_KM = REFERENCE_TABLE[0].altitude_km
MAX_ALTITUDE_KM = REFERENCE_TABLE[-1].altitude_km


# ── Column arrays, aligned by index ───────────────────────────────────────
COLUMNS = ('altitude', 'temperature', 'pressure', 'density', 'speed_of_sound')

_COLUMN_DATA = {}
for _idx, _name in enumerate(COLUMNS):
    _arr = np.array([s[_idx] for s in REFERENCE_TABLE], dtype=float)
    _arr.setflags(write=False)
    _COLUMN_DATA[_name] = _arr
del _idx, _name, _arr

_ALTITUDE_INDEX = {s.altitude_km: i for i, s in enumerate(REFERENCE_TABLE)}


def samples() -> Tuple[TableSample, ...]:
    """Full ordered sequence of table samples."""
    return REFERENCE_TABLE


def column(name: str) -> np.ndarray:
    """
    Read-only array for one table column.

    Parameters
    ----------
    name : str
        One of 'altitude' (km), 'temperature' (K), 'pressure' (Pa),
        'density' (kg/m³), 'speed_of_sound' (m/s)
    """
    if name not in _COLUMN_DATA:
        raise ValueError(
            f"Unknown column '{name}'. Available: {list(COLUMNS)}"
        )
    return _COLUMN_DATA[name]


def sample_at(altitude_km: float) -> Optional[TableSample]:
    """Sample sitting exactly on a grid altitude, or None."""
    idx = _ALTITUDE_INDEX.get(float(altitude_km))
    return None if idx is None else REFERENCE_TABLE[idx]


if __name__ == "__main__":
    print("USSA-1976 Reference Table")
    print("=" * 60)
    print(f"{'Alt (km)':>9} {'T (K)':>8} {'P (Pa)':>11} {'ρ (kg/m³)':>12} {'a (m/s)':>9}")
    print("-" * 60)
    for s in REFERENCE_TABLE:
        print(f"{s.altitude_km:>9.1f} {s.temperature_K:>8.1f} {s.pressure_Pa:>11.4g} "
              f"{s.density_kg_m3:>12.4g} {s.speed_of_sound_m_s:>9.1f}")
