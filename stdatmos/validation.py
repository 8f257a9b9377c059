"""
Validation Against Published Data
===================================
Compares table interpolation against the closed-form U.S. Standard
Atmosphere 1976 at altitudes that fall between grid points.

Reference values are geometric-altitude results of the USSA-1976 layer
equations (NOAA-S/T 76-1562), SI units. Temperature errors are taken in
kelvin so that they are not distorted near 0 °C.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List

from .evaluator import evaluate, METHODS, DEFAULT_METHOD
from .units import KELVIN_OFFSET


# (altitude_m, T_K, P_Pa, rho_kg_m3, a_m_s)
REFERENCE_POINTS = [
    (1524.0,   278.246, 84310.0,  1.05556,   334.40),
    (3048.0,   268.347, 69697.0,  0.90480,   328.40),
    (6096.0,   248.564, 46601.0,  0.65314,   316.06),
    (9144.0,   228.799, 30148.0,  0.45903,   303.23),
    (12192.0,  216.650, 18823.0,  0.30267,   295.07),
    (25000.0,  221.552, 2549.2,   0.040084,  298.39),
    (45000.0,  264.161, 149.12,   0.0019665, 325.82),
]

PASS_THRESHOLD_PCT = 1.0


@dataclass
class ValidationResult:
    """Result of one validation comparison."""
    altitude_m: float
    ref_temperature: float      # K
    sim_temperature: float      # K
    temperature_error_pct: float
    ref_pressure: float         # Pa
    sim_pressure: float
    pressure_error_pct: float
    ref_density: float          # kg/m³
    sim_density: float
    density_error_pct: float
    ref_speed_of_sound: float   # m/s
    sim_speed_of_sound: float
    speed_of_sound_error_pct: float

    @property
    def max_error_pct(self) -> float:
        return max(abs(self.temperature_error_pct), abs(self.pressure_error_pct),
                   abs(self.density_error_pct), abs(self.speed_of_sound_error_pct))


def _pct(sim: float, ref: float) -> float:
    return 100.0 * (sim - ref) / ref


def validate_against_reference(method: str = DEFAULT_METHOD,
                               verbose: bool = True) -> List[ValidationResult]:
    """
    Evaluate every reference point with the given interpolation method
    and compare against the published values.
    """
    results = []

    if verbose:
        print(f"\n{'='*75}")
        print(f"  VALIDATION: USSA-1976 off-grid points ({method})")
        print(f"{'='*75}")
        print(f"{'Alt (m)':>8} {'Ref T':>8} {'Sim T':>8} {'Err %':>7} "
              f"{'Ref P':>9} {'Sim P':>9} {'Err %':>7} "
              f"{'ρ Err %':>8} {'a Err %':>8}")
        print("-" * 75)

    for alt_m, ref_t, ref_p, ref_rho, ref_a in REFERENCE_POINTS:
        sim = evaluate(alt_m, 'metric', method=method)
        sim_t = sim['temperature'] + KELVIN_OFFSET

        vr = ValidationResult(
            altitude_m=alt_m,
            ref_temperature=ref_t,
            sim_temperature=sim_t,
            temperature_error_pct=_pct(sim_t, ref_t),
            ref_pressure=ref_p,
            sim_pressure=sim['pressure'],
            pressure_error_pct=_pct(sim['pressure'], ref_p),
            ref_density=ref_rho,
            sim_density=sim['density'],
            density_error_pct=_pct(sim['density'], ref_rho),
            ref_speed_of_sound=ref_a,
            sim_speed_of_sound=sim['speed_of_sound'],
            speed_of_sound_error_pct=_pct(sim['speed_of_sound'], ref_a),
        )
        results.append(vr)

        if verbose:
            print(f"{alt_m:>8.0f} {ref_t:>8.2f} {sim_t:>8.2f} "
                  f"{vr.temperature_error_pct:>+7.2f} "
                  f"{ref_p:>9.1f} {vr.sim_pressure:>9.1f} {vr.pressure_error_pct:>+7.2f} "
                  f"{vr.density_error_pct:>+8.2f} {vr.speed_of_sound_error_pct:>+8.2f}")

    if verbose:
        worst = max(r.max_error_pct for r in results)
        mean_p = np.mean([abs(r.pressure_error_pct) for r in results])
        mean_rho = np.mean([abs(r.density_error_pct) for r in results])
        print("-" * 75)
        print(f"  Worst error: {worst:.2f}% | Mean |error| — "
              f"Pressure: {mean_p:.2f}% | Density: {mean_rho:.2f}%")
        status = "✓ PASS" if worst < PASS_THRESHOLD_PCT else "✗ CHECK TABLE"
        print(f"  Status: {status}")
        print(f"{'='*75}\n")

    return results


def run_all_validations(verbose: bool = True) -> Dict[str, List[ValidationResult]]:
    """Validate every interpolation method."""
    return {method: validate_against_reference(method, verbose=verbose)
            for method in METHODS}


if __name__ == "__main__":
    run_all_validations(verbose=True)
