#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  STDATMOS — Command-Line Runner
═══════════════════════════════════════════════════════════════════════════════

  Single query:
    python main.py 11000                        # all properties, metric
    python main.py 5000 --units ft --output rho,a
    python main.py 30000 --method linear

  Full report (table summary, scenario checks, validation, plots):
    python main.py --report                     # outputs/ directory
    python main.py --report --quick             # skip plots

═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import logging
import os
import sys
import time

from stdatmos import (
    evaluate, samples, UnitSystem, UNIT_LABELS, InvalidInput,
    MIN_ALTITUDE_KM, MAX_ALTITUDE_KM, METHODS, DEFAULT_METHOD,
)
from stdatmos.validation import validate_against_reference
from stdatmos.visualization import (
    plot_atmosphere, plot_interpolation_comparison, plot_validation,
    ensure_output_dir,
)

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


logger = logging.getLogger("stdatmos")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging; OutOfRangeWarning is routed through py.warnings."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.captureWarnings(True)


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def format_result(altitude: float, system: UnitSystem, result: dict) -> str:
    labels = UNIT_LABELS[system]
    lines = [f"  Altitude        {altitude:>14g} {labels['altitude']}"]
    for name, value in result.items():
        lines.append(f"  {name.replace('_', ' ').capitalize():<15} "
                     f"{value:>14.6g} {labels[name]}")
    return '\n'.join(lines)


# ══════════════════════════════════════════════════════════════════════════
#  Single query
# ══════════════════════════════════════════════════════════════════════════

def run_query(args: argparse.Namespace) -> int:
    try:
        system = UnitSystem.parse(args.units)
        result = evaluate(args.altitude, system, args.output, method=args.method)
    except InvalidInput as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.debug("Evaluated %s %s with %s", args.altitude, system.value, args.method)
    print(format_result(args.altitude, system, result))
    return 0


# ══════════════════════════════════════════════════════════════════════════
#  Report
# ══════════════════════════════════════════════════════════════════════════

def run_report(out_dir: str, quick: bool = False) -> int:
    start_time = time.time()
    out = ensure_output_dir(out_dir)

    # ── PHASE 1: Reference table ──
    section("PHASE 1: USSA-1976 Reference Table")
    table = samples()
    print(f"  Samples: {len(table)}  |  Range: {MIN_ALTITUDE_KM:g} to {MAX_ALTITUDE_KM:g} km")
    print(f"  {'Alt (km)':>8} {'T (K)':>8} {'P (Pa)':>11} {'ρ (kg/m³)':>12} {'a (m/s)':>8}")
    for s in table[::8]:
        print(f"  {s.altitude_km:>8.1f} {s.temperature_K:>8.1f} {s.pressure_Pa:>11.4g} "
              f"{s.density_kg_m3:>12.4g} {s.speed_of_sound_m_s:>8.1f}")

    # ── PHASE 2: Reference scenarios ──
    section("PHASE 2: Reference Scenarios")
    for altitude, units in [(0, 'metric'), (11000, 'metric'), (5000, 'ft'),
                            (25000, 'metric'), (40000, 'ft')]:
        system = UnitSystem.parse(units)
        print(format_result(altitude, system, evaluate(altitude, system)))
        print()

    # ── PHASE 3: Validation ──
    section("PHASE 3: Validation — USSA-1976 Off-Grid Points")
    val_results = {m: validate_against_reference(m) for m in METHODS}

    if quick:
        section("PHASE 4: Plots SKIPPED (--quick mode)")
    else:
        # ── PHASE 4: Plots ──
        section("PHASE 4: Plots")
        figures = [
            ('01_atmosphere_metric.png',
             lambda p: plot_atmosphere('metric', save_path=p)),
            ('02_atmosphere_imperial.png',
             lambda p: plot_atmosphere('imperial', save_path=p)),
            ('03_tropopause_temperature.png',
             lambda p: plot_interpolation_comparison('temperature', 8.0, 14.0, save_path=p)),
            ('04_stratopause_pressure.png',
             lambda p: plot_interpolation_comparison('pressure', 40.0, 60.0, save_path=p)),
            ('05_validation_pchip.png',
             lambda p: plot_validation(val_results['pchip'], save_path=p)),
            ('06_validation_linear.png',
             lambda p: plot_validation(val_results['linear'], save_path=p)),
        ]
        for filename, make in figures:
            fig = make(f'{out}/{filename}')
            plt.close(fig)
            print(f"  ✓ Saved: {out}/{filename}")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  Outputs in: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.1f} seconds\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="U.S. Standard Atmosphere 1976 table lookup (-2 km to 86 km)",
    )
    parser.add_argument("altitude", type=float, nargs="?",
                        help="Altitude in m (metric) or ft (imperial)")
    parser.add_argument("-u", "--units", default="metric",
                        help="metric|m|si or imperial|ft|english (default: metric)")
    parser.add_argument("-o", "--output", default="all",
                        help="Comma-separated fields: T,P,rho,a or full names (default: all)")
    parser.add_argument("-m", "--method", default=DEFAULT_METHOD, choices=METHODS,
                        help=f"Interpolation method (default: {DEFAULT_METHOD})")
    parser.add_argument("--report", action="store_true",
                        help="Run the full report instead of a single query")
    parser.add_argument("--out", default="outputs",
                        help="Report output directory (default: outputs)")
    parser.add_argument("--quick", action="store_true",
                        help="Skip plot generation in the report")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.report:
        return run_report(args.out, quick=args.quick)
    if args.altitude is None:
        parser.error("altitude is required unless --report is given")
    return run_query(args)


if __name__ == "__main__":
    sys.exit(main())
