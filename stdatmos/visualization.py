"""
Visualization Engine
====================
Plots for the reference table and its interpolation:
  1. Atmospheric profile (T, P, ρ, a vs altitude, table samples overlaid)
  2. Interpolation comparison (pchip vs linear between grid points)
  3. Validation errors against the closed-form USSA-1976 values
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from typing import List
import os

from . import table
from .evaluator import atmosphere_profile, Field
from .units import UnitSystem, UNIT_LABELS, kelvin_to_celsius, metric_to_imperial


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'font_family': 'monospace',
}

FIELD_COLORS = {
    'temperature': '#ff6b35',
    'pressure': '#00d4ff',
    'density': '#00e676',
    'speed_of_sound': '#ffeb3b',
}

FIELD_TITLES = {
    'temperature': 'Temperature',
    'pressure': 'Pressure',
    'density': 'Density',
    'speed_of_sound': 'Speed of Sound',
}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax):
    ax.legend(fontsize=10, facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'])


def _save(fig, save_path):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


def _in_units(metric: dict, system: UnitSystem) -> dict:
    """Metric profile values re-expressed in the requested unit system."""
    if system is UnitSystem.METRIC:
        return metric
    return {name: metric_to_imperial(name, metric[name])
            for name in metric if name != 'altitude'}


def _table_in_units(system: UnitSystem) -> dict:
    """Grid samples converted to the reported units."""
    metric = {field.value: table.column(field.value) for field in Field}
    metric['temperature'] = kelvin_to_celsius(metric['temperature'])
    return _in_units(metric, system)


# ══════════════════════════════════════════════════════════════════════════
#  1. Atmospheric Profile
# ══════════════════════════════════════════════════════════════════════════

def plot_atmosphere(unit_system='metric', save_path: str = None) -> plt.Figure:
    """USSA-1976 profile over the full table range, grid samples marked."""
    system = UnitSystem.parse(unit_system)
    labels = UNIT_LABELS[system]

    alt_km = np.linspace(table.MIN_ALTITUDE_KM, table.MAX_ALTITUDE_KM, 800)
    profile = _in_units(atmosphere_profile(alt_km * 1000.0), system)
    grid = _table_in_units(system)
    grid_km = table.column('altitude')

    fig, axes = plt.subplots(1, 4, figsize=(18, 7), sharey=True)
    _apply_dark_style(fig, axes)

    for ax, field in zip(axes, Field):
        name = field.value
        color = FIELD_COLORS[name]
        ax.plot(profile[name], alt_km, color=color, linewidth=2,
                label='pchip')
        ax.plot(grid[name], grid_km, 'o', color=color, markersize=3,
                alpha=0.7, label='Table')
        ax.set_xlabel(f'{FIELD_TITLES[name]} ({labels[name]})', fontsize=10)
        if field in (Field.PRESSURE, Field.DENSITY):
            ax.set_xscale('log')

    axes[0].set_ylabel('Altitude (km)', fontsize=12)
    _legend(axes[0])
    fig.suptitle('U.S. Standard Atmosphere 1976 — Tabulated Profile',
                 fontsize=14, fontweight='bold', color=STYLE['text_color'])
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Interpolation Comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_interpolation_comparison(quantity: str = 'temperature',
                                  lo_km: float = 8.0, hi_km: float = 14.0,
                                  save_path: str = None) -> plt.Figure:
    """pchip vs linear between table points, SI units."""
    field = Field.parse(quantity)
    name = field.value

    alt_km = np.linspace(lo_km, hi_km, 400)
    pchip = atmosphere_profile(alt_km * 1000.0, fields=[field], method='pchip')[name]
    linear = atmosphere_profile(alt_km * 1000.0, fields=[field], method='linear')[name]

    grid_km = table.column('altitude')
    in_window = (grid_km >= lo_km) & (grid_km <= hi_km)
    grid_vals = table.column(name)[in_window]
    if field is Field.TEMPERATURE:
        grid_vals = kelvin_to_celsius(grid_vals)

    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    _apply_dark_style(fig, axes)
    unit = UNIT_LABELS[UnitSystem.METRIC][name]

    ax = axes[0]
    ax.plot(alt_km, linear, '--', color='#ff6b35', linewidth=2, label='Linear')
    ax.plot(alt_km, pchip, color='#00d4ff', linewidth=2, label='pchip')
    ax.plot(grid_km[in_window], grid_vals, 'o', color='#ffeb3b',
            markersize=7, label='Table', zorder=5)
    ax.set_xlabel('Altitude (km)')
    ax.set_ylabel(f'{FIELD_TITLES[name]} ({unit})')
    ax.set_title('Interpolated Values', fontweight='bold')
    _legend(ax)

    ax = axes[1]
    ax.plot(alt_km, pchip - linear, color='#e040fb', linewidth=2)
    ax.axhline(y=0, color='#888', linewidth=0.5)
    ax.set_xlabel('Altitude (km)')
    ax.set_ylabel(f'pchip − linear ({unit})')
    ax.set_title('Method Difference', fontweight='bold')

    fig.suptitle(f'{FIELD_TITLES[name]}: pchip vs Linear Interpolation',
                 fontsize=14, fontweight='bold', color=STYLE['text_color'], y=1.02)
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Validation Plot
# ══════════════════════════════════════════════════════════════════════════

def plot_validation(validation_results: List, save_path: str = None) -> plt.Figure:
    """Per-quantity error against the closed-form reference points."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    alts = np.array([v.altitude_m / 1000 for v in validation_results])
    errors = {
        'temperature': [v.temperature_error_pct for v in validation_results],
        'pressure': [v.pressure_error_pct for v in validation_results],
        'density': [v.density_error_pct for v in validation_results],
        'speed_of_sound': [v.speed_of_sound_error_pct for v in validation_results],
    }

    positions = np.arange(len(alts))
    width = 0.2
    for i, (name, errs) in enumerate(errors.items()):
        ax.bar(positions + (i - 1.5) * width, errs, width=width,
               color=FIELD_COLORS[name], alpha=0.85, label=FIELD_TITLES[name])

    ax.axhline(y=0, color='#888', linewidth=0.5)
    ax.axhspan(-1, 1, alpha=0.05, color='#00e676')
    ax.set_xticks(positions)
    ax.set_xticklabels([f'{a:.1f}' for a in alts])
    ax.set_xlabel('Altitude (km)')
    ax.set_ylabel('Error vs USSA-1976 (%)')
    ax.set_title('Interpolation Error at Off-Grid Altitudes', fontweight='bold')
    _legend(ax)

    _save(fig, save_path)
    return fig
