"""
Unit Tests for the Tabulated Standard Atmosphere
================================================
Tests the reference table, unit conversions and the evaluator.
Run: python -m pytest tests/ -v
"""

import sys
import os
import warnings
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from stdatmos import (
    evaluate, atmosphere_profile, parse_fields, Field, UnitSystem,
    InvalidInput, OutOfRangeWarning, samples, column, sample_at,
    MIN_ALTITUDE_KM, MAX_ALTITUDE_KM,
)
from stdatmos.table import TableSample, merge_grids, _check_samples, COARSE_GRID, FINE_GRID
from stdatmos.units import (
    pascal_to_psf, density_to_slug_ft3, mps_to_fps, celsius_to_fahrenheit,
    metric_to_imperial,
)
from stdatmos.validation import validate_against_reference, run_all_validations


GRID_ALTITUDES_M = [s.altitude_km * 1000.0 for s in samples()]


class TestReferenceTable:
    """Merged grid structure and immutability."""

    def test_merged_size(self):
        # 45 coarse + 42 fine - 11 shared altitudes
        assert len(samples()) == 76

    def test_bounds(self):
        assert MIN_ALTITUDE_KM == -2.0
        assert MAX_ALTITUDE_KM == 86.0

    def test_strictly_increasing(self):
        alt = column('altitude')
        assert np.all(np.diff(alt) > 0)

    def test_fine_grid_below_20km(self):
        alt = column('altitude')
        lower = alt[(alt >= -0.5) & (alt <= 20.0)]
        assert np.allclose(np.diff(lower), 0.5)

    def test_coarse_grid_above_20km(self):
        alt = column('altitude')
        upper = alt[alt >= 20.0]
        assert np.allclose(np.diff(upper), 2.0)

    def test_columns_aligned(self):
        table = samples()
        for name, idx in [('temperature', 1), ('pressure', 2),
                          ('density', 3), ('speed_of_sound', 4)]:
            assert list(column(name)) == [s[idx] for s in table]

    def test_columns_read_only(self):
        with pytest.raises(ValueError):
            column('pressure')[0] = 0.0

    def test_unknown_column(self):
        with pytest.raises(ValueError):
            column('humidity')

    def test_sample_at(self):
        s = sample_at(11.0)
        assert s.temperature_K == 216.8
        assert sample_at(11.25) is None

    def test_merge_prefers_fine_grid(self):
        coarse = [(0.0, 1.0, 1.0, 1.0, 1.0), (2.0, 1.0, 1.0, 1.0, 1.0)]
        fine = [(0.0, 2.0, 2.0, 2.0, 2.0), (0.5, 2.0, 2.0, 2.0, 2.0)]
        merged = merge_grids(coarse, fine)
        assert [s.altitude_km for s in merged] == [0.0, 0.5, 2.0]
        assert merged[0].temperature_K == 2.0

    def test_shared_altitudes_agree(self):
        fine = {row[0]: row for row in FINE_GRID}
        for row in COARSE_GRID:
            if row[0] in fine:
                assert row == fine[row[0]]

    def test_malformed_table_rejected(self):
        bad = (TableSample(1.0, 280.0, 9e4, 1.1, 335.0),
               TableSample(1.0, 279.0, 8e4, 1.0, 334.0))
        with pytest.raises(ValueError):
            _check_samples(bad)

    def test_non_positive_value_rejected(self):
        bad = (TableSample(0.0, 288.0, 101325.0, 1.225, 340.3),
               TableSample(1.0, 281.0, 0.0, 1.1, 336.0))
        with pytest.raises(ValueError):
            _check_samples(bad)


class TestUnits:
    """Unit-system parsing and conversion factors."""

    @pytest.mark.parametrize('alias', ['metric', 'M', 'si', ' Metric '])
    def test_metric_aliases(self, alias):
        assert UnitSystem.parse(alias) is UnitSystem.METRIC

    @pytest.mark.parametrize('alias', ['imperial', 'ft', 'English'])
    def test_imperial_aliases(self, alias):
        assert UnitSystem.parse(alias) is UnitSystem.IMPERIAL

    def test_unknown_unit_system(self):
        with pytest.raises(InvalidInput):
            UnitSystem.parse('furlongs')

    def test_one_psf(self):
        assert pascal_to_psf(47.880258980) == pytest.approx(1.0)

    def test_one_slug_per_ft3(self):
        assert density_to_slug_ft3(1.225) == pytest.approx(0.0023769, rel=1e-4)

    def test_speed_conversion(self):
        assert mps_to_fps(0.3048) == pytest.approx(1.0)

    def test_fahrenheit(self):
        assert celsius_to_fahrenheit(100.0) == pytest.approx(212.0)
        assert celsius_to_fahrenheit(-40.0) == pytest.approx(-40.0)

    def test_metric_to_imperial_arrays(self):
        out = metric_to_imperial('temperature', np.array([0.0, 100.0]))
        assert np.allclose(out, [32.0, 212.0])


class TestEvaluate:
    """Standard values and unit consistency."""

    def test_sea_level(self):
        r = evaluate(0, 'metric')
        assert r['temperature'] == pytest.approx(15.0, abs=0.1)
        assert r['pressure'] == pytest.approx(101325.0)
        assert r['density'] == pytest.approx(1.225)
        assert r['speed_of_sound'] == pytest.approx(340.3, abs=0.1)

    def test_tropopause_temperature(self):
        r = evaluate(11000, 'metric')
        assert r['temperature'] == pytest.approx(-56.5, abs=0.2)

    def test_default_arguments(self):
        assert evaluate(2500) == evaluate(2500, 'metric', None, method='pchip')

    def test_returns_all_fields_in_order(self):
        assert list(evaluate(1000)) == ['temperature', 'pressure', 'density',
                                        'speed_of_sound']

    def test_values_are_floats(self):
        for value in evaluate(1234.5).values():
            assert type(value) is float

    @pytest.mark.parametrize('method', ['pchip', 'linear'])
    def test_grid_points_exact(self, method):
        for alt_m, s in zip(GRID_ALTITUDES_M, samples()):
            r = evaluate(alt_m, 'metric', method=method)
            assert r['temperature'] == s.temperature_K - 273.15
            assert r['pressure'] == s.pressure_Pa
            assert r['density'] == s.density_kg_m3
            assert r['speed_of_sound'] == s.speed_of_sound_m_s

    def test_imperial_temperature_round_trip(self):
        for h_ft in [-5000.0, 0.0, 1234.0, 36089.0, 150000.0, 250000.0]:
            t_f = evaluate(h_ft, 'imperial', ['temperature'])['temperature']
            t_c = evaluate(h_ft * 0.3048, 'metric', ['temperature'])['temperature']
            assert t_f == pytest.approx(t_c * 1.8 + 32.0)

    def test_5000_ft_matches_metric(self):
        imp = evaluate(5000, 'ft', ['rho', 'a'])
        met = evaluate(5000 * 0.3048, 'metric', ['rho', 'a'])
        assert list(imp) == ['density', 'speed_of_sound']
        assert imp['density'] == pytest.approx(met['density'] / 515.378818)
        assert imp['speed_of_sound'] == pytest.approx(met['speed_of_sound'] / 0.3048)

    def test_imperial_pressure_sea_level(self):
        p = evaluate(0, 'imperial', ['pressure'])['pressure']
        assert p == pytest.approx(2116.2, abs=0.1)

    def test_methods_differ_off_grid(self):
        pchip = evaluate(25000, fields='P', method='pchip')['pressure']
        linear = evaluate(25000, fields='P', method='linear')['pressure']
        assert pchip < linear  # linear overshoots a convex profile
        assert pchip == pytest.approx(2549.2, rel=1e-3)

    def test_no_warning_inside_range(self):
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            evaluate(-2000)
            evaluate(86000)
            evaluate(42000, 'metric')


class TestMonotonicity:
    """pchip must not overshoot the local table trend."""

    def test_values_bounded_by_neighbouring_samples(self):
        alt = column('altitude')
        dense_km = np.linspace(MIN_ALTITUDE_KM, MAX_ALTITUDE_KM, 8801)
        profile = atmosphere_profile(dense_km * 1000.0)
        idx = np.clip(np.searchsorted(alt, dense_km, side='right') - 1, 0, len(alt) - 2)
        for field in Field:
            si = column(field.value)
            lo = np.minimum(si[idx], si[idx + 1])
            hi = np.maximum(si[idx], si[idx + 1])
            values = profile[field.value]
            if field is Field.TEMPERATURE:
                values = values + 273.15
            tol = 1e-9 * np.abs(hi)
            assert np.all(values >= lo - tol), field
            assert np.all(values <= hi + tol), field

    def test_temperature_falls_through_troposphere(self):
        t = atmosphere_profile(np.linspace(0, 11000, 500), fields='T')['temperature']
        assert np.all(np.diff(t) <= 0)

    def test_isothermal_layer_is_flat(self):
        t = atmosphere_profile(np.linspace(11500, 20000, 300), fields='T')['temperature']
        assert np.allclose(t, 216.6 - 273.15)

    def test_temperature_rises_in_stratosphere(self):
        t = atmosphere_profile(np.linspace(20000, 48000, 500), fields='T')['temperature']
        assert np.all(np.diff(t) >= 0)

    def test_pressure_and_density_decrease(self):
        p = atmosphere_profile(np.linspace(-2000, 86000, 2000), fields=['P', 'rho'])
        assert np.all(np.diff(p['pressure']) <= 0)
        assert np.all(np.diff(p['density']) <= 0)


class TestClamping:
    """Out-of-range altitudes return the boundary samples."""

    def test_below_range(self):
        with pytest.warns(OutOfRangeWarning):
            low = evaluate(-10000)
        assert low == evaluate(-2000)

    def test_above_range(self):
        with pytest.warns(OutOfRangeWarning):
            high = evaluate(100000)
        assert high == evaluate(86000)

    def test_above_range_imperial(self):
        with pytest.warns(OutOfRangeWarning, match='clamping'):
            high = evaluate(400000, 'ft')
        assert high['temperature'] == pytest.approx((186.9 - 273.15) * 1.8 + 32)

    def test_linear_clamps_too(self):
        with pytest.warns(OutOfRangeWarning):
            assert evaluate(1e6, method='linear') == evaluate(86000)

    def test_warning_can_be_escalated(self):
        with warnings.catch_warnings():
            warnings.simplefilter('error', OutOfRangeWarning)
            with pytest.raises(OutOfRangeWarning):
                evaluate(-3000)


class TestFieldSelection:
    """Output subsets and argument errors."""

    def test_single_field(self):
        assert list(evaluate(1000, 'metric', ['density'])) == ['density']

    def test_short_aliases(self):
        assert parse_fields('T,rho') == (Field.TEMPERATURE, Field.DENSITY)
        assert parse_fields(['a', 'P']) == (Field.PRESSURE, Field.SPEED_OF_SOUND)

    def test_all_keyword(self):
        assert parse_fields('all') == tuple(Field)
        assert parse_fields(None) == tuple(Field)

    def test_duplicates_collapse(self):
        assert parse_fields(['rho', 'density', Field.DENSITY]) == (Field.DENSITY,)

    def test_empty_selection(self):
        with pytest.raises(InvalidInput):
            evaluate(1000, 'metric', [])

    def test_unknown_field(self):
        with pytest.raises(InvalidInput):
            evaluate(1000, 'metric', ['density', 'humidity'])

    def test_unknown_unit_system(self):
        with pytest.raises(InvalidInput):
            evaluate(1000, 'kelvin')

    def test_unknown_method(self):
        with pytest.raises(InvalidInput):
            evaluate(1000, method='cubic')

    @pytest.mark.parametrize('altitude', [float('nan'), float('inf'), 'high'])
    def test_bad_altitude(self, altitude):
        with pytest.raises(InvalidInput):
            evaluate(altitude)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            evaluate(0, 'cubits')


class TestProfile:
    """Vectorised evaluation."""

    def test_matches_scalar_evaluate(self):
        alts = np.array([-1500.0, 0.0, 777.0, 11000.0, 33333.0, 80500.0])
        profile = atmosphere_profile(alts)
        for i, h in enumerate(alts):
            r = evaluate(h)
            for name, value in r.items():
                assert profile[name][i] == pytest.approx(value, rel=1e-12)

    def test_imperial_profile(self):
        alts = np.array([0.0, 5000.0, 30000.0])
        profile = atmosphere_profile(alts, 'ft', fields='a')
        assert set(profile) == {'altitude', 'speed_of_sound'}
        for i, h in enumerate(alts):
            assert profile['speed_of_sound'][i] == pytest.approx(
                evaluate(h, 'ft', 'a')['speed_of_sound'])

    def test_single_warning_for_many_out_of_range(self):
        with pytest.warns(OutOfRangeWarning) as record:
            profile = atmosphere_profile([-9000.0, -5000.0, 0.0, 95000.0, 120000.0])
        assert len([w for w in record if issubclass(w.category, OutOfRangeWarning)]) == 1
        assert profile['pressure'][0] == samples()[0].pressure_Pa
        assert profile['pressure'][-1] == samples()[-1].pressure_Pa

    def test_non_finite_rejected(self):
        with pytest.raises(InvalidInput):
            atmosphere_profile([0.0, float('nan')])


class TestValidation:
    """Interpolation against closed-form USSA-1976 values."""

    def test_pchip_accuracy(self):
        results = validate_against_reference('pchip', verbose=False)
        assert max(r.max_error_pct for r in results) < 0.5

    def test_linear_accuracy(self):
        results = validate_against_reference('linear', verbose=False)
        assert max(r.max_error_pct for r in results) < 2.0

    def test_pchip_beats_linear_on_pressure(self):
        all_results = run_all_validations(verbose=False)
        pchip = np.mean([abs(r.pressure_error_pct) for r in all_results['pchip']])
        linear = np.mean([abs(r.pressure_error_pct) for r in all_results['linear']])
        assert pchip < linear

    def test_verbose_report(self, capsys):
        validate_against_reference('pchip', verbose=True)
        out = capsys.readouterr().out
        assert 'VALIDATION' in out
        assert 'PASS' in out


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
