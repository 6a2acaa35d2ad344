import math

import numpy as np
import pytest

from pksim.config import SteadyStatePolicy
from pksim.engine import run_simulation
from pksim.metrics import auc_trapz, compute_metrics, half_life, peak, percent_in_range, steady_state
from pksim.models.one_compartment import single_dose
from pksim.params import normalize_parameters
from pksim.simulate import concentration_profile, simulate


@pytest.mark.parametrize("ke", [0.005, 0.1, 0.693, 4.0])
def test_half_life_round_trip(ke):
    t_half = half_life(ke)
    assert math.isclose(math.log(2.0) / t_half, ke, rel_tol=1e-12)


def test_oral_peak_matches_analytic_formula():
    params = normalize_parameters(route="oral", ka_per_h=0.5, ke_per_h=0.1)
    t_peak, c_peak = peak(params)

    assert t_peak == pytest.approx(math.log(5.0) / 0.4)
    assert t_peak == pytest.approx(4.02, abs=0.01)
    assert c_peak == pytest.approx(single_dose(params, t_peak))
    # it is the maximum of the single-dose curve
    for dt in (-0.05, 0.05):
        assert single_dose(params, t_peak + dt) < c_peak


@pytest.mark.parametrize("ka", [0.05, 0.1, 0.1 + 1e-9])
def test_oral_peak_not_applicable_when_ka_not_above_ke(ka):
    params = normalize_parameters(route="oral", ka_per_h=ka, ke_per_h=0.1)
    assert peak(params) == (None, None)


def test_iv_has_no_peak():
    assert peak(normalize_parameters(route="iv", ka_per_h=2.0, ke_per_h=0.1)) == (None, None)


def test_auc_non_negative_and_grows_with_positive_tail():
    t = np.arange(0.0, 10.25, 0.25)
    C = 10.0 * np.exp(-0.1 * t)
    base = auc_trapz(t, C)
    assert base >= 0.0

    t_more = np.append(t, [10.25, 10.5])
    C_more = np.append(C, [0.3, 0.2])
    assert auc_trapz(t_more, C_more) > base

    assert auc_trapz(np.array([0.0]), np.array([5.0])) == 0.0


def test_auc_matches_analytic_single_iv_dose():
    # AUC(0..inf) = D / (V * ke) = 500 / (50 * 0.1) = 100
    params = normalize_parameters(route="iv", n_doses=1, duration_h=200)
    t, C = concentration_profile(params)
    assert auc_trapz(t, C) == pytest.approx(100.0, rel=1e-3)


def test_percent_in_range_bounds():
    wide = normalize_parameters(route="oral", therapeutic_min=0, therapeutic_max=math.inf)
    assert percent_in_range(simulate(wide)) == 100.0

    unreachable = normalize_parameters(route="oral", therapeutic_min=1e5, therapeutic_max=2e5)
    assert percent_in_range(simulate(unreachable)) == 0.0

    assert percent_in_range([]) == 0.0


def test_percent_in_range_counts_therapeutic_samples():
    samples = simulate(normalize_parameters(therapeutic_min=5, therapeutic_max=15))
    expected = 100.0 * sum(s.in_range for s in samples) / len(samples)
    assert percent_in_range(samples) == pytest.approx(expected)
    assert 0.0 < expected < 100.0


def test_steady_state_absent_for_single_dose():
    params = normalize_parameters(n_doses=1, duration_h=500)
    t, C = concentration_profile(params)
    assert steady_state(t, C, params) == (None, None, None)


def test_steady_state_absent_before_five_half_lives():
    # t_half ~ 69.3 h, horizon 3*8+24 = 48 h
    params = normalize_parameters(ke_per_h=0.01, n_doses=3, interval_h=8)
    t, C = concentration_profile(params)
    assert steady_state(t, C, params) == (None, None, None)


def test_steady_state_over_trailing_window():
    # t_half ~ 6.93 h, horizon 10*8+24 = 104 h, window = min(34.66, 32) = 32 h
    params = normalize_parameters(route="iv", ke_per_h=0.1, n_doses=10, interval_h=8)
    t, C = concentration_profile(params)
    avg, lo, hi = steady_state(t, C, params)

    window = C[t >= 104.0 - 32.0]
    assert lo == pytest.approx(window.min())
    assert hi == pytest.approx(window.max())
    assert avg == pytest.approx(window.mean())
    assert lo <= avg <= hi


def test_steady_state_policy_is_configurable():
    params = normalize_parameters(route="iv", ke_per_h=0.1, n_doses=10, interval_h=8)
    t, C = concentration_profile(params)

    strict = SteadyStatePolicy(min_half_lives=100)
    assert steady_state(t, C, params, strict) == (None, None, None)

    one_interval = SteadyStatePolicy(window_intervals=1)
    _, lo, hi = steady_state(t, C, params, one_interval)
    window = C[t >= 104.0 - 8.0]
    assert (lo, hi) == (pytest.approx(window.min()), pytest.approx(window.max()))


def test_compute_metrics_record():
    params = normalize_parameters(route="oral", ka_per_h=1.0, ke_per_h=0.1, n_doses=10, interval_h=8)
    samples, metrics = run_simulation(params)

    assert metrics == compute_metrics(samples, params)
    assert metrics.half_life_h == pytest.approx(math.log(2.0) / 0.1)
    assert metrics.t_peak_h is not None and metrics.c_peak > 0.0
    assert metrics.auc > 0.0
    assert metrics.has_steady_state
    assert 0.0 <= metrics.percent_in_range <= 100.0


def test_compute_metrics_iv_single_dose_absent_fields():
    params = normalize_parameters(route="iv", n_doses=1)
    _, metrics = run_simulation(params)
    assert metrics.t_peak_h is None and metrics.c_peak is None
    assert not metrics.has_steady_state
    assert metrics.css_min is None and metrics.css_max is None
