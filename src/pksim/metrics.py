# src/pksim/metrics.py
import math
from typing import Sequence, Tuple

import numpy as np

from .config import DEFAULT_STEADY_STATE, PEAK_MARGIN, SteadyStatePolicy
from .models.one_compartment import single_dose
from .simulate import samples_to_arrays
from .types import Metrics, Sample, SimulationParameters


def half_life(ke_per_h: float) -> float:
    """Elimination half-life (h) = ln 2 / ke."""
    return math.log(2.0) / ke_per_h


def peak(params: SimulationParameters) -> Tuple[float | None, float | None]:
    """
    Analytic single-dose peak (Tmax in h, Cmax in mg/L) for the oral route.
      t_peak = ln(ka/ke) / (ka - ke),  C_peak = single(t_peak)
    Returns (None, None) for IV, or when ka does not exceed ke by PEAK_MARGIN.
    """
    ka, ke = params.ka_per_h, params.ke_per_h
    if params.route != "oral" or ka <= ke + PEAK_MARGIN:
        return None, None
    t_peak = math.log(ka / ke) / (ka - ke)
    return t_peak, single_dose(params, t_peak)


def auc_trapz(t: np.ndarray, C: np.ndarray) -> float:
    """Area Under the Curve (AUC) via trapezoidal rule (mg*h/L)."""
    if len(t) < 2:
        return 0.0
    return float(np.trapezoid(C, t))


def percent_in_range(samples: Sequence[Sample]) -> float:
    """Share of samples tagged therapeutic, as a percentage (0 for no samples)."""
    if not samples:
        return 0.0
    hits = sum(1 for s in samples if s.status == "therapeutic")
    return 100.0 * hits / len(samples)


def steady_state_window_mask(t: np.ndarray, params: SimulationParameters,
                             policy: SteadyStatePolicy = DEFAULT_STEADY_STATE) -> np.ndarray | None:
    """
    Boolean mask selecting the trailing steady-state window, or None when
    steady state is not reported:
      - a single dose never reaches steady state
      - the horizon must cover at least policy.min_half_lives half-lives
    Window length is policy.window_h(t_half, interval), counted back from the last sample.
    """
    if params.n_doses <= 1 or len(t) == 0:
        return None
    t_half = params.half_life_h
    if params.horizon_h < policy.min_half_lives * t_half:
        return None
    start = t[-1] - policy.window_h(t_half, params.interval_h)
    mask = t >= start
    if not np.any(mask):
        return None
    return mask


def steady_state(t: np.ndarray, C: np.ndarray, params: SimulationParameters,
                 policy: SteadyStatePolicy = DEFAULT_STEADY_STATE):
    """Return (Css_avg, Css_min, Css_max) over the steady-state window, or (None, None, None)."""
    mask = steady_state_window_mask(t, params, policy)
    if mask is None:
        return None, None, None
    Cw = C[mask]
    return float(np.mean(Cw)), float(np.min(Cw)), float(np.max(Cw))


def compute_metrics(samples: Sequence[Sample], params: SimulationParameters,
                    policy: SteadyStatePolicy = DEFAULT_STEADY_STATE) -> Metrics:
    """Reduce a simulated Sample sequence to its Metrics record."""
    t, C = samples_to_arrays(list(samples))
    t_peak, c_peak = peak(params)
    css_avg, css_min, css_max = steady_state(t, C, params, policy)
    return Metrics(
        half_life_h=half_life(params.ke_per_h),
        t_peak_h=t_peak,
        c_peak=c_peak,
        auc=auc_trapz(t, C),
        percent_in_range=percent_in_range(samples),
        css_avg=css_avg,
        css_min=css_min,
        css_max=css_max,
    )
