# src/pksim/simulate.py
import logging
import math

import numpy as np

from .config import DT_H, MAX_SAMPLES
from .models.one_compartment import concentration
from .types import Sample, SimulationParameters, TherapeuticStatus

logger = logging.getLogger(__name__)


def horizon_h(params: SimulationParameters) -> float:
    """Simulation end time: duration_h if set, else max(24, n_doses * interval + 24)."""
    return params.horizon_h


def time_grid(params: SimulationParameters, dt_h: float = DT_H) -> np.ndarray:
    """
    Fixed-step sample times 0, dt, 2*dt, ... up to and including the horizon.
    If the horizon is not a multiple of dt the last sample is the last step before it.
    """
    if not (dt_h > 0) or not math.isfinite(dt_h):
        raise ValueError(f"dt_h must be a positive finite number (got {dt_h}).")
    end = horizon_h(params)
    n_steps = int(math.floor(end / dt_h + 1e-9))
    if n_steps + 1 > MAX_SAMPLES:
        widened = end / (MAX_SAMPLES - 1)
        logger.warning("Horizon %.4g h at dt=%.4g h exceeds %d samples; using dt=%.4g h",
                       end, dt_h, MAX_SAMPLES, widened)
        dt_h = widened
        n_steps = MAX_SAMPLES - 1
    return np.arange(n_steps + 1, dtype=float) * dt_h


def classify(c: float, therapeutic_min: float, therapeutic_max: float) -> TherapeuticStatus:
    # NaN and +inf are never in range; they count against the upper bound
    if not math.isfinite(c):
        return "subtherapeutic" if c == -math.inf else "toxic"
    if c < therapeutic_min:
        return "subtherapeutic"
    if c > therapeutic_max:
        return "toxic"
    return "therapeutic"


def concentration_profile(params: SimulationParameters, dt_h: float = DT_H):
    """
    Closed-form concentration-time profile.

    Returns:
      t : array of time points (hours)
      C : array of concentrations (mg/L)
    """
    t = time_grid(params, dt_h)
    C = concentration(params, t)
    return t, C


def simulate(params: SimulationParameters, dt_h: float = DT_H) -> list[Sample]:
    """Sample the curve over the full horizon and tag each point against the therapeutic window."""
    t, C = concentration_profile(params, dt_h)
    lo, hi = params.therapeutic_min, params.therapeutic_max
    samples = []
    for ti, ci in zip(t.tolist(), C.tolist()):
        status = classify(ci, lo, hi)
        samples.append(Sample(time_h=ti, concentration=ci, therapeutic_min=lo,
                              therapeutic_max=hi, in_range=(status == "therapeutic"),
                              status=status))
    logger.debug("Simulated %d samples over %.2f h (%s, %d dose(s))",
                 len(samples), horizon_h(params), params.route, params.n_doses)
    return samples


def samples_to_arrays(samples: list[Sample]):
    """Split a Sample sequence into (t, C) numpy arrays."""
    t = np.fromiter((s.time_h for s in samples), dtype=float, count=len(samples))
    C = np.fromiter((s.concentration for s in samples), dtype=float, count=len(samples))
    return t, C
