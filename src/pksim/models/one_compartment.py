# src/pksim/models/one_compartment.py
import numpy as np

from ..config import LIMIT_TOLERANCE
from ..types import SimulationParameters


def _finish(t, c):
    # Scalars in -> float out, arrays in -> arrays out
    if np.ndim(t) == 0:
        return float(c)
    return c


def iv_bolus(t, dose_mg, V, ke):
    """
    Single IV bolus given at t=0:
      C(t) = (dose / V) * exp(-ke * t)   for t >= 0, 0 before administration.

    t may be a float or a numpy array of times (h).
    """
    t_arr = np.asarray(t, dtype=float)
    tt = np.maximum(t_arr, 0.0)
    c = (dose_mg / V) * np.exp(-ke * tt)
    c = np.where(t_arr >= 0.0, c, 0.0)
    return _finish(t, c)


def oral(t, dose_mg, V, ke, ka, F=1.0):
    """
    Single oral dose at t=0 with first-order absorption (ka) and elimination (ke):
      C(t) = F*D*ka / (V*(ka - ke)) * (exp(-ke t) - exp(-ka t))

    When |ka - ke| < LIMIT_TOLERANCE the limit ka -> ke is used instead:
      C(t) = (F*D*ka / V) * t * exp(-ka t)
    """
    t_arr = np.asarray(t, dtype=float)
    tt = np.maximum(t_arr, 0.0)
    if abs(ka - ke) < LIMIT_TOLERANCE:
        c = (F * dose_mg * ka / V) * tt * np.exp(-ka * tt)
    else:
        c = (F * dose_mg * ka) / (V * (ka - ke)) * (np.exp(-ke * tt) - np.exp(-ka * tt))
    c = np.where(t_arr >= 0.0, c, 0.0)
    return _finish(t, c)


def single_dose(params: SimulationParameters, t):
    """Concentration (mg/L) from one dose given at t=0, for the route in params."""
    if params.route == "oral":
        return oral(t, params.dose_mg, params.volume_L, params.ke_per_h,
                    params.ka_per_h, params.bioavailability)
    return iv_bolus(t, params.dose_mg, params.volume_L, params.ke_per_h)


def superpose(params: SimulationParameters, t):
    """
    Multiple-dose concentration by explicit linear superposition:
      C(t) = sum over i in [0, n_doses) with i*interval <= t of single(t - i*interval)

    Doses not yet given contribute nothing because single_dose is 0 for negative times.
    Cost grows with the number of doses; concentration() avoids the loop where it can.
    """
    t_arr = np.asarray(t, dtype=float)
    total = np.zeros_like(t_arr)
    t_last = float(np.max(t_arr)) if t_arr.size else 0.0
    for start_h in params.dose_times_h:
        if start_h > t_last:
            break
        total = total + single_dose(params, t_arr - start_h)
    return _finish(t, total)


def _dose_train(k, since_last, m, tau):
    # sum_{j<m} exp(-k * (since_last + j*tau)) as a geometric series
    return np.exp(-k * since_last) * np.expm1(-k * tau * m) / np.expm1(-k * tau)


def concentration(params: SimulationParameters, t):
    """
    Multiple-dose concentration, equal to superpose(params, t).

    With m doses given by time t and s hours since the latest one, each
    exponential term of the single-dose response sums to a geometric series,
    so the whole regimen costs one pass over t whatever n_doses is. The
    ka == ke limit form is not a pure exponential and goes through superpose.
    """
    ka, ke = params.ka_per_h, params.ke_per_h
    if params.route == "oral" and abs(ka - ke) < LIMIT_TOLERANCE:
        return superpose(params, t)

    t_arr = np.asarray(t, dtype=float)
    starts = np.asarray(params.dose_times_h, dtype=float)
    tau = params.interval_h
    m = np.searchsorted(starts, t_arr, side="right")
    since_last = np.where(m > 0, t_arr - starts[np.maximum(m - 1, 0)], 0.0)

    if params.route == "oral":
        scale = (params.bioavailability * params.dose_mg * ka) / (params.volume_L * (ka - ke))
        c = scale * (_dose_train(ke, since_last, m, tau) - _dose_train(ka, since_last, m, tau))
    else:
        c = (params.dose_mg / params.volume_L) * _dose_train(ke, since_last, m, tau)
    c = np.where(m > 0, c, 0.0)
    return _finish(t, c)
