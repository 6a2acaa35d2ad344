# src/pksim/solvers.py
import numpy as np
from scipy.integrate import solve_ivp

from .config import DT_H
from .simulate import time_grid
from .types import SimulationParameters


def one_compartment_rhs(t, y, ka, ke):
    """
    One-compartment model with first-order absorption and elimination.
    Two states:
      y[0] = drug in absorption depot (mg)
      y[1] = drug in central compartment (mg)
    IV boluses bypass the depot and are applied as jumps on y[1] by the caller.
    """
    A_gut, A_c = y
    dA_gut_dt = -ka * A_gut
    dA_c_dt = ka * A_gut - ke * A_c
    return [dA_gut_dt, dA_c_dt]


def _apply_dose(y, params: SimulationParameters):
    if params.route == "oral":
        y[0] += params.bioavailability * params.dose_mg
    else:
        y[1] += params.dose_mg
    return y


def simulate_ode(params: SimulationParameters, dt_h: float = DT_H,
                 rtol: float = 1e-8, atol: float = 1e-10):
    """
    Integrate the one-compartment ODE system numerically as a cross-check of the closed forms.

    Doses are instantaneous state jumps at their scheduled times; the system is
    integrated segment by segment between dose times with RK45.

    Returns:
      t : array of time points (hours), identical to simulate.time_grid(params, dt_h)
      C : array of concentrations (mg/L)
    """
    t_grid = time_grid(params, dt_h)
    t_end = float(t_grid[-1])
    ka, ke = params.ka_per_h, params.ke_per_h

    def rhs(t, y):
        return one_compartment_rhs(t, y, ka, ke)

    # Segment boundaries: dose times inside the horizon, plus the end
    dose_times = [d for d in params.dose_times_h if d <= t_end]
    boundaries = sorted(set(dose_times + [t_end]))

    y0 = [0.0, 0.0]
    Ac_out = np.zeros_like(t_grid)
    prev = 0.0
    for curr in boundaries:
        if np.isclose(prev, curr) and prev in dose_times:
            # Dose at the start of the segment (t=0 on the first pass)
            y0 = _apply_dose(y0, params)
            continue
        # Sample points in [prev, curr); curr is sampled by the next segment or the final fill
        in_seg = (t_grid >= prev) & (t_grid < curr)
        sol = solve_ivp(rhs, t_span=(prev, curr), y0=y0, method="RK45",
                        t_eval=np.append(t_grid[in_seg], curr), rtol=rtol, atol=atol)
        Ac_out[in_seg] = sol.y[1][:-1]
        y0 = [float(sol.y[0, -1]), float(sol.y[1, -1])]
        if curr in dose_times:
            y0 = _apply_dose(y0, params)
        prev = curr

    # The final grid point (t_end) is the state after the last segment
    Ac_out[-1] = y0[1]
    C = np.maximum(Ac_out / params.volume_L, 0.0)
    return t_grid, C
