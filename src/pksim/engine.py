# src/pksim/engine.py
from .config import DEFAULT_STEADY_STATE, DT_H, SteadyStatePolicy
from .metrics import compute_metrics
from .simulate import simulate
from .types import Metrics, Sample, SimulationParameters


def run_simulation(params: SimulationParameters, dt_h: float = DT_H,
                   policy: SteadyStatePolicy = DEFAULT_STEADY_STATE) -> tuple[list[Sample], Metrics]:
    """
    High-level wrapper: sample the curve, then reduce it to metrics.
    Re-run in full on every parameter change; nothing is cached.
    """
    samples = simulate(params, dt_h)
    return samples, compute_metrics(samples, params, policy)
