# src/pksim/config.py
import logging
import os
from dataclasses import dataclass

# All time in HOURS, concentrations in mg/L.
DT_H = 0.25                 # sampling step
EPSILON = 1e-6              # floor for rates, volume and interval
LIMIT_TOLERANCE = 1e-6      # |ka - ke| below this uses the ka == ke limit form
PEAK_MARGIN = 1e-6          # ka must exceed ke by this much to report a peak
MIN_HORIZON_H = 24.0
HORIZON_PADDING_H = 24.0
MAX_SAMPLES = 200_000       # beyond this the sampling step is widened

# Ceilings applied during normalization; keep every product in the model finite
MAX_DOSE_MG = 1e9
MAX_VOLUME_L = 1e9
MAX_RATE_PER_H = 1e4
MAX_INTERVAL_H = 1e6
MAX_DOSES = 1000
MAX_DURATION_H = 1e7

DEFAULTS = {
    "route": "iv",
    "dose_mg": 500.0,
    "volume_L": 50.0,
    "ke_per_h": 0.1,
    "ka_per_h": 1.0,
    "bioavailability": 1.0,
    "interval_h": 8.0,
    "n_doses": 3,
    "therapeutic_min": 5.0,
    "therapeutic_max": 15.0,
    "duration_h": None,
}

EXPORT_FILENAME = "pk-simulation.png"
EXPORT_SCALE = 2.0

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_LEVEL = os.getenv("PKSIM_LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class SteadyStatePolicy:
    """
    Rule for when and over which trailing window steady-state values are reported.

    min_half_lives     : horizon must cover at least this many half-lives
    window_half_lives  : window length cap, in half-lives
    window_intervals   : window length cap, in dosing intervals
    The window is min(window_half_lives * t_half, window_intervals * interval).
    """
    min_half_lives: float = 5.0
    window_half_lives: float = 5.0
    window_intervals: float = 4.0

    def window_h(self, half_life_h: float, interval_h: float) -> float:
        return min(self.window_half_lives * half_life_h, self.window_intervals * interval_h)


DEFAULT_STEADY_STATE = SteadyStatePolicy()


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging once; called from the application entry point only."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
