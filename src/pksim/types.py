# src/pksim/types.py
import math
from dataclasses import dataclass
from typing import Literal

from .config import HORIZON_PADDING_H, MIN_HORIZON_H

# We keep *all* time in HOURS internally. (Easy math, avoids unit drift.)
Route = Literal["iv", "oral"]
TherapeuticStatus = Literal["subtherapeutic", "therapeutic", "toxic"]


@dataclass(frozen=True)
class SimulationParameters:
    """
    One well-formed set of inputs for a simulation run.
    Build it with pksim.params.normalize_parameters; the fields are assumed clamped.

    route            : "iv" (bolus) or "oral" (first-order absorption)
    dose_mg          : size of every dose, mg
    volume_L         : volume of distribution, L
    ke_per_h         : elimination rate constant, 1/h
    ka_per_h         : absorption rate constant, 1/h (oral only)
    bioavailability  : fraction F of an oral dose reaching circulation, [0, 1]
    interval_h       : dosing interval (tau), h
    n_doses          : number of doses given at 0, tau, 2*tau, ...
    therapeutic_min  : lower bound of the therapeutic window, mg/L
    therapeutic_max  : upper bound of the therapeutic window, mg/L (may be inf)
    duration_h       : explicit simulation horizon; None derives it from the regimen
    """
    route: Route
    dose_mg: float
    volume_L: float
    ke_per_h: float
    ka_per_h: float
    bioavailability: float
    interval_h: float
    n_doses: int
    therapeutic_min: float
    therapeutic_max: float
    duration_h: float | None = None

    @property
    def half_life_h(self) -> float:
        return math.log(2.0) / self.ke_per_h

    @property
    def horizon_h(self) -> float:
        if self.duration_h is not None:
            return self.duration_h
        return max(MIN_HORIZON_H, self.n_doses * self.interval_h + HORIZON_PADDING_H)

    @property
    def dose_times_h(self) -> tuple[float, ...]:
        return tuple(i * self.interval_h for i in range(self.n_doses))


@dataclass(frozen=True)
class Sample:
    """One point of the concentration-time curve."""
    time_h: float
    concentration: float
    therapeutic_min: float
    therapeutic_max: float
    in_range: bool
    status: TherapeuticStatus

    def as_dict(self) -> dict:
        return {
            "time": self.time_h,
            "concentration": self.concentration,
            "therapeuticMin": self.therapeutic_min,
            "therapeuticMax": self.therapeutic_max,
            "inRange": self.in_range,
            "status": self.status,
        }


@dataclass(frozen=True)
class Metrics:
    """
    Summary statistics of one simulated curve.
    None marks a value that is not applicable (peak) or absent (steady state).
    """
    half_life_h: float
    t_peak_h: float | None
    c_peak: float | None
    auc: float
    percent_in_range: float
    css_avg: float | None = None
    css_min: float | None = None
    css_max: float | None = None

    @property
    def has_steady_state(self) -> bool:
        return self.css_avg is not None
