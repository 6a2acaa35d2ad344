# src/pksim/params.py
"""
Turn raw form values into a well-formed SimulationParameters record.

Nothing in here raises on bad values: malformed entries (non-numeric, NaN,
misplaced infinities) fall back to the defaults in pksim.config, and numeric
entries outside their valid range are clamped to it. Upper caps (pksim.config
MAX_*) keep every product in the model finite. Every fallback is logged.
"""
from __future__ import annotations

import logging
import math
from typing import Any

from .config import (DEFAULTS, EPSILON, MAX_DOSE_MG, MAX_DOSES, MAX_DURATION_H, MAX_INTERVAL_H,
                     MAX_RATE_PER_H, MAX_VOLUME_L)
from .types import Route, SimulationParameters

logger = logging.getLogger(__name__)

_ROUTE_ALIASES: dict[str, Route] = {
    "iv": "iv",
    "iv_bolus": "iv",
    "intravenous": "iv",
    "bolus": "iv",
    "oral": "oral",
    "po": "oral",
    "per_os": "oral",
}

_MISSING = object()


def normalize_parameters(
    route: Any = _MISSING,
    dose_mg: Any = _MISSING,
    volume_L: Any = _MISSING,
    ke_per_h: Any = _MISSING,
    ka_per_h: Any = _MISSING,
    bioavailability: Any = _MISSING,
    interval_h: Any = _MISSING,
    n_doses: Any = _MISSING,
    therapeutic_min: Any = _MISSING,
    therapeutic_max: Any = _MISSING,
    duration_h: Any = _MISSING,
) -> SimulationParameters:
    """
    Build a SimulationParameters from loosely typed inputs.

    Omitted arguments take their pksim.config.DEFAULTS value.
    Examples:
      normalize_parameters(route="oral", dose_mg="250", ka_per_h=1.2)
      normalize_parameters(ke_per_h=0)      -> ke floored at EPSILON
      normalize_parameters(dose_mg="abc")   -> default dose, with a warning
    """
    lo = _coerce_non_negative("therapeutic_min", therapeutic_min)
    hi = _coerce_non_negative("therapeutic_max", therapeutic_max, allow_inf=True)
    if lo > hi:
        logger.warning("therapeutic_min %.4g > therapeutic_max %.4g; swapping bounds", lo, hi)
        lo, hi = hi, lo

    return SimulationParameters(
        route=_coerce_route(route),
        dose_mg=_coerce_non_negative("dose_mg", dose_mg, maximum=MAX_DOSE_MG),
        volume_L=_coerce_positive("volume_L", volume_L, maximum=MAX_VOLUME_L),
        ke_per_h=_coerce_positive("ke_per_h", ke_per_h, maximum=MAX_RATE_PER_H),
        ka_per_h=_coerce_positive("ka_per_h", ka_per_h, maximum=MAX_RATE_PER_H),
        bioavailability=_coerce_fraction("bioavailability", bioavailability),
        interval_h=_coerce_positive("interval_h", interval_h, maximum=MAX_INTERVAL_H),
        n_doses=_coerce_count("n_doses", n_doses),
        therapeutic_min=lo,
        therapeutic_max=hi,
        duration_h=_coerce_duration(duration_h),
    )


def ke_from_half_life(half_life_h: Any) -> float:
    """Elimination rate constant (1/h) for a half-life in hours; half-life floored at EPSILON."""
    t_half = _coerce_positive("half_life_h", half_life_h, default=math.log(2.0) / DEFAULTS["ke_per_h"])
    return math.log(2.0) / t_half


def with_overrides(params: SimulationParameters, **changes: Any) -> SimulationParameters:
    """Re-normalize params with some fields replaced (dataclasses.replace would skip clamping)."""
    fields = {
        "route": params.route,
        "dose_mg": params.dose_mg,
        "volume_L": params.volume_L,
        "ke_per_h": params.ke_per_h,
        "ka_per_h": params.ka_per_h,
        "bioavailability": params.bioavailability,
        "interval_h": params.interval_h,
        "n_doses": params.n_doses,
        "therapeutic_min": params.therapeutic_min,
        "therapeutic_max": params.therapeutic_max,
        "duration_h": params.duration_h,
    }
    unknown = set(changes) - set(fields)
    if unknown:
        raise TypeError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
    fields.update(changes)
    return normalize_parameters(**fields)


# --------------------------
# Small input coercers
# --------------------------
def _to_float(name: str, x: Any, default: float, allow_inf: bool = False) -> float:
    if x is _MISSING or x is None or (isinstance(x, str) and not x.strip()):
        return float(default)
    try:
        value = float(x)
    except (TypeError, ValueError):
        logger.warning("%s=%r is not numeric; using default %s", name, x, default)
        return float(default)
    except OverflowError:
        logger.warning("%s is too large to represent; using default %s", name, default)
        return float(default)
    if math.isnan(value) or (math.isinf(value) and not (allow_inf and value > 0)):
        logger.warning("%s=%r is not a finite number; using default %s", name, x, default)
        return float(default)
    return value


def _cap(name: str, value: float, maximum: float | None) -> float:
    if maximum is not None and value > maximum:
        logger.warning("%s=%.4g capped at %g", name, value, maximum)
        return maximum
    return value


def _coerce_positive(name: str, x: Any, default: float | None = None,
                     maximum: float | None = None) -> float:
    value = _to_float(name, x, DEFAULTS[name] if default is None else default)
    if value < EPSILON:
        logger.debug("%s=%.4g floored at %g", name, value, EPSILON)
        return EPSILON
    return _cap(name, value, maximum)


def _coerce_non_negative(name: str, x: Any, allow_inf: bool = False,
                         maximum: float | None = None) -> float:
    value = _to_float(name, x, DEFAULTS[name], allow_inf=allow_inf)
    if value < 0:
        logger.debug("%s=%.4g floored at 0", name, value)
        return 0.0
    return _cap(name, value, maximum)


def _coerce_fraction(name: str, x: Any) -> float:
    value = _to_float(name, x, DEFAULTS[name])
    return min(max(value, 0.0), 1.0)


def _coerce_count(name: str, x: Any) -> int:
    value = _to_float(name, x, DEFAULTS[name])
    return int(_cap(name, max(int(value), 1), MAX_DOSES))


def _coerce_duration(x: Any) -> float | None:
    if x is _MISSING or x is None or (isinstance(x, str) and not x.strip()):
        return None
    try:
        value = float(x)
    except (TypeError, ValueError, OverflowError):
        logger.warning("duration_h is not a usable number; deriving the horizon from the regimen")
        return None
    if not math.isfinite(value) or value <= 0:
        logger.warning("duration_h=%r must be a positive number; deriving the horizon from the regimen", x)
        return None
    return _cap("duration_h", value, MAX_DURATION_H)


def _coerce_route(x: Any) -> Route:
    if x is _MISSING or x is None:
        return DEFAULTS["route"]
    key = str(x).strip().lower().replace(" ", "_")
    route = _ROUTE_ALIASES.get(key)
    if route is None:
        logger.warning("Unknown route %r; using %r", x, DEFAULTS["route"])
        return DEFAULTS["route"]
    return route
