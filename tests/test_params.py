import logging
import math

import pytest

from pksim.config import (DEFAULTS, EPSILON, MAX_DOSE_MG, MAX_DOSES, MAX_DURATION_H, MAX_INTERVAL_H,
                          MAX_RATE_PER_H, MAX_VOLUME_L)
from pksim.params import ke_from_half_life, normalize_parameters, with_overrides


def test_defaults_when_omitted():
    p = normalize_parameters()
    assert p.route == DEFAULTS["route"]
    assert p.dose_mg == DEFAULTS["dose_mg"]
    assert p.n_doses == DEFAULTS["n_doses"]
    assert p.duration_h is None


def test_non_numeric_falls_back_to_default(caplog):
    with caplog.at_level(logging.WARNING, logger="pksim.params"):
        p = normalize_parameters(dose_mg="abc", volume_L=float("nan"))
    assert p.dose_mg == DEFAULTS["dose_mg"]
    assert p.volume_L == DEFAULTS["volume_L"]
    assert "not numeric" in caplog.text


def test_numeric_strings_are_accepted():
    p = normalize_parameters(dose_mg="250", interval_h=" 12 ")
    assert p.dose_mg == 250.0
    assert p.interval_h == 12.0


@pytest.mark.parametrize("value", [0, -3, 1e-12])
def test_rates_and_volume_floored_at_epsilon(value):
    p = normalize_parameters(ke_per_h=value, ka_per_h=value, volume_L=value, interval_h=value)
    assert p.ke_per_h == EPSILON
    assert p.ka_per_h == EPSILON
    assert p.volume_L == EPSILON
    assert p.interval_h == EPSILON


def test_bioavailability_clamped():
    assert normalize_parameters(bioavailability=1.5).bioavailability == 1.0
    assert normalize_parameters(bioavailability=-0.2).bioavailability == 0.0
    assert normalize_parameters(bioavailability=0.7).bioavailability == 0.7


def test_dose_count_coerced_to_positive_int():
    assert normalize_parameters(n_doses=0).n_doses == 1
    assert normalize_parameters(n_doses=-4).n_doses == 1
    assert normalize_parameters(n_doses="3.7").n_doses == 3


def test_negative_dose_floored_at_zero():
    assert normalize_parameters(dose_mg=-100).dose_mg == 0.0


def test_therapeutic_band():
    p = normalize_parameters(therapeutic_min=20, therapeutic_max=10)
    assert (p.therapeutic_min, p.therapeutic_max) == (10.0, 20.0)

    p = normalize_parameters(therapeutic_min=0, therapeutic_max=math.inf)
    assert p.therapeutic_max == math.inf

    # infinity only makes sense as an upper bound
    p = normalize_parameters(therapeutic_min=math.inf)
    assert p.therapeutic_min == DEFAULTS["therapeutic_min"]


def test_infinite_dose_is_rejected():
    assert normalize_parameters(dose_mg=math.inf).dose_mg == DEFAULTS["dose_mg"]


@pytest.mark.parametrize("raw, expected", [
    ("iv", "iv"), ("IV", "iv"), ("iv_bolus", "iv"), ("Intravenous", "iv"),
    ("oral", "oral"), ("PO", "oral"), ("Oral", "oral"),
    ("transdermal", "iv"), (None, "iv"),
])
def test_route_aliases(raw, expected):
    assert normalize_parameters(route=raw).route == expected


def test_duration_override():
    assert normalize_parameters(duration_h=72).horizon_h == 72.0
    assert normalize_parameters(duration_h="").duration_h is None
    assert normalize_parameters(duration_h=-5).duration_h is None
    assert normalize_parameters(duration_h="soon").duration_h is None


def test_ke_from_half_life():
    assert math.isclose(ke_from_half_life(math.log(2.0) / 0.1), 0.1)
    assert ke_from_half_life("junk") == pytest.approx(DEFAULTS["ke_per_h"])
    assert ke_from_half_life(0) == pytest.approx(math.log(2.0) / EPSILON)


def test_with_overrides_reclamps():
    p = normalize_parameters(route="oral")
    q = with_overrides(p, bioavailability=3.0, n_doses=5)
    assert q.route == "oral"
    assert q.bioavailability == 1.0
    assert q.n_doses == 5
    with pytest.raises(TypeError):
        with_overrides(p, colour="blue")


def test_huge_integers_fall_back_to_default(caplog):
    with caplog.at_level(logging.WARNING, logger="pksim.params"):
        p = normalize_parameters(dose_mg=10**400, ka_per_h=10**400, duration_h=10**400)
    assert p.dose_mg == DEFAULTS["dose_mg"]
    assert p.ka_per_h == DEFAULTS["ka_per_h"]
    assert p.duration_h is None
    assert "too large" in caplog.text


def test_upper_caps_keep_values_finite():
    p = normalize_parameters(dose_mg=1e300, volume_L=1e300, ke_per_h=1e308, ka_per_h=1e308,
                             interval_h=1e300, n_doses=10**6, duration_h=1e300)
    assert p.dose_mg == MAX_DOSE_MG
    assert p.volume_L == MAX_VOLUME_L
    assert p.ke_per_h == MAX_RATE_PER_H
    assert p.ka_per_h == MAX_RATE_PER_H
    assert p.interval_h == MAX_INTERVAL_H
    assert p.n_doses == MAX_DOSES
    assert p.duration_h == MAX_DURATION_H
