import pytest
import numpy as np
from pydantic import ValidationError

from pyDVHMetrics.analysis import DvhCurve
from pyDVHMetrics.core import ConfigurationError
from pyDVHMetrics.metrics import GEUD, MetricKind, compute_geud


def _reference_geud(curve, a):
    vol_diff = np.abs(np.diff(curve.volume)) / 100.0
    return np.sum(vol_diff * curve.dose[1:] ** a) ** (1.0 / a)


def test_geud_single_bin(single_bin_curve):
    assert compute_geud(single_bin_curve, 0.5) == pytest.approx(60.0)


@pytest.mark.parametrize("a", [-10.0, -0.1, 0.5, 1.0, 20.0])
def test_geud_uniform_dose(a):
    curve = DvhCurve.from_samples([(100.0, 0.0), (100.0, 42.0), (0.0, 42.0)])
    assert compute_geud(curve, a) == pytest.approx(42.0, rel=1e-12)


@pytest.mark.parametrize("a", [-0.1, 0.5, 1.0, 20.0])
@pytest.mark.parametrize("k", [0.01, 2.0, 100.0])
def test_geud_dose_scaling(oar_curve, a, k):
    scaled = DvhCurve(volume=oar_curve.volume, dose=oar_curve.dose * k)
    assert compute_geud(scaled, a) == pytest.approx(k * compute_geud(oar_curve, a), rel=1e-10)


@pytest.mark.parametrize("a", [0.5, 1.0, 20.0])
def test_geud_matches_direct_sum(oar_curve, a):
    assert compute_geud(oar_curve, a) == pytest.approx(_reference_geud(oar_curve, a), rel=1e-10)


def test_geud_negative_a_target(target_curve):
    assert compute_geud(target_curve, -0.1) == pytest.approx(
        _reference_geud(target_curve, -0.1), rel=1e-10
    )


def test_geud_linear_is_mean_dose(target_curve):
    assert compute_geud(target_curve, 1.0) == pytest.approx(52.42)


def test_geud_large_exponent_does_not_overflow():
    curve = DvhCurve.from_samples([(100.0, 0.0), (50.0, 6000.0), (0.0, 7000.0)], unit="cGy")
    expected = 7000.0 * (0.5 * (6000.0 / 7000.0) ** 100 + 0.5) ** (1 / 100)
    geud = compute_geud(curve, 100.0)
    assert np.isfinite(geud)
    assert geud == pytest.approx(expected, rel=1e-10)


@pytest.mark.parametrize("a", [-0.1, 0.5, 20.0])
def test_geud_too_few_samples(a):
    assert np.isnan(compute_geud(DvhCurve(volume=[], dose=[]), a))
    assert np.isnan(compute_geud(DvhCurve.from_samples([(100.0, 0.0)]), a))


def test_geud_without_differential_volume():
    curve = DvhCurve.from_samples([(100.0, 0.0), (100.0, 5.0)])
    assert np.isnan(compute_geud(curve, 0.5))


def test_geud_zero_dose_volume():
    curve = DvhCurve.from_samples([(100.0, 0.0), (50.0, 0.0), (0.0, 10.0)])
    assert compute_geud(curve, -0.1) == 0.0
    assert compute_geud(curve, 1.0) == pytest.approx(5.0)


def test_geud_zero_dose_everywhere():
    curve = DvhCurve.from_samples([(100.0, 0.0), (0.0, 0.0)])
    assert compute_geud(curve, 0.5) == 0.0


def test_geud_zero_exponent_rejected(single_bin_curve):
    with pytest.raises(ConfigurationError):
        compute_geud(single_bin_curve, 0.0)
    with pytest.raises(ConfigurationError):
        compute_geud(single_bin_curve, np.inf)


def test_geud_metric_model(single_bin_curve):
    geud = GEUD(a=0.5)
    assert geud.name == "gEUD"

    result = geud.evaluate(single_bin_curve)
    assert result.metric == MetricKind.GEUD
    assert result.value == pytest.approx(60.0)
    assert result.is_computable
    assert result.reason is None
    assert geud.compute(single_bin_curve) == pytest.approx(60.0)


def test_geud_metric_model_rejects_zero():
    with pytest.raises(ValidationError):
        GEUD(a=0.0)
    geud = GEUD(a=1.0)
    with pytest.raises(ValidationError):
        geud.a = 0.0


def test_geud_metric_dvh_unavailable():
    result = GEUD(a=20.0).evaluate(None)
    assert np.isnan(result.value)
    assert not result.is_computable
    assert result.reason == "DVH unavailable"

    result = GEUD(a=20.0).evaluate(DvhCurve.from_samples([(100.0, 0.0)]))
    assert result.reason == "DVH unavailable"
