"""Generalized equivalent uniform dose."""

import logging
from typing import Optional
from pydantic import Field, field_validator

import numpy as np
from numba import njit

from pyDVHMetrics.analysis import DvhCurve
from pyDVHMetrics.core import ConfigurationError
from ._metric import Metric, MetricKind, DVH_UNAVAILABLE

logger = logging.getLogger(__name__)


class GEUD(Metric):
    """
    Generalized equivalent uniform dose (gEUD).

    gEUD = (sum_i v_i * D_i^a)^(1/a) with v_i the fractional volume of the
    differential bin i and D_i the dose at its upper edge (AAPM Report 166).

    Attributes
    ----------
    a : float
        Tissue specific volume effect parameter. Must not be zero. Large
        values describe serial organs, negative values are used for targets.
    """

    name = "gEUD"
    kind = MetricKind.GEUD

    a: float = Field(allow_inf_nan=False)

    @field_validator("a")
    @classmethod
    def _validate_a(cls, v: float) -> float:
        return validate_exponent(v)

    def _compute(self, curve: DvhCurve) -> tuple[float, Optional[str]]:
        return _geud(curve, self.a)


def validate_exponent(a: float) -> float:
    """
    Reject a gEUD exponent that leaves the formula undefined.

    Parameters
    ----------
    a : float
        The volume effect parameter.

    Returns
    -------
    float
        The parameter.

    Raises
    ------
    ConfigurationError
        If a is zero or not finite.
    """
    if not np.isfinite(a) or a == 0.0:
        raise ConfigurationError(f"gEUD parameter a must be finite and non-zero, got {a}")
    return a


def compute_geud(curve: DvhCurve, a: float) -> float:
    """
    Compute the generalized equivalent uniform dose of a cumulative DVH.

    The first sample is the 100 % anchor and opens the first differential bin.
    Each following sample closes a bin with the volume
    ``|volume[i] - volume[i - 1]| / 100`` and dose ``dose[i]``.

    Parameters
    ----------
    curve : DvhCurve
        The cumulative DVH.
    a : float
        The volume effect parameter.

    Returns
    -------
    float
        The gEUD in the dose unit of the curve. NaN if the curve has fewer
        than two samples or no differential volume.

    Raises
    ------
    ConfigurationError
        If a is zero.

    Notes
    -----
    Doses are normalized to the highest bin dose before exponentiation, so
    large exponents do not overflow. Compare results against reference
    values by their relative difference, as the absolute error grows with
    D^a.
    """
    validate_exponent(a)
    value, _ = _geud(curve, a)
    return value


def _geud(curve: DvhCurve, a: float) -> tuple[float, Optional[str]]:
    if curve.num_points < 2:
        logger.warning(
            "gEUD: %s for '%s', the curve has fewer than 2 samples.", DVH_UNAVAILABLE, curve.name
        )
        return np.nan, DVH_UNAVAILABLE

    geud = _geud_kernel(curve.volume, curve.dose, a)
    if np.isnan(geud):
        logger.warning("gEUD: '%s' has no differential volume.", curve.name)
        return np.nan, DVH_UNAVAILABLE

    return float(geud), None


@njit
def _geud_kernel(volume, dose, a):
    total_volume = 0.0
    dose_max = 0.0
    has_zero_dose = False
    for i in range(1, len(volume)):
        vol_diff = abs(volume[i] - volume[i - 1]) / 100.0
        if vol_diff > 0.0:
            total_volume += vol_diff
            dose_max = max(dose_max, dose[i])
            if dose[i] == 0.0:
                has_zero_dose = True

    if total_volume == 0.0:
        return np.nan

    # zero dose bins dominate for negative exponents
    if dose_max == 0.0 or (a < 0.0 and has_zero_dose):
        return 0.0

    running_sum = 0.0
    for i in range(1, len(volume)):
        vol_diff = abs(volume[i] - volume[i - 1]) / 100.0
        if vol_diff > 0.0 and dose[i] > 0.0:
            running_sum += vol_diff * (dose[i] / dose_max) ** a

    return dose_max * running_sum ** (1.0 / a)
