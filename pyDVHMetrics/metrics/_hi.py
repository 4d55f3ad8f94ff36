"""Homogeneity index of target volumes."""

import logging
from typing import Iterable, Optional
from pydantic import Field

import numpy as np

from pyDVHMetrics.analysis import DvhCurve
from ._metric import (
    Metric,
    MetricKind,
    DVH_UNAVAILABLE,
    PRESCRIPTION_UNDEFINED,
)

logger = logging.getLogger(__name__)

# Cumulative volume percentages of the near-maximum and near-minimum dose
HIGH_DOSE_VOLUME = 2.0
LOW_DOSE_VOLUME = 98.0


class HomogeneityIndex(Metric):
    """
    Homogeneity index (HI) of a target volume.

    HI = (D2 - D98) / Dp * 100, where D2 and D98 are the minimum doses to 2 %
    and 98 % of the volume and Dp is the prescribed dose (J Med Phys 2012;
    37(4): 207-213).

    Attributes
    ----------
    prescribed_dose : float, optional
        Prescribed dose used for normalization. The index is not computable
        while it is undefined.
    """

    name = "HI"
    kind = MetricKind.HI

    prescribed_dose: Optional[float] = Field(default=None)

    def _compute(self, curve: DvhCurve) -> tuple[float, Optional[str]]:
        return _hi(curve, self.prescribed_dose)


def compute_hi(curve: DvhCurve, prescribed_dose: Optional[float]) -> float:
    """
    Compute the homogeneity index from a cumulative DVH.

    D2 and D98 are read off as the dose of the first sample whose cumulative
    volume is at most 2 % and 98 %, respectively.

    Parameters
    ----------
    curve : DvhCurve
        The cumulative DVH of the target.
    prescribed_dose : float, optional
        The prescribed dose, in the dose unit of the curve.

    Returns
    -------
    float
        The homogeneity index in percent. NaN if D2 or D98 cannot be read off
        the curve or the prescribed dose is undefined or zero.
    """
    value, _ = _hi(curve, prescribed_dose)
    return value


def _is_defined(dose: Optional[float]) -> bool:
    return dose is not None and bool(np.isfinite(dose))


def _hi(curve: DvhCurve, prescribed_dose: Optional[float]) -> tuple[float, Optional[str]]:
    if curve.num_points == 0:
        logger.warning("HI: %s for '%s'.", DVH_UNAVAILABLE, curve.name)
        return np.nan, DVH_UNAVAILABLE

    if not _is_defined(prescribed_dose) or prescribed_dose <= 0.0:
        logger.warning("HI: %s for '%s' (%s).", PRESCRIPTION_UNDEFINED, curve.name, prescribed_dose)
        return np.nan, PRESCRIPTION_UNDEFINED

    d2 = curve.dose_at_volume(HIGH_DOSE_VOLUME)
    d98 = curve.dose_at_volume(LOW_DOSE_VOLUME)
    if np.isnan(d2) or np.isnan(d98):
        logger.warning("HI: D2 or D98 not found on the DVH of '%s'.", curve.name)
        return np.nan, DVH_UNAVAILABLE

    return (d2 - d98) / prescribed_dose * 100.0, None


def aggregate_prescribed_dose(prescribed_doses: Iterable[Optional[float]]) -> float:
    """
    Sum up the prescribed doses of the plans forming a composite plan.

    Parameters
    ----------
    prescribed_doses : Iterable[Optional[float]]
        Prescribed dose of each plan. None marks an undefined prescription.

    Returns
    -------
    float
        The total prescribed dose. NaN if there are no plans or any of the
        prescriptions is undefined.
    """
    total = 0.0
    num_plans = 0
    for dose in prescribed_doses:
        if not _is_defined(dose):
            logger.warning("One of the prescriptions of the composite plan is not defined.")
            return np.nan
        total += dose
        num_plans += 1

    if num_plans == 0:
        logger.warning("Composite plan without plans has no prescription.")
        return np.nan

    return total
