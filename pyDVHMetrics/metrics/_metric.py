"""Base Implementation for DVH metrics."""

from abc import abstractmethod
from enum import Enum
from typing import ClassVar, Optional
import logging

import numpy as np
from pydantic import computed_field, Field

from pyDVHMetrics.core.datamodel import PyDVHMetricsBaseModel
from pyDVHMetrics.analysis import DvhCurve

logger = logging.getLogger(__name__)

DVH_UNAVAILABLE = "DVH unavailable"
PRESCRIPTION_UNDEFINED = "prescription undefined"
NOT_APPLICABLE = "not applicable"


class MetricKind(str, Enum):
    """Available DVH metrics."""

    GEUD = "gEUD"
    HI = "HI"


class MetricResult(PyDVHMetricsBaseModel):
    """
    Outcome of a single metric evaluation.

    Attributes
    ----------
    value : float
        The metric value. NaN if the metric could not be computed.
    metric : MetricKind
        The metric the value belongs to.
    reason : str, optional
        Why the metric could not be computed.
    """

    value: float
    metric: MetricKind
    reason: Optional[str] = Field(default=None)

    @computed_field
    @property
    def is_computable(self) -> bool:
        """bool: False if the value is the NaN sentinel."""
        return not bool(np.isnan(self.value))


class Metric(PyDVHMetricsBaseModel):
    """
    Base class for metrics derived from a cumulative DVH.

    Attributes
    ----------
    name : ClassVar[str]
        Name of the metric.
    kind : ClassVar[MetricKind]
        Kind reported in the metric results.
    """

    name: ClassVar[str]
    kind: ClassVar[MetricKind]

    @abstractmethod
    def _compute(self, curve: DvhCurve) -> tuple[float, Optional[str]]:
        """Compute the metric value and the reason if it is not computable."""

    def compute(self, curve: Optional[DvhCurve]) -> float:
        """
        Compute the metric value.

        Parameters
        ----------
        curve : DvhCurve, optional
            The cumulative DVH. None if no DVH could be obtained.

        Returns
        -------
        float
            The metric value, NaN if it is not computable.
        """
        return self.evaluate(curve).value

    def evaluate(self, curve: Optional[DvhCurve]) -> MetricResult:
        """
        Evaluate the metric on a curve.

        Parameters
        ----------
        curve : DvhCurve, optional
            The cumulative DVH. None if no DVH could be obtained.

        Returns
        -------
        MetricResult
            The result, holding NaN and a reason if the metric is not computable.
        """
        if curve is None:
            logger.warning("%s: %s.", self.name, DVH_UNAVAILABLE)
            return MetricResult(value=np.nan, metric=self.kind, reason=DVH_UNAVAILABLE)

        value, reason = self._compute(curve)
        return MetricResult(value=value, metric=self.kind, reason=reason)

