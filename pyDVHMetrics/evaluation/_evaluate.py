"""Evaluation of the configured metrics over the structures of a plan."""

import logging
from typing import Iterable, Optional, Union

import numpy as np
import SimpleITK as sitk
from numpydantic import NDArray
from pydantic import Field, computed_field

from pyDVHMetrics.core import PyDVHMetricsBaseModel
from pyDVHMetrics.analysis import DvhCurve
from pyDVHMetrics.config import MetricsConfig, validate_config
from pyDVHMetrics.metrics import MetricKind, MetricResult, get_metric
from pyDVHMetrics.metrics._metric import NOT_APPLICABLE

logger = logging.getLogger(__name__)


class StructureDvh(PyDVHMetricsBaseModel):
    """
    A structure and its cumulative DVH.

    Attributes
    ----------
    structure_id : str
        Id of the structure.
    dicom_type : str
        DICOM RT ROI interpreted type, e.g. ORGAN, PTV or MARKER.
    curve : DvhCurve, optional
        The cumulative DVH. None if the DVH could not be obtained.
    """

    structure_id: str
    dicom_type: str = Field(default="ORGAN")
    curve: Optional[DvhCurve] = Field(default=None)

    @computed_field
    @property
    def is_empty(self) -> bool:
        """bool: True if the structure has a DVH without any samples."""
        return self.curve is not None and self.curve.num_points == 0

    @classmethod
    def from_dose(
        cls,
        structure_id: str,
        dose: Union[sitk.Image, NDArray],
        mask: Union[sitk.Image, NDArray],
        bin_width: float = 0.1,
        dicom_type: str = "ORGAN",
    ) -> "StructureDvh":
        """
        Create a structure with the DVH of a dose distribution within its mask.

        Parameters
        ----------
        structure_id : str
            Id of the structure.
        dose : Union[sitk.Image, NDArray]
            The dose distribution.
        mask : Union[sitk.Image, NDArray]
            The structure mask, same shape as the dose.
        bin_width : float, optional
            Dose spacing of the DVH samples. Defaults to 0.1.
        dicom_type : str, optional
            DICOM type of the structure. Defaults to "ORGAN".

        Returns
        -------
        StructureDvh
            The structure with its cumulative DVH.
        """
        curve = DvhCurve.compute(quantity=dose, mask=mask, bin_width=bin_width, name=structure_id)
        return cls(structure_id=structure_id, dicom_type=dicom_type, curve=curve)


class DoseInfo(PyDVHMetricsBaseModel):
    """
    Metrics of a structure for one matching gEUD parameter.

    Attributes
    ----------
    structure_id : str
        Id of the structure.
    pattern : str
        Configuration pattern the structure id matched.
    a_parameter : float
        gEUD volume effect parameter.
    geud : MetricResult
        The gEUD result.
    hi : MetricResult
        The homogeneity index result. Not applicable for non-target structures.
    """

    structure_id: str
    pattern: str
    a_parameter: float
    geud: MetricResult
    hi: MetricResult

    def summary(self) -> str:
        """str: One line summary of the metrics."""
        return (
            f"Structure: {self.structure_id}; gEUD = {self.geud.value:.2f} "
            f"for a = {self.a_parameter:g}; HI = {self.hi.value:.2f}"
        )


def evaluate_structure(
    structure: StructureDvh,
    config: Union[MetricsConfig, dict, None] = None,
    prescribed_dose: Optional[float] = None,
) -> list[DoseInfo]:
    """
    Evaluate the configured metrics for a single structure.

    Parameters
    ----------
    structure : StructureDvh
        The structure and its DVH.
    config : Union[MetricsConfig, dict, None], optional
        The metric configuration. Defaults to the default configuration.
    prescribed_dose : float, optional
        Prescribed dose of the plan, used for the homogeneity index.

    Returns
    -------
    list[DoseInfo]
        One entry per gEUD pattern matching the structure id. Empty for
        structures which are excluded, empty or not configured.
    """
    config = validate_config(config)

    if config.is_excluded(structure.dicom_type):
        logger.debug("Skipping '%s' of type %s.", structure.structure_id, structure.dicom_type)
        return []

    if structure.is_empty:
        logger.debug("Skipping empty structure '%s'.", structure.structure_id)
        return []

    matches = config.match_structure(structure.structure_id)
    if not matches:
        return []

    if config.is_target(structure.structure_id):
        hi_metric = get_metric({"name": MetricKind.HI.value, "prescribed_dose": prescribed_dose})
        hi = hi_metric.evaluate(structure.curve)
    else:
        hi = MetricResult(value=np.nan, metric=MetricKind.HI, reason=NOT_APPLICABLE)

    infos = []
    for pattern, a in matches:
        logger.debug("Structure '%s' matches '%s' (a = %s).", structure.structure_id, pattern, a)
        geud_metric = get_metric({"name": MetricKind.GEUD.value, "a": a})
        infos.append(
            DoseInfo(
                structure_id=structure.structure_id,
                pattern=pattern,
                a_parameter=a,
                geud=geud_metric.evaluate(structure.curve),
                hi=hi,
            )
        )
    return infos


def evaluate_structures(
    structures: Iterable[StructureDvh],
    config: Union[MetricsConfig, dict, None] = None,
    prescribed_dose: Optional[float] = None,
) -> list[DoseInfo]:
    """
    Evaluate the configured metrics for all structures of a plan.

    A structure whose metrics are not computable does not stop the
    evaluation of the others.

    Parameters
    ----------
    structures : Iterable[StructureDvh]
        The structures and their DVHs.
    config : Union[MetricsConfig, dict, None], optional
        The metric configuration. Defaults to the default configuration.
    prescribed_dose : float, optional
        Prescribed dose of the plan (or total of a composite plan).

    Returns
    -------
    list[DoseInfo]
        The metrics in structure order.
    """
    config = validate_config(config)

    infos = []
    for structure in structures:
        infos.extend(evaluate_structure(structure, config, prescribed_dose))

    logger.info("Evaluated metrics for %d structure/parameter combinations.", len(infos))
    return infos
