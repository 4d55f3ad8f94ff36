"""Structure specific metric configuration."""

import json
import logging
from os import PathLike
from typing import Any, Union
from typing_extensions import Annotated

from pydantic import Field, StringConstraints, field_validator

from pyDVHMetrics.core import PyDVHMetricsBaseModel
from pyDVHMetrics.metrics import validate_exponent

logger = logging.getLogger(__name__)

# Volume effect parameters per structure id pattern. Patterns are searched
# for in the structure id, so "Lung" matches "Lung_L" and "Ipsilateral Lung".
DEFAULT_GEUD_PARAMETERS = {
    "Heart": 0.5,
    "Cord": 20.0,
    "Parotid": 0.5,
    "Lung": 0.5,
    "Bladder": 0.5,
    "Rectum": 20.0,
    "stem": 20.0,
    "PTV": -0.1,
}


class MetricsConfig(PyDVHMetricsBaseModel):
    """
    Configuration deciding which metrics are evaluated for a structure.

    Attributes
    ----------
    geud_parameters : dict[str, float]
        gEUD volume effect parameter a per structure id pattern.
    target_pattern : str
        Structures whose id contains this pattern are targets and get a
        homogeneity index.
    excluded_dicom_types : list[str]
        DICOM structure types that are never evaluated.
    bin_width : float
        Dose spacing used when computing DVH curves from dose distributions.
    """

    geud_parameters: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_GEUD_PARAMETERS)
    )
    target_pattern: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)] = (
        "PTV"
    )
    excluded_dicom_types: list[
        Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True)]
    ] = Field(default_factory=lambda: ["MARKER"])
    bin_width: float = Field(default=0.1, gt=0.0)

    @field_validator("geud_parameters", mode="after")
    @classmethod
    def validate_geud_parameters(cls, v: dict[str, float]) -> dict[str, float]:
        """
        Validate the gEUD parameters.

        Parameters
        ----------
        v : dict[str, float]
            The parameters per pattern.

        Returns
        -------
        dict[str, float]
            The validated parameters.

        Raises
        ------
        ValueError
            If a pattern is empty or a parameter is zero.
        """
        for pattern, a in v.items():
            if not pattern.strip():
                raise ValueError("Structure patterns must not be empty.")
            validate_exponent(a)

        upper = [pattern.upper() for pattern in v]
        for pattern in upper:
            overlaps = [other for other in upper if other != pattern and pattern in other]
            if overlaps:
                logger.info(
                    "Pattern '%s' is contained in %s, structures can match more than once.",
                    pattern,
                    overlaps,
                )
        return v

    def match_structure(self, structure_id: str) -> list[tuple[str, float]]:
        """
        Find the gEUD parameters applying to a structure.

        The search is case insensitive and looks for each pattern within the
        structure id. Every matching pattern is returned.

        Parameters
        ----------
        structure_id : str
            The id of the structure.

        Returns
        -------
        list[tuple[str, float]]
            Matching (pattern, a) pairs in configuration order.
        """
        sid = structure_id.upper()
        return [
            (pattern, a) for pattern, a in self.geud_parameters.items() if pattern.upper() in sid
        ]

    def is_target(self, structure_id: str) -> bool:
        """
        Check if the structure is a target volume by its id.

        Parameters
        ----------
        structure_id : str
            The id of the structure.

        Returns
        -------
        bool
            True if the id contains the target pattern.
        """
        return self.target_pattern.upper() in structure_id.upper()

    def is_excluded(self, dicom_type: str) -> bool:
        """bool: True if structures of this DICOM type are not evaluated."""
        return dicom_type.strip().upper() in self.excluded_dicom_types


def validate_config(config: Union[MetricsConfig, dict[str, Any], None] = None) -> MetricsConfig:
    """
    Validate a configuration input and return a configuration object.

    Parameters
    ----------
    config : Union[MetricsConfig, dict, None]
        The configuration. None gives the default configuration.

    Returns
    -------
    MetricsConfig
        The configuration object.
    """
    if config is None:
        return MetricsConfig()
    if isinstance(config, MetricsConfig):
        return config
    if isinstance(config, dict):
        return MetricsConfig.model_validate(config)
    raise ValueError(f"Invalid configuration: {config}")


def load_config(path: Union[str, PathLike]) -> MetricsConfig:
    """
    Load a configuration from a JSON file.

    Parameters
    ----------
    path : Union[str, PathLike]
        Path to the JSON file. Keys may be given in snake_case or camelCase.

    Returns
    -------
    MetricsConfig
        The configuration object.
    """
    with open(path, "r", encoding="utf-8") as file:
        data = json.load(file)
    logger.info("Loaded metric configuration from %s", path)
    return validate_config(data)
