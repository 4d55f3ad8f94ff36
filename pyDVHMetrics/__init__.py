"""
Python package for dose volume histogram based plan metrics.

This package provides
- A cumulative DVH curve model.
- The generalized equivalent uniform dose (gEUD) and the homogeneity index (HI).
- A structure specific configuration of metric parameters.
- Evaluation of the configured metrics over the structures of a plan.

Import packages as follows:

    from pyDVHMetrics import (
        DvhCurve,
        compute_geud,
        compute_hi,
        evaluate_structures,
    )

Use the documentation, docstrings or examples for a detailed overview.
"""

from importlib.metadata import version, PackageNotFoundError
import logging

from .analysis import DvhSample, DvhCurve
from .metrics import (
    GEUD,
    HomogeneityIndex,
    MetricKind,
    MetricResult,
    compute_geud,
    compute_hi,
    aggregate_prescribed_dose,
)
from .config import MetricsConfig, load_config, validate_config
from .evaluation import StructureDvh, DoseInfo, evaluate_structure, evaluate_structures

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    # package is not installed
    pass

# Logging is not exposed by default and needs to be configured by the user.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "DvhSample",
    "DvhCurve",
    "GEUD",
    "HomogeneityIndex",
    "MetricKind",
    "MetricResult",
    "compute_geud",
    "compute_hi",
    "aggregate_prescribed_dose",
    "MetricsConfig",
    "load_config",
    "validate_config",
    "StructureDvh",
    "DoseInfo",
    "evaluate_structure",
    "evaluate_structures",
]
