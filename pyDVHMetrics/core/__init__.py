"""Core module with fundamental classes for pyDVHMetrics."""

from ._exceptions import PyDVHMetricsError, ConfigurationError
from .datamodel import PyDVHMetricsBaseModel

__all__ = [
    "PyDVHMetricsError",
    "ConfigurationError",
    "PyDVHMetricsBaseModel",
]
