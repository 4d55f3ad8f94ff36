"""Configuration of structure specific metric parameters."""

from ._config import MetricsConfig, DEFAULT_GEUD_PARAMETERS, validate_config, load_config

__all__ = [
    "MetricsConfig",
    "DEFAULT_GEUD_PARAMETERS",
    "validate_config",
    "load_config",
]
