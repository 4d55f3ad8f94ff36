"""Contains custom exceptions for the pyDVHMetrics package."""


class PyDVHMetricsError(Exception):
    """Exception for errors specifically thrown by pyDVHMetrics."""


class ConfigurationError(PyDVHMetricsError, ValueError):
    """Defines an invalid metric parameter, e.g. a gEUD exponent of zero."""

    def __init__(self, message: str):
        super().__init__(message)
