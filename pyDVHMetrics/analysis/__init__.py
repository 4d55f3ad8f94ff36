"""Cumulative dose volume histogram curves."""

from ._dvh import DvhSample, DvhCurve

__all__ = [
    "DvhSample",
    "DvhCurve",
]
