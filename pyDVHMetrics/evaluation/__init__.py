"""Evaluation of configured metrics for the structures of a plan."""

from ._evaluate import StructureDvh, DoseInfo, evaluate_structure, evaluate_structures

__all__ = [
    "StructureDvh",
    "DoseInfo",
    "evaluate_structure",
    "evaluate_structures",
]
