"""
Shared compute infrastructure for PyLinear.

This module provides timing utilities and the numerical thresholds shared
by all decompositions and iterative solvers.

IMPORTANT: This is NOT where algorithms live. Those go in
decomposition/ and iterative/. This module contains shared NUMERIC
infrastructure.

Submodules:
    timing: Phase timer behind solve() timing reports
    tolerances: Default singularity / symmetry / positivity thresholds
"""

from pylinear.core.compute.timing import Timer
from pylinear.core.compute.tolerances import (
    DEFAULT_THRESHOLDS,
    DecompositionThresholds,
    MACHINE_EPSILON,
    SAFE_MIN,
)

__all__ = [
    # Timing
    "Timer",
    # Tolerances
    "DEFAULT_THRESHOLDS",
    "DecompositionThresholds",
    "MACHINE_EPSILON",
    "SAFE_MIN",
]
