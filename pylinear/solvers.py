"""
Solver dispatch for linear systems.

This module provides the solve() function (public API) and method selection.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Literal

import numpy as np

from pylinear.core.compute.timing import Timer
from pylinear.core.compute.tolerances import CONDITION_WARNING_THRESHOLD
from pylinear.core.protocols import DecompositionSolver, LinearOperator
from pylinear.core.result import Result
from pylinear.decomposition import (
    CholeskyDecomposition,
    EigenDecomposition,
    LUDecomposition,
    QRDecomposition,
    RRQRDecomposition,
    SingularValueDecomposition,
)
from pylinear.decomposition._solver import as_real_array, as_right_hand_side
from pylinear.iterative import ConjugateGradient, JacobiPreconditioner, SymmLQ
from pylinear.iterative._base import apply_operator, as_real_vector
from pylinear.matrix import FieldMatrix, RealMatrix
from pylinear.solution import LinearSolution, SolveParams

logger = logging.getLogger(__name__)


# Type alias for method selection
MethodChoice = Literal['auto', 'lu', 'cholesky', 'qr', 'rrqr', 'svd', 'eigen', 'cg', 'symmlq']

_DECOMPOSITIONS = {
    'lu': LUDecomposition,
    'cholesky': CholeskyDecomposition,
    'qr': QRDecomposition,
    'rrqr': RRQRDecomposition,
    'svd': SingularValueDecomposition,
    'eigen': EigenDecomposition,
}

_ITERATIVE = {
    'cg': ConjugateGradient,
    'symmlq': SymmLQ,
}

_ITERATIVE_OPTIONS = frozenset({'max_iterations', 'delta', 'check', 'x0', 'preconditioner'})

_OPTIONS = {
    'lu': frozenset({'singularity_threshold'}),
    'cholesky': frozenset({'relative_symmetry_threshold', 'absolute_positivity_threshold'}),
    'qr': frozenset({'threshold'}),
    'rrqr': frozenset({'threshold'}),
    'svd': frozenset(),
    'eigen': frozenset({'relative_symmetry_threshold'}),
    'cg': _ITERATIVE_OPTIONS,
    'symmlq': _ITERATIVE_OPTIONS | {'goodb', 'shift'},
}


def solve(
    a: Any,
    b: Any,
    *,
    method: MethodChoice = 'auto',
    **options: Any,
) -> LinearSolution:
    """
    Solve the linear system A x = b.

    This is the one-call entry point. All input validation, method
    selection, timing and result wrapping happens here; the decompositions
    and iterative solvers remain available for repeated solves.

    Args:
        a: Matrix (RealMatrix or 2-D array-like). The iterative methods
           also accept any LinearOperator.
        b: Right-hand side. Vector for every method; the direct methods
           also accept a matrix of several right-hand sides.
        method: Method to use:
            - 'auto': LU for a square matrix, least squares QR otherwise
            - 'lu': LU with partial pivoting
            - 'cholesky': Cholesky, A symmetric positive definite
            - 'qr': Householder QR (least squares for tall A)
            - 'rrqr': QR with column pivoting, reports the rank
            - 'svd': SVD (pseudo-inverse), reports rank and condition
            - 'eigen': symmetric eigen decomposition, A symmetric
            - 'cg': Conjugate Gradient, A symmetric positive definite
            - 'symmlq': SYMMLQ, A symmetric, possibly indefinite
        **options: Passed on to the selected method:
            - lu: singularity_threshold
            - cholesky: relative_symmetry_threshold,
              absolute_positivity_threshold
            - qr, rrqr: threshold
            - eigen: relative_symmetry_threshold
            - cg, symmlq: max_iterations (default 10 n), delta
              (default 1e-10), check, x0, preconditioner (a
              LinearOperator or 'jacobi')
            - symmlq: goodb, shift

    Returns:
        LinearSolution with the solution, residual norm and diagnostics

    Raises:
        ValueError: If the method is unknown or does not take one of the options
        ValidationError: If inputs are invalid
        DimensionError: If a and b have inconsistent dimensions
        SingularMatrixError: If a direct method finds A singular
        NotPositiveDefiniteError: If A is not positive definite (cholesky)
        MaxCountExceededError: If an iterative method runs out of iterations

    Example:
        >>> from pylinear import solve
        >>> result = solve([[4.0, 1.0], [1.0, 3.0]], [1.0, 2.0], method='cholesky')
        >>> result.x
        array([0.09090909, 0.63636364])
    """
    if method != 'auto' and method not in _DECOMPOSITIONS and method not in _ITERATIVE:
        raise ValueError(f"Unknown method: {method!r}")

    timer = Timer()
    timer.start()
    if method in _ITERATIVE:
        result = _solve_iterative(a, b, method, options, timer)
    else:
        result = _solve_direct(a, b, method, options, timer)
    logger.debug(
        "solve: method=%s residual=%g time=%.4fs",
        result.method_name, result.params.residual_norm,
        result.timing['total_seconds'] if result.timing else 0.0,
    )
    return LinearSolution(_result=result)


def _check_options(method: str, options: dict[str, Any]) -> None:
    unknown = sorted(set(options) - _OPTIONS[method])
    if unknown:
        raise ValueError(
            f"Option {unknown[0]!r} is not supported by method {method!r}; "
            f"expected one of {sorted(_OPTIONS[method])}"
        )


def _solve_direct(
    a: Any,
    b: Any,
    method: str,
    options: dict[str, Any],
    timer: Timer,
) -> Result[SolveParams]:
    # === Input Validation ===
    # This is the boundary - validate here, trust everywhere else
    a_arr = as_real_array(a, 'a')
    rows, columns = a_arr.shape
    block, is_matrix = as_right_hand_side(b, rows)

    if method == 'auto':
        method = 'lu' if rows == columns else 'qr'
    _check_options(method, options)

    # === Factorize and Solve ===
    with timer.phase('factorize'):
        decomposition = _DECOMPOSITIONS[method](a_arr, **options)
    solver: DecompositionSolver = decomposition.solver
    with timer.phase('solve'):
        x = solver.solve(b)
    timer.stop()

    solution = x.get_data() if isinstance(x, RealMatrix) else x.to_array()
    fitted = a_arr @ (solution if is_matrix else solution[:, np.newaxis])
    residual_norm = float(np.linalg.norm(fitted - block))
    rhs_norm = float(np.linalg.norm(block))

    info: dict[str, Any] = {'method': method, 'shape': (rows, columns)}
    rank = None
    if method in ('lu', 'cholesky', 'eigen'):
        info['determinant'] = decomposition.determinant
    if method == 'rrqr':
        rank = decomposition.get_rank()
    if method == 'svd':
        rank = decomposition.get_rank()
        info['condition_number'] = decomposition.get_condition_number()
    elif rows == columns:
        info['condition_number'] = float(np.linalg.cond(a_arr))

    warning_messages = []
    condition = info.get('condition_number')
    if condition is not None and condition > CONDITION_WARNING_THRESHOLD:
        msg = (
            f"Matrix is ill-conditioned (condition number {condition:.3e}); "
            f"the solution may be inaccurate"
        )
        warnings.warn(msg, RuntimeWarning, stacklevel=3)
        warning_messages.append(msg)

    return Result(
        params=SolveParams(
            solution=solution,
            residual_norm=residual_norm,
            rhs_norm=rhs_norm,
            rank=rank,
        ),
        info=info,
        timing=timer.as_dict(),
        method_name=method,
        warnings=tuple(warning_messages),
    )


def _solve_iterative(
    a: Any,
    b: Any,
    method: str,
    options: dict[str, Any],
    timer: Timer,
) -> Result[SolveParams]:
    _check_options(method, options)

    # === Input Validation ===
    if isinstance(a, (FieldMatrix, LinearOperator)):
        operator = a
    else:
        operator = RealMatrix(as_real_array(a, 'a'), copy=False)
    rhs = as_real_vector(b, 'b')

    options = dict(options)
    max_iterations = options.pop('max_iterations', 10 * operator.column_dimension)
    delta = options.pop('delta', 1e-10)
    check = options.pop('check', False)
    x0 = options.pop('x0', None)
    preconditioner = options.pop('preconditioner', None)
    if isinstance(preconditioner, str):
        if preconditioner != 'jacobi':
            raise ValueError(f"Unknown preconditioner: {preconditioner!r}")
        with timer.phase('setup'):
            preconditioner = JacobiPreconditioner.create(operator)

    solver = _ITERATIVE[method](max_iterations, delta, check)
    shift = options.get('shift', 0.0)

    # === Iterate ===
    with timer.phase('iterate'):
        x = solver.solve(operator, rhs, x0, preconditioner=preconditioner, **options)
    timer.stop()

    ax = apply_operator(operator, x)
    if shift:
        ax = ax.combine(1.0, -shift, x)
    residual_norm = rhs.get_distance(ax)
    iterations = solver.iteration_manager.iterations

    return Result(
        params=SolveParams(
            solution=x.to_array(),
            residual_norm=residual_norm,
            rhs_norm=rhs.get_norm(),
            iterations=iterations,
        ),
        info={
            'method': method,
            'iterations': iterations,
            'max_iterations': max_iterations,
            'delta': delta,
            'preconditioned': preconditioner is not None,
        },
        timing=timer.as_dict(),
        method_name=method,
    )
