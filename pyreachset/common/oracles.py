# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Wrap the LP solvers and the polyhedra backend (cdd, qhull) behind a narrow interface
# Coverage: The OracleFailureError branches handle unexpected errors from HiGHS, CVXPY, pycddlib, and qhull.

from collections import namedtuple

import cdd  # pycddlib -- for vertex/facet enumeration
import cvxpy as cp
import numpy as np
from scipy.optimize import linprog
from scipy.spatial import ConvexHull, QhullError  # for finding extreme points of full-dimensional point clouds

from pyreachset.common.constants import (
    DEFAULT_CVXPY_ARGS_LP,
    DEFAULT_LP_BACKEND,
    LP_BACKENDS,
    PYREACHSET_ZERO,
    PYREACHSET_ZERO_CDD,
)
from pyreachset.common.exceptions import InvalidParameterError, OracleFailureError

LPResult = namedtuple("LPResult", ["status", "x", "value"])
LPResult.__doc__ = """Result of :func:`solve_lp`.

Attributes:
    status (str): One of "optimal", "infeasible", or "unbounded".
    x (numpy.ndarray | None): Optimal point when status is "optimal", None otherwise.
    value (float): Optimal value when status is "optimal", -np.inf when "infeasible", np.inf when "unbounded".
"""

LP_OPTIMAL = "optimal"
LP_INFEASIBLE = "infeasible"
LP_UNBOUNDED = "unbounded"

# scipy.optimize.linprog status codes
_HIGHS_OPTIMAL = 0
_HIGHS_INFEASIBLE = 2
_HIGHS_UNBOUNDED = 3


def solve_lp(direction, A, b, backend=DEFAULT_LP_BACKEND, cvxpy_args=None):
    r"""Solve the linear program :math:`\max_x d^\top x` subject to :math:`Ax\leq b` with :math:`x` free.

    Args:
        direction (array_like): Objective direction d. Vector (n,).
        A (array_like): Inequality coefficient matrix. Matrix (m times n).
        b (array_like): Inequality constants. Vector (m,).
        backend (str, optional): "highs" to use scipy.optimize.linprog or "cvxpy". Defaults to DEFAULT_LP_BACKEND.
        cvxpy_args (dict, optional): Arguments passed to CVXPY when backend is "cvxpy". Defaults to
            DEFAULT_CVXPY_ARGS_LP.

    Raises:
        InvalidParameterError: Unknown backend
        OracleFailureError: The solver failed or returned an unhandled status

    Returns:
        LPResult: Named tuple (status, x, value).

    Notes:
        Without any constraint, the LP is unbounded unless the direction is zero.
    """
    direction = np.atleast_1d(np.squeeze(direction)).astype(float)
    n_dim = direction.size
    A = np.asarray(A, dtype=float).reshape((-1, n_dim))
    b = np.atleast_1d(np.asarray(b, dtype=float)).reshape((-1,))
    if backend not in LP_BACKENDS:
        raise InvalidParameterError(f"Unknown LP backend {backend}! Expected one of {LP_BACKENDS}.")
    if A.shape[0] == 0:
        if np.linalg.norm(direction) <= PYREACHSET_ZERO:
            return LPResult(LP_OPTIMAL, np.zeros((n_dim,)), 0.0)
        return LPResult(LP_UNBOUNDED, None, np.inf)
    if backend == "highs":
        return _solve_lp_with_highs(direction, A, b)
    else:
        return _solve_lp_with_cvxpy(direction, A, b, DEFAULT_CVXPY_ARGS_LP if cvxpy_args is None else cvxpy_args)


def _solve_lp_with_highs(direction, A, b):
    """Private function to solve the LP with scipy.optimize.linprog (HiGHS). Instead, call `solve_lp`."""
    result = linprog(-direction, A_ub=A, b_ub=b, bounds=(None, None), method="highs")
    if result.status == _HIGHS_OPTIMAL:
        return LPResult(LP_OPTIMAL, np.asarray(result.x, dtype=float), -float(result.fun))
    elif result.status == _HIGHS_UNBOUNDED:
        return LPResult(LP_UNBOUNDED, None, np.inf)
    elif result.status == _HIGHS_INFEASIBLE or "infeasible" in str(result.message).lower():
        # HiGHS presolve may report "infeasible or unbounded". A feasibility problem settles it.
        feasibility = linprog(np.zeros_like(direction), A_ub=A, b_ub=b, bounds=(None, None), method="highs")
        if feasibility.status == _HIGHS_OPTIMAL:
            return LPResult(LP_UNBOUNDED, None, np.inf)
        elif feasibility.status == _HIGHS_INFEASIBLE:
            return LPResult(LP_INFEASIBLE, None, -np.inf)
        raise OracleFailureError(f"HiGHS could not decide feasibility of the LP. HiGHS returned: {feasibility.message}")
    else:
        raise OracleFailureError(f"HiGHS failed to solve the LP (status {result.status}): {result.message}")


def _solve_lp_with_cvxpy(direction, A, b, cvxpy_args):
    """Private function to solve the LP with CVXPY. Instead, call `solve_lp`."""
    x = cp.Variable((direction.size,))
    problem = cp.Problem(cp.Maximize(direction @ x), [A @ x <= b])
    try:
        problem.solve(**cvxpy_args)
    except cp.error.SolverError as err:
        raise OracleFailureError(f"Unable to solve the LP. CVXPY returned error: {str(err)}") from err
    if problem.status in [cp.OPTIMAL, cp.OPTIMAL_INACCURATE]:
        return LPResult(LP_OPTIMAL, np.asarray(x.value, dtype=float), float(problem.value))
    elif problem.status in [cp.UNBOUNDED, cp.UNBOUNDED_INACCURATE]:
        return LPResult(LP_UNBOUNDED, None, np.inf)
    elif problem.status in [cp.INFEASIBLE, cp.INFEASIBLE_INACCURATE]:
        return LPResult(LP_INFEASIBLE, None, -np.inf)
    else:
        raise OracleFailureError(f"Could not solve the LP, due to an unhandled status: {problem.status:s}.")


def is_in_convex_hull(V, point, cvxpy_args=None):
    r"""Check if a point lies in the convex hull of the rows of V.

    Args:
        V (numpy.ndarray): Matrix of points (N times n), N >= 1.
        point (numpy.ndarray): Test point. Vector (n,).
        cvxpy_args (dict, optional): Arguments passed to CVXPY. Defaults to DEFAULT_CVXPY_ARGS_LP.

    Raises:
        OracleFailureError: Unable to solve the LP using CVXPY

    Returns:
        bool: True when the distance (in infinity-norm) of the point to the convex hull is below PYREACHSET_ZERO.

    Notes:
        We solve the linear program with decision variable :math:`\theta\in\mathbb{R}^N`,

        .. math::
            \text{minimize}    &\quad  \|y - V^\top \theta\|_\infty\\
            \text{subject to}  &\quad  \sum_i \theta_i = 1, \theta_i \geq 0
    """
    theta = cp.Variable((V.shape[0],), nonneg=True)
    problem = cp.Problem(cp.Minimize(cp.norm(point - V.T @ theta, "inf")), [cp.sum(theta) == 1])
    try:
        problem.solve(**(DEFAULT_CVXPY_ARGS_LP if cvxpy_args is None else cvxpy_args))
    except cp.error.SolverError as err:
        raise OracleFailureError(f"Unable to check hull membership. CVXPY returned error: {str(err)}") from err
    if problem.status not in [cp.OPTIMAL, cp.OPTIMAL_INACCURATE]:
        raise OracleFailureError(f"Could not check hull membership, due to an unhandled status: {problem.status:s}.")
    return bool(problem.value <= PYREACHSET_ZERO)


def get_cdd_polyhedron_from_V(V):
    """Get CDD polyhedron in generator form from given V

    Args:
        V (numpy.ndarray): Matrix of points (N times n)

    Raises:
        OracleFailureError: cdd failed due to numerical inconsistency in the vertex list

    Returns:
        cdd.Polyhedron: CDD Polyhedron
    """
    n_vertices = V.shape[0]
    # t is 1 to indicate that all are vertices
    tV_list = np.hstack((np.ones((n_vertices, 1)), V)).tolist()
    tV_cdd = cdd.matrix_from_array(tV_list, rep_type=cdd.RepType.GENERATOR)
    try:
        return cdd.polyhedron_from_matrix(tV_cdd)
    except RuntimeError as err:
        raise OracleFailureError("Computation of CDD polyhedron failed due to numerical inconsistency") from err


def get_cdd_polyhedron_from_Ab(A, b):
    """Get CDD polyhedron in inequality form from given (A, b)

    Args:
        A (numpy.ndarray): Inequality coefficient matrix A
        b (numpy.ndarray): Inequality coefficient vector b

    Raises:
        OracleFailureError: cdd failed due to numerical inconsistency in (A, b)

    Returns:
        cdd.Polyhedron: CDD Polyhedron
    """
    # cdd uses [b, -A] for b - Ax >= 0
    b_mA = np.hstack((np.array([b]).T, -A)).tolist()
    H_cdd = cdd.matrix_from_array(b_mA, rep_type=cdd.RepType.INEQUALITY)
    try:
        return cdd.polyhedron_from_matrix(H_cdd)
    except RuntimeError as err:
        raise OracleFailureError("Computation of CDD polyhedron failed due to numerical inconsistency") from err


def enumerate_vertices(A, b):
    r"""Enumerate the vertices of :math:`\{x\ |\ Ax\leq b\}` using cdd.

    Args:
        A (numpy.ndarray): Inequality coefficient matrix (m times n)
        b (numpy.ndarray): Inequality constants (m,)

    Raises:
        OracleFailureError: cdd failed

    Returns:
        tuple: A tuple with two items:
            #. V (numpy.ndarray): Vertices as rows (N times n). N is zero when the system is infeasible.
            #. has_rays (bool): True when the enumeration yielded rays or lines, i.e., the polyhedron is unbounded.

    Notes:
        For a polyhedron described as :math:`\text{conv}(v_1, ..., v_N) + \text{nonneg}(r_1, ..., r_s)`, the generator
        matrix in cdd is [t V] where t is 1 for vertices and 0 for rays.
    """
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    cdd_polyhedron = get_cdd_polyhedron_from_Ab(A, b)
    try:
        tV_cdd_matrix = cdd.copy_generators(cdd_polyhedron)  # Perform vertex enumeration
    except RuntimeError as err:
        raise OracleFailureError("Vertex enumeration failed!") from err
    tV = np.array(tV_cdd_matrix.array, dtype=float)
    if tV.size == 0:
        return np.empty((0, A.shape[1])), False
    is_vertex = np.abs(tV[:, 0]) > PYREACHSET_ZERO
    has_rays = bool((~is_vertex).any())
    V = tV[is_vertex, 1:] / tV[is_vertex, :1]
    return V, has_rays


def enumerate_facets(V):
    r"""Enumerate the facets of the convex hull of the rows of V using cdd.

    Args:
        V (numpy.ndarray): Matrix of points (N times n), N >= 1.

    Raises:
        OracleFailureError: cdd failed

    Returns:
        tuple: A tuple with two items (A, b) such that the convex hull is :math:`\{x\ |\ Ax\leq b\}`.

    Notes:
        cdd reports the implicit equalities of a lower-dimensional hull in its linearity set. Each equality
        :math:`a^\top x = b` is returned as the pair :math:`a^\top x\leq b` and :math:`-a^\top x\leq -b`. The trivial
        row :math:`0\leq 1` that cdd may emit is skipped.
    """
    V = np.asarray(V, dtype=float)
    cdd_polyhedron = get_cdd_polyhedron_from_V(V)
    try:
        H_cdd_matrix = cdd.copy_inequalities(cdd_polyhedron)
        cdd.matrix_canonicalize(H_cdd_matrix)  # Identify linear equalities and remove redundancies
    except RuntimeError as err:
        raise OracleFailureError("Facet enumeration failed!") from err
    H_cdd_array = np.array(H_cdd_matrix.array, dtype=float)
    if H_cdd_array.size == 0:
        raise OracleFailureError("Did not expect facet list to be empty after minimization!")
    A_list, b_list = [], []
    for index, row in enumerate(H_cdd_array):
        b_row, A_row = row[0], -row[1:]
        if (np.abs(A_row) <= PYREACHSET_ZERO).all():
            continue
        A_list.append(A_row)
        b_list.append(b_row)
        if index in H_cdd_matrix.lin_set:
            A_list.append(-A_row)
            b_list.append(-b_row)
    return np.array(A_list).reshape((-1, V.shape[1])), np.array(b_list)


def extreme_points(V):
    """Remove the points that are not extreme points of the convex hull of the rows of V.

    Args:
        V (numpy.ndarray): Matrix of points (N times n)

    Raises:
        OracleFailureError: qhull or cdd failed

    Returns:
        numpy.ndarray: Extreme points as rows

    Notes:
        Use qhull when the points span the ambient space, min/max in one dimension, and cdd otherwise.
    """
    V = np.atleast_2d(np.asarray(V, dtype=float))
    n_points, n_dim = V.shape
    if n_points <= 1:
        return V.copy()
    elif n_dim == 1:
        V_minimal = np.vstack((np.min(V, keepdims=True), np.max(V, keepdims=True)))
        if np.diff(V_minimal, axis=0) <= PYREACHSET_ZERO:
            # Extrema are same. So pick only the top row.
            return V_minimal[:1, :]
        return V_minimal
    delta_points = V[1:] - V[0]
    delta_points[abs(delta_points) <= PYREACHSET_ZERO] = 0
    if n_points > n_dim and np.linalg.matrix_rank(delta_points) == n_dim:
        try:
            # Indices of the unique points forming the convex hull
            return V[ConvexHull(V).vertices, :]
        except QhullError as err:
            raise OracleFailureError("Computation of convex hull with qhull failed!") from err
    try:
        cdd_polyhedron = get_cdd_polyhedron_from_V(V)
        tV_cdd_matrix = cdd.copy_generators(cdd_polyhedron)
        cdd.matrix_canonicalize(tV_cdd_matrix)  # Minimize redundant points
    except RuntimeError as err:
        raise OracleFailureError("Computation of extreme points with cdd failed!") from err
    return _prune_close_points(np.array(tV_cdd_matrix.array, dtype=float)[:, 1:])


def _prune_close_points(V):
    """Skip any point that has another point (down in the list) that is close to it"""
    n_points = V.shape[0]
    kept_points = []
    for ind_1 in range(n_points):
        if all(np.linalg.norm(V[ind_1, :] - V[ind_2, :]) > PYREACHSET_ZERO_CDD for ind_2 in range(ind_1 + 1, n_points)):
            kept_points.append(V[ind_1, :])
    return np.array(kept_points).reshape((-1, V.shape[1]))
