# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Compute polytopic overapproximations of convex sets using only their support vectors
# Coverage: The recursion cap is reached only for sets whose boundary can not be resolved in floating point.

import warnings

import numpy as np

from pyreachset.common import sanitize_points
from pyreachset.common.constants import (
    OVERAPPROXIMATION_INITIAL_DIRECTIONS,
    OVERAPPROXIMATION_MAX_DEPTH,
    PYREACHSET_ZERO,
)
from pyreachset.common.exceptions import DimensionMismatchError, InvalidParameterError
from pyreachset.HPolytope import HPolytope
from pyreachset.Hyperrectangle import Hyperrectangle
from pyreachset.LinearConstraint import LinearConstraint


def _cross(u, v):
    """Private function to compute the z-component of the cross product of two vectors in R^2"""
    return u[0] * v[1] - u[1] * v[0]


def _intersection_of_supporting_lines(d1, p1, d2, p2):
    """Private function to compute the point q with d1 q = d1 p1 and d2 q = d2 p2 (None when the lines are parallel)"""
    if abs(_cross(d1, d2)) <= PYREACHSET_ZERO:
        return None
    return np.linalg.solve(np.vstack((d1, d2)), np.array([d1 @ p1, d2 @ p2]))


def _deviation(d1, p1, d2, p2):
    r"""Private function to bound the distance between the set boundary and the polygon between two support vectors.

    Notes:
        The set boundary between p1 and p2 lies in the triangle formed by p1, p2, and the intersection q of the
        supporting lines at p1 and p2. The distance of q from the chord p1p2 bounds the distance of the boundary from
        the polygon edge.
    """
    chord = p2 - p1
    chord_length = np.linalg.norm(chord)
    if chord_length <= PYREACHSET_ZERO:
        # p1 and p2 coincide, and the supporting lines meet there
        return 0.0
    q = _intersection_of_supporting_lines(d1, p1, d2, p2)
    if q is None:
        return 0.0
    return abs(_cross(chord, q - p1)) / chord_length


def _refine(S, d1, p1, d2, p2, epsilon, depth, accepted_directions):
    """Private function to refine the polygon between two consecutive (counter-clockwise) support directions"""
    deviation = _deviation(d1, p1, d2, p2)
    if deviation <= epsilon or deviation <= PYREACHSET_ZERO:
        accepted_directions.append((d1, p1))
        return
    elif depth >= OVERAPPROXIMATION_MAX_DEPTH:
        warnings.warn(
            f"Overapproximation stopped at the maximum refinement depth {OVERAPPROXIMATION_MAX_DEPTH:d} with a "
            f"deviation of {deviation:1.2e} (> {epsilon:1.2e})!",
            UserWarning,
        )
        accepted_directions.append((d1, p1))
        return
    d_mid = d1 + d2
    d_mid = d_mid / np.linalg.norm(d_mid)
    p_mid = S.support_vector(d_mid)
    _refine(S, d1, p1, d_mid, p_mid, epsilon, depth + 1, accepted_directions)
    _refine(S, d_mid, p_mid, d2, p2, epsilon, depth + 1, accepted_directions)


def _remove_directionally_redundant_constraints(accepted_directions):
    """Private function to drop a constraint whenever its two neighbors already meet inside it.

    Notes:
        The neighbors are used only when they turn counter-clockwise by less than pi, so that they enclose the polygon
        near the constraint in between. The pass repeats until no constraint is removed, and keeps at least three.
    """
    constraints = [(d, float(d @ p)) for d, p in accepted_directions]
    removed_some_constraint = True
    while removed_some_constraint and len(constraints) > 3:
        removed_some_constraint = False
        n_constraints = len(constraints)
        for index in range(n_constraints):
            d_prev, b_prev = constraints[index - 1]
            d_index, b_index = constraints[index]
            d_next, b_next = constraints[(index + 1) % n_constraints]
            if _cross(d_prev, d_next) <= PYREACHSET_ZERO:
                continue
            q = np.linalg.solve(np.vstack((d_prev, d_next)), np.array([b_prev, b_next]))
            if d_index @ q <= b_index + PYREACHSET_ZERO:
                del constraints[index]
                removed_some_constraint = True
                break
    return constraints


def overapproximate(S, epsilon):
    r"""Overapproximate a two-dimensional convex set by a polygon within a given error bound.

    Args:
        S (Hyperrectangle | HPolytope | VPolytope | Ellipsoid): Bounded, nonempty, two-dimensional convex set. Only its
            support vector is used.
        epsilon (float): Error bound. Must be positive.

    Raises:
        DimensionMismatchError: S is not two-dimensional
        InvalidParameterError: epsilon is not a positive number
        InfeasibleError: S is empty
        UnboundedError: S is unbounded

    Returns:
        HPolytope: Polygon :math:`\mathcal{R}\supseteq S` with the constraints :math:`d_i^\top x\leq \rho_S(d_i)`
        listed counter-clockwise starting from :math:`e_1`. Every point of :math:`\mathcal{R}` is within epsilon of S.

    Notes:
        We start from the directions :math:`e_1, e_2, -e_1, -e_2`. For every pair of consecutive directions, we bound
        the deviation of the boundary of S from the chord between the two support vectors (see :func:`_deviation`).
        When the deviation exceeds epsilon, we add the normalized bisector of the two directions and refine both
        halves. Finally, constraints whose neighbors already meet inside them are removed. The recursion depth is
        capped at OVERAPPROXIMATION_MAX_DEPTH, and reaching the cap raises a UserWarning.
    """
    if S.dim != 2:
        raise DimensionMismatchError(f"Expected a two-dimensional set. Got a {S.dim:d}-dimensional set!")
    try:
        epsilon = float(epsilon)
    except (TypeError, ValueError) as err:
        raise InvalidParameterError(f"Expected epsilon to be a positive number. Got {epsilon}!") from err
    if np.isnan(epsilon) or epsilon <= 0:
        raise InvalidParameterError(f"Expected epsilon to be a positive number. Got {epsilon}!")

    initial_directions = np.array(OVERAPPROXIMATION_INITIAL_DIRECTIONS, dtype=float)
    initial_support_vectors = S.extreme(initial_directions)
    n_initial_directions = initial_directions.shape[0]
    accepted_directions = []
    for index in range(n_initial_directions):
        next_index = (index + 1) % n_initial_directions
        _refine(
            S,
            initial_directions[index],
            initial_support_vectors[index],
            initial_directions[next_index],
            initial_support_vectors[next_index],
            epsilon,
            0,
            accepted_directions,
        )
    constraints = _remove_directionally_redundant_constraints(accepted_directions)
    return HPolytope([LinearConstraint(d, b) for d, b in constraints])


def overapproximate_with_directions(S, directions):
    r"""Overapproximate a convex set by the polytope :math:`\{x\ |\ d_i^\top x\leq \rho_S(d_i)\}` for the template
    directions :math:`d_i`.

    Args:
        S (set): Nonempty convex set providing a support function
        directions (array_like): Template directions. Matrix (N times S.dim), where each row is a direction.

    Raises:
        DimensionMismatchError: directions do not have S.dim columns
        InfeasibleError: S is empty
        UnboundedError: S is unbounded along some direction

    Returns:
        HPolytope: Polytope with one supporting constraint per template direction (in the given order)
    """
    directions, _ = sanitize_points(directions, S.dim)
    support_function_values = S.support(directions)[0]
    return HPolytope(A=directions, b=support_function_values)


def overapproximate_with_box(S):
    r"""Compute the tightest axis-aligned hyperrectangle containing the set.

    Args:
        S (set): Nonempty bounded convex set providing a support function

    Raises:
        InfeasibleError: S is empty
        UnboundedError: S is unbounded

    Returns:
        Hyperrectangle: Box whose bounds are the support function evaluations along :math:`\pm e_i`

    Notes:
        This function evaluates the support function of S along 2 * S.dim directions.
    """
    support_function_values = S.support(np.vstack((np.eye(S.dim), -np.eye(S.dim))))[0]
    return Hyperrectangle(lb=-support_function_values[S.dim :], ub=support_function_values[: S.dim])
