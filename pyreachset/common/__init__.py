# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose: Describe various methods that are common to different set representations.

import numpy as np

from pyreachset.common.exceptions import DimensionMismatchError, InvalidParameterError


def check_matrices_are_equal_ignoring_row_order(A, B):
    """Check matrices are equal while ignoring row order

    Args:
        A (array_like): Matrix 1
        B (array_like): Matrix 2

    Returns:
        bool: A == B

    Notes:
        isclose does element-wise comparison, all with axis=1, provides a row-wise test, and finally any checks for some
        row where row-wise match is true
    """
    A = np.array(A).astype(float)
    B = np.array(B).astype(float)
    return A.shape == B.shape and sum([np.any(np.all(np.isclose(row, B), axis=1)) for row in A]) == B.shape[0]


def sign_cadlag(x):
    """Element-wise sign with the convention that zero maps to +1.

    Args:
        x (array_like): Scalar or array

    Returns:
        numpy.ndarray: Array of the same shape as x with entries in {-1.0, 1.0}
    """
    return np.where(np.asarray(x, dtype=float) >= 0, 1.0, -1.0)


def sanitize_point(x, dim, name="point"):
    """Sanitize a point (or a direction) into a 1D numpy array of float with dim entries.

    Args:
        x (array_like): Point or direction
        dim (int): Expected number of entries
        name (str, optional): Name used in error messages. Defaults to "point".

    Raises:
        InvalidParameterError: x is not convertible into a float array or has NaNs
        DimensionMismatchError: x is not a vector with dim entries

    Returns:
        numpy.ndarray: 1D numpy array of float
    """
    try:
        x = np.atleast_1d(np.squeeze(x)).astype(float)
    except (TypeError, ValueError) as err:
        raise InvalidParameterError(f"Expected {name} to be convertible into a float array. Got {x}!") from err
    if x.ndim != 1 or x.size != dim:
        raise DimensionMismatchError(f"a {x.shape}-shaped {name} is incompatible with a {dim:d}-dimensional set")
    elif np.any(np.isnan(x)):
        raise InvalidParameterError(f"Expected {name} to be free from NaNs. Got {np.array2string(x):s}")
    return x


def sanitize_points(points, dim):
    """Sanitize a point or a collection of points (each row is a point) into a 2D numpy array.

    Args:
        points (array_like): Point or matrix (N times dim) of points
        dim (int): Expected number of columns

    Raises:
        InvalidParameterError: points is not convertible into a 2D float array
        DimensionMismatchError: points do not have dim columns

    Returns:
        tuple: A tuple with two items:
            #. points (numpy.ndarray): 2D numpy array with a point in each row
            #. is_single_point (bool): True when a single point (1D array_like) was provided
    """
    try:
        points_arr = np.asarray(points, dtype=float)
    except (TypeError, ValueError) as err:
        raise InvalidParameterError(f"Expected points to be convertible into a float array. Got {points}!") from err
    is_single_point = points_arr.ndim <= 1
    points_arr = np.atleast_2d(points_arr)
    if points_arr.ndim != 2 or (dim >= 0 and points_arr.shape[1] != dim):
        raise DimensionMismatchError(
            f"Mismatch in dimensions (set dim: {dim:d} and points: {points_arr.shape})"
        )
    return points_arr, is_single_point


def sanitize_Ab(A, b):
    """Sanitize and check if (`A`, `b`) to make a valid halfspace combination

    Args:
        A (array_like): Can be numpy arrays, list, or tuples
        b (array_like): Can be numpy arrays, list, or tuples

    Raises:
        InvalidParameterError: A is not 2D numpy array free from NaNs and inf
        InvalidParameterError: b is not 1D numpy array free from NaNs
        DimensionMismatchError: A and b have different number of rows

    Returns:
        (numpy.ndarray, numpy.ndarray): 2D numpy arrays that is sanitized for `A`, and 1D numpy array that is sanitized
            for `b`
    """
    try:
        A = np.atleast_2d(A).astype(float)
    except (TypeError, ValueError) as err:
        raise InvalidParameterError(f"Can not convert A into a float array. Got {A}") from err
    try:
        b = np.atleast_1d(np.squeeze(b)).astype(float)
    except (TypeError, ValueError) as err:
        raise InvalidParameterError(f"Can not convert b into a float array. Got {b}") from err
    if A.ndim != 2 or b.ndim != 1:
        raise InvalidParameterError(
            "Expected A, b to be a 2D, 1D arrays! "
            f"Got A: {np.array2string(np.array(A)):s} and b: {np.array2string(np.array(b)):s}"
        )
    elif np.any(np.isnan(A)) or np.any(np.isnan(b)):
        raise InvalidParameterError(
            f"Expected A, b to be from NaNs. Got {np.array2string(np.array(A)):s}, {np.array2string(np.array(b)):s}"
        )
    elif np.any(np.isinf(A)):
        raise InvalidParameterError(f"Expected A to be from inf. Got {np.array2string(np.array(A)):s}!")
    elif A.shape[0] != b.shape[0]:
        raise DimensionMismatchError(f"A and b has different number of rows! A: {A.shape[0]:d} and b: {b.shape[0]:d}.")
    return A, b


def convex_set_support(self, eta, **kwargs):
    r"""Evaluates the support function and support vector of a set.

    The support function of a set :math:`\mathcal{P}` is defined as :math:`\rho_{\mathcal{P}}(\eta) =
    \max_{x\in\mathcal{P}} \eta^\top x`. The support vector of a set :math:`\mathcal{P}` is defined as
    :math:`\nu_{\mathcal{P}}(\eta) = \arg\max_{x\in\mathcal{P}} \eta^\top x`.

    Args:
        eta (array_like): Support directions. Matrix (N times self.dim), where each row is a support direction.

    Raises:
        DimensionMismatchError: Mismatch in eta dimension
        InfeasibleError: Set is empty
        UnboundedError: Set is unbounded along some direction in eta

    Returns:
        tuple: A tuple with two items:
            1. support_function_evaluations (numpy.ndarray): Support function evaluation(s) as a 1D numpy.ndarray.
               Vector (N,) with as many rows as eta.
            2. support_vectors (numpy.ndarray): Support vectors as a 2D numpy.ndarray. Matrix N x self.dim with as many
               rows as eta.
    """
    eta, _ = sanitize_points(eta, self.dim)
    support_function_list = []
    support_vector_list = []
    for single_eta in eta:
        support_function, support_vector = self._compute_support_function_single_eta(single_eta, **kwargs)
        support_function_list.append(support_function)
        support_vector_list.append(support_vector)
    return np.array(support_function_list), np.array(support_vector_list)


def convex_set_extreme(self, eta, **kwargs):
    """Wrapper for :meth:`support` to compute the extreme point.

    Args:
        eta (array_like): Support directions. Matrix (N times self.dim), where each row is a support direction.

    Returns:
        numpy.ndarray: Support vector evaluation(s) as a 2D numpy.ndarray. The array has as many rows as eta.
    """
    return self.support(eta, **kwargs)[1]


def convex_set_support_vector(self, direction, **kwargs):
    """Compute a support vector of the set along a single direction, i.e., a point of the set maximizing the inner
    product with the direction.

    Args:
        direction (array_like): Support direction. Vector (self.dim,).

    Raises:
        DimensionMismatchError: Length of direction differs from self.dim
        InfeasibleError: Set is empty
        UnboundedError: Set is unbounded along direction

    Returns:
        numpy.ndarray: Support vector. Vector (self.dim,).
    """
    direction = sanitize_point(direction, self.dim, name="direction")
    return self._compute_support_function_single_eta(direction, **kwargs)[1]


def convex_set_support_function(self, direction, **kwargs):
    """Evaluate the support function of the set along a single direction.

    Args:
        direction (array_like): Support direction. Vector (self.dim,).

    Raises:
        DimensionMismatchError: Length of direction differs from self.dim
        InfeasibleError: Set is empty
        UnboundedError: Set is unbounded along direction

    Returns:
        float: Support function evaluation
    """
    direction = sanitize_point(direction, self.dim, name="direction")
    return float(self._compute_support_function_single_eta(direction, **kwargs)[0])


def is_convex_set(Q):
    """Check if the object is one of the set types provided by pyreachset"""
    return hasattr(Q, "type_of_set")


def is_linear_constraint(Q):
    """Check if the set is a linear constraint (halfspace)"""
    return getattr(Q, "type_of_set", None) == "LinearConstraint"


def is_hyperrectangle(Q):
    """Check if the set is a hyperrectangle"""
    return getattr(Q, "type_of_set", None) == "Hyperrectangle"


def is_hpolytope(Q):
    """Check if the set is a polytope in H-Rep"""
    return getattr(Q, "type_of_set", None) == "HPolytope"


def is_vpolytope(Q):
    """Check if the set is a polytope in V-Rep"""
    return getattr(Q, "type_of_set", None) == "VPolytope"


def is_empty_set(Q):
    """Check if the set is the empty-set marker"""
    return getattr(Q, "type_of_set", None) == "EmptySet"


def is_ellipsoid(Q):
    """Check if the set is an ellipsoid"""
    return getattr(Q, "type_of_set", None) == "Ellipsoid"


def has_constraints_list(Q):
    """Check if the set provides its linear constraints without an enumeration"""
    return is_linear_constraint(Q) or is_hyperrectangle(Q) or is_hpolytope(Q)
