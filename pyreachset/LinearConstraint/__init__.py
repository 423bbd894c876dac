# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the LinearConstraint class (a single halfspace)

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from pyreachset.common import (
    convex_set_extreme,
    convex_set_support,
    convex_set_support_function,
    convex_set_support_vector,
    is_convex_set,
    sanitize_point,
    sanitize_points,
)
from pyreachset.common.constants import PYREACHSET_ZERO
from pyreachset.common.exceptions import InvalidParameterError, UnboundedError
from pyreachset.common.operations_binary import cartesian_product, intersection, minkowski_sum


class LinearConstraint:
    r"""LinearConstraint class for the halfspace :math:`\{x\ |\ a^\top x \leq b\}`.

    Args:
        a (Sequence[float] | np.ndarray): Normal vector of the halfspace. Must be a nonzero 1D array.
        b (float): Constant of the halfspace.

    Raises:
        InvalidParameterError: a is not convertible into a 1D float array, a is zero, or b is not a finite-or-inf float
    """

    def __init__(self, a: Sequence[float] | np.ndarray, b: float) -> None:
        """Constructor for LinearConstraint class"""
        self._type_of_set: str = "LinearConstraint"
        try:
            a = np.atleast_1d(np.squeeze(a)).astype(float)
            b = float(np.squeeze(b))
        except (TypeError, ValueError) as err:
            raise InvalidParameterError(
                f"Expected a to be a 1D float array and b to be a float. Got a: {a} and b: {b}!"
            ) from err
        if a.ndim != 1 or a.size == 0:
            raise InvalidParameterError(f"Expected a to be a nonempty 1D array! Got {np.array2string(a):s}.")
        elif np.any(np.isnan(a)) or np.any(np.isinf(a)) or np.isnan(b):
            raise InvalidParameterError("Expected a to be finite and b to be free from NaN!")
        elif np.linalg.norm(a) <= PYREACHSET_ZERO:
            raise InvalidParameterError("Expected a nonzero normal vector for the linear constraint!")
        self._a: np.ndarray = a
        self._b: float = b

    @property
    def type_of_set(self) -> str:
        """Return the type of set

        Returns:
            str: Type of the set
        """
        return self._type_of_set

    @property
    def a(self) -> np.ndarray:
        """Normal vector of the halfspace"""
        return self._a

    @property
    def b(self) -> float:
        """Constant of the halfspace"""
        return self._b

    @property
    def dim(self) -> int:
        """Dimension of the halfspace"""
        return self._a.size

    @property
    def is_empty(self) -> bool:
        """A halfspace with a nonzero normal is never empty"""
        return False

    @property
    def is_bounded(self) -> bool:
        """A halfspace is unbounded in every dimension, including one"""
        return False

    def evaluate(self, x: Sequence[float] | np.ndarray) -> float:
        r"""Evaluate :math:`a^\top x - b`, which is nonpositive exactly when x satisfies the constraint.

        Args:
            x (Sequence[float] | np.ndarray): Point of length self.dim

        Raises:
            DimensionMismatchError: Length of x differs from self.dim

        Returns:
            float: Constraint value at x
        """
        x = sanitize_point(x, self.dim)
        return float(self._a @ x - self._b)

    def contains(self, Q: Any) -> bool | np.ndarray:
        """Check containment of a point, a collection of points (rows), or a set in the halfspace.

        Args:
            Q (array_like | set): Point, matrix of points arranged row-wise, or a set of the same dimension

        Raises:
            DimensionMismatchError: Mismatch in dimensions

        Returns:
            bool | numpy.ndarray: Boolean for a single point or a set, and a boolean array for a collection of points.

        Notes:
            A set Q lies in the halfspace when its support function along a is at most b.
        """
        if is_convex_set(Q):
            from pyreachset.common.operations_binary import contains_set

            return contains_set(self, Q)
        points, is_single_point = sanitize_points(Q, self.dim)
        is_contained = points @ self._a - self._b <= PYREACHSET_ZERO
        if is_single_point:
            return bool(is_contained[0])
        return is_contained

    __contains__ = contains

    def constraints_list(self) -> list[LinearConstraint]:
        """Constraints defining the set, i.e., [self]"""
        return [self]

    def _compute_support_function_single_eta(self, eta: np.ndarray) -> tuple[float, np.ndarray]:
        """Private function to compute the support of a halfspace. It is finite only along positive multiples of a"""
        eta_norm = np.linalg.norm(eta)
        a_norm = np.linalg.norm(self._a)
        if eta_norm <= PYREACHSET_ZERO:
            raise UnboundedError("Support vector of a halfspace along the zero direction is not unique!")
        elif abs(eta @ self._a - eta_norm * a_norm) > PYREACHSET_ZERO * eta_norm * a_norm:
            raise UnboundedError("Halfspace is unbounded along the given direction!")
        # Closest point of the hyperplane to the origin
        support_vector = self._a * self._b / (a_norm**2)
        return float(eta @ support_vector), support_vector

    support = convex_set_support
    extreme = convex_set_extreme
    support_vector = convex_set_support_vector
    support_function = convex_set_support_function

    def copy(self) -> LinearConstraint:
        """Create a copy of the linear constraint"""
        return self.__class__(self._a.copy(), self._b)

    intersection = intersection
    cartesian_product = cartesian_product
    minkowski_sum = minkowski_sum
    __add__ = minkowski_sum

    def __eq__(self, Q: object) -> bool:
        """Two linear constraints are equal when they have the same normal and constant (up to PYREACHSET_ZERO)"""
        if not isinstance(Q, LinearConstraint):
            return NotImplemented
        return (
            self.dim == Q.dim
            and bool(np.all(np.abs(self._a - Q.a) <= PYREACHSET_ZERO))
            and abs(self._b - Q.b) <= PYREACHSET_ZERO
        )

    __hash__ = None

    def __str__(self) -> str:
        return f"LinearConstraint in R^{self.dim:d}"

    def __repr__(self) -> str:
        return f"LinearConstraint(a={np.array2string(self._a):s}, b={self._b:g})"


HalfSpace = LinearConstraint
