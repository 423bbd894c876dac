# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the Hyperrectangle class (axis-aligned box with closed-form operations)

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Sequence

import numpy as np

from pyreachset.common import (
    convex_set_extreme,
    convex_set_support,
    convex_set_support_function,
    convex_set_support_vector,
    is_convex_set,
    sanitize_points,
    sign_cadlag,
)
from pyreachset.common.constants import PYREACHSET_ZERO
from pyreachset.common.exceptions import DimensionMismatchError, InvalidParameterError
from pyreachset.common.operations_binary import cartesian_product, convex_hull, intersection, minkowski_sum
from pyreachset.Hyperrectangle.operations_unary import norm, radius, split, vertices, vertices_list
from pyreachset.LinearConstraint import LinearConstraint

if TYPE_CHECKING:
    from pyreachset.HPolytope import HPolytope
    from pyreachset.VPolytope import VPolytope


class Hyperrectangle:
    r"""Hyperrectangle class for the axis-aligned box :math:`\{x\ |\ \forall i, |x_i - c_i| \leq r_i\}`.

    Hyperrectangle object construction admits **one** of the following combinations:

    #. (center, radius) for a box centered at center with half-side lengths radius (positional or keyword), and
    #. (lb, ub) as keyword arguments for a box with bounds :math:`\{x\ |\ lb\leq x \leq ub\}`.

    Args:
        center (Sequence[float] | np.ndarray, optional): Center of the box. Must be 1D array.
        radius (Sequence[float] | np.ndarray, optional): Half-side lengths of the box. Must be 1D array of length as
            same as center with nonnegative entries.
        lb (Sequence[float] | np.ndarray, optional): Lower bounds of the box. When lb is provided, ub must also be
            provided.
        ub (Sequence[float] | np.ndarray, optional): Upper bounds of the box. When ub is provided, lb must also be
            provided.

    Raises:
        InvalidParameterError: Arguments provided is not one of [(center, radius), (lb, ub)]
        InvalidParameterError: Entries are not convertible into finite floats, or radius has negative entries (lb > ub)
        DimensionMismatchError: center and radius (lb and ub) have different lengths

    Notes:
        A zero radius is allowed along any dimension, so flat boxes and single points are valid hyperrectangles. Every
        operation of this class is closed-form and never calls a solver.
    """

    def __init__(
        self,
        center: Optional[Sequence[float] | np.ndarray] = None,
        radius: Optional[Sequence[float] | np.ndarray] = None,
        *,
        lb: Optional[Sequence[float] | np.ndarray] = None,
        ub: Optional[Sequence[float] | np.ndarray] = None,
    ) -> None:
        """Constructor for Hyperrectangle class."""
        self._type_of_set: str = "Hyperrectangle"
        center_and_radius_passed = center is not None and radius is not None
        lb_and_ub_passed = lb is not None and ub is not None
        if center_and_radius_passed and lb is None and ub is None:
            self._set_attributes_from_center_radius(center, radius)
        elif lb_and_ub_passed and center is None and radius is None:
            lb_arr, ub_arr = self._sanitize_pair(lb, ub, "lb", "ub")
            self._set_attributes_from_center_radius((lb_arr + ub_arr) / 2, (ub_arr - lb_arr) / 2)
        else:
            raise InvalidParameterError(
                "Got invalid arguments while defining a hyperrectangle. Please specify either (center, radius) or "
                "(lb, ub)."
            )

    @staticmethod
    def _sanitize_pair(first, second, first_name, second_name):
        """Private function to convert a pair of vectors into 1D float arrays of the same length"""
        try:
            first_arr = np.atleast_1d(np.squeeze(first)).astype(float)
            second_arr = np.atleast_1d(np.squeeze(second)).astype(float)
        except (TypeError, ValueError) as err:
            raise InvalidParameterError(
                f"Expected {first_name}, {second_name} to be convertible into 1D float numpy arrays"
            ) from err
        if first_arr.ndim != 1 or second_arr.ndim != 1:
            raise InvalidParameterError(f"Expected {first_name}, {second_name} to be 1D arrays!")
        elif first_arr.shape != second_arr.shape:
            raise DimensionMismatchError(
                f"Expected {first_name}, {second_name} to have the same length. Got "
                f"{first_name}: {np.array2string(first_arr):s} and {second_name}: {np.array2string(second_arr):s}!"
            )
        elif not (np.isfinite(first_arr).all() and np.isfinite(second_arr).all()):
            raise InvalidParameterError(f"Expected {first_name}, {second_name} to be finite!")
        return first_arr, second_arr

    def _set_attributes_from_center_radius(self, center, radius) -> None:
        """Protected method to set _center, _radius after validation"""
        center_arr, radius_arr = self._sanitize_pair(center, radius, "center", "radius")
        if np.any(radius_arr < 0):
            raise InvalidParameterError(
                f"Expected radius to have nonnegative entries. Got {np.array2string(radius_arr):s}!"
            )
        self._center: np.ndarray = center_arr
        self._radius: np.ndarray = radius_arr

    @property
    def type_of_set(self) -> str:
        """Return the type of set

        Returns:
            str: Type of the set
        """
        return self._type_of_set

    @property
    def dim(self) -> int:
        """Dimension of the hyperrectangle"""
        return self._center.size

    @property
    def center(self) -> np.ndarray:
        """Center of the hyperrectangle"""
        return self._center

    @property
    def radius_vector(self) -> np.ndarray:
        """Half-side lengths of the hyperrectangle"""
        return self._radius

    def radius_in_dimension(self, index: int) -> float:
        """Half-side length of the hyperrectangle along dimension index (0-based)"""
        return float(self._radius[index])

    def high(self, index: Optional[int] = None) -> np.ndarray | float:
        """Upper bound(s) of the hyperrectangle, center + radius.

        Args:
            index (int, optional): Dimension (0-based). When None, all upper bounds are returned. Defaults to None.

        Returns:
            numpy.ndarray | float: Upper bounds as a 1D array, or the upper bound along dimension index.
        """
        if index is None:
            return self._center + self._radius
        return float(self._center[index] + self._radius[index])

    def low(self, index: Optional[int] = None) -> np.ndarray | float:
        """Lower bound(s) of the hyperrectangle, center - radius.

        Args:
            index (int, optional): Dimension (0-based). When None, all lower bounds are returned. Defaults to None.

        Returns:
            numpy.ndarray | float: Lower bounds as a 1D array, or the lower bound along dimension index.
        """
        if index is None:
            return self._center - self._radius
        return float(self._center[index] - self._radius[index])

    @property
    def is_empty(self) -> bool:
        """A hyperrectangle is never empty"""
        return False

    @property
    def is_bounded(self) -> bool:
        """A hyperrectangle is always bounded"""
        return True

    @property
    def A(self) -> np.ndarray:
        r"""Inequality coefficient vectors `A` for the hyperrectangle :math:`\{Ax \leq b\}`, i.e., [I; -I]"""
        return np.vstack((np.eye(self.dim), -np.eye(self.dim)))

    @property
    def b(self) -> np.ndarray:
        r"""Inequality constants `b` for the hyperrectangle :math:`\{Ax \leq b\}`, i.e., [high; -low]"""
        return np.hstack((self.high(), -self.low()))

    @property
    def V(self) -> np.ndarray:
        """Vertices of the hyperrectangle, arranged row-wise"""
        return np.array(self.vertices_list()).reshape((-1, self.dim))

    def constraints_list(self) -> list[LinearConstraint]:
        """Constraints of the hyperrectangle: e_i x <= high(i) for every i, followed by -e_i x <= -low(i) for every i.

        Returns:
            list[LinearConstraint]: 2 * self.dim constraints
        """
        return [LinearConstraint(a, b) for a, b in zip(self.A, self.b)]

    def contains(self, Q: Any) -> bool | np.ndarray:
        r"""Check containment of a point, a collection of points (rows), or a set in the hyperrectangle.

        Args:
            Q (array_like | set): Point, matrix of points arranged row-wise, or a set of the same dimension

        Raises:
            DimensionMismatchError: Mismatch in dimensions

        Returns:
            bool | numpy.ndarray: Boolean for a single point or a set, and a boolean array for a collection of points.

        Notes:
            A point x is contained when :math:`|c_i - x_i| \leq r_i` for every i (up to PYREACHSET_ZERO). A set is
            contained when its support function along each of the 2 * self.dim box normals is within the box.
        """
        if is_convex_set(Q):
            from pyreachset.common.operations_binary import contains_set

            return contains_set(self, Q)
        points, is_single_point = sanitize_points(Q, self.dim)
        is_contained = np.all(np.abs(self._center - points) - self._radius <= PYREACHSET_ZERO, axis=1)
        if is_single_point:
            return bool(is_contained[0])
        return is_contained

    __contains__ = contains

    def _compute_support_function_single_eta(self, eta: np.ndarray) -> tuple[float, np.ndarray]:
        """Private function to compute the support vector center + sign(eta) * radius, with sign(0) = +1."""
        support_vector = self._center + sign_cadlag(eta) * self._radius
        return float(eta @ support_vector), support_vector

    support = convex_set_support
    extreme = convex_set_extreme
    support_vector = convex_set_support_vector
    support_function = convex_set_support_function

    ##################
    # Unary operations
    ##################
    vertices = vertices
    vertices_list = vertices_list
    norm = norm
    radius = radius
    split = split

    def copy(self) -> Hyperrectangle:
        """Create a copy of the hyperrectangle"""
        return self.__class__(center=self._center.copy(), radius=self._radius.copy())

    def to_hrep(self) -> HPolytope:
        """Convert the hyperrectangle into an HPolytope with the constraints in constraints_list()"""
        from pyreachset.HPolytope import HPolytope

        return HPolytope(self.constraints_list())

    def to_vrep(self) -> VPolytope:
        """Convert the hyperrectangle into a VPolytope with the vertices in vertices_list()"""
        from pyreachset.VPolytope import VPolytope

        return VPolytope(V=self.vertices_list())

    ####################
    # Binary operations
    ####################
    intersection = intersection
    cartesian_product = cartesian_product
    convex_hull = convex_hull
    minkowski_sum = minkowski_sum
    __add__ = minkowski_sum

    def __eq__(self, Q: object) -> bool:
        """Two hyperrectangles are equal when their centers and radii agree up to PYREACHSET_ZERO"""
        if not isinstance(Q, Hyperrectangle):
            return NotImplemented
        return (
            self.dim == Q.dim
            and bool(np.all(np.abs(self._center - Q.center) <= PYREACHSET_ZERO))
            and bool(np.all(np.abs(self._radius - Q.radius_vector) <= PYREACHSET_ZERO))
        )

    __hash__ = None

    def __str__(self) -> str:
        return f"Hyperrectangle in R^{self.dim:d}"

    def __repr__(self) -> str:
        return (
            f"Hyperrectangle in R^{self.dim:d}\n\tcenter: {np.array2string(self._center):s}"
            f"\n\tradius: {np.array2string(self._radius):s}"
        )
