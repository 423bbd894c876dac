# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the EmptySet class (distinguished empty set of a given dimension)

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from pyreachset.common import is_convex_set, sanitize_point, sanitize_points
from pyreachset.common.exceptions import DimensionMismatchError, InfeasibleError
from pyreachset.common.operations_binary import cartesian_product, convex_hull, intersection, minkowski_sum


class EmptySet:
    """EmptySet class for the empty subset of R^dim.

    Args:
        dim (int): Dimension of the ambient space

    Notes:
        Combinators return an EmptySet when their result has no point. It is bounded, contains no point, and has no
        support vector.
    """

    def __init__(self, dim: int) -> None:
        """Constructor for EmptySet class"""
        self._type_of_set: str = "EmptySet"
        self._dim: int = int(dim)

    @property
    def type_of_set(self) -> str:
        """Return the type of set

        Returns:
            str: Type of the set
        """
        return self._type_of_set

    @property
    def dim(self) -> int:
        """Dimension of the ambient space"""
        return self._dim

    @property
    def is_empty(self) -> bool:
        """Always True"""
        return True

    @property
    def is_bounded(self) -> bool:
        """Always True"""
        return True

    def constraints_list(self) -> list:
        """An empty set is not described by a list of constraints here, so this raises InfeasibleError"""
        raise InfeasibleError("EmptySet has no constraint representation!")

    def vertices_list(self) -> list[np.ndarray]:
        """An empty set has no vertices"""
        return []

    def _raise_error_on_support(self, direction: Any) -> None:
        """Private function that validates the direction and then reports the empty set"""
        sanitize_points(direction, self.dim)
        raise InfeasibleError("Can not compute the support of an empty set!")

    def support(self, eta: Sequence[float] | Sequence[Sequence[float]] | np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Support of an empty set is undefined. Raises InfeasibleError (or DimensionMismatchError)."""
        self._raise_error_on_support(eta)

    def extreme(self, eta: Sequence[float] | Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
        """Support of an empty set is undefined. Raises InfeasibleError (or DimensionMismatchError)."""
        self._raise_error_on_support(eta)

    def support_vector(self, direction: Sequence[float] | np.ndarray) -> np.ndarray:
        """Support of an empty set is undefined. Raises InfeasibleError (or DimensionMismatchError)."""
        sanitize_point(direction, self.dim, name="direction")
        raise InfeasibleError("Can not compute the support vector of an empty set!")

    def support_function(self, direction: Sequence[float] | np.ndarray) -> float:
        """Support of an empty set is undefined. Raises InfeasibleError (or DimensionMismatchError)."""
        sanitize_point(direction, self.dim, name="direction")
        raise InfeasibleError("Can not compute the support function of an empty set!")

    def contains(self, Q: Any) -> bool | np.ndarray:
        """An empty set contains no point, and contains only empty sets.

        Args:
            Q (array_like | set): Point, matrix of points arranged row-wise, or a set of the same dimension

        Raises:
            DimensionMismatchError: Mismatch in dimensions

        Returns:
            bool | numpy.ndarray: Boolean for a single point or a set, and a boolean array for a collection of points.
        """
        if is_convex_set(Q):
            if Q.dim != self.dim:
                raise DimensionMismatchError(f"Mismatch in dimensions (self.dim: {self.dim:d} and Q.dim: {Q.dim:d})")
            return bool(Q.is_empty)
        points, is_single_point = sanitize_points(Q, self.dim)
        if is_single_point:
            return False
        return np.zeros((points.shape[0],), dtype=bool)

    __contains__ = contains

    def to_vrep(self):
        """VPolytope without vertices"""
        from pyreachset.VPolytope import VPolytope

        return VPolytope(dim=self.dim)

    def copy(self) -> EmptySet:
        """Create a copy of the empty set"""
        return self.__class__(self.dim)

    intersection = intersection
    cartesian_product = cartesian_product
    convex_hull = convex_hull
    minkowski_sum = minkowski_sum
    __add__ = minkowski_sum

    def __eq__(self, Q: object) -> bool:
        if not isinstance(Q, EmptySet):
            return NotImplemented
        return self.dim == Q.dim

    __hash__ = None

    def __str__(self) -> str:
        return f"EmptySet in R^{self.dim:d}"

    __repr__ = __str__
