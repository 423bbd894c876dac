# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the VPolytope class (polytope in vertex representation)

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
)
from pyreachset.common.constants import DEFAULT_CVXPY_ARGS_LP, VPOLYTOPE_SUPPORT_ALGORITHMS
from pyreachset.common.exceptions import DimensionMismatchError, InfeasibleError, InvalidParameterError
from pyreachset.common.operations_binary import cartesian_product, convex_hull, intersection, minkowski_sum
from pyreachset.common.oracles import enumerate_facets, extreme_points, is_in_convex_hull

if TYPE_CHECKING:
    from pyreachset.EmptySet import EmptySet
    from pyreachset.HPolytope import HPolytope


class VPolytope:
    r"""VPolytope class for the polytope :math:`\text{ConvexHull}(v_i)` with :math:`v_i` as the given vertices.

    Args:
        V (Sequence[Sequence[float]] | np.ndarray, optional): List of vertices of the polytope. The vertices are
            arranged row-wise, and their order is preserved. Vertices are neither deduplicated nor reduced to the
            extreme points (see :meth:`remove_redundant_vertices`). Defaults to no vertices.
        dim (int, optional): Dimension of the polytope when no vertex is given. Defaults to -1.
        cvxpy_args_lp (dict, optional): CVXPY arguments used for the hull membership LP. Defaults to
            DEFAULT_CVXPY_ARGS_LP.

    Raises:
        InvalidParameterError: V is not convertible into a 2D float array, or has NaN or inf
        DimensionMismatchError: Vertices have different lengths, or dim disagrees with the vertices
    """

    def __init__(
        self,
        V: Optional[Sequence[Sequence[float]] | np.ndarray] = None,
        *,
        dim: Optional[int] = None,
        cvxpy_args_lp: Optional[dict[str, Any]] = None,
    ) -> None:
        """Constructor for VPolytope class"""
        self._type_of_set: str = "VPolytope"
        self._cvxpy_args_lp: dict[str, Any] = dict(DEFAULT_CVXPY_ARGS_LP) if cvxpy_args_lp is None else cvxpy_args_lp
        if V is None or len(V) == 0:
            if dim is None and np.ndim(V) == 2:
                # Empty 2D array of shape (0, n) carries the dimension
                dim = np.shape(V)[1]
            self._dim: int = -1 if dim is None else int(dim)
            self._vertices: list[np.ndarray] = []
            return
        try:
            vertices = [np.atleast_1d(np.asarray(v, dtype=float)) for v in V]
        except (TypeError, ValueError) as err:
            raise InvalidParameterError("Expected V to be convertible into a list of 1D float arrays!") from err
        vertex_dim = vertices[0].size
        if any(v.ndim != 1 for v in vertices):
            raise InvalidParameterError("Expected V to have vertices arranged row-wise!")
        elif any(v.size != vertex_dim for v in vertices):
            raise DimensionMismatchError("Expected all vertices of V to have the same length!")
        elif dim is not None and dim != vertex_dim:
            raise DimensionMismatchError(f"Expected vertices of length {dim:d}. Got {vertex_dim:d}!")
        elif not all(np.isfinite(v).all() for v in vertices):
            raise InvalidParameterError("Expected V to be free from NaN and inf!")
        self._dim = vertex_dim
        self._vertices = vertices

    @property
    def type_of_set(self) -> str:
        """Return the type of set

        Returns:
            str: Type of the set
        """
        return self._type_of_set

    @property
    def dim(self) -> int:
        """Dimension of the polytope, i.e., the length of the first vertex (or the explicit dim, or -1)"""
        return self._dim

    @property
    def V(self) -> np.ndarray:
        """Vertices of the polytope, arranged row-wise. V is np.empty((0, max(self.dim, 0))) without vertices."""
        if self.n_vertices == 0:
            return np.empty((0, max(self.dim, 0)))
        return np.array(self._vertices)

    @property
    def n_vertices(self) -> int:
        """Number of vertices"""
        return len(self._vertices)

    @property
    def is_empty(self) -> bool:
        """A polytope in V-Rep is empty when it has no vertices"""
        return self.n_vertices == 0

    @property
    def is_bounded(self) -> bool:
        """A polytope in V-Rep is always bounded"""
        return True

    @property
    def cvxpy_args_lp(self) -> dict[str, Any]:
        """CVXPY arguments in use when solving a linear program"""
        return self._cvxpy_args_lp

    @cvxpy_args_lp.setter
    def cvxpy_args_lp(self, value: dict[str, Any]) -> None:
        """Update CVXPY arguments in use when solving a linear program"""
        self._cvxpy_args_lp = value

    def vertices_list(self) -> list[np.ndarray]:
        """List of the stored vertices (copies), in their order"""
        return [v.copy() for v in self._vertices]

    ##################
    # Support function
    ##################
    def _compute_support_function_single_eta(
        self, eta: np.ndarray, algorithm: str = "brute_force"
    ) -> tuple[float, np.ndarray]:
        """Private function to compute the support function and vector along a single direction.

        Notes:
            "brute_force" scans the vertices, and the first maximizer wins. "hrep" converts the polytope to H-Rep and
            solves an LP.
        """
        if algorithm == "hrep":
            support_function, support_vector = self.to_hrep()._compute_support_function_single_eta(eta)
            return support_function, support_vector
        support_function_values = self.V @ eta
        index = int(np.argmax(support_function_values))
        return float(support_function_values[index]), self._vertices[index].copy()

    def _raise_error_if_algorithm_is_unknown_or_empty(self, algorithm: str) -> None:
        """Private function to validate the algorithm name and the emptiness before any dimension check"""
        if algorithm not in VPOLYTOPE_SUPPORT_ALGORITHMS:
            raise InvalidParameterError(
                f"Unknown algorithm {algorithm} for the support vector! Expected one of {VPOLYTOPE_SUPPORT_ALGORITHMS}."
            )
        elif self.is_empty:
            raise InfeasibleError("Can not compute the support vector of an empty polytope (no vertices)!")

    def support(
        self, eta: Sequence[float] | Sequence[Sequence[float]] | np.ndarray, algorithm: str = "brute_force"
    ) -> tuple[np.ndarray, np.ndarray]:
        self._raise_error_if_algorithm_is_unknown_or_empty(algorithm)
        return convex_set_support(self, eta, algorithm=algorithm)

    support.__doc__ = convex_set_support.__doc__

    def extreme(
        self, eta: Sequence[float] | Sequence[Sequence[float]] | np.ndarray, algorithm: str = "brute_force"
    ) -> np.ndarray:
        self._raise_error_if_algorithm_is_unknown_or_empty(algorithm)
        return convex_set_extreme(self, eta, algorithm=algorithm)

    extreme.__doc__ = convex_set_extreme.__doc__

    def support_vector(self, direction: Sequence[float] | np.ndarray, algorithm: str = "brute_force") -> np.ndarray:
        self._raise_error_if_algorithm_is_unknown_or_empty(algorithm)
        return convex_set_support_vector(self, direction, algorithm=algorithm)

    support_vector.__doc__ = (convex_set_support_vector.__doc__ or "") + """
    Notes:
        Use algorithm="brute_force" (default) to scan the vertices, or algorithm="hrep" to solve an LP on the
        H-Rep. Any other algorithm raises InvalidParameterError.
    """

    def support_function(self, direction: Sequence[float] | np.ndarray, algorithm: str = "brute_force") -> float:
        self._raise_error_if_algorithm_is_unknown_or_empty(algorithm)
        return convex_set_support_function(self, direction, algorithm=algorithm)

    support_function.__doc__ = convex_set_support_function.__doc__

    ######################
    # Comparison operators
    ######################
    def contains(self, Q: Any) -> bool | np.ndarray:
        r"""Check containment of a point, a collection of points (rows), or a set in the polytope.

        Args:
            Q (array_like | set): Point, matrix of points arranged row-wise, or a set of the same dimension

        Raises:
            DimensionMismatchError: Mismatch in dimensions
            OracleFailureError: Unable to solve the membership LP

        Returns:
            bool | numpy.ndarray: Boolean for a single point or a set, and a boolean array for a collection of points.

        Notes:
            For each point :math:`y`, we solve the LP (using CVXPY) with decision variable :math:`\theta`,

            .. math::
                \text{minimize}    &\quad  \|y - V^\top \theta\|_\infty\\
                \text{subject to}  &\quad  \sum_i \theta_i = 1, \theta_i \geq 0

            and declare y to be contained when the optimal value is within PYREACHSET_ZERO. An empty polytope contains
            no point. A set Q is contained when the support function of Q is within the facets of self.
        """
        if is_convex_set(Q):
            from pyreachset.common.operations_binary import contains_set

            return contains_set(self, Q)
        points, is_single_point = sanitize_points(Q, self.dim)
        if self.is_empty:
            is_contained = np.zeros((points.shape[0],), dtype=bool)
        else:
            V = self.V
            is_contained = np.array([is_in_convex_hull(V, point, self.cvxpy_args_lp) for point in points], dtype=bool)
        if is_single_point:
            return bool(is_contained[0])
        return is_contained

    __contains__ = contains

    ##################
    # Unary operations
    ##################
    def to_hrep(self) -> HPolytope | EmptySet:
        """Determine the halfspace representation of the polytope using cdd.

        Raises:
            OracleFailureError: cdd failed

        Returns:
            HPolytope | EmptySet: Polytope in H-Rep. EmptySet of the same dimension when there are no vertices.

        Notes:
            Exactly one facet enumeration is performed. When the polytope is not full-dimensional, each implicit
            equality is returned as a pair of opposing inequalities.
        """
        from pyreachset.EmptySet import EmptySet
        from pyreachset.HPolytope import HPolytope

        if self.is_empty:
            return EmptySet(self.dim)
        A, b = enumerate_facets(self.V)
        return HPolytope(A=A, b=b, cvxpy_args_lp=self.cvxpy_args_lp)

    def to_vrep(self) -> VPolytope:
        """Return the polytope itself, since it is already in V-Rep"""
        return self

    def remove_redundant_vertices(self) -> VPolytope:
        """Return a new polytope with only the extreme points of self.

        Raises:
            OracleFailureError: qhull or cdd failed

        Returns:
            VPolytope: Polytope with the same convex hull and no redundant vertices

        Notes:
            Use qhull when the vertices span the space, cdd when they do not, and min/max in one dimension.
        """
        if self.is_empty:
            return self.__class__(dim=self.dim, cvxpy_args_lp=self.cvxpy_args_lp)
        return self.__class__(V=extreme_points(self.V), cvxpy_args_lp=self.cvxpy_args_lp)

    def copy(self) -> VPolytope:
        """Create a copy of the polytope"""
        if self.is_empty:
            return self.__class__(dim=self.dim, cvxpy_args_lp=self.cvxpy_args_lp)
        return self.__class__(V=self.vertices_list(), cvxpy_args_lp=self.cvxpy_args_lp)

    ####################
    # Binary operations
    ####################
    intersection = intersection
    cartesian_product = cartesian_product
    convex_hull = convex_hull
    minkowski_sum = minkowski_sum
    __add__ = minkowski_sum

    #########################
    # Polytope representation
    #########################
    def __str__(self) -> str:
        if self.is_empty:
            return f"VPolytope (empty) in R^{self.dim:d}"
        return f"VPolytope in R^{self.dim:d}"

    def __repr__(self) -> str:
        if self.n_vertices == 1:
            return f"{str(self):s}\n\tIn V-rep: 1 vertex"
        return f"{str(self):s}\n\tIn V-rep: {self.n_vertices:d} vertices"
