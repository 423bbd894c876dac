# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the HPolytope class (polytope in halfspace representation)

from __future__ import annotations

import warnings
from typing import Any, Optional, Sequence

import numpy as np

from pyreachset.common import (
    convex_set_extreme,
    convex_set_support,
    convex_set_support_function,
    convex_set_support_vector,
    is_convex_set,
    sanitize_Ab,
    sanitize_points,
)
from pyreachset.common.constants import DEFAULT_CVXPY_ARGS_LP, DEFAULT_LP_BACKEND, LP_BACKENDS, PYREACHSET_ZERO
from pyreachset.common.exceptions import (
    DimensionMismatchError,
    InfeasibleError,
    InvalidParameterError,
    UnboundedError,
)
from pyreachset.common.operations_binary import cartesian_product, convex_hull, intersection, minkowski_sum
from pyreachset.common.oracles import LP_INFEASIBLE, LP_UNBOUNDED, solve_lp
from pyreachset.HPolytope.operations_unary import (
    compute_is_bounded,
    compute_is_empty,
    minimize_H_rep,
    remove_redundant_constraints,
    to_vrep,
    vertices_list,
)
from pyreachset.LinearConstraint import LinearConstraint


class HPolytope:
    r"""HPolytope class for the polyhedron :math:`\{x\ |\ a_i^\top x \leq b_i, i = 1, ..., m\}`.

    HPolytope object construction admits **one** of the following combinations:

    #. constraints, a sequence of LinearConstraint objects (positional or keyword), or nothing for a polytope without
       constraints,
    #. (A, b) as keyword arguments for the polytope :math:`\{x\ |\ Ax \leq b\}`.

    Args:
        constraints (Sequence[LinearConstraint], optional): Constraints of the polytope. The order is preserved.
        A (Sequence[Sequence[float]] | np.ndarray, optional): Inequality coefficient vectors stacked vertically. When A
            is provided, b must also be provided.
        b (Sequence[float] | np.ndarray, optional): Inequality constants. When b is provided, A must also be provided.
        lp_backend (str, optional): LP backend used for support vectors and probes ("highs" or "cvxpy"). Defaults to
            DEFAULT_LP_BACKEND.
        cvxpy_args_lp (dict, optional): CVXPY arguments used when lp_backend is "cvxpy". Defaults to
            DEFAULT_CVXPY_ARGS_LP.

    Raises:
        InvalidParameterError: Arguments provided is not one of [constraints, (A, b), NOTHING]
        InvalidParameterError: constraints has an element that is not a LinearConstraint, or unknown lp_backend
        InfeasibleError: (A, b) has a row with all zeros in A and negative b (or b is -np.inf)
        UserWarning: If some rows are removed from (A, b) due to all zeros in A or np.inf in b

    Notes:
        The polytope need not be bounded or nonempty. The dimension is -1 when there are no constraints. Cached
        properties (emptiness, boundedness) are discarded whenever the constraints change.
    """

    def __init__(
        self,
        constraints: Optional[Sequence[LinearConstraint]] = None,
        *,
        A: Optional[Sequence[Sequence[float]] | np.ndarray] = None,
        b: Optional[Sequence[float] | np.ndarray] = None,
        lp_backend: str = DEFAULT_LP_BACKEND,
        cvxpy_args_lp: Optional[dict[str, Any]] = None,
    ) -> None:
        """Constructor for HPolytope class"""
        self._type_of_set: str = "HPolytope"
        self.lp_backend = lp_backend
        self._cvxpy_args_lp: dict[str, Any] = dict(DEFAULT_CVXPY_ARGS_LP) if cvxpy_args_lp is None else cvxpy_args_lp
        A_and_b_passed = A is not None and b is not None
        if A_and_b_passed and constraints is None:
            self._set_constraints(self._constraints_from_Ab(A, b))
        elif A is None and b is None:
            if constraints is None:
                constraints = []
            for constraint in constraints:
                if getattr(constraint, "type_of_set", None) != "LinearConstraint":
                    raise InvalidParameterError(f"Expected a LinearConstraint object. Got {type(constraint)}!")
            self._set_constraints(list(constraints))
        else:
            raise InvalidParameterError(
                "Got invalid arguments while defining an HPolytope. Please specify either constraints or (A, b) or "
                "NOTHING."
            )

    @staticmethod
    def _constraints_from_Ab(A, b) -> list[LinearConstraint]:
        """Private function to drop universal rows of (A, b) and convert the rest into LinearConstraint objects"""
        A, b = sanitize_Ab(A, b)
        is_zero_row = np.all(np.abs(A) <= PYREACHSET_ZERO, axis=1)
        if np.any(b == -np.inf) or np.any(b[is_zero_row] < 0):
            raise InfeasibleError("(A, b) has a row that no point can satisfy (all zeros in A and negative b)!")
        is_valid_row = np.bitwise_and(~is_zero_row, b < np.inf)
        if not np.all(is_valid_row):
            warnings.warn("Removed some rows in A that had all zeros | b that had np.inf!", UserWarning)
        return [LinearConstraint(a_row, b_value) for a_row, b_value in zip(A[is_valid_row], b[is_valid_row])]

    def _set_constraints(self, constraints: list[LinearConstraint]) -> None:
        """Protected method to replace the constraints and discard every cached property"""
        self._constraints: list[LinearConstraint] = constraints
        self._reset_cache()

    def _reset_cache(self) -> None:
        """Protected method to discard the cached (A, b), emptiness, and boundedness"""
        self._A: Optional[np.ndarray] = None
        self._b: Optional[np.ndarray] = None
        self._is_empty: Optional[bool] = None
        self._is_bounded: Optional[bool] = None

    @property
    def type_of_set(self) -> str:
        """Return the type of set

        Returns:
            str: Type of the set
        """
        return self._type_of_set

    @property
    def dim(self) -> int:
        """Dimension of the polytope, i.e., the dimension of the first constraint. It is -1 without constraints.

        Returns:
            int: Dimension of the polytope
        """
        if self.n_halfspaces == 0:
            return -1
        return self._constraints[0].dim

    @property
    def n_halfspaces(self) -> int:
        """Number of halfspaces used to define the polytope"""
        return len(self._constraints)

    @property
    def A(self) -> np.ndarray:
        r"""Inequality coefficient vectors `A` for the polytope :math:`\{Ax \leq b\}`.

        Raises:
            DimensionMismatchError: Constraints have different dimensions

        Returns:
            numpy.ndarray: Inequality coefficient vectors stacked vertically. A is np.empty((0, 0)) without constraints.
        """
        if self._A is None:
            if self.n_halfspaces == 0:
                self._A = np.empty((0, 0))
            elif any(constraint.dim != self.dim for constraint in self._constraints):
                raise DimensionMismatchError("Constraints of the polytope have different dimensions!")
            else:
                self._A = np.array([constraint.a for constraint in self._constraints])
        return self._A

    @property
    def b(self) -> np.ndarray:
        r"""Inequality constants `b` for the polytope :math:`\{Ax \leq b\}`.

        Returns:
            numpy.ndarray: Inequality constants as a 1D array. b is np.empty((0,)) without constraints.
        """
        if self._b is None:
            self._b = np.array([constraint.b for constraint in self._constraints], dtype=float)
        return self._b

    @property
    def H(self) -> np.ndarray:
        r"""Inequality constraints in halfspace representation `H=[A, b]` for the polytope :math:`\{Ax \leq b\}`."""
        return np.hstack((self.A, np.array([self.b]).T))

    @property
    def lp_backend(self) -> str:
        """LP backend in use when solving a linear program ("highs" or "cvxpy")"""
        return self._lp_backend

    @lp_backend.setter
    def lp_backend(self, value: str) -> None:
        """Update LP backend in use when solving a linear program"""
        if value not in LP_BACKENDS:
            raise InvalidParameterError(f"Unknown LP backend {value}! Expected one of {LP_BACKENDS}.")
        self._lp_backend = value

    @property
    def cvxpy_args_lp(self) -> dict[str, Any]:
        """CVXPY arguments in use when solving a linear program

        Returns:
            dict: CVXPY arguments in use when solving a linear program. Defaults to dictionary in
            `pyreachset.common.constants.DEFAULT_CVXPY_ARGS_LP`.
        """
        return self._cvxpy_args_lp

    @cvxpy_args_lp.setter
    def cvxpy_args_lp(self, value: dict[str, Any]) -> None:
        """Update CVXPY arguments in use when solving a linear program"""
        self._cvxpy_args_lp = value

    @property
    def is_empty(self) -> bool:
        """Check if the polytope is empty.

        Returns:
            bool: When True, the polytope is empty

        Notes:
            The answer is computed by a feasibility LP and cached until the constraints change.
        """
        if self._is_empty is None:
            self._is_empty = compute_is_empty(self)
        return self._is_empty

    @property
    def is_bounded(self) -> bool:
        """Check if the polytope is bounded.

        Returns:
            bool: True if the polytope is bounded, and False otherwise.

        Notes:
            The answer is computed by probing the axes and cached until the constraints change.
        """
        if self._is_bounded is None:
            self._is_bounded = compute_is_bounded(self)
        return self._is_bounded

    def add_constraint(self, constraint: LinearConstraint) -> None:
        """Append a constraint to the polytope (in place). The dimension is not checked.

        Args:
            constraint (LinearConstraint): Constraint to append
        """
        self._constraints.append(constraint)
        self._reset_cache()

    def constraints_list(self) -> list[LinearConstraint]:
        """Shallow copy of the list of constraints of the polytope"""
        return list(self._constraints)

    ##################
    # Support function
    ##################
    def _compute_support_function_single_eta(self, eta: np.ndarray) -> tuple[float, np.ndarray]:
        """Private function to compute the support function and vector along a single direction using the LP oracle"""
        lp_result = solve_lp(eta, self.A, self.b, backend=self.lp_backend, cvxpy_args=self.cvxpy_args_lp)
        if lp_result.status == LP_INFEASIBLE:
            raise InfeasibleError("Can not compute the support vector of an empty polytope (infeasible constraints)!")
        elif lp_result.status == LP_UNBOUNDED:
            raise UnboundedError(f"Polytope is unbounded along the direction {np.array2string(eta):s}!")
        return lp_result.value, lp_result.x

    def _raise_error_if_unconstrained(self) -> None:
        """Private function that flags the support of the whole space before any dimension check"""
        if self.n_halfspaces == 0:
            raise UnboundedError("Polytope without constraints is unbounded along every direction!")

    def support(self, eta: Sequence[float] | Sequence[Sequence[float]] | np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        self._raise_error_if_unconstrained()
        return convex_set_support(self, eta)

    support.__doc__ = convex_set_support.__doc__

    def extreme(self, eta: Sequence[float] | Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
        self._raise_error_if_unconstrained()
        return convex_set_extreme(self, eta)

    extreme.__doc__ = convex_set_extreme.__doc__

    def support_vector(self, direction: Sequence[float] | np.ndarray) -> np.ndarray:
        self._raise_error_if_unconstrained()
        return convex_set_support_vector(self, direction)

    support_vector.__doc__ = convex_set_support_vector.__doc__

    def support_function(self, direction: Sequence[float] | np.ndarray) -> float:
        self._raise_error_if_unconstrained()
        return convex_set_support_function(self, direction)

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

        Returns:
            bool | numpy.ndarray: Boolean for a single point or a set, and a boolean array for a collection of points.

        Notes:
            A point x is contained when :math:`a_i^\top x \leq b_i` (up to PYREACHSET_ZERO) for every constraint. A set
            Q is contained when :math:`\rho_Q(a_i) \leq b_i` for every constraint. A polytope without constraints
            contains everything.
        """
        if is_convex_set(Q):
            from pyreachset.common.operations_binary import contains_set

            return contains_set(self, Q)
        if self.n_halfspaces == 0:
            points, is_single_point = sanitize_points(Q, -1)
            is_contained = np.ones((points.shape[0],), dtype=bool)
        else:
            points, is_single_point = sanitize_points(Q, self.dim)
            is_contained = np.all(points @ self.A.T - self.b <= PYREACHSET_ZERO, axis=1)
        if is_single_point:
            return bool(is_contained[0])
        return is_contained

    __contains__ = contains

    ##################
    # Unary operations
    ##################
    minimize_H_rep = minimize_H_rep
    remove_redundant_constraints = remove_redundant_constraints
    to_vrep = to_vrep
    vertices_list = vertices_list

    def to_hrep(self) -> HPolytope:
        """Return the polytope itself, since it is already in H-Rep"""
        return self

    def copy(self) -> HPolytope:
        """Create a copy of the polytope (the constraints are copied as well)"""
        return self.__class__(
            [constraint.copy() for constraint in self._constraints],
            lp_backend=self.lp_backend,
            cvxpy_args_lp=self.cvxpy_args_lp,
        )

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
        if self.n_halfspaces == 0:
            return "HPolytope without constraints"
        return f"HPolytope in R^{self.dim:d}"

    def __repr__(self) -> str:
        if self.n_halfspaces == 1:
            return f"{str(self):s}\n\tIn H-rep: 1 inequality"
        return f"{str(self):s}\n\tIn H-rep: {self.n_halfspaces:d} inequalities"
