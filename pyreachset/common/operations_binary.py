# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the set combinators (intersection, convex hull, Cartesian product, Minkowski sum, containment)
# that are shared by all set representations

import numpy as np
from scipy.linalg import block_diag

from pyreachset.common import (
    has_constraints_list,
    is_convex_set,
    is_ellipsoid,
    is_empty_set,
    is_hpolytope,
    is_hyperrectangle,
    is_linear_constraint,
    is_vpolytope,
    sanitize_point,
)
from pyreachset.common.constants import DEFAULT_CVXPY_ARGS_LP, DEFAULT_LP_BACKEND, PYREACHSET_ZERO
from pyreachset.common.exceptions import DimensionMismatchError, InvalidParameterError, UnboundedError
from pyreachset.common.oracles import extreme_points


def _raise_error_if_not_a_set(Q, task_str):
    """Private function to ensure that the operand is a set provided by pyreachset"""
    if not is_convex_set(Q):
        raise InvalidParameterError(f"Expected a set for {task_str:s}. Got {type(Q)}!")


def _is_unconstrained(P):
    """Private function to identify an HPolytope without constraints (the whole space of unknown dimension)"""
    return is_hpolytope(P) and P.n_halfspaces == 0


def _is_trivially_empty(P):
    """Private function to identify operands that are empty without calling a solver"""
    return is_empty_set(P) or (is_vpolytope(P) and P.is_empty)


def _raise_error_if_dimension_mismatch(P, Q):
    """Private function to compare the dimensions of two sets"""
    if P.dim != Q.dim:
        raise DimensionMismatchError(f"Mismatch in dimensions (self.dim: {P.dim:d} and Q.dim: {Q.dim:d})")


def _lp_settings(*sets):
    """Private function to pick the LP settings of the first operand that carries them"""
    for P in sets:
        if is_hpolytope(P):
            return {"lp_backend": P.lp_backend, "cvxpy_args_lp": P.cvxpy_args_lp}
    return {"lp_backend": DEFAULT_LP_BACKEND, "cvxpy_args_lp": dict(DEFAULT_CVXPY_ARGS_LP)}


def _constraints_of(P):
    """Private function to get the constraints of a set, enumerating facets for a VPolytope"""
    if has_constraints_list(P):
        return P.constraints_list()
    elif is_vpolytope(P):
        return P.to_hrep().constraints_list()
    raise InvalidParameterError(f"Expected a polytopic set. Got {P.type_of_set:s}!")


def _vertices_of(P):
    """Private function to get the vertices of a set as a 2D array, enumerating vertices for an HPolytope

    Raises:
        UnboundedError: P is unbounded (HPolytope or LinearConstraint)
        InvalidParameterError: P has no vertex description
    """
    if is_vpolytope(P) or is_hyperrectangle(P) or is_empty_set(P):
        return np.array(P.vertices_list()).reshape((-1, max(P.dim, 0)))
    elif is_hpolytope(P):
        return P.to_vrep().V
    elif is_linear_constraint(P):
        raise UnboundedError("A halfspace has no vertex representation!")
    raise InvalidParameterError(f"Expected a polytopic set. Got {P.type_of_set:s}!")


def intersection(self, Q):
    r"""Intersect the set :math:`\mathcal{P}` with another polytopic set :math:`\mathcal{Q}`.

    Args:
        Q (LinearConstraint | Hyperrectangle | HPolytope | VPolytope | EmptySet): Set to be intersected with self

    Raises:
        InvalidParameterError: Q is not a polytopic set
        DimensionMismatchError: Mismatch in dimensions
        OracleFailureError: Facet or vertex enumeration failed

    Returns:
        Hyperrectangle | HPolytope | VPolytope | EmptySet: The intersection of `P` and `Q`

    Notes:
        - Two hyperrectangles intersect in closed form to a Hyperrectangle, or an EmptySet when disjoint.
        - When both sets are described by constraints, the constraints are concatenated (self first) into an HPolytope
          without any solver call. The result may be empty.
        - Otherwise, the V-Rep operands are converted to H-Rep, the constraints are concatenated, and the vertices are
          enumerated to return a VPolytope (or an EmptySet when no vertex remains).
        - An operand known to be empty without a solver call (EmptySet, VPolytope without vertices) gives an EmptySet.
    """
    from pyreachset.EmptySet import EmptySet
    from pyreachset.HPolytope import HPolytope
    from pyreachset.Hyperrectangle import Hyperrectangle

    _raise_error_if_not_a_set(Q, "intersection")
    if is_ellipsoid(self) or is_ellipsoid(Q):
        raise InvalidParameterError("Intersection is supported only between polytopic sets!")
    elif _is_unconstrained(self) or _is_unconstrained(Q):
        # The whole space is the identity of the intersection
        if has_constraints_list(self) and has_constraints_list(Q):
            return HPolytope(self.constraints_list() + Q.constraints_list(), **_lp_settings(self, Q))
        return Q.copy() if _is_unconstrained(self) else self.copy()
    _raise_error_if_dimension_mismatch(self, Q)
    if _is_trivially_empty(self) or _is_trivially_empty(Q):
        # The intersection of an (empty) set with any set is an empty set
        return EmptySet(self.dim)
    elif is_hyperrectangle(self) and is_hyperrectangle(Q):
        lb = np.maximum(self.low(), Q.low())
        ub = np.minimum(self.high(), Q.high())
        if np.any(lb > ub + PYREACHSET_ZERO):
            return EmptySet(self.dim)
        # Touching boxes give a flat hyperrectangle
        return Hyperrectangle(lb=lb, ub=np.maximum(lb, ub))
    elif has_constraints_list(self) and has_constraints_list(Q):
        return HPolytope(self.constraints_list() + Q.constraints_list(), **_lp_settings(self, Q))
    else:
        P_cap_Q_in_H_rep = HPolytope(_constraints_of(self) + _constraints_of(Q), **_lp_settings(self, Q))
        P_cap_Q = P_cap_Q_in_H_rep.to_vrep()
        if P_cap_Q.is_empty:
            return EmptySet(self.dim)
        return P_cap_Q


def convex_hull(self, Q=None):
    r"""Compute the convex hull of the set :math:`\mathcal{P}` (and optionally another set :math:`\mathcal{Q}`).

    Args:
        Q (Hyperrectangle | HPolytope | VPolytope | EmptySet, optional): Set whose vertices are added. Defaults to None.

    Raises:
        DimensionMismatchError: Mismatch in dimensions
        UnboundedError: One of the sets is unbounded
        OracleFailureError: Vertex enumeration or extreme point computation failed

    Returns:
        VPolytope: Convex hull of the vertices of P and Q, reduced to its extreme points. It has no vertices when both
        sets are empty.

    Notes:
        HPolytope operands are converted to V-Rep through a vertex enumeration.
    """
    from pyreachset.VPolytope import VPolytope

    if Q is None:
        V = _vertices_of(self)
    else:
        _raise_error_if_not_a_set(Q, "convex hull")
        _raise_error_if_dimension_mismatch(self, Q)
        V = np.vstack((_vertices_of(self), _vertices_of(Q)))
    if V.shape[0] == 0:
        return VPolytope(dim=self.dim)
    return VPolytope(V=extreme_points(V))


def cartesian_product(self, Q):
    r"""Compute the Cartesian product :math:`\mathcal{P}\times\mathcal{Q} = \{(p, q)\ |\ p\in\mathcal{P},
    q\in\mathcal{Q}\}`.

    Args:
        Q (LinearConstraint | Hyperrectangle | HPolytope | VPolytope | EmptySet): Set to be multiplied with self

    Raises:
        InvalidParameterError: Q is not a polytopic set or an operand has no constraints (unknown dimension)
        OracleFailureError: Facet enumeration failed

    Returns:
        Hyperrectangle | HPolytope | VPolytope | EmptySet: Cartesian product of dimension self.dim + Q.dim

    Notes:
        - Two hyperrectangles give a Hyperrectangle with concatenated centers and radii.
        - Two VPolytope give a VPolytope with all pairwise concatenations of their vertices (self varies slowest).
        - Otherwise, the constraints of P are lifted as :math:`[a_i, 0]` and those of Q as :math:`[0, a_j]`, and the
          HPolytope with the lifted constraints (self first) is returned. VPolytope operands are converted to H-Rep.
    """
    from pyreachset.EmptySet import EmptySet
    from pyreachset.HPolytope import HPolytope
    from pyreachset.Hyperrectangle import Hyperrectangle
    from pyreachset.VPolytope import VPolytope

    _raise_error_if_not_a_set(Q, "Cartesian product")
    if is_ellipsoid(self) or is_ellipsoid(Q):
        raise InvalidParameterError("Cartesian product is supported only between polytopic sets!")
    elif _is_unconstrained(self) or _is_unconstrained(Q):
        raise InvalidParameterError("Cartesian product with a polytope without constraints has an unknown dimension!")
    elif _is_trivially_empty(self) or _is_trivially_empty(Q):
        return EmptySet(self.dim + Q.dim)
    elif is_hyperrectangle(self) and is_hyperrectangle(Q):
        return Hyperrectangle(
            center=np.hstack((self.center, Q.center)), radius=np.hstack((self.radius_vector, Q.radius_vector))
        )
    elif is_vpolytope(self) and is_vpolytope(Q):
        return VPolytope(V=[np.hstack((p, q)) for p in self.vertices_list() for q in Q.vertices_list()])
    else:
        P_constraints, Q_constraints = _constraints_of(self), _constraints_of(Q)
        A_P = np.array([constraint.a for constraint in P_constraints]).reshape((-1, self.dim))
        A_Q = np.array([constraint.a for constraint in Q_constraints]).reshape((-1, Q.dim))
        b = np.hstack(([constraint.b for constraint in P_constraints], [constraint.b for constraint in Q_constraints]))
        return HPolytope(A=block_diag(A_P, A_Q), b=b, **_lp_settings(self, Q))


def minkowski_sum(self, Q):
    r"""Compute the Minkowski sum :math:`\mathcal{P}\oplus\mathcal{Q} = \{p + q\ |\ p\in\mathcal{P}, q\in\mathcal{Q}\}`
    of the set with a point or another set.

    Args:
        Q (array_like | Hyperrectangle | HPolytope | VPolytope | EmptySet): Point or set to add to self

    Raises:
        DimensionMismatchError: Mismatch in dimensions
        UnboundedError: One of the sets is unbounded (only for the addition of two sets)
        OracleFailureError: Vertex enumeration or extreme point computation failed

    Returns:
        Hyperrectangle | HPolytope | VPolytope | EmptySet: Sum of self and Q

    Notes:
        - *Addition with a point*: Hyperrectangles shift their center, VPolytope shift their vertices, and HPolytope
          (or LinearConstraint) shift their constants :math:`b + A\ \text{point}`.
        - *Addition with a set*: Two hyperrectangles add their centers and radii. Otherwise, the sum is the convex hull
          of the pairwise sums of vertices, reduced to its extreme points. The sum with an empty set is empty.
    """
    from pyreachset.EmptySet import EmptySet
    from pyreachset.HPolytope import HPolytope
    from pyreachset.Hyperrectangle import Hyperrectangle
    from pyreachset.VPolytope import VPolytope

    if not is_convex_set(Q):
        point = sanitize_point(Q, self.dim)
        if is_hyperrectangle(self):
            return Hyperrectangle(center=self.center + point, radius=self.radius_vector.copy())
        elif is_vpolytope(self):
            if self.is_empty:
                return self.copy()
            return VPolytope(V=self.V + point, cvxpy_args_lp=self.cvxpy_args_lp)
        elif is_hpolytope(self):
            return HPolytope(A=self.A, b=self.b + self.A @ point, **_lp_settings(self))
        elif is_linear_constraint(self):
            return self.__class__(self.a.copy(), self.b + self.a @ point)
        elif is_empty_set(self):
            return self.copy()
        raise InvalidParameterError(f"Translation of a {self.type_of_set:s} is not supported!")
    _raise_error_if_dimension_mismatch(self, Q)
    if _is_trivially_empty(self) or _is_trivially_empty(Q):
        return EmptySet(self.dim)
    elif is_hyperrectangle(self) and is_hyperrectangle(Q):
        return Hyperrectangle(center=self.center + Q.center, radius=self.radius_vector + Q.radius_vector)
    V_P, V_Q = _vertices_of(self), _vertices_of(Q)
    if V_P.shape[0] == 0 or V_Q.shape[0] == 0:
        return EmptySet(self.dim)
    # Vertices of the Minkowski sum
    minkowski_sum_V = np.array([p + q for p in V_P for q in V_Q])
    return VPolytope(V=extreme_points(minkowski_sum_V))


def contains_set(self, Q):
    r"""Check if the set :math:`\mathcal{Q}` is contained in the polytopic set :math:`\mathcal{P}`.

    Args:
        Q (LinearConstraint | Hyperrectangle | HPolytope | VPolytope | EmptySet | Ellipsoid): Set to be tested

    Raises:
        DimensionMismatchError: Mismatch in dimensions
        InvalidParameterError: self is not a polytopic set
        OracleFailureError: LP or facet enumeration failed

    Returns:
        bool: True if and only if :math:`\mathcal{Q}\subseteq\mathcal{P}`

    Notes:
        This function compares support function evaluations, and needs no vertex enumeration of Q. With
        :math:`\mathcal{P}=\{x\ |\ a_i^\top x\leq b_i\}`, :math:`\mathcal{Q}\subseteq\mathcal{P}` if and only if
        :math:`\rho_{\mathcal{Q}}(a_i)\leq b_i` for every i. When Q is unbounded along some :math:`a_i`, Q is not
        contained. A VPolytope self is converted to H-Rep first.
    """
    if _is_unconstrained(self):
        return True
    elif _is_unconstrained(Q):
        return False
    _raise_error_if_dimension_mismatch(self, Q)
    if _is_trivially_empty(Q):
        return True
    elif _is_trivially_empty(self):
        return bool(Q.is_empty)
    constraints = _constraints_of(self)
    A = np.array([constraint.a for constraint in constraints]).reshape((-1, self.dim))
    b = np.array([constraint.b for constraint in constraints])
    if is_hpolytope(Q) and Q.is_empty:
        return True
    try:
        support_function_values = Q.support(A)[0]
    except UnboundedError:
        return False
    return bool(np.all(support_function_values <= b + PYREACHSET_ZERO))


def is_bounded(P):
    """Check if the set is bounded (wrapper for the is_bounded property)"""
    return P.is_bounded


def is_empty(P):
    """Check if the set is empty (wrapper for the is_empty property)"""
    return P.is_empty
