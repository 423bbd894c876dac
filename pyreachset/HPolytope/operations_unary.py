# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the methods involving just the HPolytope class (emptiness, boundedness, redundancy, V-Rep)

import numpy as np

from pyreachset.common.constants import PYREACHSET_ZERO
from pyreachset.common.exceptions import InfeasibleError, UnboundedError
from pyreachset.common.oracles import LP_INFEASIBLE, LP_OPTIMAL, LP_UNBOUNDED, enumerate_vertices, solve_lp


def compute_is_empty(self):
    """Solve a feasibility LP (zero objective) to decide if the polytope is empty.

    Returns:
        bool: True when the constraint system admits no point.

    Notes:
        A polytope without constraints is the whole space, so it is not empty.
    """
    if self.n_halfspaces == 0:
        return False
    lp_result = solve_lp(np.zeros((self.dim,)), self.A, self.b, backend=self.lp_backend, cvxpy_args=self.cvxpy_args_lp)
    return lp_result.status == LP_INFEASIBLE


def compute_is_bounded(self):
    r"""Probe the support function along :math:`\pm e_i` for every axis to decide if the polytope is bounded.

    Returns:
        bool: False if some probe is unbounded, True otherwise.

    Notes:
        A polytope is bounded if and only if it is bounded along every coordinate direction. An infeasible system
        describes the empty set, which is bounded. A polytope without constraints is unbounded.
    """
    if self.n_halfspaces == 0:
        return False
    for direction in np.vstack((np.eye(self.dim), -np.eye(self.dim))):
        lp_result = solve_lp(direction, self.A, self.b, backend=self.lp_backend, cvxpy_args=self.cvxpy_args_lp)
        if lp_result.status == LP_INFEASIBLE:
            return True
        elif lp_result.status == LP_UNBOUNDED:
            return False
    return True


def _indices_of_irredundant_constraints(self):
    r"""Private function that returns the indices of the constraints that survive the redundancy pass.

    Raises:
        InfeasibleError: Constraint system is infeasible

    Notes:
        Constraint :math:`i` is redundant when :math:`\max a_i^\top x` subject to the other constraints still kept is
        finite and at most :math:`b_i` (up to PYREACHSET_ZERO). Constraints are visited in order, and a removed
        constraint is not used in later tests. Ties are treated as redundant, so only one of two identical constraints
        survives.
    """
    if self.is_empty:
        raise InfeasibleError("Can not remove redundant constraints of an infeasible constraint system!")
    A, b = self.A, self.b
    is_kept = np.ones((self.n_halfspaces,), dtype=bool)
    for index in range(self.n_halfspaces):
        is_kept[index] = False
        lp_result = solve_lp(
            A[index], A[is_kept], b[is_kept], backend=self.lp_backend, cvxpy_args=self.cvxpy_args_lp
        )
        if lp_result.status == LP_OPTIMAL and lp_result.value <= b[index] + PYREACHSET_ZERO:
            continue
        elif lp_result.status == LP_INFEASIBLE:  # pragma: no cover
            # Subsystem of a feasible system is feasible. Can only happen due to numerical issues.
            raise InfeasibleError("Redundancy check found an infeasible subsystem of a feasible constraint system!")
        is_kept[index] = True
    return np.nonzero(is_kept)[0]


def remove_redundant_constraints(self):
    """Remove redundant constraints and return a new polytope with the remaining constraints (in their order).

    Raises:
        InfeasibleError: Constraint system is infeasible
        OracleFailureError: LP solver failed

    Returns:
        HPolytope: Polytope describing the same set with no redundant constraints

    Notes:
        The operation is idempotent. See :meth:`minimize_H_rep` for the in-place version.
    """
    constraints = self.constraints_list()
    return self.__class__(
        [constraints[index] for index in _indices_of_irredundant_constraints(self)],
        lp_backend=self.lp_backend,
        cvxpy_args_lp=self.cvxpy_args_lp,
    )


def minimize_H_rep(self):
    """Remove redundant constraints from the halfspace representation of the polytope (in place).

    Raises:
        InfeasibleError: Constraint system is infeasible
        OracleFailureError: LP solver failed

    Returns:
        HPolytope: self, to allow chaining
    """
    constraints = self.constraints_list()
    kept_constraints = [constraints[index] for index in _indices_of_irredundant_constraints(self)]
    self._set_constraints(kept_constraints)
    return self


def to_vrep(self):
    r"""Determine the vertex representation of the polytope using cdd.

    Raises:
        UnboundedError: Polytope has no constraints or vertex enumeration yields rays (unbounded polytope)
        OracleFailureError: cdd failed

    Returns:
        VPolytope: Polytope in V-Rep. It has no vertices when the constraint system is infeasible.

    Notes:
        cdd uses the halfspace representation :math:`[b, -A]` where :math:`b - Ax \geq 0 \Leftrightarrow Ax \leq b`.
        Exactly one vertex enumeration is performed.
    """
    from pyreachset.VPolytope import VPolytope

    if self.n_halfspaces == 0:
        raise UnboundedError("Can not compute the vertices of a polytope without constraints!")
    V, has_rays = enumerate_vertices(self.A, self.b)
    if has_rays:
        raise UnboundedError("Vertex enumeration yielded rays! Polytope is unbounded!")
    elif V.shape[0] == 0:
        return VPolytope(dim=self.dim)
    return VPolytope(V=V)


def vertices_list(self):
    """List of the vertices of the polytope (see :meth:`to_vrep`)"""
    return self.to_vrep().vertices_list()
