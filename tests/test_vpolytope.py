# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose: Test the VPolytope class methods

import numpy as np
import pytest

from pyreachset import EmptySet, HPolytope, Hyperrectangle, VPolytope
from pyreachset.common import check_matrices_are_equal_ignoring_row_order
from pyreachset.common.exceptions import DimensionMismatchError, InfeasibleError, InvalidParameterError


def test___init__():
    V = [[0, 0], [1, 0], [0, 1]]
    P = VPolytope(V=V)
    assert P.dim == 2
    assert P.n_vertices == 3
    assert P.is_bounded
    assert not P.is_empty
    assert P.type_of_set == "VPolytope"
    assert np.allclose(P.V, V)
    # Order is preserved and vertices are copies
    vertices = P.vertices_list()
    assert all(np.allclose(v, v_expected) for v, v_expected in zip(vertices, V))
    vertices[0][0] = 10
    assert np.allclose(P.V[0], [0, 0])

    # Repeated and interior points are kept
    P = VPolytope(V=[[0, 0], [0, 0], [1, 1], [0.5, 0.5]])
    assert P.n_vertices == 4

    # Empty polytope
    P = VPolytope()
    assert P.is_empty
    assert P.dim == -1
    assert P.V.shape == (0, 0)
    assert VPolytope(dim=3).dim == 3
    assert VPolytope(V=np.empty((0, 2))).dim == 2
    assert VPolytope(dim=3).V.shape == (0, 3)
    assert str(VPolytope(dim=3)) == "VPolytope (empty) in R^3"

    with pytest.raises(DimensionMismatchError):
        VPolytope(V=[[0, 0], [1, 0, 0]])
    with pytest.raises(DimensionMismatchError):
        VPolytope(V=[[0, 0], [1, 0]], dim=3)
    with pytest.raises(InvalidParameterError):
        VPolytope(V=[[0, np.nan], [1, 0]])
    with pytest.raises(InvalidParameterError):
        VPolytope(V=[["a", "b"]])

    # Default CVXPY arguments are not shared between instances
    P = VPolytope(V=V)
    P.cvxpy_args_lp["solver"] = "SCS"
    assert VPolytope(V=V).cvxpy_args_lp == {"solver": "CLARABEL"}


def test_support_vector():
    P = VPolytope(V=[[0, 0], [1, 0], [0, 1]])
    assert np.allclose(P.support_vector([1, 0]), [1, 0])
    assert np.isclose(P.support_function([1, 1]), 1)
    # The first maximizer is returned on ties
    assert np.allclose(P.support_vector([1, 1]), [1, 0])
    assert np.isclose(P.support_function([1, 0], algorithm="hrep"), 1)
    assert np.allclose(P.support_vector([-1, -1], algorithm="hrep"), [0, 0], atol=1e-5)
    support_function_values, support_vectors = P.support([[1, 0], [0, 1], [-1, -1]])
    assert np.allclose(support_function_values, [1, 1, 0])
    assert np.allclose(support_vectors, [[1, 0], [0, 1], [0, 0]])
    assert np.allclose(P.extreme([[0, 1]]), [[0, 1]])

    with pytest.raises(InvalidParameterError):
        P.support_vector([1, 0], algorithm="xyz")
    with pytest.raises(DimensionMismatchError):
        P.support_vector([1, 0, 0])
    # Unknown algorithm is reported before the dimension mismatch
    with pytest.raises(InvalidParameterError):
        P.support_vector([1, 0, 0], algorithm="xyz")
    with pytest.raises(InfeasibleError):
        VPolytope().support_vector([1, 0])
    with pytest.raises(InfeasibleError):
        VPolytope(dim=2).support([[1, 0]])


def test_contains():
    P = VPolytope(V=[[0, 0], [2, 0], [0, 2]])
    assert [0.5, 0.5] in P
    assert [1, 1] in P
    assert [1.5, 1.5] not in P
    assert np.all(P.contains([[0.5, 0.5], [1.5, 1.5]]) == [True, False])
    with pytest.raises(DimensionMismatchError):
        P.contains([0.5, 0.5, 0.5])
    # Empty polytope contains no point
    assert [0, 0] not in VPolytope(dim=2)

    # Sets
    assert P.contains(Hyperrectangle([0.5, 0.5], [0.25, 0.25]))
    assert not P.contains(Hyperrectangle([1, 1], [0.5, 0.5]))
    assert P.contains(VPolytope(V=[[0, 0], [1, 1]]))
    assert P.contains(EmptySet(2))
    assert not VPolytope(dim=2).contains(P)


def test_to_hrep():
    P = VPolytope(V=[[1, 1], [-1, 1], [-1, -1], [1, -1], [0, 0]])
    Q = P.to_hrep()
    assert isinstance(Q, HPolytope)
    assert Q.n_halfspaces == 4
    assert check_matrices_are_equal_ignoring_row_order(Q.H, Hyperrectangle([0, 0], [1, 1]).to_hrep().H)
    assert P.to_vrep() is P

    # Empty V-Rep gives an EmptySet
    Q = VPolytope(dim=2).to_hrep()
    assert isinstance(Q, EmptySet)
    assert Q.dim == 2

    # Segment gives a pair of opposing inequalities for its affine hull
    Q = VPolytope(V=[[0, 0], [1, 1]]).to_hrep()
    assert [0.5, 0.5] in Q
    assert [0.5, 0.6] not in Q


def test_remove_redundant_vertices():
    P = VPolytope(V=[[0, 0], [1, 0], [0, 1], [0.25, 0.25], [1, 0]])
    P_reduced = P.remove_redundant_vertices()
    assert P_reduced.n_vertices == 3
    assert check_matrices_are_equal_ignoring_row_order(P_reduced.V, [[0, 0], [1, 0], [0, 1]])
    assert P.n_vertices == 5
    assert VPolytope(dim=2).remove_redundant_vertices().is_empty


def test_copy_and_repr():
    P = VPolytope(V=[[0, 0], [1, 0], [0, 1]])
    P_copy = P.copy()
    assert np.allclose(P_copy.V, P.V)
    assert P_copy.V is not P.V
    assert VPolytope(dim=2).copy().dim == 2
    assert str(P) == "VPolytope in R^2"
    assert "3 vertices" in repr(P)
    assert "1 vertex" in repr(VPolytope(V=[[0, 0]]))
