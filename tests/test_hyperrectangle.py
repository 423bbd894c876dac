# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose: Test the Hyperrectangle class

import types

import numpy as np
import pytest

from pyreachset import HPolytope, Hyperrectangle, LinearConstraint, VPolytope
from pyreachset.common import check_matrices_are_equal_ignoring_row_order
from pyreachset.common.exceptions import DimensionMismatchError, InvalidParameterError


def test___init__():
    H = Hyperrectangle([1, 1], [2, 2])
    assert H.dim == 2
    assert np.allclose(H.center, [1, 1])
    assert np.allclose(H.radius_vector, [2, 2])
    assert H.radius_in_dimension(0) == 2
    assert not H.is_empty
    assert H.is_bounded
    assert H.type_of_set == "Hyperrectangle"

    # From bounds
    H = Hyperrectangle(lb=[-1, 0], ub=[3, 1])
    assert np.allclose(H.center, [1, 0.5])
    assert np.allclose(H.radius_vector, [2, 0.5])

    # Flat box is allowed
    H = Hyperrectangle(center=[0, 0], radius=[1, 0])
    assert np.allclose(H.high(), [1, 0])

    with pytest.raises(InvalidParameterError):
        Hyperrectangle([0, 0], [-1, 1])
    with pytest.raises(InvalidParameterError):
        Hyperrectangle(lb=[1, 0], ub=[0, 1])
    with pytest.raises(DimensionMismatchError):
        Hyperrectangle([0, 0], [1, 1, 1])
    with pytest.raises(InvalidParameterError):
        Hyperrectangle([0, 0])
    with pytest.raises(InvalidParameterError):
        Hyperrectangle([0, 0], [1, 1], lb=[0, 0], ub=[1, 1])
    with pytest.raises(InvalidParameterError):
        Hyperrectangle([0, np.inf], [1, 1])


def test_high_low():
    H = Hyperrectangle([1, -1], [2, 0.5])
    assert np.allclose(H.high(), [3, -0.5])
    assert np.allclose(H.low(), [-1, -1.5])
    assert H.high(0) == 3
    assert H.low(1) == -1.5


def test_constraints_list():
    # x <= 3, y <= 3, -x <= 1, -y <= 1
    constraints = Hyperrectangle([1, 1], [2, 2]).constraints_list()
    expected = [
        LinearConstraint([1, 0], 3),
        LinearConstraint([0, 1], 3),
        LinearConstraint([-1, 0], 1),
        LinearConstraint([0, -1], 1),
    ]
    assert len(constraints) == 4
    for constraint, expected_constraint in zip(constraints, expected):
        assert constraint == expected_constraint
    H = Hyperrectangle([1, 1], [2, 2])
    assert np.allclose(H.A, [[1, 0], [0, 1], [-1, 0], [0, -1]])
    assert np.allclose(H.b, [3, 3, 1, 1])


def test_vertices():
    H = Hyperrectangle([0, 0], [1, 2])
    assert isinstance(H.vertices(), types.GeneratorType)
    assert check_matrices_are_equal_ignoring_row_order(H.vertices_list(), [[1, 2], [1, -2], [-1, 2], [-1, -2]])
    assert H.V.shape == (4, 2)

    # 2^n vertices
    assert len(Hyperrectangle(np.zeros((4,)), np.ones((4,))).vertices_list()) == 16

    # Only the center when all radii are zero
    H = Hyperrectangle([3, 4], [0, 0])
    vertices = H.vertices_list()
    assert len(vertices) == 1
    assert np.allclose(vertices[0], [3, 4])

    # Tiny but nonzero radii still give 2^n corners
    H = Hyperrectangle([3, 4], [1e-9, 1e-9])
    assert len(H.vertices_list()) == 4


def test_contains():
    H = Hyperrectangle([0, 0], [1, 1])
    assert [0.5, -1] in H
    assert [1, 1] in H
    assert [1.1, 0] not in H
    assert np.all(H.contains([[0, 0], [2, 0], [-1, -1]]) == [True, False, True])
    with pytest.raises(DimensionMismatchError):
        H.contains([1, 1, 1])

    # Sets
    assert H.contains(Hyperrectangle([0.5, 0.5], [0.5, 0.5]))
    assert not H.contains(Hyperrectangle([0.5, 0.5], [0.6, 0.5]))
    assert H.contains(VPolytope(V=[[0, 0], [1, -1], [-1, 1]]))
    assert not H.contains(VPolytope(V=[[0, 0], [2, 0]]))
    assert not H.contains(LinearConstraint([1, 0], 0))


def test_support():
    H = Hyperrectangle([1, 2], [3, 4])
    assert np.allclose(H.support_vector([1, 1]), [4, 6])
    assert np.allclose(H.support_vector([-1, 1]), [-2, 6])
    assert np.isclose(H.support_function([-1, 1]), 8)
    # Zero direction gives the all-positive corner
    assert np.allclose(H.support_vector([0, 0]), [4, 6])
    assert np.allclose(H.support_vector([0, -1]), [4, -2])
    # Axis-aligned support lies on the corresponding face
    for index in range(2):
        for sign in [1, -1]:
            direction = np.zeros((2,))
            direction[index] = sign
            support_vector = H.support_vector(direction)
            if sign == 1:
                assert np.isclose(support_vector[index], H.high(index))
            else:
                assert np.isclose(support_vector[index], H.low(index))
    with pytest.raises(DimensionMismatchError):
        H.support_vector([1, 0, 0])

    # Batched support
    support_function_values, support_vectors = H.support([[1, 0], [0, -1]])
    assert np.allclose(support_function_values, [4, 2])
    assert np.allclose(support_vectors, [[4, 6], [4, -2]])
    assert np.allclose(H.extreme([[1, 0], [0, -1]]), support_vectors)


def test_norm_and_radius():
    H = Hyperrectangle([-1, 2], [1, 1])
    # Farthest corner is [-2, 3]
    assert np.isclose(H.norm(), 3)
    assert np.isclose(H.norm(p=1), 5)
    assert np.isclose(H.radius(), 1)
    assert np.isclose(H.radius(p=2), np.sqrt(2))
    # Zero center uses the all-positive corner
    assert np.isclose(Hyperrectangle([0, 0], [1, 2]).norm(), 2)


def test_split():
    # Unit box in 4 blocks
    H = Hyperrectangle([0, 0], [1, 1])
    H_split = H.split([2, 2])
    assert len(H_split) == 4
    for H_i in H_split:
        assert np.allclose(H_i.radius_vector, [0.5, 0.5])
    assert check_matrices_are_equal_ignoring_row_order(
        [H_i.center for H_i in H_split], [[0.5, 0.5], [0.5, -0.5], [-0.5, 0.5], [-0.5, -0.5]]
    )

    # Uneven split
    H = Hyperrectangle(lb=[0, 0], ub=[3, 1])
    H_split = H.split([3, 1])
    assert len(H_split) == 3
    assert check_matrices_are_equal_ignoring_row_order(
        [H_i.center for H_i in H_split], [[0.5, 0.5], [1.5, 0.5], [2.5, 0.5]]
    )
    for H_i in H_split:
        assert np.allclose(H_i.radius_vector, [0.5, 0.5])

    # A single block returns a copy
    H_split = H.split([1, 1])
    assert len(H_split) == 1
    assert H_split[0] == H

    with pytest.raises(InvalidParameterError):
        H.split([0, 2])
    with pytest.raises(InvalidParameterError):
        H.split([1.5, 2])
    with pytest.raises(DimensionMismatchError):
        H.split([2])
    with pytest.raises(DimensionMismatchError):
        H.split([2, 2, 2])


def test_conversions_and_copy():
    H = Hyperrectangle([1, 1], [2, 2])
    P = H.to_hrep()
    assert isinstance(P, HPolytope)
    assert P.n_halfspaces == 4
    assert check_matrices_are_equal_ignoring_row_order(P.H, np.hstack((H.A, np.array([H.b]).T)))
    Q = H.to_vrep()
    assert isinstance(Q, VPolytope)
    assert check_matrices_are_equal_ignoring_row_order(Q.V, H.V)

    H_copy = H.copy()
    assert H_copy == H
    assert H_copy.center is not H.center
    assert H != Hyperrectangle([1, 1], [2, 1])
    assert "Hyperrectangle in R^2" in repr(H)
