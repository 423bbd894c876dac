# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose: Test the Ellipsoid class

import unittest

import numpy as np
import pytest

from pyreachset import Ellipsoid, EmptySet, Hyperrectangle, LinearConstraint, VPolytope
from pyreachset.common.exceptions import DimensionMismatchError, InvalidParameterError


class TestEllipsoid(unittest.TestCase):
    def test___init__(self):
        E = Ellipsoid(c=np.zeros((2,)), Q=np.eye(2))
        assert E.dim == 2
        assert not E.is_empty
        assert E.is_bounded
        assert E.type_of_set == "Ellipsoid"
        assert np.allclose(E.Q, np.eye(2))
        E = Ellipsoid(c=[1, 2], Q=[[4, 0], [0, 9]])
        assert np.allclose(E.G, np.diag([2, 3]))

        # Degenerate ellipsoid
        E = Ellipsoid(c=np.zeros((2,)), G=np.ones((2, 1)))
        assert np.allclose(E.Q, np.ones((2, 2)))
        E = Ellipsoid(c=np.zeros((3,)), G=np.ones((3, 2)))
        assert E.dim == 3

        # Ball
        E = Ellipsoid(c=[1, 1], r=2)
        assert np.allclose(E.Q, 4 * np.eye(2))

        # Singleton
        E = Ellipsoid(c=[1, 1])
        assert E.G.shape == (2, 0)
        assert np.allclose(E.Q, np.zeros((2, 2)))

        with pytest.raises(InvalidParameterError):
            Ellipsoid(c=np.zeros((2,)), Q=[[1, 0], [0, 0]])
        with pytest.raises(InvalidParameterError):
            Ellipsoid(c=np.zeros((2,)), Q=[[1, 1], [0, 1]])
        with pytest.raises(DimensionMismatchError):
            Ellipsoid(c=np.zeros((2,)), Q=np.eye(3))
        with pytest.raises(DimensionMismatchError):
            Ellipsoid(c=np.zeros((2,)), G=np.eye(3))
        with pytest.raises(InvalidParameterError):
            Ellipsoid(c=np.zeros((2,)), r=-1)
        with pytest.raises(InvalidParameterError):
            Ellipsoid(c=np.zeros((2,)), r=1, G=np.eye(2))
        with pytest.raises(InvalidParameterError):
            Ellipsoid(Q=np.eye(2))
        with pytest.raises(InvalidParameterError):
            Ellipsoid(c=np.zeros((2,)), S=np.eye(2))

    def test_support(self):
        E = Ellipsoid(c=[1, 2], Q=np.diag([4, 1]))
        assert np.allclose(E.support_vector([1, 0]), [3, 2])
        assert np.allclose(E.support_vector([0, -1]), [1, 1])
        assert np.isclose(E.support_function([1, 0]), 3)
        support_function_values, support_vectors = E.support([[1, 0], [-1, 0]])
        assert np.allclose(support_function_values, [3, 1])
        assert np.allclose(support_vectors, [[3, 2], [-1, 2]])
        # Unit disc
        disc = Ellipsoid(c=[0, 0], r=1)
        direction = np.array([1, 1]) / np.sqrt(2)
        assert np.allclose(disc.support_vector([1, 1]), direction)
        # Degenerate directions give the center
        assert np.allclose(Ellipsoid(c=[1, 1]).support_vector([1, 0]), [1, 1])
        assert np.allclose(Ellipsoid(c=[0, 0], G=[[1], [0]]).support_vector([0, 1]), [0, 0])
        with pytest.raises(DimensionMismatchError):
            disc.support_vector([1, 0, 0])

    def test_contains(self):
        disc = Ellipsoid(c=[0, 0], r=1)
        assert [0, 0] in disc
        assert [1, 0] in disc
        assert [0.8, 0.8] not in disc
        assert np.all(disc.contains([[0, 0.5], [1, 1]]) == [True, False])
        with pytest.raises(DimensionMismatchError):
            disc.contains([0, 0, 0])

        # Degenerate ellipsoid contains only the points on its segment
        segment = Ellipsoid(c=[0, 0], G=[[1], [0]])
        assert [0.5, 0] in segment
        assert [0.5, 0.1] not in segment

        # Sets
        assert disc.contains(Hyperrectangle([0, 0], [0.5, 0.5]))
        assert not disc.contains(Hyperrectangle([0, 0], [1, 1]))
        assert disc.contains(VPolytope(V=[[1, 0], [0, 1], [0, 0]]))
        assert disc.contains(EmptySet(2))
        with pytest.raises(InvalidParameterError):
            disc.contains(LinearConstraint([1, 0], 0))
        with pytest.raises(DimensionMismatchError):
            disc.contains(Hyperrectangle([0], [1]))

    def test_copy_and_repr(self):
        E = Ellipsoid(c=[0, 0], G=[[1], [0]])
        E_copy = E.copy()
        assert np.allclose(E_copy.G, E.G)
        assert np.allclose(E_copy.c, E.c)
        assert E_copy.c is not E.c
        assert str(E) == "Ellipsoid in R^2"
        assert "center" in repr(E)
