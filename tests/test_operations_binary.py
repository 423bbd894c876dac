# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose: Test the set combinators (intersection, convex hull, Cartesian product, Minkowski sum, containment)

import numpy as np
import pytest

from pyreachset import (
    Ellipsoid,
    EmptySet,
    HPolytope,
    Hyperrectangle,
    LinearConstraint,
    VPolytope,
    cartesian_product,
    convex_hull,
    intersection,
    is_bounded,
    is_empty,
    minkowski_sum,
)
from pyreachset.common import check_matrices_are_equal_ignoring_row_order
from pyreachset.common.exceptions import DimensionMismatchError, InvalidParameterError, UnboundedError


def get_unit_square_hrep():
    return HPolytope(A=[[1, 0], [0, 1], [-1, 0], [0, -1]], b=[1, 1, 1, 1])


def test_intersection_vrep():
    # Boxes around [0, 0] and [2, 2] share a corner
    P = Hyperrectangle([0, 0], [1, 1]).to_vrep()
    Q = Hyperrectangle([2, 2], [1, 1]).to_vrep()
    P_cap_Q = intersection(P, Q)
    assert isinstance(P_cap_Q, VPolytope)
    assert check_matrices_are_equal_ignoring_row_order(P_cap_Q.remove_redundant_vertices().V, [[1, 1]])

    # Overlapping V-Rep and H-Rep
    P_cap_Q = P.intersection(Hyperrectangle([1, 0], [1, 1]).to_hrep())
    assert isinstance(P_cap_Q, VPolytope)
    assert check_matrices_are_equal_ignoring_row_order(
        P_cap_Q.remove_redundant_vertices().V, [[0, 1], [1, 1], [1, -1], [0, -1]]
    )

    # Disjoint V-Rep gives an EmptySet
    P_cap_Q = P.intersection(Hyperrectangle([5, 5], [1, 1]).to_vrep())
    assert isinstance(P_cap_Q, EmptySet)
    assert P_cap_Q.dim == 2


def test_intersection_hrep():
    P = HPolytope(A=[[1, 0], [0, 1], [-1, -1]], b=[1, 1, 0])
    halfspace = LinearConstraint([1, 1], 1.5)
    P_cap_halfspace = intersection(P, halfspace)
    assert isinstance(P_cap_halfspace, HPolytope)
    assert P_cap_halfspace.n_halfspaces == 4
    # Constraints of self come first
    assert P_cap_halfspace.constraints_list()[-1] == halfspace
    halfspace_cap_P = intersection(halfspace, P)
    assert halfspace_cap_P.constraints_list()[0] == halfspace
    assert check_matrices_are_equal_ignoring_row_order(P_cap_halfspace.H, halfspace_cap_P.H)
    assert [1, 1] not in P_cap_halfspace
    assert [0.5, 0.5] in P_cap_halfspace

    # Two halfspaces
    P_cap_Q = LinearConstraint([1, 0], 1).intersection(LinearConstraint([0, 1], 1))
    assert isinstance(P_cap_Q, HPolytope)
    assert P_cap_Q.n_halfspaces == 2

    # Infeasible intersection is returned as constraints, and is empty
    P_cap_Q = intersection(LinearConstraint([1], 0), LinearConstraint([-1], -1))
    assert isinstance(P_cap_Q, HPolytope)
    assert P_cap_Q.is_empty

    # Intersection with a polytope without constraints
    P_cap_Q = intersection(HPolytope(), get_unit_square_hrep())
    assert P_cap_Q.n_halfspaces == 4
    P_cap_Q = intersection(Hyperrectangle([0, 0], [1, 1]).to_vrep(), HPolytope())
    assert isinstance(P_cap_Q, VPolytope)
    assert P_cap_Q.n_vertices == 4


def test_intersection_hyperrectangle():
    P_cap_Q = intersection(Hyperrectangle([0, 0], [1, 1]), Hyperrectangle([1, 1], [1, 1]))
    assert isinstance(P_cap_Q, Hyperrectangle)
    assert np.allclose(P_cap_Q.low(), [0, 0])
    assert np.allclose(P_cap_Q.high(), [1, 1])

    # Touching boxes
    P_cap_Q = intersection(Hyperrectangle([0, 0], [1, 1]), Hyperrectangle([2, 0], [1, 1]))
    assert isinstance(P_cap_Q, Hyperrectangle)
    assert np.allclose(P_cap_Q.radius_vector, [0, 1])

    # Disjoint boxes
    P_cap_Q = intersection(Hyperrectangle([0, 0], [1, 1]), Hyperrectangle([3, 0], [1, 1]))
    assert isinstance(P_cap_Q, EmptySet)

    # Box and halfspace
    P_cap_Q = Hyperrectangle([0, 0], [1, 1]).intersection(LinearConstraint([1, 1], 0))
    assert isinstance(P_cap_Q, HPolytope)
    assert P_cap_Q.n_halfspaces == 5


def test_intersection_errors():
    P = get_unit_square_hrep()
    with pytest.raises(DimensionMismatchError):
        intersection(P, Hyperrectangle([0, 0, 0], [1, 1, 1]))
    with pytest.raises(InvalidParameterError):
        intersection(P, [0, 0])
    with pytest.raises(InvalidParameterError):
        intersection(P, Ellipsoid(c=[0, 0], r=1))
    assert isinstance(intersection(P, EmptySet(2)), EmptySet)
    assert isinstance(intersection(VPolytope(dim=2), P), EmptySet)


def test_convex_hull():
    P = VPolytope(V=[[1, 0], [0, 1], [0, 0]])
    Q = VPolytope(V=[[-1, 0], [0, -1]])
    P_hull_Q = convex_hull(P, Q)
    assert isinstance(P_hull_Q, VPolytope)
    assert check_matrices_are_equal_ignoring_row_order(P_hull_Q.V, [[1, 0], [0, 1], [-1, 0], [0, -1]])

    # Mixed representations
    P_hull_Q = convex_hull(Hyperrectangle([0, 0], [1, 1]), get_unit_square_hrep().minkowski_sum([2, 0]))
    assert check_matrices_are_equal_ignoring_row_order(P_hull_Q.V, [[-1, -1], [-1, 1], [3, 1], [3, -1]])

    # Convex hull of a single set removes redundant vertices
    P_hull = VPolytope(V=[[0, 0], [1, 0], [0, 1], [0.2, 0.2]]).convex_hull()
    assert P_hull.n_vertices == 3

    # Empty sets
    assert check_matrices_are_equal_ignoring_row_order(convex_hull(P, EmptySet(2)).V, P.V)
    assert convex_hull(EmptySet(2), VPolytope(dim=2)).is_empty

    with pytest.raises(DimensionMismatchError):
        convex_hull(P, VPolytope(V=[[0, 0, 0]]))
    with pytest.raises(UnboundedError):
        convex_hull(P, LinearConstraint([1, 0], 0))
    with pytest.raises(UnboundedError):
        convex_hull(P, HPolytope([LinearConstraint([1, 0], 0)]))


def test_cartesian_product():
    # Intervals in H-Rep
    P = HPolytope(A=[[1], [-1]], b=[1, 0])
    P_times_P = cartesian_product(P, P)
    assert isinstance(P_times_P, HPolytope)
    assert P_times_P.n_halfspaces == 4
    assert P_times_P.dim == 2
    assert np.allclose(P_times_P.A, [[1, 0], [-1, 0], [0, 1], [0, -1]])
    assert np.allclose(P_times_P.b, [1, 0, 1, 0])

    # V-Rep
    P_times_Q = cartesian_product(VPolytope(V=[[0, 0], [1, 1]]), VPolytope(V=[[2]]))
    assert isinstance(P_times_Q, VPolytope)
    assert np.allclose(P_times_Q.V, [[0, 0, 2], [1, 1, 2]])

    # Hyperrectangles
    P_times_Q = cartesian_product(Hyperrectangle([0], [1]), Hyperrectangle([1, 2], [3, 4]))
    assert isinstance(P_times_Q, Hyperrectangle)
    assert np.allclose(P_times_Q.center, [0, 1, 2])
    assert np.allclose(P_times_Q.radius_vector, [1, 3, 4])

    # Mixed representations
    P_times_Q = cartesian_product(Hyperrectangle([0], [1]), VPolytope(V=[[0], [2]]))
    assert isinstance(P_times_Q, HPolytope)
    assert P_times_Q.dim == 2
    assert P_times_Q.contains(Hyperrectangle([0, 1], [1, 1]))
    assert [0, 2.5] not in P_times_Q
    P_times_Q = LinearConstraint([1], 0).cartesian_product(Hyperrectangle([0], [1]))
    assert P_times_Q.n_halfspaces == 3
    assert not P_times_Q.is_bounded

    # Empty sets
    P_times_Q = cartesian_product(EmptySet(2), Hyperrectangle([0], [1]))
    assert isinstance(P_times_Q, EmptySet)
    assert P_times_Q.dim == 3

    with pytest.raises(InvalidParameterError):
        cartesian_product(HPolytope(), P)
    with pytest.raises(InvalidParameterError):
        cartesian_product(P, Ellipsoid(c=[0], r=1))


def test_minkowski_sum_with_point():
    H = Hyperrectangle([0, 0], [1, 1]) + [1, 2]
    assert isinstance(H, Hyperrectangle)
    assert np.allclose(H.center, [1, 2])
    P = VPolytope(V=[[0, 0], [1, 0]]) + [1, 2]
    assert np.allclose(P.V, [[1, 2], [2, 2]])
    P = get_unit_square_hrep() + [1, 2]
    assert isinstance(P, HPolytope)
    assert np.allclose(P.b, [2, 3, 0, -1])
    assert check_matrices_are_equal_ignoring_row_order(P.vertices_list(), [[0, 1], [2, 1], [0, 3], [2, 3]])
    assert (EmptySet(2) + [1, 2]).is_empty
    assert VPolytope(dim=2).minkowski_sum([1, 2]).is_empty
    with pytest.raises(DimensionMismatchError):
        get_unit_square_hrep() + [1, 2, 3]


def test_minkowski_sum_with_set():
    # Hyperrectangles
    H = minkowski_sum(Hyperrectangle([0, 0], [1, 1]), Hyperrectangle([1, 2], [0.5, 0]))
    assert isinstance(H, Hyperrectangle)
    assert np.allclose(H.center, [1, 2])
    assert np.allclose(H.radius_vector, [1.5, 1])

    # Triangle and segment
    P = VPolytope(V=[[0, 0], [1, 0], [0, 1]])
    Q = VPolytope(V=[[0, 0], [1, 1]])
    P_plus_Q = P + Q
    assert isinstance(P_plus_Q, VPolytope)
    assert check_matrices_are_equal_ignoring_row_order(P_plus_Q.V, [[0, 0], [1, 0], [2, 1], [1, 2], [0, 1]])

    # H-Rep is converted to V-Rep
    P_plus_Q = get_unit_square_hrep() + Hyperrectangle([0, 0], [1, 1])
    assert check_matrices_are_equal_ignoring_row_order(P_plus_Q.V, [[2, 2], [2, -2], [-2, -2], [-2, 2]])

    # Empty sets
    assert isinstance(minkowski_sum(P, EmptySet(2)), EmptySet)
    assert isinstance(minkowski_sum(VPolytope(dim=2), P), EmptySet)

    with pytest.raises(DimensionMismatchError):
        minkowski_sum(P, VPolytope(V=[[0, 0, 0]]))
    with pytest.raises(UnboundedError):
        minkowski_sum(P, HPolytope([LinearConstraint([1, 0], 0)]))


def test_contains_set():
    P = get_unit_square_hrep()
    assert P.contains(P)
    assert P.contains(Hyperrectangle([0.5, 0.5], [0.5, 0.5]))
    assert not P.contains(Hyperrectangle([0.5, 0.5], [0.6, 0.5]))
    assert P.contains(Ellipsoid(c=[0, 0], r=1))
    assert not P.contains(Ellipsoid(c=[0, 0], r=1.1))
    assert not P.contains(LinearConstraint([1, 0], 0))
    # Empty sets
    assert P.contains(EmptySet(2))
    assert P.contains(intersection(LinearConstraint([1, 0], 0), LinearConstraint([-1, 0], -1)))
    assert EmptySet(2).contains(VPolytope(dim=2))
    assert not EmptySet(2).contains(P)
    # V-Rep container
    Q = Hyperrectangle([0, 0], [1, 1]).to_vrep()
    assert Q.contains(P)
    assert not Q.contains(P + [0.1, 0])

    with pytest.raises(DimensionMismatchError):
        P.contains(Hyperrectangle([0, 0, 0], [1, 1, 1]))
    with pytest.raises(DimensionMismatchError):
        EmptySet(3).contains(P)


def test_is_bounded_and_is_empty():
    assert is_bounded(get_unit_square_hrep())
    assert not is_bounded(LinearConstraint([1, 0], 0))
    assert not is_bounded(HPolytope())
    assert is_bounded(Hyperrectangle([0, 0], [1, 1]))
    assert is_bounded(VPolytope(V=[[0, 0]]))
    assert is_bounded(EmptySet(2))
    assert is_bounded(Ellipsoid(c=[0, 0], r=1))

    assert not is_empty(get_unit_square_hrep())
    assert is_empty(intersection(LinearConstraint([1], 0), LinearConstraint([-1], -1)))
    assert not is_empty(LinearConstraint([1, 0], 0))
    assert is_empty(VPolytope(dim=2))
    assert not is_empty(VPolytope(V=[[0, 0]]))
    assert is_empty(EmptySet(1))
