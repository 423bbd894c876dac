# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  __init__ script for pyreachset package

from .common import (
    check_matrices_are_equal_ignoring_row_order,
    is_ellipsoid,
    is_empty_set,
    is_hpolytope,
    is_hyperrectangle,
    is_linear_constraint,
    is_vpolytope,
)
from .common.exceptions import (
    DimensionMismatchError,
    InfeasibleError,
    InvalidParameterError,
    OracleFailureError,
    PyReachSetError,
    UnboundedError,
)
from .common.operations_binary import cartesian_product, convex_hull, intersection, is_bounded, is_empty, minkowski_sum
from .Ellipsoid import Ellipsoid
from .EmptySet import EmptySet
from .HPolytope import HPolytope
from .Hyperrectangle import Hyperrectangle
from .LinearConstraint import HalfSpace, LinearConstraint
from .VPolytope import VPolytope
from .common.overapproximation import overapproximate, overapproximate_with_box, overapproximate_with_directions
