# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Specify the constants used when solving linear programs, enumerating vertices, and approximating sets

PYREACHSET_ZERO = 1e-6  # Zero threshold for numerical stability
# Zero threshold for vertex clustering when pruning cdd output
PYREACHSET_ZERO_CDD = 1e-5

# LP backend used by default: "highs" (scipy.optimize.linprog) or "cvxpy"
DEFAULT_LP_BACKEND = "highs"
LP_BACKENDS = ("highs", "cvxpy")

# Solvers used by default when CVXPY is the backend
DEFAULT_LP_SOLVER_STR = "CLARABEL"  # CLARABEL, MOSEK, CVXOPT, SCS, ECOS, GUROBI, OSQP

# CVXPY args used by default
DEFAULT_CVXPY_ARGS_LP = {"solver": DEFAULT_LP_SOLVER_STR}

# Algorithms available for the support vector of a V-Rep polytope
VPOLYTOPE_SUPPORT_ALGORITHMS = ("brute_force", "hrep")

# Constants for the two-dimensional polygonal overapproximation (counter-clockwise initial directions)
OVERAPPROXIMATION_INITIAL_DIRECTIONS = ((1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0))
# Each refinement halves the angle between two directions, so 40 levels is far below float resolution
OVERAPPROXIMATION_MAX_DEPTH = 40
