# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the errors raised by pyreachset
#
# Caller errors derive from ValueError and backend failures from NotImplementedError.


class PyReachSetError(Exception):
    """Base class for all errors raised by pyreachset"""


class DimensionMismatchError(PyReachSetError, ValueError):
    """Operand dimensions disagree, e.g., a direction or a point whose length differs from the set dimension"""


class InvalidParameterError(PyReachSetError, ValueError):
    """A caller-provided parameter is invalid, e.g., a non-positive block count or an unknown algorithm name"""


class InfeasibleError(PyReachSetError, ValueError):
    """The constraint system admits no point, i.e., the set is empty"""


class UnboundedError(PyReachSetError, ValueError):
    """The set has no finite optimum along the queried direction, i.e., the set is unbounded"""


class OracleFailureError(PyReachSetError, NotImplementedError):
    """The LP solver or the polyhedra backend failed (numerical failure, solver error, unhandled status)"""
