# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the Ellipsoid class (used as a smooth input to the polygonal overapproximation)

import numpy as np

from pyreachset.common import (
    convex_set_extreme,
    convex_set_support,
    convex_set_support_function,
    convex_set_support_vector,
    is_convex_set,
    sanitize_points,
)
from pyreachset.common.constants import PYREACHSET_ZERO
from pyreachset.common.exceptions import DimensionMismatchError, InvalidParameterError


class Ellipsoid:
    r"""Ellipsoid class.

    We can define a bounded, non-empty ellipsoid :math:`\mathcal{P}` using **one** of the following combinations:

    #. :math:`(c, Q)` for a full-dimensional ellipsoid in the **quadratic form**
       :math:`\mathcal{P}=\{x \in \mathbb{R}^n\ |\  (x - c)^T Q^{-1} (x - c) \leq 1\}` with a n-dimensional
       positive-definite matrix :math:`Q`. Here, we compute :math:`G` as the Cholesky factor of :math:`Q`.
    #. :math:`(c, G)` for a full-dimensional or a degenerate ellipsoid as an **affine transformation of a unit-ball**
       :math:`\mathcal{P} = \{x\ |\ \exists u,\ x = c + G u,\ {\|u\|}_2 \leq 1\}` with a n x N matrix :math:`G`. Here,
       we compute :math:`Q=GG^T`.
    #. :math:`(c, r)` for a ball of radius r centered at c.

    Args:
        c (array_like): Center of the ellipsoid c. Vector of length (self.dim,)
        Q (array_like, optional): Shape matrix of the ellipsoid Q. Q must be a positive definite matrix
            (self.dim times self.dim).
        G (array_like, optional): Square root of the shape matrix of the ellipsoid G that satisfies :math:`GG^T=Q`.
            Need not be a square matrix, but must have self.dim rows.
        r (scalar, optional): Non-negative scalar that provides the radius of the self.dim-dimensional ball.

    Raises:
        InvalidParameterError: When more than one of Q, G, r was provided, or c is missing
        InvalidParameterError: When Q is not symmetric positive definite, or r is negative
        DimensionMismatchError: When Q or G does not have self.dim rows
    """

    def __init__(self, **kwargs):
        """Constructor for Ellipsoid"""
        self._type_of_set = "Ellipsoid"
        try:
            self._c = np.atleast_1d(np.squeeze(kwargs.pop("c"))).astype(float)
        except KeyError as err:
            raise InvalidParameterError("c is a required argument!") from err
        except (TypeError, ValueError) as err:
            raise InvalidParameterError("Expected c to be convertible into a numpy 1D array of float") from err
        if self._c.ndim != 1:
            raise InvalidParameterError("Expected c to be convertible to a 1D vector")

        if len(kwargs) >= 2:
            raise InvalidParameterError("Expected only Q or G or r to be provided.")
        elif len(kwargs) == 0:
            # Singleton
            self._G = np.zeros((self.dim, 0))
        elif "r" in kwargs:
            r = float(kwargs.pop("r"))
            if r < 0:
                raise InvalidParameterError("Expected r to be a nonnegative scalar")
            self._G = r * np.eye(self.dim)
        elif "G" in kwargs:
            self._G = np.atleast_2d(kwargs.pop("G")).astype(float)
            if self._G.shape[0] != self.dim:
                raise DimensionMismatchError(f"Expected G to have {self.dim:d} rows.")
        elif "Q" in kwargs:
            Q = np.atleast_2d(kwargs.pop("Q")).astype(float)
            if Q.shape != (self.dim, self.dim):
                raise DimensionMismatchError(f"Expected square Q of dimension {self.dim:d}")
            elif not np.isclose(2 * Q, Q + Q.T).all():
                raise InvalidParameterError("Expected Q to be symmetric!")
            try:
                self._G = np.linalg.cholesky(Q)
            except np.linalg.LinAlgError as err:
                raise InvalidParameterError(
                    "Expected Q to be positive definite! Use (c, G) to define degenerate ellipsoids."
                ) from err
        else:
            raise InvalidParameterError(f"Invalid kwarg provided! Got {kwargs}. Expected either Q, G, or r!")

    @property
    def type_of_set(self):
        """Return the type of set"""
        return self._type_of_set

    @property
    def dim(self):
        """Dimension of the ellipsoid :math:`dim`"""
        return self._c.shape[0]

    @property
    def c(self):
        """Center of the ellipsoid :math:`c`"""
        return self._c

    @property
    def Q(self):
        """Shape matrix of the ellipsoid :math:`Q`"""
        return self._G @ self._G.T

    @property
    def G(self):
        r"""Affine transformation matrix :math:`G` that satisfies :math:`GG^T=Q`"""
        return self._G

    @property
    def is_empty(self):
        """Check if the ellipsoid is empty. Always False by construction."""
        return False

    @property
    def is_bounded(self):
        """Check if the ellipsoid is bounded. Always True by construction."""
        return True

    def _compute_support_function_single_eta(self, eta):
        """Private function to compute the support function"""
        norm_scaling = np.linalg.norm(self.G.T @ eta, ord=2)
        if norm_scaling <= PYREACHSET_ZERO:
            support_vector = self.c.copy()
        else:
            support_vector = self.c + ((self.Q @ eta) / norm_scaling)
        return float(eta @ support_vector), support_vector

    support = convex_set_support
    extreme = convex_set_extreme
    support_vector = convex_set_support_vector
    support_function = convex_set_support_function

    def contains(self, Q):
        r"""Check containment of a point, a collection of points (rows), or a set in the ellipsoid.

        Args:
            Q (array_like | set): Point, matrix of points arranged row-wise, or a set of the same dimension

        Raises:
            DimensionMismatchError: Test point(s) are NOT of the same dimension

        Returns:
            bool or numpy.ndarray[bool]: Boolean for a single point or a set, and a boolean array for a collection of
            points.

        Notes:
            For each point :math:`v`, we compute the minimum-norm :math:`u` with :math:`Gu = v - c` using the
            pseudo-inverse of G. The point is contained when :math:`Gu` reproduces :math:`v - c` and
            :math:`\|u\|_2 \leq 1`. A polytope is contained when all its vertices are contained.
        """
        if is_convex_set(Q):
            if Q.dim != self.dim:
                raise DimensionMismatchError(
                    f"Containment check failed due to dimension mismatch! self.dim:{self.dim}, Q.dim:{Q.dim}"
                )
            elif Q.is_empty:
                return True
            elif not hasattr(Q, "vertices_list"):
                raise InvalidParameterError(
                    f"Checking containment of a {Q.type_of_set} in an Ellipsoid is not supported."
                )
            return bool(np.all(self.contains(np.array(Q.vertices_list()))))
        points, is_single_point = sanitize_points(Q, self.dim)
        delta = points - self.c
        u = delta @ np.linalg.pinv(self.G).T
        is_contained = np.bitwise_and(
            np.linalg.norm(u @ self.G.T - delta, axis=1) <= PYREACHSET_ZERO,
            np.linalg.norm(u, axis=1) <= 1 + PYREACHSET_ZERO,
        )
        if is_single_point:
            return bool(is_contained[0])
        return is_contained

    __contains__ = contains

    def copy(self):
        """Create a copy of the ellipsoid. Copy (c, G) to preserve degenerate ellipsoids."""
        return self.__class__(c=self.c.copy(), G=self.G.copy())

    def __str__(self):
        return f"Ellipsoid in R^{self.dim:d}"

    def __repr__(self):
        return f"Ellipsoid in R^{self.dim:d}\n\tcenter: {np.array2string(self.c):s}"
