# Copyright (C) 2020-2025 Mitsubishi Electric Research Laboratories (MERL)
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# Code purpose:  Define the unary operations of the Hyperrectangle class

import itertools

import numpy as np

from pyreachset.common import sign_cadlag
from pyreachset.common.exceptions import DimensionMismatchError, InvalidParameterError


def vertices(self):
    r"""Generate the vertices of the hyperrectangle.

    Yields:
        numpy.ndarray: A vertex :math:`c + s\odot r` for every sign vector :math:`s\in\{+1, -1\}^n`. Only the center is
        yielded when every radius is zero.

    Notes:
        The vertices are generated lazily, since there are :math:`2^n` of them. A hyperrectangle that is flat only along
        some dimensions yields repeated corners.
    """
    if np.all(self.radius_vector == 0):
        yield self.center.copy()
        return
    for signs in itertools.product((1.0, -1.0), repeat=self.dim):
        yield self.center + np.array(signs) * self.radius_vector


def vertices_list(self):
    """Materialize the vertices of the hyperrectangle into a list of 1D numpy arrays"""
    return list(self.vertices())


def norm(self, p=np.inf):
    r"""Compute the p-norm of the farthest corner from the origin, :math:`\|c + \text{sign}(c)\odot r\|_p`.

    Args:
        p (int | float | str, optional): Norm order as accepted by numpy.linalg.norm. Defaults to np.inf.

    Returns:
        float: Norm of the hyperrectangle

    Notes:
        sign(0) is taken as +1 so that a centered hyperrectangle uses its all-positive corner.
    """
    return float(np.linalg.norm(self.center + sign_cadlag(self.center) * self.radius_vector, ord=p))


def radius(self, p=np.inf):
    """Compute the p-norm of the radius vector

    Args:
        p (int | float | str, optional): Norm order as accepted by numpy.linalg.norm. Defaults to np.inf.

    Returns:
        float: Radius of the hyperrectangle in the p-norm
    """
    return float(np.linalg.norm(self.radius_vector, ord=p))


def split(self, blocks):
    r"""Partition the hyperrectangle into a grid of identical sub-hyperrectangles.

    Args:
        blocks (Sequence[int] | np.ndarray): Number of blocks along each dimension. Must have self.dim entries, and each
            entry must be an integer greater than or equal to 1.

    Raises:
        DimensionMismatchError: blocks does not have self.dim entries
        InvalidParameterError: Some entry in blocks is not a positive integer

    Returns:
        list[Hyperrectangle]: :math:`\prod_i \text{blocks}_i` hyperrectangles covering self.

    Notes:
        Along dimension i, the new radius is :math:`r_i/\text{blocks}_i` and the centers are
        :math:`\text{low}_i + (2k + 1) r_i/\text{blocks}_i` for :math:`k = 0, ..., \text{blocks}_i - 1`. The grid is
        enumerated with the last dimension varying fastest.
    """
    try:
        blocks_arr = np.atleast_1d(np.squeeze(blocks))
    except (TypeError, ValueError) as err:
        raise InvalidParameterError(f"Expected blocks to be a 1D array of integers. Got {blocks}!") from err
    if blocks_arr.ndim != 1 or blocks_arr.size != self.dim:
        raise DimensionMismatchError(
            f"Expected blocks to have {self.dim:d} entries (one per dimension). Got {np.array2string(blocks_arr):s}."
        )
    if not np.issubdtype(blocks_arr.dtype, np.number) or np.issubdtype(blocks_arr.dtype, np.complexfloating):
        raise InvalidParameterError(f"Expected blocks to be integers. Got {np.array2string(blocks_arr):s}.")
    elif np.any(blocks_arr != np.round(blocks_arr)) or np.any(blocks_arr < 1):
        raise InvalidParameterError(f"Expected blocks to be integers >= 1. Got {np.array2string(blocks_arr):s}.")
    blocks_arr = blocks_arr.astype(int)

    new_radius = self.radius_vector / blocks_arr
    low = self.low()
    centers_per_dimension = [
        low[index] + new_radius[index] * (2 * np.arange(n_blocks) + 1) for index, n_blocks in enumerate(blocks_arr)
    ]
    return [
        self.__class__(center=np.array(center), radius=new_radius.copy())
        for center in itertools.product(*centers_per_dimension)
    ]
