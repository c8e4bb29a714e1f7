# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""Inversion of big dense matrices through the block matrix inversion lemma.

Dense inversion routines are very efficient up to a certain size, above which memory and runtime
explode. For a matrix bigger than the block size, the matrix is partitioned into

    mat = [A B; C D]

where A has the size of a block. If D is still bigger than a block, it is partitioned again
D = [A1 B1; C1 D1] and so on, until the innermost D fits into a block. Starting from the innermost
(bottom right) block, the inverse is then assembled outwards with the Schur complement of every
partition, see https://en.wikipedia.org/wiki/Block_matrix#Inversion

The default block size of 13 000 was found empirically on a ~15 000 bus admittance matrix, below
that size a direct inversion handles the matrix efficiently. Depending on the hardware and the
application, this number can be adjusted.
"""

import logbook
import numpy as np
from beartype.typing import TypeAlias, Union
from jaxtyping import Float, Real
from scipy.sparse import issparse, sparray, spmatrix

from network_sensitivities.exceptions import ConfigurationError, NumericalError

logger = logbook.Logger(__name__)

DEFAULT_BLOCK_SIZE = 13_000
"""The largest matrix size which is inverted directly"""

CONDITION_LIMIT = 1e12
"""The largest accepted 1-norm condition number of a directly inverted matrix, see direct_inverse"""

BlockQuadruple: TypeAlias = tuple[
    Float[np.ndarray, " block block"],
    Float[np.ndarray, " block rest"],
    Float[np.ndarray, " rest block"],
    Float[np.ndarray, " rest rest"],
]


def direct_inverse(matrix: Float[np.ndarray, " n n"]) -> Float[np.ndarray, " n n"]:
    """Invert a matrix in one go with LAPACK.

    Parameters
    ----------
    matrix : Float[np.ndarray, " n n"]
        The square matrix to invert

    Returns
    -------
    Float[np.ndarray, " n n"]
        The inverse

    Raises
    ------
    NumericalError
        If the matrix is singular or near-singular. The condition number is estimated with the norm
        of the matrix floored at one, so a matrix with all entries close to zero counts as
        near-singular, e.g. I - PTDF_{O,O} of an outage that splits the network.
    """
    try:
        inverse = np.linalg.inv(matrix)
    except np.linalg.LinAlgError as error:
        raise NumericalError(f"Singular matrix of size {matrix.shape[0]} can not be inverted") from error
    if not np.all(np.isfinite(inverse)):
        raise NumericalError(f"Inverse of the matrix of size {matrix.shape[0]} is not finite, the matrix is near-singular")
    if matrix.size:
        condition = max(np.linalg.norm(matrix, 1), 1.0) * np.linalg.norm(inverse, 1)
        if condition > CONDITION_LIMIT:
            raise NumericalError(
                f"Matrix of size {matrix.shape[0]} is near-singular, its condition number is about {condition:.3g}"
            )
    return inverse


def _partition(matrix: Float[np.ndarray, " n n"], block_size: int) -> BlockQuadruple:
    """Split off the upper left block of size block_size, all parts are views into matrix"""
    return (
        matrix[:block_size, :block_size],
        matrix[:block_size, block_size:],
        matrix[block_size:, :block_size],
        matrix[block_size:, block_size:],
    )


def partition_blocks(matrix: Float[np.ndarray, " n n"], block_size: int) -> list[BlockQuadruple]:
    """Partition a matrix repeatedly until the trailing submatrix fits into a block.

    Parameters
    ----------
    matrix : Float[np.ndarray, " n n"]
        The matrix to partition, must be bigger than block_size
    block_size : int
        The size of the upper left block of every partition

    Returns
    -------
    list[BlockQuadruple]
        The (A, B, C, D) quadruples, outermost first. The D of every quadruple is the matrix
        which is partitioned by the next quadruple, the D of the last one has at most block_size rows.
    """
    blocks = []
    trailing = matrix
    while trailing.shape[0] > block_size:
        quadruple = _partition(trailing, block_size)
        blocks.append(quadruple)
        trailing = quadruple[3]
    return blocks


def fold_block(
    upper_left: Float[np.ndarray, " block block"],
    upper_right: Float[np.ndarray, " block rest"],
    lower_left: Float[np.ndarray, " rest block"],
    lower_right_inverse: Float[np.ndarray, " rest rest"],
) -> Float[np.ndarray, " n n"]:
    """Compute the inverse of [A B; C D] from A, B, C and the inverse of D.

    Parameters
    ----------
    upper_left : Float[np.ndarray, " block block"]
        A
    upper_right : Float[np.ndarray, " block rest"]
        B
    lower_left : Float[np.ndarray, " rest block"]
        C
    lower_right_inverse : Float[np.ndarray, " rest rest"]
        The already computed inverse of D

    Returns
    -------
    Float[np.ndarray, " n n"]
        The inverse of the full matrix, n = block + rest

    Raises
    ------
    NumericalError
        If the Schur complement A - B D^-1 C is singular
    """
    b_d_inv = upper_right @ lower_right_inverse
    d_inv_c = lower_right_inverse @ lower_left
    schur_inverse = direct_inverse(upper_left - b_d_inv @ lower_left)

    new_upper_right = -schur_inverse @ b_d_inv
    new_lower_left = -d_inv_c @ schur_inverse
    new_lower_right = lower_right_inverse + d_inv_c @ schur_inverse @ b_d_inv
    return np.block([[schur_inverse, new_upper_right], [new_lower_left, new_lower_right]])


def invert(
    matrix: Union[Real[np.ndarray, " n_row n_col"], spmatrix, sparray],
    block_size: int = DEFAULT_BLOCK_SIZE,
) -> Float[np.ndarray, " n n"]:
    """Invert a square matrix, partitioning it into blocks if it is bigger than block_size.

    If the matrix has at most block_size rows, this is exactly np.linalg.inv. Otherwise the result
    equals the direct inverse up to floating point rounding. Sparse matrices are converted to dense
    first, as the blocks of the inverse are dense anyway.

    Parameters
    ----------
    matrix : Union[Real[np.ndarray, " n_row n_col"], spmatrix, sparray]
        The square matrix to invert
    block_size : int
        The largest size that is inverted directly, see DEFAULT_BLOCK_SIZE

    Returns
    -------
    Float[np.ndarray, " n n"]
        The inverse of the matrix

    Raises
    ------
    ConfigurationError
        If block_size is not positive or the matrix is not square
    NumericalError
        If the matrix or one of the Schur complements is singular or near-singular
    """
    if block_size < 1:
        raise ConfigurationError(f"The block size must be positive, got {block_size}")
    if issparse(matrix):
        matrix = matrix.toarray()
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ConfigurationError(f"Only square matrices can be inverted, got shape {matrix.shape}")

    if matrix.shape[0] <= block_size:
        return direct_inverse(matrix)

    blocks = partition_blocks(matrix, block_size)
    logger.debug(f"Inverting a matrix of size {matrix.shape[0]} in {len(blocks) + 1} blocks of size {block_size}")

    # Start with the innermost D and fold the quadruples back outwards
    inverse = direct_inverse(blocks[-1][3])
    for upper_left, upper_right, lower_left, _ in reversed(blocks):
        inverse = fold_block(upper_left, upper_right, lower_left, inverse)
    return inverse
