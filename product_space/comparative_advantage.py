import numpy as np
from typing import Optional

from product_space.config import DEFAULT_CUTOFF


def rca(matrix: np.ndarray) -> np.ndarray:
    """
    Compute the Revealed Comparative Advantage (Balassa index) of a
    country-product matrix, returning a new matrix.

        RCA[c, p] = (a / b) / (c / d)

    where
      - a = M[c, p]          export of product p by country c
      - b = sum_p M[c, p]    total export of country c
      - c = sum_c M[c, p]    world export of product p
      - d = sum_cp M[c, p]   world export

    a/b is the share of the product in the country basket, c/d the share of
    the product in the world basket. Rows must be countries and columns
    products. Zero totals yield NaN/Inf cells, which are left in place.

    Parameters
    ----------
      - matrix : np.ndarray
          Dense non-negative matrix (countries x products).

    Returns
    -------
      - np.ndarray
          RCA matrix of the same shape; the input is not modified.
    """
    out = np.array(matrix, dtype=float, copy=True)
    apply_rca(out)
    return out


def apply_rca(matrix: np.ndarray) -> None:
    """
    Like rca(), but overwrite the given float matrix in place.
    """
    if matrix.dtype.kind != "f":
        raise TypeError("apply_rca needs a floating point matrix")

    b = matrix.sum(axis=1)
    c = matrix.sum(axis=0)
    d = matrix.sum()

    with np.errstate(divide="ignore", invalid="ignore"):
        c_d = c / d
        # a/b: sweep country totals across rows
        matrix /= b[:, np.newaxis]
        # (a/b)/(c/d): sweep product shares across columns
        matrix /= c_d[np.newaxis, :]


def fair_share(matrix: np.ndarray, cutoff: Optional[float] = None) -> np.ndarray:
    """
    Binarize a matrix: 1.0 where the value is >= cutoff, 0.0 elsewhere
    (NaN included). The input is not modified.

    Parameters
    ----------
      - matrix : np.ndarray
          Typically an RCA matrix.
      - cutoff : float, optional
          Threshold, defaults to 1.0.

    Returns
    -------
      - np.ndarray
          Matrix with values in {0.0, 1.0}.
    """
    out = np.array(matrix, dtype=float, copy=True)
    apply_fair_share(out, cutoff)
    return out


def apply_fair_share(matrix: np.ndarray, cutoff: Optional[float] = None) -> None:
    # in place version of fair_share
    cutoff = DEFAULT_CUTOFF if cutoff is None else cutoff

    with np.errstate(invalid="ignore"):
        present = matrix >= cutoff
    matrix[...] = present


def apply_fair_share_into(
        matrix: np.ndarray,
        into: np.ndarray,
        cutoff: Optional[float] = None
        ) -> None:
    """
    Binarize `matrix` in place, then multiply it element-wise into `into`.

    Folding this over several years starting from a matrix of ones keeps a
    cell at 1.0 only if it passed the cutoff in every year. `into` must be
    a floating point matrix.
    """
    if into.dtype.kind != "f":
        raise TypeError("apply_fair_share_into needs a floating point accumulator")

    apply_fair_share(matrix, cutoff)
    into *= matrix
